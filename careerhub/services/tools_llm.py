from __future__ import annotations

import json
import logging
import os
import re
import time
import uuid
from functools import lru_cache
from typing import Any

from openai import OpenAI

logger = logging.getLogger(__name__)

_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


class ToolsLLMError(RuntimeError):
    def __init__(self, message: str, *, code: str = "llm_unavailable"):
        super().__init__(message)
        self.code = code


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def _looks_like_placeholder(value: str) -> bool:
    lower = value.strip().lower()
    return lower.startswith("your_") or lower.startswith("replace_") or lower in {"changeme", "todo"}


def tools_llm_enabled() -> bool:
    if not _env_bool("TOOLS_LLM_ENABLED", True):
        return False
    api_key = (os.getenv("OPENAI_API_KEY") or "").strip()
    if not api_key or _looks_like_placeholder(api_key):
        return False
    return True


def strict_llm_required() -> bool:
    return _env_bool("TOOLS_STRICT_LLM", False)


@lru_cache(maxsize=1)
def _client() -> OpenAI:
    # OPENAI_BASE_URL may point at any OpenAI-compatible gateway.
    return OpenAI(
        api_key=(os.getenv("OPENAI_API_KEY") or "").strip(),
        base_url=(os.getenv("OPENAI_BASE_URL") or None),
        timeout=float(os.getenv("TOOLS_LLM_TIMEOUT_S", "20")),
        max_retries=int(os.getenv("OPENAI_MAX_RETRIES", "2")),
    )


def _model() -> str:
    return (os.getenv("AI_MODEL") or os.getenv("OPENAI_MODEL") or "gpt-4o-mini").strip()


def parse_json_object(content: str | None) -> dict[str, Any] | None:
    """Parse a JSON object from model output, tolerating prose or code fences around it."""
    if not content:
        return None
    try:
        parsed = json.loads(content)
    except ValueError:
        match = _JSON_OBJECT_RE.search(content)
        if not match:
            return None
        try:
            parsed = json.loads(match.group(0))
        except ValueError:
            return None
    return parsed if isinstance(parsed, dict) else None


def _log_ai_run(
    *,
    run_id: str,
    tool_slug: str,
    status: str,
    latency_ms: int,
    error_code: str | None = None,
) -> None:
    logger.info(
        "tools_llm_run run_id=%s tool=%s model=%s status=%s error=%s latency_ms=%s",
        run_id,
        tool_slug or "unknown",
        _model(),
        status,
        error_code,
        latency_ms,
    )


def json_completion(
    *,
    system_prompt: str,
    user_prompt: str,
    temperature: float = 0.2,
    max_output_tokens: int = 1200,
    tool_slug: str = "unknown",
) -> dict[str, Any] | None:
    run_id = uuid.uuid4().hex
    started = time.perf_counter()
    if not tools_llm_enabled():
        _log_ai_run(run_id=run_id, tool_slug=tool_slug, status="skipped", error_code="llm_disabled", latency_ms=0)
        return None

    try:
        response = _client().chat.completions.create(
            model=_model(),
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=temperature,
            response_format={"type": "json_object"},
            max_tokens=max_output_tokens,
        )
        content = response.choices[0].message.content if response.choices else ""
        latency_ms = int((time.perf_counter() - started) * 1000)
        if not content:
            _log_ai_run(
                run_id=run_id,
                tool_slug=tool_slug,
                status="empty",
                error_code="empty_response",
                latency_ms=latency_ms,
            )
            return None
        parsed = parse_json_object(content)
        _log_ai_run(
            run_id=run_id,
            tool_slug=tool_slug,
            status="success" if parsed is not None else "invalid_schema",
            error_code=None if parsed is not None else "invalid_schema",
            latency_ms=latency_ms,
        )
        return parsed
    except Exception as exc:  # noqa: BLE001 - deterministic fallback is expected
        logger.warning("tools_llm_json_failed model=%s prompt_len=%s: %s", _model(), len(user_prompt), exc)
        _log_ai_run(
            run_id=run_id,
            tool_slug=tool_slug,
            status="error",
            error_code="llm_exception",
            latency_ms=int((time.perf_counter() - started) * 1000),
        )
        return None


def json_completion_required(
    *,
    system_prompt: str,
    user_prompt: str,
    temperature: float = 0.2,
    max_output_tokens: int = 1200,
    tool_slug: str = "unknown",
) -> dict[str, Any]:
    if not tools_llm_enabled():
        raise ToolsLLMError("AI quality mode is enabled but the AI gateway is not configured.", code="llm_disabled")

    payload = json_completion(
        system_prompt=system_prompt,
        user_prompt=user_prompt,
        temperature=temperature,
        max_output_tokens=max_output_tokens,
        tool_slug=tool_slug,
    )
    if not payload:
        raise ToolsLLMError("AI quality mode could not produce a valid response. Try again.", code="llm_invalid")
    return payload
