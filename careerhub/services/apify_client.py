from __future__ import annotations

import logging
import time
from typing import Any, Callable

import httpx

from careerhub.core.config import settings

logger = logging.getLogger(__name__)

TERMINAL_FAILURE_STATUSES = {"FAILED", "ABORTED", "TIMED-OUT"}


class ApifyError(RuntimeError):
    pass


class ApifyNotConfigured(ApifyError):
    pass


class ApifyRunFailed(ApifyError):
    def __init__(self, run_id: str, status: str):
        super().__init__(f"Apify run {run_id} {status}")
        self.run_id = run_id
        self.status = status


class ApifyTimeout(ApifyError):
    pass


class ApifyClient:
    """Starts an Apify actor run, polls it to completion and reads its dataset."""

    def __init__(
        self,
        token: str | None = None,
        *,
        base_url: str | None = None,
        poll_interval_s: float | None = None,
        max_attempts: int | None = None,
        timeout_s: float | None = None,
        http_client: httpx.Client | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._token = (token if token is not None else settings.apify_api_token) or ""
        self._base_url = (base_url or settings.apify_base_url).rstrip("/")
        self._poll_interval_s = settings.apify_poll_interval_s if poll_interval_s is None else poll_interval_s
        self._max_attempts = max_attempts or settings.apify_max_attempts
        self._timeout_s = timeout_s or settings.apify_timeout_s
        self._http_client = http_client
        self._sleep = sleep

    @property
    def configured(self) -> bool:
        return bool(self._token.strip())

    def _request(self, client: httpx.Client, method: str, path: str, **kwargs: Any) -> Any:
        params = dict(kwargs.pop("params", {}) or {})
        params["token"] = self._token
        try:
            response = client.request(method, f"{self._base_url}{path}", params=params, **kwargs)
        except httpx.HTTPError as exc:
            raise ApifyError(f"Apify request failed: {exc}") from exc
        if response.status_code >= 400:
            logger.warning("apify_http_error path=%s status=%s body=%s", path, response.status_code, response.text[:300])
            raise ApifyError(f"Apify error: {response.status_code}")
        try:
            return response.json()
        except ValueError as exc:
            raise ApifyError("Apify returned a non-JSON response") from exc

    def _wait_for_run(self, client: httpx.Client, run_id: str) -> None:
        for attempt in range(1, self._max_attempts + 1):
            self._sleep(self._poll_interval_s)
            payload = self._request(client, "GET", f"/actor-runs/{run_id}")
            data = payload.get("data") if isinstance(payload, dict) else None
            status = str((data or {}).get("status") or "")
            if status == "SUCCEEDED":
                logger.info("apify_run_succeeded run_id=%s attempts=%s", run_id, attempt)
                return
            if status in TERMINAL_FAILURE_STATUSES:
                raise ApifyRunFailed(run_id, status)
        raise ApifyTimeout("Apify run timed out")

    def run_actor(self, actor_id: str, run_input: dict[str, Any]) -> list[dict[str, Any]]:
        if not self.configured:
            raise ApifyNotConfigured("APIFY_API_TOKEN not configured")

        if self._http_client is not None:
            return self._run(self._http_client, actor_id, run_input)
        with httpx.Client(timeout=self._timeout_s, follow_redirects=True) as client:
            return self._run(client, actor_id, run_input)

    def _run(self, client: httpx.Client, actor_id: str, run_input: dict[str, Any]) -> list[dict[str, Any]]:
        started = self._request(client, "POST", f"/acts/{actor_id}/runs", json=run_input)
        data = started.get("data") if isinstance(started, dict) else None
        run_id = str((data or {}).get("id") or "")
        if not run_id:
            raise ApifyError("Apify did not return a run id")
        logger.info("apify_run_started actor=%s run_id=%s", actor_id, run_id)

        self._wait_for_run(client, run_id)

        items = self._request(client, "GET", f"/actor-runs/{run_id}/dataset/items")
        if not isinstance(items, list):
            raise ApifyError("Apify dataset response was not a list")
        logger.info("apify_dataset_items run_id=%s count=%s", run_id, len(items))
        return [item for item in items if isinstance(item, dict)]
