from __future__ import annotations

from fastapi import Header, HTTPException, status

from careerhub.core.config import settings


def _normalize_lang(lang: str | None) -> str:
    if not lang:
        return "en"
    return lang.split(",")[0].strip().lower()[:2]


def _auth_error_message(lang: str | None) -> str:
    key = _normalize_lang(lang)
    messages = {
        "en": "Please provide a valid API key to use the career tools.",
        "de": "Bitte gib einen gültigen API-Schlüssel an, um die Karriere-Tools zu nutzen.",
        "fr": "Veuillez fournir une clé API valide pour utiliser les outils de carrière.",
        "es": "Por favor, proporciona una clave API válida para usar las herramientas profesionales.",
    }
    return messages.get(key, messages["en"])


def check_api_key(x_api_key: str | None, lang: str | None = None) -> None:
    if not settings.api_key:
        return
    if x_api_key != settings.api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=_auth_error_message(lang),
        )


def require_api_key(
    x_api_key: str | None = Header(default=None),
    accept_language: str | None = Header(default=None),
) -> None:
    check_api_key(x_api_key, accept_language)
