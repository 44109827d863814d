"""Application configuration utilities.

Settings are read from the environment first and then from
``st.secrets`` so the same code runs locally (``.env``/shell exports) and on
Streamlit Cloud (``secrets.toml``).
"""

from __future__ import annotations

import logging
import os
from typing import Any, List, Optional
from zoneinfo import ZoneInfo

import streamlit as st

_LOG = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "Asia/Manila"
DEFAULT_SESSION_MINUTES = 120
DEFAULT_TEAMS_LINK = "https://teams.microsoft.com"


def get_setting(name: str, default: Any = None) -> Any:
    """Return ``name`` from the environment or ``st.secrets``.

    Empty strings count as missing so an exported-but-blank variable does
    not shadow a value from ``secrets.toml``.
    """

    raw = os.environ.get(name, "")
    if raw.strip():
        return raw.strip()
    try:
        value = st.secrets.get(name)
    except Exception:  # no secrets.toml in local runs and tests
        _LOG.debug("st.secrets unavailable while reading %s", name, exc_info=True)
        value = None
    if value in (None, ""):
        return default
    return value


def _int_setting(name: str, default: int) -> int:
    raw = get_setting(name, default)
    try:
        value = int(raw)
    except (TypeError, ValueError) as exc:
        raise RuntimeError(f"{name} must be an integer (got {raw!r})") from exc
    if value <= 0:
        raise RuntimeError(f"{name} must be positive (got {value})")
    return value


def firebase_api_key() -> str:
    return str(get_setting("FIREBASE_API_KEY", "") or "")


def admin_emails() -> List[str]:
    """Lower-cased admin allow-list from ``ADMIN_EMAILS`` (comma separated)."""

    raw = get_setting("ADMIN_EMAILS", "") or ""
    if isinstance(raw, (list, tuple)):
        items = raw
    else:
        items = str(raw).split(",")
    return [str(item).strip().lower() for item in items if str(item).strip()]


def session_minutes() -> int:
    """Length of one generated training session in minutes."""

    return _int_setting("SESSION_MINUTES", DEFAULT_SESSION_MINUTES)


def app_timezone() -> ZoneInfo:
    """Timezone used for display, day grouping and slot hours."""

    return ZoneInfo(str(get_setting("APP_TIMEZONE", DEFAULT_TIMEZONE)))


def teams_link() -> str:
    return str(get_setting("TEAMS_LINK", DEFAULT_TEAMS_LINK))


def payment_bucket() -> Optional[str]:
    """Receipt bucket name; ``None`` means the Firebase app's default bucket."""
    value = get_setting("PAYMENT_PROOFS_BUCKET")
    return str(value) if value else None


def log_level() -> str:
    return str(get_setting("LOG_LEVEL", "INFO")).upper()


__all__ = [
    "get_setting",
    "firebase_api_key",
    "admin_emails",
    "session_minutes",
    "app_timezone",
    "teams_link",
    "payment_bucket",
    "log_level",
]
