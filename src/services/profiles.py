"""Learner profiles stored in the ``profiles`` collection (one doc per user)."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, Mapping, Optional

from tuklas import store

from ..models import ROLE_USER, Profile
from ..timeutils import iso_z, to_datetime_any, utc_now

_LOG = logging.getLogger(__name__)

PROFILES = "profiles"


def parse_profile(row: Mapping[str, Any]) -> Profile:
    try:
        credits = int(row.get("credits") or 0)
    except (TypeError, ValueError):
        credits = 0
    return Profile(
        id=str(row.get("id") or row.get("user_id") or ""),
        email=str(row.get("email") or "").strip().lower(),
        full_name=str(row.get("full_name") or "").strip(),
        role=str(row.get("role") or ROLE_USER).strip().lower(),
        created_at=to_datetime_any(row.get("created_at")),
        suspended_until=to_datetime_any(row.get("suspended_until")),
        credits=credits,
    )


def load_profile(user_id: str) -> Optional[Profile]:
    if not user_id:
        return None
    row = store.get(PROFILES, user_id)
    return parse_profile(row) if row else None


def load_profiles(user_ids: Iterable[str]) -> Dict[str, Profile]:
    """Profiles keyed by user id; missing users are simply absent."""
    rows = store.select_in(PROFILES, "user_id", user_ids)
    profiles = (parse_profile(r) for r in rows)
    return {p.id: p for p in profiles if p.id}


def ensure_profile(
    user_id: str, email: str, full_name: str = "", now: Optional[datetime] = None
) -> Profile:
    """Return the user's profile, creating it on first sign-in."""
    existing = load_profile(user_id)
    if existing is not None:
        return existing
    now = now or utc_now()
    row = {
        "user_id": user_id,
        "email": (email or "").strip().lower(),
        "full_name": (full_name or "").strip(),
        "role": ROLE_USER,
        "credits": 0,
        "suspended_until": None,
        "created_at": iso_z(now),
    }
    store.upsert(PROFILES, user_id, row)
    _LOG.info("Created profile for %s", user_id)
    return parse_profile({"id": user_id, **row})


__all__ = ["PROFILES", "parse_profile", "load_profile", "load_profiles", "ensure_profile"]
