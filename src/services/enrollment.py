"""Enrollment form submissions (``enroll_forms``)."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from tuklas import store

from ..catalog import normalize_program_id
from ..timeutils import iso_z
from ..validation import validate_enrollment

_LOG = logging.getLogger(__name__)

ENROLL_FORMS = "enroll_forms"
DEFAULT_COUNTRY = "Philippines"
GENDER_OPTIONS = ["Female", "Male", "Nonbinary", "Prefer not to say"]
REFERRAL_CHOICES = [
    "Facebook",
    "TikTok",
    "Instagram",
    "YouTube",
    "Google Search",
    "Friend / Family",
    "School",
    "Workplace",
    "Other",
]


class EnrollmentError(ValueError):
    def __init__(self, errors: Dict[str, str]) -> None:
        super().__init__("; ".join(errors.values()))
        self.errors = errors


def _clean(form: Mapping[str, Any], key: str) -> str:
    return str(form.get(key) or "").strip()


def enrollment_payload(user_id: str, form: Mapping[str, Any], now: datetime) -> Dict[str, Any]:
    first = _clean(form, "first_name")
    last = _clean(form, "last_name")
    full_name = f"{first} {last}".strip()
    email = _clean(form, "email").lower()
    country = _clean(form, "country") or DEFAULT_COUNTRY
    address = ", ".join(
        part
        for part in (
            _clean(form, "street"),
            _clean(form, "city"),
            _clean(form, "province"),
            _clean(form, "zip"),
            country,
        )
        if part
    )
    program = _clean(form, "program")
    try:
        program_id: Optional[str] = normalize_program_id(program)
    except ValueError:
        program_id = None
    return {
        "user_id": user_id,
        "program_id": program_id,
        "program_title": program,
        "level": None,
        "full_name": full_name,
        "email": email,
        "payload": {
            "first_name": first,
            "last_name": last,
            "full_name": full_name,
            "email": email,
            "phone": _clean(form, "phone"),
            "gender": _clean(form, "gender") or None,
            "birthdate": _clean(form, "birthdate") or None,
            "street": _clean(form, "street") or None,
            "city": _clean(form, "city"),
            "province": _clean(form, "province"),
            "zipcode": _clean(form, "zip"),
            "country": country,
            "address": address,
            "program": program,
            "goals": _clean(form, "goals"),
            "referral": _clean(form, "referral") or None,
            "emergency_name": _clean(form, "ice_name"),
            "emergency_phone": _clean(form, "ice_phone"),
            "newsletter": bool(form.get("newsletter")),
            "agree_terms": bool(form.get("agree_terms")),
            "agree_data": bool(form.get("agree_data")),
        },
        "submitted_at": iso_z(now),
    }


def submit_enrollment(user_id: str, form: Mapping[str, Any], now: datetime) -> str:
    """Validate and store the form; raises :class:`EnrollmentError` on bad input."""
    errors = validate_enrollment(form)
    if errors:
        raise EnrollmentError(errors)
    form_id = store.insert(ENROLL_FORMS, enrollment_payload(user_id, form, now))
    _LOG.info("Stored enrollment %s for %s", form_id, user_id)
    return form_id


def enrollments_for(user_id: str, email: Optional[str] = None) -> List[Dict[str, Any]]:
    """Forms matched by user id or, failing that, by email; newest first."""
    rows = store.select(ENROLL_FORMS, [("user_id", "==", user_id)]) if user_id else []
    if email:
        seen = {r["id"] for r in rows}
        for row in store.select(ENROLL_FORMS, [("email", "==", email.strip().lower())]):
            if row["id"] not in seen:
                rows.append(row)
    rows.sort(key=lambda r: str(r.get("submitted_at") or ""), reverse=True)
    return rows


def is_enrolled(user_id: str, email: Optional[str] = None) -> bool:
    return bool(enrollments_for(user_id, email))


__all__ = [
    "ENROLL_FORMS",
    "GENDER_OPTIONS",
    "REFERRAL_CHOICES",
    "EnrollmentError",
    "enrollment_payload",
    "submit_enrollment",
    "enrollments_for",
    "is_enrolled",
]
