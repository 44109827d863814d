"""Form checks run before anything is sent to the backend.

Each validator returns a ``{field: message}`` mapping.  An empty mapping
means the form may be submitted.
"""

from __future__ import annotations

import math
import re
from typing import Any, Dict, Mapping, Optional

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
GMAIL_RE = re.compile(r"^[a-zA-Z0-9._%+-]+@gmail\.com$", re.I)
PHONE_RE = re.compile(r"^\d{11}$")

MIN_PASSWORD_LENGTH = 6
MAX_RECEIPT_BYTES = 5 * 1024 * 1024
RECEIPT_TYPES = {"image/png": (".png",), "image/jpeg": (".jpg", ".jpeg")}

REQUIRED = "Required."
PHONE_MESSAGE = "Enter 11-digit mobile number."


def _text(form: Mapping[str, Any], key: str) -> str:
    return str(form.get(key) or "").strip()


def validate_enrollment(form: Mapping[str, Any]) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    for key in ("first_name", "last_name", "city", "province", "zip", "ice_name"):
        if not _text(form, key):
            errors[key] = REQUIRED

    email = _text(form, "email")
    if not email:
        errors["email"] = REQUIRED
    elif not EMAIL_RE.match(email):
        errors["email"] = "Invalid email."

    for key in ("phone", "ice_phone"):
        value = _text(form, key)
        if not value:
            errors[key] = REQUIRED
        elif not PHONE_RE.match(value):
            errors[key] = PHONE_MESSAGE

    if not _text(form, "program"):
        errors["program"] = "Pick a program."
    if not _text(form, "goals"):
        errors["goals"] = "Share your goals to tailor your journey."
    if not form.get("agree_terms"):
        errors["agree_terms"] = "You must accept the Terms of Service."
    if not form.get("agree_data"):
        errors["agree_data"] = "Consent to data processing is required."
    return errors


def validate_signup(name: str, email: str, password: str, confirm: str) -> Dict[str, str]:
    """Sign-up only accepts Gmail addresses."""
    errors: Dict[str, str] = {}
    if not (name or "").strip():
        errors["name"] = "Please enter your name"
    if not GMAIL_RE.match((email or "").strip()):
        errors["email"] = "Email must be a valid @gmail.com address"
    if len(password or "") < MIN_PASSWORD_LENGTH:
        errors["password"] = f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
    elif password != confirm:
        errors["confirm"] = "Passwords do not match"
    return errors


def validate_receipt(
    filename: Optional[str], content_type: Optional[str], size: Optional[int]
) -> Dict[str, str]:
    if not filename:
        return {"receipt": "Please attach your payment receipt."}
    ctype = (content_type or "").lower()
    allowed = RECEIPT_TYPES.get(ctype)
    if allowed is None or not filename.lower().endswith(allowed):
        return {"receipt": "Receipt must be a PNG or JPEG image."}
    if size is None or size <= 0:
        return {"receipt": "The uploaded file is empty."}
    if size > MAX_RECEIPT_BYTES:
        return {"receipt": "Receipt must be 5 MB or smaller."}
    return {}


def validate_review(logged_in: bool, name: str, comment: str) -> Dict[str, str]:
    if not logged_in:
        return {"login": "Please login to post a review."}
    errors: Dict[str, str] = {}
    if not (name or "").strip():
        errors["name"] = "Please enter your display name."
    if not (comment or "").strip():
        errors["comment"] = "Please add a short comment."
    return errors


def validate_suspension_days(raw: Any) -> Dict[str, str]:
    try:
        days = float(str(raw).strip())
    except (TypeError, ValueError):
        return {"days": "Enter a positive number of days."}
    if not math.isfinite(days) or days <= 0:
        return {"days": "Enter a positive number of days."}
    return {}


__all__ = [
    "EMAIL_RE",
    "GMAIL_RE",
    "PHONE_RE",
    "MAX_RECEIPT_BYTES",
    "validate_enrollment",
    "validate_signup",
    "validate_receipt",
    "validate_review",
    "validate_suspension_days",
]
