"""Admin helpers: user list, suspensions and the payment review table."""

from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, TypeVar

import pandas as pd

from tuklas import store

from ..catalog import LEVEL_LABELS, PROGRAMS, program_title
from ..models import APPROVED, PENDING, REJECTED, PaymentProof, Profile
from ..timeutils import format_display, iso_z
from .enrollment import ENROLL_FORMS, enrollments_for
from .payments import PAYMENT_PROOFS
from .profiles import PROFILES, parse_profile

_LOG = logging.getLogger(__name__)

T = TypeVar("T")

USERS_PAGE_SIZE = 10
STATUS_FILTERS = ("pending", "approved", "rejected", "all")


def list_users() -> List[Profile]:
    """Profiles newest first, one per email, with the enrolled flag set."""
    rows = store.select(PROFILES, order_by="created_at", descending=True)
    seen = set()
    users: List[Profile] = []
    for row in rows:
        profile = parse_profile(row)
        key = (profile.email or profile.id).lower()
        if key in seen:
            continue
        seen.add(key)
        users.append(profile)

    enrolled_ids = {
        r.get("user_id") for r in store.select_in(ENROLL_FORMS, "user_id", [u.id for u in users])
    }
    enrolled_emails = {
        str(r.get("email") or "").lower()
        for r in store.select_in(ENROLL_FORMS, "email", [u.email for u in users if u.email])
    }
    for user in users:
        user.enrolled = user.id in enrolled_ids or (bool(user.email) and user.email in enrolled_emails)
    return users


def filter_users(users: Sequence[Profile], query: str) -> List[Profile]:
    q = (query or "").strip().lower()
    if not q:
        return list(users)
    return [
        u
        for u in users
        if q in u.full_name.lower() or q in u.email.lower() or q in u.role.lower()
    ]


def paginate(items: Sequence[T], page: int, page_size: int = USERS_PAGE_SIZE) -> Tuple[List[T], int]:
    """Return the requested page (1-based, clamped) and the page count."""
    total_pages = max(1, math.ceil(len(items) / page_size))
    page = min(max(1, page), total_pages)
    start = (page - 1) * page_size
    return list(items[start : start + page_size]), total_pages


def suspend_user(user_id: str, days: float, now: datetime) -> datetime:
    if days <= 0:
        raise ValueError("Suspension must be a positive number of days")
    until = now + timedelta(days=days)
    store.update(PROFILES, user_id, {"suspended_until": iso_z(until)})
    _LOG.info("Suspended %s until %s", user_id, iso_z(until))
    return until


def unsuspend_user(user_id: str) -> None:
    store.update(PROFILES, user_id, {"suspended_until": None})
    _LOG.info("Lifted suspension for %s", user_id)


def latest_enrollment(user: Profile) -> Optional[Dict[str, Any]]:
    rows = enrollments_for(user.id, user.email or None)
    return rows[0] if rows else None


def proof_counts(proofs: Sequence[PaymentProof]) -> Dict[str, int]:
    counts = {PENDING: 0, APPROVED: 0, REJECTED: 0}
    for proof in proofs:
        counts[proof.status] = counts.get(proof.status, 0) + 1
    return counts


def filter_proofs(
    proofs: Sequence[PaymentProof],
    status: str = "pending",
    query: str = "",
    profiles: Optional[Mapping[str, Profile]] = None,
) -> List[PaymentProof]:
    """Filter by status (or ``"all"``) then by program, level, email or name."""
    profiles = profiles or {}
    selected = [p for p in proofs if status == "all" or p.status == status]
    q = (query or "").strip().lower()
    if not q:
        return selected

    def matches(proof: PaymentProof) -> bool:
        user = profiles.get(proof.user_id)
        haystack = [
            proof.program_id,
            LEVEL_LABELS.get(proof.level, proof.level),
            user.email if user else "",
            user.full_name if user else "",
        ]
        return any(q in value.lower() for value in haystack)

    return [p for p in selected if matches(p)]


def proofs_frame(
    proofs: Sequence[PaymentProof], profiles: Optional[Mapping[str, Profile]] = None, tz=None
) -> pd.DataFrame:
    """Tabular view of proofs for the review screen."""
    profiles = profiles or {}
    columns = ["ID", "Submitted", "Learner", "Email", "Program", "Level", "Amount", "Status", "Credits"]
    records = []
    for proof in proofs:
        user = profiles.get(proof.user_id)
        records.append(
            {
                "ID": proof.id,
                "Submitted": format_display(proof.created_at, tz),
                "Learner": user.display_name if user else proof.user_id,
                "Email": user.email if user else "",
                "Program": program_title(proof.program_id),
                "Level": LEVEL_LABELS.get(proof.level, proof.level),
                "Amount": proof.amount,
                "Status": proof.status.title(),
                "Credits": proof.credits_awarded,
            }
        )
    return pd.DataFrame.from_records(records, columns=columns)


def dashboard_counts() -> Dict[str, int]:
    return {
        "programs": len(PROGRAMS),
        "applicants": store.count(ENROLL_FORMS),
        "payments": store.count(PAYMENT_PROOFS),
        "pending": store.count(PAYMENT_PROOFS, [("status", "==", PENDING)]),
    }


__all__ = [
    "USERS_PAGE_SIZE",
    "STATUS_FILTERS",
    "list_users",
    "filter_users",
    "paginate",
    "suspend_user",
    "unsuspend_user",
    "latest_enrollment",
    "proof_counts",
    "filter_proofs",
    "proofs_frame",
    "dashboard_counts",
]
