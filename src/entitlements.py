"""Derive program access and schedule windows from approved payment proofs.

Nothing here is stored.  Every read recomputes the entitlement from the
learner's approved proofs, so a newly approved payment shows up on the next
rerun without any cache invalidation.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime, tzinfo
from typing import Dict, Iterable, List, Optional

from .catalog import days_for
from .models import Entitlement, PaymentProof, ScheduleWindow
from .timeutils import add_days, add_minutes, at_local_time


def resolve_start(proof: PaymentProof, tz: Optional[tzinfo] = None) -> datetime:
    """Return the first session's start for ``proof``.

    Uses the chosen start when one was recorded and ``created_at`` otherwise.
    A chosen slot moves the local clock to 08:00 or 18:00.
    """
    choice = proof.schedule_choice
    start = choice.start if choice is not None and choice.start is not None else proof.created_at
    hour = choice.slot_hour if choice is not None else None
    if hour is not None:
        start = at_local_time(start, hour, 0, tz)
    return start


def schedule_window(
    proof: PaymentProof, session_minutes: int, tz: Optional[tzinfo] = None
) -> ScheduleWindow:
    start = resolve_start(proof, tz)
    days = days_for(proof.program_id, proof.level)
    last_start = add_days(start, days - 1, tz)
    return ScheduleWindow(
        payment_id=proof.id,
        program_id=proof.program_id,
        level=proof.level,
        starts_at=start,
        ends_at=add_minutes(last_start, session_minutes),
    )


def approved_windows(
    proofs: Iterable[PaymentProof], session_minutes: int, tz: Optional[tzinfo] = None
) -> List[ScheduleWindow]:
    return [schedule_window(p, session_minutes, tz) for p in proofs if p.is_approved]


def resolve_entitlements(
    proofs: Iterable[PaymentProof],
    session_minutes: int,
    program_id: Optional[str] = None,
    tz: Optional[tzinfo] = None,
) -> Dict[str, Entitlement]:
    """Group approved proofs by program and build one :class:`Entitlement` each.

    Pending and rejected proofs never contribute levels or windows.  When
    two windows end at the same instant the first one seen is kept.
    """
    grouped: Dict[str, List[PaymentProof]] = defaultdict(list)
    for proof in proofs:
        if not proof.is_approved:
            continue
        if program_id is not None and proof.program_id != program_id:
            continue
        grouped[proof.program_id].append(proof)

    result: Dict[str, Entitlement] = {}
    for pid, group in grouped.items():
        best: Optional[ScheduleWindow] = None
        for proof in group:
            window = schedule_window(proof, session_minutes, tz)
            if best is None or window.ends_at > best.ends_at:
                best = window
        result[pid] = Entitlement(
            program_id=pid,
            unlocked_levels=frozenset(p.level for p in group),
            is_permanent=bool(group),
            best_expiry=best.ends_at if best else None,
            best_window=best,
        )
    return result


def approved_levels(proofs: Iterable[PaymentProof], program_id: str) -> frozenset:
    return frozenset(
        p.level for p in proofs if p.is_approved and p.program_id == program_id
    )


def can_open_level(proofs: Iterable[PaymentProof], program_id: str, level: str) -> bool:
    """Module screens only open levels the learner paid for and had approved."""
    return level in approved_levels(proofs, program_id)


__all__ = [
    "resolve_start",
    "schedule_window",
    "approved_windows",
    "resolve_entitlements",
    "approved_levels",
    "can_open_level",
]
