"""Cross-program payment lock.

A learner may only hold training windows for one set of programs at a time.
While any approved window has not ended, new payments for other programs
are blocked.  Programs inside the lock stay payable so a learner can move
up a level without waiting.
"""

from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Iterable, Optional

from .catalog import program_title
from .entitlements import approved_windows
from .models import GlobalLock, PaymentProof
from .timeutils import clock_string, duration_ms, format_display


def compute_global_lock(
    proofs: Iterable[PaymentProof],
    now: datetime,
    session_minutes: int,
    tz: Optional[tzinfo] = None,
) -> GlobalLock:
    live = [w for w in approved_windows(proofs, session_minutes, tz) if now < w.ends_at]
    if not live:
        return GlobalLock()
    return GlobalLock(
        lock_program_ids=frozenset(w.program_id for w in live),
        starts_at=min(w.starts_at for w in live),
        ends_at=max(w.ends_at for w in live),
    )


def is_payment_blocked(lock: GlobalLock, program_id: str, now: datetime) -> bool:
    if lock.is_open or lock.ends_at is None:
        return False
    if program_id in lock.lock_program_ids:
        return False
    return now < lock.ends_at


def lock_message(lock: GlobalLock, now: datetime, tz: Optional[tzinfo] = None) -> str:
    """Explain an active lock; empty string when payments are open."""
    if lock.is_open or lock.ends_at is None or now >= lock.ends_at:
        return ""
    names = ", ".join(sorted(program_title(pid) for pid in lock.lock_program_ids))
    remaining = clock_string(duration_ms(now, lock.ends_at))
    return (
        f"You already have a scheduled training for {names}. "
        f"Other programs open after {format_display(lock.ends_at, tz)} "
        f"({remaining} left)."
    )


__all__ = ["compute_global_lock", "is_payment_blocked", "lock_message"]
