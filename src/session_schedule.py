"""Generate the daily training sessions behind each approved payment.

Sessions are rebuilt on every rerun from the schedule window and a seeded
title shuffle, so the same payment always produces the same calendar.
"""

from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Dict, Iterable, List, Optional

from .catalog import days_for, program_title, session_titles_for
from .entitlements import schedule_window
from .models import Entitlement, PaymentProof, ProgramCountdown, ScheduleWindow, TrainingSession
from .seeded_shuffle import schedule_seed, seeded_permutation
from .timeutils import add_days, add_minutes, date_key, duration_ms, format_display

NOT_STARTED = "not_started"
OPEN = "open"
ENDED = "ended"


def generate_sessions(
    window: ScheduleWindow,
    join_url: str,
    session_minutes: int,
    tz: Optional[tzinfo] = None,
) -> List[TrainingSession]:
    """Return one session per program day starting at ``window.starts_at``."""
    days = days_for(window.program_id, window.level)
    seed = schedule_seed(window.payment_id, window.starts_at, window.program_id, window.level)
    titles = seeded_permutation(session_titles_for(window.program_id, window.level), seed)

    sessions: List[TrainingSession] = []
    for i in range(days):
        start = add_days(window.starts_at, i, tz)
        end = add_minutes(start, session_minutes)
        sessions.append(
            TrainingSession(
                id=f"{window.payment_id}-{i}",
                program_id=window.program_id,
                title=f"{titles[i % len(titles)]} {i + 1}",
                starts_at=start,
                ends_at=end,
                display_text=f"{format_display(start, tz)} - {format_display(end, tz)}",
                join_url=join_url,
            )
        )
    return sessions


def sessions_for_proofs(
    proofs: Iterable[PaymentProof],
    join_url: str,
    session_minutes: int,
    tz: Optional[tzinfo] = None,
) -> List[TrainingSession]:
    """Every session of every approved proof, ordered by start."""
    sessions: List[TrainingSession] = []
    for proof in proofs:
        if not proof.is_approved:
            continue
        window = schedule_window(proof, session_minutes, tz)
        sessions.extend(generate_sessions(window, join_url, session_minutes, tz))
    sessions.sort(key=lambda s: (s.starts_at, s.id))
    return sessions


def sessions_for_day(
    sessions: Iterable[TrainingSession], now: datetime, tz: Optional[tzinfo] = None
) -> List[TrainingSession]:
    today = date_key(now, tz)
    return [s for s in sessions if date_key(s.starts_at, tz) == today]


def join_state(session: TrainingSession, now: datetime) -> str:
    if now < session.starts_at:
        return NOT_STARTED
    if now > session.ends_at:
        return ENDED
    return OPEN


def can_join(session: TrainingSession, now: datetime) -> bool:
    return join_state(session, now) == OPEN


def group_by_day(
    sessions: Iterable[TrainingSession], tz: Optional[tzinfo] = None
) -> Dict[str, List[TrainingSession]]:
    """Bucket sessions under their local ``YYYY-MM-DD`` key for the calendar."""
    grouped: Dict[str, List[TrainingSession]] = {}
    for session in sessions:
        grouped.setdefault(date_key(session.starts_at, tz), []).append(session)
    return grouped


def program_countdowns(
    entitlements: Dict[str, Entitlement], now: datetime
) -> List[ProgramCountdown]:
    """Dashboard cards, one per program with a schedule window."""
    cards: List[ProgramCountdown] = []
    for pid, ent in entitlements.items():
        window = ent.best_window
        if window is None:
            continue
        cards.append(
            ProgramCountdown(
                program_id=pid,
                title=program_title(pid),
                starts_at=window.starts_at,
                ends_at=window.ends_at,
                started=now >= window.starts_at,
                ended=now >= window.ends_at,
                until_start_ms=max(0, duration_ms(now, window.starts_at)),
                until_end_ms=max(0, duration_ms(now, window.ends_at)),
            )
        )
    cards.sort(key=lambda c: c.starts_at)
    return cards


__all__ = [
    "NOT_STARTED",
    "OPEN",
    "ENDED",
    "generate_sessions",
    "sessions_for_proofs",
    "sessions_for_day",
    "join_state",
    "can_join",
    "group_by_day",
    "program_countdowns",
]
