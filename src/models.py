"""Typed records for payment proofs, entitlements and generated sessions."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import FrozenSet, Optional

PENDING = "pending"
APPROVED = "approved"
REJECTED = "rejected"
STATUSES = (PENDING, APPROVED, REJECTED)
TERMINAL_STATUSES = frozenset({APPROVED, REJECTED})

SLOT_MORNING = "08:00-10:00"
SLOT_EVENING = "18:00-20:00"
SLOTS = (SLOT_MORNING, SLOT_EVENING)
SLOT_HOURS = {SLOT_MORNING: 8, SLOT_EVENING: 18}

ROLE_ADMIN = "admin"
ROLE_STAFF = "staff"
ROLE_USER = "user"


@dataclass(frozen=True)
class ScheduleChoice:
    """Start instant and time slot a learner picked when paying."""

    start: Optional[datetime] = None
    slot: Optional[str] = None

    @property
    def slot_hour(self) -> Optional[int]:
        return SLOT_HOURS.get(self.slot or "")

    def is_empty(self) -> bool:
        return self.start is None and self.slot is None


@dataclass(frozen=True)
class PaymentProof:
    """One payment submission for a (program, level) pair."""

    id: str
    user_id: str
    program_id: str
    level: str
    status: str
    created_at: datetime
    amount: float = 0.0
    image_url: str = ""
    reference: Optional[str] = None
    schedule_choice: Optional[ScheduleChoice] = None
    approved_at: Optional[datetime] = None
    approved_by: Optional[str] = None
    credits_awarded: int = 0
    rejection_reason: Optional[str] = None

    @property
    def is_approved(self) -> bool:
        return self.status == APPROVED

    @property
    def is_pending(self) -> bool:
        return self.status == PENDING


@dataclass(frozen=True)
class ScheduleWindow:
    payment_id: str
    program_id: str
    level: str
    starts_at: datetime
    ends_at: datetime


@dataclass(frozen=True)
class Entitlement:
    """Access state for one program, derived fresh from approved proofs.

    ``is_permanent`` covers module browsing; the time-boxed part lives in
    ``best_window`` (the approved proof whose window ends last).
    """

    program_id: str
    unlocked_levels: FrozenSet[str] = field(default_factory=frozenset)
    is_permanent: bool = False
    best_expiry: Optional[datetime] = None
    best_window: Optional[ScheduleWindow] = None


@dataclass(frozen=True)
class TrainingSession:
    """One generated daily meeting; never persisted."""

    id: str
    program_id: str
    title: str
    starts_at: datetime
    ends_at: datetime
    display_text: str
    join_url: str


@dataclass(frozen=True)
class ProgramCountdown:
    program_id: str
    title: str
    starts_at: datetime
    ends_at: datetime
    started: bool
    ended: bool
    until_start_ms: int
    until_end_ms: int


@dataclass(frozen=True)
class GlobalLock:
    """Cross-program payment block while any approved window is pending or active."""

    lock_program_ids: FrozenSet[str] = field(default_factory=frozenset)
    starts_at: Optional[datetime] = None
    ends_at: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return not self.lock_program_ids


@dataclass
class Profile:
    id: str
    email: str = ""
    full_name: str = ""
    role: str = ROLE_USER
    created_at: Optional[datetime] = None
    suspended_until: Optional[datetime] = None
    credits: int = 0
    enrolled: bool = False

    @property
    def display_name(self) -> str:
        return self.full_name or self.email or self.id


__all__ = [
    "PENDING",
    "APPROVED",
    "REJECTED",
    "STATUSES",
    "TERMINAL_STATUSES",
    "SLOT_MORNING",
    "SLOT_EVENING",
    "SLOTS",
    "SLOT_HOURS",
    "ROLE_ADMIN",
    "ROLE_STAFF",
    "ROLE_USER",
    "ScheduleChoice",
    "PaymentProof",
    "ScheduleWindow",
    "Entitlement",
    "TrainingSession",
    "ProgramCountdown",
    "GlobalLock",
    "Profile",
]
