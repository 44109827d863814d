"""Ingestion boundary turning raw ``payment_proofs`` rows into typed records.

Rows come back from the store as loose dictionaries.  Everything that reads
payment data goes through :func:`parse_payment_row` so business logic only
ever sees :class:`~src.models.PaymentProof` values.

Older rows carry their schedule inside the free-text ``ref_text`` column
(``ref:<text>; start:<ISO>; slot:<08:00-10:00|18:00-20:00>``).  New rows
store a structured ``schedule_choice`` map instead; the legacy format is
only decoded here.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .catalog import LEVEL_CREDITS, LEVEL_PRICES, normalize_level, normalize_program_id
from .models import PENDING, SLOTS, STATUSES, PaymentProof, ScheduleChoice
from .timeutils import iso_z, to_datetime_any

_LOG = logging.getLogger(__name__)

_REF_RE = re.compile(r"ref:\s*(.*?)(?=\s*(?:;|\b(?:start|slot):|$))", re.I)
_START_RE = re.compile(r"start:\s*([0-9T:\-\.Z\+]+)", re.I)
_SLOT_RE = re.compile(r"slot:\s*(08:00-10:00|18:00-20:00)", re.I)
_KEY_RE = re.compile(r"\b(?:ref|start|slot):", re.I)


class RowParseError(ValueError):
    """Raised when a stored row cannot be turned into a typed record."""


def decode_legacy_ref_text(text: Optional[str]) -> Tuple[Optional[str], Optional[ScheduleChoice]]:
    """Split a legacy ``ref_text`` value into reference and schedule choice.

    A ``start`` value that does not parse is dropped; callers then fall back
    to the row's creation time.
    """

    raw = str(text or "")
    if not raw.strip():
        return None, None

    ref_match = _REF_RE.search(raw)
    reference = ref_match.group(1).strip() if ref_match else None

    start = None
    start_match = _START_RE.search(raw)
    if start_match:
        start = to_datetime_any(start_match.group(1))
        if start is None:
            _LOG.debug("Ignoring unparseable start in ref_text %r", raw)

    slot_match = _SLOT_RE.search(raw)
    slot = slot_match.group(1) if slot_match else None

    if start is None and slot is None:
        # Plain text without any keys is a bare reference number.
        if reference is None and not _KEY_RE.search(raw):
            reference = raw.strip()
        return reference or None, None
    return reference or None, ScheduleChoice(start=start, slot=slot)


def encode_ref_text(reference: Optional[str]) -> Optional[str]:
    ref = (reference or "").strip()
    return f"ref:{ref}" if ref else None


def _schedule_from_map(value: Mapping[str, Any]) -> Optional[ScheduleChoice]:
    start = to_datetime_any(value.get("start"))
    slot = value.get("slot")
    if slot not in SLOTS:
        slot = None
    if start is None and slot is None:
        return None
    return ScheduleChoice(start=start, slot=slot)


def _as_float(value: Any) -> float:
    try:
        return float(str(value).replace(",", "").strip())
    except (TypeError, ValueError):
        return 0.0


def _as_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def parse_payment_row(row: Mapping[str, Any]) -> PaymentProof:
    """Convert one store row into a :class:`PaymentProof`.

    Raises
    ------
    RowParseError
        When identifiers, status, program, level or ``created_at`` are
        missing or invalid.
    """

    proof_id = str(row.get("id") or "").strip()
    user_id = str(row.get("user_id") or "").strip()
    if not proof_id or not user_id:
        raise RowParseError("row is missing id or user_id")

    status = str(row.get("status") or "").strip().lower()
    if status not in STATUSES:
        raise RowParseError(f"unknown status {row.get('status')!r}")

    try:
        program_id = normalize_program_id(row.get("program_id"))
        level = normalize_level(row.get("level"))
    except ValueError as exc:
        raise RowParseError(str(exc)) from exc

    created_at = to_datetime_any(row.get("created_at"))
    if created_at is None:
        raise RowParseError(f"unparseable created_at {row.get('created_at')!r}")

    reference, legacy_choice = decode_legacy_ref_text(row.get("ref_text"))
    structured = row.get("schedule_choice")
    choice = _schedule_from_map(structured) if isinstance(structured, Mapping) else None

    return PaymentProof(
        id=proof_id,
        user_id=user_id,
        program_id=program_id,
        level=level,
        status=status,
        created_at=created_at,
        amount=_as_float(row.get("amount")),
        image_url=str(row.get("image_url") or ""),
        reference=reference,
        schedule_choice=choice or legacy_choice,
        approved_at=to_datetime_any(row.get("approved_at")),
        approved_by=row.get("approved_by") or None,
        credits_awarded=_as_int(row.get("credits_awarded")),
        rejection_reason=row.get("rejection_reason") or None,
    )


def parse_payment_rows(
    rows: Sequence[Mapping[str, Any]],
) -> Tuple[List[PaymentProof], List[Tuple[Mapping[str, Any], str]]]:
    """Parse many rows, collecting the ones that fail instead of raising."""

    proofs: List[PaymentProof] = []
    rejected: List[Tuple[Mapping[str, Any], str]] = []
    for row in rows:
        try:
            proofs.append(parse_payment_row(row))
        except RowParseError as exc:
            _LOG.warning("Skipping payment row %s: %s", row.get("id"), exc)
            rejected.append((row, str(exc)))
    return proofs, rejected


def payment_row_payload(
    *,
    user_id: str,
    program_id: str,
    level: str,
    image_url: str,
    created_at: datetime,
    reference: Optional[str] = None,
    schedule_choice: Optional[ScheduleChoice] = None,
) -> Dict[str, Any]:
    """Insert payload for a new pending proof."""

    choice: Optional[Dict[str, Any]] = None
    if schedule_choice is not None and not schedule_choice.is_empty():
        choice = {
            "start": iso_z(schedule_choice.start) if schedule_choice.start else None,
            "slot": schedule_choice.slot,
        }
    return {
        "user_id": user_id,
        "program_id": program_id,
        "level": level,
        "amount": LEVEL_PRICES[level],
        "image_url": image_url,
        "status": PENDING,
        "ref_text": encode_ref_text(reference),
        "schedule_choice": choice,
        "credits_awarded": LEVEL_CREDITS[level],
        "created_at": iso_z(created_at),
        "approved_at": None,
        "approved_by": None,
    }


__all__ = [
    "RowParseError",
    "decode_legacy_ref_text",
    "encode_ref_text",
    "parse_payment_row",
    "parse_payment_rows",
    "payment_row_payload",
]
