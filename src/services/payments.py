"""Payment proof submission and the admin approve/reject transitions."""

from __future__ import annotations

import logging
import re
from datetime import datetime, tzinfo
from typing import Any, Dict, List, Optional, Sequence

from tuklas import storage, store
from tuklas.storage import StorageError
from tuklas.store import StoreError

from ..catalog import normalize_level, normalize_program_id
from ..config import payment_bucket, session_minutes as configured_minutes
from ..models import APPROVED, PENDING, REJECTED, GlobalLock, PaymentProof, ScheduleChoice
from ..payment_rows import parse_payment_row, parse_payment_rows, payment_row_payload
from ..scheduling_lock import compute_global_lock, is_payment_blocked, lock_message
from ..timeutils import iso_z
from ..validation import validate_receipt

_LOG = logging.getLogger(__name__)

PAYMENT_PROOFS = "payment_proofs"
USER_PROOF_LIMIT = 50
ADMIN_PROOF_LIMIT = 500
RECEIPT_PREFIX = "payment_proofs"


class PaymentBlockedError(RuntimeError):
    """A payment for another program while a training window is still live."""

    def __init__(self, lock: GlobalLock, message: str) -> None:
        super().__init__(message)
        self.lock = lock


class InvalidTransitionError(RuntimeError):
    """Approve or reject attempted on a proof that is no longer pending."""


class ReceiptValidationError(ValueError):
    def __init__(self, errors: Dict[str, str]) -> None:
        super().__init__("; ".join(errors.values()))
        self.errors = errors


def fetch_user_proofs(user_id: str) -> List[PaymentProof]:
    """The learner's proofs, newest first; unreadable rows are skipped."""
    rows = store.select(
        PAYMENT_PROOFS,
        [("user_id", "==", user_id)],
        order_by="created_at",
        descending=True,
        limit=USER_PROOF_LIMIT,
    )
    proofs, _ = parse_payment_rows(rows)
    return sorted(proofs, key=lambda p: p.created_at, reverse=True)


def fetch_all_proofs(limit: int = ADMIN_PROOF_LIMIT) -> List[PaymentProof]:
    rows = store.select(PAYMENT_PROOFS, order_by="created_at", descending=True, limit=limit)
    proofs, _ = parse_payment_rows(rows)
    return proofs


def receipt_path(user_id: str, program_id: str, level: str, filename: str, now: datetime) -> str:
    safe_name = re.sub(r"[^A-Za-z0-9._-]+", "_", filename or "receipt")
    millis = int(now.timestamp() * 1000)
    return f"{RECEIPT_PREFIX}/{user_id}/{program_id}-{level}-{millis}-{safe_name}"


def _discard_receipt(bucket: Optional[str], path: str) -> None:
    try:
        storage.delete(bucket, path)
    except StorageError:
        _LOG.warning("Orphaned receipt left at %s", path)


def submit_payment_proof(
    *,
    user_id: str,
    program_id: str,
    level: str,
    filename: str,
    content_type: str,
    data: bytes,
    existing: Sequence[PaymentProof],
    now: datetime,
    reference: Optional[str] = None,
    schedule_choice: Optional[ScheduleChoice] = None,
    session_minutes: Optional[int] = None,
    tz: Optional[tzinfo] = None,
) -> str:
    """Upload the receipt and create a pending proof; returns the new id.

    Raises
    ------
    ReceiptValidationError
        The file is not a PNG/JPEG or is larger than 5 MB.
    PaymentBlockedError
        Another program's training window has not ended yet.
    """
    errors = validate_receipt(filename, content_type, len(data or b""))
    if errors:
        raise ReceiptValidationError(errors)

    program_id = normalize_program_id(program_id)
    level = normalize_level(level)
    minutes = session_minutes if session_minutes is not None else configured_minutes()

    lock = compute_global_lock(existing, now, minutes, tz)
    if is_payment_blocked(lock, program_id, now):
        _LOG.info("Blocked payment for %s by %s while lock is active", program_id, user_id)
        raise PaymentBlockedError(lock, lock_message(lock, now, tz))

    bucket = payment_bucket()
    path = receipt_path(user_id, program_id, level, filename, now)
    storage.upload(bucket, path, data, content_type)
    try:
        image_url = storage.get_public_url(bucket, path)
    except StorageError:
        _discard_receipt(bucket, path)
        raise

    payload = payment_row_payload(
        user_id=user_id,
        program_id=program_id,
        level=level,
        image_url=image_url,
        created_at=now,
        reference=reference,
        schedule_choice=schedule_choice,
    )
    try:
        proof_id = store.insert(PAYMENT_PROOFS, payload)
    except StoreError:
        _discard_receipt(bucket, path)
        raise
    _LOG.info("Submitted payment proof %s (%s/%s) for %s", proof_id, program_id, level, user_id)
    return proof_id


def _transition(proof_id: str, verb: str, patch: Dict[str, Any]) -> PaymentProof:
    """Write ``patch`` only if the proof is still pending; returns it as read."""
    row, applied = store.compare_and_update(PAYMENT_PROOFS, proof_id, "status", PENDING, patch)
    if row is None:
        raise InvalidTransitionError(f"Payment proof {proof_id} no longer exists")
    proof = parse_payment_row(row)
    if not applied:
        raise InvalidTransitionError(f"Cannot {verb} a {proof.status} proof")
    return proof


def _reload(proof_id: str) -> PaymentProof:
    row = store.get(PAYMENT_PROOFS, proof_id)
    if row is None:
        raise InvalidTransitionError(f"Payment proof {proof_id} no longer exists")
    return parse_payment_row(row)


def approve_proof(proof_id: str, admin_id: str, now: datetime) -> PaymentProof:
    """Move a pending proof to approved and credit the learner's profile."""
    proof = _transition(
        proof_id,
        "approve",
        {"status": APPROVED, "approved_at": iso_z(now), "approved_by": admin_id},
    )
    if proof.credits_awarded:
        store.increment("profiles", proof.user_id, "credits", proof.credits_awarded)
    _LOG.info("Proof %s approved by %s", proof.id, admin_id)
    return _reload(proof.id)


def reject_proof(proof_id: str, reason: Optional[str] = None) -> PaymentProof:
    patch: Dict[str, Any] = {"status": REJECTED}
    if reason and reason.strip():
        patch["rejection_reason"] = reason.strip()
    proof = _transition(proof_id, "reject", patch)
    _LOG.info("Proof %s rejected", proof.id)
    return _reload(proof.id)


__all__ = [
    "PAYMENT_PROOFS",
    "PaymentBlockedError",
    "InvalidTransitionError",
    "ReceiptValidationError",
    "fetch_user_proofs",
    "fetch_all_proofs",
    "receipt_path",
    "submit_payment_proof",
    "approve_proof",
    "reject_proof",
]
