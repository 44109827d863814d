"""Row store over Cloud Firestore collections.

Each "table" is a top-level collection and each row a document whose id is
copied into the returned dictionary under ``"id"``.  Filters are
``(field, op, value)`` triples passed straight to :class:`FieldFilter`.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from firebase_admin import firestore
from google.api_core import exceptions as gexc
from google.cloud.firestore_v1 import FieldFilter

from . import firebase

_LOG = logging.getLogger(__name__)

Filter = Tuple[str, str, Any]

# Firestore caps "in" queries at 30 values.
IN_CHUNK = 30


class StoreError(RuntimeError):
    """Raised when a Firestore request fails."""


def _collection(table: str):
    return firebase.get_db().collection(table)


def _apply_filters(query, filters: Optional[Iterable[Filter]]):
    for field, op, value in filters or ():
        query = query.where(filter=FieldFilter(field, op, value))
    return query


def _row(snap) -> Dict[str, Any]:
    data = snap.to_dict() or {}
    data["id"] = snap.id
    return data


def select(
    table: str,
    filters: Optional[Sequence[Filter]] = None,
    order_by: Optional[str] = None,
    descending: bool = False,
    limit: Optional[int] = None,
) -> List[Dict[str, Any]]:
    query = _apply_filters(_collection(table), filters)
    if order_by:
        direction = firestore.Query.DESCENDING if descending else firestore.Query.ASCENDING
        query = query.order_by(order_by, direction=direction)
    if limit:
        query = query.limit(limit)
    try:
        return [_row(snap) for snap in query.stream()]
    except gexc.GoogleAPIError as exc:
        _LOG.exception("Firestore select on %s failed", table)
        raise StoreError(f"Could not load {table}: {exc}") from exc


def select_in(
    table: str,
    field: str,
    values: Iterable[Any],
    filters: Optional[Sequence[Filter]] = None,
) -> List[Dict[str, Any]]:
    """Rows whose ``field`` is one of ``values``, queried in chunks."""
    unique = list(dict.fromkeys(v for v in values if v not in (None, "")))
    rows: List[Dict[str, Any]] = []
    for start in range(0, len(unique), IN_CHUNK):
        chunk = unique[start : start + IN_CHUNK]
        rows.extend(select(table, [(field, "in", chunk), *(filters or ())]))
    return rows


def get(table: str, row_id: str) -> Optional[Dict[str, Any]]:
    try:
        snap = _collection(table).document(row_id).get()
    except gexc.GoogleAPIError as exc:
        _LOG.exception("Firestore get %s/%s failed", table, row_id)
        raise StoreError(f"Could not load {table}/{row_id}: {exc}") from exc
    if not snap.exists:
        return None
    return _row(snap)


def insert(table: str, row: Dict[str, Any], row_id: Optional[str] = None) -> str:
    """Create a document and return its id."""
    payload = {k: v for k, v in row.items() if k != "id"}
    try:
        ref = _collection(table).document(row_id) if row_id else _collection(table).document()
        ref.set(payload)
    except gexc.GoogleAPIError as exc:
        _LOG.exception("Firestore insert into %s failed", table)
        raise StoreError(f"Could not save to {table}: {exc}") from exc
    return ref.id


def update(table: str, row_id: str, patch: Dict[str, Any]) -> None:
    try:
        _collection(table).document(row_id).update(patch)
    except gexc.GoogleAPIError as exc:
        _LOG.exception("Firestore update %s/%s failed", table, row_id)
        raise StoreError(f"Could not update {table}/{row_id}: {exc}") from exc


def compare_and_update(
    table: str, row_id: str, field: str, expected: Any, patch: Dict[str, Any]
) -> Tuple[Optional[Dict[str, Any]], bool]:
    """Apply ``patch`` only while ``row[field] == expected``.

    The read and the write run in one Firestore transaction, so concurrent
    callers cannot both see ``expected``.  Returns the row as read (``None``
    when it does not exist) and whether the patch was written.
    """
    db = firebase.get_db()
    ref = db.collection(table).document(row_id)

    @firestore.transactional
    def _apply(transaction) -> Tuple[Optional[Dict[str, Any]], bool]:
        snap = ref.get(transaction=transaction)
        if not snap.exists:
            return None, False
        row = _row(snap)
        if row.get(field) != expected:
            return row, False
        transaction.update(ref, patch)
        return row, True

    try:
        return _apply(db.transaction())
    except (gexc.GoogleAPIError, ValueError) as exc:  # ValueError: commit retries exhausted
        _LOG.exception("Firestore conditional update %s/%s failed", table, row_id)
        raise StoreError(f"Could not update {table}/{row_id}: {exc}") from exc


def upsert(table: str, row_id: str, patch: Dict[str, Any]) -> None:
    try:
        _collection(table).document(row_id).set(patch, merge=True)
    except gexc.GoogleAPIError as exc:
        _LOG.exception("Firestore upsert %s/%s failed", table, row_id)
        raise StoreError(f"Could not save {table}/{row_id}: {exc}") from exc


def increment(table: str, row_id: str, field: str, delta: int) -> None:
    """Atomically add ``delta`` to a numeric field."""
    try:
        _collection(table).document(row_id).set({field: firestore.Increment(delta)}, merge=True)
    except gexc.GoogleAPIError as exc:
        _LOG.exception("Firestore increment %s/%s.%s failed", table, row_id, field)
        raise StoreError(f"Could not update {table}/{row_id}: {exc}") from exc


def count(table: str, filters: Optional[Sequence[Filter]] = None) -> int:
    query = _apply_filters(_collection(table), filters)
    try:
        result = query.count().get()
    except gexc.GoogleAPIError as exc:
        _LOG.exception("Firestore count on %s failed", table)
        raise StoreError(f"Could not count {table}: {exc}") from exc
    return int(result[0][0].value)


__all__ = [
    "Filter",
    "IN_CHUNK",
    "StoreError",
    "select",
    "select_in",
    "get",
    "insert",
    "update",
    "compare_and_update",
    "upsert",
    "increment",
    "count",
]
