import logging
from datetime import datetime, timezone

import pytest

from src.models import ScheduleChoice
from src.payment_rows import (
    RowParseError,
    decode_legacy_ref_text,
    encode_ref_text,
    parse_payment_row,
    parse_payment_rows,
    payment_row_payload,
)

UTC = timezone.utc


def _row(**overrides):
    row = {
        "id": "p1",
        "user_id": "u1",
        "program_id": "vdaa",
        "level": "beginner",
        "status": "approved",
        "amount": 3000,
        "created_at": "2024-12-20T03:00:00Z",
        "ref_text": None,
        "credits_awarded": 1,
    }
    row.update(overrides)
    return row


def test_decode_full_legacy_string():
    ref, choice = decode_legacy_ref_text("ref:12345; start:2025-01-01T08:00:00Z; slot:08:00-10:00")
    assert ref == "12345"
    assert choice == ScheduleChoice(start=datetime(2025, 1, 1, 8, 0, tzinfo=UTC), slot="08:00-10:00")
    assert choice.slot_hour == 8


def test_decode_reference_followed_by_key_without_separator():
    ref, choice = decode_legacy_ref_text("ref:123 start:2025-01-01T08:00:00Z")
    assert ref == "123"
    assert choice == ScheduleChoice(start=datetime(2025, 1, 1, 8, 0, tzinfo=UTC), slot=None)


def test_decode_bare_reference():
    assert decode_legacy_ref_text("GCASH 998877") == ("GCASH 998877", None)


def test_decode_empty_values():
    assert decode_legacy_ref_text(None) == (None, None)
    assert decode_legacy_ref_text("   ") == (None, None)


def test_decode_drops_unparseable_start():
    ref, choice = decode_legacy_ref_text("ref:1; start:2025-13-45T99:00:00Z")
    assert ref == "1"
    assert choice is None


def test_decode_slot_only():
    _, choice = decode_legacy_ref_text("slot:18:00-20:00")
    assert choice == ScheduleChoice(start=None, slot="18:00-20:00")
    assert choice.slot_hour == 18


def test_encode_ref_text():
    assert encode_ref_text(" 123 ") == "ref:123"
    assert encode_ref_text("") is None
    assert encode_ref_text(None) is None


def test_parse_row_with_legacy_schedule():
    proof = parse_payment_row(_row(ref_text="ref:12345; start:2025-01-01T08:00:00Z; slot:08:00-10:00"))
    assert proof.reference == "12345"
    assert proof.schedule_choice.start == datetime(2025, 1, 1, 8, 0, tzinfo=UTC)
    assert proof.created_at == datetime(2024, 12, 20, 3, 0, tzinfo=UTC)
    assert proof.is_approved


def test_structured_choice_wins_over_legacy():
    proof = parse_payment_row(
        _row(
            ref_text="ref:1; start:2025-01-01T08:00:00Z; slot:08:00-10:00",
            schedule_choice={"start": "2025-02-01T00:00:00Z", "slot": "18:00-20:00"},
        )
    )
    assert proof.schedule_choice == ScheduleChoice(
        start=datetime(2025, 2, 1, tzinfo=UTC), slot="18:00-20:00"
    )


def test_parse_normalizes_program_and_level():
    proof = parse_payment_row(_row(program_id="Virtual Marketing Assistant", level="Expert Level"))
    assert proof.program_id == "vmarketing"
    assert proof.level == "expert"


@pytest.mark.parametrize(
    "overrides",
    [
        {"id": ""},
        {"user_id": None},
        {"status": "refunded"},
        {"program_id": "zzz"},
        {"level": "master"},
        {"created_at": "yesterday-ish"},
    ],
)
def test_parse_rejects_bad_rows(overrides):
    with pytest.raises(RowParseError):
        parse_payment_row(_row(**overrides))


def test_parse_rows_collects_rejections(caplog):
    rows = [_row(), _row(id="p2", status="weird")]
    with caplog.at_level(logging.WARNING):
        proofs, rejected = parse_payment_rows(rows)
    assert [p.id for p in proofs] == ["p1"]
    assert rejected[0][0]["id"] == "p2"
    assert "Skipping payment row p2" in caplog.text


def test_payment_row_payload_is_pending_with_structured_choice():
    now = datetime(2025, 1, 1, 1, 2, 3, tzinfo=UTC)
    payload = payment_row_payload(
        user_id="u1",
        program_id="vadmin",
        level="intermediate",
        image_url="https://example.com/r.png",
        created_at=now,
        reference="777",
        schedule_choice=ScheduleChoice(start=datetime(2025, 1, 5, tzinfo=UTC), slot="08:00-10:00"),
    )
    assert payload["status"] == "pending"
    assert payload["amount"] == 7000
    assert payload["credits_awarded"] == 3
    assert payload["ref_text"] == "ref:777"
    assert payload["schedule_choice"] == {"start": "2025-01-05T00:00:00.000Z", "slot": "08:00-10:00"}
    assert payload["created_at"] == "2025-01-01T01:02:03.000Z"
    assert payload["approved_at"] is None
