from datetime import datetime, timedelta, timezone

from src.catalog import session_titles_for
from src.entitlements import resolve_entitlements, schedule_window
from src.models import APPROVED, PENDING, PaymentProof, ScheduleWindow
from src.payment_rows import parse_payment_row
from src.session_schedule import (
    ENDED,
    NOT_STARTED,
    OPEN,
    can_join,
    generate_sessions,
    group_by_day,
    join_state,
    program_countdowns,
    sessions_for_day,
    sessions_for_proofs,
)

UTC = timezone.utc
TEAMS = "https://teams.microsoft.com"


def _scenario_proof():
    return parse_payment_row(
        {
            "id": "pay-1",
            "user_id": "u1",
            "program_id": "vdaa",
            "level": "beginner",
            "status": "approved",
            "created_at": "2024-12-28T00:00:00Z",
            "ref_text": "ref:12345; start:2025-01-01T08:00:00Z; slot:08:00-10:00",
        }
    )


def test_scenario_seven_daily_sessions():
    proof = _scenario_proof()
    window = schedule_window(proof, 120, UTC)
    sessions = generate_sessions(window, TEAMS, 120, UTC)

    assert len(sessions) == 7
    assert sessions[0].starts_at == datetime(2025, 1, 1, 8, 0, tzinfo=UTC)
    for i, session in enumerate(sessions):
        assert session.id == f"pay-1-{i}"
        assert session.ends_at - session.starts_at == timedelta(minutes=120)
        assert session.title.endswith(f" {i + 1}")
        assert session.title.rsplit(" ", 1)[0] in session_titles_for("vdaa", "beginner")
        assert session.join_url == TEAMS
    for prev, nxt in zip(sessions, sessions[1:]):
        assert nxt.starts_at - prev.starts_at == timedelta(hours=24)
    assert window.ends_at == sessions[-1].ends_at == datetime(2025, 1, 7, 10, 0, tzinfo=UTC)


def test_generation_is_idempotent():
    window = schedule_window(_scenario_proof(), 120, UTC)
    assert generate_sessions(window, TEAMS, 120, UTC) == generate_sessions(window, TEAMS, 120, UTC)


def test_session_count_matches_level_days():
    for level, days in (("beginner", 7), ("intermediate", 10), ("expert", 14)):
        window = ScheduleWindow(
            "p", "vmarketing", level, datetime(2025, 1, 1, 8, tzinfo=UTC), datetime(2025, 2, 1, tzinfo=UTC)
        )
        assert len(generate_sessions(window, TEAMS, 90, UTC)) == days


def test_display_text():
    window = schedule_window(_scenario_proof(), 120, UTC)
    first = generate_sessions(window, TEAMS, 120, UTC)[0]
    assert first.display_text == "2025-01-01 08:00 AM - 2025-01-01 10:00 AM"


def test_join_state_boundaries():
    session = generate_sessions(schedule_window(_scenario_proof(), 120, UTC), TEAMS, 120, UTC)[0]
    assert join_state(session, session.starts_at - timedelta(seconds=1)) == NOT_STARTED
    assert join_state(session, session.starts_at) == OPEN
    assert join_state(session, session.ends_at) == OPEN
    assert join_state(session, session.ends_at + timedelta(seconds=1)) == ENDED
    assert can_join(session, session.starts_at + timedelta(minutes=5))


def test_sessions_for_proofs_skips_pending_and_sorts():
    approved = _scenario_proof()
    pending = PaymentProof(
        id="pay-2",
        user_id="u1",
        program_id="vadmin",
        level="beginner",
        status=PENDING,
        created_at=datetime(2024, 12, 1, tzinfo=UTC),
    )
    other = PaymentProof(
        id="pay-3",
        user_id="u1",
        program_id="vadmin",
        level="beginner",
        status=APPROVED,
        created_at=datetime(2025, 1, 1, 6, 0, tzinfo=UTC),
    )
    sessions = sessions_for_proofs([approved, pending, other], TEAMS, 120, UTC)
    assert len(sessions) == 14
    assert not any(s.id.startswith("pay-2") for s in sessions)
    assert sessions == sorted(sessions, key=lambda s: s.starts_at)
    assert sessions[0].id == "pay-3-0"


def test_today_filter_and_grouping():
    sessions = generate_sessions(schedule_window(_scenario_proof(), 120, UTC), TEAMS, 120, UTC)
    today = sessions_for_day(sessions, datetime(2025, 1, 3, 23, 0, tzinfo=UTC), UTC)
    assert [s.id for s in today] == ["pay-1-2"]
    grouped = group_by_day(sessions, UTC)
    assert list(grouped) == [f"2025-01-0{d}" for d in range(1, 8)]


def test_program_countdowns():
    ents = resolve_entitlements([_scenario_proof()], 120, tz=UTC)
    before = program_countdowns(ents, datetime(2025, 1, 1, 7, 0, tzinfo=UTC))[0]
    assert not before.started and not before.ended
    assert before.until_start_ms == 3_600_000

    during = program_countdowns(ents, datetime(2025, 1, 7, 9, 0, tzinfo=UTC))[0]
    assert during.started and not during.ended
    assert during.until_start_ms == 0
    assert during.until_end_ms == 3_600_000

    after = program_countdowns(ents, datetime(2025, 2, 1, tzinfo=UTC))[0]
    assert after.ended
    assert after.until_end_ms == 0
