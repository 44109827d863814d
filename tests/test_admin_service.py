from datetime import datetime, timedelta, timezone

import pytest

from src.models import PaymentProof, Profile
from src.services import admin, enrollment

from conftest import FakeStore

UTC = timezone.utc
NOW = datetime(2025, 3, 1, 9, 0, tzinfo=UTC)


@pytest.fixture
def backend(monkeypatch):
    fake = FakeStore(
        {
            "profiles": [
                {"id": "u1", "email": "ana@gmail.com", "full_name": "Ana Cruz", "created_at": "2025-02-03T00:00:00Z"},
                {"id": "u1-dup", "email": "ANA@gmail.com", "full_name": "Ana again", "created_at": "2025-01-01T00:00:00Z"},
                {"id": "u2", "email": "ben@gmail.com", "full_name": "Ben Reyes", "role": "admin", "created_at": "2025-02-01T00:00:00Z"},
                {"id": "u3", "email": "cara@gmail.com", "full_name": "Cara Lim", "created_at": "2025-02-02T00:00:00Z"},
            ],
            "enroll_forms": [
                {"id": "f1", "user_id": "u1", "email": "ana@gmail.com", "submitted_at": "2025-02-05T00:00:00Z"},
                {"id": "f2", "user_id": None, "email": "cara@gmail.com", "submitted_at": "2025-02-06T00:00:00Z"},
                {"id": "f3", "user_id": "u1", "email": "ana@gmail.com", "submitted_at": "2025-02-10T00:00:00Z"},
            ],
            "payment_proofs": [
                {"id": "p1", "status": "pending"},
                {"id": "p2", "status": "approved"},
            ],
        }
    )
    monkeypatch.setattr(admin, "store", fake)
    monkeypatch.setattr(enrollment, "store", fake)
    return fake


def _proof(pid, status="pending", program="vdaa", level="beginner", user="u1"):
    return PaymentProof(
        id=pid,
        user_id=user,
        program_id=program,
        level=level,
        status=status,
        created_at=datetime(2025, 2, 1, tzinfo=UTC),
        amount=3000.0,
        credits_awarded=1,
    )


def test_list_users_dedupes_by_email_and_flags_enrollment(backend):
    users = admin.list_users()
    assert [u.id for u in users] == ["u1", "u3", "u2"]
    flags = {u.id: u.enrolled for u in users}
    assert flags == {"u1": True, "u3": True, "u2": False}


def test_filter_users_matches_name_email_or_role():
    users = [
        Profile(id="1", email="ana@gmail.com", full_name="Ana Cruz"),
        Profile(id="2", email="ben@gmail.com", full_name="Ben", role="admin"),
    ]
    assert [u.id for u in admin.filter_users(users, "cruz")] == ["1"]
    assert [u.id for u in admin.filter_users(users, "ADMIN")] == ["2"]
    assert len(admin.filter_users(users, "  ")) == 2


def test_paginate_clamps_page():
    items = list(range(23))
    rows, pages = admin.paginate(items, 3)
    assert rows == [20, 21, 22]
    assert pages == 3
    assert admin.paginate(items, 99)[0] == [20, 21, 22]
    assert admin.paginate(items, 0)[0] == list(range(10))
    assert admin.paginate([], 1) == ([], 1)


def test_suspend_and_unsuspend(backend):
    until = admin.suspend_user("u3", 2.5, NOW)
    assert until == NOW + timedelta(days=2.5)
    assert backend.tables["profiles"]["u3"]["suspended_until"] == "2025-03-03T21:00:00.000Z"
    admin.unsuspend_user("u3")
    assert backend.tables["profiles"]["u3"]["suspended_until"] is None


@pytest.mark.parametrize("days", [0, -1])
def test_suspend_requires_positive_days(backend, days):
    with pytest.raises(ValueError):
        admin.suspend_user("u3", days, NOW)


def test_latest_enrollment_prefers_newest(backend):
    user = Profile(id="u1", email="ana@gmail.com")
    assert admin.latest_enrollment(user)["id"] == "f3"
    assert admin.latest_enrollment(Profile(id="nobody")) is None


def test_proof_counts_and_filters():
    proofs = [
        _proof("a"),
        _proof("b", status="approved", program="vadmin"),
        _proof("c", status="rejected", level="expert", user="u2"),
    ]
    assert admin.proof_counts(proofs) == {"pending": 1, "approved": 1, "rejected": 1}
    assert [p.id for p in admin.filter_proofs(proofs)] == ["a"]
    assert [p.id for p in admin.filter_proofs(proofs, "all", "vadmin")] == ["b"]
    assert [p.id for p in admin.filter_proofs(proofs, "all", "expert")] == ["c"]

    profiles = {"u2": Profile(id="u2", email="ben@gmail.com", full_name="Ben Reyes")}
    assert [p.id for p in admin.filter_proofs(proofs, "all", "reyes", profiles)] == ["c"]


def test_proofs_frame_columns_and_values():
    profiles = {"u1": Profile(id="u1", email="ana@gmail.com", full_name="Ana Cruz")}
    frame = admin.proofs_frame([_proof("a"), _proof("b", user="ghost")], profiles, tz=UTC)
    assert list(frame.columns) == [
        "ID", "Submitted", "Learner", "Email", "Program", "Level", "Amount", "Status", "Credits",
    ]
    first = frame.iloc[0]
    assert first["Learner"] == "Ana Cruz"
    assert first["Status"] == "Pending"
    assert first["Level"] == "Beginner Level"
    assert frame.iloc[1]["Learner"] == "ghost"


def test_proofs_frame_empty():
    frame = admin.proofs_frame([])
    assert frame.empty
    assert "Status" in frame.columns


def test_dashboard_counts(backend):
    counts = admin.dashboard_counts()
    assert counts["applicants"] == 3
    assert counts["payments"] == 2
    assert counts["pending"] == 1
    assert counts["programs"] == 4
