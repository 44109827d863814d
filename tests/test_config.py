from types import SimpleNamespace
from zoneinfo import ZoneInfo

import pytest

from src import config


@pytest.fixture(autouse=True)
def no_secrets(monkeypatch):
    monkeypatch.setattr(config, "st", SimpleNamespace(secrets={}))
    for name in (
        "ADMIN_EMAILS",
        "SESSION_MINUTES",
        "APP_TIMEZONE",
        "TEAMS_LINK",
        "PAYMENT_PROOFS_BUCKET",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    assert config.session_minutes() == 120
    assert config.app_timezone() == ZoneInfo("Asia/Manila")
    assert config.teams_link() == "https://teams.microsoft.com"
    assert config.payment_bucket() is None
    assert config.admin_emails() == []
    assert config.log_level() == "INFO"


def test_env_wins_over_secrets(monkeypatch):
    monkeypatch.setattr(config, "st", SimpleNamespace(secrets={"SESSION_MINUTES": "60"}))
    assert config.session_minutes() == 60
    monkeypatch.setenv("SESSION_MINUTES", "90")
    assert config.session_minutes() == 90


def test_admin_emails_are_lowercased(monkeypatch):
    monkeypatch.setenv("ADMIN_EMAILS", " Boss@Gmail.com, staff@gmail.com ,")
    assert config.admin_emails() == ["boss@gmail.com", "staff@gmail.com"]


def test_admin_emails_from_secrets_list(monkeypatch):
    monkeypatch.setattr(config, "st", SimpleNamespace(secrets={"ADMIN_EMAILS": ["A@x.com"]}))
    assert config.admin_emails() == ["a@x.com"]


@pytest.mark.parametrize("raw", ["abc", "0", "-5"])
def test_invalid_session_minutes(monkeypatch, raw):
    monkeypatch.setenv("SESSION_MINUTES", raw)
    with pytest.raises(RuntimeError):
        config.session_minutes()


def test_secrets_failure_falls_back(monkeypatch):
    class Broken:
        def get(self, name):
            raise FileNotFoundError("no secrets.toml")

    monkeypatch.setattr(config, "st", SimpleNamespace(secrets=Broken()))
    assert config.get_setting("TEAMS_LINK", "fallback") == "fallback"


def test_payment_bucket_override(monkeypatch):
    monkeypatch.setenv("PAYMENT_PROOFS_BUCKET", "tuklas-receipts")
    assert config.payment_bucket() == "tuklas-receipts"
