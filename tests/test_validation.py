import pytest

from src.validation import (
    MAX_RECEIPT_BYTES,
    validate_enrollment,
    validate_receipt,
    validate_review,
    validate_signup,
    validate_suspension_days,
)


def _form(**overrides):
    form = {
        "first_name": "Maria",
        "last_name": "Santos",
        "email": "maria@example.com",
        "phone": "09171234567",
        "city": "Quezon City",
        "province": "Metro Manila",
        "zip": "1100",
        "program": "Virtual Data Analysis Assistant Training Program",
        "goals": "Freelance analytics",
        "ice_name": "Jose Santos",
        "ice_phone": "09181234567",
        "agree_terms": True,
        "agree_data": True,
    }
    form.update(overrides)
    return form


def test_valid_enrollment_has_no_errors():
    assert validate_enrollment(_form()) == {}


def test_enrollment_field_errors():
    errors = validate_enrollment(
        _form(first_name=" ", email="bad@", phone="0917", ice_phone="", agree_data=False)
    )
    assert errors == {
        "first_name": "Required.",
        "email": "Invalid email.",
        "phone": "Enter 11-digit mobile number.",
        "ice_phone": "Required.",
        "agree_data": "Consent to data processing is required.",
    }


def test_signup_rules():
    assert validate_signup("Ana", "ana@gmail.com", "secret1", "secret1") == {}
    errors = validate_signup("", "ana@yahoo.com", "123", "123")
    assert set(errors) == {"name", "email", "password"}
    assert validate_signup("Ana", "ana@gmail.com", "secret1", "secret2") == {
        "confirm": "Passwords do not match"
    }


@pytest.mark.parametrize(
    "filename, ctype, size, ok",
    [
        ("r.png", "image/png", 1024, True),
        ("r.JPG", "image/jpeg", 1024, True),
        ("r.gif", "image/gif", 1024, False),
        ("r.png", "image/png", MAX_RECEIPT_BYTES + 1, False),
        ("r.png", "image/png", 0, False),
        (None, "image/png", 10, False),
    ],
)
def test_receipt_rules(filename, ctype, size, ok):
    assert (validate_receipt(filename, ctype, size) == {}) is ok


def test_review_rules():
    assert "login" in validate_review(False, "A", "B")
    assert validate_review(True, "", "") == {
        "name": "Please enter your display name.",
        "comment": "Please add a short comment.",
    }
    assert validate_review(True, "A", "Great") == {}


@pytest.mark.parametrize("raw, ok", [("3", True), ("0.5", True), ("0", False), ("-2", False), ("abc", False), ("inf", False)])
def test_suspension_days(raw, ok):
    assert (validate_suspension_days(raw) == {}) is ok
