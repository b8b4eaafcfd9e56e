"""
Tests for signup / login input validation.
"""

import pytest

from auth.errors import ValidationError
from auth.validation import (
    MAX_PASSWORD_LENGTH,
    MIN_PASSWORD_LENGTH,
    normalize_email,
    validate_email,
    validate_login,
    validate_signup,
    validate_signup_password,
)


def _reason(fn, *args) -> ValidationError:
    with pytest.raises(ValidationError) as info:
        fn(*args)
    return info.value


class TestEmail:
    @pytest.mark.parametrize("email", [None, ""])
    def test_missing(self, email):
        err = _reason(validate_email, email)
        assert err.code == "EMAIL_REQUIRED"
        assert err.field == "email"

    @pytest.mark.parametrize(
        "email",
        ["plainaddress", "a@b", "a b@c.com", "a@@b.com", "@b.com", "a@b c.com", "a@b.com\n"],
    )
    def test_malformed(self, email):
        err = _reason(validate_email, email)
        assert err.code == "INVALID_EMAIL_FORMAT"
        assert err.status_code == 400

    def test_valid_is_returned_unchanged(self):
        assert validate_email("Jane.Doe@Example.COM") == "Jane.Doe@Example.COM"

    def test_normalize_lowercases(self):
        assert normalize_email("Jane.Doe@Example.COM") == "jane.doe@example.com"


class TestSignupPassword:
    def test_missing(self):
        err = _reason(validate_signup_password, "")
        assert err.code == "PASSWORD_REQUIRED"
        assert err.field == "password"

    def test_too_short_echoes_length(self):
        err = _reason(validate_signup_password, "x" * 5)
        assert err.code == "PASSWORD_TOO_SHORT"
        assert err.meta == {"minLength": 6, "currentLength": 5}
        assert "Current length: 5" in err.message

    def test_too_long_echoes_length(self):
        err = _reason(validate_signup_password, "x" * 129)
        assert err.code == "PASSWORD_TOO_LONG"
        assert err.meta == {"maxLength": 128, "currentLength": 129}

    @pytest.mark.parametrize("length", [MIN_PASSWORD_LENGTH, MAX_PASSWORD_LENGTH])
    def test_bounds_inclusive(self, length):
        assert validate_signup_password("p" * length) == "p" * length

    def test_length_counts_code_points(self):
        err = _reason(validate_signup_password, "\U0001F600" * 5)
        assert err.meta == {"minLength": 6, "currentLength": 5}


class TestOrdering:
    def test_signup_checks_email_before_password(self):
        err = _reason(validate_signup, "not-an-email", "")
        assert err.code == "INVALID_EMAIL_FORMAT"

    def test_login_has_no_length_rule(self):
        assert validate_login("a@b.com", "abc") == ("a@b.com", "abc")

    def test_login_requires_password(self):
        err = _reason(validate_login, "a@b.com", None)
        assert err.code == "PASSWORD_REQUIRED"
