"""
Tests for contact form validation.
"""

import pytest

from catalog.errors import ValidationError
from catalog.validation import (
    CONFIRM_MESSAGE,
    EMAIL_MESSAGE,
    NAME_MESSAGE,
    PASSWORD_MESSAGE,
    validate_contact_form,
)


class TestValidateContactForm:
    """Tests for validate_contact_form."""

    def test_valid_form_is_trimmed(self):
        form = validate_contact_form("  Ada ", " ada@example.com ", "secret123", "secret123")
        assert form.name == "Ada"
        assert form.email == "ada@example.com"

    def test_short_name(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_contact_form(" A ", "ada@example.com", "secret123", "secret123")
        assert exc_info.value.errors == {"name": NAME_MESSAGE}

    @pytest.mark.parametrize("email", ["ada", "ada@example", "ada @example.com", "@example.com"])
    def test_invalid_email(self, email):
        with pytest.raises(ValidationError) as exc_info:
            validate_contact_form("Ada", email, "secret123", "secret123")
        assert exc_info.value.errors == {"email": EMAIL_MESSAGE}

    @pytest.mark.parametrize("password", ["short1", "lettersonly", "12345678", "secret-123"])
    def test_invalid_password(self, password):
        with pytest.raises(ValidationError) as exc_info:
            validate_contact_form("Ada", "ada@example.com", password, password)
        assert exc_info.value.errors == {"password": PASSWORD_MESSAGE}

    def test_mismatched_confirmation(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_contact_form("Ada", "ada@example.com", "secret123", "secret124")
        assert exc_info.value.errors == {"confirm_password": CONFIRM_MESSAGE}

    def test_all_errors_reported_together(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_contact_form("", "nope", "abc", "xyz")
        assert set(exc_info.value.errors) == {"name", "email", "password", "confirm_password"}
        assert exc_info.value.errors["confirm_password"] == CONFIRM_MESSAGE
