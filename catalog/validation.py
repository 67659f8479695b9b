"""
Contact form validation.

The contact form is the only free-form input besides search. Validation rules:
- name: at least 2 characters after trimming
- email: something@something.tld, no whitespace
- password: at least 8 characters, letters and digits only, at least one of each
- confirm_password: must equal password
"""

import re
from typing import Dict

import pydantic
from pydantic import BaseModel, field_validator, model_validator

from catalog.errors import ValidationError

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PASSWORD_PATTERN = re.compile(r"^(?=.*[A-Za-z])(?=.*\d)[A-Za-z\d]{8,}$")

NAME_MESSAGE = "Please enter a valid name (minimum 2 characters)"
EMAIL_MESSAGE = "Please enter a valid email address"
PASSWORD_MESSAGE = "Password must be at least 8 characters with letters and numbers"
CONFIRM_MESSAGE = "Passwords do not match"


class ContactForm(BaseModel):
    name: str
    email: str
    password: str
    confirm_password: str

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 2:
            raise ValueError(NAME_MESSAGE)
        return value

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        value = value.strip()
        if not EMAIL_PATTERN.match(value):
            raise ValueError(EMAIL_MESSAGE)
        return value

    @field_validator("password")
    @classmethod
    def _check_password(cls, value: str) -> str:
        if not PASSWORD_PATTERN.match(value):
            raise ValueError(PASSWORD_MESSAGE)
        return value

    @model_validator(mode="after")
    def _check_confirmation(self) -> "ContactForm":
        if self.password != self.confirm_password:
            raise ValueError(CONFIRM_MESSAGE)
        return self


def validate_contact_form(name: str, email: str, password: str, confirm_password: str) -> ContactForm:
    """
    Validate contact form fields.

    Returns:
        The validated ContactForm (name and email trimmed)

    Raises:
        ValidationError: With one user-facing message per invalid field
    """
    errors: Dict[str, str] = {}
    try:
        form = ContactForm(name=name, email=email, password=password, confirm_password=confirm_password)
    except pydantic.ValidationError as e:
        for error in e.errors():
            field = str(error["loc"][0]) if error["loc"] else "confirm_password"
            errors.setdefault(field, _message_for(error))
        # Field validators short-circuit the model validator; check the pair here too
        if password != confirm_password:
            errors.setdefault("confirm_password", CONFIRM_MESSAGE)
        raise ValidationError(errors) from e
    return form


def _message_for(error: Dict) -> str:
    ctx = error.get("ctx") or {}
    if "error" in ctx:
        return str(ctx["error"])
    return str(error.get("msg", "Invalid value"))
