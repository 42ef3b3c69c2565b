"""Input checks shared by the services. Every failure is a BadRequestError."""

import re
from typing import Any, Optional

from pydantic import EmailStr, TypeAdapter, ValidationError

from kanban.core.exceptions import BadRequestError

TITLE_MAX_LENGTH = 64
LOGIN_MIN_LENGTH, LOGIN_MAX_LENGTH = 4, 32
PERSON_NAME_MIN_LENGTH, PERSON_NAME_MAX_LENGTH = 2, 32
EMAIL_MAX_LENGTH = 64
COLOR_MAX_LENGTH = 7

PASSWORD_PATTERN = re.compile(r"(?=.*[a-z])(?=.*[A-Z])(?=.*\d).{8,20}")

_email_adapter = TypeAdapter(EmailStr)


def check_identifier(value: Optional[Any], what: str) -> None:
    if value is None:
        raise BadRequestError(f"The {what} is missing.")


def check_title(value: Optional[str], what: str) -> None:
    if not value or len(value) > TITLE_MAX_LENGTH:
        raise BadRequestError(
            f"The {what} title is required and must not exceed {TITLE_MAX_LENGTH} characters."
        )


def check_description(value: Optional[str]) -> None:
    if not value:
        raise BadRequestError("The card description is required.")


def check_color(value: Optional[str]) -> None:
    if not value or len(value) > COLOR_MAX_LENGTH:
        raise BadRequestError(
            f"The card color is required and must not exceed {COLOR_MAX_LENGTH} characters."
        )


def check_login(value: Optional[str]) -> None:
    if value is None or not LOGIN_MIN_LENGTH <= len(value) <= LOGIN_MAX_LENGTH:
        raise BadRequestError(
            f"The login must be between {LOGIN_MIN_LENGTH} and {LOGIN_MAX_LENGTH} characters."
        )


def check_person_name(name: Optional[str], surname: Optional[str]) -> None:
    for value in (name, surname):
        if value is None or not PERSON_NAME_MIN_LENGTH <= len(value) <= PERSON_NAME_MAX_LENGTH:
            raise BadRequestError(
                f"Name and surname must be between {PERSON_NAME_MIN_LENGTH} and {PERSON_NAME_MAX_LENGTH} characters."
            )


def check_email(value: Optional[str]) -> None:
    if not value or "<" in value or any(c.isspace() for c in value):
        raise BadRequestError("The email address is invalid.")
    try:
        _email_adapter.validate_python(value)
    except ValidationError as exc:
        raise BadRequestError("The email address is invalid.") from exc
    if len(value) > EMAIL_MAX_LENGTH:
        raise BadRequestError(
            f"The email address must not exceed {EMAIL_MAX_LENGTH} characters."
        )


def check_password_strength(value: Optional[str]) -> None:
    if value is None or not PASSWORD_PATTERN.fullmatch(value):
        raise BadRequestError(
            "The password needs a lowercase letter, an uppercase letter, a digit, and 8 to 20 characters."
        )


def check_passwords_match(password: Optional[str], confirmation: Optional[str]) -> None:
    if password != confirmation:
        raise BadRequestError("The passwords do not match.")
