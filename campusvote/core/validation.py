"""Input validation utilities for student registration and login."""

import re

from campusvote.core.config import settings


class PasswordValidator:
    """Validate password length."""

    MAX_LENGTH = 128

    @classmethod
    def validate(cls, password: str) -> tuple[bool, str | None]:
        """
        Validate password length.

        Returns:
            Tuple of (is_valid, error_message)
        """
        min_length = settings.PASSWORD_MIN_LENGTH
        if not password or len(password) < min_length:
            return False, f"Password must be at least {min_length} characters"

        if len(password) > cls.MAX_LENGTH:
            return False, f"Password must not exceed {cls.MAX_LENGTH} characters"

        return True, None


class UniversityEmailValidator:
    """Validate that an email belongs to the university domain."""

    @classmethod
    def pattern(cls) -> re.Pattern[str]:
        domain = re.escape(settings.UNIVERSITY_EMAIL_DOMAIN)
        return re.compile(rf"^[^\s@]+@{domain}$")

    @classmethod
    def validate(cls, email: str) -> tuple[bool, str | None]:
        if not email or not cls.pattern().match(email):
            return (
                False,
                f"Valid university email (@{settings.UNIVERSITY_EMAIL_DOMAIN}) is required",
            )
        return True, None


def sanitize_string(value: str | None, max_length: int = 200) -> str:
    """
    Sanitize string input.

    Args:
        value: String to sanitize
        max_length: Maximum allowed length

    Returns:
        Sanitized string
    """
    if not value:
        return ""

    value = value[:max_length]

    # Remove null bytes
    value = value.replace("\x00", "")

    return value.strip()


def validate_registration(
    *,
    name: str,
    email: str,
    password: str,
    student_id: str,
    department: str,
    terms_accepted: bool,
) -> dict[str, str]:
    """Return field -> message for every invalid registration field."""
    errors: dict[str, str] = {}

    if not name:
        errors["name"] = "Name is required"

    valid, message = UniversityEmailValidator.validate(email)
    if not valid:
        errors["email"] = message or "Invalid email"

    valid, message = PasswordValidator.validate(password)
    if not valid:
        errors["password"] = message or "Invalid password"

    if not student_id:
        errors["studentId"] = "Student ID is required"
    if not department:
        errors["department"] = "Department is required"
    if not terms_accepted:
        errors["terms"] = "You must accept the terms"

    return errors
