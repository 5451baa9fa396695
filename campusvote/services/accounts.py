"""Student registration and login."""

from pydantic import BaseModel

from campusvote.core.errors import AuthenticationError, NotFoundError, ValidationError
from campusvote.core.logging_config import audit_logger
from campusvote.core.security import hash_password, verify_password
from campusvote.core.validation import PasswordValidator, sanitize_string, validate_registration
from campusvote.models import User
from campusvote.store.base import ElectionStore


class RegistrationRequest(BaseModel):
    name: str = ""
    email: str = ""
    password: str = ""
    student_id: str = ""
    department: str = ""
    terms_accepted: bool = False


async def register_user(store: ElectionStore, request: RegistrationRequest) -> User:
    """Create a student account. Student id and email must both be unused."""
    name = sanitize_string(request.name)
    email = sanitize_string(request.email).lower()
    student_id = sanitize_string(request.student_id, max_length=50)
    department = sanitize_string(request.department)

    errors = validate_registration(
        name=name,
        email=email,
        password=request.password,
        student_id=student_id,
        department=department,
        terms_accepted=request.terms_accepted,
    )
    if errors:
        raise ValidationError("Registration details are invalid", errors)

    user = User(
        student_id=student_id,
        name=name,
        email=email,
        password_hash=hash_password(request.password),
        department=department,
        terms_accepted=True,
    )

    async with store.transaction() as tx:
        users = await tx.get_users()
        if any(
            existing.email.lower() == email or existing.student_id == student_id
            for existing in users
        ):
            raise ValidationError(
                "User with this email or Student ID already exists",
                {"studentId": "Already registered"},
            )
        tx.put_users([*users, user])

    audit_logger.log_user_registration(student_id, department)
    return user


async def authenticate(store: ElectionStore, student_id: str, password: str) -> User:
    """Return the user whose student id and password match."""
    student_id = sanitize_string(student_id, max_length=50)
    if not student_id:
        raise ValidationError("Student ID is required", {"studentId": "Required"})

    valid, message = PasswordValidator.validate(password)
    if not valid:
        raise ValidationError(message or "Invalid password", {"password": message})

    user = await store.get_user(student_id)
    if user is None or not verify_password(password, user.password_hash):
        audit_logger.log_login_attempt(student_id, False, "invalid credentials")
        raise AuthenticationError("Invalid Student ID or Password")

    audit_logger.log_login_attempt(student_id, True)
    return user


async def get_user(store: ElectionStore, student_id: str) -> User:
    """Look up a user by student id."""
    user = await store.get_user(student_id)
    if user is None:
        raise NotFoundError(f"Student {student_id} not found")
    return user
