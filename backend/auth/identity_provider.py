"""Registration and credential checks backing the bearer tokens."""

import logging

from passlib.context import CryptContext
from sqlalchemy.orm import Session

from backend.auth import jwt_handler
from backend.auth.identity import Identity
from backend.core.exceptions import UnauthenticatedError, UserExistsError, ValidationFailedError
from backend.database import unit_of_work
from backend.models.user import PROFESSOR_ROLE, STUDENT_ROLE, USER_ROLES, User

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    if not hashed_password:
        return False
    return pwd_context.verify(password, hashed_password)


def issue_token(user: User) -> str:
    return jwt_handler.create_access_token(subject=str(user.id), role=user.role)


def register_user(
    db: Session,
    *,
    name: str,
    email: str,
    password: str,
    role: str,
    student_id: str | None = None,
    department: str | None = None,
) -> User:
    if role not in USER_ROLES:
        raise ValidationFailedError(f"Role must be one of: {', '.join(USER_ROLES)}.")
    if role == STUDENT_ROLE and not student_id:
        raise ValidationFailedError("Student ID is required for students.")
    if role == PROFESSOR_ROLE and not department:
        raise ValidationFailedError("Department is required for professors.")

    with unit_of_work(db):
        if db.query(User).filter(User.email == email).first():
            raise UserExistsError()

        user = User(
            name=name,
            email=email,
            hashed_password=hash_password(password),
            role=role,
            student_id=student_id if role == STUDENT_ROLE else None,
            department=department if role == PROFESSOR_ROLE else None,
        )
        db.add(user)

    db.refresh(user)
    logger.info("Registered %s user %s", user.role, user.id)
    return user


def authenticate(db: Session, email: str, password: str) -> tuple[Identity, User]:
    user = db.query(User).filter(User.email == email).first()
    if user is None or not verify_password(password, user.hashed_password):
        logger.warning("Rejected login for %s", email)
        raise UnauthenticatedError("Invalid credentials.")
    return Identity.from_user(user), user


def resolve_token(db: Session, token: str) -> tuple[Identity, User]:
    try:
        payload = jwt_handler.decode_access_token(token)
    except Exception as exc:
        raise UnauthenticatedError("Invalid token.") from exc

    subject = payload.get("sub")
    if not subject or not str(subject).isdigit():
        raise UnauthenticatedError("Invalid token subject.")

    user = db.get(User, int(subject))
    if user is None:
        raise UnauthenticatedError("User not found.")
    return Identity.from_user(user), user
