# chatplatform/auth/service.py
"""
User registration, authentication and credential management.
"""

import hmac
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from chatplatform.auth.hashing import get_password_hash, verify_password
from chatplatform.auth.tokens import create_access_token
from chatplatform.config import SECURITY
from chatplatform.core.exceptions import (
    AuthenticationError,
    ConflictError,
    PermissionDeniedError,
    ValidationError,
)
from chatplatform.db.models import User
from chatplatform.utils.logger import setup_logger

logger = setup_logger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"
MIN_PASSWORD_LENGTH = 6

# Compared against when the email is unknown so both failure paths cost one bcrypt check
_DUMMY_HASH: Optional[str] = None


def _dummy_hash() -> str:
    global _DUMMY_HASH
    if _DUMMY_HASH is None:
        _DUMMY_HASH = get_password_hash("dummy-password-for-timing")
    return _DUMMY_HASH


def normalize_email(email: str) -> str:
    return email.strip().lower()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def register_user(db: Session, email: str, password: str, name: str, role: str = "user") -> User:
    """
    Create a user account.

    Raises:
        ConflictError if the email is already registered
    """
    if get_user_by_email(db, email):
        raise ConflictError("Email already registered")

    user = User(
        email=normalize_email(email),
        hashed_password=get_password_hash(password),
        name=name.strip(),
        role=role,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Concurrent registration won the unique index
        db.rollback()
        raise ConflictError("Email already registered")
    db.refresh(user)

    logger.info(f"User registered: {user.id} ({role})")
    return user


def authenticate_user(db: Session, email: str, password: str) -> User:
    """
    Verify credentials.

    Raises:
        AuthenticationError with the same message whether the email is
        unknown or the password is wrong
    """
    user = get_user_by_email(db, email)
    if not user:
        verify_password(password, _dummy_hash())
        raise AuthenticationError(INVALID_CREDENTIALS)

    if not verify_password(password, user.hashed_password):
        raise AuthenticationError(INVALID_CREDENTIALS)

    return user


def create_admin(db: Session, email: str, password: str, name: str, secret_key: str) -> User:
    """Bootstrap an admin account, gated by the configured shared secret."""
    configured = SECURITY.admin_secret_key
    if not configured or not hmac.compare_digest(str(secret_key or "").encode("utf-8"), configured.encode("utf-8")):
        raise PermissionDeniedError("Unauthorized: Invalid admin secret key")

    if not email or not password or not name:
        raise ValidationError("Email, password, and name are required")

    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    return register_user(db, email=email, password=password, name=name, role="admin")


def reset_password(db: Session, user: User, new_password: str) -> None:
    user.hashed_password = get_password_hash(new_password)
    db.commit()
    logger.info(f"Password reset for user {user.id}")


def issue_token(user: User) -> str:
    return create_access_token(user.id, user.role)
