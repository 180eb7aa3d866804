from .hashing import get_password_hash, verify_password
from .tokens import create_access_token, decode_access_token
from .service import (
    register_user,
    authenticate_user,
    create_admin,
    reset_password,
    issue_token,
    get_user_by_email,
)

__all__ = [
    "get_password_hash",
    "verify_password",
    "create_access_token",
    "decode_access_token",
    "register_user",
    "authenticate_user",
    "create_admin",
    "reset_password",
    "issue_token",
    "get_user_by_email",
]
