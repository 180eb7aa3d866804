# chatplatform/api/deps.py
"""
Shared FastAPI dependencies: database session, bearer-token identity,
admin guard and the upstream chat client.
"""

from dataclasses import dataclass

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from chatplatform.auth.tokens import decode_access_token
from chatplatform.db.session import get_db
from chatplatform.llm.client import get_llm_client
from chatplatform.utils.logger import setup_logger

logger = setup_logger(__name__)

security = HTTPBearer(auto_error=False)

TOKEN_REQUIRED = "Authorization token required"
TOKEN_INVALID = "Invalid or expired token"
ADMIN_REQUIRED = "Access denied: Admin privileges required"


@dataclass
class CurrentUser:
    """Identity carried by a verified bearer token."""
    id: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> CurrentUser:
    """
    Extract and verify the bearer token.

    Usage in routes:
        @router.get("/protected")
        async def protected_route(user: CurrentUser = Depends(get_current_user)):
            ...
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=TOKEN_REQUIRED,
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=TOKEN_INVALID,
            headers={"WWW-Authenticate": "Bearer"},
        )

    return CurrentUser(id=str(payload["userId"]), role=payload.get("role", "user"))


async def require_admin(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not current_user.is_admin:
        logger.warning(f"Non-admin {current_user.id} attempted an admin route")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=ADMIN_REQUIRED)
    return current_user


__all__ = ["CurrentUser", "get_current_user", "require_admin", "get_db", "get_llm_client", "security"]
