# chatplatform/auth/tokens.py
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict

from jose import jwt, JWTError

from chatplatform.config import SECURITY


def create_access_token(user_id: str, role: str = "user", expires_delta: Optional[timedelta] = None) -> str:
    """
    Creates a signed bearer token carrying the user id and role.
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=SECURITY.access_token_expire_minutes)

    now = datetime.now(timezone.utc)
    to_encode = {
        "userId": user_id,
        "role": role,
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(to_encode, SECURITY.secret_key, algorithm=SECURITY.algorithm)


def decode_access_token(token: str) -> Optional[Dict]:
    """
    Decodes and validates a token. Returns None when the signature is
    invalid, the token is expired, or the user id claim is missing.
    """
    try:
        payload = jwt.decode(token, SECURITY.secret_key, algorithms=[SECURITY.algorithm])
    except JWTError:
        return None
    if not payload.get("userId"):
        return None
    return payload
