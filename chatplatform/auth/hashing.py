# chatplatform/auth/hashing.py
import bcrypt

from chatplatform.config import SECURITY

# bcrypt only looks at the first 72 bytes
BCRYPT_MAX_BYTES = 72


def _to_bytes(password: str) -> bytes:
    return password.encode('utf-8')[:BCRYPT_MAX_BYTES]


def get_password_hash(password: str) -> str:
    """Generate a bcrypt hash for a password."""
    salt = bcrypt.gensalt(rounds=SECURITY.bcrypt_rounds)
    return bcrypt.hashpw(_to_bytes(password), salt).decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check if a plain password matches the hash."""
    try:
        return bcrypt.checkpw(_to_bytes(plain_password), hashed_password.encode('utf-8'))
    except ValueError:
        # Malformed stored hash
        return False
