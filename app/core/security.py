"""Session tokens and identifier generation.

The session layer is a stand-in for real authentication: tokens are signed
so a stale or foreign token is detectable, but nothing here protects
credentials.
"""

import secrets
import string
import time
from datetime import datetime, timedelta
from typing import Optional

from jose import JWTError, jwt

from app.config import settings

_ID_ALPHABET = string.ascii_lowercase + string.digits


def create_session_token(user_id: str, role: Optional[str] = None,
                         expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a signed session token for a logged-in user.

    Args:
        user_id: Id of the session user
        role: Active role at login time
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT session token
    """
    expire = datetime.utcnow() + (
        expires_delta or timedelta(minutes=settings.SESSION_TOKEN_EXPIRE_MINUTES)
    )
    to_encode = {
        "sub": user_id,
        "exp": expire,
        "type": "session",
        # jti keeps two logins in the same second from producing equal tokens
        "jti": secrets.token_hex(8),
    }
    if role:
        to_encode["role"] = role
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_session_token(token: str) -> Optional[dict]:
    """
    Decode and validate a session token.

    Returns:
        Decoded payload, or None if the token is invalid, expired or not a session token
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    if payload.get("type") != "session":
        return None
    return payload


def generate_record_id(collection: str) -> str:
    """
    Generate a record id namespaced by collection, e.g. ``student-1718000000000-k3j9x0a1b``.

    The singular prefix drops one trailing ``s`` from the collection name.
    """
    prefix = collection[:-1] if collection.endswith("s") else collection
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"{prefix}-{int(time.time() * 1000)}-{suffix}"
