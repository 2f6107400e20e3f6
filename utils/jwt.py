import jwt
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import uuid4

ALGORITHM = "HS256"


def create_jwt(user_id: str, email: str, secret_key: str, ttl_seconds: int) -> str:
    """
    Sign a session token

    Args:
        user_id: Subject of the token
        email: User email, carried as a claim
        secret_key: Symmetric HS256 key
        ttl_seconds: Lifetime from now

    Returns:
        Encoded JWT string
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "email": email,
        "jti": uuid4().hex,
        "iat": now,
        "exp": now + timedelta(seconds=ttl_seconds),
    }
    return jwt.encode(payload, secret_key, algorithm=ALGORITHM)


def verify_jwt(token: str, secret_key: str) -> Optional[dict]:
    """
    Verify JWT token and return payload

    Args:
        token: JWT token string
        secret_key: Symmetric HS256 key

    Returns:
        Decoded payload if valid and unexpired, None otherwise
    """
    try:
        return jwt.decode(
            token,
            secret_key,
            algorithms=[ALGORITHM],
            options={"require": ["sub", "exp", "jti"]},
        )
    except jwt.InvalidTokenError:
        return None
