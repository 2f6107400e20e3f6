from typing import Optional

from fastapi import Depends, Request
from sqlmodel import Session

from config import SESSION_COOKIE_NAME
from database import get_session
from errors import AuthError


def read_session_token(request: Request) -> Optional[str]:
    """
    Session token from the cookie, falling back to an Authorization header

    Returns:
        Raw token string, or None if the request carries none
    """
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if token:
        return token

    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None

    parts = auth_header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1]


async def verify_session(request: Request, session: Session = Depends(get_session)) -> str:
    """
    Dependency that authenticates the caller

    Args:
        request: FastAPI request object
        session: Database session

    Returns:
        Authenticated user id

    Raises:
        AuthError: If token is missing, invalid, expired or revoked
    """
    token = read_session_token(request)
    if not token:
        raise AuthError("Not authenticated")

    payload = request.app.state.session_issuer.verify(session, token)
    if not payload:
        raise AuthError("Invalid or expired token")

    return payload["sub"]
