from fastapi import APIRouter, Depends, Request, Response, status
from sqlmodel import Session

from database import get_session
from middleware.auth import read_session_token
from schemas import Credentials, MessageResponse
from utils.cookies import clear_session_cookie, set_session_cookie

router = APIRouter()


@router.post("/signup", status_code=status.HTTP_201_CREATED, response_model=MessageResponse)
def signup(
    credentials: Credentials,
    request: Request,
    session: Session = Depends(get_session)
) -> MessageResponse:
    """
    Register a new account

    Args:
        credentials: Email and password
        request: FastAPI request
        session: Database session

    Returns:
        Confirmation message
    """
    request.app.state.session_issuer.signup(session, credentials.email, credentials.password)
    return MessageResponse(message="User created successfully")


@router.post("/login", response_model=MessageResponse)
def login(
    credentials: Credentials,
    request: Request,
    response: Response,
    session: Session = Depends(get_session)
) -> MessageResponse:
    """
    Log in and set the session cookie

    Args:
        credentials: Email and password
        request: FastAPI request
        response: Response the cookie is written to
        session: Database session

    Returns:
        Confirmation message
    """
    token = request.app.state.session_issuer.login(session, credentials.email, credentials.password)
    set_session_cookie(response, token, request.app.state.settings)
    return MessageResponse(message="Login successful")


@router.post("/logout", response_model=MessageResponse)
def logout(
    request: Request,
    response: Response,
    session: Session = Depends(get_session)
) -> MessageResponse:
    """Revoke the current session and clear its cookie"""
    request.app.state.session_issuer.logout(session, read_session_token(request))
    clear_session_cookie(response, request.app.state.settings)
    response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate"
    return MessageResponse(message="Logout successful")
