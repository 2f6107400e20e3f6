from fastapi import Response

from config import SESSION_COOKIE_NAME, SESSION_TTL_SECONDS, Settings


def set_cookie_policy(
    response: Response,
    *,
    name: str,
    value: str,
    max_age_seconds: int,
    secure: bool,
    same_site: str,
) -> None:
    """Write a session cookie; every session cookie goes through here"""
    response.set_cookie(
        key=name,
        value=value,
        max_age=max_age_seconds,
        path="/",
        httponly=True,
        secure=secure,
        samesite=same_site,
    )


def set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    set_cookie_policy(
        response,
        name=SESSION_COOKIE_NAME,
        value=token,
        max_age_seconds=SESSION_TTL_SECONDS,
        secure=settings.cookie_secure,
        same_site=settings.cookie_samesite,
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    set_cookie_policy(
        response,
        name=SESSION_COOKIE_NAME,
        value="",
        max_age_seconds=0,
        secure=settings.cookie_secure,
        same_site=settings.cookie_samesite,
    )
