"""
Session lifecycle: sign-up, login, token verification and logout.

Passwords are stored as bcrypt hashes. Sessions are HS256 JWTs that expire
one hour after issuance; logout records the token id in the revocation
table so a logged-out token stops working before its natural expiry.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

import bcrypt
from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from config import SESSION_TTL_SECONDS, Settings
from errors import AuthError, ConflictError
from models import RevokedToken, User
from utils.jwt import create_jwt, verify_jwt

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"


class SessionIssuer:
    """Issues and revokes session tokens for users in the credential store"""

    def __init__(self, settings: Settings):
        self._secret_key = settings.jwt_secret_key
        self._rounds = settings.bcrypt_rounds
        # Checked against when the email is unknown so both failure paths hash once
        self._dummy_hash = self.hash_password("not-a-real-password")

    def hash_password(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    @staticmethod
    def check_password(password: str, password_hash: str) -> bool:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))

    def signup(self, session: Session, email: str, password: str) -> User:
        """
        Register a new user

        Raises:
            ConflictError: If the email is already registered
        """
        existing = session.exec(select(User).where(User.email == email)).first()
        if existing:
            raise ConflictError("Email is already registered")

        user = User(email=email, password_hash=self.hash_password(password))
        session.add(user)
        try:
            session.commit()
        except IntegrityError:
            session.rollback()
            raise ConflictError("Email is already registered")
        session.refresh(user)

        logger.info("User registered: %s", user.id)
        return user

    def login(self, session: Session, email: str, password: str) -> str:
        """
        Verify credentials and issue a session token

        Raises:
            AuthError: Same message whether the email is unknown or the password wrong
        """
        user = session.exec(select(User).where(User.email == email)).first()

        if user is None:
            self.check_password(password, self._dummy_hash)
            logger.info("Login failed: unknown email")
            raise AuthError(INVALID_CREDENTIALS_MESSAGE)

        if not self.check_password(password, user.password_hash):
            logger.info("Login failed: wrong password for user %s", user.id)
            raise AuthError(INVALID_CREDENTIALS_MESSAGE)

        logger.info("User logged in: %s", user.id)
        return create_jwt(user.id, user.email, self._secret_key, SESSION_TTL_SECONDS)

    def verify(self, session: Session, token: Optional[str]) -> Optional[dict]:
        """Return the token claims, or None if it is invalid, expired or revoked"""
        if not token:
            return None

        payload = verify_jwt(token, self._secret_key)
        if payload is None:
            return None

        if session.get(RevokedToken, payload["jti"]) is not None:
            return None

        return payload

    def logout(self, session: Session, token: Optional[str]) -> None:
        """Revoke the presented token, if it is still valid"""
        payload = verify_jwt(token, self._secret_key) if token else None
        now = datetime.now(timezone.utc)

        purge = delete(RevokedToken).where(RevokedToken.expires_at < now)
        session.exec(purge.execution_options(synchronize_session=False))

        if payload is not None and session.get(RevokedToken, payload["jti"]) is None:
            expires_at = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
            session.add(RevokedToken(jti=payload["jti"], expires_at=expires_at))
            logger.info("Session revoked for user %s", payload["sub"])

        session.commit()
