from datetime import datetime, timedelta, timezone
from typing import Any, cast

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.orm import Session

from eduverse.config import settings
from eduverse.infrastructure.db.models import User
from eduverse.infrastructure.logging import get_logger

logger = get_logger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return cast(str, pwd_context.hash(password))


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return cast(bool, pwd_context.verify(plain_password, hashed_password))


TOKEN_TYPE = "access"


def create_access_token(user_id: int, expires_minutes: int | None = None) -> str:
    lifetime = expires_minutes if expires_minutes is not None else settings.jwt_access_token_expire_minutes
    issued_at = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "typ": TOKEN_TYPE,
        "iat": issued_at,
        "exp": issued_at + timedelta(minutes=lifetime),
    }
    return cast(str, jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm))


def decode_access_token(token: str) -> int | None:
    """Return the user id carried by a valid access token, otherwise None."""
    try:
        payload = cast(dict[str, Any], jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm]))
    except JWTError:
        return None
    if payload.get("typ", TOKEN_TYPE) != TOKEN_TYPE:
        return None
    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        return None


def authenticate_user(db: Session, email: str, password: str) -> User | None:
    normalized_email = email.strip().lower()
    user = db.execute(select(User).where(User.email == normalized_email)).scalar_one_or_none()
    if user is None:
        logger.info("authentication_rejected", email=normalized_email, reason="unknown_email")
        return None
    if not user.is_active:
        logger.info("authentication_rejected", user_id=user.id, reason="inactive")
        return None
    if not verify_password(password, user.hashed_password):
        logger.info("authentication_rejected", user_id=user.id, reason="bad_password")
        return None
    return user
