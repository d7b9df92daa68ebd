from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt
from passlib.context import CryptContext

from app.core.config import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def encode_token(claims: Dict[str, Any], expires_delta: timedelta) -> str:
    """Sign a claim set; ``iat``/``exp`` are set here."""
    now = datetime.now(timezone.utc)
    payload = {**claims, "iat": now, "exp": now + expires_delta}
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Dict[str, Any]:
    """
    Verify signature and expiry.

    Raises ``jwt.ExpiredSignatureError`` for an expired token and
    ``jwt.InvalidTokenError`` for anything else that does not verify.
    """
    return jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
