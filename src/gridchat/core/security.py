"""Bearer token helpers built on python-jose."""
from __future__ import annotations

import uuid
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from gridchat.core.settings import settings


def create_access_token(subject: uuid.UUID | str, extra_claims: dict[str, str] | None = None) -> str:
    """Create JWT access token identifying a profile."""
    to_encode: dict[str, object] = {"sub": str(subject)}
    if extra_claims:
        to_encode.update(extra_claims)
    expire = datetime.now(UTC) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode["exp"] = expire
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_access_token(token: str) -> uuid.UUID:
    """Return the profile id carried by a token.

    Raises:
        JWTError: If the token is invalid, expired or carries a malformed subject.
    """
    payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    subject = payload.get("sub")
    if subject is None:
        raise JWTError("Token has no subject")
    try:
        return uuid.UUID(subject)
    except ValueError as err:
        raise JWTError("Token subject is not a profile id") from err
