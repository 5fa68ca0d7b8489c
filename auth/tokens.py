"""
JWT session token creation and verification.

Tokens are HS256 JWTs (PyJWT) carrying ``sub`` (the student id), ``iat``
and ``exp``.  Secret, algorithm and lifetime come from ``config``
(env vars: ``JWT_SECRET``, ``JWT_ALGORITHM``, ``JWT_EXPIRY_SECONDS``).
There is no revocation list; expiry is the only bound on a token's life.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from config.settings import config

_REQUIRED_CLAIMS = ["sub", "iat", "exp"]


class TokenInvalid(Exception):
    """Malformed, tampered, wrongly signed or otherwise unusable token."""


class TokenExpired(TokenInvalid):
    """Well-formed, correctly signed token past its ``exp``."""


@dataclass(frozen=True)
class SessionClaims:
    subject_id: str
    issued_at: datetime
    expires_at: datetime


def create_token(subject_id: int | str, *, now: Optional[datetime] = None) -> str:
    """Create a signed token for ``subject_id`` valid for ``jwt_expiry_seconds``."""
    issued_at = now or datetime.now(timezone.utc)
    payload = {
        "sub": str(subject_id),
        "iat": issued_at,
        "exp": issued_at + timedelta(seconds=config.jwt_expiry_seconds),
    }
    return jwt.encode(payload, config.jwt_secret, algorithm=config.jwt_algorithm)


def verify_token(token: str) -> SessionClaims:
    """
    Verify ``token`` and return its claims.

    Raises ``TokenExpired`` once ``exp`` has passed and ``TokenInvalid`` for
    anything else, including tokens signed with another secret or algorithm.
    """
    try:
        payload = jwt.decode(
            token,
            config.jwt_secret,
            algorithms=[config.jwt_algorithm],
            options={"require": _REQUIRED_CLAIMS},
        )
    except jwt.ExpiredSignatureError as exc:
        raise TokenExpired("token expired") from exc
    except jwt.InvalidTokenError as exc:
        raise TokenInvalid(str(exc)) from exc

    subject_id = payload["sub"]
    if not isinstance(subject_id, str) or not subject_id:
        raise TokenInvalid("invalid subject")

    return SessionClaims(
        subject_id=subject_id,
        issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    )
