"""
FastAPI dependencies for authentication.

Provides ``db_session``, ``get_credential_store`` and
``get_current_user_id``, the dependency that guards every protected route.
"""

from __future__ import annotations

import logging
from typing import AsyncGenerator, Optional

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from auth.errors import Forbidden, Unauthenticated
from auth.store import CredentialStore
from auth.tokens import TokenExpired, TokenInvalid, verify_token
from database.session import get_db_session

logger = logging.getLogger(__name__)

_BEARER_PREFIX = "bearer "


async def db_session(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[AsyncSession, None]:
    """Yield a DB session for route handlers."""
    yield session


def get_credential_store(session: AsyncSession = Depends(db_session)) -> CredentialStore:
    return CredentialStore(session)


def _extract_token(authorization: Optional[str]) -> Optional[str]:
    if authorization is None:
        return None
    token = authorization.strip()
    # The raw token is the documented form; "Bearer <token>" is also accepted.
    if token[: len(_BEARER_PREFIX)].lower() == _BEARER_PREFIX:
        token = token[len(_BEARER_PREFIX):].strip()
    return token or None


async def get_current_user_id(
    request: Request,
    authorization: Optional[str] = Header(None, alias="Authorization"),
) -> str:
    """
    Verify the token in the ``Authorization`` header and return the
    authenticated student id (string form of the account id).

    No header → ``Unauthenticated`` (401).  Any verification failure →
    ``Forbidden`` (403) with the same message whether the token was
    malformed, tampered or expired.
    """
    token = _extract_token(authorization)
    if token is None:
        raise Unauthenticated()

    try:
        claims = verify_token(token)
    except TokenExpired:
        logger.debug("Rejected expired token on %s", request.url.path)
        raise Forbidden() from None
    except TokenInvalid as exc:
        logger.debug("Rejected invalid token on %s: %s", request.url.path, exc)
        raise Forbidden() from None

    request.state.user_id = claims.subject_id
    request.state.claims = claims
    return claims.subject_id
