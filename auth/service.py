"""
Registration and login flows.

Both flows take a ``CredentialStore`` so the transport layer decides where
accounts live; neither ever logs or returns the plaintext password.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from typing import Optional

from auth.errors import InvalidCredentials, MissingField, NotFound
from auth.password import hash_password, hash_password_async, verify_password_async
from auth.store import CredentialStore
from auth.tokens import create_token

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    """Emails are compared and stored stripped and lower-cased."""
    return email.strip().lower()


def _require(password: Optional[str], **fields: Optional[str]) -> None:
    missing = [name for name, value in fields.items() if not value or not value.strip()]
    # Whitespace in a password is significant; only emptiness is rejected.
    if not password:
        missing.append("password")
    if missing:
        raise MissingField(*missing)


@functools.lru_cache(maxsize=1)
def _dummy_hash() -> str:
    # Verified against when the email is unknown so both failure paths do
    # the same bcrypt work.
    return hash_password("dummy-password-for-timing")


async def register_student(
    store: CredentialStore,
    name: Optional[str],
    email: Optional[str],
    password: Optional[str],
) -> int:
    """
    Create a student account and return its id.

    Raises ``MissingField`` for absent/empty input and ``DuplicateEmail``
    when the address is taken; ``HashFailure`` and ``StoreFailure``
    propagate as internal errors.
    """
    _require(password, name=name, email=email)

    password_hash = await hash_password_async(password)

    student_id = await store.create(name.strip(), normalize_email(email), password_hash)
    logger.info("Registered student %s", student_id)
    return student_id


async def login_student(
    store: CredentialStore,
    email: Optional[str],
    password: Optional[str],
) -> str:
    """
    Check the credentials and return a signed session token.

    An unknown email and a wrong password both raise the same
    ``InvalidCredentials``.
    """
    _require(password, email=email)

    try:
        account = await store.find_by_email(normalize_email(email))
    except NotFound:
        await verify_password_async(password, await asyncio.to_thread(_dummy_hash))
        raise InvalidCredentials() from None

    if not await verify_password_async(password, account.password_hash):
        raise InvalidCredentials()

    token = create_token(account.id)
    logger.info("Login: student %s", account.id)
    return token
