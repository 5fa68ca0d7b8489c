"""
Password hashing and verification.

Uses bcrypt for password hashing with automatic salting and a configurable
work factor (``config.bcrypt_rounds``, 10 by default).  bcrypt is CPU-bound,
so request handlers use the ``*_async`` variants, which run in a worker
thread and leave the event loop free for other requests.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import bcrypt

from auth.errors import HashFailure
from config.settings import config

logger = logging.getLogger(__name__)

# bcrypt only reads the first 72 bytes; bcrypt>=5 raises instead of truncating.
_BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """Hash a password with bcrypt (auto-salted)."""
    try:
        salt = bcrypt.gensalt(rounds=rounds or config.bcrypt_rounds)
        return bcrypt.hashpw(_encode(password), salt).decode("utf-8")
    except (ValueError, TypeError) as exc:
        raise HashFailure() from exc


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time comparison against a bcrypt hash."""
    try:
        return bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
    except (ValueError, TypeError):
        logger.warning("Stored password hash is not a valid bcrypt digest")
        return False


async def hash_password_async(password: str, rounds: Optional[int] = None) -> str:
    return await asyncio.to_thread(hash_password, password, rounds)


async def verify_password_async(password: str, password_hash: str) -> bool:
    return await asyncio.to_thread(verify_password, password, password_hash)
