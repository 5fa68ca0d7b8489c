"""
REST API routes for student records: schedule, lookup, export.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from auth.dependencies import db_session, get_credential_store, get_current_user_id
from auth.errors import NotFound, StoreFailure
from auth.routes import ProfileResponse
from auth.store import CredentialStore
from config.settings import config
from database.helpers import export_tables, fetch_schedule
from database.session import async_session_factory

logger = logging.getLogger(__name__)

router = APIRouter(tags=["records"])


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    return async_session_factory


@router.get("/schedule")
async def get_schedule(
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(db_session),
) -> List[Dict[str, Any]]:
    """Schedule of the authenticated student."""
    try:
        rows = await fetch_schedule(session, int(user_id))
    except SQLAlchemyError as exc:
        logger.error("Schedule lookup for student %s failed: %s", user_id, exc)
        raise StoreFailure() from exc
    if not rows:
        raise NotFound("No schedule found")
    return rows


@router.get("/student/{student_id}", response_model=ProfileResponse)
async def get_student(
    student_id: int,
    store: CredentialStore = Depends(get_credential_store),
) -> Dict[str, Any]:
    account = await store.find_by_id(student_id)
    return account.public_profile()


@router.get("/export")
async def export_data(
    _auth_user_id: str = Depends(get_current_user_id),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> Dict[str, Any]:
    """Bulk export of the administrative tables."""
    try:
        return await export_tables(session_factory, config.export_tables, config.db_database)
    except SQLAlchemyError as exc:
        logger.error("Export failed: %s", exc)
        raise StoreFailure("Failed to export data") from exc


@router.get("/health")
async def health_check() -> Dict[str, str]:
    return {"status": "ok"}
