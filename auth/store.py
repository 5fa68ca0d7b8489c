"""
Credential store: persistence adapter for student accounts.

Wraps an ``AsyncSession`` and turns SQLAlchemy failures into the API's
error taxonomy: the unique-email violation becomes ``DuplicateEmail``,
every other database error becomes ``StoreFailure``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from auth.errors import DuplicateEmail, NotFound, StoreFailure
from database.models import Student

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Account:
    id: int
    name: str
    email: str
    password_hash: str = field(repr=False)

    def public_profile(self) -> dict:
        return {"id": self.id, "name": self.name, "email": self.email}


def _to_account(row: Student) -> Account:
    return Account(id=row.id, name=row.name, email=row.email, password_hash=row.password)


class CredentialStore:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, name: str, email: str, password_hash: str) -> int:
        """Insert a new account and return its id."""
        student = Student(name=name, email=email, password=password_hash)
        self._session.add(student)
        try:
            await self._session.flush()
            await self._session.commit()
        except IntegrityError as exc:
            await self._session.rollback()
            logger.info("Registration rejected, email already in use")
            raise DuplicateEmail() from exc
        except SQLAlchemyError as exc:
            await self._session.rollback()
            logger.error("Failed to insert student: %s", exc)
            raise StoreFailure() from exc
        return student.id

    async def find_by_email(self, email: str) -> Account:
        return await self._find_one(Student.email == email, "email")

    async def find_by_id(self, account_id: int) -> Account:
        return await self._find_one(Student.id == account_id, "id")

    async def _find_one(self, clause, key: str) -> Account:
        try:
            result = await self._session.execute(select(Student).where(clause))
            row = result.scalar_one_or_none()
        except SQLAlchemyError as exc:
            logger.error("Student lookup by %s failed: %s", key, exc)
            raise StoreFailure() from exc
        if row is None:
            raise NotFound("Student not found")
        return _to_account(row)
