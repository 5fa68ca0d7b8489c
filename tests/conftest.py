"""
Shared fixtures: an in-memory credential store and an API client wired to it.
"""

import asyncio
import itertools

import pytest
from fastapi.testclient import TestClient

from auth.dependencies import get_credential_store
from auth.errors import DuplicateEmail, NotFound
from auth.store import Account
from config.settings import config

TEST_SECRET = "test-secret-key-with-at-least-32-bytes!"


class FakeCredentialStore:
    """
    Stand-in for ``CredentialStore`` keyed by email.

    The existence check and the insert happen without an ``await`` in
    between, which makes them atomic on the event loop just like the
    database's unique constraint.
    """

    def __init__(self):
        self.accounts = {}
        self._ids = itertools.count(1)

    async def create(self, name, email, password_hash):
        await asyncio.sleep(0)
        if email in self.accounts:
            raise DuplicateEmail()
        account = Account(id=next(self._ids), name=name, email=email, password_hash=password_hash)
        self.accounts[email] = account
        return account.id

    async def find_by_email(self, email):
        await asyncio.sleep(0)
        try:
            return self.accounts[email]
        except KeyError:
            raise NotFound("Student not found") from None

    async def find_by_id(self, account_id):
        await asyncio.sleep(0)
        for account in self.accounts.values():
            if account.id == account_id:
                return account
        raise NotFound("Student not found")


@pytest.fixture(autouse=True)
def jwt_secret(monkeypatch):
    monkeypatch.setattr(config, "jwt_secret", TEST_SECRET)
    return TEST_SECRET


@pytest.fixture
def store():
    return FakeCredentialStore()


@pytest.fixture
def app(store):
    from main import create_app

    application = create_app(manage_database=False)
    application.dependency_overrides[get_credential_store] = lambda: store
    return application


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
