"""
Auth API routes: register, login, me.

Route prefix: ``config.api_prefix`` (``/api`` by default)
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from auth.dependencies import get_credential_store, get_current_user_id
from auth.service import login_student, register_student
from auth.store import CredentialStore

router = APIRouter(tags=["auth"])


# ── Request / response schemas ─────────────────────────────────────────

# Fields are optional at the schema level; the flows report missing ones
# as a 400 with a readable message.


class RegisterRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class MessageResponse(BaseModel):
    message: str


class TokenResponse(BaseModel):
    token: str


class ProfileResponse(BaseModel):
    id: int
    name: str
    email: str


# ── Endpoints ──────────────────────────────────────────────────────────


@router.post("/register", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def register(
    req: RegisterRequest,
    store: CredentialStore = Depends(get_credential_store),
) -> Dict[str, Any]:
    """Register a new student."""
    await register_student(store, req.name, req.email, req.password)
    return {"message": "Registration successful"}


@router.post("/login", response_model=TokenResponse)
async def login(
    req: LoginRequest,
    store: CredentialStore = Depends(get_credential_store),
) -> Dict[str, Any]:
    """Login with email + password."""
    token = await login_student(store, req.email, req.password)
    return {"token": token}


@router.get("/me", response_model=ProfileResponse)
async def me(
    user_id: str = Depends(get_current_user_id),
    store: CredentialStore = Depends(get_credential_store),
) -> Dict[str, Any]:
    """Profile of the authenticated student."""
    account = await store.find_by_id(int(user_id))
    return account.public_profile()
