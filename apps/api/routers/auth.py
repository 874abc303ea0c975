"""
Authentication router: credentials accounts, OAuth session sync, and password reset.
"""

import hmac
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from database import get_db
from routers.auth_scope import AuthContext, get_auth_context
from routers.envelope import envelope
from routers.rate_limit import rate_limit
from services.accounts import (
    authenticate_credentials,
    register_credentials_user,
    require_user,
    serialize_user,
    session_payload,
    upsert_oauth_user,
)
from services.password_reset import request_password_reset, reset_password

router = APIRouter()
logger = logging.getLogger(__name__)


class RegisterRequest(BaseModel):
    name: str = ""
    email: str = ""
    password: str = ""


class LoginRequest(BaseModel):
    email: str
    password: str


class SyncOAuthSessionRequest(BaseModel):
    provider: str
    provider_id: str
    email: str
    name: Optional[str] = None
    image: Optional[str] = None


class ForgotPasswordRequest(BaseModel):
    email: str = ""


class ResetPasswordRequest(BaseModel):
    token: str = ""
    password: str = ""


@router.post(
    "/register",
    status_code=201,
    dependencies=[Depends(rate_limit("auth_register", limit=10, window_seconds=3600))],
)
async def register(request: RegisterRequest, db: AsyncSession = Depends(get_db)):
    """Create a credentials account and return a session."""
    user = await register_credentials_user(
        db,
        name=request.name,
        email=request.email,
        password=request.password,
    )
    return envelope(session_payload(user))


@router.post(
    "/login",
    dependencies=[Depends(rate_limit("auth_login", limit=20, window_seconds=300))],
)
async def login(request: LoginRequest, db: AsyncSession = Depends(get_db)):
    user = await authenticate_credentials(db, email=request.email, password=request.password)
    return envelope(session_payload(user))


@router.post("/sync/oauth")
async def sync_oauth_session(
    request: SyncOAuthSessionRequest,
    x_auth_sync_secret: Optional[str] = Header(default=None),
    db: AsyncSession = Depends(get_db),
):
    """
    Persist a frontend OAuth sign-in into the users table.

    Only the trusted frontend knows AUTH_SYNC_SECRET; the endpoint is disabled without it.
    """
    expected = (settings.AUTH_SYNC_SECRET or "").strip()
    if not expected:
        raise HTTPException(status_code=503, detail="OAuth session sync is not configured.")
    if not x_auth_sync_secret or not hmac.compare_digest(x_auth_sync_secret, expected):
        raise HTTPException(status_code=401, detail="Invalid sync secret.")

    user = await upsert_oauth_user(
        db,
        provider=request.provider,
        provider_id=request.provider_id,
        email=request.email,
        name=request.name,
        image=request.image,
    )
    logger.info("Synced %s OAuth session for user %s", request.provider, user.id)
    return envelope(session_payload(user))


@router.get("/me")
async def get_current_user(
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    """Get the profile behind the current session."""
    user = await require_user(db, auth.user_id)
    return envelope(serialize_user(user))


@router.post("/logout")
async def logout(auth: AuthContext = Depends(get_auth_context)):
    # Sessions are stateless JWTs; the client discards its token.
    return envelope({"user_id": auth.user_id, "logged_out": True})


@router.post(
    "/forgot-password",
    dependencies=[Depends(rate_limit("auth_forgot_password", limit=5, window_seconds=900))],
)
async def forgot_password(request: ForgotPasswordRequest, db: AsyncSession = Depends(get_db)):
    message = await request_password_reset(db, request.email)
    return {"success": True, "message": message}


@router.post("/reset-password")
async def reset_password_route(request: ResetPasswordRequest, db: AsyncSession = Depends(get_db)):
    await reset_password(db, token=request.token, password=request.password)
    return {
        "success": True,
        "message": "Password has been reset successfully. You can now sign in with your new password.",
    }
