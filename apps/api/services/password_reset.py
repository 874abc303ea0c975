"""Single-use password reset tokens for credentials accounts."""

import asyncio
import logging
import secrets
from datetime import timedelta
from typing import Optional

from fastapi import HTTPException
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from config import settings
from database import utcnow
from models.password_reset import PasswordReset
from services.accounts import get_user_by_email, get_user_by_id, normalize_email, validate_new_password
from services.passwords import hash_password

logger = logging.getLogger(__name__)

GENERIC_RESET_MESSAGE = "If an account with that email exists, we have sent a password reset link."


def generate_reset_token() -> str:
    return secrets.token_urlsafe(32)


def build_reset_url(token: str) -> str:
    return f"{settings.APP_BASE_URL.rstrip('/')}/auth/reset-password?token={token}"


def deliver_reset_link(email: str, token: str) -> str:
    """Log the reset link; there is no mail transport configured."""
    reset_url = build_reset_url(token)
    logger.info(
        "Password reset requested for %s: %s (expires in %d minutes)",
        email,
        reset_url,
        settings.PASSWORD_RESET_TTL_MINUTES,
    )
    return reset_url


async def _active_reset(db: AsyncSession, email: str) -> Optional[PasswordReset]:
    result = await db.execute(
        select(PasswordReset)
        .where(
            PasswordReset.email == email,
            PasswordReset.used.is_(False),
            PasswordReset.expires_at > utcnow(),
        )
        .limit(1)
    )
    return result.scalar_one_or_none()


async def request_password_reset(db: AsyncSession, email: str) -> str:
    """Issue a reset token and return the message shown to the caller."""
    email = normalize_email(email)
    if not email:
        raise HTTPException(status_code=400, detail="Email is required")

    user = await get_user_by_email(db, email)
    if not user:
        return GENERIC_RESET_MESSAGE

    if user.provider != "credentials":
        raise HTTPException(
            status_code=400,
            detail=(
                f"This account uses {user.provider} authentication. "
                f"Please sign in with {user.provider} instead."
            ),
        )

    if await _active_reset(db, email):
        raise HTTPException(
            status_code=429,
            detail="A password reset link has already been sent. Please check your email before requesting another.",
        )

    token = generate_reset_token()
    db.add(
        PasswordReset(
            email=email,
            token=token,
            user_id=user.id,
            expires_at=utcnow() + timedelta(minutes=settings.PASSWORD_RESET_TTL_MINUTES),
        )
    )
    await db.commit()
    deliver_reset_link(email, token)
    return "Password reset link has been sent to your email address."


async def reset_password(db: AsyncSession, *, token: str, password: str) -> None:
    if not token or not password:
        raise HTTPException(status_code=400, detail="Token and password are required")
    validate_new_password(password)

    result = await db.execute(
        select(PasswordReset).where(
            PasswordReset.token == token,
            PasswordReset.used.is_(False),
            PasswordReset.expires_at > utcnow(),
        )
    )
    reset_record = result.scalar_one_or_none()
    if not reset_record:
        raise HTTPException(status_code=400, detail="Invalid or expired reset token")

    user = await get_user_by_id(db, reset_record.user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    user.password_hash = await asyncio.to_thread(hash_password, password)
    await db.execute(
        update(PasswordReset)
        .where(PasswordReset.user_id == user.id, PasswordReset.used.is_(False))
        .values(used=True)
    )
    await db.commit()
    logger.info("Password reset completed for user %s", user.id)
