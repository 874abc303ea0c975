"""Account lookup, registration, and OAuth sync for portal users."""

import asyncio
import logging
import uuid
from typing import Any, Dict, Optional

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from config import is_admin_email
from database import as_utc, utcnow
from models.user import User
from services.passwords import hash_password, verify_password
from services.session_token import create_session_token

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
OAUTH_PROVIDERS = {"google", "github"}


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def serialize_user(user: User) -> Dict[str, Any]:
    created_at = as_utc(user.created_at)
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "image": user.image,
        "provider": user.provider,
        "role": user.role,
        "created_at": created_at.isoformat() if created_at else None,
    }


def session_payload(user: User) -> Dict[str, Any]:
    session = create_session_token(user.id, email=user.email, role=user.role)
    return {
        "user": serialize_user(user),
        "session_token": session["token"],
        "session_expires_at": session["expires_at"],
    }


async def get_user_by_id(db: AsyncSession, user_id: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == normalize_email(email)))
    return result.scalar_one_or_none()


async def require_user(db: AsyncSession, user_id: str) -> User:
    user = await get_user_by_id(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def validate_new_password(password: str) -> None:
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"Password must be at least {MIN_PASSWORD_LENGTH} characters long",
        )


async def register_credentials_user(db: AsyncSession, *, name: str, email: str, password: str) -> User:
    name = (name or "").strip()
    email = normalize_email(email)
    if not name or not email or not password:
        raise HTTPException(status_code=400, detail="Name, email, and password are required")
    validate_new_password(password)

    if await get_user_by_email(db, email):
        raise HTTPException(status_code=409, detail="User with this email already exists")

    user = User(
        id=str(uuid.uuid4()),
        email=email,
        name=name[:100],
        password_hash=await asyncio.to_thread(hash_password, password),
        provider="credentials",
        role="admin" if is_admin_email(email) else "user",
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info("Registered credentials user %s", user.id)
    return user


async def authenticate_credentials(db: AsyncSession, *, email: str, password: str) -> User:
    user = await get_user_by_email(db, email)
    if not user or user.provider != "credentials":
        raise HTTPException(status_code=401, detail="Invalid email or password")
    # PBKDF2 is CPU-bound; keep it off the event loop.
    if not await asyncio.to_thread(verify_password, password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid email or password")
    return user


async def upsert_oauth_user(
    db: AsyncSession,
    *,
    provider: str,
    provider_id: str,
    email: str,
    name: Optional[str] = None,
    image: Optional[str] = None,
) -> User:
    """Create or refresh the portal user behind an OAuth sign-in."""
    provider = (provider or "").strip().lower()
    if provider not in OAUTH_PROVIDERS:
        raise HTTPException(status_code=400, detail=f"Unsupported OAuth provider: {provider}")
    email = normalize_email(email)
    if not email or not provider_id:
        raise HTTPException(status_code=400, detail="provider_id and email are required")

    result = await db.execute(
        select(User).where(User.provider == provider, User.provider_id == provider_id)
    )
    user = result.scalar_one_or_none()
    if not user:
        user = await get_user_by_email(db, email)

    if not user:
        user = User(
            id=str(uuid.uuid4()),
            email=email,
            name=(name or email.split("@", 1)[0])[:100],
            image=image,
            provider=provider,
            provider_id=provider_id,
            role="admin" if is_admin_email(email) else "user",
            email_verified_at=utcnow(),
        )
        db.add(user)
    else:
        user.email = email
        if name:
            user.name = name[:100]
        if image:
            user.image = image
        if user.provider != "credentials":
            user.provider = provider
            user.provider_id = provider_id
        if is_admin_email(email):
            user.role = "admin"

    await db.commit()
    await db.refresh(user)
    return user
