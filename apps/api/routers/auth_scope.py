"""Authentication dependencies for API user scoping."""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from config import is_admin_email
from services.session_token import decode_session_token


auth_scheme = HTTPBearer(auto_error=False)


@dataclass
class AuthContext:
    user_id: str
    email: Optional[str] = None
    role: str = "user"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin" or is_admin_email(self.email or "")


def ensure_user_scope(auth: AuthContext, supplied_user_id: Optional[str]) -> str:
    """Return the target user_id, rejecting cross-user access for non-admins."""
    if supplied_user_id and supplied_user_id != auth.user_id and not auth.is_admin:
        raise HTTPException(status_code=403, detail="user_id does not match authenticated session.")
    return supplied_user_id or auth.user_id


def ensure_owner_or_admin(auth: AuthContext, owner_id: Optional[str]) -> None:
    if owner_id != auth.user_id and not auth.is_admin:
        raise HTTPException(status_code=403, detail="Forbidden")


async def get_auth_context(
    credentials: HTTPAuthorizationCredentials = Depends(auth_scheme),
) -> AuthContext:
    """Resolve authenticated user from Bearer session token."""
    if not credentials or credentials.scheme.lower() != "bearer":
        raise HTTPException(status_code=401, detail="Missing Bearer session token.")

    try:
        payload = decode_session_token(credentials.credentials)
    except ValueError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc

    return AuthContext(
        user_id=str(payload.get("sub", "")),
        email=str(payload.get("email", "")) or None,
        role=str(payload.get("role", "user")) or "user",
    )


async def require_admin(auth: AuthContext = Depends(get_auth_context)) -> AuthContext:
    if not auth.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return auth
