from fastapi import Depends, Header, HTTPException, status
from src.auth.context import AuthContext
from src.auth.jwt import decode_access_token
from src.auth.permissions import is_admin_role
from src.db import supabase


def _extract_bearer_token(authorization: str | None) -> str | None:
    """Extract token from 'Bearer <token>' header."""
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1]


def _get_active_user(user_id: str) -> dict | None:
    """Load the user behind a session, ignoring deleted accounts."""
    result = supabase.table("users").select(
        "id, email, type"
    ).eq("id", user_id).is_("deleted_at", "null").execute()
    if not result.data:
        return None
    return result.data[0]


async def _validate_jwt(token: str) -> AuthContext | None:
    """Validate JWT session token. Returns AuthContext or None."""
    payload = decode_access_token(token)
    if not payload:
        return None

    user = _get_active_user(payload["sub"])
    if not user:
        return None

    return AuthContext(
        user_id=payload["sub"],
        role=user["type"],
        email=user.get("email"),
        auth_method="session",
    )


async def get_current_auth(authorization: str | None = Header(None)) -> AuthContext:
    token = _extract_bearer_token(authorization)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing authorization header",
        )

    auth = await _validate_jwt(token)
    if auth:
        return auth

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired token",
    )


async def require_admin(auth: AuthContext = Depends(get_current_auth)) -> AuthContext:
    """Authorization dependency for the back-office admin screens."""
    if not is_admin(auth):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin role required",
        )
    return auth


def is_admin(auth: AuthContext) -> bool:
    return is_admin_role(auth.role)


def require_permission(permission_key: str):
    async def _require(auth: AuthContext = Depends(get_current_auth)) -> AuthContext:
        if permission_key not in auth.permissions:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Permission required: {permission_key}",
            )
        return auth

    return _require
