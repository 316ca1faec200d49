import bcrypt
from fastapi import APIRouter, Depends, HTTPException, status
from src.auth import AuthContext, get_current_auth
from src.auth.jwt import create_access_token
from src.db import supabase
from src.models.auth import LoginRequest, LoginResponse, MeResponse

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _verify_password(password: str, password_hash: str | None) -> bool:
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except ValueError:
        return False


@router.post("/login", response_model=LoginResponse)
async def login(data: LoginRequest):
    """Login with email and password, returns JWT."""
    result = supabase.table("users").select(
        "id, email, type, password_hash"
    ).eq("email", data.email).is_("deleted_at", "null").execute()

    if not result.data:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password"
        )

    user = result.data[0]

    if not _verify_password(data.password, user.get("password_hash")):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password"
        )

    token = create_access_token(user_id=user["id"], role=user["type"])
    return LoginResponse(access_token=token)


@router.get("/me", response_model=MeResponse)
async def me(auth: AuthContext = Depends(get_current_auth)):
    """Return the identity behind the current session."""
    return MeResponse(
        user_id=auth.user_id,
        email=auth.email,
        role=auth.role,
        auth_method=auth.auth_method,
        permissions=list(auth.permissions),
    )
