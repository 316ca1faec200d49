from src.auth.context import AuthContext
from src.auth.dependencies import (
    get_current_auth,
    require_admin,
    require_permission,
)
from src.auth.jwt import create_access_token

__all__ = [
    "AuthContext",
    "get_current_auth",
    "require_admin",
    "require_permission",
    "create_access_token",
]
