from __future__ import annotations

from typing import Final

LEGACY_ROLE_ALIASES: Final[dict[str, str]] = {
    "superuser": "admin",
    "customer": "user",
}

CANONICAL_ROLES: Final[set[str]] = {"admin", "tam", "user"}

COMPANIES_MANAGE: Final[str] = "companies.manage"
SUPPORT_LEVELS_MANAGE: Final[str] = "support_levels.manage"
ENTITLEMENTS_MANAGE: Final[str] = "entitlements.manage"
COMPANIES_READ: Final[str] = "companies.read"
TICKETS_READ: Final[str] = "tickets.read"
TICKETS_WRITE: Final[str] = "tickets.write"

ROLE_PERMISSION_BUNDLES: Final[dict[str, set[str]]] = {
    "admin": {
        COMPANIES_MANAGE,
        SUPPORT_LEVELS_MANAGE,
        ENTITLEMENTS_MANAGE,
        COMPANIES_READ,
        TICKETS_READ,
        TICKETS_WRITE,
    },
    "tam": {
        COMPANIES_READ,
        TICKETS_READ,
        TICKETS_WRITE,
    },
    "user": {
        TICKETS_READ,
        TICKETS_WRITE,
    },
}


def normalize_role(role: str) -> str:
    raw = (role or "").strip().lower()
    normalized = LEGACY_ROLE_ALIASES.get(raw, raw)
    if normalized not in CANONICAL_ROLES:
        raise ValueError(f"Unsupported role: {role}")
    return normalized


def permissions_for_role(role: str) -> set[str]:
    normalized = normalize_role(role)
    return set(ROLE_PERMISSION_BUNDLES[normalized])


def is_admin_role(role: str) -> bool:
    return normalize_role(role) == "admin"
