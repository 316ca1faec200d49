from __future__ import annotations

from typing import Any


class DomainError(Exception):
    """Base class for errors raised by the entitlement domain."""

    category = "domain_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(DomainError):
    category = "validation_error"


class NotFound(DomainError):
    category = "not_found"


def domain_error_http_status(exc: DomainError) -> int:
    return 404 if isinstance(exc, NotFound) else 400


def domain_error_detail(exc: DomainError) -> dict[str, Any]:
    return {"detail": exc.message}
