"""Catalog error kinds.

Every public catalog operation either returns a fully populated result
or raises exactly one of the kinds below.  The service layer converts
them into :class:`~catalogctl.services.result.ServiceError` payloads
using :attr:`CatalogError.code`.
"""

from __future__ import annotations

from typing import Any, ClassVar


class CatalogError(Exception):
    """Base class for classified catalog failures."""

    code: ClassVar[str] = "CATALOG_ERROR"

    def __init__(self, message: str, *, detail: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail: dict[str, Any] = detail or {}


class NotFoundError(CatalogError):
    """A lookup by id found nothing (or only inactive rows)."""

    code = "NOT_FOUND"


class ValidationError(CatalogError):
    """Bad input: malformed cursor, uniqueness violation, duplicate association."""

    code = "VALIDATION_FAILED"


class ConflictError(CatalogError):
    """A relation edge already exists for the child."""

    code = "CONFLICT"


class DependencyError(CatalogError):
    """Unanticipated storage failure. The driver error is kept as ``__cause__``."""

    code = "DEPENDENCY_FAILED"
