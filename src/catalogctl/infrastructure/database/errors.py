"""Classification of driver errors into catalog error kinds.

PostgreSQL reports SQLSTATE codes (``23505`` unique violation, ``23503``
foreign-key violation); SQLite only reports a message, so both are
checked.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy.exc import IntegrityError

from catalogctl.domain.errors import CatalogError, DependencyError, ValidationError

logger = logging.getLogger(__name__)

UNIQUE_KEY_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"

_SQLITE_MESSAGES: dict[str, str] = {
    UNIQUE_KEY_VIOLATION: "UNIQUE constraint failed",
    FOREIGN_KEY_VIOLATION: "FOREIGN KEY constraint failed",
}


def error_code(exc: BaseException) -> str | None:
    """Return the SQLSTATE-style code for a driver error, if recognisable."""
    orig: Any = getattr(exc, "orig", None)
    if orig is None:
        return None
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code:
        return str(code)
    text = str(orig)
    for sqlstate, marker in _SQLITE_MESSAGES.items():
        if marker in text:
            return sqlstate
    return None


def error_detail(exc: BaseException) -> str:
    """The driver's human-readable detail message for *exc*."""
    orig: Any = getattr(exc, "orig", None)
    diag = getattr(orig, "diag", None)
    detail = getattr(diag, "message_detail", None)
    if detail:
        return str(detail)
    return str(orig if orig is not None else exc)


def is_unique_violation(exc: BaseException) -> bool:
    return isinstance(exc, IntegrityError) and error_code(exc) == UNIQUE_KEY_VIOLATION


@contextmanager
def translate_errors(
    message: str,
    *,
    on_unique: type[CatalogError] = ValidationError,
) -> Iterator[None]:
    """Re-raise anything escaping the block as a catalog error kind.

    Already-classified :class:`CatalogError` passes through unchanged.
    A unique violation becomes *on_unique* carrying the driver detail.
    Anything else becomes :class:`DependencyError` with *message*, the
    original exception chained as ``__cause__``.
    """
    try:
        yield
    except CatalogError:
        raise
    except IntegrityError as exc:
        if is_unique_violation(exc):
            raise on_unique(error_detail(exc), detail={"db_code": UNIQUE_KEY_VIOLATION}) from exc
        logger.warning("Integrity failure: %s", message, exc_info=True)
        raise DependencyError(message, detail={"db_code": error_code(exc)}) from exc
    except Exception as exc:
        logger.warning("Storage failure: %s", message, exc_info=True)
        raise DependencyError(message) from exc
