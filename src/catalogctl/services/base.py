"""BaseService: shared read/write surface over one repository class.

Every service receives a :class:`Catalog` at construction time and owns
its transaction boundaries via ``self._catalog.transaction()``.  Catalog
error kinds raised underneath are converted to a failed
:class:`ServiceResult`; nothing escapes as an exception.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any, ClassVar

from catalogctl.domain.errors import CatalogError
from catalogctl.domain.views import ViewOptions
from catalogctl.infrastructure.query.pagination import decode_cursor
from catalogctl.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from catalogctl.infrastructure.catalog import Catalog
    from catalogctl.infrastructure.query.pagination import Cursor
    from catalogctl.infrastructure.repositories.base import EntityRepository


class BaseService:
    """Base for the per-level services.

    Subclasses set :attr:`repository` and :attr:`noun` and add their
    level's ``create`` operation.

    Usage::

        class DomainService(BaseService):
            repository = DomainRepository
            noun = "domain"

            def create(self, name: str) -> ServiceResult:
                with self._catalog.transaction() as txn:
                    ...
    """

    repository: ClassVar[type[EntityRepository]]
    noun: ClassVar[str]

    def __init__(self, catalog: Catalog) -> None:
        self._catalog = catalog
        self._log = catalog.log

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(
        self,
        entity_id: str,
        *,
        fields: Iterable[str] | None = None,
        include_fields: bool = True,
    ) -> ServiceResult:
        """Fetch one entity with its related objects embedded."""
        op = f"get_{self.noun}"
        view = ViewOptions.of(fields, include_fields=include_fields)
        try:
            with self._catalog.connect() as txn:
                entity = self.repository(txn).get(entity_id, view)
        except CatalogError as exc:
            return self._failure(op, exc)
        return ServiceResult(ok=True, op=op, data=entity)

    def list(
        self,
        filters: Mapping[str, Any] | None = None,
        *,
        limit: int | None = None,
        cursor: str | None = None,
        fields: Iterable[str] | None = None,
        include_fields: bool = True,
    ) -> ServiceResult:
        """One page of entities, newest first.

        ``limit`` defaults to the configured page size and is clamped to
        the configured maximum (with a warning).  ``cursor`` is the
        ``next_offset`` token of the previous page.
        """
        op = f"list_{self.noun}s"
        warnings: list[str] = []
        view = ViewOptions.of(fields, include_fields=include_fields)
        try:
            page_limit = self._page_limit(limit, warnings)
            decoded: Cursor | None = decode_cursor(cursor) if cursor else None
            with self._catalog.connect() as txn:
                page = self.repository(txn).list(
                    filters, limit=page_limit, cursor=decoded, view=view
                )
        except CatalogError as exc:
            return self._failure(op, exc)
        return ServiceResult(
            ok=True,
            op=op,
            data=page.to_dict(),
            warnings=warnings,
            meta={"limit": page_limit},
        )

    def count(self) -> ServiceResult:
        op = f"count_{self.noun}s"
        try:
            with self._catalog.connect() as txn:
                total = self.repository(txn).count()
        except CatalogError as exc:
            return self._failure(op, exc)
        return ServiceResult(ok=True, op=op, data={"count": total})

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def update(self, entity_id: str, changes: Mapping[str, Any]) -> ServiceResult:
        """Sparse update, then return the refreshed entity."""
        op = f"update_{self.noun}"
        try:
            with self._catalog.transaction() as txn:
                repo = self.repository(txn)
                new_id = repo.update(entity_id, changes)
                entity = repo.get(str(new_id or entity_id))
        except CatalogError as exc:
            return self._failure(op, exc)
        return ServiceResult(ok=True, op=op, data=entity)

    def deactivate(self, entity_id: str) -> ServiceResult:
        """Soft-delete one entity."""
        op = f"deactivate_{self.noun}"
        try:
            with self._catalog.transaction() as txn:
                self.repository(txn).deactivate(entity_id)
        except CatalogError as exc:
            return self._failure(op, exc)
        return ServiceResult(ok=True, op=op, data={"id": entity_id, "is_active": False})

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _page_limit(self, limit: int | None, warnings: list[str]) -> int:
        pagination = self._catalog.settings.pagination
        if limit is None:
            return pagination.default_limit
        if limit > pagination.max_limit:
            warnings.append(
                f"limit {limit} exceeds the maximum of {pagination.max_limit}; "
                f"using {pagination.max_limit}"
            )
            return pagination.max_limit
        return limit

    def _failure(self, op: str, exc: CatalogError) -> ServiceResult:
        self._log.info("operation_failed", op=op, code=exc.code, message=exc.message)
        return ServiceResult(ok=False, op=op, error=ServiceError.from_exception(exc))
