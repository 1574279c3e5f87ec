"""BaseService — shared foundation for sitectl services.

Every service receives a :class:`ProjectContext` at construction time
and reaches the content through a :class:`ContentRepository`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sitectl.domain.errors import SitectlError
from sitectl.infrastructure.repository import ContentRepository
from sitectl.services.result import ServiceResult

if TYPE_CHECKING:
    from sitectl.infrastructure.project import ProjectContext

logger = logging.getLogger(__name__)

IO_ERROR = "IO_ERROR"


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class ContentService(BaseService):
            def show(self, kind: DocumentKind, doc_id: str) -> ServiceResult:
                try:
                    doc = self._repo.get(kind, doc_id)
                except (SitectlError, OSError) as exc:
                    return self._fail("show_document", exc)
                ...
    """

    def __init__(
        self,
        project: ProjectContext,
        repository: ContentRepository | None = None,
    ) -> None:
        self._project = project
        self._repo = repository or ContentRepository(project)

    @property
    def project(self) -> ProjectContext:
        return self._project

    def _fail(
        self,
        op: str,
        exc: SitectlError | OSError,
        *,
        warnings: list[str] | None = None,
    ) -> ServiceResult:
        """Turn a domain or file-system error into a failed result."""
        if isinstance(exc, SitectlError):
            code = exc.code
        else:
            code = IO_ERROR
            logger.warning("%s failed: %s", op, exc)
        detail = {"path": str(exc.filename)} if isinstance(exc, OSError) and exc.filename else {}
        return ServiceResult.failure(op, code, str(exc), detail=detail, warnings=warnings)
