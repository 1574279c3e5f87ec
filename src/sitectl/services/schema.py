"""SchemaService — inspect, infer and write the custom-field schema."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sitectl.domain.errors import SitectlError
from sitectl.domain.inference import DEFAULT_LONG_TEXT_THRESHOLD, infer_schema
from sitectl.domain.schema import FieldType, SchemaRegistry, editor_for
from sitectl.infrastructure.schema_store import load_registry, save_registry
from sitectl.services.base import BaseService
from sitectl.services.result import ServiceResult

if TYPE_CHECKING:
    from sitectl.infrastructure.project import ProjectContext
    from sitectl.infrastructure.repository import ContentRepository


def registry_payload(registry: SchemaRegistry) -> dict[str, Any]:
    return {
        **registry.to_json_dict(),
        "isDefault": registry.is_default,
    }


class SchemaService(BaseService):
    """Schema registry operations."""

    def __init__(
        self,
        project: ProjectContext,
        repository: ContentRepository | None = None,
        *,
        long_text_threshold: int = DEFAULT_LONG_TEXT_THRESHOLD,
    ) -> None:
        super().__init__(project, repository)
        self._long_text_threshold = long_text_threshold

    def show(self) -> ServiceResult:
        """Current registry, strict: a broken config file is an error here."""
        op = "show_schema"
        path = self._project.schema_path
        try:
            registry = load_registry(path)
        except (SitectlError, OSError) as exc:
            return self._fail(op, exc)

        warnings = list(registry.load_warnings)
        problem = registry.preview_image_problem()
        if problem:
            warnings.append(problem)
        if registry.is_default:
            warnings.append(f"No schema config at {path}; run 'sitectl schema infer --write'")
        return ServiceResult(
            ok=True,
            op=op,
            data=registry_payload(registry),
            warnings=warnings,
            meta={"path": str(path)},
        )

    def infer(self, *, write: bool = False) -> ServiceResult:
        """Scan every document and build a registry; optionally save it."""
        op = "infer_schema"
        skipped: list[str] = []
        try:
            documents = self._repo.list_all(skipped)
            registry = infer_schema(documents, long_text_threshold=self._long_text_threshold)
            if write:
                save_registry(self._project.schema_path, registry)
                self._repo.registry = registry
        except (SitectlError, OSError) as exc:
            return self._fail(op, exc, warnings=skipped)

        return ServiceResult(
            ok=True,
            op=op,
            data=registry_payload(registry),
            warnings=[f"Skipped {entry}" for entry in skipped],
            meta={
                "documents": len(documents),
                "written": write,
                "path": str(self._project.schema_path),
            },
        )

    def editors(self) -> ServiceResult:
        """Editing affordance of every field type and every registry field."""
        op = "schema_editors"
        try:
            registry = self._repo.registry
        except (SitectlError, OSError) as exc:
            return self._fail(op, exc)

        types = []
        for field_type in FieldType:
            editor = editor_for(field_type)
            types.append(
                {
                    "type": field_type.value,
                    "widget": editor.widget.value,
                    "value_kind": editor.value_kind.value,
                    "rows": editor.rows,
                }
            )
        fields = []
        for fs in registry.custom_fields:
            editor = fs.editor()
            fields.append(
                {
                    "name": fs.name,
                    "label": fs.display_label,
                    "type": fs.type.value,
                    "widget": editor.widget.value,
                    "rows": editor.rows,
                    "placeholder": editor.placeholder,
                }
            )
        return ServiceResult(
            ok=True,
            op=op,
            data={"types": types, "fields": fields},
            warnings=list(registry.load_warnings),
        )
