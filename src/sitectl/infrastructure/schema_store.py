"""Load and save the project's custom-field schema file.

The file is ``<project>/.sitectl/frontmatter-config.json``. A missing
file is not an error: the default (empty) registry is returned with
``is_default=True`` so the UI can offer to infer one.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from sitectl.domain.errors import SchemaLoadError
from sitectl.domain.schema import SchemaRegistry
from sitectl.infrastructure.filesystem import atomic_write, read_text

logger = logging.getLogger(__name__)


def load_registry(path: Path) -> SchemaRegistry:
    """Load the registry at *path*.

    Raises:
        SchemaLoadError: If the file is not valid JSON or does not match
            the registry shape.
    """
    if not path.is_file():
        logger.debug("No schema config at %s; using default registry", path)
        return SchemaRegistry.default()

    raw = read_text(path)
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        msg = f"Invalid JSON in {path}: {exc}"
        raise SchemaLoadError(msg) from exc

    try:
        registry = SchemaRegistry.model_validate(data)
    except ValidationError as exc:
        msg = f"Invalid schema config in {path}: {exc.error_count()} error(s)\n{exc}"
        raise SchemaLoadError(msg) from exc

    # An existing file is never the default registry.
    registry.is_default = False
    for warning in registry.load_warnings:
        logger.warning("%s: %s", path.name, warning)
    return registry


def load_registry_or_default(path: Path) -> SchemaRegistry:
    """Load the registry, falling back to the default on a bad file.

    The load error is logged and kept in ``load_warnings`` of the returned
    default registry so callers can show it.
    """
    try:
        return load_registry(path)
    except SchemaLoadError as exc:
        logger.warning("Falling back to default schema: %s", exc)
        registry = SchemaRegistry.default()
        registry.load_warnings.append(str(exc))
        return registry


def save_registry(path: Path, registry: SchemaRegistry) -> None:
    """Write *registry* to *path* atomically (camelCase JSON, 2-space indent)."""
    text = json.dumps(registry.to_json_dict(), indent=2, ensure_ascii=False) + "\n"
    atomic_write(path, text)
    registry.is_default = False
    logger.debug("Saved schema config with %d field(s) to %s", len(registry.custom_fields), path)
