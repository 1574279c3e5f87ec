"""AssetService — the project's image library."""

from __future__ import annotations

from pathlib import Path

from sitectl.domain.errors import SitectlError
from sitectl.domain.values import to_jsonable
from sitectl.infrastructure.assets import copy_image, delete_image, list_images
from sitectl.services.base import BaseService
from sitectl.services.result import ServiceResult


class AssetService(BaseService):
    """List, add and remove images under the static images root."""

    def list_images(self) -> ServiceResult:
        op = "list_images"
        try:
            images = list_images(self._project)
        except OSError as exc:
            return self._fail(op, exc)
        items = [
            {
                "filename": img.filename,
                "path": img.path,
                "url": img.url,
                "size": img.size,
                "created_at": to_jsonable(img.created_at),
            }
            for img in images
        ]
        return ServiceResult(ok=True, op=op, data={"items": items}, meta={"count": len(items)})

    def add_image(self, source: Path) -> ServiceResult:
        op = "add_image"
        try:
            url = copy_image(self._project, source)
        except (SitectlError, OSError) as exc:
            return self._fail(op, exc)
        return ServiceResult(ok=True, op=op, data={"url": url, "source": str(source)})

    def remove_image(self, image_path: str) -> ServiceResult:
        op = "remove_image"
        try:
            path = delete_image(self._project, image_path)
        except (SitectlError, OSError) as exc:
            return self._fail(op, exc)
        return ServiceResult(ok=True, op=op, data={"path": str(path)})
