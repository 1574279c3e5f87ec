"""Image asset store under the project's static images directory.

Frontmatter only ever stores the URL strings returned here
(``/images/cover.png``); image bytes are never inspected.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path, PurePosixPath

from sitectl.domain.errors import InvalidIdError, NotFoundError
from sitectl.infrastructure.project import ProjectContext

logger = logging.getLogger(__name__)

IMAGE_SUFFIXES = frozenset({".png", ".jpg", ".jpeg", ".gif", ".webp", ".svg", ".ico", ".avif"})


@dataclass(frozen=True)
class ImageInfo:
    """One image under the images root."""

    filename: str
    path: str
    url: str
    size: int
    created_at: datetime


def image_url(project: ProjectContext, file_path: Path) -> str:
    """Site URL of *file_path*: its path relative to the static root."""
    relative = file_path.relative_to(project.static_root).as_posix()
    return f"/{relative}"


def list_images(project: ProjectContext) -> list[ImageInfo]:
    """Every image under the images root (recursively), newest first."""
    root = project.images_root
    if not root.is_dir():
        return []

    images: list[ImageInfo] = []
    for path in root.rglob("*"):
        if not path.is_file() or path.suffix.lower() not in IMAGE_SUFFIXES:
            continue
        st = path.stat()
        images.append(
            ImageInfo(
                filename=path.name,
                path=path.relative_to(root).as_posix(),
                url=image_url(project, path),
                size=st.st_size,
                created_at=datetime.fromtimestamp(
                    getattr(st, "st_birthtime", None) or st.st_mtime
                ).astimezone(),
            )
        )
    images.sort(key=lambda img: img.created_at, reverse=True)
    return images


def copy_image(project: ProjectContext, source: Path) -> str:
    """Copy *source* into the images root and return its site URL.

    A name clash gets a Unix-timestamp suffix (``cover_1700000000.png``)
    instead of overwriting.

    Raises:
        NotFoundError: If *source* is not a file.
        InvalidIdError: If *source* is not an image.
    """
    if not source.is_file():
        msg = f"Image not found: {source}"
        raise NotFoundError(msg)
    if source.suffix.lower() not in IMAGE_SUFFIXES:
        msg = f"Not an image file: {source.name}"
        raise InvalidIdError(msg)

    root = project.images_root
    root.mkdir(parents=True, exist_ok=True)
    dest = root / source.name
    if dest.exists():
        stamp = int(datetime.now().timestamp())
        dest = root / f"{source.stem}_{stamp}{source.suffix}"
        counter = 1
        while dest.exists():
            dest = root / f"{source.stem}_{stamp}_{counter}{source.suffix}"
            counter += 1

    shutil.copy2(source, dest)
    logger.info("Copied image %s -> %s", source, dest)
    return image_url(project, dest)


def resolve_image_path(project: ProjectContext, image_path: str) -> Path:
    """Resolve a path relative to the images root (or a ``/images/...`` URL).

    Raises:
        InvalidIdError: If the path is absolute on disk or escapes the root.
    """
    root = project.images_root
    url_prefix = "/" + PurePosixPath(project.layout.images).relative_to(
        PurePosixPath(project.layout.static)
    ).as_posix() + "/"
    normalized = image_path.replace("\\", "/")
    if normalized.startswith(url_prefix):
        normalized = normalized[len(url_prefix) :]
    pure = PurePosixPath(normalized)
    if "\x00" in normalized or pure.is_absolute() or ".." in pure.parts or not pure.parts:
        msg = f"Invalid image path: {image_path!r}"
        raise InvalidIdError(msg)
    result = root.joinpath(*pure.parts)
    if not result.resolve().is_relative_to(root.resolve()):
        msg = f"Image path escapes the images root: {image_path!r}"
        raise InvalidIdError(msg)
    return result


def delete_image(project: ProjectContext, image_path: str) -> Path:
    """Delete an image and return its path.

    Raises:
        InvalidIdError: For paths outside the images root.
        NotFoundError: If the image does not exist.
    """
    path = resolve_image_path(project, image_path)
    if not path.is_file():
        msg = f"Image not found: {image_path}"
        raise NotFoundError(msg)
    path.unlink()
    logger.info("Deleted image %s", path)
    return path
