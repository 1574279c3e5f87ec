"""Config file discovery.

Walk-up finder locates sitectl.toml, similar to how git finds .git/.
Supports SITECTL_CONFIG env var and --config CLI flag overrides.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "sitectl.toml"
CONFIG_ENV_VAR = "SITECTL_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for sitectl.toml.

    Returns the path to the config file, or None if not found.
    Checks SITECTL_CONFIG env var first.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        if p.is_file():
            return p
        return None

    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


# Files that mark the root of a Hugo or Hexo site.
PROJECT_MARKERS = (
    "hugo.toml",
    "hugo.yaml",
    "hugo.json",
    "config.toml",
    "config.yaml",
    "_config.yml",
)


def find_project_root(start: Path | None = None) -> Path | None:
    """Walk up from *start* looking for a site generator config file.

    Used when no sitectl.toml exists, so ``sitectl`` works from anywhere
    inside a stock Hugo/Hexo project.
    """
    current = (start or Path.cwd()).resolve()
    while True:
        if any((current / marker).is_file() for marker in PROJECT_MARKERS):
            return current
        parent = current.parent
        if parent == current:
            return None
        current = parent
