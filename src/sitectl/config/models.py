"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, sitectl.toml only contains
overrides. A Hugo project with the stock layout needs no config file.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- sitectl.toml sections ---


class LayoutConfig(BaseModel):
    """[layout] section — content directories relative to the project root."""

    model_config = {"frozen": True}

    posts: str = "content/posts"
    pages: str = "content"
    drafts: str = "content/drafts"
    static: str = "static"
    images: str = "static/images"


class GeneratorConfig(BaseModel):
    """[generator] section."""

    model_config = {"frozen": True}

    binary: str = "hugo"
    server_args: list[str] = Field(default_factory=lambda: ["server", "-D"])
    timeout: float | None = None


class InferenceConfig(BaseModel):
    """[inference] section."""

    model_config = {"frozen": True}

    long_text_threshold: int = Field(default=80, ge=1)


class RegistryConfig(BaseModel):
    """[registry] section — where the custom-field schema lives."""

    model_config = {"frozen": True}

    dir: str = ".sitectl"
    filename: str = "frontmatter-config.json"
