"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, pubctl.toml only contains
overrides. A fresh site needs no config file at all.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- pubctl.toml sections ---


class ContentConfig(BaseModel):
    """[content] section."""

    model_config = {"frozen": True}

    root: str = "content"
    exclude: list[str] = Field(default_factory=list)


class ValidationConfig(BaseModel):
    """[validation] section."""

    model_config = {"frozen": True}

    max_description_length: int = 300


class LinksConfig(BaseModel):
    """[links] section."""

    model_config = {"frozen": True}

    strict: bool = False
    base_path: str = "/"


class AssetsConfig(BaseModel):
    """[assets] section."""

    model_config = {"frozen": True}

    root: str = "static"
    strict: bool = False


class BuildConfig(BaseModel):
    """[build] section."""

    model_config = {"frozen": True}

    workers: int = Field(default=1, ge=1)


class PublishConfig(BaseModel):
    """[publish] section."""

    model_config = {"frozen": True}

    output_dir: str = "public"
    manifest: bool = True


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    local_dir: str = ".pubctl/plugins"
    entry_points: bool = True
