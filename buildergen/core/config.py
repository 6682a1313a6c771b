"""Generator settings.

Loaded from ``config/buildergen.yaml`` at the repository root, or from the
file named by ``BUILDERGEN_CONFIG``. Environment variables may come from a
``.env`` file.
"""

import logging
import os
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "buildergen.yaml"


class ConfigError(ValueError):
    """The settings file exists but cannot be used."""


class GeneratorSettings(BaseModel):
    """Settings applied to every generated file."""
    indent: int = Field(2, description="Spaces per nesting level", ge=0, le=8)
    header: str = Field(
        "// Autogenerated code. Do not modify.",
        description="First line(s) of every generated file",
    )
    nullable_annotation: str = Field(
        "javax.annotation.Nullable",
        description="Annotation type applied to nullable properties",
    )
    check_syntax: bool = Field(True, description="Parse generated files back with tree-sitter")


_settings: Optional[GeneratorSettings] = None


def config_path() -> Path:
    override = os.getenv("BUILDERGEN_CONFIG")
    return Path(override) if override else DEFAULT_CONFIG_PATH


def load_settings(path: Optional[Path] = None) -> GeneratorSettings:
    """Read settings from ``path`` (default: :func:`config_path`).

    A missing file is not an error: defaults are used and a warning logged.

    Raises:
        ConfigError: if the file is not valid YAML or fails validation
    """
    path = path or config_path()
    if not path.exists():
        logger.warning(f"{path} not found, using default settings")
        return GeneratorSettings()

    with open(path, "r") as f:
        try:
            raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"{path}: {e}") from e

    try:
        settings = GeneratorSettings(**raw.get("generator", {}))
    except (AttributeError, TypeError, ValidationError) as e:
        raise ConfigError(f"{path}: {e}") from e

    logger.debug(f"Loaded settings from {path}: {settings}")
    return settings


def get_settings() -> GeneratorSettings:
    """Cached settings; call :func:`reload_settings` after changing the file."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reload_settings(path: Optional[Path] = None) -> GeneratorSettings:
    global _settings
    _settings = load_settings(path)
    return _settings
