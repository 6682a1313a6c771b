"""Builder source generation."""

from .builder_source import DEFAULT_HEADER, GeneratedBuilder, GeneratedSource, generate

__all__ = ["DEFAULT_HEADER", "GeneratedBuilder", "GeneratedSource", "generate"]
