"""Declarative value-type models."""

from .loader import ModelError, build_model, load_model
from .schemas import DatatypeSpec, PropertySpec

__all__ = ["DatatypeSpec", "ModelError", "PropertySpec", "build_model", "load_model"]
