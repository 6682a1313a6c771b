"""Load value-type models from YAML or JSON files.

The file format mirrors :class:`DatatypeSpec`::

    type: com.example.Person
    properties:
      - name: age
        type: java.util.OptionalInt
"""

import json
import logging
from pathlib import Path
from typing import List, Tuple, Union

import yaml
from pydantic import ValidationError

from ..property import BuilderFactory, Datatype, OptionalKind, Property, unary_operator
from ..property.models import DEFAULT_NULLABLE
from ..source import TypeName
from .schemas import DatatypeSpec, PropertySpec

logger = logging.getLogger(__name__)


class ModelError(ValueError):
    """A model file is malformed or describes an impossible type."""


def load_model(
    path: Union[str, Path],
    nullable_annotation: TypeName = DEFAULT_NULLABLE,
) -> Tuple[Datatype, List[Property]]:
    """Read ``path`` and return its datatype and properties.

    Raises:
        ModelError: on unreadable files, schema violations or bad type strings
    """
    path = Path(path)
    try:
        with open(path, "r") as f:
            if path.suffix == ".json":
                raw = json.load(f)
            else:
                raw = yaml.safe_load(f)
    except OSError as e:
        raise ModelError(f"{path}: {e}") from e
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ModelError(f"{path}: not valid {'JSON' if path.suffix == '.json' else 'YAML'}: {e}") from e

    if not isinstance(raw, dict):
        raise ModelError(f"{path}: expected a mapping at the top level")

    try:
        spec = DatatypeSpec(**raw)
    except ValidationError as e:
        raise ModelError(f"{path}: {e}") from e

    datatype, properties = build_model(spec, nullable_annotation, source=str(path))
    logger.debug(f"Loaded {len(properties)} properties for {datatype.type} from {path}")
    return datatype, properties


def build_model(
    spec: DatatypeSpec,
    nullable_annotation: TypeName = DEFAULT_NULLABLE,
    source: str = "<model>",
) -> Tuple[Datatype, List[Property]]:
    """Turn a validated spec into descriptors."""
    value_type = _parse_type(spec.type, source)
    if value_type.primitive or value_type.type_args:
        raise ModelError(f"{source}: value type must be a plain class name, got {spec.type!r}")
    datatype = Datatype.for_type(value_type, BuilderFactory(spec.builder_factory))

    properties: List[Property] = []
    seen = set()
    for prop_spec in spec.properties:
        if prop_spec.name in seen:
            raise ModelError(f"{source}: duplicate property {prop_spec.name!r}")
        seen.add(prop_spec.name)
        properties.append(_build_property(prop_spec, nullable_annotation, source))
    return datatype, properties


def _build_property(spec: PropertySpec, nullable_annotation: TypeName, source: str) -> Property:
    prop_type = _parse_type(spec.type, source)
    if spec.nullable and prop_type.primitive:
        raise ModelError(f"{source}: primitive property {spec.name!r} cannot be nullable")

    mapper_type = None
    if spec.mapper_can_return_null:
        # Boxed mapper: a null result clears an optional property
        mapper_type = unary_operator(_unwrapped(prop_type))

    try:
        return Property(
            name=spec.name,
            type=prop_type,
            getter_name=spec.getter,
            nullable=spec.nullable,
            using_bean_convention=spec.bean_convention,
            mapper_type=mapper_type,
            nullable_annotation=nullable_annotation,
        )
    except ValueError as e:
        raise ModelError(f"{source}: {e}") from e


def _parse_type(text: str, source: str) -> TypeName:
    try:
        return TypeName.parse(text)
    except ValueError as e:
        raise ModelError(f"{source}: {e}") from e


def _unwrapped(prop_type: TypeName) -> TypeName:
    """The type a mapper for ``prop_type`` operates on."""
    kind = OptionalKind.for_type(prop_type)
    return kind.value.primitive if kind is not None else prop_type
