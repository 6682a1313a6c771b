"""Property code generator registry.

Each factory inspects a property and either returns a strategy or declines.
The first factory to accept wins; a property nobody claims gets the plain
DefaultProperty. Factories are tried most specific first and are expected
never to overlap.
"""

import logging
from typing import List

from .base import Initially, PropertyCodeGenerator, PropertyCodeGeneratorFactory
from .collection import ListProperty, ListPropertyFactory, SetProperty, SetPropertyFactory
from .default import DefaultProperty, DefaultPropertyFactory
from .functional import FunctionalType, consumer, primitive_unary_operator, unary_operator
from .map import MapProperty, MapPropertyFactory
from .models import BuilderFactory, Datatype, Property
from .nullable import NullableProperty, NullablePropertyFactory
from .primitive_optional import OptionalKind, PrimitiveOptionalFactory, PrimitiveOptionalProperty

logger = logging.getLogger(__name__)

# Registry of property factories (order = dispatch priority)
_FACTORIES = [
    ("primitive_optional", PrimitiveOptionalFactory()),
    ("list", ListPropertyFactory()),
    ("set", SetPropertyFactory()),
    ("map", MapPropertyFactory()),
    ("nullable", NullablePropertyFactory()),
]

_DEFAULT_FACTORY = DefaultPropertyFactory()


def factory_names() -> List[str]:
    """Registered factory names in dispatch order (the default is implicit)."""
    return [name for name, _ in _FACTORIES]


def create_generator(prop: Property, datatype: Datatype) -> PropertyCodeGenerator:
    """Return the strategy for ``prop``: first accepting factory, else DefaultProperty."""
    for name, factory in _FACTORIES:
        generator = factory.create(prop, datatype)
        if generator is not None:
            logger.debug(f"Property {prop.name} handled by {name}")
            return generator
    logger.debug(f"Property {prop.name} handled by default")
    generator = _DEFAULT_FACTORY.create(prop, datatype)
    assert generator is not None
    return generator


__all__ = [
    "BuilderFactory",
    "Datatype",
    "DefaultProperty",
    "FunctionalType",
    "Initially",
    "ListProperty",
    "MapProperty",
    "NullableProperty",
    "OptionalKind",
    "PrimitiveOptionalProperty",
    "Property",
    "PropertyCodeGenerator",
    "PropertyCodeGeneratorFactory",
    "SetProperty",
    "consumer",
    "create_generator",
    "factory_names",
    "primitive_unary_operator",
    "unary_operator",
]
