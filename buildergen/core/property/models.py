"""Property and datatype descriptors.

Pure data: these are produced once per generation pass (by the model loader,
or directly in tests) and read by every strategy. No generation logic here.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..source import FieldAccess, TypeName
from .functional import FunctionalType

DEFAULT_NULLABLE = TypeName.of("javax.annotation", "Nullable")


class BuilderFactory(Enum):
    """How a fresh builder instance can be obtained in generated code."""
    NO_ARGS_CONSTRUCTOR = "NO_ARGS_CONSTRUCTOR"   # new Person.Builder()
    NONE = "NONE"                                 # no way to create one


@dataclass(frozen=True)
class Property:
    """One property of the value type."""

    name: str
    type: TypeName
    getter_name: str = ""
    nullable: bool = False
    using_bean_convention: bool = False
    mapper_type: Optional[FunctionalType] = None  # overrides the strategy's default mapper
    nullable_annotation: TypeName = DEFAULT_NULLABLE

    def __post_init__(self):
        if not re.fullmatch(r"[A-Za-z_$][\w$]*", self.name):
            raise ValueError(f"Invalid property name: {self.name!r}")
        if not self.getter_name:
            object.__setattr__(self, "getter_name", self._default_getter())

    def _default_getter(self) -> str:
        if not self.using_bean_convention:
            return self.name
        if self.type.primitive and self.type.simple_name == "boolean":
            return "is" + self.capitalized_name
        return "get" + self.capitalized_name

    @property
    def capitalized_name(self) -> str:
        return self.name[:1].upper() + self.name[1:]

    @property
    def all_caps_name(self) -> str:
        return re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", self.name).upper()

    @property
    def field(self) -> FieldAccess:
        return FieldAccess(self.name)


@dataclass(frozen=True)
class Datatype:
    """Names of the value type and of everything generated around it."""

    type: TypeName
    builder: TypeName
    generated_builder: TypeName
    value_type: TypeName
    partial_type: TypeName
    property_enum: TypeName
    builder_factory: BuilderFactory = BuilderFactory.NO_ARGS_CONSTRUCTOR

    @classmethod
    def for_type(
        cls,
        type_name: TypeName,
        builder_factory: BuilderFactory = BuilderFactory.NO_ARGS_CONSTRUCTOR,
    ) -> "Datatype":
        """Derive the conventional names: ``Person.Builder``, ``Person_Builder``, ..."""
        generated = TypeName.of(type_name.package, "_".join(type_name.simple_names) + "_Builder")
        return cls(
            type=type_name,
            builder=type_name.nested("Builder"),
            generated_builder=generated,
            value_type=generated.nested("Value"),
            partial_type=generated.nested("Partial"),
            property_enum=generated.nested("Property"),
            builder_factory=builder_factory,
        )

    @property
    def package(self) -> str:
        return self.generated_builder.package

    @property
    def has_no_args_builder(self) -> bool:
        return self.builder_factory is BuilderFactory.NO_ARGS_CONSTRUCTOR
