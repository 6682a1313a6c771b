"""Strategy for OptionalInt, OptionalLong and OptionalDouble properties."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from ..source import Block, Excerpt, TypeName, excerpt
from .base import Initially, PropertyCodeGenerator, PropertyCodeGeneratorFactory
from .declarations import fresh_builder
from .functional import FunctionalType, primitive_unary_operator
from .methods import clear_method, getter, mapper, setter
from .models import Datatype, Property
from .types import OBJECTS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OptionalType:
    wrapper: TypeName
    primitive: TypeName
    unwrap: str


class OptionalKind(Enum):
    """The closed set of primitive-wrapping optionals."""
    INT = OptionalType(TypeName.of("java.util", "OptionalInt"), TypeName.of_primitive("int"), "getAsInt")
    LONG = OptionalType(TypeName.of("java.util", "OptionalLong"), TypeName.of_primitive("long"), "getAsLong")
    DOUBLE = OptionalType(
        TypeName.of("java.util", "OptionalDouble"), TypeName.of_primitive("double"), "getAsDouble"
    )

    @classmethod
    def for_type(cls, type_name: TypeName) -> Optional["OptionalKind"]:
        if type_name.primitive or type_name.type_args:
            return None
        for kind in cls:
            if kind.value.wrapper == type_name:
                return kind
        return None


class PrimitiveOptionalFactory(PropertyCodeGeneratorFactory):

    def create(self, prop: Property, datatype: Datatype) -> Optional["PrimitiveOptionalProperty"]:
        if prop.nullable:
            return None
        kind = OptionalKind.for_type(prop.type)
        if kind is None:
            return None
        mapper_type = prop.mapper_type or primitive_unary_operator(kind.value.primitive)
        return PrimitiveOptionalProperty(datatype, prop, kind, mapper_type)


class PrimitiveOptionalProperty(PropertyCodeGenerator):
    """Builder API for a primitive optional property ``p``:

    - ``setP(primitive)`` wraps and stores
    - ``setP(Optional*)`` delegates to the primitive setter or to ``clearP()``
    - ``mapP(mapper)`` transforms a present value; a null result clears it when
      the mapper is allowed to return null
    - ``clearP()`` resets to empty, ``p()`` returns the wrapper
    """

    def __init__(
        self,
        datatype: Datatype,
        prop: Property,
        kind: OptionalKind,
        mapper_type: FunctionalType,
    ):
        super().__init__(datatype, prop)
        self.kind = kind
        self.mapper_type = mapper_type

    @property
    def _optional(self) -> OptionalType:
        return self.kind.value

    def initial_state(self) -> Initially:
        return Initially.OPTIONAL

    def add_value_field_declaration(self, code, final_field: Any) -> None:
        code.add_line("private final {} {};", self._optional.wrapper, final_field)

    def add_builder_field_declaration(self, code) -> None:
        code.add_line("private {0} {1} = {0}.empty();", self._optional.wrapper, self.property.field)

    def add_builder_field_accessors(self, code) -> None:
        self._add_setter(code)
        self._add_optional_setter(code)
        self._add_mapper(code)
        self._add_clear(code)
        self._add_getter(code)

    def _add_setter(self, code) -> None:
        prop = self.property
        code.add_line("")
        code.add_line("/**")
        code.add_line(" * Sets the value to be returned by {}.", self._getter_link())
        code.add_line(" *")
        self._add_return_this_javadoc(code)
        code.add_line(" */")
        code.add_line(
            "public {} {}({} {}) {{",
            self.datatype.builder, setter(prop), self._optional.primitive, prop.name,
        )
        body = Block.method_body(code, prop.name)
        body.add_line("{} = {}.of({});", prop.field, self._optional.wrapper, prop.name)
        self._add_return_this(body)
        code.add(body)
        code.add_line("}}")

    def _add_optional_setter(self, code) -> None:
        prop = self.property
        code.add_line("")
        code.add_line("/**")
        code.add_line(" * Sets the value to be returned by {}.", self._getter_link())
        code.add_line(" *")
        self._add_return_this_javadoc(code)
        code.add_line(" * @throws NullPointerException if {{@code {}}} is null", prop.name)
        code.add_line(" */")
        code.add_line(
            "public {} {}({} {}) {{",
            self.datatype.builder, setter(prop), self._optional.wrapper, prop.name,
        )
        body = Block.method_body(code, prop.name)
        body.add_line("if ({}.isPresent()) {{", prop.name)
        body.add_line("return {}({}.{}());", setter(prop), prop.name, self._optional.unwrap)
        body.add_line("}} else {{")
        body.add_line("return {}();", clear_method(prop))
        body.add_line("}}")
        code.add(body)
        code.add_line("}}")

    def _add_mapper(self, code) -> None:
        prop = self.property
        code.add_line("")
        code.add_line("/**")
        code.add_line(" * If the value to be returned by {} is present,", self._getter_link())
        code.add_line(" * replaces it by applying {{@code mapper}} to it and using the result.")
        if self.mapper_type.can_return_null:
            code.add_line(" *")
            code.add_line(" * <p>If the result is null, clears the value.")
        code.add_line(" *")
        self._add_return_this_javadoc(code)
        code.add_line(" * @throws NullPointerException if {{@code mapper}} is null")
        code.add_line(" */")
        code.add_line(
            "public {} {}({} mapper) {{",
            self.datatype.builder, mapper(prop), self.mapper_type.functional_interface,
        )
        body = Block.method_body(code, "mapper")
        body.add_line("{}.requireNonNull(mapper);", OBJECTS)

        lambda_body = body.inner_block()
        value = lambda_body.reserve("value")
        applied = excerpt("mapper.{}({})", self.mapper_type.method_name, value)
        if self.mapper_type.can_return_null:
            result = lambda_body.declare(self._optional.primitive.boxed(), "result", applied)
            lambda_body.add_line("if ({} != null) {{", result)
            lambda_body.add_line("{}({});", setter(prop), result)
            lambda_body.add_line("}} else {{")
            lambda_body.add_line("{}();", clear_method(prop))
            lambda_body.add_line("}}")
            body.add_line("{}.ifPresent({} -> {{", prop.field, value)
            body.add(lambda_body)
            body.add_line("}});")
        else:
            body.add_line("{}.ifPresent({} -> {}({}));", prop.field, value, setter(prop), applied)
        self._add_return_this(body)
        code.add(body)
        code.add_line("}}")

    def _add_clear(self, code) -> None:
        prop = self.property
        code.add_line("")
        code.add_line("/**")
        code.add_line(
            " * Sets the value to be returned by {} to {}.",
            self._getter_link(),
            self._optional.wrapper.javadoc_no_arg_method_link("empty"),
        )
        code.add_line(" *")
        self._add_return_this_javadoc(code)
        code.add_line(" */")
        code.add_line("public {} {}() {{", self.datatype.builder, clear_method(prop))
        body = Block.method_body(code)
        body.add_line("{} = {}.empty();", prop.field, self._optional.wrapper)
        self._add_return_this(body)
        code.add(body)
        code.add_line("}}")

    def _add_getter(self, code) -> None:
        prop = self.property
        code.add_line("")
        code.add_line("/** Returns the value that will be returned by {}. */", self._getter_link())
        code.add_line("public {} {}() {{", self._optional.wrapper, getter(prop))
        code.add_line("return {};", prop.field)
        code.add_line("}}")

    def add_final_field_assignment(self, code, final_field: Any, builder: str) -> None:
        code.add_line("{} = {};", final_field, self.property.field.on(builder))

    def add_merge_from_value(self, code, value: str) -> None:
        code.add_line("{}.{}().ifPresent(this::{});", value, self.property.getter_name, setter(self.property))

    def add_merge_from_builder(self, code, builder: Excerpt) -> None:
        code.add_line("{}.{}().ifPresent(this::{});", builder, getter(self.property), setter(self.property))

    def add_clear_field(self, code) -> None:
        defaults = fresh_builder(code, self.datatype)
        if defaults is not None:
            code.add_line("{} = {};", self.property.field, self.property.field.on(defaults))
        else:
            code.add_line("{} = {}.empty();", self.property.field, self._optional.wrapper)

    def add_to_string_condition(self, code) -> None:
        code.add("{}.isPresent()", self.property.field)

    def add_to_string_value(self, code) -> None:
        code.add("{}.{}()", self.property.field, self._optional.unwrap)
