"""Fallback strategy: a plain, required value."""

from typing import Any, Optional

from ..source import Block, Excerpt, excerpt, java_string
from .base import Initially, PropertyCodeGenerator, PropertyCodeGeneratorFactory
from .declarations import UNSET_PROPERTIES, fresh_builder
from .functional import FunctionalType, primitive_unary_operator, unary_operator
from .methods import getter, mapper, setter
from .models import Datatype, Property
from .types import OBJECTS


class DefaultPropertyFactory(PropertyCodeGeneratorFactory):
    """Accepts every property. Registered last."""

    def create(self, prop: Property, datatype: Datatype) -> Optional["DefaultProperty"]:
        if prop.mapper_type is not None:
            mapper_type = prop.mapper_type
        elif prop.type.primitive:
            mapper_type = primitive_unary_operator(prop.type)
        else:
            mapper_type = unary_operator(prop.type)
        return DefaultProperty(datatype, prop, mapper_type)


class DefaultProperty(PropertyCodeGenerator):
    """A value that must be set before ``build()``; tracked in ``_unsetProperties``."""

    def __init__(self, datatype: Datatype, prop: Property, mapper_type: FunctionalType):
        super().__init__(datatype, prop)
        self.mapper_type = mapper_type

    @property
    def property_constant(self) -> Excerpt:
        return excerpt("{}.{}", self.datatype.property_enum, self.property.all_caps_name)

    def initial_state(self) -> Initially:
        return Initially.REQUIRED

    def add_value_field_declaration(self, code, final_field: Any) -> None:
        code.add_line("private final {} {};", self.property.type, final_field)

    def add_builder_field_declaration(self, code) -> None:
        code.add_line("private {} {};", self.property.type, self.property.field)

    def add_builder_field_accessors(self, code) -> None:
        self._add_setter(code)
        self._add_mapper(code)
        self._add_getter(code)

    def _add_setter(self, code) -> None:
        prop = self.property
        code.add_line("")
        code.add_line("/**")
        code.add_line(" * Sets the value to be returned by {}.", self._getter_link())
        code.add_line(" *")
        self._add_return_this_javadoc(code)
        if not prop.type.primitive:
            code.add_line(" * @throws NullPointerException if {{@code {}}} is null", prop.name)
        code.add_line(" */")
        code.add_line("public {} {}({} {}) {{", self.datatype.builder, setter(prop), prop.type, prop.name)
        body = Block.method_body(code, prop.name)
        if prop.type.primitive:
            body.add_line("{} = {};", prop.field, prop.name)
        else:
            body.add_line("{} = {}.requireNonNull({});", prop.field, OBJECTS, prop.name)
        body.add_line("{}.remove({});", UNSET_PROPERTIES, self.property_constant)
        self._add_return_this(body)
        code.add(body)
        code.add_line("}}")

    def _add_mapper(self, code) -> None:
        prop = self.property
        code.add_line("")
        code.add_line("/**")
        code.add_line(
            " * Replaces the value to be returned by {} by applying {{@code mapper}} to it",
            self._getter_link(),
        )
        code.add_line(" * and using the result.")
        code.add_line(" *")
        self._add_return_this_javadoc(code)
        if prop.type.primitive:
            code.add_line(" * @throws NullPointerException if {{@code mapper}} is null")
        else:
            code.add_line(" * @throws NullPointerException if {{@code mapper}} is null or returns null")
        code.add_line(" * @throws IllegalStateException if the field has not been set")
        code.add_line(" */")
        code.add_line(
            "public {} {}({} mapper) {{",
            self.datatype.builder, mapper(prop), self.mapper_type.functional_interface,
        )
        body = Block.method_body(code, "mapper")
        body.add_line("{}.requireNonNull(mapper);", OBJECTS)
        body.add_line(
            "return {}(mapper.{}({}()));", setter(prop), self.mapper_type.method_name, getter(prop)
        )
        code.add(body)
        code.add_line("}}")

    def _add_getter(self, code) -> None:
        prop = self.property
        code.add_line("")
        code.add_line("/**")
        code.add_line(" * Returns the value that will be returned by {}.", self._getter_link())
        code.add_line(" *")
        code.add_line(" * @throws IllegalStateException if the field has not been set")
        code.add_line(" */")
        code.add_line("public {} {}() {{", prop.type, getter(prop))
        code.add_line("if ({}.contains({})) {{", UNSET_PROPERTIES, self.property_constant)
        code.add_line("throw new IllegalStateException({});", java_string(f"{prop.name} not set"))
        code.add_line("}}")
        code.add_line("return {};", prop.field)
        code.add_line("}}")

    def add_final_field_assignment(self, code, final_field: Any, builder: str) -> None:
        code.add_line("{} = {};", final_field, self.property.field.on(builder))

    def add_merge_from_value(self, code, value: str) -> None:
        code.add_line("{}({}.{}());", setter(self.property), value, self.property.getter_name)

    def add_merge_from_builder(self, code, builder: Excerpt) -> None:
        code.add_line(
            "if (!{}.contains({})) {{", UNSET_PROPERTIES.on(builder), self.property_constant
        )
        code.add_line("{}({});", setter(self.property), self.property.field.on(builder))
        code.add_line("}}")

    def add_clear_field(self, code) -> None:
        defaults = fresh_builder(code, self.datatype)
        if defaults is not None:
            code.add_line("{} = {};", self.property.field, self.property.field.on(defaults))
