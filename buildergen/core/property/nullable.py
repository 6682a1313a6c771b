"""Strategy for reference-typed properties that may be null."""

from typing import Any, Optional

from ..source import Block, Excerpt, excerpt
from .base import Initially, PropertyCodeGenerator, PropertyCodeGeneratorFactory
from .declarations import fresh_builder
from .functional import FunctionalType, unary_operator
from .methods import clear_method, getter, mapper, setter
from .models import Datatype, Property
from .types import OBJECTS


class NullablePropertyFactory(PropertyCodeGeneratorFactory):

    def create(self, prop: Property, datatype: Datatype) -> Optional["NullableProperty"]:
        if not prop.nullable or prop.type.primitive:
            return None
        return NullableProperty(datatype, prop, prop.mapper_type or unary_operator(prop.type))


class NullableProperty(PropertyCodeGenerator):
    """An optional property stored as a plain, possibly null, reference."""

    def __init__(self, datatype: Datatype, prop: Property, mapper_type: FunctionalType):
        super().__init__(datatype, prop)
        self.mapper_type = mapper_type

    @property
    def _annotated_type(self) -> Excerpt:
        return excerpt("@{} {}", self.property.nullable_annotation, self.property.type)

    def initial_state(self) -> Initially:
        return Initially.OPTIONAL

    def add_value_field_declaration(self, code, final_field: Any) -> None:
        code.add_line("private final {} {};", self._annotated_type, final_field)

    def add_builder_field_declaration(self, code) -> None:
        code.add_line("private {} {} = null;", self._annotated_type, self.property.field)

    def add_builder_field_accessors(self, code) -> None:
        self._add_setter(code)
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
        code.add_line("public {} {}({} {}) {{", self.datatype.builder, setter(prop), self._annotated_type, prop.name)
        body = Block.method_body(code, prop.name)
        body.add_line("{} = {};", prop.field, prop.name)
        self._add_return_this(body)
        code.add(body)
        code.add_line("}}")

    def _add_mapper(self, code) -> None:
        prop = self.property
        code.add_line("")
        code.add_line("/**")
        code.add_line(" * If the value to be returned by {} is not null,", self._getter_link())
        code.add_line(" * replaces it by applying {{@code mapper}} to it and using the result.")
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
        # Declared in an inner block so the null check stays the first statement
        inner = body.inner_block()
        value = inner.declare(prop.type, "value", excerpt("{}()", getter(prop)))
        inner.add_line("if ({} != null) {{", value)
        inner.add_line("{}(mapper.{}({}));", setter(prop), self.mapper_type.method_name, value)
        inner.add_line("}}")
        body.add(inner)
        self._add_return_this(body)
        code.add(body)
        code.add_line("}}")

    def _add_clear(self, code) -> None:
        prop = self.property
        code.add_line("")
        code.add_line("/**")
        code.add_line(" * Sets the value to be returned by {} to null.", self._getter_link())
        code.add_line(" *")
        self._add_return_this_javadoc(code)
        code.add_line(" */")
        code.add_line("public {} {}() {{", self.datatype.builder, clear_method(prop))
        body = Block.method_body(code)
        body.add_line("{} = null;", prop.field)
        self._add_return_this(body)
        code.add(body)
        code.add_line("}}")

    def _add_getter(self, code) -> None:
        prop = self.property
        code.add_line("")
        code.add_line("/** Returns the value that will be returned by {}. */", self._getter_link())
        code.add_line("public {} {}() {{", self._annotated_type, getter(prop))
        code.add_line("return {};", prop.field)
        code.add_line("}}")

    def add_final_field_assignment(self, code, final_field: Any, builder: str) -> None:
        code.add_line("{} = {};", final_field, self.property.field.on(builder))

    def add_merge_from_value(self, code: Block, value: str) -> None:
        self._add_merge(code, excerpt("{}.{}()", value, self.property.getter_name))

    def add_merge_from_builder(self, code: Block, builder: Excerpt) -> None:
        self._add_merge(code, excerpt("{}.{}()", builder, getter(self.property)))

    def _add_merge(self, code: Block, source: Excerpt) -> None:
        # Only non-null values are copied: merging never clears.
        local = code.declare(self.property.type, self.property.name, source)
        code.add_line("if ({} != null) {{", local)
        code.add_line("{}({});", setter(self.property), local)
        code.add_line("}}")

    def add_clear_field(self, code) -> None:
        defaults = fresh_builder(code, self.datatype)
        if defaults is not None:
            code.add_line("{} = {};", self.property.field, self.property.field.on(defaults))
        else:
            code.add_line("{} = null;", self.property.field)

    def add_getter_annotations(self, code) -> None:
        code.add_line("@{}", self.property.nullable_annotation)

    def add_to_string_condition(self, code) -> None:
        code.add("{} != null", self.property.field)
