"""Builder orchestrator: assembles one ``<Type>_Builder`` compilation unit.

The class body is written in a fixed order. Every per-property hook is handed
either the class-body builder or a method Block, so that locals a strategy
declares (``_defaults``, ``base``, ...) are shared between properties and
never collide with fields or parameters.

Layout of the generated file:
- header, package, imports
- abstract class T_Builder
  - from(T), Property enum, fields, _unsetProperties
  - per-property accessors
  - mergeFrom(T), mergeFrom(T.Builder), clear(), build(), buildPartial()
  - Value and Partial nested classes
  - static helpers shared by the properties
"""

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

from ..config import GeneratorSettings, get_settings
from ..property import Datatype, Initially, Property, PropertyCodeGenerator, create_generator
from ..property.declarations import UNSET_PROPERTIES, fresh_builder, upcast_to_generated_builder
from ..property.types import ENUM_SET, OBJECT, OBJECTS, STRING, STRING_BUILDER
from ..source import Block, Excerpt, FieldAccess, Scope, SourceStringBuilder, excerpt, java_string, reindent
from ..source.java_syntax import SyntaxIssue, check_java_source

logger = logging.getLogger(__name__)

DEFAULT_HEADER = "// Autogenerated code. Do not modify."

_PARTIAL_JAVADOC_INTRO = (
    " * Returns a newly-created partial {} for use in unit tests. State checking will not\n"
    " * be performed.\n"
)

_PARTIAL_JAVADOC_UNSET = (
    " * Returns a newly-created partial {} for use in unit tests. State checking will not\n"
    " * be performed. Unset properties will throw an {{@link UnsupportedOperationException}} when\n"
    " * accessed via the partial object.\n"
)

_PARTIAL_JAVADOC_USAGE = (
    " *\n"
    " * <p>Partials should only ever be used in tests. They permit writing robust test cases that won't\n"
    " * fail if this type gains more application-level constraints (e.g. new required fields) in\n"
    " * future. If you require partially complete values in production code, consider using a Builder.\n"
)


@dataclass
class GeneratedSource:
    """One generated compilation unit."""
    path: str
    text: str
    issues: List[SyntaxIssue] = field(default_factory=list)


class GeneratedBuilder:
    """Writes the generated builder superclass for one datatype."""

    def __init__(self, datatype: Datatype, generators: Sequence[PropertyCodeGenerator]):
        self.datatype = datatype
        self.generators = list(generators)
        self._required = [
            g for g in self.generators if g.initial_state() is Initially.REQUIRED
        ]

    @property
    def path(self) -> str:
        """Source path relative to the output root, e.g. ``com/example/Person_Builder.java``."""
        package_dir = self.datatype.package.replace(".", "/")
        file_name = f"{self.datatype.generated_builder.simple_name}.java"
        return f"{package_dir}/{file_name}" if package_dir else file_name

    def source(self, header: str = DEFAULT_HEADER, indent: int = 2) -> str:
        unit = SourceStringBuilder.compilation_unit(self.datatype.generated_builder)
        unit.imports.hide(*self._member_type_names())
        body = unit.sub_scope(self._class_scope(unit.scope))
        self._add_class(body)

        lines = []
        if header:
            lines.append(header)
        if self.datatype.package:
            lines.append(f"package {self.datatype.package};")
            lines.append("")
        imports = unit.imports.imports()
        for qualified_name in imports:
            lines.append(f"import {qualified_name};")
        if imports:
            lines.append("")
        preamble = "".join(line + "\n" for line in lines)
        return reindent(preamble + body.to_string(), indent)

    # =========================================================================
    # Outer class
    # =========================================================================

    def _class_scope(self, parent: Scope) -> Scope:
        scope = parent.child()
        for generator in self.generators:
            scope.add(generator.property.field)
        if self._required:
            scope.add(UNSET_PROPERTIES)
        return scope

    def _member_type_names(self) -> List[str]:
        """Simple names bound to member types somewhere in the class body."""
        datatype = self.datatype
        names = [
            datatype.value_type.simple_name,
            datatype.partial_type.simple_name,
            # inherited by Value and Partial from the value type
            datatype.builder.simple_name,
        ]
        if self._required:
            names.append(datatype.property_enum.simple_name)
        return names

    def _add_class(self, code) -> None:
        datatype = self.datatype
        code.add_line("/**")
        code.add_line(" * Auto-generated superclass of {},", datatype.builder.javadoc_link())
        code.add_line(" * derived from the API of {}.", datatype.type.javadoc_link())
        code.add_line(" */")
        code.add_line("abstract class {} {{", datatype.generated_builder.simple_name)

        if datatype.has_no_args_builder:
            self._add_static_from_method(code)
        if self._required:
            self._add_property_enum(code)

        code.add_line("")
        for generator in self.generators:
            generator.add_builder_field_declaration(code)
        if self._required:
            code.add_line(
                "private final {0}<{1}> {2} = {0}.allOf({1}.class);",
                ENUM_SET, datatype.property_enum, UNSET_PROPERTIES,
            )

        for generator in self.generators:
            generator.add_builder_field_accessors(code)

        self._add_merge_from_value(code)
        self._add_merge_from_builder(code)
        self._add_clear(code)
        self._add_build(code)
        self._add_build_partial(code)

        self._add_value_class(code)
        self._add_partial_class(code)
        self._add_static_helpers(code)
        code.add_line("}}")

    def _add_static_from_method(self, code) -> None:
        datatype = self.datatype
        code.add_line("")
        code.add_line("/** Creates a new builder using {{@code value}} as a template. */")
        code.add_line("public static {} from({} value) {{", datatype.builder, datatype.type)
        code.add_line("return new {}().mergeFrom(value);", datatype.builder)
        code.add_line("}}")

    def _add_property_enum(self, code) -> None:
        code.add_line("")
        code.add_line("private enum {} {{", self.datatype.property_enum.simple_name)
        for generator in self._required:
            prop = generator.property
            code.add_line("{}({}),", prop.all_caps_name, java_string(prop.name))
        code.add_line(";")
        code.add_line("")
        code.add_line("private final {} name;", STRING)
        code.add_line("")
        code.add_line("private {}({} name) {{", self.datatype.property_enum.simple_name, STRING)
        code.add_line("this.name = name;")
        code.add_line("}}")
        code.add_line("")
        code.add_line("@Override")
        code.add_line("public {} toString() {{", STRING)
        code.add_line("return name;")
        code.add_line("}}")
        code.add_line("}}")

    def _add_merge_from_value(self, code) -> None:
        datatype = self.datatype
        code.add_line("")
        code.add_line("/**")
        code.add_line(" * Copies values from {{@code value}}, appending to collections.")
        code.add_line(" *")
        code.add_line(" * @return this {{@code {}}} object", datatype.builder.simple_name)
        code.add_line(" */")
        code.add_line("public {} mergeFrom({} value) {{", datatype.builder, datatype.type)
        body = Block.method_body(code, "value")
        for generator in self.generators:
            generator.add_merge_from_value(body, "value")
        body.add_line("return ({}) this;", datatype.builder)
        code.add(body)
        code.add_line("}}")

    def _add_merge_from_builder(self, code) -> None:
        datatype = self.datatype
        code.add_line("")
        code.add_line("/**")
        code.add_line(" * Copies values from {{@code template}}, appending to collections.")
        code.add_line(" *")
        code.add_line(" * @return this {{@code {}}} object", datatype.builder.simple_name)
        code.add_line(" */")
        code.add_line("public {0} mergeFrom({0} template) {{", datatype.builder)
        body = Block.method_body(code, "template")
        if self.generators:
            base = upcast_to_generated_builder(body, datatype, "template")
            for generator in self.generators:
                generator.add_merge_from_builder(body, base)
        body.add_line("return ({}) this;", datatype.builder)
        code.add(body)
        code.add_line("}}")

    def _add_clear(self, code) -> None:
        datatype = self.datatype
        code.add_line("")
        code.add_line("/**")
        code.add_line(" * Resets the state of this builder.")
        code.add_line(" *")
        code.add_line(" * @return this {{@code {}}} object", datatype.builder.simple_name)
        code.add_line(" */")
        code.add_line("public {} clear() {{", datatype.builder)
        body = Block.method_body(code)
        for generator in self.generators:
            generator.add_clear_field(body)
        if self._required:
            defaults = fresh_builder(body, datatype)
            body.add_line("{}.clear();", UNSET_PROPERTIES)
            if defaults is not None:
                body.add_line("{}.addAll({});", UNSET_PROPERTIES, UNSET_PROPERTIES.on(defaults))
            else:
                body.add_line(
                    "{}.addAll({}.allOf({}.class));", UNSET_PROPERTIES, ENUM_SET, datatype.property_enum
                )
        body.add_line("return ({}) this;", datatype.builder)
        code.add(body)
        code.add_line("}}")

    def _add_build(self, code) -> None:
        datatype = self.datatype
        code.add_line("")
        code.add_line("/**")
        code.add_line(
            " * Returns a newly-created {} based on the contents of this {{@code {}}}.",
            datatype.type.javadoc_link(), datatype.builder.simple_name,
        )
        if self._required:
            code.add_line(" *")
            code.add_line(" * @throws IllegalStateException if any field has not been set")
        code.add_line(" */")
        code.add_line("public {} build() {{", datatype.type)
        if self._required:
            code.add_line("if (!{}.isEmpty()) {{", UNSET_PROPERTIES)
            code.add_line("throw new IllegalStateException({} + {});", java_string("Not set: "), UNSET_PROPERTIES)
            code.add_line("}}")
        code.add_line("return new {}(this);", datatype.value_type)
        code.add_line("}}")

    def _add_build_partial(self, code) -> None:
        datatype = self.datatype
        code.add_line("")
        code.add_line("/**")
        intro = _PARTIAL_JAVADOC_UNSET if self._required else _PARTIAL_JAVADOC_INTRO
        code.add(intro, datatype.type.javadoc_link())
        code.add(_PARTIAL_JAVADOC_USAGE)
        code.add_line(" */")
        code.add_line("public {} buildPartial() {{", datatype.type)
        code.add_line("return new {}(this);", datatype.partial_type)
        code.add_line("}}")

    # =========================================================================
    # Value and Partial
    # =========================================================================

    def _add_value_class(self, code) -> None:
        datatype = self.datatype
        value = self._nested_class_builder(code, partial=False)
        value.add_line("")
        value.add_line(
            "private static final class {} extends {} {{", datatype.value_type.simple_name, datatype.type
        )
        self._add_value_fields(value, partial=False)
        self._add_value_constructor(value, "private ", partial=False)
        self._add_value_getters(value, partial=False)
        self._add_equals(value, datatype.value_type, partial=False)
        self._add_hash_code(value, partial=False)
        self._add_to_string(value, partial=False)
        value.add_line("}}")
        code.add(value)

    def _add_partial_class(self, code) -> None:
        datatype = self.datatype
        partial = self._nested_class_builder(code, partial=True)
        partial.add_line("")
        partial.add_line(
            "private static final class {} extends {} {{", datatype.partial_type.simple_name, datatype.type
        )
        self._add_value_fields(partial, partial=True)
        self._add_value_constructor(partial, "", partial=True)
        self._add_value_getters(partial, partial=True)
        self._add_equals(partial, datatype.partial_type, partial=True)
        self._add_hash_code(partial, partial=True)
        self._add_to_string(partial, partial=True)
        partial.add_line("}}")
        code.add(partial)

    def _nested_class_builder(self, code, partial: bool):
        """A builder for a nested class body; its scope holds the nested class's own fields."""
        scope = Scope()
        for generator in self.generators:
            scope.add(generator.property.field)
        if partial and self._required:
            scope.add(UNSET_PROPERTIES)
        return code.sub_scope(scope)

    def _add_value_fields(self, code, partial: bool) -> None:
        for generator in self.generators:
            generator.add_value_field_declaration(code, generator.property.field)
        if partial and self._required:
            code.add_line("private final {}<{}> {};", ENUM_SET, self.datatype.property_enum, UNSET_PROPERTIES)

    def _add_value_constructor(self, code, modifiers: str, partial: bool) -> None:
        datatype = self.datatype
        body = Block(code, code.scope.child())
        builder = body.reserve("builder")
        code.add_line("")
        code.add_line(
            "{}{}({} {}) {{",
            modifiers,
            (datatype.partial_type if partial else datatype.value_type).simple_name,
            datatype.generated_builder,
            builder,
        )
        for generator in self.generators:
            generator.add_final_field_assignment(body, generator.property.field, builder)
        if partial and self._required:
            body.add_line("{} = {}.clone();", UNSET_PROPERTIES, UNSET_PROPERTIES.on(builder))
        code.add(body)
        code.add_line("}}")

    def _add_value_getters(self, code, partial: bool) -> None:
        for generator in self.generators:
            prop = generator.property
            code.add_line("")
            code.add_line("@Override")
            generator.add_getter_annotations(code)
            code.add_line("public {} {}() {{", prop.type, prop.getter_name)
            if partial and generator.initial_state() is Initially.REQUIRED:
                code.add_line("if ({}.contains({})) {{", UNSET_PROPERTIES, self._property_constant(generator))
                code.add_line(
                    "throw new UnsupportedOperationException({});", java_string(f"{prop.name} not set")
                )
                code.add_line("}}")
            code.add_line("return {};", prop.field)
            code.add_line("}}")

    def _add_equals(self, code, own_type, partial: bool) -> None:
        code.add_line("")
        code.add_line("@Override")
        code.add_line("public boolean equals({} obj) {{", OBJECT)
        code.add_line("if (!(obj instanceof {})) {{", own_type)
        code.add_line("return false;")
        code.add_line("}}")
        body = Block.method_body(code, "obj")
        comparisons: List[Excerpt] = []
        if self.generators or (partial and self._required):
            other = body.declare(own_type, "other", excerpt("({}) obj", own_type))
            for generator in self.generators:
                comparisons.append(_field_equality(generator, other))
            if partial and self._required:
                comparisons.append(
                    excerpt("{}.equals({}, {})", OBJECTS, UNSET_PROPERTIES, UNSET_PROPERTIES.on(other))
                )
        if comparisons:
            body.add("return ")
            for index, comparison in enumerate(comparisons):
                if index:
                    body.add(" && ")
                body.add(comparison)
            body.add_line(";")
        else:
            body.add_line("return true;")
        code.add(body)
        code.add_line("}}")

    def _add_hash_code(self, code, partial: bool) -> None:
        fields: List[Any] = [g.property.field for g in self.generators]
        if partial and self._required:
            fields.append(UNSET_PROPERTIES)
        code.add_line("")
        code.add_line("@Override")
        code.add_line("public int hashCode() {{")
        code.add("return {}.hash(", OBJECTS)
        for index, field_access in enumerate(fields):
            if index:
                code.add(", ")
            code.add("{}", field_access)
        code.add_line(");")
        code.add_line("}}")

    def _add_to_string(self, code, partial: bool) -> None:
        prefix = ("partial " if partial else "") + self.datatype.type.simple_name + "{"
        code.add_line("")
        code.add_line("@Override")
        code.add_line("public {} toString() {{", STRING)
        body = Block.method_body(code)
        conditional = [self._is_conditional(g, partial) for g in self.generators]
        if not self.generators:
            body.add_line("return {};", java_string(prefix + "}"))
        elif not any(conditional):
            self._add_concatenated_to_string(body, prefix)
        else:
            self._add_string_builder_to_string(body, prefix, conditional)
        code.add(body)
        code.add_line("}}")

    def _is_conditional(self, generator: PropertyCodeGenerator, partial: bool) -> bool:
        state = generator.initial_state()
        return state is Initially.OPTIONAL or (partial and state is Initially.REQUIRED)

    def _add_concatenated_to_string(self, body: Block, prefix: str) -> None:
        body.add("return ")
        for index, generator in enumerate(self.generators):
            label = (prefix if index == 0 else ", ") + generator.property.name + "="
            body.add("{} + ", java_string(label))
            generator.add_to_string_value(body)
            body.add(" + ")
        body.add_line("{};", java_string("}"))

    def _add_string_builder_to_string(self, body: Block, prefix: str, conditional: List[bool]) -> None:
        result = body.declare(
            STRING_BUILDER, "result", excerpt("new {}({})", STRING_BUILDER, java_string(prefix))
        )
        separator = body.declare(STRING, "separator", java_string(""))
        for generator, is_conditional in zip(self.generators, conditional):
            if is_conditional:
                body.add("if (")
                if generator.initial_state() is Initially.REQUIRED:
                    body.add(
                        "!{}.contains({})", UNSET_PROPERTIES, self._property_constant(generator)
                    )
                else:
                    generator.add_to_string_condition(body)
                body.add_line(") {{")
            body.add(
                "{}.append({}).append({}).append(",
                result, separator, java_string(generator.property.name + "="),
            )
            generator.add_to_string_value(body)
            body.add_line(");")
            body.add_line("{} = {};", separator, java_string(", "))
            if is_conditional:
                body.add_line("}}")
        body.add_line("return {}.append({}).toString();", result, java_string("}"))

    # =========================================================================
    # Shared
    # =========================================================================

    def _add_static_helpers(self, code) -> None:
        helpers: List[Excerpt] = []
        for generator in self.generators:
            for helper in generator.static_excerpts():
                if helper not in helpers:
                    helpers.append(helper)
        for helper in helpers:
            code.add(helper)

    def _property_constant(self, generator: PropertyCodeGenerator) -> Excerpt:
        return excerpt("{}.{}", self.datatype.property_enum, generator.property.all_caps_name)


def _field_equality(generator: PropertyCodeGenerator, other: Excerpt) -> Excerpt:
    """``other``'s copy of the property compared with this instance's."""
    prop = generator.property
    mine: FieldAccess = prop.field
    theirs = prop.field.on(other)
    if not prop.type.primitive:
        return excerpt("{}.equals({}, {})", OBJECTS, mine, theirs)
    if prop.type.simple_name == "double":
        return excerpt("Double.doubleToLongBits({}) == Double.doubleToLongBits({})", mine, theirs)
    if prop.type.simple_name == "float":
        return excerpt("Float.floatToIntBits({}) == Float.floatToIntBits({})", mine, theirs)
    return excerpt("{} == {}", mine, theirs)


def generate(
    datatype: Datatype,
    properties: Sequence[Property],
    settings: Optional[GeneratorSettings] = None,
) -> GeneratedSource:
    """Generate ``<Type>_Builder`` for ``datatype``.

    Args:
        datatype: names of the value type and its builder
        properties: the value type's properties, in declaration order
        settings: formatting and checking options (default: :func:`get_settings`)

    Returns:
        GeneratedSource with the output path, the text and any syntax issues
    """
    settings = settings or get_settings()
    generators = [create_generator(prop, datatype) for prop in properties]
    builder = GeneratedBuilder(datatype, generators)
    text = builder.source(header=settings.header, indent=settings.indent)

    issues: List[SyntaxIssue] = []
    if settings.check_syntax:
        issues = check_java_source(text, builder.path)
    logger.info(f"Generated {builder.path} ({len(generators)} properties)")
    return GeneratedSource(path=builder.path, text=text, issues=issues)
