"""Tests for property strategies and the strategy registry.

Strategy output is checked before reindentation, so every emitted line
starts at column 0.
"""

import inspect

import pytest

from buildergen.core.property import collection
from buildergen.core.property import (
    BuilderFactory,
    Datatype,
    DefaultProperty,
    Initially,
    ListProperty,
    MapProperty,
    NullableProperty,
    OptionalKind,
    PrimitiveOptionalProperty,
    Property,
    SetProperty,
    create_generator,
    factory_names,
    unary_operator,
)
from buildergen.core.source import Block, SourceStringBuilder, TypeName


PERSON = Datatype.for_type(TypeName.of("com.example", "Person"))
PERSON_NO_BUILDER = Datatype.for_type(TypeName.of("com.example", "Person"), BuilderFactory.NONE)


# ── Fixtures ──────────────────────────────────────────────────────────────


def _make_property(name: str, type_text: str, **kwargs) -> Property:
    return Property(name=name, type=TypeName.parse(type_text), **kwargs)


def _class_body(*generators):
    """A class-body builder with every generator's field reserved."""
    unit = SourceStringBuilder.compilation_unit(PERSON.generated_builder)
    scope = unit.scope.child()
    for generator in generators:
        scope.add(generator.property.field)
    return unit.sub_scope(scope)


def _accessors(generator) -> str:
    code = _class_body(generator)
    generator.add_builder_field_accessors(code)
    return code.to_string()


def _in_method(generator, hook, *args, params=()) -> str:
    code = _class_body(generator)
    body = Block.method_body(code, *params)
    hook(body, *args)
    code.add(body)
    return code.to_string()


def _inline(hook) -> str:
    code = SourceStringBuilder.compilation_unit(PERSON.generated_builder)
    hook(code)
    return code.to_string()


AGE = _make_property("age", "java.util.OptionalInt")


# =========================================================================
# Tests: Descriptors
# =========================================================================

class TestDescriptors:
    def test_datatype_names(self):
        assert PERSON.builder.qualified_name == "com.example.Person.Builder"
        assert PERSON.generated_builder.qualified_name == "com.example.Person_Builder"
        assert PERSON.value_type.qualified_name == "com.example.Person_Builder.Value"
        assert PERSON.partial_type.qualified_name == "com.example.Person_Builder.Partial"
        assert PERSON.property_enum.qualified_name == "com.example.Person_Builder.Property"
        assert PERSON.package == "com.example"
        assert PERSON.has_no_args_builder
        assert not PERSON_NO_BUILDER.has_no_args_builder

    def test_property_names(self):
        prop = _make_property("firstName", "String")
        assert prop.getter_name == "firstName"
        assert prop.capitalized_name == "FirstName"
        assert prop.all_caps_name == "FIRST_NAME"

    def test_bean_convention(self):
        assert _make_property("name", "String", using_bean_convention=True).getter_name == "getName"
        assert _make_property("active", "boolean", using_bean_convention=True).getter_name == "isActive"

    def test_invalid_name(self):
        with pytest.raises(ValueError):
            _make_property("1st", "String")

    def test_optional_kinds(self):
        assert OptionalKind.for_type(TypeName.of("java.util", "OptionalLong")) is OptionalKind.LONG
        assert OptionalKind.for_type(TypeName.of("java.util", "Optional")) is None
        assert OptionalKind.for_type(TypeName.parse("int")) is None


# =========================================================================
# Tests: Registry
# =========================================================================

class TestRegistry:
    def test_order(self):
        assert factory_names() == ["primitive_optional", "list", "set", "map", "nullable"]

    @pytest.mark.parametrize("type_text, kwargs, expected", [
        ("java.util.OptionalInt", {}, PrimitiveOptionalProperty),
        ("java.util.OptionalDouble", {}, PrimitiveOptionalProperty),
        ("java.util.List<String>", {}, ListProperty),
        ("java.util.Set<java.lang.Integer>", {}, SetProperty),
        ("java.util.Map<String, java.util.List<String>>", {}, MapProperty),
        ("String", {"nullable": True}, NullableProperty),
        ("java.util.OptionalInt", {"nullable": True}, NullableProperty),
        ("java.util.List<String>", {"nullable": True}, NullableProperty),
        ("String", {}, DefaultProperty),
        ("int", {}, DefaultProperty),
        ("java.util.List", {}, DefaultProperty),
        ("java.util.List<? extends Number>", {}, DefaultProperty),
        ("com.example.Address", {}, DefaultProperty),
    ])
    def test_dispatch(self, type_text, kwargs, expected):
        generator = create_generator(_make_property("p", type_text, **kwargs), PERSON)
        assert type(generator) is expected

    def test_generators_bound_to_property(self):
        generator = create_generator(AGE, PERSON)
        assert generator.property is AGE
        assert generator.datatype is PERSON

    def test_initial_states(self):
        states = {
            type_text: create_generator(_make_property("p", type_text), PERSON).initial_state()
            for type_text in ("String", "java.util.OptionalInt", "java.util.List<String>")
        }
        assert states == {
            "String": Initially.REQUIRED,
            "java.util.OptionalInt": Initially.OPTIONAL,
            "java.util.List<String>": Initially.HAS_DEFAULT,
        }


# =========================================================================
# Tests: Primitive optional
# =========================================================================

class TestPrimitiveOptional:
    def test_builder_field(self):
        generator = create_generator(AGE, PERSON)
        code = _class_body(generator)
        generator.add_builder_field_declaration(code)
        assert code.to_string() == "private OptionalInt age = OptionalInt.empty();\n"

    def test_primitive_setter(self):
        text = _accessors(create_generator(AGE, PERSON))
        assert (
            "public Person.Builder setAge(int age) {\n"
            "this.age = OptionalInt.of(age);\n"
            "return (Person.Builder) this;\n"
            "}\n"
        ) in text

    def test_wrapper_setter_delegates(self):
        text = _accessors(create_generator(AGE, PERSON))
        assert (
            "public Person.Builder setAge(OptionalInt age) {\n"
            "if (age.isPresent()) {\n"
            "return setAge(age.getAsInt());\n"
            "} else {\n"
            "return clearAge();\n"
            "}\n"
            "}\n"
        ) in text
        assert " * @throws NullPointerException if {@code age} is null\n" in text

    def test_mapper_without_null(self):
        text = _accessors(create_generator(AGE, PERSON))
        assert (
            "public Person.Builder mapAge(IntUnaryOperator mapper) {\n"
            "Objects.requireNonNull(mapper);\n"
            "age.ifPresent(value -> setAge(mapper.applyAsInt(value)));\n"
            "return (Person.Builder) this;\n"
            "}\n"
        ) in text

    def test_mapper_with_null_result(self):
        prop = _make_property("age", "java.util.OptionalInt", mapper_type=unary_operator(TypeName.parse("int")))
        text = _accessors(create_generator(prop, PERSON))
        assert (
            "public Person.Builder mapAge(UnaryOperator<Integer> mapper) {\n"
            "Objects.requireNonNull(mapper);\n"
            "age.ifPresent(value -> {\n"
            "Integer result = mapper.apply(value);\n"
            "if (result != null) {\n"
            "setAge(result);\n"
            "} else {\n"
            "clearAge();\n"
            "}\n"
            "});\n"
            "return (Person.Builder) this;\n"
            "}\n"
        ) in text
        assert " * <p>If the result is null, clears the value.\n" in text

    def test_mapper_locals_avoid_fields(self):
        prop = _make_property("result", "java.util.OptionalLong", mapper_type=unary_operator(TypeName.parse("long")))
        text = _accessors(create_generator(prop, PERSON))
        assert "Long _result = mapper.apply(value);\n" in text
        assert "if (_result != null) {\nsetResult(_result);\n" in text

    def test_lambda_parameter_avoids_field(self):
        prop = _make_property("value", "java.util.OptionalDouble")
        text = _accessors(create_generator(prop, PERSON))
        assert "value.ifPresent(_value -> setValue(mapper.applyAsDouble(_value)));\n" in text

    def test_clear_and_getter(self):
        text = _accessors(create_generator(AGE, PERSON))
        assert " * Sets the value to be returned by {@link Person#age()} to {@link OptionalInt#empty()}.\n" in text
        assert "public Person.Builder clearAge() {\nage = OptionalInt.empty();\n" in text
        assert "public OptionalInt age() {\nreturn age;\n}\n" in text

    def test_method_set(self):
        text = _accessors(create_generator(AGE, PERSON))
        signatures = [line for line in text.splitlines() if line.startswith("public ")]
        assert signatures == [
            "public Person.Builder setAge(int age) {",
            "public Person.Builder setAge(OptionalInt age) {",
            "public Person.Builder mapAge(IntUnaryOperator mapper) {",
            "public Person.Builder clearAge() {",
            "public OptionalInt age() {",
        ]

    def test_merge_only_copies_present(self):
        generator = create_generator(AGE, PERSON)
        from_value = _in_method(generator, generator.add_merge_from_value, "value", params=("value",))
        assert from_value == "value.age().ifPresent(this::setAge);\n"
        from_builder = _in_method(generator, generator.add_merge_from_builder, "base")
        assert from_builder == "base.age().ifPresent(this::setAge);\n"

    def test_clear_field_uses_defaults(self):
        generator = create_generator(AGE, PERSON)
        text = _in_method(generator, generator.add_clear_field)
        assert text == "Person_Builder _defaults = new Person.Builder();\nage = _defaults.age;\n"

    def test_clear_field_without_builder_factory(self):
        generator = create_generator(AGE, PERSON_NO_BUILDER)
        assert _in_method(generator, generator.add_clear_field) == "age = OptionalInt.empty();\n"

    def test_value_field_and_assignment(self):
        generator = create_generator(AGE, PERSON)
        code = _class_body(generator)
        generator.add_value_field_declaration(code, AGE.field)
        generator.add_final_field_assignment(code, AGE.field, "builder")
        assert code.to_string() == "private final OptionalInt age;\nage = builder.age;\n"

    def test_to_string(self):
        generator = create_generator(AGE, PERSON)
        assert _inline(generator.add_to_string_condition) == "age.isPresent()"
        assert _inline(generator.add_to_string_value) == "age.getAsInt()"

    def test_long_and_double_kinds(self):
        text = _accessors(create_generator(_make_property("weight", "java.util.OptionalDouble"), PERSON))
        assert "public Person.Builder setWeight(double weight) {" in text
        assert "return setWeight(weight.getAsDouble());" in text
        assert "public Person.Builder mapWeight(DoubleUnaryOperator mapper) {" in text


# =========================================================================
# Tests: Default (required) properties
# =========================================================================

class TestDefaultProperty:
    NAME = _make_property("name", "String")

    def test_setter_checks_null_and_marks_set(self):
        text = _accessors(create_generator(self.NAME, PERSON))
        assert (
            "public Person.Builder setName(String name) {\n"
            "this.name = Objects.requireNonNull(name);\n"
            "_unsetProperties.remove(Property.NAME);\n"
            "return (Person.Builder) this;\n"
            "}\n"
        ) in text

    def test_primitive_setter_has_no_null_check(self):
        text = _accessors(create_generator(_make_property("count", "int"), PERSON))
        assert "this.count = count;\n" in text
        assert "public Person.Builder mapCount(IntUnaryOperator mapper) {" in text

    def test_getter_throws_while_unset(self):
        text = _accessors(create_generator(self.NAME, PERSON))
        assert (
            "public String name() {\n"
            "if (_unsetProperties.contains(Property.NAME)) {\n"
            'throw new IllegalStateException("name not set");\n'
            "}\n"
            "return name;\n"
            "}\n"
        ) in text

    def test_merge_from_builder_skips_unset(self):
        generator = create_generator(self.NAME, PERSON)
        text = _in_method(generator, generator.add_merge_from_builder, "base")
        assert text == "if (!base._unsetProperties.contains(Property.NAME)) {\nsetName(base.name);\n}\n"


# =========================================================================
# Tests: Nullable properties
# =========================================================================

class TestNullableProperty:
    NICKNAME = _make_property("nickname", "String", nullable=True)

    def test_field_annotated(self):
        generator = create_generator(self.NICKNAME, PERSON)
        code = _class_body(generator)
        generator.add_builder_field_declaration(code)
        assert code.to_string() == "private @Nullable String nickname = null;\n"
        assert code.imports.imports() == ["javax.annotation.Nullable"]

    def test_mapper_checks_mapper_first(self):
        text = _accessors(create_generator(self.NICKNAME, PERSON))
        assert (
            "public Person.Builder mapNickname(UnaryOperator<String> mapper) {\n"
            "Objects.requireNonNull(mapper);\n"
            "String value = nickname();\n"
            "if (value != null) {\n"
            "setNickname(mapper.apply(value));\n"
            "}\n"
        ) in text

    def test_merge_copies_only_non_null(self):
        generator = create_generator(self.NICKNAME, PERSON)
        text = _in_method(generator, generator.add_merge_from_value, "value", params=("value",))
        assert text == (
            "String _nickname = value.nickname();\n"
            "if (_nickname != null) {\n"
            "setNickname(_nickname);\n"
            "}\n"
        )


# =========================================================================
# Tests: Collections
# =========================================================================

class TestCollections:
    TAGS = _make_property("tags", "java.util.List<String>")
    ALIASES = _make_property("aliases", "java.util.Set<String>")
    SCORES = _make_property("scores", "java.util.Map<String, Integer>")

    def test_list_api(self):
        text = _accessors(create_generator(self.TAGS, PERSON))
        signatures = [line for line in text.splitlines() if line.startswith("public ")]
        assert signatures == [
            "public Person.Builder addTags(String element) {",
            "public Person.Builder addTags(String... elements) {",
            "public Person.Builder addAllTags(Spliterator<? extends String> elements) {",
            "public Person.Builder addAllTags(BaseStream<? extends String, ?> elements) {",
            "public Person.Builder addAllTags(Iterable<? extends String> elements) {",
            "public Person.Builder mutateTags(Consumer<? super List<String>> mutator) {",
            "public Person.Builder clearTags() {",
            "public List<String> tags() {",
        ]
        assert "tags.add(Objects.requireNonNull(element));\n" in text
        assert "return Collections.unmodifiableList(tags);\n" in text

    def test_set_has_remove(self):
        text = _accessors(create_generator(self.ALIASES, PERSON))
        assert "public Person.Builder removeAliases(String element) {\n" in text
        assert "aliases.remove(Objects.requireNonNull(element));\n" in text

    def test_mutate_notes_delegation(self):
        text = _accessors(create_generator(self.TAGS, PERSON))
        assert (
            "// If addTags is overridden, this method will be updated to delegate to it\n"
            "mutator.accept(tags);\n"
        ) in text

    def test_map_mutate_notes_delegation(self):
        text = _accessors(create_generator(self.SCORES, PERSON))
        assert (
            "// If putScores is overridden, this method will be updated to delegate to it\n"
            "mutator.accept(scores);\n"
        ) in text

    def test_collection_base_is_abstract(self):
        assert inspect.isabstract(collection._CollectionProperty)
        assert not inspect.isabstract(ListProperty)
        assert not inspect.isabstract(SetProperty)

    def test_map_api(self):
        text = _accessors(create_generator(self.SCORES, PERSON))
        assert "public Person.Builder putScores(String key, Integer value) {\n" in text
        assert (
            "for (Map.Entry<? extends String, ? extends Integer> entry : map.entrySet()) {\n"
            "putScores(entry.getKey(), entry.getValue());\n"
            "}\n"
        ) in text

    def test_merges_append(self):
        generator = create_generator(self.TAGS, PERSON)
        assert _in_method(generator, generator.add_merge_from_value, "value") == "addAllTags(value.tags());\n"
        assert _in_method(generator, generator.add_merge_from_builder, "base") == "addAllTags(base.tags);\n"

    def test_value_uses_static_helper(self):
        generator = create_generator(self.TAGS, PERSON)
        code = _class_body(generator)
        generator.add_final_field_assignment(code, self.TAGS.field, "builder")
        assert code.to_string() == "tags = immutableList(builder.tags);\n"
        assert len(generator.static_excerpts()) == 1

    def test_helpers_shared_between_properties(self):
        first = create_generator(self.TAGS, PERSON)
        second = create_generator(_make_property("notes", "java.util.List<Integer>"), PERSON)
        assert first.static_excerpts() == second.static_excerpts()
