"""Tests for the builder orchestrator and the tree-sitter syntax check."""

import pytest

from buildergen.core.config import GeneratorSettings
from buildergen.core.generator import GeneratedBuilder, generate
from buildergen.core.property import BuilderFactory, Datatype, Property, create_generator, unary_operator
from buildergen.core.source import TypeName, check_java_source, list_methods


# =========================================================================
# Sample models
# =========================================================================

PERSON = Datatype.for_type(TypeName.of("com.example", "Person"))

SETTINGS = GeneratorSettings(check_syntax=True)


def _make_property(name: str, type_text: str, **kwargs) -> Property:
    return Property(name=name, type=TypeName.parse(type_text), **kwargs)


FULL_PROPERTIES = [
    _make_property("name", "String"),
    _make_property("age", "java.util.OptionalInt"),
    _make_property("nickname", "String", nullable=True),
    _make_property("tags", "java.util.List<String>"),
    _make_property("aliases", "java.util.Set<String>"),
    _make_property("scores", "java.util.Map<String, Integer>"),
    _make_property("height", "double"),
]

AGE_ONLY = [_make_property("age", "java.util.OptionalInt")]


def _generate(properties, datatype=PERSON, settings=SETTINGS):
    return generate(datatype, properties, settings)


def _methods(text, class_name="Person_Builder"):
    return [m for m in list_methods(text) if m.class_name == class_name]


# =========================================================================
# Tests: File layout
# =========================================================================

class TestLayout:
    def test_path(self):
        assert _generate(AGE_ONLY).path == "com/example/Person_Builder.java"

    def test_default_package_path(self):
        datatype = Datatype.for_type(TypeName.of("", "Thing"))
        generated = _generate(AGE_ONLY, datatype=datatype)
        assert generated.path == "Thing_Builder.java"
        assert "package" not in generated.text.split("abstract class")[0]

    def test_header_package_and_imports(self):
        text = _generate(FULL_PROPERTIES).text
        lines = text.splitlines()
        assert lines[0] == "// Autogenerated code. Do not modify."
        assert lines[1] == "package com.example;"
        imports = [line for line in lines if line.startswith("import ")]
        assert imports == sorted(imports)
        assert len(imports) == len(set(imports))
        assert "import java.util.OptionalInt;" in imports
        assert "import javax.annotation.Nullable;" in imports
        assert not any(i.startswith("import java.lang.") for i in imports)
        assert not any(i.startswith("import com.example.") for i in imports)

    def test_custom_header_and_indent(self):
        settings = GeneratorSettings(header="// custom", indent=4, check_syntax=False)
        text = _generate(AGE_ONLY, settings=settings).text
        assert text.startswith("// custom\n")
        assert "\n    private OptionalInt age = OptionalInt.empty();\n" in text

    def test_class_declaration(self):
        text = _generate(AGE_ONLY).text
        assert " * Auto-generated superclass of {@link Person.Builder},\n" in text
        assert "\nabstract class Person_Builder {\n" in text
        assert text.rstrip().endswith("}")

    def test_deterministic(self):
        assert _generate(FULL_PROPERTIES).text == _generate(FULL_PROPERTIES).text

    def test_source_repeatable(self):
        builder = GeneratedBuilder(PERSON, [create_generator(p, PERSON) for p in AGE_ONLY])
        assert builder.source() == builder.source()


# =========================================================================
# Tests: Syntax
# =========================================================================

class TestSyntax:
    @pytest.mark.parametrize("properties", [
        [],
        AGE_ONLY,
        FULL_PROPERTIES,
        [_make_property("name", "String")],
        [_make_property("score", "java.util.OptionalDouble", mapper_type=unary_operator(TypeName.parse("double")))],
    ])
    def test_parses_cleanly(self, properties):
        generated = _generate(properties)
        assert generated.issues == []

    def test_no_builder_factory_parses(self):
        datatype = Datatype.for_type(TypeName.of("com.example", "Person"), BuilderFactory.NONE)
        generated = _generate(FULL_PROPERTIES, datatype=datatype)
        assert generated.issues == []
        assert "_defaults" not in generated.text
        assert "public static Person.Builder from(Person value)" not in generated.text

    def test_check_reports_errors(self):
        issues = check_java_source("class A {\n  void f( {\n}\n", "A.java")
        assert issues
        assert all(issue.file_path == "A.java" for issue in issues)
        assert all(issue.severity == "error" for issue in issues)

    def test_check_disabled(self):
        settings = GeneratorSettings(check_syntax=False)
        assert _generate(AGE_ONLY, settings=settings).issues == []


# =========================================================================
# Tests: Primitive optional scenario
# =========================================================================

class TestAgeScenario:
    def test_emitted_method_set(self):
        methods = _methods(_generate(AGE_ONLY).text)
        accessors = [(m.name, m.parameter_types) for m in methods if m.name.endswith("Age") or m.name == "age"]
        assert accessors == [
            ("setAge", ["int"]),
            ("setAge", ["OptionalInt"]),
            ("mapAge", ["IntUnaryOperator"]),
            ("clearAge", []),
            ("age", []),
        ]

    def test_field_qualified_when_shadowed(self):
        text = _generate(AGE_ONLY).text
        assert "this.age = OptionalInt.of(age);" in text

    def test_no_required_machinery(self):
        text = _generate(AGE_ONLY).text
        assert "_unsetProperties" not in text
        assert "private enum Property" not in text

    def test_merge_and_clear(self):
        text = _generate(AGE_ONLY).text
        assert "value.age().ifPresent(this::setAge);" in text
        assert "base.age().ifPresent(this::setAge);" in text
        assert "Person_Builder _defaults = new Person.Builder();" in text
        assert "age = _defaults.age;" in text

    def test_to_string_conditional(self):
        text = _generate(AGE_ONLY).text
        assert 'StringBuilder result = new StringBuilder("Person{");' in text
        assert "if (age.isPresent()) {" in text
        assert 'result.append(separator).append("age=").append(age.getAsInt());' in text

    def test_local_renamed_around_property_named_result(self):
        properties = [
            _make_property("result", "java.util.OptionalInt", mapper_type=unary_operator(TypeName.parse("int"))),
        ]
        generated = _generate(properties)
        assert "Integer _result = mapper.apply(value);" in generated.text
        assert 'StringBuilder _result = new StringBuilder("Person{");' in generated.text
        assert generated.issues == []


# =========================================================================
# Tests: Whole-builder methods
# =========================================================================

class TestBuilderMethods:
    def test_builder_method_order(self):
        names = [m.name for m in _methods(_generate(FULL_PROPERTIES).text)]
        tail = [n for n in names if n in ("from", "mergeFrom", "clear", "build", "buildPartial")]
        assert tail == ["from", "mergeFrom", "mergeFrom", "clear", "build", "buildPartial"]
        assert names.index("setName") < names.index("mergeFrom")

    def test_merge_from_builder_upcasts_once(self):
        text = _generate(FULL_PROPERTIES).text
        assert text.count("Person_Builder base = template;") == 1
        assert "// Upcast to access private fields" in text
        assert "addAllTags(base.tags);" in text
        assert "putAllScores(base.scores);" in text

    def test_clear_shares_defaults(self):
        text = _generate(FULL_PROPERTIES).text
        assert text.count("Person_Builder _defaults = new Person.Builder();") == 1
        assert "_unsetProperties.addAll(_defaults._unsetProperties);" in text

    def test_build_checks_required(self):
        text = _generate(FULL_PROPERTIES).text
        assert 'throw new IllegalStateException("Not set: " + _unsetProperties);' in text
        assert "return new Value(this);" in text
        assert "return new Partial(this);" in text

    def test_property_enum_lists_required_only(self):
        text = _generate(FULL_PROPERTIES).text
        assert 'NAME("name"),' in text
        assert 'HEIGHT("height"),' in text
        assert 'AGE("age"),' not in text
        assert 'TAGS("tags"),' not in text

    def test_static_helpers_emitted_once(self):
        properties = FULL_PROPERTIES + [_make_property("notes", "java.util.List<Integer>")]
        text = _generate(properties).text
        assert text.count("private static <E> List<E> immutableList(List<E> elements) {") == 1
        assert text.count("private static <E> Set<E> immutableSet(Set<E> elements) {") == 1
        assert text.count("private static <K, V> Map<K, V> immutableMap(Map<K, V> entries) {") == 1

    def test_no_helpers_without_collections(self):
        assert "immutable" not in _generate(AGE_ONLY).text


# =========================================================================
# Tests: Value and Partial
# =========================================================================

class TestValueClasses:
    def test_value_class(self):
        text = _generate(FULL_PROPERTIES).text
        assert "private static final class Value extends Person {" in text
        assert "private Value(Person_Builder builder) {" in text
        assert "tags = immutableList(builder.tags);" in text
        assert "scores = immutableMap(builder.scores);" in text

    def test_value_getters(self):
        methods = _methods(_generate(FULL_PROPERTIES).text, "Value")
        getters = [m.name for m in methods if m.name not in ("equals", "hashCode", "toString")]
        assert getters == ["name", "age", "nickname", "tags", "aliases", "scores", "height"]

    def test_equals_and_hash_code(self):
        text = _generate(FULL_PROPERTIES).text
        assert "Value other = (Value) obj;" in text
        assert "Objects.equals(name, other.name)" in text
        assert "Double.doubleToLongBits(height) == Double.doubleToLongBits(other.height)" in text
        assert "return Objects.hash(name, age, nickname, tags, aliases, scores, height);" in text

    def test_partial_tracks_unset(self):
        text = _generate(FULL_PROPERTIES).text
        assert "Partial(Person_Builder builder) {" in text
        assert "_unsetProperties = builder._unsetProperties.clone();" in text
        assert 'throw new UnsupportedOperationException("name not set");' in text
        assert 'new StringBuilder("partial Person{")' in text
        assert "if (!_unsetProperties.contains(Property.NAME)) {" in text

    def test_concatenated_to_string(self):
        properties = [_make_property("name", "String"), _make_property("tags", "java.util.List<String>")]
        text = _generate(properties).text
        assert 'return "Person{name=" + name + ", tags=" + tags + "}";' in text

    def test_empty_to_string(self):
        text = _generate([]).text
        assert 'return "Person{}";' in text
        assert "return true;" in text

    def test_nullable_getter_annotated(self):
        text = _generate(FULL_PROPERTIES).text
        assert "@Override\n    @Nullable\n    public String nickname() {" in text

    def test_partial_javadoc_mentions_unset_only_when_required(self):
        sentence = "Unset properties will throw an {@link UnsupportedOperationException} when"
        assert sentence not in _generate(AGE_ONLY).text
        assert sentence in _generate(FULL_PROPERTIES).text
        assert "be performed.\n" in _generate(AGE_ONLY).text

    def test_merge_from_builder_javadoc(self):
        text = _generate(AGE_ONLY).text
        assert text.count(" * Copies values from {@code template}, appending to collections.\n") == 1


# =========================================================================
# Tests: Type names hidden inside the class body
# =========================================================================

class TestHiddenTypeNames:
    @pytest.mark.parametrize("simple_name", ["Value", "Partial", "Builder"])
    def test_user_type_named_like_member_type(self, simple_name):
        properties = [_make_property("v", f"com.other.{simple_name}")]
        text = _generate(properties).text
        assert f"private com.other.{simple_name} v;" in text
        assert f"private final com.other.{simple_name} v;" in text
        assert f"import com.other.{simple_name};" not in text

    def test_property_enum_name_hidden_when_emitted(self):
        properties = [_make_property("p", "com.other.Property")]
        text = _generate(properties).text
        assert "private enum Property" in text
        assert "private com.other.Property p;" in text

    def test_property_enum_name_free_without_required(self):
        properties = [_make_property("p", "com.other.Property", nullable=True)]
        text = _generate(properties).text
        assert "import com.other.Property;" in text

    def test_user_type_named_like_java_lang(self):
        properties = [
            _make_property("label", "com.other.String"),
            _make_property("name", "String"),
        ]
        generated = _generate(properties)
        assert "import com.other.String;" not in generated.text
        assert "private com.other.String label;" in generated.text
        assert "private String name;" in generated.text
        assert generated.issues == []
