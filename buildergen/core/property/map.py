"""Strategy for java.util.Map properties."""

from typing import Any, Optional, Sequence

from ..source import Block, Excerpt, TypeName, Wildcard, excerpt
from .base import Initially, PropertyCodeGenerator, PropertyCodeGeneratorFactory
from .functional import FunctionalType, consumer
from .methods import clear_method, getter, mutator, put_all_method, put_method, remove_method
from .models import Datatype, Property
from .types import COLLECTIONS, LINKED_HASH_MAP, MAP, MAP_ENTRY, OBJECTS

IMMUTABLE_MAP = excerpt(
    "\n"
    "private static <K, V> {0}<K, V> immutableMap({0}<K, V> entries) {{\n"
    "if (entries.isEmpty()) {{\n"
    "return {1}.emptyMap();\n"
    "}}\n"
    "if (entries.size() == 1) {{\n"
    "{2}<K, V> entry = entries.entrySet().iterator().next();\n"
    "return {1}.singletonMap(entry.getKey(), entry.getValue());\n"
    "}}\n"
    "return {1}.unmodifiableMap(new {3}<>(entries));\n"
    "}}\n",
    MAP, COLLECTIONS, MAP_ENTRY, LINKED_HASH_MAP,
)


class MapPropertyFactory(PropertyCodeGeneratorFactory):

    def create(self, prop: Property, datatype: Datatype) -> Optional["MapProperty"]:
        if prop.nullable or prop.type.raw() != MAP or len(prop.type.type_args) != 2:
            return None
        key_type, value_type = prop.type.type_args
        if isinstance(key_type, Wildcard) or isinstance(value_type, Wildcard):
            return None
        return MapProperty(datatype, prop, key_type, value_type)


class MapProperty(PropertyCodeGenerator):
    """Insertion-ordered map; duplicate keys replace the earlier value."""

    def __init__(self, datatype: Datatype, prop: Property, key_type: TypeName, value_type: TypeName):
        super().__init__(datatype, prop)
        self.key_type = key_type
        self.value_type = value_type

    @property
    def mutator_type(self) -> FunctionalType:
        return consumer(MAP.with_args(self.key_type, self.value_type))

    def initial_state(self) -> Initially:
        return Initially.HAS_DEFAULT

    def add_value_field_declaration(self, code, final_field: Any) -> None:
        code.add_line("private final {} {};", self.property.type, final_field)

    def add_builder_field_declaration(self, code) -> None:
        code.add_line(
            "private final {} {} = new {}<>();",
            LINKED_HASH_MAP.with_args(self.key_type, self.value_type),
            self.property.field,
            LINKED_HASH_MAP,
        )

    def add_builder_field_accessors(self, code) -> None:
        self._add_put(code)
        self._add_put_all(code)
        self._add_remove(code)
        self._add_mutate(code)
        self._add_clear(code)
        self._add_getter(code)

    def _add_put(self, code) -> None:
        prop = self.property
        code.add_line("")
        code.add_line("/**")
        code.add_line(
            " * Associates {{@code key}} with {{@code value}} in the map to be returned from {}.",
            self._getter_link(),
        )
        code.add_line(" * If the map previously contained a mapping for the key,")
        code.add_line(" * the old value is replaced by the specified value.")
        code.add_line(" *")
        self._add_return_this_javadoc(code)
        code.add_line(" * @throws NullPointerException if either {{@code key}} or {{@code value}} are null")
        code.add_line(" */")
        code.add_line(
            "public {} {}({} key, {} value) {{",
            self.datatype.builder, put_method(prop), self.key_type, self.value_type,
        )
        body = Block.method_body(code, "key", "value")
        body.add_line("{}.requireNonNull(key);", OBJECTS)
        body.add_line("{}.requireNonNull(value);", OBJECTS)
        body.add_line("{}.put(key, value);", prop.field)
        self._add_return_this(body)
        code.add(body)
        code.add_line("}}")

    def _add_put_all(self, code) -> None:
        prop = self.property
        entry_type = MAP_ENTRY.with_args(Wildcard.extends(self.key_type), Wildcard.extends(self.value_type))
        code.add_line("")
        code.add_line("/**")
        code.add_line(
            " * Copies all of the mappings from {{@code map}} to the map to be returned from {}.",
            self._getter_link(),
        )
        code.add_line(" *")
        self._add_return_this_javadoc(code)
        code.add_line(" * @throws NullPointerException if {{@code map}} is null or contains a")
        code.add_line(" *     null key or value")
        code.add_line(" */")
        code.add_line(
            "public {} {}({} map) {{",
            self.datatype.builder,
            put_all_method(prop),
            MAP.with_args(Wildcard.extends(self.key_type), Wildcard.extends(self.value_type)),
        )
        body = Block.method_body(code, "map")
        loop = body.inner_block()
        entry = loop.reserve("entry")
        body.add_line("for ({} {} : map.entrySet()) {{", entry_type, entry)
        loop.add_line("{0}({1}.getKey(), {1}.getValue());", put_method(prop), entry)
        body.add(loop)
        body.add_line("}}")
        self._add_return_this(body)
        code.add(body)
        code.add_line("}}")

    def _add_remove(self, code) -> None:
        prop = self.property
        code.add_line("")
        code.add_line("/**")
        code.add_line(
            " * Removes the mapping for {{@code key}} from the map to be returned from {}, if one is present.",
            self._getter_link(),
        )
        code.add_line(" *")
        self._add_return_this_javadoc(code)
        code.add_line(" * @throws NullPointerException if {{@code key}} is null")
        code.add_line(" */")
        code.add_line("public {} {}({} key) {{", self.datatype.builder, remove_method(prop), self.key_type)
        body = Block.method_body(code, "key")
        body.add_line("{}.remove({}.requireNonNull(key));", prop.field, OBJECTS)
        self._add_return_this(body)
        code.add(body)
        code.add_line("}}")

    def _add_mutate(self, code) -> None:
        prop = self.property
        code.add_line("")
        code.add_line("/**")
        code.add_line(" * Applies {{@code mutator}} to the map to be returned from {}.", self._getter_link())
        code.add_line(" *")
        code.add_line(" * <p>This method mutates the map in-place. {{@code mutator}} is a void")
        code.add_line(" * consumer, so any value returned from a lambda will be ignored.")
        code.add_line(" *")
        self._add_return_this_javadoc(code)
        code.add_line(" * @throws NullPointerException if {{@code mutator}} is null")
        code.add_line(" */")
        code.add_line(
            "public {} {}({} mutator) {{",
            self.datatype.builder, mutator(prop), self.mutator_type.functional_interface,
        )
        body = Block.method_body(code, "mutator")
        body.add_line("// If {} is overridden, this method will be updated to delegate to it", put_method(prop))
        body.add_line("mutator.{}({});", self.mutator_type.method_name, prop.field)
        self._add_return_this(body)
        code.add(body)
        code.add_line("}}")

    def _add_clear(self, code) -> None:
        prop = self.property
        code.add_line("")
        code.add_line("/**")
        code.add_line(" * Removes all of the mappings from the map to be returned from {}.", self._getter_link())
        code.add_line(" *")
        self._add_return_this_javadoc(code)
        code.add_line(" */")
        code.add_line("public {} {}() {{", self.datatype.builder, clear_method(prop))
        code.add_line("{}.clear();", prop.field)
        self._add_return_this(code)
        code.add_line("}}")

    def _add_getter(self, code) -> None:
        prop = self.property
        code.add_line("")
        code.add_line("/**")
        code.add_line(
            " * Returns an unmodifiable view of the map that will be returned by {}.",
            self._getter_link(),
        )
        code.add_line(" * Changes to this builder will be reflected in the view.")
        code.add_line(" */")
        code.add_line("public {} {}() {{", prop.type, getter(prop))
        code.add_line("return {}.unmodifiableMap({});", COLLECTIONS, prop.field)
        code.add_line("}}")

    def add_final_field_assignment(self, code, final_field: Any, builder: str) -> None:
        code.add_line("{} = immutableMap({});", final_field, self.property.field.on(builder))

    def add_merge_from_value(self, code, value: str) -> None:
        code.add_line("{}({}.{}());", put_all_method(self.property), value, self.property.getter_name)

    def add_merge_from_builder(self, code, builder: Excerpt) -> None:
        code.add_line("{}({});", put_all_method(self.property), self.property.field.on(builder))

    def add_clear_field(self, code) -> None:
        code.add_line("{}();", clear_method(self.property))

    def static_excerpts(self) -> Sequence[Excerpt]:
        return (IMMUTABLE_MAP,)
