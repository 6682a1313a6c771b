"""Strategies for java.util.List and java.util.Set properties.

Both keep a mutable JDK collection in the builder and hand the value classes
an unmodifiable copy made by a static helper (``immutableList`` /
``immutableSet``), emitted once per file however many properties use it.
"""

from abc import abstractmethod
from typing import Any, Optional, Sequence

from ..source import Block, Excerpt, TypeName, Wildcard, excerpt
from .base import Initially, PropertyCodeGenerator, PropertyCodeGeneratorFactory
from .functional import FunctionalType, consumer
from .methods import add_all_method, add_method, clear_method, getter, mutator, remove_method
from .models import Datatype, Property
from .types import (
    ARRAY_LIST,
    ARRAYS,
    BASE_STREAM,
    COLLECTION,
    COLLECTIONS,
    ITERABLE,
    LINKED_HASH_SET,
    LIST,
    OBJECTS,
    SET,
    SPLITERATOR,
)

IMMUTABLE_LIST = excerpt(
    "\n"
    "private static <E> {0}<E> immutableList({0}<E> elements) {{\n"
    "if (elements.isEmpty()) {{\n"
    "return {1}.emptyList();\n"
    "}}\n"
    "if (elements.size() == 1) {{\n"
    "return {1}.singletonList(elements.get(0));\n"
    "}}\n"
    "return {1}.unmodifiableList(new {2}<>(elements));\n"
    "}}\n",
    LIST, COLLECTIONS, ARRAY_LIST,
)

IMMUTABLE_SET = excerpt(
    "\n"
    "private static <E> {0}<E> immutableSet({0}<E> elements) {{\n"
    "if (elements.isEmpty()) {{\n"
    "return {1}.emptySet();\n"
    "}}\n"
    "if (elements.size() == 1) {{\n"
    "return {1}.singleton(elements.iterator().next());\n"
    "}}\n"
    "return {1}.unmodifiableSet(new {2}<>(elements));\n"
    "}}\n",
    SET, COLLECTIONS, LINKED_HASH_SET,
)


def _element_type(prop: Property, collection: TypeName) -> Optional[TypeName]:
    """The element type of ``collection<E>``, or None if ``prop`` is not one."""
    if prop.nullable or prop.type.raw() != collection or len(prop.type.type_args) != 1:
        return None
    element = prop.type.type_args[0]
    if isinstance(element, Wildcard):
        return None
    return element


class ListPropertyFactory(PropertyCodeGeneratorFactory):

    def create(self, prop: Property, datatype: Datatype) -> Optional["ListProperty"]:
        element = _element_type(prop, LIST)
        if element is None:
            return None
        return ListProperty(datatype, prop, element)


class SetPropertyFactory(PropertyCodeGeneratorFactory):

    def create(self, prop: Property, datatype: Datatype) -> Optional["SetProperty"]:
        element = _element_type(prop, SET)
        if element is None:
            return None
        return SetProperty(datatype, prop, element)


class _CollectionProperty(PropertyCodeGenerator):
    """Shared emission for List and Set; subclasses fill in the differences."""

    interface: TypeName
    implementation: TypeName
    noun: str
    helper_name: str
    helper: Excerpt

    def __init__(self, datatype: Datatype, prop: Property, element_type: TypeName):
        super().__init__(datatype, prop)
        self.element_type = element_type

    @property
    def mutator_type(self) -> FunctionalType:
        return consumer(self.interface.with_args(self.element_type))

    def initial_state(self) -> Initially:
        return Initially.HAS_DEFAULT

    def add_value_field_declaration(self, code, final_field: Any) -> None:
        code.add_line("private final {} {};", self.property.type, final_field)

    def add_builder_field_declaration(self, code) -> None:
        code.add_line(
            "private final {} {} = new {}<>();",
            self.implementation.with_args(self.element_type),
            self.property.field,
            self.implementation,
        )

    def add_builder_field_accessors(self, code) -> None:
        self._add_add(code)
        self._add_varargs_add(code)
        self._add_add_all_spliterator(code)
        self._add_add_all_stream(code)
        self._add_add_all_iterable(code)
        self._add_remove(code)
        self._add_mutate(code)
        self._add_clear(code)
        self._add_getter(code)

    # Documentation that differs between lists and sets
    @abstractmethod
    def _add_javadoc(self, code) -> None:
        ...

    @abstractmethod
    def _add_all_javadoc(self, code) -> None:
        ...

    def _add_add(self, code) -> None:
        prop = self.property
        code.add_line("")
        code.add_line("/**")
        self._add_javadoc(code)
        code.add_line(" *")
        self._add_return_this_javadoc(code)
        code.add_line(" * @throws NullPointerException if {{@code element}} is null")
        code.add_line(" */")
        code.add_line("public {} {}({} element) {{", self.datatype.builder, add_method(prop), self.element_type)
        body = Block.method_body(code, "element")
        body.add_line("{}.add({}.requireNonNull(element));", prop.field, OBJECTS)
        self._add_return_this(body)
        code.add(body)
        code.add_line("}}")

    def _add_varargs_add(self, code) -> None:
        prop = self.property
        code.add_line("")
        code.add_line("/**")
        self._add_all_javadoc(code)
        code.add_line(" *")
        self._add_return_this_javadoc(code)
        code.add_line(" * @throws NullPointerException if {{@code elements}} is null or contains a null element")
        code.add_line(" */")
        code.add_line("public {} {}({}... elements) {{", self.datatype.builder, add_method(prop), self.element_type)
        code.add_line("return {}({}.asList(elements));", add_all_method(prop), ARRAYS)
        code.add_line("}}")

    def _add_add_all_spliterator(self, code) -> None:
        prop = self.property
        code.add_line("")
        code.add_line("/**")
        self._add_all_javadoc(code)
        code.add_line(" *")
        self._add_return_this_javadoc(code)
        code.add_line(" * @throws NullPointerException if {{@code elements}} is null or contains a null element")
        code.add_line(" */")
        code.add_line(
            "public {} {}({} elements) {{",
            self.datatype.builder,
            add_all_method(prop),
            SPLITERATOR.with_args(Wildcard.extends(self.element_type)),
        )
        code.add_line("elements.forEachRemaining(this::{});", add_method(prop))
        self._add_return_this(code)
        code.add_line("}}")

    def _add_add_all_stream(self, code) -> None:
        prop = self.property
        code.add_line("")
        code.add_line("/**")
        self._add_all_javadoc(code)
        code.add_line(" *")
        self._add_return_this_javadoc(code)
        code.add_line(" * @throws NullPointerException if {{@code elements}} is null or contains a null element")
        code.add_line(" */")
        code.add_line(
            "public {} {}({} elements) {{",
            self.datatype.builder,
            add_all_method(prop),
            BASE_STREAM.with_args(Wildcard.extends(self.element_type), Wildcard()),
        )
        code.add_line("return {}(elements.spliterator());", add_all_method(prop))
        code.add_line("}}")

    def _add_add_all_iterable(self, code) -> None:
        prop = self.property
        code.add_line("")
        code.add_line("/**")
        self._add_all_javadoc(code)
        code.add_line(" *")
        self._add_return_this_javadoc(code)
        code.add_line(" * @throws NullPointerException if {{@code elements}} is null or contains a null element")
        code.add_line(" */")
        code.add_line(
            "public {} {}({} elements) {{",
            self.datatype.builder,
            add_all_method(prop),
            ITERABLE.with_args(Wildcard.extends(self.element_type)),
        )
        body = Block.method_body(code, "elements")
        self._add_presize(body)
        body.add_line("elements.forEach(this::{});", add_method(prop))
        self._add_return_this(body)
        code.add(body)
        code.add_line("}}")

    def _add_presize(self, body: Block) -> None:
        pass

    def _add_remove(self, code) -> None:
        pass

    def _add_mutate(self, code) -> None:
        prop = self.property
        code.add_line("")
        code.add_line("/**")
        code.add_line(" * Applies {{@code mutator}} to the {} to be returned from {}.", self.noun, self._getter_link())
        code.add_line(" *")
        code.add_line(
            " * <p>This method mutates the {} in-place. {{@code mutator}} is a void consumer, so any value",
            self.noun,
        )
        code.add_line(" * returned from a lambda will be ignored. Take care not to call pure functions,")
        code.add_line(" * like {}.", COLLECTION.javadoc_no_arg_method_link("stream"))
        code.add_line(" *")
        self._add_return_this_javadoc(code)
        code.add_line(" * @throws NullPointerException if {{@code mutator}} is null")
        code.add_line(" */")
        code.add_line(
            "public {} {}({} mutator) {{",
            self.datatype.builder, mutator(prop), self.mutator_type.functional_interface,
        )
        body = Block.method_body(code, "mutator")
        body.add_line("// If {} is overridden, this method will be updated to delegate to it", add_method(prop))
        body.add_line("mutator.{}({});", self.mutator_type.method_name, prop.field)
        self._add_return_this(body)
        code.add(body)
        code.add_line("}}")

    def _add_clear(self, code) -> None:
        prop = self.property
        code.add_line("")
        code.add_line("/**")
        code.add_line(" * Clears the {} to be returned from {}.", self.noun, self._getter_link())
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
            " * Returns an unmodifiable view of the {} that will be returned by {}.",
            self.noun, self._getter_link(),
        )
        code.add_line(" * Changes to this builder will be reflected in the view.")
        code.add_line(" */")
        code.add_line("public {} {}() {{", prop.type, getter(prop))
        code.add_line("return {}.unmodifiable{}({});", COLLECTIONS, self.interface.simple_name, prop.field)
        code.add_line("}}")

    def add_final_field_assignment(self, code, final_field: Any, builder: str) -> None:
        code.add_line("{} = {}({});", final_field, self.helper_name, self.property.field.on(builder))

    def add_merge_from_value(self, code, value: str) -> None:
        code.add_line("{}({}.{}());", add_all_method(self.property), value, self.property.getter_name)

    def add_merge_from_builder(self, code, builder: Excerpt) -> None:
        code.add_line("{}({});", add_all_method(self.property), self.property.field.on(builder))

    def add_clear_field(self, code) -> None:
        code.add_line("{}();", clear_method(self.property))

    def static_excerpts(self) -> Sequence[Excerpt]:
        return (self.helper,)


class ListProperty(_CollectionProperty):
    interface = LIST
    implementation = ARRAY_LIST
    noun = "list"
    helper_name = "immutableList"
    helper = IMMUTABLE_LIST

    def _add_javadoc(self, code) -> None:
        code.add_line(" * Adds {{@code element}} to the list to be returned from {}.", self._getter_link())

    def _add_all_javadoc(self, code) -> None:
        code.add_line(
            " * Adds each element of {{@code elements}} to the list to be returned from {}.",
            self._getter_link(),
        )

    def _add_presize(self, body: Block) -> None:
        body.add_line("if (elements instanceof {}) {{", COLLECTION)
        body.add_line(
            "{0}.ensureCapacity({0}.size() + (({1}) elements).size());",
            self.property.field,
            COLLECTION.with_args(Wildcard()),
        )
        body.add_line("}}")


class SetProperty(_CollectionProperty):
    interface = SET
    implementation = LINKED_HASH_SET
    noun = "set"
    helper_name = "immutableSet"
    helper = IMMUTABLE_SET

    def _add_javadoc(self, code) -> None:
        code.add_line(
            " * Adds {{@code element}} to the set to be returned from {}. If the set already",
            self._getter_link(),
        )
        code.add_line(
            " * contains {{@code element}}, then {{@code {}}} has no effect (only the previously added element",
            add_method(self.property),
        )
        code.add_line(" * is retained).")

    def _add_all_javadoc(self, code) -> None:
        code.add_line(
            " * Adds each element of {{@code elements}} to the set to be returned from {},",
            self._getter_link(),
        )
        code.add_line(" * ignoring duplicate elements (only the first duplicate element is added).")

    def _add_remove(self, code) -> None:
        prop = self.property
        code.add_line("")
        code.add_line("/**")
        code.add_line(
            " * Removes {{@code element}} from the set to be returned from {}. Does nothing if",
            self._getter_link(),
        )
        code.add_line(" * {{@code element}} is not a member of the set.")
        code.add_line(" *")
        self._add_return_this_javadoc(code)
        code.add_line(" * @throws NullPointerException if {{@code element}} is null")
        code.add_line(" */")
        code.add_line("public {} {}({} element) {{", self.datatype.builder, remove_method(prop), self.element_type)
        body = Block.method_body(code, "element")
        body.add_line("{}.remove({}.requireNonNull(element));", prop.field, OBJECTS)
        self._add_return_this(body)
        code.add(body)
        code.add_line("}}")
