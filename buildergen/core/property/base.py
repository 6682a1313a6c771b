"""Base interface for property code generators.

Defines the Strategy pattern base class every property shape implements.
The builder orchestrator calls these hooks in a fixed order; each hook writes
into whatever builder or Block it is handed and must not assume anything about
what the other properties write.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Optional, Sequence

from ..source import Excerpt
from .models import Datatype, Property

logger = logging.getLogger(__name__)


class Initially(Enum):
    """State of the property on a freshly created builder."""
    REQUIRED = "required"        # must be set before build()
    OPTIONAL = "optional"        # may be absent; printed only when present
    HAS_DEFAULT = "has_default"  # always has a value (e.g. empty collection)


class PropertyCodeGenerator(ABC):
    """Emits everything the generated builder needs for one property.

    Subclasses implement:
    - initial_state(): REQUIRED / OPTIONAL / HAS_DEFAULT
    - field declarations for the builder and for the value classes
    - add_builder_field_accessors(): the public builder API for the property
    - assignment, merge and clear hooks

    Strategies are bound to one property and one datatype and never change
    after construction.
    """

    def __init__(self, datatype: Datatype, prop: Property):
        self.datatype = datatype
        self.property = prop

    @abstractmethod
    def initial_state(self) -> Initially:
        ...

    @abstractmethod
    def add_value_field_declaration(self, code, final_field: Any) -> None:
        """Declare the field holding this property in the Value/Partial classes."""
        ...

    @abstractmethod
    def add_builder_field_declaration(self, code) -> None:
        """Declare (and initialize) the builder's field."""
        ...

    @abstractmethod
    def add_builder_field_accessors(self, code) -> None:
        """Add the public setter/mapper/clear/getter methods to the builder body."""
        ...

    @abstractmethod
    def add_final_field_assignment(self, code, final_field: Any, builder: str) -> None:
        """Assign the value field from ``builder`` inside a Value/Partial constructor."""
        ...

    @abstractmethod
    def add_merge_from_value(self, code, value: str) -> None:
        """Copy the property from value instance ``value`` into this builder."""
        ...

    @abstractmethod
    def add_merge_from_builder(self, code, builder: Excerpt) -> None:
        """Copy the property from another builder, already upcast to the generated type."""
        ...

    @abstractmethod
    def add_clear_field(self, code) -> None:
        """Reset the field inside the builder-wide ``clear()``."""
        ...

    def add_to_string_condition(self, code) -> None:
        """Write the condition under which the property appears in toString.

        Only called for OPTIONAL properties.
        """
        raise NotImplementedError(f"{type(self).__name__} has no toString condition")

    def add_to_string_value(self, code) -> None:
        code.add("{}", self.property.field)

    def add_getter_annotations(self, code) -> None:
        """Annotations for the value class getter, written before its signature."""

    def static_excerpts(self) -> Sequence[Excerpt]:
        """Static helper methods the value classes rely on, emitted once per file."""
        return ()

    # =========================================================================
    # Shared emission helpers
    # =========================================================================

    def _getter_link(self) -> Excerpt:
        return self.datatype.type.javadoc_no_arg_method_link(self.property.getter_name)

    def _add_return_this_javadoc(self, code) -> None:
        code.add_line(" * @return this {{@code {}}} object", self.datatype.builder.simple_name)

    def _add_return_this(self, code) -> None:
        code.add_line("return ({}) this;", self.datatype.builder)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.property.name}: {self.property.type})"


class PropertyCodeGeneratorFactory(ABC):
    """Inspects a property and either builds a strategy for it or declines."""

    @abstractmethod
    def create(self, prop: Property, datatype: Datatype) -> Optional[PropertyCodeGenerator]:
        """Return a strategy instance, or None if this shape does not apply."""
        ...
