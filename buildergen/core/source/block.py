"""Blocks: a preamble of lazily added declarations followed by a body.

Strategies that need a local variable call ``declare`` instead of writing the
declaration themselves. The block picks a name that collides with nothing
visible from its scope, writes the declaration once into its preamble, and
hands back a reference. A second request for the same preferred name with
the same declaration returns the same reference; a conflicting one is a bug
in the caller and raises.
"""

import logging
from typing import Any, Dict

from .excerpt import Excerpt, excerpt
from .scope import FieldAccess, Scope, VariableName

logger = logging.getLogger(__name__)


class IncompatibleDeclarationError(RuntimeError):
    """A preferred name was declared twice with different content."""


class Block:
    """A scope-owning unit of emitted code: declarations, then body."""

    @classmethod
    def method_body(cls, parent, *param_names: str) -> "Block":
        """A block for a method body whose parameters are already reserved."""
        method_scope = parent.scope.child()
        for param_name in param_names:
            method_scope.add(VariableName(param_name))
        return cls(parent, method_scope)

    def __init__(self, parent, scope: Scope):
        self._variable_names: Dict[str, str] = {}
        self._declarations: Dict[str, Excerpt] = {}
        self._preamble = parent.sub_scope(scope)
        self._body = parent.sub_scope(scope)

    @property
    def scope(self) -> Scope:
        return self._body.scope

    @property
    def imports(self):
        return self._body.imports

    @property
    def declarations(self) -> Dict[str, Excerpt]:
        return dict(self._declarations)

    def declare(self, type_and_preamble: Any, preferred_name: str, value: Any) -> Excerpt:
        """Declare a variable in this block's preamble and return a reference to it.

        Args:
            type_and_preamble: the declared type (plus any modifiers)
            preferred_name: the name to use if nothing visible collides with it
            value: the initializer

        Raises:
            IncompatibleDeclarationError: if ``preferred_name`` was already
                declared in this block with a different type or initializer
        """
        if preferred_name in self._variable_names:
            name = self._variable_names[preferred_name]
            declaration = _declaration(type_and_preamble, name, value)
            existing = self._declarations[name]
            if declaration != existing:
                raise IncompatibleDeclarationError(
                    f"Incompatible declaration for '{name}': {declaration} vs {existing}"
                )
        else:
            name = self._pick_name(preferred_name)
            self._variable_names[preferred_name] = name
            self.scope.add(VariableName(name))
            declaration = _declaration(type_and_preamble, name, value)
            self._declarations[name] = declaration
            self._preamble.add(declaration)
        return excerpt("{}", name)

    def reserve(self, preferred_name: str) -> str:
        """Reserve a collision-free variable name without declaring it."""
        name = self._pick_name(preferred_name)
        self.scope.add(VariableName(name))
        return name

    def inner_block(self) -> "Block":
        """A nested block whose names cannot collide with anything visible here."""
        return Block(self, self.scope.child())

    def _pick_name(self, preferred_name: str) -> str:
        if not self._name_collides(preferred_name):
            return preferred_name
        candidate = "_" + preferred_name
        if not self._name_collides(candidate):
            logger.debug(f"Renamed {preferred_name} to {candidate}")
            return candidate
        suffix = 2
        while self._name_collides(f"{candidate}{suffix}"):
            suffix += 1
        logger.debug(f"Renamed {preferred_name} to {candidate}{suffix}")
        return f"{candidate}{suffix}"

    def _name_collides(self, name: str) -> bool:
        return self.scope.contains(VariableName(name)) or self.scope.contains(FieldAccess(name))

    def add(self, template: Any, *args: Any) -> "Block":
        self._body.add(template, *args)
        return self

    def add_line(self, template: Any = "", *args: Any) -> "Block":
        self._body.add_line(template, *args)
        return self

    def sub_builder(self):
        return self._body.sub_builder()

    def sub_scope(self, scope: Scope):
        return self._body.sub_scope(scope)

    def add_to(self, code) -> None:
        code.add("{}{}", self._preamble, self._body)

    def __repr__(self) -> str:
        return f"Block(declarations={list(self._declarations)}, body={self._body.to_string()!r})"


def _declaration(type_and_preamble: Any, name: str, value: Any) -> Excerpt:
    return excerpt("{} {} = {};\n", type_and_preamble, name, value)
