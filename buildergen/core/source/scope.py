"""Hierarchical namespaces of reserved identifiers.

A Scope holds the identifiers reserved at one lexical level and a link to its
parent. Membership queries walk up the chain; reservations only ever touch the
scope they are made in, so a child scope can be created and thrown away
without affecting its ancestors.
"""

from dataclasses import dataclass
from typing import Optional, Set, Union


class DuplicateIdentifierError(RuntimeError):
    """An identifier was reserved twice in the same scope."""


@dataclass(frozen=True)
class VariableName:
    """A local variable or parameter."""

    name: str

    def add_to(self, code) -> None:
        code.add("{}", self.name)


@dataclass(frozen=True)
class FieldAccess:
    """An instance field of the type being generated.

    Rendered unqualified unless a variable of the same name is visible in the
    builder's scope, in which case it becomes ``this.<name>``.
    """

    name: str

    def on(self, obj) -> "FieldAccessOn":
        """The same field read from another instance, e.g. ``builder.age``."""
        return FieldAccessOn(obj, self.name)

    def add_to(self, code) -> None:
        if code.scope.contains(VariableName(self.name)):
            code.add("this.{}", self.name)
        else:
            code.add("{}", self.name)


@dataclass(frozen=True)
class FieldAccessOn:
    target: object
    name: str

    def add_to(self, code) -> None:
        code.add("{}.{}", self.target, self.name)


Identifier = Union[VariableName, FieldAccess]


class Scope:
    """A set of reserved identifiers with an optional parent scope."""

    def __init__(self, parent: Optional["Scope"] = None):
        self._parent = parent
        self._identifiers: Set[Identifier] = set()

    @property
    def parent(self) -> Optional["Scope"]:
        return self._parent

    def contains(self, identifier: Identifier) -> bool:
        """True if ``identifier`` is reserved here or in any ancestor."""
        scope: Optional[Scope] = self
        while scope is not None:
            if identifier in scope._identifiers:
                return True
            scope = scope._parent
        return False

    def add(self, identifier: Identifier) -> None:
        """Reserve ``identifier`` in this scope.

        Raises:
            DuplicateIdentifierError: if it is already reserved in this scope.
                Ancestors are not consulted.
        """
        if identifier in self._identifiers:
            raise DuplicateIdentifierError(f"{identifier} already reserved in this scope")
        self._identifiers.add(identifier)

    def child(self) -> "Scope":
        return Scope(self)

    def __repr__(self) -> str:
        names = sorted(str(i) for i in self._identifiers)
        return f"Scope({', '.join(names)}; parent={self._parent!r})"
