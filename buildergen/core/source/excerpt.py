"""Excerpts: immutable, structurally comparable source fragments.

An Excerpt is a ``str.format`` template plus the arguments bound to it.
Nothing is rendered until the excerpt is added to a source builder, so two
excerpts built from the same template and the same arguments compare equal
regardless of where they end up. Block declaration deduplication relies on
this.
"""

from dataclasses import dataclass
from typing import Any, Tuple


@dataclass(frozen=True)
class Excerpt:
    """A format template with its bound arguments."""

    template: str
    args: Tuple[Any, ...] = ()

    def add_to(self, code) -> None:
        code.add(self.template, *self.args)

    def __str__(self) -> str:
        # Local import: the builder module renders excerpts.
        from .source_builder import SourceStringBuilder

        code = SourceStringBuilder.simple()
        self.add_to(code)
        return code.to_string()


def excerpt(template: str, *args: Any) -> Excerpt:
    """Build an Excerpt from a template and positional arguments."""
    return Excerpt(template, tuple(args))


def java_string(text: str) -> Excerpt:
    """A Java string literal containing ``text``."""
    escaped = (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\t", "\\t")
    )
    return Excerpt('"{}"', (escaped,))


EMPTY = Excerpt("")
