"""Source builders: accumulate rendered Java text for one scope.

Templates use ``str.format`` positional fields. Each argument is rendered
when it is added:

- strings and numbers are formatted as-is;
- anything with an ``add_to(code)`` method (Excerpt, TypeName, FieldAccess,
  Block, nested builders) renders itself into a sub-builder that shares this
  builder's scope and import manager.
"""

import string
from typing import Any, List, Optional

from .names import ImportManager, TypeName
from .scope import Scope

_FORMATTER = string.Formatter()


class SourceStringBuilder:
    """Append-only Java source text bound to a scope and an import manager."""

    def __init__(self, scope: Scope, imports: ImportManager):
        self._scope = scope
        self._imports = imports
        self._parts: List[str] = []

    @classmethod
    def simple(cls) -> "SourceStringBuilder":
        """A throwaway builder, for rendering excerpts outside a compilation unit."""
        return cls(Scope(), ImportManager())

    @classmethod
    def compilation_unit(cls, own_type: Optional[TypeName] = None) -> "SourceStringBuilder":
        return cls(Scope(), ImportManager(own_type))

    @property
    def scope(self) -> Scope:
        return self._scope

    @property
    def imports(self) -> ImportManager:
        return self._imports

    def add(self, template: Any, *args: Any) -> "SourceStringBuilder":
        if not isinstance(template, str):
            if args:
                raise TypeError("Arguments are only accepted with a string template")
            template.add_to(self)
            return self
        self._parts.append(self._format(template, args))
        return self

    def add_line(self, template: Any = "", *args: Any) -> "SourceStringBuilder":
        self.add(template, *args)
        self._parts.append("\n")
        return self

    def sub_builder(self) -> "SourceStringBuilder":
        return SourceStringBuilder(self._scope, self._imports)

    def sub_scope(self, scope: Scope) -> "SourceStringBuilder":
        return SourceStringBuilder(scope, self._imports)

    def add_to(self, code) -> None:
        code.add("{}", self.to_string())

    def to_string(self) -> str:
        return "".join(self._parts)

    def __str__(self) -> str:
        return self.to_string()

    def _format(self, template: str, args) -> str:
        out = []
        auto_index = 0
        for literal, field_name, format_spec, _conversion in _FORMATTER.parse(template):
            out.append(literal)
            if field_name is None:
                continue
            if field_name == "":
                index = auto_index
                auto_index += 1
            elif field_name.isdigit():
                index = int(field_name)
            else:
                raise ValueError(f"Only positional fields are supported, got {{{field_name}}}")
            try:
                value = args[index]
            except IndexError:
                raise ValueError(
                    f"Template {template!r} needs argument {index}, got {len(args)}"
                ) from None
            out.append(self._render(value, format_spec or ""))
        return "".join(out)

    def _render(self, value: Any, format_spec: str) -> str:
        if isinstance(value, str):
            return format(value, format_spec)
        if hasattr(value, "add_to"):
            sub = self.sub_builder()
            value.add_to(sub)
            return sub.to_string()
        return format(value, format_spec)
