"""Java type references and import bookkeeping.

TypeName is an immutable reference to a Java type. Rendering one through a
source builder hands it to the file's ImportManager, which decides whether the
short name can be used and records the import it needs.
"""

import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Set, Tuple, Union

from .excerpt import Excerpt, excerpt

logger = logging.getLogger(__name__)

JAVA_LANG = "java.lang"

PRIMITIVES = frozenset({
    "boolean", "byte", "short", "int", "long", "char", "float", "double", "void",
})

_BOXED = {
    "boolean": "Boolean",
    "byte": "Byte",
    "short": "Short",
    "int": "Integer",
    "long": "Long",
    "char": "Character",
    "float": "Float",
    "double": "Double",
    "void": "Void",
}

# Simple names resolved to java.lang when a type string has no package
_JAVA_LANG_TYPES = frozenset(
    set(_BOXED.values()) | {"Object", "String", "CharSequence", "Number", "Iterable", "Comparable"}
)

_TOKEN_RE = re.compile(r"\s*([A-Za-z_$][\w$]*(?:\s*\.\s*[A-Za-z_$][\w$]*)*|[<>,?])")


@dataclass(frozen=True)
class TypeName:
    """A (possibly nested, possibly parameterized) Java type."""

    package: str
    simple_names: Tuple[str, ...]
    type_args: Tuple["TypeArg", ...] = ()
    primitive: bool = False

    @classmethod
    def of(cls, package: str, *simple_names: str) -> "TypeName":
        return cls(package, tuple(simple_names))

    @classmethod
    def of_primitive(cls, name: str) -> "TypeName":
        if name not in PRIMITIVES:
            raise ValueError(f"Not a primitive type: {name}")
        return cls("", (name,), primitive=True)

    @classmethod
    def parse(cls, text: str) -> "TypeName":
        """Parse a Java type expression such as ``java.util.List<java.lang.String>``."""
        tokens = _tokenize(text)
        result, pos = _parse_type(tokens, 0, text)
        if pos != len(tokens):
            raise ValueError(f"Unexpected '{tokens[pos]}' in type '{text}'")
        if isinstance(result, Wildcard):
            raise ValueError(f"Wildcard is not a type: '{text}'")
        return result

    @property
    def simple_name(self) -> str:
        return self.simple_names[-1]

    @property
    def qualified_name(self) -> str:
        dotted = ".".join(self.simple_names)
        return f"{self.package}.{dotted}" if self.package else dotted

    def top_level(self) -> "TypeName":
        return TypeName(self.package, self.simple_names[:1])

    def nested(self, name: str) -> "TypeName":
        return TypeName(self.package, self.simple_names + (name,))

    def with_args(self, *args: "TypeArg") -> "TypeName":
        return TypeName(self.package, self.simple_names, tuple(args), self.primitive)

    def raw(self) -> "TypeName":
        return TypeName(self.package, self.simple_names, (), self.primitive)

    def is_same_raw_type(self, qualified_name: str) -> bool:
        return not self.primitive and self.qualified_name == qualified_name

    def boxed(self) -> "TypeName":
        """The wrapper type for primitives; reference types are returned unchanged."""
        if not self.primitive:
            return self
        return TypeName(JAVA_LANG, (_BOXED[self.simple_name],))

    def javadoc_link(self) -> Excerpt:
        return excerpt("{{@link {}}}", self.raw())

    def javadoc_no_arg_method_link(self, method: str) -> Excerpt:
        return excerpt("{{@link {}#{}()}}", self.raw(), method)

    def add_to(self, code) -> None:
        code.add("{}", code.imports.shorten(self))
        if self.type_args:
            code.add("<")
            for index, arg in enumerate(self.type_args):
                if index:
                    code.add(", ")
                code.add("{}", arg)
            code.add(">")

    def __str__(self) -> str:
        if not self.type_args:
            return self.qualified_name
        return f"{self.qualified_name}<{', '.join(str(a) for a in self.type_args)}>"


@dataclass(frozen=True)
class Wildcard:
    """``?``, ``? extends T`` or ``? super T`` as a type argument."""

    bound: Optional[TypeName] = None
    kind: str = "extends"

    @classmethod
    def extends(cls, bound: TypeName) -> "Wildcard":
        return cls(bound, "extends")

    @classmethod
    def super_(cls, bound: TypeName) -> "Wildcard":
        return cls(bound, "super")

    def add_to(self, code) -> None:
        if self.bound is None:
            code.add("?")
        else:
            code.add("? {} {}", self.kind, self.bound)

    def __str__(self) -> str:
        return "?" if self.bound is None else f"? {self.kind} {self.bound}"


TypeArg = Union[TypeName, Wildcard]


def _tokenize(text: str) -> List[str]:
    tokens = []
    pos = 0
    stripped = text.rstrip()
    while pos < len(stripped):
        match = _TOKEN_RE.match(stripped, pos)
        if not match:
            raise ValueError(f"Cannot parse type '{text}' at offset {pos}")
        tokens.append(re.sub(r"\s+", "", match.group(1)))
        pos = match.end()
    if not tokens:
        raise ValueError("Empty type")
    return tokens


def _parse_type(tokens: List[str], pos: int, text: str) -> Tuple[TypeArg, int]:
    token = tokens[pos]
    if token == "?":
        pos += 1
        if pos < len(tokens) and tokens[pos] in ("extends", "super"):
            kind = tokens[pos]
            bound, pos = _parse_type(tokens, pos + 1, text)
            return Wildcard(bound, kind), pos
        return Wildcard(), pos
    if token in "<>,":
        raise ValueError(f"Unexpected '{token}' in type '{text}'")

    type_name = _resolve(token, text)
    pos += 1
    if pos < len(tokens) and tokens[pos] == "<":
        if type_name.primitive:
            raise ValueError(f"Primitive type cannot take type arguments: '{text}'")
        args = []
        pos += 1
        while True:
            if pos >= len(tokens):
                raise ValueError(f"Unterminated type arguments in '{text}'")
            arg, pos = _parse_type(tokens, pos, text)
            args.append(arg)
            if pos >= len(tokens):
                raise ValueError(f"Unterminated type arguments in '{text}'")
            if tokens[pos] == ",":
                pos += 1
            elif tokens[pos] == ">":
                pos += 1
                break
            else:
                raise ValueError(f"Unexpected '{tokens[pos]}' in type '{text}'")
        type_name = type_name.with_args(*args)
    return type_name, pos


def _resolve(dotted: str, text: str) -> TypeName:
    if dotted in PRIMITIVES:
        return TypeName.of_primitive(dotted)
    parts = dotted.split(".")
    package_parts = []
    while parts and parts[0][:1].islower():
        package_parts.append(parts.pop(0))
    if not parts:
        raise ValueError(f"No type name in '{text}' (types must be capitalized)")
    if not package_parts and parts[0] in _JAVA_LANG_TYPES:
        return TypeName(JAVA_LANG, tuple(parts))
    return TypeName(".".join(package_parts), tuple(parts))


# java.lang names that generated code writes out literally, not as a TypeName
_LITERAL_JAVA_LANG = frozenset({
    "IllegalStateException",
    "NullPointerException",
    "Override",
    "UnsupportedOperationException",
})


class ImportManager:
    """Shortens type references for one compilation unit and collects imports.

    Types nested in the file's own top-level class are written relative to it
    (``Value`` rather than ``Person_Builder.Value``). ``java.lang``, same-package
    and default-package types are never imported. A simple name already bound
    to a different type falls back to the qualified name, as does a name hidden
    by a member type declared or inherited inside the class body (see
    :meth:`hide`) or one that generated code uses for a ``java.lang`` type.
    """

    def __init__(self, own_type: Optional[TypeName] = None):
        self._own = own_type.top_level() if own_type is not None else None
        # simple name -> top-level type it refers to in this file
        self._imports: Dict[str, TypeName] = {}
        self._hidden: Set[str] = set()

    def hide(self, *simple_names: str) -> None:
        """Mark member type names visible in the class body.

        Other types sharing one of these simple names are written qualified.
        Call before anything is rendered.
        """
        self._hidden.update(simple_names)

    def shorten(self, type_name: TypeName) -> str:
        if type_name.primitive:
            return type_name.simple_name
        top = type_name.top_level()
        dotted = ".".join(type_name.simple_names)
        if self._own is not None:
            if top == self._own:
                nested = type_name.simple_names[1:]
                return ".".join(nested) if nested else dotted
            if top.simple_name == self._own.simple_name:
                return type_name.qualified_name
        if top.simple_name in self._hidden:
            return type_name.qualified_name
        if top.package != JAVA_LANG and top.simple_name in _JAVA_LANG_TYPES | _LITERAL_JAVA_LANG:
            return type_name.qualified_name
        existing = self._imports.get(top.simple_name)
        if existing is None:
            self._imports[top.simple_name] = top
            return dotted
        if existing == top:
            return dotted
        logger.debug(f"Import clash on {top.simple_name}; using {type_name.qualified_name}")
        return type_name.qualified_name

    def imports(self) -> List[str]:
        own_package = self._own.package if self._own is not None else None
        return sorted(
            t.qualified_name
            for t in self._imports.values()
            if t.package and t.package not in (own_package, JAVA_LANG)
        )
