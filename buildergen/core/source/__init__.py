"""Source-emission engine.

Public API:
    Excerpt / excerpt(template, *args) → immutable source fragment
    TypeName / Wildcard → Java type references (imports tracked on render)
    Scope / VariableName / FieldAccess → hierarchical identifier reservations
    SourceStringBuilder → rendered text for one scope
    Block → deduplicated declarations + body
    reindent(source) → brace-depth indentation
    check_java_source(source) → tree-sitter syntax issues
"""

from .block import Block, IncompatibleDeclarationError
from .excerpt import EMPTY, Excerpt, excerpt, java_string
from .formatting import reindent
from .names import ImportManager, TypeName, Wildcard
from .scope import DuplicateIdentifierError, FieldAccess, Scope, VariableName
from .source_builder import SourceStringBuilder

__all__ = [
    "Block",
    "DuplicateIdentifierError",
    "EMPTY",
    "Excerpt",
    "FieldAccess",
    "ImportManager",
    "IncompatibleDeclarationError",
    "Scope",
    "SourceStringBuilder",
    "TypeName",
    "VariableName",
    "Wildcard",
    "check_java_source",
    "excerpt",
    "java_string",
    "list_methods",
    "reindent",
]


def check_java_source(source_text: str, file_path: str = "<generated>"):
    """Parse ``source_text`` with tree-sitter and return its syntax issues.

    Imported lazily so the emission engine does not load the parser until a
    check is requested.
    """
    from .java_syntax import check_java_source as _check

    return _check(source_text, file_path)


def list_methods(source_text: str):
    """List the methods declared in ``source_text`` (see java_syntax.list_methods)."""
    from .java_syntax import list_methods as _list

    return _list(source_text)
