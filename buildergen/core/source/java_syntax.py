"""Syntax check of emitted Java using tree-sitter.

The generator never compiles what it writes; parsing it back is the cheap
check that every brace, parenthesis and semicolon ended up where it belongs.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Optional

import tree_sitter
import tree_sitter_java

logger = logging.getLogger(__name__)

_JAVA_LANGUAGE = tree_sitter.Language(tree_sitter_java.language())

_TYPE_DECLARATIONS = ("class_declaration", "enum_declaration", "interface_declaration")


@dataclass
class SyntaxIssue:
    """A parse error found in generated source."""

    file_path: str
    line: int
    message: str
    severity: str = "error"


@dataclass
class JavaMethod:
    """A method declared in generated source."""

    class_name: str
    name: str
    return_type: str
    parameter_types: List[str] = field(default_factory=list)
    modifiers: List[str] = field(default_factory=list)


def _parse(source_text: str) -> "tuple[tree_sitter.Tree, bytes]":
    source = source_text.encode("utf-8")
    parser = tree_sitter.Parser(_JAVA_LANGUAGE)
    return parser.parse(source), source


def _text(node: tree_sitter.Node, source: bytes) -> str:
    return source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")


def check_java_source(source_text: str, file_path: str = "<generated>") -> List[SyntaxIssue]:
    """Return every syntax error tree-sitter finds in ``source_text``."""
    tree, source = _parse(source_text)
    if not tree.root_node.has_error:
        return []

    issues: List[SyntaxIssue] = []
    for node in _walk(tree.root_node):
        if node.type == "ERROR":
            snippet = _text(node, source).strip().splitlines()
            issues.append(SyntaxIssue(
                file_path=file_path,
                line=node.start_point.row + 1,
                message=f"Unexpected input: {snippet[0][:60] if snippet else ''!r}",
            ))
        elif node.is_missing:
            issues.append(SyntaxIssue(
                file_path=file_path,
                line=node.start_point.row + 1,
                message=f"Missing {node.type!r}",
            ))
    if not issues:
        issues.append(SyntaxIssue(file_path=file_path, line=0, message="Tree-sitter reported parse errors"))
    logger.warning(f"{len(issues)} syntax issue(s) in {file_path}")
    return issues


def list_methods(source_text: str) -> List[JavaMethod]:
    """List methods (not constructors) in declaration order, with their enclosing type."""
    tree, source = _parse(source_text)
    methods: List[JavaMethod] = []
    _collect_methods(tree.root_node, source, None, methods)
    return methods


def _collect_methods(
    node: tree_sitter.Node,
    source: bytes,
    class_name: Optional[str],
    methods: List[JavaMethod],
) -> None:
    for child in node.children:
        if child.type in _TYPE_DECLARATIONS:
            name_node = child.child_by_field_name("name")
            inner_name = _text(name_node, source) if name_node else class_name
            _collect_methods(child, source, inner_name, methods)
        elif child.type == "method_declaration":
            methods.append(_method(child, source, class_name or ""))
        else:
            _collect_methods(child, source, class_name, methods)


def _method(node: tree_sitter.Node, source: bytes, class_name: str) -> JavaMethod:
    name_node = node.child_by_field_name("name")
    type_node = node.child_by_field_name("type")
    params_node = node.child_by_field_name("parameters")

    parameter_types: List[str] = []
    if params_node is not None:
        for param in params_node.named_children:
            if param.type == "formal_parameter":
                parameter_types.append(_text(param.child_by_field_name("type"), source))
            elif param.type == "spread_parameter":
                parameter_types.append(_text(param, source).split("...")[0].strip() + "...")

    modifiers: List[str] = []
    for child in node.children:
        if child.type == "modifiers":
            modifiers = [
                _text(m, source) for m in child.children
                if m.type not in ("marker_annotation", "annotation")
            ]

    return JavaMethod(
        class_name=class_name,
        name=_text(name_node, source) if name_node else "",
        return_type=_text(type_node, source) if type_node else "",
        parameter_types=parameter_types,
        modifiers=modifiers,
    )


def _walk(node: tree_sitter.Node) -> Iterator[tree_sitter.Node]:
    yield node
    for child in node.children:
        yield from _walk(child)
