"""Brace-depth indentation for emitted Java.

Strategies write their lines without caring about nesting; this pass strips
each line and re-indents it by the number of braces open at that point.
Braces inside string/char literals and comments are ignored.
"""

from typing import Tuple


def reindent(source: str, indent: int = 2) -> str:
    depth = 0
    out = []
    for raw in source.split("\n"):
        line = raw.strip()
        if not line:
            out.append("")
            continue
        if _is_comment(line):
            prefix = " " * (indent * depth)
            # Javadoc continuation lines line up under the opening "/**"
            out.append(prefix + (" " + line if line.startswith("*") else line))
            continue
        opens, closes, leading = _brace_balance(line)
        out.append(" " * (indent * max(depth - leading, 0)) + line)
        depth = max(depth + opens - closes, 0)
    return "\n".join(out)


def _is_comment(line: str) -> bool:
    return line.startswith(("/*", "*", "//"))


def _brace_balance(line: str) -> Tuple[int, int, int]:
    """Return (opening braces, closing braces, closing braces before any code)."""
    opens = closes = leading = 0
    seen_code = False
    quote = None
    escaped = False
    i = 0
    while i < len(line):
        ch = line[i]
        if quote:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == quote:
                quote = None
        elif ch in ('"', "'"):
            quote = ch
            seen_code = True
        elif line.startswith("//", i):
            break
        elif ch == "{":
            opens += 1
            seen_code = True
        elif ch == "}":
            closes += 1
            if not seen_code:
                leading += 1
        elif not ch.isspace():
            seen_code = True
        i += 1
    return opens, closes, leading
