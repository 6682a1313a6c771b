"""Block-level declarations shared by several strategies.

Each helper goes through ``Block.declare`` so that every strategy asking for
the same thing inside one method body gets the same variable, declared once.
"""

from typing import Any, Optional

from ..source import Block, Excerpt, FieldAccess, excerpt
from .models import Datatype

UNSET_PROPERTIES = FieldAccess("_unsetProperties")

_UPCAST_COMMENT = "// Upcast to access private fields; otherwise, oddly, we get an access violation.\n"


def fresh_builder(code: Any, datatype: Datatype) -> Optional[Excerpt]:
    """A newly constructed builder holding the default values, if one can be made.

    Returns None outside a Block, or when the builder has no no-args constructor.
    """
    if not isinstance(code, Block) or not datatype.has_no_args_builder:
        return None
    return code.declare(datatype.generated_builder, "_defaults", excerpt("new {}()", datatype.builder))


def upcast_to_generated_builder(code: Block, datatype: Datatype, builder: str) -> Excerpt:
    """``builder`` viewed as the generated superclass, so private fields are reachable."""
    return code.declare(excerpt(_UPCAST_COMMENT + "{}", datatype.generated_builder), "base", builder)
