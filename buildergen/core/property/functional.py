"""Functional interfaces accepted by generated mapper/mutator methods."""

from dataclasses import dataclass

from ..source import TypeName, Wildcard

_FUNCTION_PACKAGE = "java.util.function"

_PRIMITIVE_UNARY_OPERATORS = {
    "int": ("IntUnaryOperator", "applyAsInt"),
    "long": ("LongUnaryOperator", "applyAsLong"),
    "double": ("DoubleUnaryOperator", "applyAsDouble"),
}


@dataclass(frozen=True)
class FunctionalType:
    """A functional interface: its type, its single method, and whether that
    method's result may be null (true for any reference-typed result)."""

    functional_interface: TypeName
    method_name: str
    can_return_null: bool


def unary_operator(type_name: TypeName) -> FunctionalType:
    boxed = type_name.boxed()
    return FunctionalType(
        TypeName.of(_FUNCTION_PACKAGE, "UnaryOperator").with_args(boxed),
        "apply",
        True,
    )


def primitive_unary_operator(primitive: TypeName) -> FunctionalType:
    """IntUnaryOperator and friends; other primitives fall back to UnaryOperator<Boxed>."""
    if primitive.simple_name not in _PRIMITIVE_UNARY_OPERATORS:
        return unary_operator(primitive)
    interface, method = _PRIMITIVE_UNARY_OPERATORS[primitive.simple_name]
    return FunctionalType(TypeName.of(_FUNCTION_PACKAGE, interface), method, False)


def consumer(type_name: TypeName) -> FunctionalType:
    return FunctionalType(
        TypeName.of(_FUNCTION_PACKAGE, "Consumer").with_args(Wildcard.super_(type_name)),
        "accept",
        False,
    )
