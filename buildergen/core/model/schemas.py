"""Model file schemas."""

from typing import List, Literal

from pydantic import BaseModel, Field


class PropertySpec(BaseModel):
    """One property of the value type."""
    name: str = Field(..., description="Property name", min_length=1)
    type: str = Field(..., description="Java type expression, e.g. java.util.OptionalInt")
    nullable: bool = Field(False, description="Whether the property may be null")
    getter: str = Field("", description="Getter name override")
    bean_convention: bool = Field(False, description="Use getX()/isX() getter names")
    mapper_can_return_null: bool = Field(
        False,
        description="Mapper takes a boxed UnaryOperator whose null result clears the property",
    )


class DatatypeSpec(BaseModel):
    """A value type and its properties."""
    type: str = Field(..., description="Qualified name of the value type", min_length=1)
    builder_factory: Literal["NO_ARGS_CONSTRUCTOR", "NONE"] = Field(
        "NO_ARGS_CONSTRUCTOR", description="How generated code obtains a fresh builder"
    )
    properties: List[PropertySpec] = Field(default_factory=list, description="Properties in declaration order")
