"""buildergen: builder source generation for immutable Java value types."""

__version__ = "0.1.0"
