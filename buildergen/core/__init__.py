# Lazy imports so that `from buildergen.core.source import Block` does not
# load the tree-sitter parser or the YAML/config layer.

__all__ = [
    # Generation
    "GeneratedBuilder",
    "GeneratedSource",
    "generate",
    # Model files
    "ModelError",
    "load_model",
    # Settings
    "GeneratorSettings",
    "get_settings",
    "reload_settings",
]

_IMPORT_MAP = {
    "GeneratedBuilder": ".generator",
    "GeneratedSource": ".generator",
    "generate": ".generator",
    "ModelError": ".model",
    "load_model": ".model",
    "GeneratorSettings": ".config",
    "get_settings": ".config",
    "reload_settings": ".config",
}


def __getattr__(name):
    if name in _IMPORT_MAP:
        import importlib
        module = importlib.import_module(_IMPORT_MAP[name], __package__)
        return getattr(module, name)
    raise AttributeError(f"module 'buildergen.core' has no attribute {name}")
