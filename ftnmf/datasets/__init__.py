from ._loaders import load_toy_templates

__all__ = ["load_toy_templates"]
