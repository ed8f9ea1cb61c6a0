"""Core indexing engine for ndsub."""

__all__ = [
    "affine",
    "config",
    "containers",
    "derived",
    "exceptions",
    "parser",
    "resolver",
    "specs",
    "subset",
    "traversal",
]
