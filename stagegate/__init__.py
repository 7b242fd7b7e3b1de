"""stagegate: gated watch-compiler that re-stages files only after a clean build + typecheck."""

__version__ = "0.3.0"
