"""codeask: ask questions about a local codebase, with optional vector-indexed retrieval."""

from .service import CodebaseService

__version__ = "0.1.0"

__all__ = ["CodebaseService", "__version__"]
