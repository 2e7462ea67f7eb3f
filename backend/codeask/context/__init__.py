"""Fallback codebase context built from raw files."""

from .assembler import ContextAssembler

__all__ = ["ContextAssembler"]
