"""Exceptions raised by codeask."""

from __future__ import annotations


class CodeAskError(Exception):
    """Base exception for all codeask errors."""


class ConfigurationError(CodeAskError):
    """Raised when the configuration cannot support the requested operation.

    Examples: chunk overlap not smaller than chunk size, unknown provider.
    """


class EmbeddingUnavailable(ConfigurationError):
    """Raised when no embedding credential is configured."""


class EmbeddingRequestFailed(CodeAskError):
    """Raised when the embedding provider fails or returns an unusable response."""


class AlreadyIndexing(CodeAskError):
    """Raised when an indexing run is requested while another one is in flight."""


class InvalidArgument(CodeAskError, ValueError):
    """Raised for missing or malformed caller input, e.g. an empty codebase path."""


class VectorStoreError(CodeAskError):
    """Raised when a vector store operation fails."""


class RetrievalFailure(CodeAskError):
    """Raised when indexed search cannot be completed."""
