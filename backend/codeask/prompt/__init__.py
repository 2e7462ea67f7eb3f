"""Persona prompt templating."""

from .builder import PERSONAS, build_persona_prompt, count_tokens, resolve_persona

__all__ = [
    "PERSONAS",
    "build_persona_prompt",
    "count_tokens",
    "resolve_persona",
]
