"""Persona-shaped prompts around an assembled codebase context."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Callable, List

import tiktoken

TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"

PERSONAS: List[str] = ["technical", "salesperson", "executive", "developer", "demo"]
DEFAULT_PERSONA = "technical"


@lru_cache(maxsize=None)
def _read_template(filename: str) -> str:
    path = TEMPLATE_DIR / filename
    return path.read_text(encoding="utf-8").rstrip("\n")


@lru_cache(maxsize=None)
def _get_token_counter(model: str | None = None) -> Callable[[str], int]:
    try:
        encoding = tiktoken.encoding_for_model(model) if model else tiktoken.get_encoding("cl100k_base")
    except KeyError:
        # model unknown to tiktoken
        encoding = tiktoken.get_encoding("cl100k_base")

    def count(text: str) -> int:
        return len(encoding.encode(text))

    return count


def count_tokens(text: str, model: str | None = None) -> int:
    return _get_token_counter(model)(text)


def resolve_persona(persona: str | None) -> str:
    name = (persona or DEFAULT_PERSONA).strip().lower()
    return name if name in PERSONAS else DEFAULT_PERSONA


def build_persona_prompt(persona: str | None, context: str, question: str) -> str:
    """Wrap ``question`` (and ``context`` when present) with persona instructions."""
    if context:
        base = _read_template("codebase_preamble.md").format(context=context, question=question)
    else:
        base = question
    instructions = _read_template(f"{resolve_persona(persona)}.md")
    return f"{base}\n\n{instructions}"
