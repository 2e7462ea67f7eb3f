"""Tests for persona prompt building."""

import pytest

from codeask.prompt import PERSONAS, build_persona_prompt, resolve_persona
from codeask.prompt.builder import TEMPLATE_DIR


def test_every_persona_has_a_template():
    for persona in PERSONAS:
        assert (TEMPLATE_DIR / f"{persona}.md").is_file()


@pytest.mark.parametrize(
    "name,expected",
    [
        ("salesperson", "salesperson"),
        ("  Executive ", "executive"),
        ("pirate", "technical"),
        ("", "technical"),
        (None, "technical"),
    ],
)
def test_resolve_persona(name, expected):
    assert resolve_persona(name) == expected


def test_prompt_with_context():
    context = '## Key Files:\n### package.json:\n```\n{"name": "demo"}\n```'
    prompt = build_persona_prompt("salesperson", context, "What does it do?")

    assert prompt.startswith("You are an AI assistant helping with a codebase.")
    assert context in prompt
    assert "What does it do?\n\nIMPORTANT: Respond like a professional salesperson" in prompt


def test_prompt_without_context_is_question_plus_instructions():
    prompt = build_persona_prompt("technical", "", "Explain auth")
    assert prompt.startswith("Explain auth\n\nIMPORTANT: Structure your response")
    assert "helping with a codebase" not in prompt
