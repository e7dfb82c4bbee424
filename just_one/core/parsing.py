"""Parsing utilities for agent responses."""

from __future__ import annotations

import re

from pydantic import BaseModel


class AIResponse(BaseModel):
    """What an agent gateway hands back for one prompt.

    Only ``thinking`` and ``content`` matter to the game; the remaining
    fields are call metadata kept for traces.
    """
    thinking: str = ""
    content: str = ""
    raw_text: str = ""
    model: str = ""
    latency_ms: float = 0.0
    input_tokens: int = 0
    output_tokens: int = 0


def parse_ai_response(response: str) -> AIResponse:
    """Split a raw model reply into its THINKING and CLUE/GUESS parts.

    The expected shape is::

        THINKING: free-form reasoning
        CLUE: word        (or GUESS: word)

    Missing sections come back as empty strings.

    Examples:
        >>> parse_ai_response("THINKING: big animal\\nCLUE: Trunk").content
        'Trunk'
        >>> parse_ai_response("no markers at all").content
        ''
    """
    thinking_match = re.search(
        r"THINKING:\s*([\s\S]*?)(?=CLUE:|GUESS:|$)",
        response,
    )
    clue_match = re.search(r"CLUE:\s*([\s\S]*)$", response)
    guess_match = re.search(r"GUESS:\s*([\s\S]*)$", response)

    thinking = thinking_match.group(1).strip() if thinking_match else ""
    content_match = clue_match or guess_match
    content = content_match.group(1).strip() if content_match else ""

    return AIResponse(thinking=thinking, content=content, raw_text=response)


def clean_single_word(content: str) -> str:
    """Strip decoration models like to wrap around a one-word answer.

    Removes surrounding quotes, asterisks, backticks and trailing
    punctuation, and keeps only the first line. Single quotes are only
    removed as a matching pair, since apostrophes can belong to the word.
    Internal characters are left alone so the clue validator still sees
    phrases as phrases.
    """
    first_line = content.strip().splitlines()[0] if content.strip() else ""
    cleaned = first_line.strip().strip("*_`\"“”").strip()
    cleaned = re.sub(r"[.!?,;:]+$", "", cleaned)
    if len(cleaned) > 1 and cleaned[0] in "'‘" and cleaned[-1] in "'’":
        cleaned = re.sub(r"[.!?,;:]+$", "", cleaned[1:-1].strip())
    return cleaned.strip()
