"""Clean raw completion text and pull JSON out of it."""

from __future__ import annotations

import json
import re

_FENCE_LINE = re.compile(r"^\s*```[\w-]*\s*$")
_COMMENT_LINE = re.compile(r"^\s*<!--.*-->\s*$")


def clean_completion(text: str) -> str:
    """Drop code-fence marker lines and whole-line HTML comments.

    Models asked for bare Markdown still wrap answers in ```markdown fences
    or leave <!-- notes --> behind; neither belongs in the document.
    """
    kept = [
        line
        for line in text.splitlines()
        if not _FENCE_LINE.match(line) and not _COMMENT_LINE.match(line)
    ]
    return "\n".join(kept).strip()


def extract_json(text: str) -> dict | list:
    """Extract JSON from a completion, handling ```json blocks.

    Tries in order:
    1. Direct json.loads on the full text
    2. json.loads after removing fence lines
    3. First '{' to last '}'
    """
    text = text.strip()

    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError):
        pass

    stripped = clean_completion(text)
    if stripped != text:
        try:
            return json.loads(stripped)
        except json.JSONDecodeError:
            pass

    start = stripped.find("{")
    end = stripped.rfind("}")
    if start != -1 and end > start:
        try:
            return json.loads(stripped[start : end + 1])
        except json.JSONDecodeError:
            pass

    raise ValueError(f"Could not extract JSON from text: {text[:200]}...")
