"""Turn rejected-attempt reasons into prompt instructions."""

from __future__ import annotations


def format_prior_failures(reasons: list[str]) -> str:
    """Render each earlier rejection as its own numbered instruction.

    Returns an empty string when there is nothing to feed back.
    """
    if not reasons:
        return ""
    lines = [
        "## Corrections from previous attempts",
        "Earlier drafts were rejected. Each item below is a separate instruction:",
    ]
    for i, reason in enumerate(reasons, 1):
        lines.append(f"{i}. Do not repeat this claim: {reason}")
    return "\n".join(lines)
