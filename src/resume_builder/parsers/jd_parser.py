"""Job posting input: a text file or a paste at the terminal.

Postings copied from job boards carry non-breaking spaces, tab runs and long
stretches of blank lines. They are normalised before they go into a prompt.
"""

import re
from pathlib import Path
from typing import Callable

from resume_builder.errors import InputError

_BLANK_RUN = re.compile(r"\n{3,}")
_SPACE_RUN = re.compile(r"[ \t\u00a0]+")


def normalize_posting(text: str) -> str:
    """Collapse whitespace runs, keep at most one blank line between paragraphs."""
    text = text.lstrip("\ufeff")
    lines = [_SPACE_RUN.sub(" ", line).strip() for line in text.splitlines()]
    return _BLANK_RUN.sub("\n\n", "\n".join(lines)).strip()


def load_job_posting(file_path: str | Path) -> str:
    """Read a job posting file.

    Raises:
        InputError: the file is missing or is not UTF-8 text
    """
    path = Path(file_path)
    if not path.is_file():
        raise InputError(f"Job description file not found: {path}")
    try:
        return normalize_posting(path.read_text(encoding="utf-8"))
    except UnicodeDecodeError as e:
        raise InputError(f"Job description is not UTF-8 text: {path}") from e


def read_job_posting(input_fn: Callable[[], str] = input) -> str:
    """Collect a pasted job posting; two blank lines in a row (or EOF) end it."""
    lines: list[str] = []
    empty_count = 0
    try:
        while True:
            line = input_fn()
            if not line.strip():
                empty_count += 1
                if empty_count >= 2:
                    break
            else:
                empty_count = 0
            lines.append(line)
    except (EOFError, KeyboardInterrupt):
        pass
    return normalize_posting("\n".join(lines))
