"""Folder and file names for one job application's output."""

from __future__ import annotations

import re
import unicodedata
from datetime import date
from pathlib import Path

DEFAULT_PERSON = "applicant"

_H1 = re.compile(r"^# (.+)$", re.MULTILINE)


def slugify(text: str, fallback: str = "unknown") -> str:
    """Lowercase ASCII words joined by hyphens."""
    text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    text = re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")
    return text or fallback


def person_from_master(master_text: str, configured: str | None = None) -> str:
    """Configured name, else the master resume's first "# " heading."""
    if configured:
        return configured
    match = _H1.search(master_text)
    return match.group(1).strip() if match else DEFAULT_PERSON


def file_name(kind: str, person: str, role: str, company: str, ext: str, on: date | None = None) -> str:
    """{kind}-{person}-{role}-{company}-{date}.{ext}"""
    on = on or date.today()
    parts = [kind, slugify(person, DEFAULT_PERSON), slugify(role, "role"), slugify(company, "company")]
    return f"{'-'.join(parts)}-{on.isoformat()}.{ext}"


def folder_name(role: str, company: str, on: date | None = None) -> str:
    on = on or date.today()
    return f"{slugify(company, 'company')}-{slugify(role, 'role')}-{on.isoformat()}"


def application_folder(output_dir: str | Path, role: str, company: str, on: date | None = None) -> Path:
    return Path(output_dir) / folder_name(role, company, on)
