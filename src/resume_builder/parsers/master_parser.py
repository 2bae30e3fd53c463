from pathlib import Path

from resume_builder.errors import InputError

SUPPORTED_SUFFIXES = (".md", ".txt")


def load_master_document(file_path: str | Path) -> str:
    """Read the master resume. The text is returned as-is apart from a BOM."""
    path = Path(file_path)
    if not path.exists():
        raise InputError(f"Master resume not found: {path}")
    if path.suffix.lower() not in SUPPORTED_SUFFIXES:
        raise InputError(f"Unsupported master resume format: {path.suffix}")
    text = path.read_text(encoding="utf-8").lstrip("\ufeff")
    if not text.strip():
        raise InputError(f"Master resume is empty: {path}")
    return text
