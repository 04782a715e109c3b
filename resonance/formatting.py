"""Markdown cleanup for generated text.

Gemini answers in light markdown; the front-end shows plain text, so bold
markers, heading hashes and bullets are stripped. Headers are detected from
the raw line before cleanup.
"""

import re
from typing import List

from .models import Section

_BOLD = re.compile(r"\*\*")
_HEADING = re.compile(r"^#+\s*", re.MULTILINE)
_BULLET = re.compile(r"^\*\s*", re.MULTILINE)
_STAR = re.compile(r"\*")
_NUMBERED = re.compile(r"^\d+\.")


def clean_text(text: str) -> str:
    text = _BOLD.sub("", text)
    text = _HEADING.sub("", text)
    text = _BULLET.sub("", text)
    text = _STAR.sub("", text)
    return text.strip()


def is_header(line: str) -> bool:
    line = line.strip()
    return line.startswith("#") or line.startswith("**") or bool(_NUMBERED.match(line))


def split_sections(text: str) -> List[Section]:
    """One section per non-blank line, cleaned, with its header flag."""
    return [
        Section(text=clean_text(line), is_header=is_header(line))
        for line in text.split("\n")
        if line.strip()
    ]
