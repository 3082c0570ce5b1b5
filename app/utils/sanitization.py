"""Cleanup for free text that tourists, guides and admins type into the app"""

import html
import re
from typing import Iterable, Optional

REVIEW_MAX_LENGTH = 2000
REASON_MAX_LENGTH = 1000
ITINERARY_TEXT_MAX_LENGTH = 5000

CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
# Three or more newlines collapse to one blank line
EXTRA_BLANK_LINES = re.compile(r"\n{3,}")


def clean_text(value: Optional[str], max_length: int, field: str = "Text") -> Optional[str]:
    """
    Normalise and HTML-escape user text before it is stored.

    Line endings become "\\n", control characters are dropped and runs of blank
    lines are collapsed. Blank input returns None. The length limit applies to
    the text as typed, before escaping, so "&" counts as one character.

    Raises:
        ValueError: If the text is longer than max_length
    """
    if value is None:
        return None

    value = str(value).replace("\r\n", "\n").replace("\r", "\n")
    value = CONTROL_CHARS.sub("", value)
    value = EXTRA_BLANK_LINES.sub("\n\n", value).strip()

    if not value:
        return None

    if len(value) > max_length:
        raise ValueError(f"{field} exceeds maximum length of {max_length} characters")

    return html.escape(value, quote=True)


def clean_text_fields(fields: dict, names: Iterable[str], max_length: int) -> dict:
    """Apply clean_text to each named field present in fields (in place)"""
    for name in names:
        if name in fields and fields[name] is not None:
            fields[name] = clean_text(fields[name], max_length, field=name)
    return fields
