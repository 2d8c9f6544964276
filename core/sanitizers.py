# core/sanitizers.py
"""
Input sanitization for user-generated text.

All free text (names, titles, markdown bodies, answers) passes through
these functions before it is stored.
"""
import re
from typing import Optional

_CONTROL_CHARS = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]')
_HH_MM = re.compile(r'^\d{2}:\d{2}$')


def sanitize_text(text: Optional[str], max_length: Optional[int] = None, strip: bool = True) -> str:
    """
    Sanitize plain text input.

    - Strips leading/trailing whitespace
    - Removes control characters (newlines and tabs are kept)
    - Enforces maximum length
    - Returns empty string for None input
    """
    if text is None:
        return ""

    if strip:
        text = text.strip()

    text = _CONTROL_CHARS.sub('', text)

    if max_length and len(text) > max_length:
        text = text[:max_length]

    return text


def sanitize_lines(text: Optional[str]) -> list:
    """Split newline-separated input into clean, non-empty lines."""
    return [line for line in (sanitize_text(part) for part in (text or "").splitlines()) if line]


def is_clock_time(value: str) -> bool:
    """True for zero-padded 24h "HH:MM" values."""
    if not value or not _HH_MM.match(value):
        return False
    hours, minutes = value.split(":")
    return int(hours) < 24 and int(minutes) < 60


def normalize_email(email: Optional[str]) -> str:
    return sanitize_text(email).lower()
