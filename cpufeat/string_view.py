"""Small string helpers used to parse kernel-provided text such as /proc/cpuinfo."""

from __future__ import annotations

_WHITESPACE = " \t\n\v\f\r"
_HEX_DIGITS = "0123456789abcdef"


def index_of_char(text: str, char: str) -> int:
    """Return the index of the first ``char`` in ``text``, or -1 if absent."""
    return text.find(char)


def index_of(text: str, sub: str) -> int:
    """Return the index of the first ``sub`` in ``text``, or -1 if absent or empty."""
    if not sub:
        return -1
    return text.find(sub)


def starts_with(text: str, prefix: str) -> bool:
    """Return whether ``text`` starts with a non-empty ``prefix``."""
    return bool(prefix) and text.startswith(prefix)


def pop_front(text: str, count: int) -> str:
    """Drop ``count`` characters from the front; empty if ``count`` is too large."""
    if count < 0:
        raise ValueError("count must not be negative")
    return text[count:]


def pop_back(text: str, count: int) -> str:
    """Drop ``count`` characters from the back; empty if ``count`` is too large."""
    if count < 0:
        raise ValueError("count must not be negative")
    return text[: max(len(text) - count, 0)]


def keep_front(text: str, count: int) -> str:
    """Keep the first ``count`` characters of ``text``."""
    if count < 0:
        raise ValueError("count must not be negative")
    return text[:count]


def trim_whitespace(text: str) -> str:
    """Remove leading and trailing ASCII whitespace."""
    return text.strip(_WHITESPACE)


def parse_positive_number(text: str) -> int:
    """Parse a decimal or ``0x``-prefixed hexadecimal number.

    Returns -1 when ``text`` is empty or holds anything but digits of the base.
    """
    if not text:
        return -1
    if text.startswith("0x"):
        digits, base = text[2:], 16
    else:
        digits, base = text, 10
    result = 0
    for ch in digits:
        value = _HEX_DIGITS.find(ch.lower()) if len(ch.lower()) == 1 else -1
        if value < 0 or value >= base:
            return -1
        result = result * base + value
    return result


def copy_string(text: str, size: int) -> str:
    """Return ``text`` as it fits in a zero-terminated buffer of ``size`` bytes."""
    if size < 1:
        raise ValueError("size must be at least 1")
    return text[: size - 1]


def has_word(line: str, word: str, separator: str) -> bool:
    """Return whether ``line`` holds ``word`` delimited by ``separator``."""
    return bool(word) and word in line.split(separator)


def get_attribute_key_value(line: str) -> tuple[str, str] | None:
    """Split ``key : value`` into trimmed parts, or return None without a colon."""
    key, sep, value = line.partition(":")
    if not sep:
        return None
    return trim_whitespace(key), trim_whitespace(value)