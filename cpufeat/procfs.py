"""Reading of kernel text files such as /proc/cpuinfo."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

from cpufeat.string_view import get_attribute_key_value


def read_text_file(path: str | Path) -> str | None:
    """Return the content of ``path``, or None if it cannot be read."""
    try:
        data = Path(path).read_bytes()
    except OSError:
        return None
    return data.decode("utf-8", errors="replace")


def iter_attributes(text: str) -> Iterator[tuple[str, str]]:
    """Yield ``(key, value)`` for every ``key : value`` line of ``text``."""
    for line in text.split("\n"):
        pair = get_attribute_key_value(line)
        if pair is not None:
            yield pair