from __future__ import annotations

import html
import re
import unicodedata
from typing import Any, Iterable

from bs4.element import Tag

_whitespace_re = re.compile(r"\s+")
_control_chars_re = re.compile(r"[\u0000-\u0008\u000B\u000C\u000E-\u001F\u007F]")


def clean_text(value: Any) -> str:
    """Normalize a structured-data text field.

    - Coerce to string (``None`` becomes empty)
    - Unescape HTML entities, twice for double-encoded feeds (``&amp;quot;``)
    - Unicode normalize (NFC), keeping Vietnamese diacritics composed
    - Remove control characters and collapse whitespace
    """
    if value is None:
        return ""
    text = str(value)
    if text.startswith("\ufeff"):
        text = text.lstrip("\ufeff")
    text = html.unescape(html.unescape(text))
    text = unicodedata.normalize("NFC", text)
    text = _control_chars_re.sub(" ", text)
    return _whitespace_re.sub(" ", text).strip()


def elements_text(elements: Iterable[Tag]) -> str:
    """Visible text of several elements joined by single spaces."""
    parts = [el.get_text(" ", strip=True) for el in elements]
    return _whitespace_re.sub(" ", " ".join(p for p in parts if p)).strip()
