"""Text normalisation shared by search ranking and product descriptions."""

import re
import unicodedata

_TAG_RE = re.compile(r"<[^>]*>")
_NBSP_RE = re.compile(r"&nbsp;", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s+")

# Vietnamese "đ" is a distinct letter, not a decomposable "d" + mark.
_LETTER_MAP = str.maketrans({"đ": "d", "Đ": "D"})


def collapse_whitespace(value: str) -> str:
    return _WHITESPACE_RE.sub(" ", value).strip()


def normalize_text(value) -> str:
    """Fold a string for accent-insensitive matching.

    >>> normalize_text("  Điện  Thoại ")
    'dien thoai'
    """
    decomposed = unicodedata.normalize("NFD", str(value or ""))
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return collapse_whitespace(stripped.translate(_LETTER_MAP).lower())


def plain_text_from_html(html) -> str:
    """Derive the plain-text form of a rich (HTML) description."""
    text = _TAG_RE.sub(" ", str(html or ""))
    text = _NBSP_RE.sub(" ", text)
    return collapse_whitespace(text)
