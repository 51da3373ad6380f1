"""
Key normalization and key parsing.

Field keys in the store were typed by hand over several years and placeholder
names are scraped out of Word XML, so the same field shows up as
"Name as per PAN C1", "name  as per pan c1" or "Name as per <w:t>PAN C1".
Everything here is a pure function of the key text.

Functions:
    - normalize_key: canonical comparison form of a key or placeholder
    - classify_key: SemanticCategory from the ordered CATEGORY_RULES table
    - extract_role_suffix: trailing C{n} / H{n} / LH{n} tag, or None for global keys
    - is_date_key: whether values under this key should be parsed as dates
"""

import html
import re
from typing import Optional

from .constants import (
    CATEGORY_RULES,
    DATE_CATEGORIES,
    ROLE_SUFFIX_PATTERN,
    SemanticCategory,
)
from .schemas import RoleSuffix


_TAG_PATTERN = re.compile(r"<[^<>]*>")
_WHITESPACE_PATTERN = re.compile(r"\s+")
_DATE_MARKER_PATTERN = re.compile(r"\b(date|dob|dod)\b")


def _clean_once(text: str) -> str:
    text = html.unescape(text)
    text = _TAG_PATTERN.sub(" ", text)
    text = _WHITESPACE_PATTERN.sub(" ", text).strip()
    text = text.strip("[]").strip()
    return text.lower()


def normalize_key(key: Optional[str]) -> str:
    """
    Returns the canonical comparison form of a field key or placeholder.

    Markup tags and entity escapes are removed, surrounding square brackets are
    dropped, the text is lower-cased and whitespace runs collapse to one space.
    The cleanup is repeated until the text stops changing, which makes the
    function idempotent even for doubly-escaped fragments like "&amp;lt;b&amp;gt;".
    """
    if not key:
        return ""
    text = str(key)
    while True:
        cleaned = _clean_once(text)
        if cleaned == text:
            break
        text = cleaned
    return text


def _classification_form(key: Optional[str]) -> str:
    # "father_name_c1" and "father name c1" classify the same way
    return _WHITESPACE_PATTERN.sub(" ", normalize_key(key).replace("_", " ")).strip()


def classify_key(key: Optional[str]) -> SemanticCategory:
    text = _classification_form(key)
    if not text:
        return SemanticCategory.OTHER
    for pattern, category in CATEGORY_RULES:
        if pattern.search(text):
            return category
    return SemanticCategory.OTHER


def extract_role_suffix(key: Optional[str]) -> Optional[RoleSuffix]:
    """Returns the trailing role suffix, e.g. RoleSuffix('LH', 3) for 'Address LH3'."""
    match = ROLE_SUFFIX_PATTERN.search(_classification_form(key))
    if not match:
        return None
    return RoleSuffix(match.group(1).upper(), int(match.group(2)))


def is_date_key(key: Optional[str], category: Optional[SemanticCategory] = None) -> bool:
    if category is None:
        category = classify_key(key)
    if category in DATE_CATEGORIES:
        return True
    return bool(_DATE_MARKER_PATTERN.search(_classification_form(key)))
