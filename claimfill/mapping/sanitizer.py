"""
Value sanitization and contamination checks.

Stored values are noisy: front-end bugs saved the literal text "undefined",
unfilled form fields were saved as "____", joined lists end in ", &," and dates
come in three formats. This module turns a raw value into either a clean VALID
string or EMPTY, and decides whether a clean value is plausible for the slot it
is about to fill.

Functions:
    - classify_value: VALID/EMPTY classification with cleanup, date and list handling
    - normalize_date: reparse a date string into the configured output format
    - contamination_reason: why a value must not fill a given category, or None
"""

import re
from datetime import date
from typing import Iterable, Optional

from ..config import MappingSettings
from .constants import (
    BANK_TOKEN_PATTERN,
    CLAIMANT_ADDRESS_CATEGORIES,
    EMBEDDED_SENTINEL_PATTERN,
    LIST_CATEGORIES,
    NAME_CATEGORIES,
    PAN_ALLOWED_PATTERN,
    PIN_ALLOWED_PATTERN,
    PLACEHOLDER_LITERAL_PATTERN,
    SENTINEL_TOKENS,
    SEPARATORS_ONLY_PATTERN,
    SemanticCategory,
    ValueStatus,
)
from .normalization import classify_key, is_date_key
from .schemas import ClassifiedValue


MALFORMED_DATE = "malformed date"

_ISO_DATE_PATTERN = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})(?:[T\s].*)?$")
_DMY_DATE_PATTERN = re.compile(r"^(\d{1,2})[/\-.](\d{1,2})[/\-.](\d{4}|\d{2})$")
_WHITESPACE_PATTERN = re.compile(r"\s+")
_SPACE_BEFORE_COMMA_PATTERN = re.compile(r"\s+,")
_REPEATED_COMMA_PATTERN = re.compile(r",(?:\s*,)+")
_EDGE_NOISE_CHARS = ",& \t\r\n"


def _empty(reason: str) -> ClassifiedValue:
    return ClassifiedValue(ValueStatus.EMPTY, "", reason)


def _sentinel_reason(text: str, settings: MappingSettings) -> Optional[str]:
    """Returns why an already-stripped text means "no data", or None."""
    if not text:
        return "blank"
    if text.lower() in SENTINEL_TOKENS:
        return f"sentinel '{text}'"
    if len(text) >= settings.sentinel_underscore_min and set(text) == {"_"}:
        return "underscore sentinel"
    if PLACEHOLDER_LITERAL_PATTERN.match(text):
        return "unreplaced placeholder"
    if SEPARATORS_ONLY_PATTERN.match(text):
        return "separators only"
    return None


def _clean_text(text: str) -> str:
    text = EMBEDDED_SENTINEL_PATTERN.sub(" ", text)
    text = text.replace("&amp;", "&")
    text = _WHITESPACE_PATTERN.sub(" ", text)
    text = _SPACE_BEFORE_COMMA_PATTERN.sub(",", text)
    text = _REPEATED_COMMA_PATTERN.sub(",", text)
    return text.strip(_EDGE_NOISE_CHARS)


def _classify_scalar(value: Optional[str], settings: MappingSettings) -> ClassifiedValue:
    if value is None:
        return _empty("missing")
    text = str(value).strip()
    reason = _sentinel_reason(text, settings)
    if reason:
        return _empty(reason)
    text = _clean_text(text)
    reason = _sentinel_reason(text, settings)
    if reason:
        return _empty(reason)
    return ClassifiedValue(ValueStatus.VALID, text)


def _expand_year(year_text: str, settings: MappingSettings) -> int:
    year = int(year_text)
    if len(year_text) == 2:
        return 2000 + year if year < settings.two_digit_year_pivot else 1900 + year
    return year


def normalize_date(value: str, settings: Optional[MappingSettings] = None) -> Optional[str]:
    """
    Reparses YYYY-MM-DD, D/M/YYYY or D/M/YY and returns it in the configured
    output format (DD/MM/YYYY by default). Returns None when the text is not a
    recognised, real calendar date.
    """
    settings = settings or MappingSettings()
    text = value.strip()
    match = _ISO_DATE_PATTERN.match(text)
    if match:
        year, month, day = int(match.group(1)), int(match.group(2)), int(match.group(3))
    else:
        match = _DMY_DATE_PATTERN.match(text)
        if not match:
            return None
        day, month = int(match.group(1)), int(match.group(2))
        year = _expand_year(match.group(3), settings)
    try:
        return date(year, month, day).strftime(settings.date_output_format)
    except ValueError:
        return None


def _clean_list(text: str, settings: MappingSettings) -> ClassifiedValue:
    items = []
    for part in text.split(","):
        item = _classify_scalar(part, settings)
        if item.is_valid:
            items.append(item.value)
    if not items:
        return _empty("no list items")
    return ClassifiedValue(ValueStatus.VALID, ", ".join(items))


def classify_value(
    value: Optional[str],
    key: str = "",
    settings: Optional[MappingSettings] = None,
    category: Optional[SemanticCategory] = None,
) -> ClassifiedValue:
    """
    Classifies a raw value as VALID (with its cleaned text) or EMPTY.

    Args:
        value: Raw stored value, may be None
        key: Field key or placeholder the value belongs to; selects date/list handling
        settings: Engine settings, defaults used when omitted
        category: Pre-computed category of the key, avoids re-classifying

    Returns:
        ClassifiedValue(status, value, reason). For EMPTY the value is "" and the
        reason names the sentinel rule or "malformed date".
    """
    settings = settings or MappingSettings()
    if category is None:
        category = classify_key(key)

    classified = _classify_scalar(value, settings)
    if not classified.is_valid:
        return classified

    if is_date_key(key, category):
        normalized = normalize_date(classified.value, settings)
        if normalized is None:
            return _empty(MALFORMED_DATE)
        return ClassifiedValue(ValueStatus.VALID, normalized)

    if category in LIST_CATEGORIES:
        return _clean_list(classified.value, settings)

    return classified


def _same_text(a: str, b: str) -> bool:
    return _WHITESPACE_PATTERN.sub(" ", a).strip().lower() == _WHITESPACE_PATTERN.sub(" ", b).strip().lower()


def _identifier_reason(value: str, label: str, min_length: int, allowed: re.Pattern) -> Optional[str]:
    if _WHITESPACE_PATTERN.search(value):
        return f"{label} contains whitespace"
    if len(value) < min_length:
        return f"{label} shorter than {min_length} characters"
    if not allowed.match(value):
        return f"{label} contains unexpected characters"
    return None


def contamination_reason(
    value: str,
    category: SemanticCategory,
    bank_values: Iterable[str] = (),
    settings: Optional[MappingSettings] = None,
) -> Optional[str]:
    """
    Returns why a VALID value belongs to a different kind of field than
    `category`, or None when the value is plausible for it.

    Args:
        value: Cleaned value (output of classify_value)
        category: Category of the slot being filled
        bank_values: Values of the sibling bank fields for the same role suffix
        settings: Engine settings, defaults used when omitted
    """
    settings = settings or MappingSettings()

    if category == SemanticCategory.PAN:
        reason = _identifier_reason(value, "PAN", settings.pan_min_length, PAN_ALLOWED_PATTERN)
        if reason:
            return reason
    elif category == SemanticCategory.PIN:
        reason = _identifier_reason(value, "PIN", settings.pin_min_length, PIN_ALLOWED_PATTERN)
        if reason:
            return reason
    elif category in NAME_CATEGORIES:
        # a bare alphanumeric token as long as a PAN, e.g. "ABCDE1234F"
        if len(value) >= settings.pan_min_length and PAN_ALLOWED_PATTERN.match(value):
            return "PAN-shaped token in a name field"
    elif category in CLAIMANT_ADDRESS_CATEGORIES:
        match = BANK_TOKEN_PATTERN.search(value)
        if match:
            return f"bank-identifying text '{match.group(0)}' in a claimant address"

    for bank_value in bank_values:
        if bank_value and _same_text(value, bank_value):
            return f"same value as a bank field for {category.value}"
    return None
