"""
Shared constants and classification tables for the mapping module.

This module contains:
- SemanticCategory: the inferred meaning of a field key (NAME, ADDRESS, PIN, ...)
- ValueStatus / ResolutionSource / WarningKind: small enums shared by every stage
- CATEGORY_RULES: ordered (pattern, category) table used to classify normalized keys
- Category families and the fixed name fallback priority
- BANK_SIBLINGS: bank categories whose values must never leak into claimant fields

Adding a new category or key spelling is a data change here, not new branching
logic in the resolver.
"""

import re
from enum import Enum
from typing import Dict, FrozenSet, List, Pattern, Tuple


class SemanticCategory(str, Enum):
    """Inferred meaning of a field key."""
    NAME = "NAME"
    NAME_AADHAR = "NAME_AADHAR"
    NAME_PAN = "NAME_PAN"
    NAME_CML = "NAME_CML"
    NAME_BANK = "NAME_BANK"
    NAME_PASSPORT = "NAME_PASSPORT"
    NAME_SUCCESSION = "NAME_SUCCESSION"
    NAME_CERT = "NAME_CERT"
    NAME_DC = "NAME_DC"
    FATHER_NAME = "FATHER_NAME"
    RELATED_PERSON_NAME = "RELATED_PERSON_NAME"
    ADDRESS = "ADDRESS"
    OLD_ADDRESS = "OLD_ADDRESS"
    PIN = "PIN"
    PAN = "PAN"
    MOBILE = "MOBILE"
    EMAIL = "EMAIL"
    DOB = "DOB"
    AGE = "AGE"
    RELATION = "RELATION"
    DATE_OF_DEATH = "DATE_OF_DEATH"
    BANK_NAME = "BANK_NAME"
    BANK_ADDRESS = "BANK_ADDRESS"
    BANK_PIN = "BANK_PIN"
    BANK_DETAIL = "BANK_DETAIL"
    COMPANY_NAME = "COMPANY_NAME"
    CERTIFICATE_NUMBERS = "CERTIFICATE_NUMBERS"
    DISTINCTIVE_NUMBERS = "DISTINCTIVE_NUMBERS"
    DATE = "DATE"
    OTHER = "OTHER"


class ValueStatus(str, Enum):
    VALID = "VALID"
    EMPTY = "EMPTY"


class ResolutionSource(str, Enum):
    """Which resolver step produced a value."""
    EXACT = "EXACT"
    NORMALIZED = "NORMALIZED"
    FALLBACK = "FALLBACK"
    EMPTY = "EMPTY"


class WarningKind(str, Enum):
    UNRESOLVED = "UNRESOLVED"
    CONTAMINATED = "CONTAMINATED"
    MALFORMED_DATE = "MALFORMED_DATE"
    SENTINEL_LEAK = "SENTINEL_LEAK"


# Role suffix letters: claimant, deceased holder, legal heir
ROLE_LETTERS = ("C", "H", "LH")

# Trailing role suffix on a normalized key, e.g. "name as per pan c1", "address_lh3"
ROLE_SUFFIX_PATTERN = re.compile(r"(?:^|[\s_\-/])(lh|c|h)\s?(\d+)$")


def _rule(pattern: str, category: SemanticCategory) -> Tuple[Pattern, SemanticCategory]:
    return re.compile(pattern), category


# Ordered classification table, applied to normalized keys; first match wins.
# Name-source variants come first so "name as per pan c1" is a name, not a PAN,
# and bank-scoped keys come before claimant rules so "bank address c1" never
# lands in the ADDRESS group.
CATEGORY_RULES: List[Tuple[Pattern, SemanticCategory]] = [
    _rule(r"\bname as per (aadhar|aadhaar|adhar)\b", SemanticCategory.NAME_AADHAR),
    _rule(r"\bname as per pan\b", SemanticCategory.NAME_PAN),
    _rule(r"\bname as per cml\b", SemanticCategory.NAME_CML),
    _rule(r"\bname as per bank\b", SemanticCategory.NAME_BANK),
    _rule(r"\bname as per passport\b", SemanticCategory.NAME_PASSPORT),
    _rule(r"\bname as per (succession|will|lha)\b", SemanticCategory.NAME_SUCCESSION),
    _rule(r"\bname as per (dc|death certificate)\b", SemanticCategory.NAME_DC),
    _rule(r"\bname as per cert(ificate)?\b", SemanticCategory.NAME_CERT),
    _rule(r"^name[ _](aadhar|aadhaar)\b", SemanticCategory.NAME_AADHAR),
    _rule(r"^name[ _]pan\b", SemanticCategory.NAME_PAN),
    _rule(r"\b(father|husband|spouse)('?s)?[ _]?name\b", SemanticCategory.FATHER_NAME),
    _rule(r"\bname of (the )?(father|husband|spouse)\b", SemanticCategory.FATHER_NAME),
    _rule(r"\b(mother|nominee|guardian|witness)('?s)?[ _]?name\b"
          r"|\bname of (the )?(mother|nominee|guardian|witness)\b",
          SemanticCategory.RELATED_PERSON_NAME),
    _rule(r"\bbank\b.*\baddress\b|\baddress\b.*\bbank\b", SemanticCategory.BANK_ADDRESS),
    _rule(r"\bbank\b.*\b(pin|pincode|pin code)\b", SemanticCategory.BANK_PIN),
    _rule(r"\bbank[ _]name\b", SemanticCategory.BANK_NAME),
    _rule(r"\b(bank|ifsc|micr|branch)\b|\ba/c\b", SemanticCategory.BANK_DETAIL),
    _rule(r"\bold[ _]address\b", SemanticCategory.OLD_ADDRESS),
    _rule(r"\baddress\b|\bresiding at\b", SemanticCategory.ADDRESS),
    _rule(r"\b(pin|pincode|pin code)\b", SemanticCategory.PIN),
    _rule(r"\bpan\b", SemanticCategory.PAN),
    _rule(r"\b(mobile|phone|contact)\b", SemanticCategory.MOBILE),
    _rule(r"\be-?mail\b", SemanticCategory.EMAIL),
    _rule(r"\b(dob|date of birth)\b", SemanticCategory.DOB),
    _rule(r"\b(dod|date of death)\b", SemanticCategory.DATE_OF_DEATH),
    _rule(r"\bage\b", SemanticCategory.AGE),
    _rule(r"\brelation(ship)?\b", SemanticCategory.RELATION),
    _rule(r"\bcompany[ _]name\b|^company$", SemanticCategory.COMPANY_NAME),
    _rule(r"^sc[ _]?\d+$|\bcertificate[ _](no|nos|number|numbers)\b|\bcert[ _](no|nos)\b",
          SemanticCategory.CERTIFICATE_NUMBERS),
    _rule(r"^dn[ _]?\d+$|\bdistinctive\b", SemanticCategory.DISTINCTIVE_NUMBERS),
    _rule(r"\bdate\b", SemanticCategory.DATE),
    _rule(r"\bname\b", SemanticCategory.NAME),
]

# Fixed, historical priority for widening a name search within one suffix
NAME_FALLBACK_PRIORITY: Tuple[SemanticCategory, ...] = (
    SemanticCategory.NAME_AADHAR,
    SemanticCategory.NAME_CML,
    SemanticCategory.NAME_BANK,
    SemanticCategory.NAME_PASSPORT,
    SemanticCategory.NAME_SUCCESSION,
    SemanticCategory.NAME_CERT,
)

NAME_CATEGORIES: FrozenSet[SemanticCategory] = frozenset({
    SemanticCategory.NAME,
    SemanticCategory.NAME_AADHAR,
    SemanticCategory.NAME_PAN,
    SemanticCategory.NAME_CML,
    SemanticCategory.NAME_BANK,
    SemanticCategory.NAME_PASSPORT,
    SemanticCategory.NAME_SUCCESSION,
    SemanticCategory.NAME_CERT,
    SemanticCategory.NAME_DC,
})

CLAIMANT_ADDRESS_CATEGORIES: FrozenSet[SemanticCategory] = frozenset({
    SemanticCategory.ADDRESS,
    SemanticCategory.OLD_ADDRESS,
})

BANK_CATEGORIES: FrozenSet[SemanticCategory] = frozenset({
    SemanticCategory.BANK_NAME,
    SemanticCategory.BANK_ADDRESS,
    SemanticCategory.BANK_PIN,
    SemanticCategory.BANK_DETAIL,
})

DATE_CATEGORIES: FrozenSet[SemanticCategory] = frozenset({
    SemanticCategory.DOB,
    SemanticCategory.DATE_OF_DEATH,
    SemanticCategory.DATE,
})

LIST_CATEGORIES: FrozenSet[SemanticCategory] = frozenset({
    SemanticCategory.CERTIFICATE_NUMBERS,
    SemanticCategory.DISTINCTIVE_NUMBERS,
})

# Numeric identifiers are never borrowed from another entity's suffix
NO_FALLBACK_CATEGORIES: FrozenSet[SemanticCategory] = frozenset({
    SemanticCategory.PIN,
    SemanticCategory.PAN,
    SemanticCategory.BANK_PIN,
})

# Heterogeneous groups: members are unrelated fields, so they are not alternates
GROUP_SEARCH_EXCLUDED: FrozenSet[SemanticCategory] = frozenset({
    SemanticCategory.RELATED_PERSON_NAME,
    SemanticCategory.OTHER,
    SemanticCategory.DATE,
    SemanticCategory.BANK_DETAIL,
})

# Bank categories (same suffix) whose values a claimant field must not repeat
BANK_SIBLINGS: Dict[SemanticCategory, Tuple[SemanticCategory, ...]] = {
    SemanticCategory.ADDRESS: (SemanticCategory.BANK_ADDRESS,),
    SemanticCategory.OLD_ADDRESS: (SemanticCategory.BANK_ADDRESS,),
    SemanticCategory.PIN: (SemanticCategory.BANK_PIN,),
    SemanticCategory.PAN: (SemanticCategory.BANK_PIN, SemanticCategory.BANK_DETAIL),
}

# Text that identifies a bank rather than a residence
BANK_TOKEN_PATTERN = re.compile(
    r"\b(bank|branch|ifsc|micr|hdfc|icici|sbi|axis|kotak|canara|"
    r"idbi|indusind|yes bank|union bank|bank of baroda|punjab national)\b"
    r"|\b[A-Z]{4}0[A-Z0-9]{6}\b",
    re.IGNORECASE,
)

SENTINEL_TOKENS: FrozenSet[str] = frozenset({"undefined", "null"})
EMBEDDED_SENTINEL_PATTERN = re.compile(r"\b(undefined|null)\b", re.IGNORECASE)
PLACEHOLDER_LITERAL_PATTERN = re.compile(r"^\[[^\[\]]+\]$")
SEPARATORS_ONLY_PATTERN = re.compile(r"^(?:[\s,.&]|&amp;)*$", re.IGNORECASE)

PAN_ALLOWED_PATTERN = re.compile(r"^[A-Za-z0-9]+$")
PIN_ALLOWED_PATTERN = re.compile(r"^\d+$")
