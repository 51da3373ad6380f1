"""
Placeholder Mapping Module for the claimfill Document Assistant.

This module resolves bracket placeholders such as [Name as per PAN C1] in claim
documents from the loosely-keyed field values stored per claimant (C1..Cn),
deceased holder (H1..Hn) and legal heir (LH1..LHn).

Architecture:
    The module is organized into focused submodules:
    - constants: Semantic categories, classification table, fallback priorities
    - schemas: Pydantic models (RawField, ResolvedValue, DataQualityWarning, MappingReport)
    - normalization: Key normalization, category and role-suffix parsing
    - sanitizer: Value cleanup, sentinel detection, dates, lists, contamination checks
    - index: Immutable per-request GroupIndex of fields by (category, suffix)
    - resolver: Ordered fallback search for one placeholder
    - builder: Whole-document map with post-validation and warnings
    - preview: Sectioned mapping preview for reviewers

Usage:
    Build the map handed to the renderer:
        >>> from claimfill.mapping import build_document_map
        >>> values = build_document_map(
        ...     {"Name as per Aadhar C1": "Jane Doe", "PIN C1": "411001"},
        ...     ["Name as per PAN C1", "PIN C1", "PIN C2"],
        ... )
        >>> values["Name as per PAN C1"], values["PIN C2"]
        ('Jane Doe', '')

    Keep the per-placeholder details and warnings:
        >>> from claimfill.mapping import build_mapping_report
        >>> report = build_mapping_report(raw_fields, placeholders)
        >>> report.unresolved_placeholders()

Guarantees:
    - Every requested placeholder is present in the output, always as a string
    - "undefined", "null", underscore runs and bare separators never reach the output
    - PIN / PAN / BANK_PIN values are never borrowed from another entity's suffix
    - Bank addresses and bank PINs never fill claimant address / PIN placeholders

Modification Guidelines:
    1. New key spellings or categories: add a rule to constants.CATEGORY_RULES
    2. Name fallback order: edit constants.NAME_FALLBACK_PRIORITY
    3. New anti-leak pairs: extend constants.BANK_SIBLINGS
    4. New sentinel rules: extend sanitizer._sentinel_reason
"""

# Constants and categories
from .constants import (
    ResolutionSource,
    SemanticCategory,
    ValueStatus,
    WarningKind,
    NAME_FALLBACK_PRIORITY,
    NO_FALLBACK_CATEGORIES,
)

# Data models
from .schemas import (
    ClassifiedValue,
    DataQualityWarning,
    MappingInputError,
    MappingReport,
    RawField,
    ResolvedValue,
    RoleSuffix,
)

# Key parsing
from .normalization import (
    classify_key,
    extract_role_suffix,
    is_date_key,
    normalize_key,
)

# Value sanitization
from .sanitizer import (
    classify_value,
    contamination_reason,
    normalize_date,
)

# Grouping
from .index import (
    GroupIndex,
    build_group_index,
)

# Resolution
from .resolver import (
    resolve_placeholder,
)

# Document map
from .builder import (
    build_document_map,
    build_mapping_report,
)

# Preview
from .preview import (
    categorize_mapping_key,
    generate_mapping_preview,
)

# Public API - organized by category
__all__ = [
    # Constants and categories
    "ResolutionSource",
    "SemanticCategory",
    "ValueStatus",
    "WarningKind",
    "NAME_FALLBACK_PRIORITY",
    "NO_FALLBACK_CATEGORIES",

    # Data models
    "ClassifiedValue",
    "DataQualityWarning",
    "MappingInputError",
    "MappingReport",
    "RawField",
    "ResolvedValue",
    "RoleSuffix",

    # Key parsing
    "classify_key",
    "extract_role_suffix",
    "is_date_key",
    "normalize_key",

    # Value sanitization
    "classify_value",
    "contamination_reason",
    "normalize_date",

    # Grouping
    "GroupIndex",
    "build_group_index",

    # Resolution
    "resolve_placeholder",

    # Document map
    "build_document_map",
    "build_mapping_report",

    # Preview
    "categorize_mapping_key",
    "generate_mapping_preview",
]
