"""
Fallback resolution of a single placeholder.

The resolver walks an ordered list of candidate sources and stops at the first
VALID value that is not contaminated for the placeholder's category:

1. Exact key match in the raw values
2. Fields whose normalized key equals the normalized placeholder
3. Other members of the same (category, role suffix) group, in input order
4. Name placeholders only: sibling name categories for the same suffix, in the
   fixed NAME_FALLBACK_PRIORITY order, then any other name field
5. PIN / PAN / BANK_PIN never accept a value from a different role suffix

If nothing qualifies the result is EMPTY with an empty string. The resolver is a
pure function of its inputs; data problems are reported as warnings on the
returned ResolvedValue, never raised.
"""

from typing import Iterable, List, Mapping, NamedTuple, Optional, Set

from ..config import MappingSettings
from .constants import (
    BANK_SIBLINGS,
    GROUP_SEARCH_EXCLUDED,
    NAME_CATEGORIES,
    NAME_FALLBACK_PRIORITY,
    NO_FALLBACK_CATEGORIES,
    ResolutionSource,
    SemanticCategory,
    WarningKind,
)
from .index import GroupIndex, IndexedField
from .normalization import classify_key, extract_role_suffix, normalize_key
from .sanitizer import MALFORMED_DATE, classify_value, contamination_reason
from .schemas import ClassifiedValue, DataQualityWarning, ResolvedValue, RoleSuffix


class _Target(NamedTuple):
    placeholder: str
    normalized_key: str
    category: SemanticCategory
    suffix: Optional[RoleSuffix]


def related_name_categories(category: SemanticCategory) -> List[SemanticCategory]:
    """Sibling name categories to search for a name placeholder, in priority order."""
    if category not in NAME_CATEGORIES:
        return []
    ordered = [c for c in NAME_FALLBACK_PRIORITY if c != category]
    ordered.extend(c for c in SemanticCategory if c in NAME_CATEGORIES and c not in ordered and c != category)
    return ordered


class _Search:
    """Candidate bookkeeping for one placeholder."""

    def __init__(self, target: _Target, index: GroupIndex, settings: MappingSettings):
        self.target = target
        self.settings = settings
        self.bank_values = index.bank_values(target.suffix, BANK_SIBLINGS.get(target.category, ()))
        self.seen: Set[int] = set()
        self.warnings: List[DataQualityWarning] = []

    def warn(self, kind: WarningKind, key: str, message: str) -> None:
        warning = DataQualityWarning(
            placeholder=self.target.placeholder,
            kind=kind,
            key=key,
            category=self.target.category,
            message=message,
        )
        if warning not in self.warnings:
            self.warnings.append(warning)

    def accept(self, classified: ClassifiedValue, key: str, suffix: Optional[RoleSuffix]) -> Optional[str]:
        if not classified.is_valid:
            if classified.reason == MALFORMED_DATE:
                self.warn(WarningKind.MALFORMED_DATE, key, f"'{key}' does not hold a recognisable date")
            return None
        if self.target.category in NO_FALLBACK_CATEGORIES and suffix != self.target.suffix:
            return None
        reason = contamination_reason(classified.value, self.target.category, self.bank_values, self.settings)
        if reason:
            self.warn(
                WarningKind.CONTAMINATED,
                key,
                f"Skipped '{key}' for {self.target.category.value}: {reason}",
            )
            return None
        return classified.value

    def first_accepted(self, fields: Iterable[IndexedField]) -> Optional[IndexedField]:
        for field in fields:
            if field.position in self.seen:
                continue
            self.seen.add(field.position)
            if self.accept(field.classified, field.key, field.suffix) is not None:
                return field
        return None


def resolve_placeholder(
    placeholder: str,
    raw_values: Mapping[str, Optional[str]],
    index: GroupIndex,
    settings: Optional[MappingSettings] = None,
) -> ResolvedValue:
    """
    Resolves one placeholder against the raw values of a request.

    Args:
        placeholder: Placeholder name as found in the document, without brackets
        raw_values: Key -> raw value map used for the exact-match step
        index: GroupIndex built from the same raw fields
        settings: Engine settings, defaults used when omitted

    Returns:
        ResolvedValue with the final string, the step that produced it and any
        data-quality warnings raised while searching.
    """
    settings = settings or MappingSettings()
    target = _Target(
        placeholder=placeholder,
        normalized_key=normalize_key(placeholder),
        category=classify_key(placeholder),
        suffix=extract_role_suffix(placeholder),
    )
    search = _Search(target, index, settings)

    def result(value: str, source: ResolutionSource, source_key: Optional[str]) -> ResolvedValue:
        return ResolvedValue(
            placeholder=placeholder,
            value=value,
            source=source,
            category=target.category,
            suffix=str(target.suffix) if target.suffix else None,
            source_key=source_key,
            warnings=search.warnings,
        )

    # 1. exact key
    if placeholder in raw_values:
        classified = classify_value(raw_values[placeholder], placeholder, settings, category=target.category)
        value = search.accept(classified, placeholder, target.suffix)
        if value is not None:
            return result(value, ResolutionSource.EXACT, placeholder)

    # 2. normalized key
    if target.normalized_key:
        field = search.first_accepted(index.with_normalized_key(target.normalized_key))
        if field:
            return result(field.classified.value, ResolutionSource.NORMALIZED, field.key)

    # 3. alternate spellings in the same (category, suffix) group
    if target.category not in GROUP_SEARCH_EXCLUDED:
        field = search.first_accepted(index.group(target.category, target.suffix))
        if field:
            return result(field.classified.value, ResolutionSource.FALLBACK, field.key)

    # 4. related name categories, same suffix only
    for category in related_name_categories(target.category):
        field = search.first_accepted(index.group(category, target.suffix))
        if field:
            return result(field.classified.value, ResolutionSource.FALLBACK, field.key)

    search.warn(
        WarningKind.UNRESOLVED,
        placeholder,
        f"No usable value for '{placeholder}' ({target.category.value})",
    )
    return result("", ResolutionSource.EMPTY, None)
