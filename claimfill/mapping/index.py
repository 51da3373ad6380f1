"""
Per-request index of raw fields grouped by (semantic category, role suffix).

The index is built once per resolution pass from a fully materialised list of
raw fields and is read-only afterwards: groups are tuples held in
MappingProxyType views, in original input order, so "first valid member wins"
is deterministic.
"""

from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Mapping, NamedTuple, Optional, Sequence, Tuple

from ..config import MappingSettings
from .constants import SemanticCategory
from .normalization import classify_key, extract_role_suffix, normalize_key
from .sanitizer import classify_value
from .schemas import ClassifiedValue, RawField, RoleSuffix


class GroupKey(NamedTuple):
    category: SemanticCategory
    suffix: Optional[RoleSuffix]


class IndexedField(NamedTuple):
    """A raw field with everything derived from it computed once."""
    position: int
    key: str
    normalized_key: str
    category: SemanticCategory
    suffix: Optional[RoleSuffix]
    raw_value: Optional[str]
    classified: ClassifiedValue


class GroupIndex:
    """
    Immutable view over the raw fields of one request.

    Attributes:
        fields: every IndexedField in input order
        raw_values: key -> raw value; for duplicate keys the first VALID value wins,
            falling back to the first occurrence
    """

    def __init__(self, fields: Sequence[IndexedField]):
        self._fields: Tuple[IndexedField, ...] = tuple(fields)

        groups: Dict[GroupKey, List[IndexedField]] = {}
        by_key: Dict[str, List[IndexedField]] = {}
        raw_values: Dict[str, Optional[str]] = {}
        raw_valid: Dict[str, bool] = {}

        for field in self._fields:
            groups.setdefault(GroupKey(field.category, field.suffix), []).append(field)
            by_key.setdefault(field.normalized_key, []).append(field)
            if field.key not in raw_values or (field.classified.is_valid and not raw_valid[field.key]):
                raw_values[field.key] = field.raw_value
                raw_valid[field.key] = field.classified.is_valid

        self._groups: Mapping[GroupKey, Tuple[IndexedField, ...]] = MappingProxyType(
            {k: tuple(v) for k, v in groups.items()}
        )
        self._by_normalized_key: Mapping[str, Tuple[IndexedField, ...]] = MappingProxyType(
            {k: tuple(v) for k, v in by_key.items()}
        )
        self._raw_values: Mapping[str, Optional[str]] = MappingProxyType(raw_values)

    def __len__(self) -> int:
        return len(self._fields)

    def __iter__(self):
        return iter(self._fields)

    @property
    def fields(self) -> Tuple[IndexedField, ...]:
        return self._fields

    @property
    def raw_values(self) -> Mapping[str, Optional[str]]:
        return self._raw_values

    @property
    def group_keys(self) -> Tuple[GroupKey, ...]:
        return tuple(self._groups.keys())

    @property
    def suffixes(self) -> FrozenSet[RoleSuffix]:
        """Role suffixes in use, e.g. {C1, C2, H1, LH1}."""
        return frozenset(k.suffix for k in self._groups if k.suffix is not None)

    def group(self, category: SemanticCategory, suffix: Optional[RoleSuffix]) -> Tuple[IndexedField, ...]:
        return self._groups.get(GroupKey(category, suffix), ())

    def with_normalized_key(self, normalized_key: str) -> Tuple[IndexedField, ...]:
        return self._by_normalized_key.get(normalized_key, ())

    def categories_for(self, suffix: Optional[RoleSuffix]) -> FrozenSet[SemanticCategory]:
        return frozenset(k.category for k in self._groups if k.suffix == suffix)

    def bank_values(self, suffix: Optional[RoleSuffix], categories: Iterable[SemanticCategory]) -> List[str]:
        """Cleaned VALID values of the given bank categories for one suffix."""
        values = []
        for category in categories:
            for field in self.group(category, suffix):
                if field.classified.is_valid:
                    values.append(field.classified.value)
        return values


def index_field(position: int, raw_field: RawField, settings: MappingSettings) -> IndexedField:
    category = classify_key(raw_field.key)
    return IndexedField(
        position=position,
        key=raw_field.key,
        normalized_key=normalize_key(raw_field.key),
        category=category,
        suffix=extract_role_suffix(raw_field.key),
        raw_value=raw_field.value,
        classified=classify_value(raw_field.value, raw_field.key, settings, category=category),
    )


def build_group_index(raw_fields: Iterable[RawField], settings: Optional[MappingSettings] = None) -> GroupIndex:
    """Classifies every raw field once and groups them by (category, suffix)."""
    settings = settings or MappingSettings()
    return GroupIndex([index_field(i, f, settings) for i, f in enumerate(raw_fields)])
