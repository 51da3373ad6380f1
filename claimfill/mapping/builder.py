"""
Builds the placeholder -> value map for one document.

This is the entry point of the mapping engine. It validates the shape of the
inputs, builds the GroupIndex once, resolves each unique placeholder once,
re-checks the assembled map for sentinels that must never reach a rendered
document, and logs every data-quality warning for operators.

Only structurally invalid input (no raw fields, no placeholder list, a None
placeholder) raises; per-field problems degrade to an empty string.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from ..config import MappingSettings
from .constants import (
    PLACEHOLDER_LITERAL_PATTERN,
    ResolutionSource,
    SENTINEL_TOKENS,
    SEPARATORS_ONLY_PATTERN,
    WarningKind,
)
from .index import build_group_index
from .resolver import resolve_placeholder
from .schemas import DataQualityWarning, MappingInputError, MappingReport, RawField, ResolvedValue

logger = logging.getLogger(__name__)

RawFieldsInput = Union[Mapping[str, Optional[str]], Sequence[Any]]


def coerce_raw_fields(raw_fields: RawFieldsInput) -> List[RawField]:
    """
    Accepts a key -> value dict or a list of RawField / (key, value) / {"key", "value"}
    rows and returns a list of RawField in input order.
    """
    if raw_fields is None:
        raise MappingInputError("raw_fields must not be None")
    if isinstance(raw_fields, Mapping):
        return [RawField(key=k, value=v) for k, v in raw_fields.items()]
    if isinstance(raw_fields, (str, bytes)) or not isinstance(raw_fields, Iterable):
        raise MappingInputError(f"raw_fields must be a mapping or a list, got {type(raw_fields).__name__}")

    fields = []
    for position, row in enumerate(raw_fields):
        if isinstance(row, RawField):
            fields.append(row)
        elif isinstance(row, Mapping):
            fields.append(RawField(key=row.get("key"), value=row.get("value")))
        elif isinstance(row, (tuple, list)) and len(row) == 2:
            fields.append(RawField(key=row[0], value=row[1]))
        else:
            raise MappingInputError(f"raw_fields[{position}] is not a key/value row: {row!r}")
    return fields


def _unique_placeholders(placeholders: Sequence[str]) -> List[str]:
    if placeholders is None:
        raise MappingInputError("placeholders must not be None")
    if isinstance(placeholders, (str, bytes)) or not isinstance(placeholders, Iterable):
        raise MappingInputError(f"placeholders must be a list, got {type(placeholders).__name__}")

    unique: Dict[str, None] = {}
    for position, placeholder in enumerate(placeholders):
        if placeholder is None:
            raise MappingInputError(f"placeholders[{position}] is None")
        unique.setdefault(str(placeholder), None)
    return list(unique)


def _is_leaked_sentinel(value: str) -> bool:
    text = value.strip()
    if not text:
        return False
    return (
        text.lower() in SENTINEL_TOKENS
        or bool(SEPARATORS_ONLY_PATTERN.match(text))
        or bool(PLACEHOLDER_LITERAL_PATTERN.match(text))
    )


def _enforce_clean_values(
    values: Dict[str, str],
    resolved: Dict[str, ResolvedValue],
    warnings: List[DataQualityWarning],
) -> None:
    for placeholder, value in values.items():
        if _is_leaked_sentinel(value):
            warnings.append(DataQualityWarning(
                placeholder=placeholder,
                kind=WarningKind.SENTINEL_LEAK,
                message=f"Resolved value {value!r} is a sentinel, blanked",
            ))
            values[placeholder] = ""
            resolved[placeholder] = resolved[placeholder].model_copy(
                update={"value": "", "source": ResolutionSource.EMPTY}
            )


def _log_warnings(warnings: Iterable[DataQualityWarning]) -> None:
    for warning in warnings:
        if warning.kind == WarningKind.UNRESOLVED:
            logger.info(f"[{warning.kind.value}] {warning.message}")
        else:
            logger.warning(f"[{warning.kind.value}] {warning.placeholder}: {warning.message}")


def build_mapping_report(
    raw_fields: RawFieldsInput,
    placeholders: Sequence[str],
    settings: Optional[MappingSettings] = None,
) -> MappingReport:
    """
    Resolves every placeholder and returns values, per-placeholder details and warnings.

    Args:
        raw_fields: Raw field rows or a key -> value dict
        placeholders: Placeholder names found in the document; duplicates allowed
        settings: Engine settings; defaults are used when omitted. Callers that honour
            CLAIMFILL_* variables load them once with config.load_settings()

    Returns:
        MappingReport whose `values` has exactly one string entry per unique placeholder.

    Raises:
        MappingInputError: raw_fields or placeholders is None or not a collection
    """
    fields = coerce_raw_fields(raw_fields)
    unique = _unique_placeholders(placeholders)
    settings = settings or MappingSettings()

    index = build_group_index(fields, settings)
    logger.debug(f"Indexed {len(index)} raw fields across {len(index.group_keys)} groups")

    resolved: Dict[str, ResolvedValue] = {}
    warnings: List[DataQualityWarning] = []
    for placeholder in unique:
        result = resolve_placeholder(placeholder, index.raw_values, index, settings)
        resolved[placeholder] = result
        warnings.extend(result.warnings)

    values = {placeholder: resolved[placeholder].value for placeholder in unique}
    _enforce_clean_values(values, resolved, warnings)
    _log_warnings(warnings)

    report = MappingReport(values=values, resolved=resolved, warnings=warnings)
    logger.info(
        f"Resolved {len(unique)} placeholders: {report.populated_count} populated, "
        f"{report.empty_count} empty, {len(warnings)} warnings"
    )
    return report


def build_document_map(
    raw_fields: RawFieldsInput,
    placeholders: Sequence[str],
    settings: Optional[MappingSettings] = None,
) -> Dict[str, str]:
    """Returns the placeholder -> value map handed to the document renderer."""
    return build_mapping_report(raw_fields, placeholders, settings).values
