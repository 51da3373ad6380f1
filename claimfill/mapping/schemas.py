"""
Data models exchanged between the mapping stages.

RawField, ResolvedValue, DataQualityWarning and MappingReport are Pydantic models
because they cross the module boundary (the caller builds RawFields from database
rows and serialises reports to JSON). RoleSuffix and ClassifiedValue are small,
hashable value records used inside the engine.
"""

from typing import Any, Dict, List, NamedTuple, Optional

from pydantic import BaseModel, Field, field_validator

from .constants import ResolutionSource, SemanticCategory, ValueStatus, WarningKind


class MappingInputError(ValueError):
    """Raised when the raw field list or placeholder list is structurally invalid."""


class RoleSuffix(NamedTuple):
    """Entity-instance tag such as C1 (claimant), H2 (holder) or LH5 (legal heir)."""
    letter: str
    number: int

    def __str__(self) -> str:
        return f"{self.letter}{self.number}"


class ClassifiedValue(NamedTuple):
    status: ValueStatus
    value: str
    reason: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        return self.status == ValueStatus.VALID


class RawField(BaseModel):
    """One stored attribute as harvested from the data store."""
    key: str = Field(default="", description="Free-form field key, e.g. 'Name as per PAN C1'")
    value: Optional[str] = Field(default=None, description="Raw stored value, may be None")

    @field_validator("key", mode="before")
    @classmethod
    def coerce_key(cls, v: Any) -> str:
        if v is None:
            return ""
        return str(v)

    @field_validator("value", mode="before")
    @classmethod
    def coerce_value(cls, v: Any) -> Optional[str]:
        """Numbers and dates from the store are compared as text."""
        if v is None or isinstance(v, str):
            return v
        return str(v)


class DataQualityWarning(BaseModel):
    """Advisory event; never blocks output."""
    placeholder: str
    kind: WarningKind
    key: Optional[str] = None
    category: Optional[SemanticCategory] = None
    message: str = ""


class ResolvedValue(BaseModel):
    placeholder: str
    value: str = ""
    source: ResolutionSource = ResolutionSource.EMPTY
    category: SemanticCategory = SemanticCategory.OTHER
    suffix: Optional[str] = None
    source_key: Optional[str] = None
    warnings: List[DataQualityWarning] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.source == ResolutionSource.EMPTY


class MappingReport(BaseModel):
    """Full outcome of one document resolution pass."""
    values: Dict[str, str] = Field(default_factory=dict)
    resolved: Dict[str, ResolvedValue] = Field(default_factory=dict)
    warnings: List[DataQualityWarning] = Field(default_factory=list)

    @property
    def populated_count(self) -> int:
        return sum(1 for v in self.values.values() if v.strip())

    @property
    def empty_count(self) -> int:
        return len(self.values) - self.populated_count

    def unresolved_placeholders(self) -> List[str]:
        return [w.placeholder for w in self.warnings if w.kind == WarningKind.UNRESOLVED]
