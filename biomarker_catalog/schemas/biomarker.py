import re
from typing import Any, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .ranges import RangeSet


ValueType = Literal["bool", "int", "float", "rating_5", "rating_10", "percentage"]

TIMESTAMP_COLUMNS = ("timestamp", "date")

# "Systolic Blood Pressure [mm[Hg]]" -> ("Systolic Blood Pressure", "mm[Hg]")
_COLUMN_LABEL_RE = re.compile(r"^(?P<label>[^\[]*?)\s*\[(?P<unit>.*)\]\s*$")


class Biomarker(BaseModel):
    """Canonical catalog record.

    Optional fields stay None when absent; `to_record()` leaves them out so the
    exported JSON only carries what the record actually has.
    """

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=255)
    default_unit_id: str = ""
    category: Optional[str] = None
    value_type: Optional[ValueType] = None

    slug: Optional[str] = None
    ref_loinc_id: Optional[str] = None
    synonyms: Optional[List[str]] = None
    type: Optional[str] = None
    subtype: Optional[str] = None
    classification: Optional[str] = None
    abbreviated_name: Optional[str] = Field(default=None, max_length=255)
    default_value: Optional[float] = None
    description: Optional[str] = Field(default=None, max_length=5000)
    references: Optional[List[str]] = None
    tags: Optional[List[str]] = None

    # Ranges as multi-dimensional matrix: axis -> stratum -> age -> boundaries
    ranges: Optional[RangeSet] = None
    ranges_z_score: Optional[RangeSet] = None
    ranges_references: Optional[List[str]] = None

    def present_fields(self) -> Dict[str, Any]:
        """Fields that carry a value, keyed by name, values not copied."""
        return {
            name: getattr(self, name)
            for name in type(self).model_fields
            if getattr(self, name) is not None
        }

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class BiomarkerInputSettings(BaseModel):
    """Which input fields a biomarker needs beyond a single value/unit pair."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    value_2: Optional[bool] = None
    unit_2: Optional[str] = None
    time_interval: Optional[bool] = None
    default_value: Optional[Union[bool, float]] = None
    hide_method: Optional[bool] = Field(default=None, alias="hideMethod")
    hide_value: Optional[bool] = Field(default=None, alias="hideValue")
    # Medication / supplementation fields
    description: Optional[bool] = None
    route: Optional[bool] = None
    prescription_trigger: Optional[bool] = None
    schedule: Optional[bool] = None
    generic_name: Optional[bool] = None
    trade_name: Optional[bool] = None
    strength: Optional[bool] = None
    strength_unit: Optional[bool] = None
    rxnorm_code: Optional[bool] = None

    def parameter_fields(self) -> Tuple[str, ...]:
        """Names of the structured parameters switched on for this biomarker."""
        flags = (
            "description", "route", "prescription_trigger", "schedule",
            "generic_name", "trade_name", "strength", "strength_unit", "rxnorm_code",
        )
        return tuple(name for name in flags if getattr(self, name))


class ImportFormat(BaseModel):
    """Column labels of one raw import row; the first column is the timestamp."""

    model_config = ConfigDict(frozen=True)

    name: str
    columns: Tuple[str, ...]

    @field_validator("columns")
    @classmethod
    def _timestamp_first(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        if len(v) < 2:
            raise ValueError("import format needs a timestamp column and at least one value column")
        if v[0].strip().lower() not in TIMESTAMP_COLUMNS:
            raise ValueError(f"first import column must be one of {TIMESTAMP_COLUMNS}, got {v[0]!r}")
        return v

    @property
    def value_columns(self) -> Tuple[str, ...]:
        return tuple(c for c in self.columns[1:] if not self._is_ellipsis(c))

    @property
    def is_open_ended(self) -> bool:
        """Panels list a few sample columns followed by ' ... '."""
        return self._is_ellipsis(self.columns[-1])

    @staticmethod
    def _is_ellipsis(column: str) -> bool:
        return column.strip() in ("...", "…")

    @staticmethod
    def parse_label(column: str) -> Tuple[str, Optional[str]]:
        match = _COLUMN_LABEL_RE.match(column.strip())
        if not match:
            return column.strip(), None
        return match.group("label").strip(), match.group("unit").strip()


class BiomarkerSettings(BaseModel):
    """A built-in biomarker together with its input and import metadata."""

    biomarker: Biomarker
    input_settings: Optional[BiomarkerInputSettings] = None
    import_format: Optional[ImportFormat] = None
