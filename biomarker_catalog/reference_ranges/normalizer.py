"""
Record normalization
Turns heterogeneous import records into canonical Biomarker records.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from pydantic import BaseModel, ValidationError

from biomarker_catalog.configurations.biomarker_tables import BiomarkerTables, load_biomarker_tables
from biomarker_catalog.schemas.biomarker import Biomarker
from biomarker_catalog.schemas.ranges import RangeSet
from .exceptions import (
    InvalidEnumeratedField,
    MalformedNumericField,
    MalformedRangeField,
    MissingRequiredField,
    NormalizationError,
)
from .mappings import CANONICAL_TO_LEGACY, LIST_FIELDS, RANGE_FIELDS, TEXT_FIELDS

logger = logging.getLogger(__name__)


def is_present(value: Any) -> bool:
    """Presence predicate for optional fields.

    None, blank strings, empty collections, NaN and range sets without any
    axis count as absent. Numeric zero and False are present.
    """
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple, set, frozenset, dict)):
        return len(value) > 0
    if isinstance(value, float):
        return not math.isnan(value)
    if isinstance(value, BaseModel):
        return bool(value.model_dump(exclude_none=True))
    return True


class RecordBuilder:
    """Collects the fields of one canonical record.

    Optional fields are assigned only when the converted value passes
    `is_present`, so absent fields never reach the record as null or empty.
    """

    def __init__(self, record_id: Optional[str] = None):
        self.record_id = record_id
        self._fields: Dict[str, Any] = {}

    def require(self, name: str, value: Any) -> "RecordBuilder":
        if not is_present(value):
            raise MissingRequiredField(
                f"Required field '{name}' is missing", record_id=self.record_id, field=name
            )
        self._fields[name] = value.strip() if isinstance(value, str) else value
        return self

    def set(self, name: str, value: Any) -> "RecordBuilder":
        self._fields[name] = value
        return self

    def optional(self, name: str, value: Any, convert: Optional[Callable[[Any], Any]] = None) -> "RecordBuilder":
        if not is_present(value):
            return self
        converted = convert(value) if convert else value
        if is_present(converted):
            self._fields[name] = converted
        return self

    def build(self) -> Biomarker:
        try:
            return Biomarker(**self._fields)
        except ValidationError as e:
            error = e.errors()[0]
            field_name = str(error["loc"][0]) if error.get("loc") else None
            raise NormalizationError(
                f"Field '{field_name}' is invalid: {error['msg']}",
                record_id=self.record_id,
                field=field_name,
            ) from e


def _source_value(raw: Any, name: str) -> Any:
    """Read a field by canonical name, falling back to its legacy column."""
    names = [name]
    if name in CANONICAL_TO_LEGACY:
        names.append(CANONICAL_TO_LEGACY[name])
    for candidate in names:
        if isinstance(raw, Mapping):
            value = raw.get(candidate)
        else:
            value = getattr(raw, candidate, None)
        if is_present(value):
            return value
    return None


def _text(value: Any) -> str:
    return str(value).strip()


def _string_list(value: Any) -> List[str]:
    items = [value] if isinstance(value, str) else list(value)
    seen = set()
    cleaned = []
    for item in items:
        if item is None:
            continue
        text = str(item).strip()
        if text and text not in seen:
            seen.add(text)
            cleaned.append(text)
    return cleaned


def parse_numeric(value: Any, record_id: Optional[str] = None, field_name: str = "default_value") -> float:
    """Parse a numeric field from a string or a number into a float."""
    if isinstance(value, bool):
        raise MalformedNumericField(
            f"Field '{field_name}' is not numeric: {value!r}", record_id=record_id, field=field_name
        )
    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError):
        raise MalformedNumericField(
            f"Field '{field_name}' is not numeric: {value!r}", record_id=record_id, field=field_name
        )
    if not math.isfinite(number):
        raise MalformedNumericField(
            f"Field '{field_name}' is not a finite number: {value!r}", record_id=record_id, field=field_name
        )
    return number


def normalize(raw: Any, tables: Optional[BiomarkerTables] = None) -> Biomarker:
    """Convert one import record (mapping or object) into a canonical Biomarker.

    Raises a NormalizationError subclass when the record cannot be used.
    """
    tables = tables or load_biomarker_tables()

    raw_id = _source_value(raw, "id")
    record_id = _text(raw_id) if raw_id is not None else None
    builder = RecordBuilder(record_id)

    builder.require("id", record_id)
    name = _source_value(raw, "name")
    builder.require("name", _text(name) if name is not None else None)

    unit = _source_value(raw, "default_unit_id")
    builder.set("default_unit_id", _text(unit) if unit is not None else "")

    for field_name in TEXT_FIELDS:
        builder.optional(field_name, _source_value(raw, field_name), _text)

    category = _source_value(raw, "category")
    if category is not None and not tables.is_category(_text(category)):
        raise InvalidEnumeratedField(
            f"Field 'category' has unknown value '{_text(category)}'", record_id=record_id, field="category"
        )

    value_type = _source_value(raw, "value_type")
    if value_type is not None:
        value_type = _text(value_type)
        if not tables.is_value_type(value_type):
            raise InvalidEnumeratedField(
                f"Field 'value_type' has unknown value '{value_type}'", record_id=record_id, field="value_type"
            )
        builder.set("value_type", value_type)

    # zero counts as absent
    builder.optional(
        "default_value",
        _source_value(raw, "default_value"),
        lambda v: parse_numeric(v, record_id=record_id) or None,
    )

    for field_name in LIST_FIELDS:
        builder.optional(field_name, _source_value(raw, field_name), _string_list)

    for field_name in RANGE_FIELDS:
        value = _source_value(raw, field_name)
        if value is None:
            continue
        try:
            builder.optional(field_name, RangeSet.model_validate(value))
        except ValidationError as e:
            raise MalformedRangeField(
                f"Field '{field_name}' is not a valid range set: {e.errors()[0]['msg']}",
                record_id=record_id,
                field=field_name,
            ) from e

    return builder.build()


@dataclass
class RejectedRecord:
    index: int
    record_id: Optional[str]
    error: NormalizationError


@dataclass
class NormalizationReport:
    records: List[Biomarker] = field(default_factory=list)
    rejected: List[RejectedRecord] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.rejected


def normalize_batch(
    rows: Iterable[Any],
    tables: Optional[BiomarkerTables] = None,
    skip_invalid: bool = True,
) -> NormalizationReport:
    """Normalize a batch; a bad row is logged and skipped, never fatal to the rest."""
    tables = tables or load_biomarker_tables()
    report = NormalizationReport()

    for index, raw in enumerate(rows):
        try:
            report.records.append(normalize(raw, tables))
        except NormalizationError as e:
            if not skip_invalid:
                raise
            logger.warning(f"Skipping import record {index} ({e.record_id or 'no id'}): {e}")
            report.rejected.append(RejectedRecord(index=index, record_id=e.record_id, error=e))

    logger.info(f"Normalized {len(report.records)} biomarker records, rejected {len(report.rejected)}")
    return report
