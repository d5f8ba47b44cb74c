"""
Import row shaping
Maps one raw tabular row onto readings according to the biomarker's kind:
plain value/unit, several values, a laboratory panel, or a parameter object.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict

from biomarker_catalog.configurations.biomarker_tables import BiomarkerTables, load_biomarker_tables
from biomarker_catalog.schemas.biomarker import Biomarker, ImportFormat
from biomarker_catalog.schemas.kinds import MultiValue, Panel, ParameterObject, Scalar
from .exceptions import ImportRowError
from .normalizer import is_present, parse_numeric


class Reading(BaseModel):
    model_config = ConfigDict(frozen=True)

    biomarker_id: str
    timestamp: str
    value: Optional[float] = None
    unit: Optional[str] = None
    values: Optional[Tuple[float, ...]] = None
    units: Optional[Tuple[str, ...]] = None
    code: Optional[str] = None
    parameters: Optional[Dict[str, str]] = None


def _parameter_key(column: str) -> str:
    label, _ = ImportFormat.parse_label(column)
    return label.lower().replace(" ", "_")


def _columns_for(
    biomarker: Biomarker, header: Optional[Sequence[str]], tables: BiomarkerTables
) -> Tuple[str, ...]:
    if header:
        return tuple(str(column) for column in header)
    import_format = tables.import_format(biomarker.id, biomarker)
    if import_format is None:
        raise ImportRowError(f"No import format declared for biomarker '{biomarker.id}'")
    if import_format.is_open_ended:
        raise ImportRowError(f"Biomarker '{biomarker.id}' needs a header row to import")
    return import_format.columns


def parse_import_row(
    biomarker: Biomarker,
    row: Sequence[Any],
    header: Optional[Sequence[str]] = None,
    tables: Optional[BiomarkerTables] = None,
) -> List[Reading]:
    """Shape one raw row into readings; the first cell is always the timestamp."""
    tables = tables or load_biomarker_tables()
    columns = _columns_for(biomarker, header, tables)
    if len(row) != len(columns):
        raise ImportRowError(
            f"Row for '{biomarker.id}' has {len(row)} cells, expected {len(columns)}"
        )

    timestamp = str(row[0]).strip() if row[0] is not None else ""
    if not timestamp:
        raise ImportRowError(f"Row for '{biomarker.id}' has no timestamp")

    kind = tables.kind_of(biomarker.id)
    cells = list(zip(columns[1:], row[1:]))

    if isinstance(kind, Scalar):
        if len(cells) != 1:
            raise ImportRowError(f"Biomarker '{biomarker.id}' takes a single value column")
        column, cell = cells[0]
        _, unit = ImportFormat.parse_label(column)
        return [
            Reading(
                biomarker_id=biomarker.id,
                timestamp=timestamp,
                value=parse_numeric(cell, record_id=biomarker.id, field_name=column),
                unit=unit or biomarker.default_unit_id,
            )
        ]

    if isinstance(kind, MultiValue):
        if len(cells) != kind.count:
            raise ImportRowError(f"Biomarker '{biomarker.id}' takes {kind.count} value columns")
        values = tuple(parse_numeric(cell, record_id=biomarker.id, field_name=column) for column, cell in cells)
        units = tuple(ImportFormat.parse_label(column)[1] or kind.units[i] for i, (column, _) in enumerate(cells))
        return [Reading(biomarker_id=biomarker.id, timestamp=timestamp, values=values, units=units)]

    if isinstance(kind, Panel):
        readings = []
        for column, cell in cells:
            if not is_present(cell):
                continue
            code, unit = ImportFormat.parse_label(column)
            readings.append(
                Reading(
                    biomarker_id=biomarker.id,
                    timestamp=timestamp,
                    code=code,
                    value=parse_numeric(cell, record_id=biomarker.id, field_name=column),
                    unit=unit or "",
                )
            )
        return readings

    if isinstance(kind, ParameterObject):
        parameters = {}
        for column, cell in cells:
            key = _parameter_key(column)
            if key not in kind.schema:
                raise ImportRowError(f"Biomarker '{biomarker.id}' has no parameter '{key}'")
            if is_present(cell):
                parameters[key] = str(cell).strip()
        return [Reading(biomarker_id=biomarker.id, timestamp=timestamp, parameters=parameters)]

    raise ImportRowError(f"Unsupported biomarker kind {kind!r}")
