"""Reference range package.

This module contains:
- A normalizer turning import records into canonical biomarkers
- A merger folding duplicate ids and writing the interchange JSON
- A small, explicit engine for age brackets and zone boundaries
- A resolver picking the range for a demographic context
"""

from .exceptions import (
    CatalogError,
    NormalizationError,
    MissingRequiredField,
    MalformedNumericField,
    InvalidEnumeratedField,
    MalformedRangeField,
    ImportRowError,
    DuplicateBiomarkerError,
    BiomarkerNotFoundError,
)
from .normalizer import normalize, normalize_batch, NormalizationReport, RecordBuilder
from .merger import merge, export, export_json, load_json
from .resolver import resolve, resolve_detail, resolve_biomarker, ZoneResolution
