from __future__ import annotations

import logging
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional

from biomarker_catalog.configurations.biomarker_tables import BiomarkerTables, load_biomarker_tables
from biomarker_catalog.core.config import Settings, settings as default_settings
from biomarker_catalog.reference_ranges.exceptions import (
    BiomarkerNotFoundError,
    CatalogError,
    DuplicateBiomarkerError,
)
from biomarker_catalog.reference_ranges.merger import collation_key, export, export_json, merge
from biomarker_catalog.reference_ranges.normalizer import NormalizationReport, normalize, normalize_batch
from biomarker_catalog.reference_ranges.resolver import ZoneResolution, resolve_biomarker
from biomarker_catalog.schemas.biomarker import Biomarker
from biomarker_catalog.schemas.ranges import DemographicContext

logger = logging.getLogger(__name__)


class BiomarkerCatalog:
    """Owns the published catalog (id -> Biomarker).

    Every change builds a new mapping and publishes it in one step, so a
    reader holding `catalog` never sees a half-applied merge. Callers
    serialize concurrent writers.
    """

    def __init__(
        self,
        tables: Optional[BiomarkerTables] = None,
        records: Optional[Iterable[Biomarker]] = None,
        settings: Optional[Settings] = None,
    ):
        self.tables = tables or load_biomarker_tables()
        self.settings = settings or default_settings
        self._catalog: Mapping[str, Biomarker] = MappingProxyType(merge(records or []))

    @property
    def catalog(self) -> Mapping[str, Biomarker]:
        return self._catalog

    def _publish(self, catalog: Dict[str, Biomarker]) -> None:
        self._catalog = MappingProxyType(catalog)

    # Import
    def ingest(self, rows: Iterable[Any], skip_invalid: Optional[bool] = None) -> NormalizationReport:
        if skip_invalid is None:
            skip_invalid = self.settings.SKIP_INVALID_RECORDS
        report = normalize_batch(rows, self.tables, skip_invalid=skip_invalid)
        self._publish(merge(report.records, base=self._catalog))
        logger.info(f"Catalog holds {len(self._catalog)} biomarkers after ingest")
        return report

    def include_builtins(self) -> None:
        self._publish(merge(self.tables.builtin_biomarkers(), base=self._catalog))

    # Lookup
    def get(self, biomarker_id: str) -> Optional[Biomarker]:
        return self._catalog.get(biomarker_id)

    def ids(self) -> List[str]:
        return sorted(self._catalog, key=collation_key)

    def __len__(self) -> int:
        return len(self._catalog)

    def __contains__(self, biomarker_id: object) -> bool:
        return biomarker_id in self._catalog

    def search(self, query: str = "", category: Optional[str] = None) -> List[Biomarker]:
        """Case-insensitive match on name or category, optionally one category only."""
        needle = (query or "").strip().lower()
        results = []
        for biomarker_id in self.ids():
            biomarker = self._catalog[biomarker_id]
            if needle and not (
                needle in biomarker.name.lower() or needle in (biomarker.category or "").lower()
            ):
                continue
            if category and biomarker.category != category:
                continue
            results.append(biomarker)
        return results

    # Editing
    def save(self, raw: Any, editing_id: Optional[str] = None, save_as_new: bool = False) -> Biomarker:
        """Create or update one biomarker from a form-like record.

        Creating an id that already exists is refused unless saving as new;
        ids of existing biomarkers never change.
        """
        record = normalize(raw, self.tables)

        if editing_id is None and not save_as_new and record.id in self._catalog:
            raise DuplicateBiomarkerError(f"Reference with ID '{record.id}' exists already")
        if editing_id is not None:
            if editing_id not in self._catalog:
                raise BiomarkerNotFoundError(f"Reference with ID '{editing_id}' does not exist")
            if record.id != editing_id and not save_as_new:
                raise CatalogError(f"Reference ID '{editing_id}' cannot be changed to '{record.id}'")

        self._publish(merge([record], base=self._catalog))
        logger.info(f"Saved biomarker '{record.id}'")
        return self._catalog[record.id]

    def flat_row(self, biomarker_id: str) -> Dict[str, Any]:
        """Record fields merged with the built-in input settings, for list views."""
        biomarker = self._require(biomarker_id)
        row = biomarker.to_record()
        input_settings = self.tables.input_settings(biomarker_id)
        if input_settings:
            row.update(input_settings.model_dump(exclude_none=True, by_alias=True))
        return row

    # Export
    def export(self) -> List[Dict[str, Any]]:
        return export(self._catalog)

    def export_json(self) -> bytes:
        return export_json(self._catalog, indent=self.settings.EXPORT_INDENT)

    def export_file_name(self, now: Optional[datetime] = None) -> str:
        now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
        stamp = now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"
        return f"{self.settings.EXPORT_SOURCE_NAME}_Biomarkers_Reference_Export_{stamp}.json"

    # Classification
    def classify(
        self,
        biomarker_id: str,
        age: float,
        value: float,
        context: Optional[DemographicContext] = None,
        z_score: bool = False,
    ) -> ZoneResolution:
        biomarker = self._require(biomarker_id)
        context = context or DemographicContext(axis=self.settings.DEFAULT_AXIS)
        return resolve_biomarker(biomarker, context, age, value, z_score=z_score)

    def _require(self, biomarker_id: str) -> Biomarker:
        biomarker = self._catalog.get(biomarker_id)
        if biomarker is None:
            raise BiomarkerNotFoundError(f"Reference with ID '{biomarker_id}' does not exist")
        return biomarker
