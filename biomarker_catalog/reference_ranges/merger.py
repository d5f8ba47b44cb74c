"""
Catalog merging and export
Folds canonical records into an id-keyed catalog and writes the interchange
JSON document (keys sorted per record, records sorted by id).
"""
import json
import logging
import unicodedata
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from biomarker_catalog.schemas.biomarker import Biomarker

logger = logging.getLogger(__name__)

Catalog = Dict[str, Biomarker]


def merge_records(earlier: Biomarker, later: Biomarker) -> Biomarker:
    """Shallow field-wise union; fields present on `later` win."""
    return earlier.model_copy(update=later.present_fields())


def merge(records: Iterable[Biomarker], base: Optional[Mapping[str, Biomarker]] = None) -> Catalog:
    """Fold records left to right into a new catalog.

    `base` is never mutated; merging an empty batch returns an equal catalog.
    """
    catalog: Catalog = dict(base or {})
    overridden = 0
    for record in records:
        existing = catalog.get(record.id)
        if existing is None:
            catalog[record.id] = record
        else:
            catalog[record.id] = merge_records(existing, record)
            overridden += 1
    if overridden:
        logger.debug(f"Merged {overridden} records into existing biomarker ids")
    return catalog


# Root-locale order of ASCII punctuation and symbols; anything else follows
# by code point.
PUNCTUATION_ORDER = " _-,;:!?.'\"()[]{}@*/\\&#%`^+<=>|~$"
PUNCTUATION_RANK = {char: rank for rank, char in enumerate(PUNCTUATION_ORDER)}


def _char_class(char: str) -> int:
    category = unicodedata.category(char)
    if category.startswith("L"):
        return 2
    if category.startswith("N"):
        return 1
    return 0


def _char_key(char: str) -> Tuple[int, int, str]:
    char_class = _char_class(char)
    if char_class == 0:
        return char_class, PUNCTUATION_RANK.get(char, len(PUNCTUATION_RANK)), char
    return char_class, 0, char


def collation_key(value: str) -> Tuple:
    """Locale-style sort key for biomarker ids.

    Punctuation sorts before digits, digits before letters; letters compare
    case-insensitively first, lowercase before uppercase on ties, and the raw
    string breaks any remaining tie so the order is total.
    """
    folded = unicodedata.normalize("NFKD", value).casefold()
    primary = tuple(_char_key(c) for c in folded if not unicodedata.combining(c))
    return primary, value.swapcase(), value


def sorted_record(biomarker: Biomarker) -> Dict[str, Any]:
    record = biomarker.to_record()
    return {key: record[key] for key in sorted(record)}


def export(catalog: Mapping[str, Biomarker]) -> List[Dict[str, Any]]:
    """Records with alphabetically ordered keys, ordered by id."""
    ordered_ids = sorted(catalog, key=collation_key)
    return [sorted_record(catalog[biomarker_id]) for biomarker_id in ordered_ids]


def export_json(catalog: Mapping[str, Biomarker], indent: Optional[int] = 2) -> bytes:
    document = json.dumps(export(catalog), ensure_ascii=False, indent=indent)
    return (document + "\n").encode("utf-8")


def load_json(data: Any) -> List[Dict[str, Any]]:
    """Parse an interchange document (bytes or str) into raw records."""
    if isinstance(data, (bytes, bytearray)):
        data = data.decode("utf-8")
    parsed = json.loads(data)
    if isinstance(parsed, dict) and "records" in parsed:
        parsed = parsed["records"]
    if not isinstance(parsed, list):
        parsed = [parsed]
    return parsed
