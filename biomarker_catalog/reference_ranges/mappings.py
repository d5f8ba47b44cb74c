"""Field mappings between import records and canonical biomarkers.

Import sources still use the legacy spreadsheet column names; these tables
centralize the renames so the normalizer does not hard-code them.
"""

# legacy column -> canonical field
LEGACY_FIELD_NAMES = {
    "loinc": "ref_loinc_id",
    "aliases": "synonyms",
    "name_short": "abbreviated_name",
    "unit": "default_unit_id",
}

CANONICAL_TO_LEGACY = {canonical: legacy for legacy, canonical in LEGACY_FIELD_NAMES.items()}

REQUIRED_FIELDS = ("id", "name")

TEXT_FIELDS = (
    "slug",
    "ref_loinc_id",
    "category",
    "type",
    "subtype",
    "classification",
    "abbreviated_name",
    "description",
)

LIST_FIELDS = ("synonyms", "references", "tags", "ranges_references")

RANGE_FIELDS = ("ranges", "ranges_z_score")
