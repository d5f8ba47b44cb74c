#!/usr/bin/env python3
"""
Biomarker Tables
Categories, value types and the built-in biomarkers whose readings do not
follow the plain value/unit shape (tags, blood pressure, laboratory panels,
medication, supplementation, nutrition, sleep episodes).

The tables are loaded once into an immutable BiomarkerTables value and
passed to the components that need them.
"""

from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import FrozenSet, List, Mapping, Optional, Tuple

from biomarker_catalog.schemas.biomarker import (
    Biomarker,
    BiomarkerInputSettings,
    BiomarkerSettings,
    ImportFormat,
)
from biomarker_catalog.schemas.kinds import (
    BiomarkerKind,
    MultiValue,
    Panel,
    ParameterObject,
    Scalar,
)


BIOMARKER_CATEGORIES = (
    ("", ""),
    ("nutrition", "Nutrition"),
    ("sleep", "Sleep"),
    ("activity", "Physical activity"),
    ("vital", "Vital"),
    ("biometric", "Biometric"),
    ("functional", "Functional test"),
    ("laboratory", "Laboratory test"),     # blood, saliva, urine, feces; LOINC lab order codes
    ("observation", "Observation"),        # symptom or finding, LOINC Core
    ("reproduction", "Reproductional health"),
    ("intervention", "Intervention"),
    ("environment", "Environment"),
    ("digital", "Digital Biomarker"),
    ("event", "Life event"),
    ("custom", "Custom Items"),
)

BIOMARKER_VALUE_TYPES = (
    ("int", "Integer"),
    ("bool", "Boolean"),
    ("float", "Float"),
    ("rating_5", "Rating (1-5)"),
    ("rating_10", "Rating (1-10)"),
    ("percentage", "Percentage (%)"),
)

BIOMARKER_CUSTOM_IDS = (
    "custom_bool", "custom_int", "custom_rating_5", "custom_rating_10", "custom_float", "custom_percentage",
)

BIOMARKER_LABORATORY_IDS = (
    "specimen_analysis", "blood_analysis", "urine_analysis", "saliva_analysis", "stool_analysis",
)

# Biomarkers recorded with a parameter object
BIOMARKER_PARAMETER_IDS = (
    "sleep_episode",
    "medication_prescription",
    "supplementation",
    "nutrition",
)

# Biomarkers without a single value/unit reading
BIOMARKER_SPECIAL_IDS = ("tag", "blood_pressure") + BIOMARKER_PARAMETER_IDS

# Column order of the legacy spreadsheet import
BIOMARKER_REQUIRED_IMPORT_FORMAT = (
    "category", "id", "loinc", "type", "subtype", "classification", "name_short", "name",
    "unit", "value_type", "default_value", "description", "references", "aliases",
)

# Values rendered as dates rather than numbers
BIOMARKERS_WITH_DATE_VALUES = ("sleep_bedtime_start", "sleep_bedtime_end")

# Parameters that are not switched on through input settings flags
_FIXED_PARAMETER_SCHEMAS = {
    "tag": ("tag",),
    "sleep_episode": ("start", "end"),
    "nutrition": ("meal",),
}

_LAB_IMPORT_COLUMNS = [
    "timestamp", "LOINC Code 1 [UCUM Unit]", "LOINC Code 2 [UCUM Unit]", "LOINC Code 3 [UCUM Unit]", " ... ",
]


def _settings(
    id: str,
    category: str,
    name: str,
    default_unit_id: str,
    value_type: str,
    input_settings: Optional[dict] = None,
    import_format: Optional[List[str]] = None,
) -> BiomarkerSettings:
    return BiomarkerSettings(
        biomarker=Biomarker(
            id=id,
            category=category,
            name=name,
            default_unit_id=default_unit_id,
            value_type=value_type,
        ),
        input_settings=BiomarkerInputSettings(**input_settings) if input_settings else None,
        import_format=ImportFormat(name=id, columns=import_format) if import_format else None,
    )


def _builtin_settings() -> List[BiomarkerSettings]:
    return [
        #### CUSTOM ####
        _settings("custom_bool", "custom", "Custom Event", "{bool}", "bool"),
        _settings("custom_rating_5", "custom", "Custom Rating (1-5)", "{rating_5}", "rating_5"),
        _settings("custom_rating_10", "custom", "Custom Rating (1-10)", "{rating_10}", "rating_10"),
        _settings("custom_int", "custom", "Custom Number", "{count}", "int"),
        _settings("custom_float", "custom", "Custom Number with Decimals", "{#}", "float"),
        _settings("custom_percentage", "custom", "Custom Percentage", "%", "percentage"),
        #### LABORATORY ####
        _settings("blood_analysis", "laboratory", "Blood Analysis", "", "int", import_format=_LAB_IMPORT_COLUMNS),
        _settings("urine_analysis", "laboratory", "Urine Analysis", "", "int", import_format=_LAB_IMPORT_COLUMNS),
        _settings("saliva_analysis", "laboratory", "Saliva Analysis", "", "int", import_format=_LAB_IMPORT_COLUMNS),
        _settings("stool_analysis", "laboratory", "Stool Analysis", "", "int", import_format=_LAB_IMPORT_COLUMNS),
        #### VITAL ####
        _settings(
            "blood_pressure", "vital", "Blood Pressure", "mm[Hg]", "int",
            input_settings={"value_2": True, "unit_2": "mm[Hg]"},
            import_format=["timestamp", "Systolic Blood Pressure [mm[Hg]]", "Diastolic Blood Pressure [mm[Hg]]"],
        ),
        #### INTERVENTION ####
        _settings(
            "medication_prescription", "intervention", "Medication", "", "int",
            input_settings={
                "hideMethod": True,
                "description": True,
                "route": True,
                "prescription_trigger": True,
                "schedule": True,
                "generic_name": True,
                "trade_name": True,
                "strength_unit": True,
                "rxnorm_code": True,
            },
        ),
        _settings(
            "supplementation", "intervention", "Supplementation", "", "int",
            input_settings={
                "hideMethod": True,
                "description": True,
                "schedule": True,
                "generic_name": True,
                "strength_unit": True,
            },
        ),
        #### NUTRITION ####
        _settings(
            "nutrition", "nutrition", "Meal", "", "int",
            input_settings={"hideMethod": True, "hideValue": True},
        ),
        #### SLEEP ####
        _settings(
            "sleep_episode", "sleep", "Sleep Episode", "", "int",
            input_settings={"time_interval": True, "hideValue": True},
        ),
        #### LIFE EVENTS ####
        _settings(
            "tag", "event", "Tag", "{TmStp}", "int",
            input_settings={"hideMethod": True, "hideValue": True},
            import_format=["date", "Tag [tag]"],
        ),
    ]


@dataclass(frozen=True)
class BiomarkerTables:
    categories: Mapping[str, str]
    value_types: Mapping[str, str]
    custom_ids: FrozenSet[str]
    laboratory_ids: FrozenSet[str]
    special_ids: FrozenSet[str]
    parameter_ids: FrozenSet[str]
    settings: Mapping[str, BiomarkerSettings]

    def is_custom(self, biomarker_id: str) -> bool:
        return biomarker_id in self.custom_ids

    def is_laboratory(self, biomarker_id: str) -> bool:
        return biomarker_id in self.laboratory_ids

    def is_special(self, biomarker_id: str) -> bool:
        return biomarker_id in self.special_ids

    def is_category(self, category: str) -> bool:
        return category in self.categories

    def is_value_type(self, value_type: str) -> bool:
        return value_type in self.value_types

    def input_settings(self, biomarker_id: str) -> Optional[BiomarkerInputSettings]:
        entry = self.settings.get(biomarker_id)
        return entry.input_settings if entry else None

    def kind_of(self, biomarker_id: str) -> BiomarkerKind:
        if self.is_laboratory(biomarker_id):
            return Panel(specimen=biomarker_id.replace("_analysis", ""))

        input_settings = self.input_settings(biomarker_id)
        if biomarker_id in self.parameter_ids or biomarker_id in _FIXED_PARAMETER_SCHEMAS:
            schema = _FIXED_PARAMETER_SCHEMAS.get(biomarker_id, ())
            if input_settings:
                schema = schema + input_settings.parameter_fields()
            return ParameterObject(schema=schema)

        if input_settings and input_settings.value_2:
            entry = self.settings[biomarker_id]
            units = (entry.biomarker.default_unit_id, input_settings.unit_2 or entry.biomarker.default_unit_id)
            return MultiValue(count=2, units=units)

        return Scalar()

    def import_format(self, biomarker_id: str, biomarker: Optional[Biomarker] = None) -> Optional[ImportFormat]:
        """Declared import format, or the one-column default for scalar biomarkers."""
        entry = self.settings.get(biomarker_id)
        if entry and entry.import_format:
            return entry.import_format
        if biomarker is not None and isinstance(self.kind_of(biomarker_id), Scalar):
            column = f"{biomarker.name} [{biomarker.default_unit_id}]" if biomarker.default_unit_id else biomarker.name
            return ImportFormat(name=biomarker_id, columns=("timestamp", column))
        return None

    def builtin_biomarkers(self) -> Tuple[Biomarker, ...]:
        return tuple(entry.biomarker for entry in self.settings.values())


@lru_cache(maxsize=None)
def load_biomarker_tables() -> BiomarkerTables:
    return BiomarkerTables(
        categories=MappingProxyType(dict(BIOMARKER_CATEGORIES)),
        value_types=MappingProxyType(dict(BIOMARKER_VALUE_TYPES)),
        custom_ids=frozenset(BIOMARKER_CUSTOM_IDS),
        laboratory_ids=frozenset(BIOMARKER_LABORATORY_IDS),
        special_ids=frozenset(BIOMARKER_SPECIAL_IDS),
        parameter_ids=frozenset(BIOMARKER_PARAMETER_IDS),
        settings=MappingProxyType({entry.biomarker.id: entry for entry in _builtin_settings()}),
    )


__all__ = [
    "BIOMARKER_CATEGORIES",
    "BIOMARKER_VALUE_TYPES",
    "BIOMARKER_CUSTOM_IDS",
    "BIOMARKER_LABORATORY_IDS",
    "BIOMARKER_PARAMETER_IDS",
    "BIOMARKER_SPECIAL_IDS",
    "BIOMARKER_REQUIRED_IMPORT_FORMAT",
    "BIOMARKERS_WITH_DATE_VALUES",
    "BiomarkerTables",
    "load_biomarker_tables",
]
