import pytest

from biomarker_catalog.configurations.biomarker_tables import load_biomarker_tables
from biomarker_catalog.core.config import Settings


GLUCOSE_8 = [0, 60, 60, 80, 160, 170, 200, 300]


@pytest.fixture
def tables():
    return load_biomarker_tables()


@pytest.fixture
def test_settings():
    return Settings(_env_file=None, EXPORT_SOURCE_NAME="TestSource", LOG_LEVEL="debug")


@pytest.fixture
def glucose_ranges():
    return {
        "male": {"norm": {"20": GLUCOSE_8, "100": [0, 65, 70, 85, 150, 165, 210, 320]}},
        "female": {
            "norm": {"100": GLUCOSE_8},
            "ethnicity": {"east_asian": {"100": [0, 55, 58, 75, 140, 160, 190, 280]}},
        },
        "diverse": {"norm": {"100": GLUCOSE_8}},
    }


@pytest.fixture
def raw_zinc():
    return {
        "id": "zinc",
        "name": "Zinc",
        "default_unit_id": "ug/dL",
        "category": "laboratory",
        "ref_loinc_id": "5763-8",
        "synonyms": ["Zn", "Serum zinc"],
        "value_type": "float",
        "default_value": "85.5",
        "description": "Zinc in serum or plasma",
        "references": ["https://loinc.org/5763-8"],
    }
