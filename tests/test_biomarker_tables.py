import pytest

from biomarker_catalog.schemas.biomarker import Biomarker
from biomarker_catalog.schemas.kinds import MultiValue, Panel, ParameterObject, Scalar


def test_membership_tests(tables):
    assert tables.is_special("blood_pressure")
    assert tables.is_special("tag")
    assert tables.is_special("sleep_episode")
    assert not tables.is_special("zinc")

    assert tables.is_laboratory("blood_analysis")
    assert tables.is_laboratory("specimen_analysis")
    assert not tables.is_laboratory("blood_pressure")

    assert tables.is_custom("custom_rating_5")
    assert not tables.is_custom("tag")


def test_tables_are_read_only(tables):
    with pytest.raises(TypeError):
        tables.categories["new"] = "New"
    with pytest.raises(AttributeError):
        tables.custom_ids.add("custom_other")


def test_value_types_and_categories(tables):
    assert set(tables.value_types) == {"bool", "int", "float", "rating_5", "rating_10", "percentage"}
    assert tables.categories["laboratory"] == "Laboratory test"
    assert tables.is_category("")


@pytest.mark.parametrize(
    "biomarker_id, expected",
    [
        ("zinc", Scalar()),
        ("custom_float", Scalar()),
        ("blood_pressure", MultiValue(count=2, units=("mm[Hg]", "mm[Hg]"))),
        ("urine_analysis", Panel(specimen="urine")),
        ("tag", ParameterObject(schema=("tag",))),
        ("sleep_episode", ParameterObject(schema=("start", "end"))),
    ],
)
def test_kind_of(tables, biomarker_id, expected):
    assert tables.kind_of(biomarker_id) == expected


def test_medication_parameters_follow_input_settings(tables):
    kind = tables.kind_of("medication_prescription")

    assert isinstance(kind, ParameterObject)
    assert "rxnorm_code" in kind.schema
    assert "trade_name" in kind.schema
    assert "strength" not in kind.schema


def test_import_formats(tables):
    assert tables.import_format("blood_pressure").columns[0] == "timestamp"
    assert tables.import_format("tag").columns == ("date", "Tag [tag]")
    assert tables.import_format("medication_prescription") is None

    zinc = Biomarker(id="zinc", name="Zinc", default_unit_id="ug/dL")
    assert tables.import_format("zinc", zinc).columns == ("timestamp", "Zinc [ug/dL]")


def test_builtin_biomarkers(tables):
    ids = {b.id for b in tables.builtin_biomarkers()}

    assert {"tag", "blood_pressure", "blood_analysis", "custom_bool", "nutrition"} <= ids
    assert "specimen_analysis" not in ids
