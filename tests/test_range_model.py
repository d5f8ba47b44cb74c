import pytest
from pydantic import ValidationError

from biomarker_catalog.schemas.biomarker import ImportFormat
from biomarker_catalog.schemas.ranges import Axis, RangeSet, RangeSpecification


def test_range_list_keys_are_coerced_and_ordered_by_age():
    spec = RangeSpecification(norm={100: [0, 1, 2, 3, 4, 5, 6, 7], "20": [0, 1, 2, 3, 4, 5, 6, 7], "5": [0] * 8})

    assert list(spec.norm) == ["5", "20", "100"]
    assert spec.norm["20"] == [0.0, 1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0]


@pytest.mark.parametrize(
    "range_list",
    [
        {"20": [0, 1, 2]},                              # wrong length
        {"20": [0, 1, 2, 3, 4, 5, 6, 7, 8, 9]},         # neither 8 nor 14
        {"20": [0, 60, 50, 80, 160, 170, 200, 300]},    # decreasing
        {"adult": [0, 1, 2, 3, 4, 5, 6, 7]},            # non-integer age
        {"20": [0, 1, 2, "x", 4, 5, 6, 7]},             # non-numeric boundary
    ],
)
def test_invalid_range_lists_are_rejected(range_list):
    with pytest.raises(ValidationError):
        RangeSpecification(norm=range_list)


def test_fourteen_element_arrays_are_accepted():
    spec = RangeSpecification(norm={"100": list(range(14))})
    assert len(spec.norm["100"]) == 14


def test_stratum_lookup_and_usability():
    spec = RangeSpecification(ethnicity={"east_asian": {"100": [0] * 8}})

    assert spec.is_usable
    assert spec.stratum("ethnicity", "east_asian") == {"100": [0.0] * 8}
    assert spec.stratum("ethnicity", "nordic") is None
    assert spec.stratum("bmi", "east_asian") is None
    assert not RangeSpecification().is_usable


def test_range_set_rejects_unknown_axis():
    with pytest.raises(ValidationError):
        RangeSet.model_validate({"teenager": {"norm": {"20": [0] * 8}}})


def test_range_set_axes(glucose_ranges):
    ranges = RangeSet.model_validate(glucose_ranges)

    assert ranges.axes() == [Axis.MALE, Axis.FEMALE, Axis.DIVERSE]
    assert ranges.for_axis("female") is ranges.female
    assert ranges.for_axis(Axis.PREGNANT) is None


def test_import_format_requires_timestamp_first():
    with pytest.raises(ValidationError):
        ImportFormat(name="bad", columns=["Systolic [mm[Hg]]", "timestamp"])


def test_import_format_label_parsing():
    assert ImportFormat.parse_label("Systolic Blood Pressure [mm[Hg]]") == ("Systolic Blood Pressure", "mm[Hg]")
    assert ImportFormat.parse_label("4548-4 [%]") == ("4548-4", "%")
    assert ImportFormat.parse_label("Mood") == ("Mood", None)


def test_open_ended_import_format():
    fmt = ImportFormat(name="blood_analysis", columns=["timestamp", "LOINC Code 1 [UCUM Unit]", " ... "])

    assert fmt.is_open_ended
    assert fmt.value_columns == ("LOINC Code 1 [UCUM Unit]",)
