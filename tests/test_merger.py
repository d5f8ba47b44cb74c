import json

from biomarker_catalog.reference_ranges.merger import (
    collation_key,
    export,
    export_json,
    load_json,
    merge,
    merge_records,
)
from biomarker_catalog.schemas.biomarker import Biomarker


def _b(**fields):
    fields.setdefault("name", fields["id"].title())
    return Biomarker(**fields)


def test_merge_with_empty_batch_returns_equal_catalog():
    catalog = merge([_b(id="zinc"), _b(id="iron")])

    assert merge([], base=catalog) == catalog


def test_later_fields_override_and_absent_fields_survive():
    r1 = _b(id="x", name="Old name", description="Kept description", category="laboratory")
    r2 = _b(id="x", name="New name")
    merged = merge([r1, r2])["x"]

    assert merged.name == "New name"
    assert merged.description == "Kept description"
    assert merged.category == "laboratory"


def test_merge_is_shallow_for_ranges():
    r1 = _b(id="x", ranges={"male": {"norm": {"100": [0] * 8}}})
    r2 = _b(id="x", ranges={"female": {"norm": {"100": [1] * 8}}})
    merged = merge_records(r1, r2)

    assert merged.ranges.male is None
    assert merged.ranges.female is not None


def test_merge_does_not_mutate_base():
    base = merge([_b(id="x", name="Before")])
    updated = merge([_b(id="x", name="After"), _b(id="y")], base=base)

    assert base["x"].name == "Before"
    assert "y" not in base
    assert updated["x"].name == "After"


def test_export_orders_records_by_id_and_keys_alphabetically():
    catalog = merge([_b(id="zinc"), _b(id="alanine"), _b(id="blood_pressure", default_unit_id="mm[Hg]")])
    records = export(catalog)

    assert [r["id"] for r in records] == ["alanine", "blood_pressure", "zinc"]
    assert list(records[1]) == ["default_unit_id", "id", "name"]


def test_collation_is_case_insensitive_with_lowercase_first():
    ids = ["Zinc", "apple", "Apple", "b12", "b_1", "beta"]

    assert sorted(ids, key=collation_key) == ["apple", "Apple", "b_1", "b12", "beta", "Zinc"]


def test_collation_ranks_punctuation_like_root_locale():
    ids = ["a.b", "a-b", "a_b", "a b", "a1", "ab"]

    assert sorted(ids, key=collation_key) == ["a b", "a_b", "a-b", "a.b", "a1", "ab"]


def test_export_json_is_deterministic_utf8():
    catalog = merge([
        _b(id="vitamin_b12", name="Vitamin B₁₂", synonyms=["Cobalamin"]),
        _b(id="calcium", default_value=2.4),
    ])
    first = export_json(catalog)
    second = export_json(catalog)

    assert first == second
    assert first.endswith(b"\n")
    assert "B₁₂" in first.decode("utf-8")
    assert [r["id"] for r in json.loads(first)] == ["calcium", "vitamin_b12"]


def test_export_keeps_range_ages_in_numeric_order():
    catalog = merge([_b(id="x", ranges={"diverse": {"norm": {"100": [0] * 8, "20": [0] * 8}}})])
    record = export(catalog)[0]

    assert list(record["ranges"]["diverse"]["norm"]) == ["20", "100"]


def test_load_json_accepts_list_or_records_wrapper():
    assert load_json(b'[{"id": "a"}]') == [{"id": "a"}]
    assert load_json('{"records": [{"id": "b"}]}') == [{"id": "b"}]
    assert load_json('{"id": "c"}') == [{"id": "c"}]
