import json
import math

from finance_tracker.app import _sanitize_records
from finance_tracker.engine.storage import _sanitize_json_compat, load_record, load_records, save_records


def test_sanitize_json_compat_replaces_special_numbers():
    payload = {
        "float": math.nan,
        "list": [1, float("inf"), -float("inf")],
        "nested": {"value": math.nan},
    }

    clean = _sanitize_json_compat(payload)

    assert clean == {
        "float": None,
        "list": [1, None, None],
        "nested": {"value": None},
    }


def test_save_records_persists_sanitized_values(tmp_path):
    path = tmp_path / "debts.json"
    data = [{"id": "d1", "totalAmount": math.nan, "payments": [1, float("inf")]}]

    save_records(str(path), data)

    with path.open("r", encoding="utf-8") as handle:
        stored = json.load(handle)

    assert stored == [{"id": "d1", "totalAmount": None, "payments": [1, None]}]
    assert not (tmp_path / "debts.json.tmp").exists()


def test_save_records_creates_missing_folder(tmp_path):
    path = tmp_path / "nested" / "goals.json"

    save_records(str(path), [{"id": "g1"}])

    assert load_records(str(path)) == [{"id": "g1"}]


def test_load_records_tolerates_missing_empty_and_corrupt_files(tmp_path):
    empty = tmp_path / "empty.json"
    empty.write_text("   ", encoding="utf-8")
    corrupt = tmp_path / "corrupt.json"
    corrupt.write_text("{not json", encoding="utf-8")
    mixed = tmp_path / "mixed.json"
    mixed.write_text(json.dumps([{"id": "a"}, 3, "x"]), encoding="utf-8")

    assert load_records(str(tmp_path / "missing.json")) == []
    assert load_records(str(empty)) == []
    assert load_records(str(corrupt)) == []
    assert load_records(str(mixed)) == [{"id": "a"}]
    assert load_record(str(mixed)) is None


def test_sanitize_records_used_for_api_payloads():
    rows = [{"value": float("nan"), "other": 5}]

    clean = _sanitize_records(rows)

    assert clean == [{"value": None, "other": 5}]
