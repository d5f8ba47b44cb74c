import importlib.util
import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from biomarker_catalog.core.config import Settings
from biomarker_catalog.schemas.ranges import Axis


SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "export_catalog.py"


def _load_script():
    spec = importlib.util.spec_from_file_location("export_catalog", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_settings_defaults_and_validation():
    settings = Settings(_env_file=None, LOG_LEVEL="warning", DEFAULT_AXIS="female")

    assert settings.LOG_LEVEL == "WARNING"
    assert settings.DEFAULT_AXIS is Axis.FEMALE
    assert settings.EXPORT_SOURCE_NAME == "OpenCures"
    assert settings.is_development

    with pytest.raises(ValidationError):
        Settings(_env_file=None, LOG_LEVEL="chatty")
    with pytest.raises(ValidationError):
        Settings(_env_file=None, EXPORT_INDENT=-1)


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("EXPORT_SOURCE_NAME", "Lab42")
    monkeypatch.setenv("SKIP_INVALID_RECORDS", "false")

    settings = Settings(_env_file=None)
    assert settings.EXPORT_SOURCE_NAME == "Lab42"
    assert settings.SKIP_INVALID_RECORDS is False


def test_export_script_merges_files_in_order(tmp_path, test_settings):
    first = tmp_path / "first.json"
    second = tmp_path / "second.json"
    output = tmp_path / "out.json"
    first.write_text(json.dumps([{"id": "zinc", "name": "Zinc", "description": "Serum zinc"}]), encoding="utf-8")
    second.write_text(json.dumps({"records": [{"id": "zinc", "name": "Zinc (Zn)"}, {"name": "no id"}]}), encoding="utf-8")

    script = _load_script()
    catalog = script.export_catalog([first, second], output, include_builtins=False, settings=test_settings)

    records = json.loads(output.read_bytes())
    assert records == [{"default_unit_id": "", "description": "Serum zinc", "id": "zinc", "name": "Zinc (Zn)"}]
    assert len(catalog) == 1


def test_export_script_strict_mode_fails(tmp_path, monkeypatch):
    source = tmp_path / "bad.json"
    source.write_text(json.dumps([{"name": "no id"}]), encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    script = _load_script()
    monkeypatch.setattr(script, "configure_logging", lambda *args, **kwargs: None)
    assert script.main([str(source), "--no-builtins", "--strict", "--output", str(tmp_path / "out.json")]) == 1
    assert script.main([str(source), "--no-builtins", "--output", str(tmp_path / "out.json")]) == 0
    assert json.loads((tmp_path / "out.json").read_bytes()) == []
