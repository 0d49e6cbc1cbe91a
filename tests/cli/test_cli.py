"""Tests for the widgy CLI."""

import json

import pytest

import widgy.generator
from widgy.__main__ import main, render_to_text
from widgy.generator import GenerationBackend, WidgetGenerator
from widgy.samples import WEATHER_WIDGET
from widgy.schema import decode_config, dumps_config


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "weather.json"
    path.write_text(dumps_config(WEATHER_WIDGET), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def isolated_store(monkeypatch, tmp_path):
    monkeypatch.setenv("WIDGY_STORE_DIR", str(tmp_path / "store"))
    return tmp_path / "store"


class CannedBackend(GenerationBackend):
    def __init__(self, text: str):
        self.text = text

    @property
    def name(self) -> str:
        return "canned"

    async def stream(self, request):
        yield self.text


@pytest.mark.unit
def test_no_command_shows_help(capsys):
    assert main([]) == 1
    assert "Usage: widgy" in capsys.readouterr().out


@pytest.mark.unit
def test_unknown_command(capsys):
    assert main(["frobnicate"]) == 1
    assert "Commands:" in capsys.readouterr().out


@pytest.mark.unit
def test_validate_valid_file(config_file, capsys):
    assert main(["validate", str(config_file)]) == 0
    assert "Weather Overview: valid" in capsys.readouterr().out


@pytest.mark.unit
def test_validate_reports_errors(tmp_path, capsys):
    path = tmp_path / "bad.json"
    path.write_text(
        json.dumps({"name": "Bad", "root": {"type": "Gauge", "properties": {"value": 3}}}),
        encoding="utf-8",
    )
    assert main(["validate", str(path)]) == 1
    out = capsys.readouterr().out
    assert "error: root: Gauge value 3.0 must be between 0.0 and 1.0" in out
    assert "Bad: invalid" in out


@pytest.mark.unit
def test_validate_undecodable_file(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{oops", encoding="utf-8")
    assert main(["validate", str(path)]) == 1


@pytest.mark.unit
def test_render_preview(config_file, capsys):
    assert main(["render", str(config_file), "--preview"]) == 0
    out = capsys.readouterr().out
    assert "Text ['{{weather.temperature}}']" in out
    assert "text [text='24°']" in out


@pytest.mark.unit
def test_render_sample_live():
    text = render_to_text(WEATHER_WIDGET)
    assert "text [text='72']" in text


@pytest.mark.unit
def test_render_unknown_sample():
    assert main(["render", "--sample", "nope"]) == 1


@pytest.mark.unit
def test_samples_list_and_show(capsys):
    assert main(["samples"]) == 0
    assert "weather" in capsys.readouterr().out
    assert main(["samples", "battery"]) == 0
    assert decode_config(capsys.readouterr().out).name == "Battery Level"


@pytest.mark.unit
def test_store_round_trip(config_file, capsys):
    assert main(["store", "save", str(config_file)]) == 0
    config_id = capsys.readouterr().out.strip()
    assert config_id == str(WEATHER_WIDGET.id)

    assert main(["store", "list"]) == 0
    assert "Weather Overview" in capsys.readouterr().out

    assert main(["store", "show", config_id]) == 0
    assert decode_config(capsys.readouterr().out) == WEATHER_WIDGET

    assert main(["store", "delete", config_id]) == 0
    assert main(["store", "delete", config_id]) == 1
    assert main(["store", "show", config_id]) == 1


@pytest.mark.unit
def test_generate_without_endpoint(monkeypatch):
    monkeypatch.delenv("WIDGY_GENERATE_URL", raising=False)
    assert main(["generate", "a clock"]) == 1


@pytest.mark.unit
def test_generate_writes_and_saves(monkeypatch, tmp_path, isolated_store):
    canned = CannedBackend(dumps_config(WEATHER_WIDGET))
    monkeypatch.setattr(
        widgy.generator,
        "WidgetGenerator",
        lambda max_retries=None: WidgetGenerator(canned, max_retries=0),
    )
    output = tmp_path / "out.json"
    assert main(["generate", "weather", "-o", str(output), "--save"]) == 0
    assert decode_config(output.read_text(encoding="utf-8")) == WEATHER_WIDGET
    assert (isolated_store / f"{WEATHER_WIDGET.id}.json").exists()


@pytest.mark.unit
def test_env_masks_api_key(monkeypatch, capsys):
    monkeypatch.setenv("WIDGY_API_KEY", "secret-token")
    assert main(["env"]) == 0
    out = capsys.readouterr().out
    assert "WIDGY_PROVIDER_TIMEOUT" in out
    assert "secret-token" not in out
