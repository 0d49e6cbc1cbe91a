"""Unit tests for the config store."""

import json
from uuid import uuid4

import pytest

from widgy.schema import CURRENT_SCHEMA_VERSION, encode_config

from . import ConfigNotFoundError, ConfigStorage, FileConfigStore, StorageError


class TestSaveLoad:
    """Tests for writing and reading configs."""

    @pytest.mark.unit
    def test_round_trip(self, file_store, weather_widget):
        file_store.save(weather_widget)
        assert file_store.load(weather_widget.id) == weather_widget
        assert file_store.load(str(weather_widget.id)) == weather_widget

    @pytest.mark.unit
    def test_file_is_canonical_json(self, file_store, store_dir, simple_clock):
        file_store.save(simple_clock)
        path = store_dir / f"{simple_clock.id}.json"
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data == encode_config(simple_clock)
        assert list(data) == sorted(data)

    @pytest.mark.unit
    def test_save_replaces(self, file_store, simple_clock):
        file_store.save(simple_clock)
        renamed = simple_clock.model_copy(update={"name": "Renamed"})
        file_store.save(renamed)
        assert file_store.load(simple_clock.id).name == "Renamed"
        assert file_store.list_ids() == [simple_clock.id]

    @pytest.mark.unit
    def test_no_temp_files_left(self, file_store, store_dir, simple_clock):
        file_store.save(simple_clock)
        assert [p.name for p in store_dir.iterdir()] == [f"{simple_clock.id}.json"]

    @pytest.mark.unit
    def test_creates_directory(self, tmp_path, simple_clock):
        store = FileConfigStore(tmp_path / "nested" / "dir")
        store.save(simple_clock)
        assert store.load(simple_clock.id).id == simple_clock.id

    @pytest.mark.unit
    def test_load_migrates(self, file_store, store_dir, simple_clock):
        data = encode_config(simple_clock)
        data["schema_version"] = "0.9"
        (store_dir / f"{simple_clock.id}.json").write_text(json.dumps(data), encoding="utf-8")
        assert file_store.load(simple_clock.id).schema_version == CURRENT_SCHEMA_VERSION


class TestErrors:
    """Tests for missing and unreadable configs."""

    @pytest.mark.unit
    def test_missing(self, file_store):
        config_id = uuid4()
        with pytest.raises(ConfigNotFoundError) as exc_info:
            file_store.load(config_id)
        assert str(config_id) in str(exc_info.value)

    @pytest.mark.unit
    def test_malformed_id(self, file_store):
        with pytest.raises(ConfigNotFoundError):
            file_store.load("not-a-uuid")

    @pytest.mark.unit
    def test_corrupt_file(self, file_store, store_dir):
        config_id = uuid4()
        (store_dir / f"{config_id}.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(StorageError, match="Failed to decode"):
            file_store.load(config_id)

    @pytest.mark.unit
    def test_load_all_skips_unreadable(self, file_store, store_dir, sample_configs, caplog):
        for config in sample_configs:
            file_store.save(config)
        (store_dir / f"{uuid4()}.json").write_text("[]", encoding="utf-8")

        loaded = file_store.load_all()
        assert [c.name for c in loaded] == sorted(c.name for c in sample_configs)
        assert "Skipping unreadable config" in caplog.text


class TestDeleteAndList:
    """Tests for delete and list_ids."""

    @pytest.mark.unit
    def test_delete(self, file_store, simple_clock):
        file_store.save(simple_clock)
        assert file_store.delete(simple_clock.id) is True
        assert file_store.delete(simple_clock.id) is False
        assert file_store.list_ids() == []

    @pytest.mark.unit
    def test_delete_malformed_id(self, file_store):
        assert file_store.delete("nope") is False

    @pytest.mark.unit
    def test_list_ids_ignores_other_files(self, file_store, store_dir, simple_clock):
        file_store.save(simple_clock)
        (store_dir / "notes.json").write_text("{}", encoding="utf-8")
        (store_dir / "readme.txt").write_text("hi", encoding="utf-8")
        assert file_store.list_ids() == [simple_clock.id]

    @pytest.mark.unit
    def test_empty_missing_directory(self, tmp_path):
        store = FileConfigStore(tmp_path / "absent")
        assert store.list_ids() == []
        assert store.load_all() == []


class TestConfiguration:
    """Tests for store location resolution."""

    @pytest.mark.unit
    def test_directory_from_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("WIDGY_STORE_DIR", str(tmp_path))
        assert FileConfigStore().directory == tmp_path

    @pytest.mark.unit
    def test_satisfies_protocol(self, file_store):
        store: ConfigStorage = file_store
        assert callable(store.load_all)
