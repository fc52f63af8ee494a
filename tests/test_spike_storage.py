"""Tests for the directory-backed override store."""

import json
from pathlib import Path

import pytest

from spike_studio.exceptions import SpikeLoadError, SpikeNotFoundError, StorageError
from spike_studio.spikes.models import SpikeFile, SpikeParam, SpikeSpec
from spike_studio.spikes.storage import SpikeStore


# =============================================================================
# Fixtures
# =============================================================================
@pytest.fixture
def spikes_dir(tmp_path: Path) -> Path:
    d = tmp_path / "spikes"
    d.mkdir()
    return d


@pytest.fixture
def spec() -> SpikeSpec:
    return SpikeSpec(
        id="custom-api",
        name="Custom API",
        stack=["express", "typescript"],
        tags=["route"],
        params=[SpikeParam(name="app_name", default="api")],
        files=[SpikeFile(path="src/{{app_name}}.ts", template="// {{app_name}}")],
    )


class TestLoad:
    def test_load_json(self, spikes_dir: Path):
        (spikes_dir / "alpha.json").write_text(json.dumps({"id": "alpha", "name": "Alpha"}))
        loaded = SpikeStore(spikes_dir).load_sync("alpha")
        assert loaded.id == "alpha"
        assert loaded.name == "Alpha"

    def test_load_yaml_defaults_id_and_name(self, spikes_dir: Path):
        (spikes_dir / "demo.yaml").write_text(
            "stack: [fastapi, python]\nfiles:\n  - path: app.py\n    template: '# {{app_name}}'\n"
        )
        loaded = SpikeStore(spikes_dir).load_sync("demo")
        assert loaded.id == "demo"
        assert loaded.name == "demo"
        assert loaded.files[0].template == "# {{app_name}}"

    def test_load_yml_extension(self, spikes_dir: Path):
        (spikes_dir / "short.yml").write_text("name: Short\n")
        assert SpikeStore(spikes_dir).load_sync("short").name == "Short"

    def test_malformed_json(self, spikes_dir: Path):
        (spikes_dir / "broken.json").write_text("{not json")
        with pytest.raises(SpikeLoadError, match="broken"):
            SpikeStore(spikes_dir).load_sync("broken")

    def test_non_mapping(self, spikes_dir: Path):
        (spikes_dir / "list.yaml").write_text("- a\n- b\n")
        with pytest.raises(SpikeLoadError):
            SpikeStore(spikes_dir).load_sync("list")

    def test_schema_violation(self, spikes_dir: Path):
        (spikes_dir / "bad.json").write_text(json.dumps({"files": "not-a-list"}))
        with pytest.raises(SpikeLoadError):
            SpikeStore(spikes_dir).load_sync("bad")

    def test_too_large(self, spikes_dir: Path):
        (spikes_dir / "big.json").write_text(json.dumps({"description": "x" * 200}))
        with pytest.raises(SpikeLoadError, match="too large"):
            SpikeStore(spikes_dir, max_file_size=100).load_sync("big")

    def test_missing(self, spikes_dir: Path):
        with pytest.raises(SpikeNotFoundError):
            SpikeStore(spikes_dir).load_sync("nope")

    @pytest.mark.asyncio
    async def test_async_load_and_metadata(self, spikes_dir: Path, spec: SpikeSpec):
        store = SpikeStore(spikes_dir)
        store.save(spec)
        loaded = await store.load("custom-api")
        meta = await store.load_metadata("custom-api")
        assert loaded == spec
        assert meta.file_count == 1
        assert meta.name == "Custom API"


class TestListing:
    def test_missing_dir_lists_nothing(self, tmp_path: Path):
        assert SpikeStore(tmp_path / "absent").list_ids() == []

    def test_sorted_and_filtered(self, spikes_dir: Path):
        for name in ["b.json", "a.yaml", "c.yml", "notes.txt"]:
            (spikes_dir / name).write_text("{}")
        store = SpikeStore(spikes_dir)
        assert store.list_ids() == ["a", "b", "c"]
        assert store.list_ids("^[AB]$") == ["a", "b"]

    def test_exists(self, spikes_dir: Path):
        (spikes_dir / "here.json").write_text("{}")
        store = SpikeStore(spikes_dir)
        assert store.exists("here")
        assert not store.exists("there")
        assert not store.exists("")


class TestSaveDelete:
    def test_save_json_round_trip(self, tmp_path: Path, spec: SpikeSpec):
        store = SpikeStore(tmp_path / "new")
        path = store.save(spec)
        assert path == tmp_path / "new" / "custom-api.json"
        assert store.load_sync("custom-api") == spec

    def test_save_yaml_replaces_json(self, spikes_dir: Path, spec: SpikeSpec):
        store = SpikeStore(spikes_dir)
        store.save(spec)
        store.save(spec, fmt="yaml")
        assert not (spikes_dir / "custom-api.json").exists()
        assert (spikes_dir / "custom-api.yaml").exists()
        assert store.load_sync("custom-api") == spec

    def test_save_unknown_format(self, spikes_dir: Path, spec: SpikeSpec):
        with pytest.raises(ValueError):
            SpikeStore(spikes_dir).save(spec, fmt="toml")

    def test_save_too_large(self, spikes_dir: Path, spec: SpikeSpec):
        with pytest.raises(StorageError):
            SpikeStore(spikes_dir, max_file_size=10).save(spec)

    def test_delete(self, spikes_dir: Path, spec: SpikeSpec):
        store = SpikeStore(spikes_dir)
        store.save(spec)
        assert store.delete("custom-api") is True
        assert store.delete("custom-api") is False
        assert store.list_ids() == []
