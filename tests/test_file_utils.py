"""Tests for atomic writes and spike id sanitizing."""

import os
from pathlib import Path

import pytest

from spike_studio.utils.file_utils import sanitize_spike_id, write_atomically


class TestWriteAtomically:
    """Tests for write_atomically function."""

    def test_writes_utf8_text(self, tmp_path: Path):
        fp = tmp_path / "spike.json"
        write_atomically(fp, '{"id":"demo","description":"ワーカー"}')
        assert fp.read_text(encoding="utf-8") == '{"id":"demo","description":"ワーカー"}'
        assert not (tmp_path / "spike.json.tmp").exists()

    def test_creates_parent_directories(self, tmp_path: Path):
        fp = tmp_path / "store" / "nested" / "spike.yaml"
        write_atomically(fp, "id: demo\n")
        assert fp.read_text() == "id: demo\n"

    def test_replaces_existing_file(self, tmp_path: Path):
        fp = tmp_path / "spike.json"
        fp.write_text('{"id":"old"}')
        write_atomically(fp, '{"id":"new"}')
        assert fp.read_text() == '{"id":"new"}'

    def test_cleans_up_temp_on_failure(self, tmp_path: Path, monkeypatch):
        """A failed write leaves neither the temp file nor a partial target."""
        fp = tmp_path / "spike.json"

        def fail_fsync(fd):
            raise OSError("fsync failed")

        monkeypatch.setattr(os, "fsync", fail_fsync)
        with pytest.raises(OSError):
            write_atomically(fp, "content")
        assert not (tmp_path / "spike.json.tmp").exists()
        assert not fp.exists()


class TestSanitizeSpikeId:
    def test_plain_id_unchanged(self):
        assert sanitize_spike_id("strike-bun-elysia-worker-typed-ts") == "strike-bun-elysia-worker-typed-ts"

    def test_allowed_punctuation_kept(self):
        assert sanitize_spike_id("@scope.pkg_v1") == "@scope.pkg_v1"

    def test_slashes_and_spaces(self):
        assert sanitize_spike_id("team/api spike") == "team__api_spike"

    def test_path_traversal_neutralized(self):
        assert "/" not in sanitize_spike_id("../../etc/passwd")

    @pytest.mark.parametrize("bad", ["", "   "])
    def test_empty_rejected(self, bad):
        with pytest.raises(ValueError):
            sanitize_spike_id(bad)

    def test_too_long(self):
        with pytest.raises(ValueError, match="too long"):
            sanitize_spike_id("a" * 20, max_length=10)
