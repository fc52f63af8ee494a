"""Override store for hand-authored spike definitions.

Definitions live as ``{id}.json`` / ``{id}.yaml`` / ``{id}.yml`` files in one
directory. A persisted definition takes precedence over synthesis for the
same id. Disk reads run in worker threads so callers can await them.
"""

from __future__ import annotations

import asyncio
import json
import re
from pathlib import Path

import yaml
from pydantic import ValidationError as PydanticValidationError

from spike_studio.config.constants import SPIKE_FILE_EXTS, Limits
from spike_studio.config.logging import get_logger
from spike_studio.exceptions import SpikeLoadError, SpikeNotFoundError, StorageError
from spike_studio.spikes.models import SpikeMetadata, SpikeSpec
from spike_studio.utils.file_utils import sanitize_spike_id, write_atomically

logger = get_logger(__name__)


class SpikeStore:
    """Directory-backed store of spike definitions."""

    def __init__(self, base_dir: Path, max_file_size: int = Limits.MAX_SPIKE_FILE_SIZE):
        self.base_dir = Path(base_dir)
        self.max_file_size = max_file_size

    def ensure_dir(self) -> Path:
        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to create spike directory: {self.base_dir}", str(e)) from e
        return self.base_dir

    def path_for(self, spike_id: str) -> Path | None:
        """Existing definition file for an id, or None."""
        stem = sanitize_spike_id(spike_id)
        for ext in SPIKE_FILE_EXTS:
            candidate = self.base_dir / f"{stem}{ext}"
            if candidate.is_file():
                return candidate
        return None

    def exists(self, spike_id: str) -> bool:
        try:
            return self.path_for(spike_id) is not None
        except ValueError:
            return False

    def list_ids(self, filter_pattern: str | None = None) -> list[str]:
        """Sorted ids of every definition file, optionally regex-filtered."""
        if not self.base_dir.is_dir():
            return []
        ids = sorted(
            {p.stem for p in self.base_dir.iterdir() if p.is_file() and p.suffix in SPIKE_FILE_EXTS}
        )
        if filter_pattern:
            regex = re.compile(filter_pattern, re.IGNORECASE)
            ids = [i for i in ids if regex.search(i)]
        return ids

    def load_sync(self, spike_id: str) -> SpikeSpec:
        """Read and validate a definition.

        Raises:
            SpikeNotFoundError: If no file exists for the id.
            SpikeLoadError: If the file is too large or cannot be parsed.
        """
        path = self.path_for(spike_id)
        if path is None:
            raise SpikeNotFoundError(f"Spike not found: {spike_id}")
        size = path.stat().st_size
        if size > self.max_file_size:
            raise SpikeLoadError(
                f"Spike file too large: {path.name}",
                details=f"{size} bytes > {self.max_file_size} bytes",
            )
        raw = path.read_text(encoding="utf-8")
        try:
            data = json.loads(raw) if path.suffix == ".json" else yaml.safe_load(raw)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise SpikeLoadError(f"Invalid spike file for '{spike_id}': {path.name}", str(e)) from e
        if not isinstance(data, dict):
            raise SpikeLoadError(f"Spike file must contain a mapping: {path.name}")
        if not data.get("id"):
            data["id"] = spike_id
        try:
            return SpikeSpec.model_validate(data)
        except PydanticValidationError as e:
            raise SpikeLoadError(f"Invalid spike definition for '{spike_id}'", str(e)) from e

    async def load(self, spike_id: str) -> SpikeSpec:
        return await asyncio.to_thread(self.load_sync, spike_id)

    async def load_metadata(self, spike_id: str) -> SpikeMetadata:
        spec = await self.load(spike_id)
        return spec.to_metadata()

    def save(self, spec: SpikeSpec, fmt: str = "json") -> Path:
        """Persist a definition atomically, replacing any existing file for its id."""
        if fmt not in ("json", "yaml"):
            raise ValueError(f"Unsupported spike format: {fmt}")
        stem = sanitize_spike_id(spec.id)
        self.ensure_dir()
        existing = self.path_for(spec.id)
        target = self.base_dir / f"{stem}.{fmt}"
        if fmt == "json":
            content = spec.model_dump_json(indent=2, exclude_none=True)
        else:
            content = yaml.safe_dump(
                spec.model_dump(exclude_none=True), sort_keys=False, allow_unicode=True
            )
        if len(content.encode("utf-8")) > self.max_file_size:
            raise StorageError(f"Spike definition too large: {spec.id}")
        write_atomically(target, content)
        if existing is not None and existing != target:
            existing.unlink(missing_ok=True)
        logger.info("Saved spike %s to %s", spec.id, target)
        return target

    def delete(self, spike_id: str) -> bool:
        """Remove every file for an id. Returns True if something was removed."""
        stem = sanitize_spike_id(spike_id)
        removed = False
        for ext in SPIKE_FILE_EXTS:
            path = self.base_dir / f"{stem}{ext}"
            if path.is_file():
                path.unlink()
                removed = True
        if removed:
            logger.info("Deleted spike %s", spike_id)
        return removed
