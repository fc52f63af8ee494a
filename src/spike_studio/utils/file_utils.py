"""Atomic writes and file-name sanitizing for the override store."""

from __future__ import annotations

import os
from pathlib import Path


def write_atomically(path: Path, content: str) -> None:
    """Write a spike definition via a sibling temp file and ``os.replace``.

    Readers see either the previous definition or the new one, never a
    partial file. The temp file is removed if the write fails.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    try:
        with open(tmp, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, path)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise


def sanitize_spike_id(spike_id: str, max_length: int = 255) -> str:
    """Map a spike id to a safe file stem.

    Raises:
        ValueError: If the id is empty or too long once sanitized.
    """
    if not isinstance(spike_id, str) or not spike_id.strip():
        raise ValueError("Spike id must be a non-empty string")
    safe = spike_id.strip().replace("/", "__")
    safe = "".join(c if c.isalnum() or c in "._@-" else "_" for c in safe)
    if len(safe) > max_length:
        raise ValueError(f"Spike id too long: {len(safe)} > {max_length}")
    return safe
