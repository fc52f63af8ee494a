"""Parameter substitution for spike file templates."""

from __future__ import annotations

import re
from typing import Iterable, Mapping

from spike_studio.spikes.models import RenderedFile, SpikeFile

Renderable = SpikeFile | RenderedFile

TOKEN_RE = re.compile(r"\{\{\s*([a-zA-Z0-9_-]+)\s*\}\}")


def render_template_string(text: str, params: Mapping[str, str]) -> str:
    """Replace ``{{name}}`` tokens; unbound tokens render as empty string."""
    return TOKEN_RE.sub(lambda m: str(params.get(m.group(1), "") or ""), text)


def find_tokens(text: str) -> set[str]:
    return set(TOKEN_RE.findall(text))


def render_files(
    files: Iterable[Renderable] | None, params: Mapping[str, str]
) -> list[RenderedFile]:
    """Render paths and bodies of a file set."""
    if not files:
        return []
    return [
        RenderedFile(
            path=render_template_string(f.path, params),
            content=render_template_string(f.body, params),
        )
        for f in files
    ]
