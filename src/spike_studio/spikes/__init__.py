"""Spike catalog: identifiers, synthesis, caching, storage and rendering."""

from spike_studio.spikes.models import (
    MatchCandidate,
    RenderedFile,
    SpikeFile,
    SpikeMetadata,
    SpikeParam,
    SpikePatch,
    SpikeSpec,
)

__all__ = [
    "MatchCandidate",
    "RenderedFile",
    "SpikeFile",
    "SpikeMetadata",
    "SpikeParam",
    "SpikePatch",
    "SpikeSpec",
]
