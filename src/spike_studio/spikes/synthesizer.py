"""Deterministic synthesis of generated spike definitions.

The same id always yields the same SpikeSpec: a base file set common to every
id plus the files of each specialization rule that applies to its tuple.
"""

from __future__ import annotations

from spike_studio.config.constants import STRIKE_PREFIX
from spike_studio.spikes.identifiers import LANGUAGE_NAMES, SpikeTuple, decode, split_prefix
from spike_studio.spikes.models import SpikeFile, SpikeMetadata, SpikeParam, SpikeSpec
from spike_studio.spikes.rules import build_specialized_files
from spike_studio.spikes.snippets import code_snippet, readme

GENERATED_VERSION = "0.1.0"


def base_files(spike_id: str, spike: SpikeTuple) -> list[SpikeFile]:
    """Stub source file and README present in every generated spike."""
    return [
        SpikeFile(path=f"spikes/{spike_id}.{spike.language}.txt", template=code_snippet(spike)),
        SpikeFile(path=f"spikes/{spike_id}.md", template=readme(spike)),
    ]


def synthesize(spike_id: str) -> SpikeSpec:
    """Build the full definition for a generated id.

    Raises:
        UnknownIdentifierError: If the id has no generated prefix.
        MalformedIdentifierError: If the id does not decode to four segments.
    """
    prefix, _ = split_prefix(spike_id)
    spike = decode(spike_id)
    tags = [spike.pattern, spike.style, "generated"]
    if prefix == STRIKE_PREFIX:
        tags.append("strike")
    language_name = LANGUAGE_NAMES.get(spike.language, spike.language)
    return SpikeSpec(
        id=spike_id,
        name=f"{spike.library} {spike.pattern} {spike.style} {spike.language}",
        version=GENERATED_VERSION,
        stack=[spike.library, language_name],
        tags=tags,
        description=(
            f"Auto-generated spike for {spike.library} {spike.pattern} "
            f"in {language_name} ({spike.style})."
        ),
        params=[
            SpikeParam(
                name="app_name",
                description="Application name used in generated files",
                default=f"{spike.library}-{spike.pattern}-app",
            )
        ],
        files=build_specialized_files(spike) + base_files(spike_id, spike),
        patches=[],
    )


def synthesize_metadata(spike_id: str) -> SpikeMetadata:
    return synthesize(spike_id).to_metadata()
