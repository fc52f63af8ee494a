"""Spike catalog: listing, resolution and batched metadata loading.

Resolution order for an id:
    1. cache hit
    2. persisted definition in the override store
    3. synthesis, when the id belongs to the generated identifier space
Anything else is a SpikeNotFoundError.
"""

from __future__ import annotations

import asyncio
import re
from typing import Iterable, Sequence

from spike_studio.config.constants import Limits
from spike_studio.config.logging import get_logger
from spike_studio.config.settings import Settings
from spike_studio.exceptions import SpikeNotFoundError, SpikeStudioError
from spike_studio.spikes.cache import SpikeCache
from spike_studio.spikes.identifiers import IdentifierSpace
from spike_studio.spikes.models import SpikeMetadata, SpikeSpec
from spike_studio.spikes.storage import SpikeStore
from spike_studio.spikes.synthesizer import synthesize, synthesize_metadata

logger = get_logger(__name__)


class SpikeCatalog:
    """Uniform view over persisted and generated spikes.

    Args:
        store: Override store for hand-authored definitions.
        space: Generated identifier space.
        cache: Cache owned by this catalog.
        generated_limit: Cap on enumerated generated ids (None = unbounded).
        list_limit: Cap on ids returned by ``list_ids`` (None = no cap).
    """

    def __init__(
        self,
        store: SpikeStore,
        space: IdentifierSpace | None = None,
        cache: SpikeCache | None = None,
        generated_limit: int | None = Limits.GENERATED_LIMIT,
        list_limit: int | None = None,
    ):
        self.store = store
        self.space = space or IdentifierSpace()
        self.cache = cache or SpikeCache()
        self.generated_limit = generated_limit
        self.list_limit = list_limit

    @classmethod
    def from_settings(cls, settings: Settings) -> "SpikeCatalog":
        return cls(
            store=SpikeStore(settings.spikes_dir),
            cache=SpikeCache(max_size=settings.cache_max_size, ttl=settings.cache_ttl_seconds),
            generated_limit=settings.generated_cap,
            list_limit=settings.list_limit or None,
        )

    # region Listing
    def generated_ids(self, tokens: Iterable[str] | None = None) -> Iterable[str]:
        space = self.space.narrowed_to(tokens) if tokens else self.space
        return space.enumerate(self.generated_limit)

    def list_ids(
        self, filter_pattern: str | None = None, tokens: Iterable[str] | None = None
    ) -> list[str]:
        """Override ids first, then generated ids, de-duplicated.

        With ``tokens``, generated ids come from the sub-space of dimension
        values the tokens name, so the enumeration cap applies after narrowing.
        """
        seen: set[str] = set()
        ids: list[str] = []
        for spike_id in [*self.store.list_ids(), *self.generated_ids(tokens)]:
            if spike_id not in seen:
                seen.add(spike_id)
                ids.append(spike_id)
        if filter_pattern:
            regex = re.compile(filter_pattern, re.IGNORECASE)
            ids = [i for i in ids if regex.search(i)]
        if self.list_limit is not None:
            ids = ids[: self.list_limit]
        return ids

    def stats(self) -> dict:
        stored = self.store.list_ids()
        generated = list(self.generated_ids())
        generated_set = set(generated)
        duplicates = [i for i in stored if i in generated_set]
        all_ids = self.list_ids()
        return {
            "total": len(all_ids),
            "files_count": len(stored),
            "generated_count": len(generated),
            "identifier_space_size": len(self.space),
            "duplicates": duplicates,
            "sample": all_ids[: Limits.STATS_SAMPLE],
            "cache": self.cache.get_stats(),
        }

    # endregion

    # region Resolution
    def is_known(self, spike_id: str) -> bool:
        return self.store.exists(spike_id) or self.space.belongs_to(spike_id)

    async def resolve(self, spike_id: str) -> SpikeSpec:
        """Resolve an id to its full definition.

        Raises:
            SpikeNotFoundError: If the id has no override and is not generated.
            MalformedIdentifierError: If a generated id does not decode.
            SpikeLoadError: If a persisted definition is invalid.
        """
        cached = self.cache.get(spike_id)
        if cached is not None:
            logger.debug("Cache hit: %s", spike_id)
            return cached
        if self.store.exists(spike_id):
            spec = await self.store.load(spike_id)
            logger.debug("Loaded override spike: %s", spike_id)
        elif self.space.belongs_to(spike_id):
            spec = synthesize(spike_id)
            logger.debug("Synthesized spike: %s", spike_id)
        else:
            raise SpikeNotFoundError(f"Spike not found: {spike_id}")
        self.cache.put(spike_id, spec)
        return spec

    async def load_metadata(self, spike_id: str) -> SpikeMetadata:
        """Metadata projection for ranking; leaves cache contents and counters alone."""
        cached = self.cache.peek(spike_id)
        if cached is not None:
            return cached.to_metadata()
        if self.store.exists(spike_id):
            return await self.store.load_metadata(spike_id)
        if self.space.belongs_to(spike_id):
            return synthesize_metadata(spike_id)
        raise SpikeNotFoundError(f"Spike not found: {spike_id}")

    async def _try_load_metadata(self, spike_id: str) -> SpikeMetadata | None:
        try:
            return await self.load_metadata(spike_id)
        except (SpikeStudioError, OSError, ValueError) as e:
            logger.warning("Failed to load spike metadata for %s: %s", spike_id, e)
            return None

    async def load_metadata_batch(
        self, ids: Sequence[str], batch_size: int = Limits.AUTO_TOP * Limits.AUTO_BATCH_MULTIPLIER
    ) -> list[SpikeMetadata]:
        """Load metadata for many ids in fixed-size chunks.

        Items that fail to load are logged and skipped; the batch continues.
        """
        size = max(1, batch_size)
        out: list[SpikeMetadata] = []
        for start in range(0, len(ids), size):
            chunk = ids[start : start + size]
            results = await asyncio.gather(*(self._try_load_metadata(i) for i in chunk))
            out.extend(m for m in results if m is not None)
        return out

    # endregion
