"""Tests for catalog listing, resolution and batched metadata loading."""

import pytest

from spike_studio.exceptions import (
    MalformedIdentifierError,
    SpikeLoadError,
    SpikeNotFoundError,
)
from spike_studio.spikes.catalog import SpikeCatalog
from spike_studio.spikes.models import SpikeSpec


class TestListing:
    def test_generated_ids(self, catalog: SpikeCatalog):
        ids = catalog.list_ids()
        assert len(ids) == 36
        assert ids[0] == "strike-bun-elysia-worker-typed-ts"

    def test_overrides_first_and_deduplicated(self, catalog: SpikeCatalog):
        catalog.store.save(SpikeSpec(id="strike-react-hook-typed-ts", name="Custom hook"))
        catalog.store.save(SpikeSpec(id="my-template"))
        ids = catalog.list_ids()
        assert ids[:2] == ["my-template", "strike-react-hook-typed-ts"]
        assert ids.count("strike-react-hook-typed-ts") == 1
        assert len(ids) == 37

    def test_filter(self, catalog: SpikeCatalog):
        ids = catalog.list_ids("react-hook")
        assert ids == [
            "strike-react-hook-typed-ts",
            "strike-react-hook-typed-py",
            "strike-react-hook-basic-ts",
            "strike-react-hook-basic-py",
        ]

    def test_generated_limit(self, catalog: SpikeCatalog):
        catalog.generated_limit = 5
        assert len(catalog.list_ids()) == 5

    def test_list_limit(self, catalog: SpikeCatalog):
        catalog.list_limit = 3
        assert len(catalog.list_ids()) == 3

    def test_tokens_narrow_before_generated_limit(self, catalog: SpikeCatalog):
        catalog.generated_limit = 5
        catalog.store.save(SpikeSpec(id="my-template"))
        ids = catalog.list_ids(tokens={"fastapi", "route"})
        assert ids == [
            "my-template",
            "strike-fastapi-route-typed-ts",
            "strike-fastapi-route-typed-py",
            "strike-fastapi-route-basic-ts",
            "strike-fastapi-route-basic-py",
        ]

    def test_stats(self, catalog: SpikeCatalog):
        catalog.store.save(SpikeSpec(id="strike-react-hook-typed-ts"))
        catalog.store.save(SpikeSpec(id="other"))
        stats = catalog.stats()
        assert stats["total"] == 37
        assert stats["files_count"] == 2
        assert stats["generated_count"] == 36
        assert stats["identifier_space_size"] == 36
        assert stats["duplicates"] == ["strike-react-hook-typed-ts"]
        assert len(stats["sample"]) == 20


class TestResolve:
    @pytest.mark.asyncio
    async def test_synthesizes_generated(self, catalog: SpikeCatalog):
        spec = await catalog.resolve("strike-react-hook-typed-ts")
        assert spec.tags[:2] == ["hook", "typed"]

    @pytest.mark.asyncio
    async def test_override_takes_precedence(self, catalog: SpikeCatalog):
        catalog.store.save(SpikeSpec(id="strike-react-hook-typed-ts", name="Custom hook"))
        spec = await catalog.resolve("strike-react-hook-typed-ts")
        assert spec.name == "Custom hook"

    @pytest.mark.asyncio
    async def test_generated_outside_listing_still_resolves(self, catalog: SpikeCatalog):
        """Resolution goes by prefix, not by the enumerated listing."""
        spec = await catalog.resolve("strike-vue-component-typed-ts")
        assert spec.stack[0] == "vue"

    @pytest.mark.asyncio
    async def test_unknown(self, catalog: SpikeCatalog):
        with pytest.raises(SpikeNotFoundError):
            await catalog.resolve("nope")

    @pytest.mark.asyncio
    async def test_malformed(self, catalog: SpikeCatalog):
        with pytest.raises(MalformedIdentifierError):
            await catalog.resolve("strike-react")

    @pytest.mark.asyncio
    async def test_broken_override(self, catalog: SpikeCatalog):
        catalog.store.ensure_dir()
        (catalog.store.base_dir / "broken.json").write_text("{")
        with pytest.raises(SpikeLoadError):
            await catalog.resolve("broken")

    @pytest.mark.asyncio
    async def test_cached_after_resolve(self, catalog: SpikeCatalog):
        first = await catalog.resolve("strike-react-hook-typed-ts")
        second = await catalog.resolve("strike-react-hook-typed-ts")
        assert first is second
        assert catalog.cache.hits == 1

    @pytest.mark.asyncio
    async def test_cache_expires(self, catalog: SpikeCatalog, clock):
        first = await catalog.resolve("strike-react-hook-typed-ts")
        clock.advance(301)
        second = await catalog.resolve("strike-react-hook-typed-ts")
        assert first is not second
        assert first == second


class TestMetadata:
    @pytest.mark.asyncio
    async def test_metadata_does_not_fill_cache(self, catalog: SpikeCatalog):
        meta = await catalog.load_metadata("strike-react-hook-typed-ts")
        assert meta.id == "strike-react-hook-typed-ts"
        assert len(catalog.cache) == 0

    @pytest.mark.asyncio
    async def test_batch_skips_failures(self, catalog: SpikeCatalog):
        catalog.store.ensure_dir()
        (catalog.store.base_dir / "broken.json").write_text("{")
        ids = ["strike-react-hook-typed-ts", "broken", "nope", "strike-fastapi-route-basic-py"]
        metas = await catalog.load_metadata_batch(ids, batch_size=2)
        assert [m.id for m in metas] == ["strike-react-hook-typed-ts", "strike-fastapi-route-basic-py"]

    @pytest.mark.asyncio
    async def test_batch_preserves_order(self, catalog: SpikeCatalog):
        ids = catalog.list_ids()
        metas = await catalog.load_metadata_batch(ids, batch_size=5)
        assert [m.id for m in metas] == ids

    @pytest.mark.asyncio
    async def test_metadata_leaves_cache_counters_alone(self, catalog: SpikeCatalog):
        await catalog.resolve("strike-react-hook-typed-ts")
        before = catalog.cache.get_stats()
        await catalog.load_metadata_batch(catalog.list_ids())
        assert catalog.cache.get_stats() == before
