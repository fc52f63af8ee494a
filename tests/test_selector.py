"""Tests for two-phase spike selection."""

import pytest

from spike_studio.exceptions import SpikeLoadError
from spike_studio.matching.selector import (
    CLARIFYING_QUESTIONS,
    SpikeSelector,
    merge_candidates,
)
from spike_studio.spikes.catalog import SpikeCatalog
from spike_studio.spikes.models import MatchCandidate, SpikeSpec

ELYSIA_TASK = "Elysia の typed worker を TypeScript で作成"


class TestMergeCandidates:
    def test_keeps_best_score_per_id(self):
        merged = merge_candidates(
            [
                MatchCandidate(id="a", score=0.2),
                MatchCandidate(id="b", score=0.5),
                MatchCandidate(id="a", score=0.9, alias=True),
            ]
        )
        assert [(c.id, c.score) for c in merged] == [("a", 0.9), ("b", 0.5)]
        assert merged[0].alias

    def test_ties_keep_input_order(self):
        merged = merge_candidates([MatchCandidate(id="x", score=0.5), MatchCandidate(id="y", score=0.5)])
        assert [c.id for c in merged] == ["x", "y"]


class TestSelect:
    @pytest.mark.asyncio
    async def test_selects_elysia_worker(self, catalog: SpikeCatalog):
        selection = await SpikeSelector(catalog).select(ELYSIA_TASK)
        assert selection.selected.id == "strike-bun-elysia-worker-typed-ts"
        assert selection.alias_ids == ["strike-bun-elysia-worker-typed-ts"]
        assert selection.confidence == 1.0
        assert not selection.low_confidence
        assert selection.questions == []

    @pytest.mark.asyncio
    async def test_without_aliases_still_scores_best(self, catalog: SpikeCatalog):
        selection = await SpikeSelector(catalog, aliases_enabled=False).select(ELYSIA_TASK)
        assert selection.alias_ids == []
        assert selection.selected.id == "strike-bun-elysia-worker-typed-ts"
        assert selection.score == pytest.approx(1.0)

    @pytest.mark.asyncio
    async def test_alias_dominates_scoring(self, catalog: SpikeCatalog):
        selection = await SpikeSelector(catalog).select("[alias: react-hook-ts] worker")
        assert selection.selected.id == "strike-react-hook-typed-ts"
        assert selection.shortlist[0].alias
        assert selection.score > 1.0

    @pytest.mark.asyncio
    async def test_empty_task_asks_questions(self, catalog: SpikeCatalog):
        selection = await SpikeSelector(catalog).select("   ")
        assert selection.selected is None
        assert not selection.found
        assert selection.low_confidence
        assert selection.questions == list(CLARIFYING_QUESTIONS)

    @pytest.mark.asyncio
    async def test_no_match_asks_questions(self, catalog: SpikeCatalog):
        selection = await SpikeSelector(catalog).select("kotlin android")
        assert selection.selected is None
        assert selection.phase1 == []
        assert selection.low_confidence
        assert selection.questions

    @pytest.mark.asyncio
    async def test_weak_match_is_low_confidence(self, catalog: SpikeCatalog):
        selection = await SpikeSelector(catalog).select("worker queue kotlin android")
        assert selection.selected is not None
        assert selection.confidence < 0.4
        assert selection.low_confidence
        assert selection.questions == list(CLARIFYING_QUESTIONS)

    @pytest.mark.asyncio
    async def test_shortlist_is_subset_of_phase1(self, catalog: SpikeCatalog):
        selector = SpikeSelector(catalog, top_n=3, batch_size=4)
        selection = await selector.select("react hook typed")
        phase1_ids = {c.id for c in selection.phase1}
        assert len(selection.shortlist) <= 3
        assert {c.id for c in selection.shortlist} <= phase1_ids
        assert selection.selected.id in phase1_ids
        assert all(c.score > 0 for c in selection.phase1)

    @pytest.mark.asyncio
    async def test_explicit_ids(self, catalog: SpikeCatalog):
        selection = await SpikeSelector(catalog, aliases_enabled=False).select(
            "fastapi route", ids=["strike-fastapi-route-basic-py", "strike-react-hook-typed-ts"]
        )
        assert selection.selected.id == "strike-fastapi-route-basic-py"
        assert [c.id for c in selection.phase1] == ["strike-fastapi-route-basic-py"]

    @pytest.mark.asyncio
    async def test_alias_to_unknown_id_ignored(self, catalog: SpikeCatalog):
        selector = SpikeSelector(catalog)
        selector.alias_resolver.short_aliases["ghost"] = "not-a-spike"
        selection = await selector.select("[alias: ghost] react hook")
        assert "not-a-spike" not in selection.alias_ids

    @pytest.mark.asyncio
    async def test_phase2_failure_is_skipped(self, catalog: SpikeCatalog):
        original = catalog.resolve

        async def flaky(spike_id: str) -> SpikeSpec:
            if spike_id == "strike-bun-elysia-worker-typed-ts":
                raise SpikeLoadError("boom")
            return await original(spike_id)

        catalog.resolve = flaky
        selection = await SpikeSelector(catalog).select(ELYSIA_TASK)
        assert selection.selected is not None
        assert selection.selected.id != "strike-bun-elysia-worker-typed-ts"
        assert "strike-bun-elysia-worker-typed-ts" not in [c.id for c in selection.shortlist]

    @pytest.mark.asyncio
    async def test_override_definition_used_in_phase2(self, catalog: SpikeCatalog):
        catalog.store.save(
            SpikeSpec(
                id="team-elysia-worker",
                name="Team Elysia worker",
                stack=["bun-elysia", "typescript"],
                tags=["worker", "typed"],
            )
        )
        selection = await SpikeSelector(catalog, aliases_enabled=False).select(ELYSIA_TASK)
        assert "team-elysia-worker" in [c.id for c in selection.phase1]
