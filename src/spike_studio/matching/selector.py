"""Two-phase spike selection.

Phase 1 scores cheap metadata (in bounded batches) for every override id and
for the generated ids whose dimensions the task names; a dimension the task
does not mention stays open. Candidates scoring above zero are kept. Phase 2
loads full definitions for the top-N candidates, re-scores them and reports
the best. Alias hits join the pool with a score boost so they reach the
shortlist, but they are still resolved and re-scored in Phase 2.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from spike_studio.config.constants import Limits, Scoring
from spike_studio.config.logging import get_logger
from spike_studio.config.settings import Settings
from spike_studio.exceptions import SpikeStudioError
from spike_studio.matching.aliases import AliasResolver
from spike_studio.matching.scoring import build_haystack, score_tokens
from spike_studio.matching.tokenizer import tokenize
from spike_studio.spikes.catalog import SpikeCatalog
from spike_studio.spikes.models import MatchCandidate, SpikeSpec

logger = get_logger(__name__)

CLARIFYING_QUESTIONS: tuple[str, ...] = (
    "Which framework or library should the template target (e.g. nextjs, elysia, fastapi)?",
    "Which language should the files use (ts, js, py, go, rs, kt)?",
    "Which style fits best: basic, typed, advanced, secure or testing?",
    "Which feature pattern is needed (route, service, client, worker, middleware, ...)?",
)


@dataclass
class Selection:
    """Outcome of a selection run."""

    task: str
    tokens: set[str]
    selected: SpikeSpec | None = None
    score: float = 0.0
    shortlist: list[MatchCandidate] = field(default_factory=list)
    phase1: list[MatchCandidate] = field(default_factory=list)
    alias_ids: list[str] = field(default_factory=list)
    low_confidence: bool = True
    questions: list[str] = field(default_factory=list)

    @property
    def confidence(self) -> float:
        """Winning score clamped to [0, 1]."""
        return max(0.0, min(1.0, self.score))

    @property
    def found(self) -> bool:
        return self.selected is not None


def merge_candidates(candidates: Sequence[MatchCandidate]) -> list[MatchCandidate]:
    """De-duplicate by id keeping the best score, then sort descending.

    The sort is stable, so ties keep pool order (alias hits first).
    """
    best: dict[str, MatchCandidate] = {}
    for c in candidates:
        current = best.get(c.id)
        if current is None or c.score > current.score:
            best[c.id] = c
    return sorted(best.values(), key=lambda c: -c.score)


class SpikeSelector:
    """Rank catalog spikes against free-text task descriptions.

    Args:
        catalog: Catalog providing ids, metadata and full definitions.
        top_n: Shortlist size promoted to Phase 2.
        batch_size: Metadata batch size for Phase 1.
        alias_boost: Score added to alias-matched ids.
        threshold: Confidence below which clarifying questions are emitted.
        aliases_enabled: Toggle the alias layer.
        alias_resolver: Alias table; defaults to the built-in one.
    """

    def __init__(
        self,
        catalog: SpikeCatalog,
        top_n: int = Limits.AUTO_TOP,
        batch_size: int = Limits.AUTO_TOP * Limits.AUTO_BATCH_MULTIPLIER,
        alias_boost: float = Scoring.ALIAS_BOOST,
        threshold: float = Scoring.CONFIDENCE_THRESHOLD,
        aliases_enabled: bool = True,
        alias_resolver: AliasResolver | None = None,
    ):
        self.catalog = catalog
        self.top_n = max(1, top_n)
        self.batch_size = max(1, batch_size)
        self.alias_boost = alias_boost
        self.threshold = threshold
        self.aliases_enabled = aliases_enabled
        self.alias_resolver = alias_resolver or AliasResolver()

    @classmethod
    def from_settings(cls, catalog: SpikeCatalog, settings: Settings) -> "SpikeSelector":
        return cls(
            catalog,
            top_n=settings.auto_top,
            batch_size=settings.metadata_batch_size,
            alias_boost=settings.alias_boost,
            threshold=settings.confidence_threshold,
            aliases_enabled=settings.aliases_enabled,
        )

    def _aliases_for(self, task: str) -> list[str]:
        if not self.aliases_enabled:
            return []
        return [i for i in self.alias_resolver.resolve(task) if self.catalog.is_known(i)]

    async def rank_metadata(
        self, tokens: set[str], ids: Sequence[str], alias_ids: Sequence[str] = ()
    ) -> list[MatchCandidate]:
        """Phase 1: score metadata for ``ids`` and keep positive scores."""
        alias_set = set(alias_ids)
        pool = list(dict.fromkeys([*alias_ids, *ids]))
        metas = await self.catalog.load_metadata_batch(pool, self.batch_size)
        candidates: list[MatchCandidate] = []
        for meta in metas:
            is_alias = meta.id in alias_set
            score = score_tokens(tokens, build_haystack(meta))
            if is_alias:
                score += self.alias_boost
            if score > 0:
                candidates.append(MatchCandidate(id=meta.id, score=score, alias=is_alias))
        return merge_candidates(candidates)

    async def rescore(
        self, tokens: set[str], shortlist: Sequence[MatchCandidate]
    ) -> list[tuple[MatchCandidate, SpikeSpec]]:
        """Phase 2: resolve full definitions and re-score them.

        Candidates whose definition fails to resolve are dropped.
        """
        out: list[tuple[MatchCandidate, SpikeSpec]] = []
        for cand in shortlist:
            try:
                spec = await self.catalog.resolve(cand.id)
            except (SpikeStudioError, OSError) as e:
                logger.warning("Dropping candidate %s: %s", cand.id, e)
                continue
            score = score_tokens(tokens, build_haystack(spec))
            if cand.alias:
                score += self.alias_boost
            out.append((MatchCandidate(id=cand.id, score=score, alias=cand.alias), spec))
        out.sort(key=lambda pair: -pair[0].score)
        return out

    async def select(self, task: str, ids: Sequence[str] | None = None) -> Selection:
        """Pick the best spike for ``task``.

        Args:
            task: Free-text task description.
            ids: Candidate ids; defaults to the catalog listing narrowed to the
                dimension values the task names.

        Returns:
            Selection; ``selected`` is None when nothing matched.
        """
        tokens = tokenize(task)
        selection = Selection(task=task, tokens=tokens)
        if not tokens:
            selection.questions = list(CLARIFYING_QUESTIONS)
            return selection
        catalog_ids = list(ids) if ids is not None else self.catalog.list_ids(tokens=tokens)
        alias_ids = self._aliases_for(task)
        selection.alias_ids = alias_ids
        phase1 = await self.rank_metadata(tokens, catalog_ids, alias_ids)
        selection.phase1 = phase1
        logger.debug(
            "Phase 1: %d candidates from %d ids (%d alias hits)",
            len(phase1),
            len(catalog_ids),
            len(alias_ids),
        )
        rescored = await self.rescore(tokens, phase1[: self.top_n])
        selection.shortlist = [cand for cand, _ in rescored]
        if rescored:
            best, spec = rescored[0]
            selection.selected = spec
            selection.score = best.score
            logger.info("Selected spike %s (score=%.2f)", spec.id, best.score)
        else:
            logger.info("No spike matched task: %s", task)
        selection.low_confidence = selection.confidence < self.threshold
        if selection.low_confidence:
            selection.questions = list(CLARIFYING_QUESTIONS)
        return selection
