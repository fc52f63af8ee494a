"""Operation surface for the spike catalog.

Every public method returns a ``{"success", "data", "error"}`` payload.
Internal errors are logged and translated into failure payloads; nothing
raises across this boundary.
"""

from __future__ import annotations

from typing import Literal, Mapping

from spike_studio.config.constants import Limits, Scoring
from spike_studio.config.logging import get_logger
from spike_studio.config.settings import Settings, get_settings
from spike_studio.exceptions import MalformedIdentifierError, SpikeStudioError
from spike_studio.matching.scoring import build_haystack, score_tokens
from spike_studio.matching.selector import SpikeSelector
from spike_studio.matching.tokenizer import tokenize
from spike_studio.spikes.catalog import SpikeCatalog
from spike_studio.spikes.identifiers import PREFIX_CHOICES
from spike_studio.spikes.models import SpikeSpec
from spike_studio.spikes.packs import filter_ids_by_pack, get_pack, list_packs
from spike_studio.spikes.render import find_tokens, render_files
from spike_studio.spikes.synthesizer import synthesize
from spike_studio.utils.responses import service_error, service_ok

logger = get_logger(__name__)

ApplyStrategy = Literal["overwrite", "three_way_merge", "abort"]
APPLY_STRATEGIES = ("overwrite", "three_way_merge", "abort")

# Constraint keys whose values feed into matching, not only into params
MATCH_CONSTRAINT_KEYS = ("library", "framework", "pattern", "style", "language", "lang")


def _error_message(op: str, e: Exception) -> str:
    if isinstance(e, SpikeStudioError):
        return f"{op} failed: {e.message}"
    return f"{op} failed: {e}"


class SpikeService:
    """Discover, preview, apply, validate, explain and auto-select spikes."""

    def __init__(self, catalog: SpikeCatalog, selector: SpikeSelector | None = None):
        self.catalog = catalog
        self.selector = selector or SpikeSelector(catalog)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "SpikeService":
        settings = settings or get_settings()
        catalog = SpikeCatalog.from_settings(settings)
        return cls(catalog, SpikeSelector.from_settings(catalog, settings))

    # region Helpers
    @staticmethod
    def _effective_params(spec: SpikeSpec, params: Mapping[str, str] | None) -> dict[str, str]:
        merged = spec.param_defaults()
        merged.update({k: v for k, v in (params or {}).items() if v is not None})
        return merged

    async def _render_plan(self, spike_id: str, params: Mapping[str, str] | None) -> dict:
        spec = await self.catalog.resolve(spike_id)
        values = self._effective_params(spec, params)
        files = render_files(spec.files, values)
        return {
            "spec": spec.model_dump(exclude_none=True),
            "params": values,
            "files": [f.model_dump() for f in files],
            "patches": [p.model_dump() for p in spec.patches],
        }

    # endregion

    async def discover(
        self,
        query: str | None = None,
        limit: int | None = Limits.DISCOVER_PAGE,
        offset: int = 0,
        filter_pattern: str | None = None,
        pack: str | None = None,
    ) -> dict:
        """Rank catalog spikes against an optional query, with pagination.

        A query narrows generated ids to the dimension values it names before
        the enumeration cap applies.
        """
        try:
            if pack is not None and get_pack(pack) is None:
                return service_error(f"discover failed: unknown pack '{pack}'")
            tokens = tokenize(query or "")
            ids = self.catalog.list_ids(filter_pattern, tokens=tokens)
            if pack is not None:
                ids = filter_ids_by_pack(ids, pack)
            metas = await self.catalog.load_metadata_batch(ids, self.selector.batch_size)
            items = [
                {
                    "id": m.id,
                    "name": m.name,
                    "stack": m.stack,
                    "tags": m.tags,
                    "score": round(score_tokens(tokens, build_haystack(m)), 2),
                }
                for m in metas
            ]
            if tokens:
                items.sort(key=lambda i: (-i["score"], i["id"]))
            start = max(0, offset)
            end = len(items) if limit is None else start + max(0, limit)
            page = items[start:end]
            logger.info("discover: %d spikes, returning %d", len(items), len(page))
            return service_ok(
                {
                    "items": page,
                    "total": len(items),
                    "offset": start,
                    "limit": limit,
                    "has_more": end < len(items),
                    "summary": f"Found {len(items)} spike(s). Showing {len(page)}.",
                }
            )
        except Exception as e:
            logger.error("discover failed: %s", e)
            return service_error(_error_message("discover", e))

    async def preview(self, spike_id: str, params: Mapping[str, str] | None = None) -> dict:
        """Render a spike without side effects."""
        try:
            plan = await self._render_plan(spike_id, params)
            plan["summary"] = (
                f"Preview for spike '{spike_id}': {len(plan['files'])} file(s), "
                f"{len(plan['patches'])} patch(es)"
            )
            plan["next_actions"] = [
                {
                    "tool": "apply",
                    "args": {"id": spike_id, "params": plan["params"], "strategy": "three_way_merge"},
                }
            ]
            return service_ok(plan)
        except Exception as e:
            logger.error("preview failed for %s: %s", spike_id, e)
            return service_error(_error_message("preview", e))

    async def apply(
        self,
        spike_id: str,
        params: Mapping[str, str] | None = None,
        strategy: ApplyStrategy = "three_way_merge",
    ) -> dict:
        """Return an apply plan; writing files is the caller's job."""
        try:
            if strategy not in APPLY_STRATEGIES:
                return service_error(f"apply failed: unknown strategy '{strategy}'")
            plan = await self._render_plan(spike_id, params)
            plan.update(
                {
                    "strategy": strategy,
                    "applied": False,
                    "summary": (
                        f"Apply plan for '{spike_id}' (strategy: {strategy}): "
                        f"{len(plan['files'])} file(s) to create, "
                        f"{len(plan['patches'])} patch(es) to apply"
                    ),
                    "next_actions": [
                        {"tool": "validate", "args": {"id": spike_id, "params": plan["params"]}}
                    ],
                }
            )
            return service_ok(plan)
        except Exception as e:
            logger.error("apply failed for %s: %s", spike_id, e)
            return service_error(_error_message("apply", e))

    async def validate(self, spike_id: str, params: Mapping[str, str] | None = None) -> dict:
        """Check that a spike renders cleanly with the given params."""
        try:
            spec = await self.catalog.resolve(spike_id)
            values = self._effective_params(spec, params)
            issues: list[dict[str, str]] = []
            for p in spec.params:
                if p.required and not values.get(p.name):
                    issues.append({"level": "error", "message": f"Missing required param: {p.name}"})
            for f in spec.files:
                unbound = sorted((find_tokens(f.path) | find_tokens(f.body)) - set(values))
                if unbound:
                    issues.append(
                        {
                            "level": "warn",
                            "message": f"{f.path}: unbound tokens render empty: {', '.join(unbound)}",
                        }
                    )
            rendered = render_files(spec.files, values)
            for f in rendered:
                if "{{" in f.content or "{{" in f.path:
                    issues.append({"level": "warn", "message": f"Unrendered braces remain in {f.path}"})
            paths = [f.path for f in rendered]
            for dup in sorted({p for p in paths if paths.count(p) > 1}):
                issues.append({"level": "warn", "message": f"Duplicate rendered path: {dup}"})
            status = "warn" if issues else "pass"
            return service_ok(
                {
                    "status": status,
                    "issues": issues,
                    "summary": f"Validation: {status} (issues: {len(issues)})",
                    "next_actions": [{"tool": "explain", "args": {"id": spike_id}}],
                }
            )
        except Exception as e:
            logger.error("validate failed for %s: %s", spike_id, e)
            return service_error(_error_message("validate", e))

    async def explain(self, spike_id: str) -> dict:
        """Human-readable summary of a single spike."""
        try:
            spec = await self.catalog.resolve(spike_id)
            version = f"@{spec.version}" if spec.version else ""
            lines = [
                f"Spike: {spec.name or spec.id}{version}",
                spec.description or "",
                f"Stack: {', '.join(spec.stack)}" if spec.stack else "",
                f"Tags: {', '.join(spec.tags)}" if spec.tags else "",
                f"Params: {', '.join(p.name for p in spec.params)}" if spec.params else "",
                f"Files: {len(spec.files)}, patches: {len(spec.patches)}",
            ]
            return service_ok(
                {
                    "spec": spec.model_dump(exclude_none=True),
                    "summary": "\n".join(line for line in lines if line),
                }
            )
        except Exception as e:
            logger.error("explain failed for %s: %s", spike_id, e)
            return service_error(_error_message("explain", e))

    async def auto_select(self, task: str, constraints: Mapping[str, str] | None = None) -> dict:
        """Pick the best spike for a task, with clarifying questions when unsure."""
        try:
            constraints = dict(constraints or {})
            hints = [constraints[k] for k in MATCH_CONSTRAINT_KEYS if constraints.get(k)]
            query = " ".join([task, *hints]).strip()
            selection = await self.selector.select(query)
            next_actions: list[dict] = []
            if selection.selected is not None:
                next_actions.append(
                    {"tool": "preview", "args": {"id": selection.selected.id, "params": constraints}}
                )
            if selection.low_confidence:
                next_actions.append({"tool": "discover", "args": {"query": task, "limit": 10}})
            coverage = round(min(1.0, max(Scoring.COVERAGE_FLOOR, selection.score)), 2)
            if selection.selected is None:
                summary = "No matching spike found"
                coverage = 0.0
            else:
                summary = f"Selected spike: {selection.selected.id} (coverage_score={coverage})"
            return service_ok(
                {
                    "selected_spike": (
                        selection.selected.model_dump(exclude_none=True)
                        if selection.selected is not None
                        else None
                    ),
                    "score": round(selection.score, 4),
                    "coverage_score": coverage,
                    "low_confidence": selection.low_confidence,
                    "candidates": [c.model_dump() for c in selection.shortlist],
                    "alias_hits": selection.alias_ids,
                    "residual_work": [],
                    "questions": selection.questions,
                    "next_actions": next_actions,
                    "summary": summary,
                }
            )
        except Exception as e:
            logger.error("auto_select failed: %s", e)
            return service_error(_error_message("auto_select", e))

    def list_generated(
        self,
        libs: list[str] | None = None,
        patterns: list[str] | None = None,
        styles: list[str] | None = None,
        langs: list[str] | None = None,
        prefix: str = "strike",
        limit: int | None = None,
    ) -> dict:
        """List generated ids narrowed per dimension."""
        try:
            if prefix not in PREFIX_CHOICES:
                return service_error(f"list_generated failed: unknown prefix '{prefix}'")
            ids = list(
                self.catalog.space.enumerate_filtered(libs, patterns, styles, langs, prefix, limit)
            )
            shown = min(len(ids), Limits.LIST_PREVIEW)
            return service_ok({"ids": ids, "count": len(ids), "shown": shown})
        except Exception as e:
            logger.error("list_generated failed: %s", e)
            return service_error(_error_message("list_generated", e))

    def materialize(
        self,
        ids: list[str] | None = None,
        pack: str | None = None,
        limit: int | None = None,
        overwrite: bool = False,
        fmt: str = "json",
    ) -> dict:
        """Write synthesized definitions into the override store.

        Existing files are kept unless ``overwrite`` is set. Ids that are not
        generated are reported as skipped.
        """
        try:
            if pack is not None and get_pack(pack) is None:
                return service_error(f"materialize failed: unknown pack '{pack}'")
            targets = list(ids) if ids else list(self.catalog.generated_ids())
            if pack is not None:
                targets = filter_ids_by_pack(targets, pack)
            if limit is not None:
                targets = targets[: max(0, limit)]
            written: list[str] = []
            skipped: list[str] = []
            store = self.catalog.store
            for spike_id in targets:
                if not self.catalog.space.belongs_to(spike_id):
                    skipped.append(spike_id)
                    continue
                if store.exists(spike_id) and not overwrite:
                    skipped.append(spike_id)
                    continue
                try:
                    spec = synthesize(spike_id)
                except MalformedIdentifierError as e:
                    logger.warning("Skipping %s: %s", spike_id, e)
                    skipped.append(spike_id)
                    continue
                store.save(spec, fmt=fmt)
                self.catalog.cache.invalidate(spike_id)
                written.append(spike_id)
            logger.info("Materialized %d spike(s), skipped %d", len(written), len(skipped))
            return service_ok(
                {
                    "written": written,
                    "skipped": skipped,
                    "directory": str(store.base_dir),
                    "summary": f"Wrote {len(written)} spike(s), skipped {len(skipped)}",
                }
            )
        except Exception as e:
            logger.error("materialize failed: %s", e)
            return service_error(_error_message("materialize", e))

    def packs(self) -> dict:
        return service_ok({"packs": list_packs()})

    def stats(self) -> dict:
        try:
            return service_ok(self.catalog.stats())
        except Exception as e:
            logger.error("stats failed: %s", e)
            return service_error(_error_message("stats", e))
