"""Spike packs: named preset filters over generated-style ids."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable

from spike_studio.spikes.identifiers import SpikeTuple

# {prefix?}{lib}-{pattern}-{style}-{lang}; the library may contain hyphens
GENERATED_LIKE_RE = re.compile(r"^(?:gen-|strike-)?(\S+?)-([^-]+)-([^-]+)-([^-]+)$")


@dataclass(frozen=True)
class DimensionFilter:
    libs: frozenset[str] = frozenset()
    patterns: frozenset[str] = frozenset()
    styles: frozenset[str] = frozenset()
    langs: frozenset[str] = frozenset()


@dataclass(frozen=True)
class SpikePack:
    name: str
    description: str
    include: DimensionFilter = field(default_factory=DimensionFilter)
    exclude: DimensionFilter = field(default_factory=DimensionFilter)
    id_filter: re.Pattern[str] | None = None

    def accepts(self, spike_id: str) -> bool:
        if self.id_filter is not None and not self.id_filter.search(spike_id):
            return False
        parsed = parse_generated_like_id(spike_id)
        if parsed is None:
            return self.name in spike_id
        inc, exc = self.include, self.exclude
        included = (
            _in(parsed.library, inc.libs)
            and _in(parsed.pattern, inc.patterns)
            and _in(parsed.style, inc.styles)
            and _in(parsed.language, inc.langs)
        )
        if not included:
            return False
        return not (
            parsed.library in exc.libs
            or parsed.pattern in exc.patterns
            or parsed.style in exc.styles
            or parsed.language in exc.langs
        )


def _in(value: str, allowed: frozenset[str]) -> bool:
    return not allowed or value in allowed


def _dims(
    libs: Iterable[str] = (),
    patterns: Iterable[str] = (),
    styles: Iterable[str] = (),
    langs: Iterable[str] = (),
) -> DimensionFilter:
    return DimensionFilter(frozenset(libs), frozenset(patterns), frozenset(styles), frozenset(langs))


SPIKE_PACKS: dict[str, SpikePack] = {
    p.name: p
    for p in (
        SpikePack(
            "nextjs-secure",
            "Next.js secure setup (middleware/route/service, secure and typed)",
            include=_dims(["nextjs"], ["middleware", "route", "service"], ["secure", "typed"], ["ts"]),
        ),
        SpikePack(
            "bun-elysia-worker",
            "Bun + Elysia workers and listeners",
            include=_dims(
                ["bun-elysia", "elysia"], ["worker", "listener"], ["typed", "testing", "basic"], ["ts"]
            ),
        ),
        SpikePack(
            "payments",
            "Payments and billing (Stripe, Paddle, PayPal, Braintree)",
            include=_dims(
                ["stripe", "paddle", "paypal", "braintree"],
                ["service", "route", "webhook"],
                ["typed", "secure", "basic"],
                ["ts", "js"],
            ),
        ),
        SpikePack(
            "search",
            "Full-text search (Elasticsearch, OpenSearch, MeiliSearch, Typesense, Algolia)",
            include=_dims(
                ["elasticsearch", "opensearch", "meilisearch", "typesense", "algolia"],
                ["client", "service", "adapter"],
                ["typed", "basic"],
                ["ts"],
            ),
        ),
        SpikePack(
            "storage",
            "Object storage and uploads (S3, GCS, Azure Blob, MinIO, Cloudinary, UploadThing)",
            include=_dims(
                ["s3", "gcs", "azure-blob", "minio", "cloudinary", "uploadthing"],
                ["adapter", "service", "client", "route"],
                ["typed", "secure", "basic"],
                ["ts"],
            ),
        ),
        SpikePack(
            "monitoring",
            "Monitoring, APM and logging (Sentry, PostHog, Datadog, New Relic, Prometheus, Pino, Winston)",
            include=_dims(
                ["sentry", "posthog", "datadog", "newrelic", "prometheus", "pino", "winston"],
                ["middleware", "service", "config", "adapter"],
                ["typed", "basic", "secure"],
                ["ts"],
            ),
        ),
        SpikePack(
            "flow-tree-starter",
            "ReactFlow + shadcn tree view starter (UI, server, schema, bridge)",
            include=_dims(
                ["reactflow", "shadcn-tree-view"],
                ["component", "route", "schema", "adapter", "example"],
                ["typed", "advanced", "testing"],
                ["ts", "js", "py"],
            ),
        ),
        SpikePack(
            "flow-tree-ops",
            "Flow/tree operations (secure, realtime, adapters)",
            include=_dims(
                ["reactflow", "shadcn-tree-view"],
                ["route", "adapter", "service", "listener"],
                ["typed", "secure", "advanced", "testing"],
                ["ts", "js", "py"],
            ),
        ),
    )
}


def parse_generated_like_id(spike_id: str) -> SpikeTuple | None:
    """Decode any generated-shaped id, prefixed or not; None if it does not fit."""
    m = GENERATED_LIKE_RE.match(spike_id)
    if not m:
        return None
    return SpikeTuple(*m.groups())


def get_pack(name: str) -> SpikePack | None:
    return SPIKE_PACKS.get(name)


def filter_ids_by_pack(ids: Iterable[str], pack_name: str) -> list[str]:
    """Ids accepted by the named pack; unknown packs accept nothing."""
    pack = SPIKE_PACKS.get(pack_name)
    if pack is None:
        return []
    return [i for i in ids if pack.accepts(i)]


def list_packs() -> list[dict[str, str]]:
    return [{"key": k, "name": p.name, "description": p.description} for k, p in SPIKE_PACKS.items()]
