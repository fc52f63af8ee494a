"""Alias shortcuts from common phrasings to known spike ids.

Aliases bypass statistical scoring: matched ids are injected into the
candidate pool with a score boost but still go through full-definition
re-scoring before selection.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Mapping

from spike_studio.config.logging import get_logger

logger = get_logger(__name__)

# (pattern, target id); patterns run against the lowercased task text
ALIAS_PATTERNS: tuple[tuple[str, str], ...] = (
    (r"elysia.*(?:worker|ワーカー)|(?:worker|ワーカー).*elysia", "strike-bun-elysia-worker-typed-ts"),
    (r"elysia.*(?:listener|リスナー)", "strike-bun-elysia-listener-basic-ts"),
    (
        r"elysia.*(?:plugin|プラグイン).*(?:secure|セキュア|helmet|rate-?limit)"
        r"|(?:secure|セキュア).*elysia.*(?:plugin|プラグイン)",
        "strike-bun-elysia-plugin-secure-ts",
    ),
    (r"next\.?js.*(?:middleware|ミドルウェア)", "strike-nextjs-middleware-typed-ts"),
    (r"next\.?js.*(?:\broute|\bapi\b|ルート)", "strike-nextjs-route-typed-ts"),
    (r"fastapi.*(?:secure|セキュア|auth|認証)", "strike-fastapi-route-secure-py"),
    (r"fastapi", "strike-fastapi-route-basic-py"),
    (r"(?<![a-z])react(?![a-z-]).*(?:\bhook|フック)", "strike-react-hook-typed-ts"),
    (r"(?<![a-z])react(?![a-z-]).*(?:component|コンポーネント)", "strike-react-component-typed-ts"),
    (r"prisma.*(?:crud|schema|スキーマ)", "strike-prisma-crud-typed-ts"),
    (r"stripe.*(?:webhook|ウェブフック)", "strike-stripe-webhook-secure-ts"),
    (r"express.*(?:\broute|endpoint|ルート)", "strike-express-route-basic-ts"),
    (r"(?<![a-z])line(?![a-z]).*(?:webhook|ウェブフック)", "strike-line-webhook-typed-ts"),
    (r"github[- ]actions", "strike-github-actions-config-basic-ts"),
)

# Short names usable as ``[alias: next-mw-ts]`` inside task text
SHORT_ALIASES: dict[str, str] = {
    "next-mw-ts": "strike-nextjs-middleware-typed-ts",
    "next-route-ts": "strike-nextjs-route-typed-ts",
    "elysia-worker-ts": "strike-bun-elysia-worker-typed-ts",
    "elysia-plugin-secure-ts": "strike-bun-elysia-plugin-secure-ts",
    "react-hook-ts": "strike-react-hook-typed-ts",
    "react-comp-ts": "strike-react-component-typed-ts",
    "fastapi-secure-py": "strike-fastapi-route-secure-py",
    "prisma-crud-ts": "strike-prisma-crud-typed-ts",
    "stripe-webhook-ts": "strike-stripe-webhook-secure-ts",
    "gha-ci": "strike-github-actions-config-basic-ts",
}

SHORT_ALIAS_RE = re.compile(r"\[?\balias\s*[:=]\s*([a-z0-9_-]+)\]?", re.IGNORECASE)


@dataclass(frozen=True)
class AliasRule:
    pattern: re.Pattern[str]
    target: str


class AliasResolver:
    """Map task text to spike ids via a static alias table."""

    def __init__(
        self,
        patterns: Iterable[tuple[str, str]] = ALIAS_PATTERNS,
        short_aliases: Mapping[str, str] = SHORT_ALIASES,
    ):
        self.rules = tuple(AliasRule(re.compile(p, re.IGNORECASE), t) for p, t in patterns)
        self.short_aliases = {k.lower(): v for k, v in short_aliases.items()}

    def resolve(self, text: str) -> list[str]:
        """Alias targets matching ``text``, de-duplicated in table order.

        Explicit short aliases come first, then pattern hits.
        """
        if not text:
            return []
        lowered = text.lower()
        targets: list[str] = []
        for name in SHORT_ALIAS_RE.findall(lowered):
            target = self.short_aliases.get(name)
            if target is None:
                logger.debug("Unknown short alias: %s", name)
            elif target not in targets:
                targets.append(target)
        for rule in self.rules:
            if rule.pattern.search(lowered) and rule.target not in targets:
                targets.append(rule.target)
        return targets
