"""Task text tokenization with keyword hints.

Text is lowercased and split on separators, keeping ``@ # : + . - _`` inside
tokens so scoped package names and version-like strings survive. A
declarative table of ``(pattern, canonical token)`` hints then unions in
canonical tokens for synonyms and Japanese phrasings.
"""

from __future__ import annotations

import re
from typing import Iterable

SPLIT_RE = re.compile(r"[^a-z0-9_@#:+.\-]+")

# Sentence punctuation that should not stick to the ends of a token
EDGE_CHARS = ".:"

# (pattern, canonical token). Patterns are matched against the lowercased text
# with ASCII word boundaries, so Japanese text adjoining a keyword still matches.
KEYWORD_HINTS: tuple[tuple[str, str], ...] = (
    # languages
    (r"\btypescript\b|\btsx?\b", "ts"),
    (r"\bjavascript\b|\bnode(?:\.?js)?\b", "js"),
    (r"\bpython\b|パイソン", "py"),
    (r"\bgolang\b", "go"),
    (r"\brust\b", "rs"),
    (r"\bkotlin\b", "kt"),
    # styles
    (r"\bsecur(?:e|ity)\b|\bsafe(?:ty)?\b|\bhardened?\b|セキュア|セキュリティ|安全", "secure"),
    (r"\btyped\b|\btype[- ]?safe\b|\bstrongly typed\b|型付き|型安全|型", "typed"),
    (r"\btests?\b|\btesting\b|\bspecs?\b|テスト", "testing"),
    (r"\badvanced\b|\bproduction\b|高度|応用|本番", "advanced"),
    (r"\bminimal\b|\bsimple\b|\bbasic\b|最小|シンプル|基本", "basic"),
    # patterns
    (r"\bplugins?\b|プラグイン", "plugin"),
    (r"\broutes?\b|\bendpoints?\b|\bapi\b|ルート|ルーティング|エンドポイント", "route"),
    (r"\bworkers?\b|ワーカー", "worker"),
    (r"\blisteners?\b|リスナー", "listener"),
    (r"\bmiddlewares?\b|ミドルウェア", "middleware"),
    (r"\bcomponents?\b|コンポーネント", "component"),
    (r"\bhooks?\b|フック", "hook"),
    (r"\bwebhooks?\b|ウェブフック", "webhook"),
    (r"\bjobs?\b|\bqueues?\b|ジョブ|キュー", "job"),
    (r"\bconfig(?:uration)?\b|\bsettings\b|設定", "config"),
    (r"\bclients?\b|\bsdk\b|クライアント", "client"),
    (r"\bcrud\b|データベース", "crud"),
    (r"\bschemas?\b|スキーマ", "schema"),
    (r"\bservices?\b|サービス", "service"),
    (r"\bcontrollers?\b|コントローラ", "controller"),
    (r"\badapters?\b|アダプタ", "adapter"),
    (r"\bexamples?\b|\bdemo\b|サンプル", "example"),
    # libraries with common alternate spellings
    (r"\bnext\.?js\b", "nextjs"),
    (r"\bnext[- ]?auth\b", "next-auth"),
    (r"\belysia\b", "elysia"),
    (r"\bgithub actions\b", "github-actions"),
    (r"\bk8s\b", "kubernetes"),
    (r"\bpostgres(?:ql)?\b", "postgres"),
    (r"\bgql\b", "graphql"),
    # features
    (r"\brate[- ]?limit(?:s|ing|er)?\b|レート制限", "rate-limit"),
    (r"\bauth(?:entication|orization)?\b|認証|ログイン", "auth"),
)

_COMPILED_HINTS: tuple[tuple[re.Pattern[str], str], ...] = tuple(
    (re.compile(pattern, re.IGNORECASE | re.ASCII), token) for pattern, token in KEYWORD_HINTS
)


def compile_hints(
    hints: Iterable[tuple[str, str]],
) -> tuple[tuple[re.Pattern[str], str], ...]:
    """Compile a hint table the way the default table is compiled."""
    return tuple((re.compile(p, re.IGNORECASE | re.ASCII), t) for p, t in hints)


def split_words(text: str) -> set[str]:
    """Lowercase and split on separators, without hint expansion."""
    words = (w.strip(EDGE_CHARS) for w in SPLIT_RE.split(text.lower()))
    return {w for w in words if w}


def hint_tokens(
    text: str, hints: tuple[tuple[re.Pattern[str], str], ...] = _COMPILED_HINTS
) -> set[str]:
    """Canonical tokens whose hint pattern occurs in ``text``."""
    lowered = text.lower()
    return {token for pattern, token in hints if pattern.search(lowered)}


def tokenize(
    text: str, hints: tuple[tuple[re.Pattern[str], str], ...] = _COMPILED_HINTS
) -> set[str]:
    """Deduplicated token set: split words plus hint tokens."""
    if not text or not text.strip():
        return set()
    return split_words(text) | hint_tokens(text, hints)
