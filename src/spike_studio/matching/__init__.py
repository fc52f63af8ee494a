"""Task-to-spike matching: tokenization, scoring, aliases and selection."""

from spike_studio.matching.aliases import AliasResolver
from spike_studio.matching.scoring import build_haystack, score_match, score_tokens
from spike_studio.matching.selector import Selection, SpikeSelector
from spike_studio.matching.tokenizer import tokenize

__all__ = [
    "AliasResolver",
    "Selection",
    "SpikeSelector",
    "build_haystack",
    "score_match",
    "score_tokens",
    "tokenize",
]
