"""Bag-of-substrings match scoring.

A task token hits when it occurs anywhere in the template haystack, not
only as a whole word. Short tokens can therefore hit inside unrelated words.
"""

from __future__ import annotations

from typing import Collection

from spike_studio.matching.tokenizer import tokenize
from spike_studio.spikes.models import SpikeMetadata, SpikeSpec


def build_haystack(item: SpikeSpec | SpikeMetadata) -> str:
    """Lowercased id, name, stack, tags and description."""
    return " ".join(
        [
            item.id,
            item.name or "",
            " ".join(item.stack or []),
            " ".join(item.tags or []),
            item.description or "",
        ]
    ).lower()


def score_tokens(task_tokens: Collection[str], haystack: str) -> float:
    """Fraction of task tokens found as substrings of the haystack."""
    if not task_tokens:
        return 0.0
    hits = sum(1 for token in task_tokens if token in haystack)
    return hits / len(task_tokens)


def score_match(task: str, item: SpikeSpec | SpikeMetadata) -> float:
    """Score free task text against a spec or its metadata."""
    return score_tokens(tokenize(task), build_haystack(item))
