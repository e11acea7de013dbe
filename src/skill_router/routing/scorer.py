# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""
Scorer
======

Computes a match score per candidate skill from normalized query tokens.

Signals (weights configurable, defaults in parentheses):
1. Exact trigger match (3.0) - query token equals a trigger token
2. Partial trigger match (1.0) - query token is a substring of a trigger
   token or vice versa, lengths differ
3. Description overlap (0.5) - query token appears as a whole word in the
   skill description; at most once per skill

A skill's score is the sum of all signals. Query tokens are deduplicated,
so each trigger earns the exact weight at most once, and the partial
weight is also capped at once per trigger. A trigger hit exactly by one
token and partially by another earns both. Skills become candidates only
through trigger hits; the description signal never surfaces a skill on
its own. Stopwords and tokens shorter than ``min_partial_length`` drive
neither the partial nor the description signal.
"""

from __future__ import annotations

import re
from collections.abc import Collection, Sequence

from skill_router.models import MatchResult, ScoringWeights
from skill_router.registry.skill_registry import Registry
from skill_router.routing.trigger_index import TriggerIndex

DEFAULT_MIN_PARTIAL_LENGTH = 3

# Common stopwords; never used for partial or description matching
STOPWORDS: frozenset[str] = frozenset(
    {
        "the",
        "a",
        "an",
        "and",
        "or",
        "but",
        "in",
        "on",
        "at",
        "to",
        "for",
        "of",
        "with",
        "by",
        "from",
        "as",
        "is",
        "was",
        "are",
        "were",
        "been",
        "be",
        "have",
        "has",
        "had",
        "do",
        "does",
        "did",
        "will",
        "would",
        "should",
        "could",
        "may",
        "might",
        "must",
        "can",
        "this",
        "that",
        "these",
        "those",
        "i",
        "you",
        "he",
        "she",
        "it",
        "we",
        "they",
        "me",
        "him",
        "her",
        "us",
        "them",
        "my",
        "your",
        "his",
        "its",
        "our",
        "their",
        "how",
        "what",
        "why",
        "when",
        "where",
        "which",
        "who",
    }
)


class Scorer:
    """
    Trigger and description scoring over a TriggerIndex.

    ``score`` is a pure function of its inputs: it never mutates the index
    or registry and its result does not depend on registration order.
    """

    def __init__(
        self,
        weights: ScoringWeights | None = None,
        min_partial_length: int = DEFAULT_MIN_PARTIAL_LENGTH,
        stopwords: Collection[str] = STOPWORDS,
    ):
        """
        Initialize scorer.

        Args:
            weights: Signal weights (defaults: exact 3.0, partial 1.0,
                description 0.5)
            min_partial_length: Shortest token/trigger allowed to take part
                in a partial match
            stopwords: Tokens ignored by the partial and description signals
        """
        self.weights = weights or ScoringWeights()
        self.min_partial_length = max(1, min_partial_length)
        self.stopwords = frozenset(stopwords)

    def _is_content_token(self, token: str) -> bool:
        if len(token) < self.min_partial_length:
            return False
        return token not in self.stopwords

    def _partial_match(self, token: str, trigger: str) -> bool:
        if len(token) == len(trigger):
            return False
        if min(len(token), len(trigger)) < self.min_partial_length:
            return False
        return token in trigger or trigger in token

    @staticmethod
    def _word_in_text(token: str, text: str) -> bool:
        """Whole-word containment; prevents "auth" matching "author"."""
        pattern = r"\b" + re.escape(token) + r"\b"
        return re.search(pattern, text) is not None

    def score(
        self,
        tokens: Sequence[str],
        index: TriggerIndex,
        registry: Registry,
    ) -> list[MatchResult]:
        """
        Score every candidate skill for a query.

        Args:
            tokens: Normalized query tokens
            index: Trigger index built from ``registry``
            registry: Registry the index was built from

        Returns:
            One MatchResult per skill with a positive score, sorted by id
            (callers must not rely on any particular order)
        """
        exact_weight = self.weights.exact_weight
        partial_weight = self.weights.partial_weight
        description_weight = self.weights.description_weight

        distinct = list(dict.fromkeys(t for t in tokens if t))
        if not distinct:
            return []

        # skill id -> {trigger: [exact, partial]}, insertion order = first hit
        credits: dict[str, dict[str, list[float]]] = {}

        for token in distinct:
            if exact_weight > 0:
                for skill_id in index.lookup(token):
                    tally = credits.setdefault(skill_id, {})
                    tally.setdefault(token, [0.0, 0.0])[0] = exact_weight

            if partial_weight > 0 and self._is_content_token(token):
                for trigger, skill_ids in index.items():
                    if self._partial_match(token, trigger):
                        for skill_id in skill_ids:
                            tally = credits.setdefault(skill_id, {})
                            tally.setdefault(trigger, [0.0, 0.0])[1] = partial_weight

        content_tokens = [t for t in distinct if self._is_content_token(t)]
        results: list[MatchResult] = []

        for skill_id in sorted(credits):
            descriptor = registry.get(skill_id)
            if descriptor is None:
                continue

            matched = [t for t, pair in credits[skill_id].items() if sum(pair) > 0]
            total = sum(sum(credits[skill_id][t]) for t in matched)

            if description_weight > 0 and descriptor.description:
                description = descriptor.description.casefold()
                if any(self._word_in_text(t, description) for t in content_tokens):
                    total += description_weight

            if total > 0:
                results.append(
                    MatchResult(
                        skill_id=skill_id,
                        score=total,
                        matched_triggers=tuple(matched),
                    )
                )

        return results
