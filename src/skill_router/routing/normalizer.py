# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Query normalization: raw request text -> canonical token sequence."""

from __future__ import annotations

import re
from collections.abc import Collection

from skill_router.models import Query
from skill_router.routing.trigger_index import TriggerIndex

# Alphanumeric runs, optionally joined by single separators ("api-key", "ci/cd")
_SEGMENT_RE = re.compile(r"[^\W_]+(?:[-_/.][^\W_]+)*")
_SEPARATOR_RE = re.compile(r"([-_/.])")


def _split_segment(segment: str, compound_tokens: Collection[str]) -> list[str]:
    """
    Split a separator-joined segment, keeping known compounds intact.

    At each position the longest run that is a known compound trigger is
    emitted as one token; anything else falls back to its alphanumeric parts.
    """
    pieces = _SEPARATOR_RE.split(segment)
    words, separators = pieces[0::2], pieces[1::2]
    if len(words) == 1 or not compound_tokens:
        return words

    tokens: list[str] = []
    i = 0
    while i < len(words):
        matched_end = None
        candidate = words[i]
        for end in range(len(words) - 1, i, -1):
            joined = words[i] + "".join(
                separators[k] + words[k + 1] for k in range(i, end)
            )
            if joined in compound_tokens:
                matched_end, candidate = end, joined
                break
        tokens.append(candidate)
        i = (matched_end if matched_end is not None else i) + 1
    return tokens


def normalize(
    raw_query: object, compound_tokens: Collection[str] = frozenset()
) -> tuple[str, ...]:
    """
    Convert raw query text into normalized tokens.

    Lowercases, trims, and splits on non-alphanumeric boundaries. A
    hyphenated (or otherwise separator-joined) identifier such as ``api-key``
    stays a single token when it appears verbatim in ``compound_tokens``.

    Args:
        raw_query: User request text; non-string input yields no tokens
        compound_tokens: Known separator-joined trigger tokens

    Returns:
        Tuple of tokens; empty for empty or whitespace-only input
    """
    if not isinstance(raw_query, str):
        return ()
    text = raw_query.strip().casefold()
    if not text:
        return ()

    tokens: list[str] = []
    for match in _SEGMENT_RE.finditer(text):
        tokens.extend(_split_segment(match.group(0), compound_tokens))
    return tuple(t for t in tokens if t)


class QueryNormalizer:
    """Normalizer bound to the compound tokens of one trigger index."""

    __slots__ = ("compound_tokens",)

    def __init__(self, compound_tokens: Collection[str] = frozenset()):
        self.compound_tokens = frozenset(compound_tokens)

    @classmethod
    def for_index(cls, index: TriggerIndex) -> QueryNormalizer:
        return cls(index.compound_tokens)

    def normalize(self, raw_query: object) -> tuple[str, ...]:
        return normalize(raw_query, self.compound_tokens)

    def to_query(self, raw_query: object) -> Query:
        raw = raw_query if isinstance(raw_query, str) else ""
        return Query(raw=raw, tokens=self.normalize(raw_query))
