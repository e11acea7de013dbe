# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""
Trigger Index
=============

In-memory inverted index of trigger keywords for fast lookup.

Maps every normalized trigger token to the set of skill ids declaring it,
giving O(1) average lookup per query token. The index is derived entirely
from a Registry and rebuilt whenever the registry is replaced.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from types import MappingProxyType

from skill_router.models import normalize_trigger
from skill_router.registry.skill_registry import Registry

# Tokens made of alphanumeric runs joined by separators, e.g. "api-key"
_COMPOUND_RE = re.compile(r"^[^\W_]+(?:[-_/.][^\W_]+)+$")

_EMPTY: frozenset[str] = frozenset()


class TriggerIndex:
    """
    Inverted index of trigger token -> skill ids.

    Instances are immutable once built; use ``TriggerIndex.build`` to derive
    a new index from a registry.
    """

    __slots__ = ("_index", "_compound_tokens")

    def __init__(self, index: dict[str, frozenset[str]] | None = None):
        self._index = MappingProxyType(dict(index or {}))
        self._compound_tokens = frozenset(
            token for token in self._index if _COMPOUND_RE.match(token)
        )

    @classmethod
    def build(cls, registry: Registry) -> TriggerIndex:
        """
        Build the inverted index from a registry.

        Args:
            registry: Loaded skill registry

        Returns:
            TriggerIndex covering every trigger of every skill
        """
        index: dict[str, set[str]] = {}
        for skill_id, descriptor in registry.items():
            for trigger in descriptor.triggers:
                token = normalize_trigger(trigger)
                if not token:
                    continue
                index.setdefault(token, set()).add(skill_id)
        return cls({token: frozenset(ids) for token, ids in index.items()})

    def lookup(self, token: str) -> frozenset[str]:
        """
        Find skills declaring an exact trigger token.

        Args:
            token: Normalized query token

        Returns:
            Skill ids whose trigger set contains the token (empty on miss)
        """
        return self._index.get(token, _EMPTY)

    def __contains__(self, token: object) -> bool:
        return token in self._index

    def __iter__(self) -> Iterator[str]:
        return iter(self._index)

    def __len__(self) -> int:
        return len(self._index)

    def items(self):
        return self._index.items()

    @property
    def vocabulary(self) -> frozenset[str]:
        """All indexed trigger tokens."""
        return frozenset(self._index)

    @property
    def compound_tokens(self) -> frozenset[str]:
        """Indexed tokens that join alphanumeric runs with separators."""
        return self._compound_tokens

    def stats(self) -> dict[str, int]:
        """
        Get index statistics.

        Returns:
            Dictionary with index statistics
        """
        return {
            "total_tokens": len(self._index),
            "compound_tokens": len(self._compound_tokens),
            "shared_tokens": sum(1 for ids in self._index.values() if len(ids) > 1),
        }
