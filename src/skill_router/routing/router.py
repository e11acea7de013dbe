# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""
Skill Router
============

Main orchestration component that ties the routing pipeline together.

Flow:
1. Read the current (registry, index) state - one reference, no lock
2. Normalize the request into tokens
3. Score candidate skills against the trigger index
4. Select: explicit override, threshold, rank, tie-break, truncate

The router holds exactly one shared mutable reference: the current
``RouterState``. Reloads build a complete new state off to the side and
swap the reference only once it is fully built, so in-flight queries see
either the old or the new state, never a partial one. A failed reload
leaves the previous state active.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Collection, Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from skill_router.errors import (
    EnumSkillRouterErrorCode,
    RegistryLoadError,
    SkillRouterError,
)
from skill_router.models import RankedResponse, ScoringWeights
from skill_router.registry.loader import load_registry, load_registry_path
from skill_router.registry.skill_registry import Registry
from skill_router.routing.normalizer import QueryNormalizer
from skill_router.routing.scorer import DEFAULT_MIN_PARTIAL_LENGTH, STOPWORDS, Scorer
from skill_router.routing.selector import select
from skill_router.routing.trigger_index import TriggerIndex

if TYPE_CHECKING:
    from skill_router.config.settings import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RouterState:
    """
    Immutable registry/index pair published by the router.

    Attributes:
        registry: Loaded skill registry
        index: Trigger index derived from ``registry``
        normalizer: Query normalizer bound to the index's compound tokens
        loaded: False only for the initial, never-loaded state
    """

    registry: Registry
    index: TriggerIndex
    normalizer: QueryNormalizer
    loaded: bool = True

    @classmethod
    def build(cls, registry: Registry, loaded: bool = True) -> RouterState:
        index = TriggerIndex.build(registry)
        return cls(
            registry=registry,
            index=index,
            normalizer=QueryNormalizer.for_index(index),
            loaded=loaded,
        )


_UNLOADED = RouterState.build(Registry.empty(), loaded=False)


class SkillRouter:
    """
    Skill routing over an atomically reloadable registry.

    Matching is lock-free and never mutates shared state; any number of
    ``route`` calls may run concurrently with each other and with reloads.
    """

    def __init__(
        self,
        registry: Registry | None = None,
        weights: ScoringWeights | None = None,
        min_partial_length: int = DEFAULT_MIN_PARTIAL_LENGTH,
        stopwords: Collection[str] = STOPWORDS,
    ):
        """
        Initialize router.

        Args:
            registry: Initial registry; the router starts unloaded when None
            weights: Scoring weights (defaults: 3.0 / 1.0 / 0.5)
            min_partial_length: Shortest token taking part in partial matches
            stopwords: Tokens ignored by partial and description signals
        """
        self.scorer = Scorer(
            weights=weights,
            min_partial_length=min_partial_length,
            stopwords=stopwords,
        )
        self._swap_lock = threading.Lock()
        self._state = RouterState.build(registry) if registry is not None else _UNLOADED

    @classmethod
    def from_path(cls, path: str | Path, **kwargs: Any) -> SkillRouter:
        """Create a router loaded from a registry file or directory."""
        return cls(load_registry_path(path), **kwargs)

    @classmethod
    def from_settings(cls, settings: Settings) -> SkillRouter:
        """
        Create a router from application settings.

        Raises:
            RegistryLoadError: If no registry path is configured or it
                cannot be loaded
        """
        if not settings.skill_registry_path:
            raise RegistryLoadError(
                "<unset>",
                "no registry configured (set SKILL_REGISTRY_PATH or pass --registry)",
                code=EnumSkillRouterErrorCode.REGISTRY_NOT_CONFIGURED,
            )
        return cls.from_path(
            settings.skill_registry_path,
            weights=settings.scoring_weights(),
            min_partial_length=settings.min_partial_length,
        )

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def state(self) -> RouterState:
        return self._state

    @property
    def is_loaded(self) -> bool:
        return self._state.loaded

    @property
    def registry(self) -> Registry:
        return self._state.registry

    @property
    def index(self) -> TriggerIndex:
        return self._state.index

    def load(self, registry: Registry) -> RouterState:
        """
        Publish a registry, replacing the current state atomically.

        The index is built before the lock is taken; the lock only guards
        the reference swap.
        """
        new_state = RouterState.build(registry)
        with self._swap_lock:
            previous, self._state = self._state, new_state

        logger.info(
            "Skill registry published",
            extra={
                "skill_count": len(registry),
                "previous_skill_count": len(previous.registry),
                **new_state.index.stats(),
            },
        )
        return new_state

    def reload_from_path(self, path: str | Path) -> RouterState:
        """
        Reload the registry from a file or directory.

        Raises:
            SkillRouterError: If loading fails; the previous state stays active
        """
        try:
            registry = load_registry_path(path)
        except SkillRouterError as e:
            logger.error(
                f"Registry reload rejected, keeping previous registry: {e}",
                extra={"registry_path": str(path), "error_code": e.code.value},
            )
            raise
        return self.load(registry)

    def reload_from_records(self, records: Iterable[Any]) -> RouterState:
        """
        Reload the registry from raw records.

        Raises:
            SkillRouterError: If loading fails; the previous state stays active
        """
        try:
            registry = load_registry(records)
        except SkillRouterError as e:
            logger.error(
                f"Registry reload rejected, keeping previous registry: {e}",
                extra={"error_code": e.code.value},
            )
            raise
        return self.load(registry)

    # -------------------------------------------------------------------------
    # Routing
    # -------------------------------------------------------------------------

    def route(
        self,
        query: object,
        limit: int | None = None,
        threshold: float = 0.0,
        explicit_override_id: str | None = None,
    ) -> RankedResponse:
        """
        Route a request to the best matching skill(s).

        Args:
            query: Raw request text
            limit: Maximum number of results (None = unbounded)
            threshold: Minimum score to qualify
            explicit_override_id: Skill explicitly named by the user; wins
                over scoring when it exists in the registry

        Returns:
            RankedResponse sorted by score, priority, then id. Empty when
            nothing qualifies; never raises for empty or malformed input.
        """
        state = self._state
        try:
            tokens = state.normalizer.normalize(query)
            results = self.scorer.score(tokens, state.index, state.registry)
            response = select(
                results,
                state.registry,
                limit=limit,
                threshold=threshold,
                explicit_override_id=explicit_override_id,
            )
        except Exception as e:
            logger.error(
                "Routing failed",
                exc_info=True,
                extra={"error_type": type(e).__name__},
            )
            # Return empty response on failure (graceful degradation)
            return RankedResponse()

        logger.debug(
            f"Routed request to {len(response)} skills",
            extra={
                "tokens": list(tokens),
                "candidates": len(results),
                "top_skill": response.top.skill_id if response.top else "none",
            },
        )
        return response
