# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Selection: threshold, ranking, tie-break and explicit override."""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable

from skill_router.models import MatchResult, RankedResponse
from skill_router.registry.skill_registry import Registry

logger = logging.getLogger(__name__)

# Synthetic score of an explicitly requested skill (largest finite float,
# so it survives JSON serialization)
EXPLICIT_OVERRIDE_SCORE = sys.float_info.max


def _rank_key(result: MatchResult, registry: Registry) -> tuple[float, int, str]:
    # score desc, priority desc, id asc
    return (-result.score, -registry.priority_of(result.skill_id), result.skill_id)


def select(
    results: Iterable[MatchResult],
    registry: Registry,
    limit: int | None = None,
    threshold: float = 0.0,
    explicit_override_id: str | None = None,
) -> RankedResponse:
    """
    Rank match results into the response returned to callers.

    Args:
        results: Scorer output (any order)
        registry: Registry used for override lookup and priorities
        limit: Maximum number of results; None means unbounded
        threshold: Minimum score to qualify (results with score < threshold
            are dropped; zero scores never qualify)
        explicit_override_id: Skill explicitly requested by the user

    Returns:
        RankedResponse; empty when nothing qualifies
    """
    if explicit_override_id:
        if explicit_override_id in registry:
            logger.debug(
                f"Explicit skill request: {explicit_override_id}",
                extra={"skill_id": explicit_override_id},
            )
            return RankedResponse(
                results=(
                    MatchResult(
                        skill_id=explicit_override_id,
                        score=EXPLICIT_OVERRIDE_SCORE,
                    ),
                )
            )
        logger.info(
            f"Unknown explicit skill '{explicit_override_id}', falling back to scoring",
            extra={"skill_id": explicit_override_id},
        )

    qualified = [r for r in results if r.score > 0 and r.score >= threshold]
    qualified.sort(key=lambda r: _rank_key(r, registry))

    if limit is not None:
        qualified = qualified[: max(limit, 0)]

    return RankedResponse(results=tuple(qualified))
