# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Result emission: structured and human-readable forms of a RankedResponse."""

from __future__ import annotations

import json
from typing import Any

from rich.table import Table

from skill_router.models import RankedResponse
from skill_router.registry.skill_registry import Registry
from skill_router.routing.selector import EXPLICIT_OVERRIDE_SCORE


def emit(response: RankedResponse) -> list[dict[str, Any]]:
    """
    Serialize a response for callers.

    Never fails; an empty response serializes to an empty list.

    Returns:
        One ``{"skillId", "score", "matchedTriggers"}`` dict per result, in rank order
    """
    return [
        {
            "skillId": result.skill_id,
            "score": result.score,
            "matchedTriggers": list(result.matched_triggers),
        }
        for result in response.results
    ]


def emit_json(response: RankedResponse, indent: int | None = 2) -> str:
    return json.dumps(emit(response), indent=indent)


def _format_score(score: float) -> str:
    if score == EXPLICIT_OVERRIDE_SCORE:
        return "explicit"
    return f"{score:.2f}"


def render_table(response: RankedResponse, registry: Registry | None = None) -> Table:
    """Build a rich table of ranked results for terminal output."""
    table = Table(title=f"Matched Skills ({len(response)} results)")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Skill", style="cyan")
    table.add_column("Name", style="blue")
    table.add_column("Score", justify="right", style="green")
    table.add_column("Matched Triggers")

    for rank, result in enumerate(response.results, 1):
        descriptor = registry.get(result.skill_id) if registry is not None else None
        table.add_row(
            str(rank),
            result.skill_id,
            descriptor.display_name if descriptor is not None else "",
            _format_score(result.score),
            ", ".join(result.matched_triggers) or "-",
        )
    return table
