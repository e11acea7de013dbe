# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Pydantic v2 data models for the skill router.

* ``SkillDescriptor`` - one skill as loaded from a registry source.
* ``Query`` - a raw request and its normalized tokens.
* ``MatchResult`` - the score of one skill for one query.
* ``RankedResponse`` - the ordered, truncated list of results returned to callers.
* ``ScoringWeights`` - the weights of the three scoring signals.

All models are immutable (``frozen=True``) after construction.
"""

from __future__ import annotations

from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    StrictStr,
    field_validator,
    model_validator,
)


def normalize_trigger(trigger: str) -> str:
    """Case-fold and trim a trigger keyword."""
    return trigger.strip().casefold()


class SkillDescriptor(BaseModel):
    """A skill document as seen by the router.

    Attributes:
        id: Unique, stable identifier (kebab-case by convention).
        display_name: Human-readable name; defaults to ``id``.
        description: Free-text summary, used for keyword overlap scoring.
        triggers: Normalized trigger keywords. Case-insensitive, no duplicates,
            may be empty.
        related_skill_ids: Ordered ids of related skills (informational only).
        priority: Tie-break priority; higher wins.
        source_path: File the descriptor was loaded from, if any.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: StrictStr = Field(..., min_length=1)
    display_name: StrictStr = Field(default="", alias="displayName")
    description: StrictStr
    triggers: frozenset[str]
    related_skill_ids: tuple[str, ...] = Field(default=(), alias="relatedSkillIds")
    priority: StrictInt = 0
    source_path: str | None = Field(default=None, alias="sourcePath")

    @model_validator(mode="before")
    @classmethod
    def default_display_name(cls, data: Any) -> Any:
        """Fill ``display_name`` from ``id`` when the source omits it."""
        if isinstance(data, dict):
            name = data.get("displayName", data.get("display_name"))
            if name is None or (isinstance(name, str) and not name.strip()):
                data = {
                    k: v
                    for k, v in data.items()
                    if k not in ("displayName", "display_name")
                }
                data["displayName"] = data.get("id")
        return data

    @field_validator("id")
    @classmethod
    def id_must_not_be_blank(cls, v: str) -> str:
        """Reject ids made only of whitespace."""
        v = v.strip()
        if not v:
            msg = "id must not be empty"
            raise ValueError(msg)
        return v

    @field_validator("triggers", mode="before")
    @classmethod
    def normalize_triggers(cls, v: Any) -> frozenset[str]:
        """Case-fold and trim every trigger, rejecting empty strings."""
        if v is None:
            msg = "triggers must be a list (use [] for none)"
            raise ValueError(msg)
        if isinstance(v, str) or not isinstance(v, (list, tuple, set, frozenset)):
            msg = "triggers must be a list of strings"
            raise ValueError(msg)
        normalized = set()
        for trigger in v:
            if not isinstance(trigger, str):
                msg = f"trigger {trigger!r} is not a string"
                raise ValueError(msg)
            token = normalize_trigger(trigger)
            if not token:
                msg = "triggers must not contain empty strings"
                raise ValueError(msg)
            normalized.add(token)
        return frozenset(normalized)

    @field_validator("related_skill_ids", mode="before")
    @classmethod
    def coerce_related(cls, v: Any) -> Any:
        if v is None:
            return ()
        if isinstance(v, str):
            msg = "relatedSkillIds must be a list of ids"
            raise ValueError(msg)
        return v


class Query(BaseModel):
    """A single routing request and its normalized tokens."""

    model_config = ConfigDict(frozen=True)

    raw: str
    tokens: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.tokens


class MatchResult(BaseModel):
    """Score of one skill for one query.

    Attributes:
        skill_id: Id of the matched skill.
        score: Sum of all signal contributions (non-negative).
        matched_triggers: Trigger tokens that contributed to the score, in the
            order the query first hit them.
    """

    model_config = ConfigDict(frozen=True)

    skill_id: str
    score: float = Field(..., ge=0.0)
    matched_triggers: tuple[str, ...] = ()


class RankedResponse(BaseModel):
    """Ordered match results returned to the caller.

    An empty response is a valid outcome meaning "no confident match"; callers
    are expected to fall back to a default skill or ask for clarification.
    """

    model_config = ConfigDict(frozen=True)

    results: tuple[MatchResult, ...] = ()

    def __len__(self) -> int:
        return len(self.results)

    @property
    def is_empty(self) -> bool:
        return not self.results

    @property
    def top(self) -> MatchResult | None:
        return self.results[0] if self.results else None

    def skill_ids(self) -> list[str]:
        return [r.skill_id for r in self.results]


class ScoringWeights(BaseModel):
    """Weights of the scoring signals. A weight of 0 disables that signal."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    exact_weight: float = Field(default=3.0, ge=0.0, alias="exactWeight")
    partial_weight: float = Field(default=1.0, ge=0.0, alias="partialWeight")
    description_weight: float = Field(default=0.5, ge=0.0, alias="descriptionWeight")


__all__ = [
    "MatchResult",
    "Query",
    "RankedResponse",
    "ScoringWeights",
    "SkillDescriptor",
    "normalize_trigger",
]
