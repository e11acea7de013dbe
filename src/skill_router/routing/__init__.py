# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Routing pipeline: trigger index, normalizer, scorer, selector, emitter."""

from __future__ import annotations

from .emitter import emit, emit_json, render_table
from .normalizer import QueryNormalizer, normalize
from .router import RouterState, SkillRouter
from .scorer import STOPWORDS, Scorer
from .selector import EXPLICIT_OVERRIDE_SCORE, select
from .trigger_index import TriggerIndex

__all__ = [
    "EXPLICIT_OVERRIDE_SCORE",
    "QueryNormalizer",
    "RouterState",
    "STOPWORDS",
    "Scorer",
    "SkillRouter",
    "TriggerIndex",
    "emit",
    "emit_json",
    "normalize",
    "render_table",
    "select",
]
