# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""CLI subpackage for the skill router.

Modules:
    main: ``skill-router`` command group (match, list, check)
"""

from __future__ import annotations

__all__ = ["main"]
