# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Entry point for ``python -m skill_router``."""

from __future__ import annotations

from skill_router.cli.main import main

if __name__ == "__main__":
    main()
