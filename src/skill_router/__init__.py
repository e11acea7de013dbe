# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Skill Router - keyword routing of natural-language requests to skill documents.

The router loads a registry of skill descriptors, indexes their trigger
keywords, and ranks the skills that best match a free-text request.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("skill-router")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"
