# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Skill registry: immutable descriptor collection, loaders and document linter."""

from __future__ import annotations

from .lint import LintIssue, lint_registry, lint_skill_document, lint_skill_tree
from .loader import (
    load_registry,
    load_registry_dir,
    load_registry_file,
    load_registry_path,
    parse_record,
    split_frontmatter,
)
from .skill_registry import Registry

__all__ = [
    "LintIssue",
    "Registry",
    "lint_registry",
    "lint_skill_document",
    "lint_skill_tree",
    "load_registry",
    "load_registry_dir",
    "load_registry_file",
    "load_registry_path",
    "parse_record",
    "split_frontmatter",
]
