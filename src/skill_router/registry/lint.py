# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Consistency checks for skill documents and loaded registries.

Document checks (per ``SKILL.md``):

* frontmatter present and parseable
* description at most 200 characters, written without Han characters and
  quoted when it fits on one line
* a dedicated ``triggers`` field rather than trigger keywords listed in the
  description
* the standard section headings (``## Core Question``, ``## Review Checklist``,
  ``## Verification Commands``, ``## Related Skills``)

Registry checks:

* ``related_skill_ids`` resolve to registered skills
* every skill declares at least one trigger (otherwise it is only reachable
  through an explicit override)

Content problems are reported as ``LintIssue`` records and never raised.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from enum import Enum
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict

from skill_router.registry.loader import (
    SKILL_DOCUMENT_NAME,
    frontmatter_block,
    split_frontmatter,
)
from skill_router.registry.skill_registry import Registry

MAX_DESCRIPTION_LENGTH = 200

REQUIRED_SECTIONS: tuple[str, ...] = (
    "Core Question",
    "Review Checklist",
    "Verification Commands",
    "Related Skills",
)

_HAN_RE = re.compile(r"[\u3400-\u4dbf\u4e00-\u9fff\uf900-\ufaff]")
_TRIGGER_LABEL_RE = re.compile(r"触发词|\btriggers?[ \t]*[:：]", re.IGNORECASE)
_DESCRIPTION_LINE_RE = re.compile(
    r"""^(["']?)description\1[ \t]*:[ \t]*(?P<value>.*)$""", re.MULTILINE
)


class LintCode(str, Enum):
    """Kinds of lint findings."""

    UNREADABLE = "unreadable"
    MISSING_FRONTMATTER = "missing-frontmatter"
    INVALID_FRONTMATTER = "invalid-frontmatter"
    DESCRIPTION_TOO_LONG = "description-too-long"
    DESCRIPTION_NOT_ENGLISH = "description-not-english"
    UNQUOTED_DESCRIPTION = "unquoted-description"
    MISSING_TRIGGERS = "missing-triggers"
    TRIGGERS_IN_DESCRIPTION = "triggers-in-description"
    MISSING_SECTION = "missing-section"
    EMPTY_TRIGGERS = "empty-triggers"
    UNKNOWN_RELATED_SKILL = "unknown-related-skill"


class LintIssue(BaseModel):
    """One problem found in a skill document or registry."""

    model_config = ConfigDict(frozen=True)

    skill_id: str
    code: LintCode
    message: str
    path: str | None = None


def _section_present(body: str, section: str) -> bool:
    pattern = r"^#{2,}\s*" + re.escape(section) + r"\b"
    return re.search(pattern, body, re.IGNORECASE | re.MULTILINE) is not None


def _is_unquoted_single_line(block: str) -> bool:
    """True when ``description:`` holds a plain scalar on one line."""
    match = _DESCRIPTION_LINE_RE.search(block)
    if match is None:
        return False
    value = match.group("value").strip()
    if not value or value[0] in "\"'|>":
        return False
    next_line = block[match.end() + 1 :].partition("\n")[0]
    return not next_line[:1].isspace()


def lint_skill_document(
    path: str | Path,
    required_sections: Sequence[str] = REQUIRED_SECTIONS,
) -> list[LintIssue]:
    """
    Check one ``SKILL.md`` document.

    Args:
        path: Path to the document
        required_sections: Section headings the body must contain

    Returns:
        Issues found, in check order (empty when the document is clean)
    """
    path = Path(path)
    skill_id = path.parent.name
    where = str(path)

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        return [
            LintIssue(
                skill_id=skill_id,
                code=LintCode.UNREADABLE,
                message=str(e),
                path=where,
            )
        ]

    try:
        frontmatter, body = split_frontmatter(text)
    except yaml.YAMLError as e:
        return [
            LintIssue(
                skill_id=skill_id,
                code=LintCode.INVALID_FRONTMATTER,
                message=f"frontmatter is not valid YAML: {e}",
                path=where,
            )
        ]

    issues: list[LintIssue] = []

    if frontmatter is None:
        issues.append(
            LintIssue(
                skill_id=skill_id,
                code=LintCode.MISSING_FRONTMATTER,
                message="document has no YAML frontmatter",
                path=where,
            )
        )
        frontmatter = {}
    elif not isinstance(frontmatter, dict):
        issues.append(
            LintIssue(
                skill_id=skill_id,
                code=LintCode.INVALID_FRONTMATTER,
                message="frontmatter is not a mapping",
                path=where,
            )
        )
        frontmatter = {}
    else:
        skill_id = str(frontmatter.get("id") or frontmatter.get("name") or skill_id)

    description = frontmatter.get("description")
    if isinstance(description, str):
        # Collapse folded/literal block whitespace before measuring
        flat = " ".join(description.split())
        if len(flat) > MAX_DESCRIPTION_LENGTH:
            issues.append(
                LintIssue(
                    skill_id=skill_id,
                    code=LintCode.DESCRIPTION_TOO_LONG,
                    message=(
                        f"description is {len(flat)} characters "
                        f"(max {MAX_DESCRIPTION_LENGTH})"
                    ),
                    path=where,
                )
            )
        if _HAN_RE.search(flat):
            issues.append(
                LintIssue(
                    skill_id=skill_id,
                    code=LintCode.DESCRIPTION_NOT_ENGLISH,
                    message="description contains Han characters",
                    path=where,
                )
            )
        if _is_unquoted_single_line(frontmatter_block(text) or ""):
            issues.append(
                LintIssue(
                    skill_id=skill_id,
                    code=LintCode.UNQUOTED_DESCRIPTION,
                    message="single-line description should be quoted",
                    path=where,
                )
            )

    if "triggers" not in frontmatter:
        issues.append(
            LintIssue(
                skill_id=skill_id,
                code=LintCode.MISSING_TRIGGERS,
                message="frontmatter has no 'triggers' field",
                path=where,
            )
        )
        if isinstance(description, str) and _TRIGGER_LABEL_RE.search(description):
            issues.append(
                LintIssue(
                    skill_id=skill_id,
                    code=LintCode.TRIGGERS_IN_DESCRIPTION,
                    message="trigger keywords are written into the description",
                    path=where,
                )
            )

    missing = [s for s in required_sections if not _section_present(body, s)]
    if missing:
        issues.append(
            LintIssue(
                skill_id=skill_id,
                code=LintCode.MISSING_SECTION,
                message=f"missing sections: {', '.join(missing)}",
                path=where,
            )
        )

    return issues


def lint_skill_tree(
    root: str | Path,
    required_sections: Sequence[str] = REQUIRED_SECTIONS,
) -> list[LintIssue]:
    """Check every ``SKILL.md`` under root, in path order."""
    root = Path(root)
    if root.is_file():
        return lint_skill_document(root, required_sections)

    issues: list[LintIssue] = []
    for path in sorted(root.rglob(SKILL_DOCUMENT_NAME)):
        issues.extend(lint_skill_document(path, required_sections))
    return issues


def lint_registry(registry: Registry) -> list[LintIssue]:
    """Check cross-skill consistency of a loaded registry."""
    issues: list[LintIssue] = []

    for descriptor in registry.values():
        if not descriptor.triggers:
            issues.append(
                LintIssue(
                    skill_id=descriptor.id,
                    code=LintCode.EMPTY_TRIGGERS,
                    message="skill declares no triggers",
                    path=descriptor.source_path,
                )
            )

    for skill_id, missing in registry.unknown_related_ids().items():
        issues.append(
            LintIssue(
                skill_id=skill_id,
                code=LintCode.UNKNOWN_RELATED_SKILL,
                message=f"related skills not in registry: {', '.join(missing)}",
                path=registry[skill_id].source_path,
            )
        )

    return issues
