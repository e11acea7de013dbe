# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Error codes and exception classes for the skill router.

Only load-time problems are modelled as exceptions. Query-time conditions
(empty query, zero matches, unknown override id) are ordinary empty or
single-item results and never raise.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class EnumSkillRouterErrorCode(str, Enum):
    """Error codes for skill router operations."""

    DUPLICATE_SKILL = "DUPLICATE_SKILL"
    MALFORMED_DESCRIPTOR = "MALFORMED_DESCRIPTOR"
    REGISTRY_LOAD_FAILED = "REGISTRY_LOAD_FAILED"
    REGISTRY_NOT_CONFIGURED = "REGISTRY_NOT_CONFIGURED"


class SkillRouterError(Exception):
    """Base exception for skill router operations.

    Attributes:
        code: Error code from EnumSkillRouterErrorCode
        message: Human-readable error message
        details: Additional error context
    """

    def __init__(
        self,
        code: EnumSkillRouterErrorCode,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(code={self.code}, message={self.message!r}, "
            f"details={self.details})"
        )


class DuplicateSkillError(SkillRouterError):
    """Two source records share the same skill id."""

    def __init__(self, skill_id: str) -> None:
        self.skill_id = skill_id
        super().__init__(
            EnumSkillRouterErrorCode.DUPLICATE_SKILL,
            f"Duplicate skill id: '{skill_id}'",
            details={"skill_id": skill_id},
        )


class MalformedDescriptorError(SkillRouterError):
    """A source record is missing required fields or has invalid values."""

    def __init__(self, skill_id: str | None, reason: str) -> None:
        self.skill_id = skill_id
        self.reason = reason
        label = skill_id if skill_id else "<unknown>"
        super().__init__(
            EnumSkillRouterErrorCode.MALFORMED_DESCRIPTOR,
            f"Malformed skill descriptor '{label}': {reason}",
            details={"skill_id": skill_id, "reason": reason},
        )


class RegistryLoadError(SkillRouterError):
    """A registry source could not be read or parsed."""

    def __init__(
        self,
        path: str,
        reason: str,
        code: EnumSkillRouterErrorCode = EnumSkillRouterErrorCode.REGISTRY_LOAD_FAILED,
    ) -> None:
        self.path = path
        self.reason = reason
        super().__init__(
            code,
            f"Cannot load skill registry from {path}: {reason}",
            details={"path": path, "reason": reason},
        )


__all__ = [
    "DuplicateSkillError",
    "EnumSkillRouterErrorCode",
    "MalformedDescriptorError",
    "RegistryLoadError",
    "SkillRouterError",
]
