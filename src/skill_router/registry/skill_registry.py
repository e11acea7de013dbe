# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""
Skill Registry
==============

Immutable, read-only mapping of skill id -> SkillDescriptor.

A registry is built once per load cycle and never mutated afterwards; a
reload produces a brand new instance. Iteration is in ascending id order so
that nothing downstream depends on the order skills were registered in.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from skill_router.errors import DuplicateSkillError
from skill_router.models import SkillDescriptor


class Registry(Mapping[str, SkillDescriptor]):
    """Read-only collection of loaded skill descriptors keyed by id."""

    __slots__ = ("_skills",)

    def __init__(self, descriptors: Iterable[SkillDescriptor] = ()):
        """
        Build the registry from already validated descriptors.

        Args:
            descriptors: Skill descriptors; ids must be unique

        Raises:
            DuplicateSkillError: If two descriptors share an id
        """
        skills: dict[str, SkillDescriptor] = {}
        for descriptor in descriptors:
            if descriptor.id in skills:
                raise DuplicateSkillError(descriptor.id)
            skills[descriptor.id] = descriptor
        self._skills = MappingProxyType(dict(sorted(skills.items())))

    @classmethod
    def empty(cls) -> Registry:
        return cls(())

    def __getitem__(self, skill_id: str) -> SkillDescriptor:
        return self._skills[skill_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._skills)

    def __len__(self) -> int:
        return len(self._skills)

    def __repr__(self) -> str:
        return f"Registry({len(self._skills)} skills)"

    def descriptors(self) -> list[SkillDescriptor]:
        """All descriptors, sorted by id."""
        return list(self._skills.values())

    def priority_of(self, skill_id: str) -> int:
        """Tie-break priority of a skill, 0 when the id is unknown."""
        descriptor = self._skills.get(skill_id)
        return descriptor.priority if descriptor is not None else 0

    def unknown_related_ids(self) -> dict[str, list[str]]:
        """
        Find related-skill references that point at unregistered ids.

        Returns:
            Mapping of skill id -> list of dangling related ids
        """
        dangling: dict[str, list[str]] = {}
        for skill_id, descriptor in self._skills.items():
            missing = [r for r in descriptor.related_skill_ids if r not in self._skills]
            if missing:
                dangling[skill_id] = missing
        return dangling

    def stats(self) -> dict[str, int]:
        """
        Get registry statistics.

        Returns:
            Dictionary with registry statistics
        """
        return {
            "total_skills": len(self._skills),
            "total_triggers": sum(len(d.triggers) for d in self._skills.values()),
            "skills_without_triggers": sum(
                1 for d in self._skills.values() if not d.triggers
            ),
        }
