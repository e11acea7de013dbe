# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""
Registry Loader
===============

Parses skill descriptor records into an immutable Registry.

Supported sources:
- In-memory records (sequence of mappings)
- A YAML or JSON registry file
- A directory tree of ``SKILL.md`` documents with YAML frontmatter,
  optionally mixed with ``*.yaml`` registry files

Loading is all-or-nothing: the first duplicate or malformed record aborts
the whole load and no partial registry is returned.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from skill_router.errors import (
    DuplicateSkillError,
    MalformedDescriptorError,
    RegistryLoadError,
    SkillRouterError,
)
from skill_router.models import SkillDescriptor
from skill_router.registry.skill_registry import Registry

logger = logging.getLogger(__name__)

SKILL_DOCUMENT_NAME = "SKILL.md"
REGISTRY_FILE_SUFFIXES = frozenset({".yaml", ".yml", ".json"})

_FRONTMATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)", re.DOTALL
)


# =============================================================================
# Record parsing
# =============================================================================


class _SourcedRecord:
    """Raw record tagged with the file it was read from."""

    __slots__ = ("data", "path")

    def __init__(self, data: Any, path: Path):
        self.data = data
        self.path = path


def _format_validation_error(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        field = ".".join(str(p) for p in item.get("loc", ())) or "record"
        message = str(item.get("msg", "invalid value")).removeprefix("Value error, ")
        parts.append(f"{field}: {message}")
    return "; ".join(parts)


def parse_record(
    record: Any, source_path: str | Path | None = None
) -> SkillDescriptor:
    """
    Validate one raw record and build its SkillDescriptor.

    Args:
        record: Raw mapping with id, description, triggers and optional fields
        source_path: File the record came from (informational)

    Returns:
        Immutable SkillDescriptor

    Raises:
        MalformedDescriptorError: If id, description or triggers are missing,
            a trigger is empty, or a field has the wrong type
    """
    if not isinstance(record, Mapping):
        raise MalformedDescriptorError(None, "record must be a mapping")

    raw_id = record.get("id")
    if not isinstance(raw_id, str) or not raw_id.strip():
        raise MalformedDescriptorError(
            str(raw_id) if raw_id is not None else None, "missing or empty id"
        )
    skill_id = raw_id.strip()

    if record.get("triggers") is None:
        raise MalformedDescriptorError(skill_id, "missing triggers")
    if "description" not in record:
        raise MalformedDescriptorError(skill_id, "missing description")

    # Copy so the descriptor never aliases caller-owned containers
    data = dict(record)
    if source_path is not None:
        data["sourcePath"] = str(source_path)

    try:
        return SkillDescriptor.model_validate(data)
    except ValidationError as e:
        raise MalformedDescriptorError(skill_id, _format_validation_error(e)) from e


def load_registry(records: Iterable[Any]) -> Registry:
    """
    Build a Registry from raw skill records.

    Args:
        records: Sequence of raw record mappings

    Returns:
        Newly constructed Registry

    Raises:
        DuplicateSkillError: If two records share an id
        MalformedDescriptorError: If a record is structurally invalid
    """
    descriptors: list[SkillDescriptor] = []
    seen: set[str] = set()

    for record in records:
        source_path = None
        if isinstance(record, _SourcedRecord):
            record, source_path = record.data, record.path
        descriptor = parse_record(record, source_path=source_path)
        if descriptor.id in seen:
            raise DuplicateSkillError(descriptor.id)
        seen.add(descriptor.id)
        descriptors.append(descriptor)

    registry = Registry(descriptors)
    logger.debug(
        f"Built registry with {len(registry)} skills",
        extra={"skill_count": len(registry)},
    )
    return registry


# =============================================================================
# File sources
# =============================================================================


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise RegistryLoadError(str(path), e.strerror or str(e)) from e
    except UnicodeDecodeError as e:
        raise RegistryLoadError(str(path), f"not valid UTF-8 ({e.reason})") from e


def _records_from_document(data: Any, path: Path) -> list[_SourcedRecord]:
    """
    Extract raw records from a parsed registry document.

    Accepted layouts:
    - a list of records
    - a single record (mapping with ``id`` and ``triggers``)
    - a mapping with a ``skills`` key holding a list or an id-keyed mapping
    - an id-keyed mapping of records
    """
    if data is None:
        return []

    if isinstance(data, list):
        return [_SourcedRecord(item, path) for item in data]

    if not isinstance(data, Mapping):
        raise RegistryLoadError(
            str(path), f"unsupported registry layout ({type(data).__name__})"
        )

    if "id" in data and "triggers" in data:
        return [_SourcedRecord(data, path)]

    if "skills" in data:
        return _records_from_document(data["skills"] or [], path)

    records = []
    for key, value in data.items():
        if not isinstance(value, Mapping):
            raise MalformedDescriptorError(str(key), "record must be a mapping")
        record = dict(value)
        record.setdefault("id", str(key))
        records.append(_SourcedRecord(record, path))
    return records


def read_registry_file(path: str | Path) -> list[_SourcedRecord]:
    """
    Read raw records from a YAML or JSON registry file.

    Raises:
        RegistryLoadError: If the file cannot be read or parsed
    """
    path = Path(path)
    text = _read_text(path)
    if path.suffix.lower() == ".json":
        # Blank files load as empty registries, as they do for YAML
        try:
            data = json.loads(text) if text.strip() else None
        except json.JSONDecodeError as e:
            raise RegistryLoadError(str(path), f"invalid JSON: {e}") from e
        return _records_from_document(data, path)
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise RegistryLoadError(str(path), f"invalid YAML: {e}") from e
    return _records_from_document(data, path)


def split_frontmatter(text: str) -> tuple[Any, str]:
    """
    Split a markdown document into YAML frontmatter and body.

    Returns:
        (parsed frontmatter or None when absent, body text). An empty
        frontmatter block parses to an empty mapping.

    Raises:
        yaml.YAMLError: If the frontmatter block is not valid YAML
    """
    match = _FRONTMATTER_RE.match(text)
    if not match:
        return None, text
    frontmatter = yaml.safe_load(match.group(1))
    return ({} if frontmatter is None else frontmatter), text[match.end() :]


def frontmatter_block(text: str) -> str | None:
    """Return the raw frontmatter text of a document, or None when absent."""
    match = _FRONTMATTER_RE.match(text)
    return match.group(1) if match else None


def read_skill_document(path: str | Path) -> _SourcedRecord:
    """
    Read the raw record of a ``SKILL.md`` document.

    The frontmatter ``name`` is accepted as the id; the enclosing directory
    name is used when neither ``id`` nor ``name`` is present.

    Raises:
        RegistryLoadError: If the file cannot be read or its YAML is invalid
        MalformedDescriptorError: If the document has no usable frontmatter
    """
    path = Path(path)
    fallback_id = path.parent.name
    text = _read_text(path)
    try:
        frontmatter, _ = split_frontmatter(text)
    except yaml.YAMLError as e:
        raise RegistryLoadError(str(path), f"invalid frontmatter YAML: {e}") from e

    if frontmatter is None:
        raise MalformedDescriptorError(
            fallback_id, f"{path} has no YAML frontmatter"
        )
    if not isinstance(frontmatter, dict):
        raise MalformedDescriptorError(
            fallback_id, f"{path} frontmatter is not a mapping"
        )

    record = dict(frontmatter)
    if "id" not in record:
        record["id"] = record.get("name") or fallback_id
    return _SourcedRecord(record, path)


def _is_hidden(path: Path, root: Path) -> bool:
    return any(part.startswith(".") for part in path.relative_to(root).parts)


def collect_directory_records(root: str | Path) -> list[_SourcedRecord]:
    """Collect raw records from every skill document and registry file under root."""
    root = Path(root)
    records: list[_SourcedRecord] = []
    for path in sorted(root.rglob("*")):
        if not path.is_file() or _is_hidden(path, root):
            continue
        if path.name == SKILL_DOCUMENT_NAME:
            records.append(read_skill_document(path))
        elif path.suffix.lower() in REGISTRY_FILE_SUFFIXES:
            records.extend(read_registry_file(path))
    return records


def load_registry_file(path: str | Path) -> Registry:
    """Load a Registry from a single YAML/JSON registry file."""
    return load_registry(read_registry_file(path))


def load_registry_dir(path: str | Path) -> Registry:
    """Load a Registry from a directory tree of skill documents."""
    return load_registry(collect_directory_records(path))


def load_registry_path(path: str | Path) -> Registry:
    """
    Load a Registry from a file or directory.

    Args:
        path: Registry file, single ``SKILL.md``/``*.md`` document, or directory

    Returns:
        Newly constructed Registry

    Raises:
        RegistryLoadError: If the path is missing or unreadable
        DuplicateSkillError: If two records share an id
        MalformedDescriptorError: If a record is structurally invalid
    """
    path = Path(path).expanduser()
    try:
        if not path.exists():
            raise RegistryLoadError(str(path), "path does not exist")

        if path.is_dir():
            registry = load_registry_dir(path)
        elif path.suffix.lower() == ".md":
            registry = load_registry([read_skill_document(path)])
        else:
            registry = load_registry_file(path)

    except SkillRouterError as e:
        logger.error(
            f"Skill registry load failed: {path}",
            extra={
                "registry_path": str(path),
                "error_code": e.code.value,
                "details": e.details,
            },
        )
        raise

    logger.info(
        f"Loaded skill registry from {path}",
        extra={"registry_path": str(path), **registry.stats()},
    )
    return registry
