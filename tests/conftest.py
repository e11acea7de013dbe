"""
Test fixtures for the skill router.

Provides:
- Raw skill records and loaded registries
- SKILL.md document trees under tmp_path
- Settings isolation (environment and singleton cache)
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
import yaml

from skill_router.config.settings import clear_settings_cache
from skill_router.registry.loader import load_registry
from skill_router.registry.skill_registry import Registry

_ENV_VARS = (
    "SKILL_REGISTRY_PATH",
    "SKILL_ROUTER_REGISTRY_PATH",
    "SKILL_ROUTER_EXACT_WEIGHT",
    "SKILL_ROUTER_PARTIAL_WEIGHT",
    "SKILL_ROUTER_DESCRIPTION_WEIGHT",
    "SKILL_ROUTER_MIN_PARTIAL_LENGTH",
    "SKILL_ROUTER_DEFAULT_LIMIT",
    "SKILL_ROUTER_DEFAULT_THRESHOLD",
    "SKILL_ROUTER_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Run every test with a clean router environment and fresh settings."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    clear_settings_cache()
    yield
    clear_settings_cache()


# -------------------------------------------------------------------------
# Registry fixtures
# -------------------------------------------------------------------------


@pytest.fixture
def auth_cache_records() -> list[dict[str, Any]]:
    """Two skills with disjoint triggers."""
    return [
        {
            "id": "auth",
            "displayName": "Authentication",
            "description": "Token based authentication and session handling",
            "triggers": ["jwt", "token", "auth"],
        },
        {
            "id": "cache",
            "displayName": "Caching",
            "description": "Redis caching patterns with eviction policies",
            "triggers": ["redis", "cache", "ttl"],
        },
    ]


@pytest.fixture
def auth_cache_registry(auth_cache_records: list[dict[str, Any]]) -> Registry:
    return load_registry(auth_cache_records)


@pytest.fixture
def rust_records() -> list[dict[str, Any]]:
    """Overlapping skills modelled on a Rust guidance collection."""
    return [
        {
            "id": "m01-ownership",
            "displayName": "Ownership & Borrowing",
            "description": "Ownership, borrowing and lifetime errors",
            "triggers": ["ownership", "borrow", "E0382", "lifetime", "move"],
            "relatedSkillIds": ["m07-concurrency"],
            "priority": 1,
        },
        {
            "id": "m06-error-handling",
            "displayName": "Error Handling",
            "description": "Result, Option, anyhow and thiserror usage",
            "triggers": ["error", "result", "anyhow", "thiserror", "unwrap"],
            "relatedSkillIds": ["m01-ownership"],
        },
        {
            "id": "m07-concurrency",
            "displayName": "Concurrency",
            "description": "Threads, async, Send and Sync bounds",
            "triggers": ["thread", "async", "send", "sync", "mutex", "tokio"],
        },
        {
            "id": "domain-web",
            "displayName": "Web Services",
            "description": "HTTP services with axum and api-key authentication",
            "triggers": ["axum", "http", "api-key", "middleware"],
            "priority": 2,
        },
    ]


@pytest.fixture
def rust_registry(rust_records: list[dict[str, Any]]) -> Registry:
    return load_registry(rust_records)


# -------------------------------------------------------------------------
# Skill document fixtures
# -------------------------------------------------------------------------

COMPLETE_BODY = """
# {title}

## Core Question

What is the problem really about?

## Review Checklist

- [ ] item

## Verification Commands

```bash
cargo check
```

## Related Skills

- other
"""


def write_skill_document(
    root: Path,
    name: str,
    frontmatter: dict[str, Any] | None,
    body: str | None = None,
) -> Path:
    """Write ``root/name/SKILL.md`` and return its path."""
    skill_dir = root / name
    skill_dir.mkdir(parents=True, exist_ok=True)
    path = skill_dir / "SKILL.md"
    text = body if body is not None else COMPLETE_BODY.format(title=name)
    if frontmatter is not None:
        # Double-quoted scalars, as the lint rules expect for descriptions
        dumped = yaml.safe_dump(frontmatter, sort_keys=False, default_style='"')
        text = "---\n" + dumped + "---\n" + text
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def write_skill():
    """Factory writing SKILL.md documents (see ``write_skill_document``)."""
    return write_skill_document


@pytest.fixture
def skills_dir(tmp_path: Path) -> Path:
    """A skills directory with two well-formed SKILL.md documents."""
    root = tmp_path / "skills"
    write_skill_document(
        root,
        "m01-ownership",
        {
            "name": "m01-ownership",
            "description": "Ownership, borrowing and lifetime errors",
            "triggers": ["ownership", "borrow", "E0382"],
        },
    )
    write_skill_document(
        root,
        "m06-error-handling",
        {
            "name": "m06-error-handling",
            "description": "Result, Option, anyhow and thiserror usage",
            "triggers": ["error", "result", "anyhow"],
            "relatedSkillIds": ["m01-ownership"],
        },
    )
    return root


@pytest.fixture
def registry_file(tmp_path: Path, auth_cache_records: list[dict[str, Any]]) -> Path:
    """A YAML registry file holding the auth/cache skills."""
    path = tmp_path / "registry.yaml"
    path.write_text(yaml.safe_dump({"skills": auth_cache_records}), encoding="utf-8")
    return path
