# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Tests for the registry loader.

Tests cover:
- Record validation (ids, triggers, description, field types)
- Duplicate detection and all-or-nothing loading
- YAML/JSON registry file layouts
- SKILL.md frontmatter trees
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from skill_router.errors import (
    DuplicateSkillError,
    EnumSkillRouterErrorCode,
    MalformedDescriptorError,
    RegistryLoadError,
)
from skill_router.registry.loader import (
    load_registry,
    load_registry_path,
    parse_record,
    split_frontmatter,
)

pytestmark = pytest.mark.unit


def _record(**overrides: Any) -> dict[str, Any]:
    record: dict[str, Any] = {
        "id": "auth",
        "description": "Authentication",
        "triggers": ["jwt"],
    }
    record.update(overrides)
    return record


# =============================================================================
# Record parsing
# =============================================================================


class TestParseRecord:
    """Validation of single records."""

    def test_minimal_record_gets_defaults(self) -> None:
        descriptor = parse_record(_record())
        assert descriptor.id == "auth"
        assert descriptor.display_name == "auth"
        assert descriptor.priority == 0
        assert descriptor.related_skill_ids == ()
        assert descriptor.triggers == frozenset({"jwt"})

    def test_camel_and_snake_case_keys_accepted(self) -> None:
        camel = parse_record(_record(displayName="Auth", relatedSkillIds=["cache"]))
        snake = parse_record(_record(display_name="Auth", related_skill_ids=["cache"]))
        assert camel.display_name == snake.display_name == "Auth"
        assert camel.related_skill_ids == snake.related_skill_ids == ("cache",)

    def test_triggers_are_case_folded_trimmed_and_deduplicated(self) -> None:
        descriptor = parse_record(_record(triggers=["JWT", " jwt ", "Token"]))
        assert descriptor.triggers == frozenset({"jwt", "token"})

    def test_empty_trigger_list_is_valid(self) -> None:
        assert parse_record(_record(triggers=[])).triggers == frozenset()

    @pytest.mark.parametrize("bad_id", [None, "", "   ", 42])
    def test_missing_or_empty_id_is_malformed(self, bad_id: Any) -> None:
        record = _record(id=bad_id)
        with pytest.raises(MalformedDescriptorError, match="missing or empty id"):
            parse_record(record)

    def test_missing_triggers_is_malformed(self) -> None:
        record = _record()
        del record["triggers"]
        with pytest.raises(MalformedDescriptorError) as exc_info:
            parse_record(record)
        assert exc_info.value.skill_id == "auth"
        assert exc_info.value.reason == "missing triggers"

    def test_empty_string_trigger_is_malformed(self) -> None:
        with pytest.raises(MalformedDescriptorError, match="empty strings"):
            parse_record(_record(triggers=["jwt", "  "]))

    def test_triggers_given_as_string_is_malformed(self) -> None:
        with pytest.raises(MalformedDescriptorError, match="list of strings"):
            parse_record(_record(triggers="jwt"))

    def test_missing_description_is_malformed(self) -> None:
        record = _record()
        del record["description"]
        with pytest.raises(MalformedDescriptorError, match="missing description"):
            parse_record(record)

    @pytest.mark.parametrize("priority", ["high", 1.5, True])
    def test_non_integer_priority_is_malformed(self, priority: Any) -> None:
        with pytest.raises(MalformedDescriptorError, match="priority"):
            parse_record(_record(priority=priority))

    def test_non_mapping_record_is_malformed(self) -> None:
        with pytest.raises(MalformedDescriptorError, match="mapping"):
            parse_record(["not", "a", "record"])

    def test_descriptor_does_not_alias_input(self) -> None:
        triggers = ["jwt"]
        related = ["cache"]
        descriptor = parse_record(_record(triggers=triggers, relatedSkillIds=related))
        triggers.append("token")
        related.append("other")
        assert descriptor.triggers == frozenset({"jwt"})
        assert descriptor.related_skill_ids == ("cache",)

    def test_error_code_is_malformed_descriptor(self) -> None:
        with pytest.raises(MalformedDescriptorError) as exc_info:
            parse_record(_record(id=""))
        assert exc_info.value.code is EnumSkillRouterErrorCode.MALFORMED_DESCRIPTOR


# =============================================================================
# load_registry
# =============================================================================


class TestLoadRegistry:
    """Building registries from record sequences."""

    def test_loads_all_records(self, auth_cache_records: list[dict[str, Any]]) -> None:
        registry = load_registry(auth_cache_records)
        assert set(registry) == {"auth", "cache"}
        assert registry["auth"].display_name == "Authentication"

    def test_empty_input_yields_empty_registry(self) -> None:
        assert len(load_registry([])) == 0

    def test_duplicate_id_raises(self) -> None:
        with pytest.raises(DuplicateSkillError) as exc_info:
            load_registry([_record(), _record(triggers=["token"])])
        assert exc_info.value.skill_id == "auth"

    def test_duplicate_detection_uses_trimmed_id(self) -> None:
        with pytest.raises(DuplicateSkillError):
            load_registry([_record(id="auth"), _record(id=" auth ")])

    def test_malformed_record_aborts_whole_load(self) -> None:
        records = [_record(id="good"), _record(id="bad", triggers=[""])]
        with pytest.raises(MalformedDescriptorError) as exc_info:
            load_registry(records)
        assert exc_info.value.skill_id == "bad"

    def test_same_input_gives_equal_registries(
        self, rust_records: list[dict[str, Any]]
    ) -> None:
        first = load_registry(rust_records)
        second = load_registry(list(reversed(rust_records)))
        assert list(first) == list(second)
        assert first == second


# =============================================================================
# Files and directories
# =============================================================================


class TestLoadRegistryPath:
    """Loading registries from files and SKILL.md trees."""

    def test_yaml_file_with_skills_list(self, registry_file: Path) -> None:
        registry = load_registry_path(registry_file)
        assert set(registry) == {"auth", "cache"}
        assert registry["auth"].source_path == str(registry_file)

    def test_yaml_mapping_keyed_by_id(self, tmp_path: Path) -> None:
        path = tmp_path / "registry.yml"
        path.write_text(
            "skills:\n"
            "  auth:\n"
            "    description: Authentication\n"
            "    triggers: [jwt, token]\n"
            "  cache:\n"
            "    description: Caching\n"
            "    triggers: [redis]\n",
            encoding="utf-8",
        )
        registry = load_registry_path(path)
        assert set(registry) == {"auth", "cache"}
        assert registry["auth"].triggers == frozenset({"jwt", "token"})

    def test_json_file(self, tmp_path: Path) -> None:
        path = tmp_path / "registry.json"
        path.write_text(json.dumps([_record(), _record(id="cache")]), encoding="utf-8")
        assert set(load_registry_path(path)) == {"auth", "cache"}

    def test_tab_indented_json_file(self, tmp_path: Path) -> None:
        path = tmp_path / "registry.json"
        text = json.dumps({"skills": [_record(), _record(id="cache")]}, indent="\t")
        path.write_text(text, encoding="utf-8")
        registry = load_registry_path(path)
        assert set(registry) == {"auth", "cache"}

    def test_invalid_json_raises_load_error(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text('[{"id": "auth",', encoding="utf-8")
        with pytest.raises(RegistryLoadError, match="invalid JSON"):
            load_registry_path(path)

    def test_empty_json_file_yields_empty_registry(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.json"
        path.write_text("\n", encoding="utf-8")
        assert len(load_registry_path(path)) == 0

    def test_empty_file_yields_empty_registry(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert len(load_registry_path(path)) == 0

    def test_missing_path_raises_load_error(self, tmp_path: Path) -> None:
        with pytest.raises(RegistryLoadError, match="does not exist"):
            load_registry_path(tmp_path / "nope.yaml")

    def test_invalid_yaml_raises_load_error(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.yaml"
        path.write_text("skills: [unclosed", encoding="utf-8")
        with pytest.raises(RegistryLoadError, match="invalid YAML"):
            load_registry_path(path)

    def test_scalar_document_raises_load_error(self, tmp_path: Path) -> None:
        path = tmp_path / "scalar.yaml"
        path.write_text("just a string\n", encoding="utf-8")
        with pytest.raises(RegistryLoadError, match="unsupported registry layout"):
            load_registry_path(path)

    def test_skill_directory(self, skills_dir: Path) -> None:
        registry = load_registry_path(skills_dir)
        assert set(registry) == {"m01-ownership", "m06-error-handling"}
        assert registry["m01-ownership"].triggers == frozenset(
            {"ownership", "borrow", "e0382"}
        )
        assert registry["m06-error-handling"].related_skill_ids == ("m01-ownership",)
        assert registry["m01-ownership"].source_path is not None
        assert registry["m01-ownership"].source_path.endswith("SKILL.md")

    def test_directory_name_is_fallback_id(self, tmp_path: Path, write_skill) -> None:
        write_skill(tmp_path, "unnamed-skill", {"description": "x", "triggers": ["y"]})
        assert list(load_registry_path(tmp_path)) == ["unnamed-skill"]

    def test_single_skill_document(self, skills_dir: Path) -> None:
        registry = load_registry_path(skills_dir / "m01-ownership" / "SKILL.md")
        assert list(registry) == ["m01-ownership"]

    def test_document_without_frontmatter_is_malformed(
        self, tmp_path: Path, write_skill
    ) -> None:
        write_skill(tmp_path, "plain", None, body="# Just markdown\n")
        with pytest.raises(MalformedDescriptorError, match="no YAML frontmatter"):
            load_registry_path(tmp_path)

    def test_document_without_triggers_is_malformed(
        self, tmp_path: Path, write_skill
    ) -> None:
        write_skill(tmp_path, "no-triggers", {"description": "x"})
        with pytest.raises(MalformedDescriptorError, match="missing triggers"):
            load_registry_path(tmp_path)

    def test_duplicate_across_documents(self, tmp_path: Path, write_skill) -> None:
        write_skill(tmp_path, "a", {"name": "same", "description": "x", "triggers": []})
        write_skill(tmp_path, "b", {"name": "same", "description": "y", "triggers": []})
        with pytest.raises(DuplicateSkillError):
            load_registry_path(tmp_path)

    def test_hidden_directories_are_skipped(
        self, skills_dir: Path, write_skill
    ) -> None:
        write_skill(
            skills_dir / ".archive",
            "m01-ownership",
            {"name": "m01-ownership", "description": "old", "triggers": []},
        )
        assert len(load_registry_path(skills_dir)) == 2

    def test_directory_mixes_documents_and_yaml(self, skills_dir: Path) -> None:
        (skills_dir / "extra.yaml").write_text(
            "- id: extra\n  description: Extra skill\n  triggers: [extra]\n",
            encoding="utf-8",
        )
        assert "extra" in load_registry_path(skills_dir)


class TestSplitFrontmatter:
    """Frontmatter extraction."""

    def test_splits_frontmatter_and_body(self) -> None:
        meta, body = split_frontmatter("---\nname: x\n---\n# Title\n")
        assert meta == {"name": "x"}
        assert body == "# Title\n"

    def test_no_frontmatter(self) -> None:
        meta, body = split_frontmatter("# Title\n")
        assert meta is None
        assert body == "# Title\n"

    def test_block_scalar_description(self) -> None:
        text = '---\nname: x\ndescription: |\n  line one\n  line two\n---\nbody'
        meta, body = split_frontmatter(text)
        assert meta["description"].rstrip("\n") == "line one\nline two"
        assert body == "body"
