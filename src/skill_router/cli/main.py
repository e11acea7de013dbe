# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Skill router CLI.

Routes a natural-language request to the skill documents that should be
surfaced, and inspects or lints the skill registry.

Usage:
    skill-router match "<query text>" [--limit N] [--threshold T] [--skill ID] [--json]
    skill-router list [--json]
    skill-router check [--json]

The registry is read from ``--registry PATH`` or ``SKILL_REGISTRY_PATH``.

Exit codes:
    0   success, including "no matching skill"
    1   ``check`` found lint issues
    2   malformed arguments
    3   registry could not be loaded
"""

from __future__ import annotations

import json as json_module
import logging
import sys
from pathlib import Path

import click
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from skill_router import __version__
from skill_router.config.settings import Settings, get_settings
from skill_router.errors import SkillRouterError
from skill_router.registry.lint import LintIssue, lint_registry, lint_skill_tree
from skill_router.routing.emitter import emit_json, render_table
from skill_router.routing.router import SkillRouter

EXIT_LINT_ISSUES = 1
EXIT_REGISTRY_LOAD_FAILED = 3

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# =============================================================================
# Console Setup
# =============================================================================

console = Console()
error_console = Console(stderr=True)


# =============================================================================
# Helpers
# =============================================================================


def _settings(ctx: click.Context) -> Settings:
    return ctx.obj["settings"]


def _load_router(ctx: click.Context) -> SkillRouter:
    """Load the router from settings, exiting with code 3 on failure."""
    settings = _settings(ctx)
    try:
        return SkillRouter.from_settings(settings)
    except SkillRouterError as e:
        error_console.print(f"[red]Registry load failed:[/red] {escape(e.message)}")
        sys.exit(EXIT_REGISTRY_LOAD_FAILED)


def _validate_query(ctx: click.Context, param: click.Parameter, value: str) -> str:
    if "\x00" in value:
        raise click.BadParameter("query must not contain NUL characters")
    return value


# =============================================================================
# CLI Group
# =============================================================================


@click.group(invoke_without_command=True)
@click.option("--version", is_flag=True, help="Show version and exit.")
@click.option(
    "--registry",
    "registry_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Registry file or skills directory (overrides SKILL_REGISTRY_PATH).",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Log level for stderr logging (overrides SKILL_ROUTER_LOG_LEVEL).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    version: bool,
    registry_path: Path | None,
    log_level: str | None,
) -> None:
    """Route natural-language requests to skill documents.

    Examples:

        # Top 3 skills for a request
        skill-router match "how do I expire a jwt token" --limit 3

        # Structured output for tooling
        skill-router --registry ./skills match "redis ttl" --json

        # Explicitly request a skill
        skill-router match "anything" --skill auth

        # Lint skill documents and registry
        skill-router --registry ./skills check
    """
    if version:
        click.echo(f"skill-router {__version__}")
        ctx.exit(0)

    try:
        settings = get_settings()
    except ValidationError as e:
        error_console.print(f"[red]Invalid configuration:[/red] {escape(str(e))}")
        sys.exit(EXIT_REGISTRY_LOAD_FAILED)

    if registry_path is not None:
        settings = settings.model_copy(
            update={"skill_registry_path": str(registry_path)}
        )

    logging.basicConfig(
        level=(log_level or settings.log_level).upper(),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# =============================================================================
# Match Command
# =============================================================================


@cli.command("match")
@click.argument("query", callback=_validate_query)
@click.option(
    "--limit",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum skills to return (default: SKILL_ROUTER_DEFAULT_LIMIT).",
)
@click.option(
    "--threshold",
    type=click.FloatRange(min=0.0),
    default=None,
    help="Minimum score to qualify (default: SKILL_ROUTER_DEFAULT_THRESHOLD).",
)
@click.option(
    "--skill",
    "skill_id",
    default=None,
    help="Explicitly request a skill id; unknown ids fall back to scoring.",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def cmd_match(
    ctx: click.Context,
    query: str,
    limit: int | None,
    threshold: float | None,
    skill_id: str | None,
    as_json: bool,
) -> None:
    """Rank the skills matching QUERY.

    Examples:

        skill-router match "optimize redis cache ttl"
        skill-router match "jwt auth" --limit 1 --json
    """
    settings = _settings(ctx)
    router = _load_router(ctx)

    response = router.route(
        query,
        limit=limit if limit is not None else settings.default_limit,
        threshold=threshold if threshold is not None else settings.default_threshold,
        explicit_override_id=skill_id,
    )

    if as_json:
        click.echo(emit_json(response))
        return

    if response.is_empty:
        console.print("[yellow]No matching skills.[/yellow]")
        return

    console.print(render_table(response, router.registry))


# =============================================================================
# List Command
# =============================================================================


@cli.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def cmd_list(ctx: click.Context, as_json: bool) -> None:
    """List every skill in the registry."""
    router = _load_router(ctx)
    descriptors = router.registry.descriptors()

    if as_json:
        output = [
            {
                "id": d.id,
                "displayName": d.display_name,
                "description": d.description,
                "triggers": sorted(d.triggers),
                "relatedSkillIds": list(d.related_skill_ids),
                "priority": d.priority,
            }
            for d in descriptors
        ]
        click.echo(json_module.dumps(output, indent=2))
        return

    if not descriptors:
        console.print("[yellow]Registry is empty.[/yellow]")
        return

    table = Table(title=f"Skills ({len(descriptors)} registered)")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="blue")
    table.add_column("Priority", justify="right")
    table.add_column("Triggers", style="dim")

    for d in descriptors:
        table.add_row(
            d.id, d.display_name, str(d.priority), ", ".join(sorted(d.triggers))
        )

    console.print(table)


# =============================================================================
# Check Command
# =============================================================================


@cli.command("check")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def cmd_check(ctx: click.Context, as_json: bool) -> None:
    """Lint skill documents and registry consistency.

    Exits 1 when issues are found, 3 when the registry cannot be loaded.
    """
    settings = _settings(ctx)
    issues: list[LintIssue] = []

    source = (
        Path(settings.skill_registry_path) if settings.skill_registry_path else None
    )
    if source is not None and (source.is_dir() or source.suffix.lower() == ".md"):
        issues.extend(lint_skill_tree(source))

    router = _load_router(ctx)
    issues.extend(lint_registry(router.registry))

    if as_json:
        click.echo(
            json_module.dumps(
                [issue.model_dump(mode="json") for issue in issues], indent=2
            )
        )
    elif not issues:
        console.print(
            f"[green]No issues found in {len(router.registry)} skills.[/green]"
        )
    else:
        table = Table(title=f"Skill Lint ({len(issues)} issues)")
        table.add_column("Skill", style="cyan")
        table.add_column("Check", style="yellow")
        table.add_column("Message")
        for issue in issues:
            table.add_row(issue.skill_id, issue.code.value, issue.message)
        console.print(table)

    if issues:
        sys.exit(EXIT_LINT_ISSUES)


def main() -> None:
    """Entry point for the ``skill-router`` console script."""
    cli()


if __name__ == "__main__":
    main()
