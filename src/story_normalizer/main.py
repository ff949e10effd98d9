# ABOUTME: Main CLI application entry point using asyncclick for native async support
# ABOUTME: Provides commands for validating story documents and inspecting alias tables

import json
from pathlib import Path
from typing import Any

import asyncclick as click
from rich.console import Console

from story_normalizer.config import get_config
from story_normalizer.core import IngestionDecision, accept_story_output
from story_normalizer.schema.aliases import FIELD_MAPPINGS, EntityKind
from story_normalizer.utils.logging import (
    LoggingMode,
    configure_logging,
    get_logging_status,
    with_document_context,
)
from story_normalizer.utils.rich_tables import (
    create_alias_table,
    create_issues_table,
    create_logging_status_table,
    create_validation_summary_table,
    print_rich_table,
)

console = Console()


def _result_payload(decision: IngestionDecision) -> dict[str, Any]:
    """Build the JSON document printed by `validate --json`."""
    result = decision.result
    return {
        "accepted": decision.accepted,
        "strict_mode": decision.strict_mode,
        "reason": decision.reason,
        "success": result.success,
        "data": result.data.to_record() if result.data is not None else None,
        "warnings": [issue.model_dump(mode="json", exclude_none=True) for issue in result.warnings],
        "errors": [issue.model_dump(mode="json", exclude_none=True) for issue in result.errors],
    }


def _display_validation_results(decision: IngestionDecision) -> None:
    """Display validation results as rich tables."""
    limit = get_config().max_issues_displayed
    result = decision.result

    print_rich_table(console, create_validation_summary_table(decision))

    if result.errors:
        print_rich_table(console, create_issues_table("🚨 Errors", result.errors, limit=limit, style="red"))
    if result.warnings:
        print_rich_table(console, create_issues_table("⚠️ Warnings", result.warnings, limit=limit))


@click.command()
@click.argument("source", type=click.File("rb"))
@click.option(
    "--strict/--no-strict",
    default=None,
    help="Reject documents with warnings (defaults to STORY_NORMALIZER_STRICT_MODE)",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    help="Write the normalized canonical JSON to this file",
)
@click.pass_context
async def validate(ctx, source, strict: bool | None, output: Path | None):
    """
    🔎 Validate and normalize a generated story document.

    SOURCE is a JSON file, or '-' to read from stdin. Exits with status 1
    when the document is rejected.
    """
    accepted = await _validate_async(source, strict, output, ctx.obj["json_output"])
    if not accepted:
        ctx.exit(1)


async def _validate_async(source, strict: bool | None, output: Path | None, json_output: bool) -> bool:
    """Validate one document with optional UI display."""
    source_name = str(getattr(source, "name", "<stdin>"))

    with with_document_context(source_name) as logger:
        logger.info("Validating story document")

        decision = accept_story_output(source.read(), strict_mode=strict)
        result = decision.result

        logger.info(
            "Validation complete",
            accepted=decision.accepted,
            success=result.success,
            warnings=len(result.warnings),
            errors=len(result.errors),
        )

        if output is not None and result.data is not None:
            output.write_text(
                json.dumps(result.data.to_record(), indent=2, ensure_ascii=False, default=str) + "\n",
                encoding="utf-8",
            )
            logger.info("Wrote normalized output", output=str(output))

        if json_output:
            click.echo(json.dumps(_result_payload(decision), indent=2, ensure_ascii=False, default=str))
        else:
            _display_validation_results(decision)
            if output is not None and result.data is not None:
                console.print(f"[green]💾 Normalized output written to {output}[/green]")

        return decision.accepted


@click.command()
@click.argument("kind", required=False, type=click.Choice([kind.value for kind in EntityKind]))
@click.pass_context
def aliases(ctx, kind: str | None):
    """
    🔤 Show the accepted field spellings for each entity kind.
    """
    kinds = [EntityKind(kind)] if kind else list(EntityKind)

    if ctx.obj["json_output"]:
        click.echo(json.dumps({k.value: dict(FIELD_MAPPINGS[k]) for k in kinds}, indent=2))
        return

    for entity_kind in kinds:
        print_rich_table(console, create_alias_table(entity_kind.value, FIELD_MAPPINGS[entity_kind]))


@click.command(name="logging-status")
def logging_status():
    """
    📊 Show current logging configuration and status.
    """
    status = get_logging_status()
    logging_table = create_logging_status_table(status)
    print_rich_table(console, logging_table)


def _initialize_logging(json_output: bool, log_level: str | None = None, log_file: str | None = None) -> None:
    """Initialize logging configuration."""
    config = get_config()
    mode = LoggingMode.PRODUCTION if json_output else config.log_mode

    # Use config defaults when CLI parameters are not provided
    final_log_level = log_level or config.log_level
    final_log_file = log_file or (str(config.log_file) if config.log_file else None)

    configure_logging(mode=mode, log_level=final_log_level, log_file=final_log_file)


@click.group(invoke_without_command=True)
@click.option("--json", is_flag=True, help="Output JSON instead of rich tables")
@click.option("--log-level", default=None, help="Logging level (DEBUG, INFO, WARNING, ERROR)")
@click.option("--log-file", help="Custom log file path")
@click.pass_context
def app(ctx, json: bool, log_level: str | None, log_file: str | None):
    """
    📚 Story Normalizer - Validation for LLM-generated language-lesson stories

    Normalize the loosely structured story documents a text-generation model
    produces (cast, conversations, beats, scripted messages) into one canonical
    shape, and report every discrepancy that was tolerated along the way.
    """
    # Store global options in context for commands to access
    ctx.ensure_object(dict)
    ctx.obj["json_output"] = json

    # Initialize logging once here instead of in each command
    _initialize_logging(json, log_level, log_file)

    # Show help if no command provided
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# Add commands to the main group
app.add_command(validate)
app.add_command(aliases)
app.add_command(logging_status)


if __name__ == "__main__":
    app()
