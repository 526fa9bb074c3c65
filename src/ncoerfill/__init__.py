"""ncoerfill CLI - Populate NCOER form fields from unit configuration and LLM-generated content"""

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional
import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich import box
from loguru import logger

from ncoerfill.models import FormField, PreviousDocument, UnitConfig, fields_to_json
from ncoerfill.prompts import list_prompt_keys
from ncoerfill.services import (
    EnrichmentOptions,
    FieldEnrichmentServiceFactory,
    PromptPreview,
    validate_fields,
)
from ncoerfill.utils.file_utils import read_json, write_json

__version__ = "0.1.0"

# Initialize Typer app and Rich console
app = typer.Typer(
    name="ncoerfill",
    help="Generate NCOER field content with an LLM and static unit configuration",
    add_completion=False
)
console = Console()


def configure_logging(verbose: bool) -> None:
    """Route loguru output to stderr; progress narration only shows with --verbose"""
    logger.remove()
    logger.add(sys.stderr, level="INFO" if verbose else "WARNING", format="{message}")


def load_fields(path: Path) -> List[FormField]:
    """Load and parse a field definition file, exiting on error"""
    try:
        return FormField.from_json_list(read_json(path))
    except (OSError, ValueError) as e:
        console.print(f"[red]Error reading fields: {e}[/red]")
        raise typer.Exit(1)


def load_object(path: Path, label: str) -> Dict[str, Any]:
    """Load a JSON object file (previous NCOER, unit config), exiting on error"""
    try:
        data = read_json(path)
    except (OSError, ValueError) as e:
        console.print(f"[red]Error reading {label}: {e}[/red]")
        raise typer.Exit(1)
    if not isinstance(data, dict):
        console.print(f"[red]Error reading {label}: expected a JSON object[/red]")
        raise typer.Exit(1)
    return data


def display_preview(preview: PromptPreview) -> None:
    """Display one dry-run prompt preview"""
    header = (
        f"[bold]Prompt key:[/bold] {preview.prompt_key}\n"
        f"[bold]Max tokens:[/bold] {preview.max_tokens}\n"
        f"[bold]Context keys:[/bold] {', '.join(preview.context_keys) or '(none)'}\n"
    )
    console.print(
        Panel(
            header + "\n" + preview.prompt,
            title=f"DRY RUN: {preview.field_name}",
            box=box.ROUNDED,
            border_style="cyan",
        )
    )


def display_summary(fields: List[FormField]) -> None:
    """Report generated fields and every field that fell back"""
    generated = [f for f in fields if f.llm and f.llm.generated_at]
    fallbacks = [f for f in fields if f.llm and f.llm.used_fallback]

    console.print(f"Generated content for {len(generated)} fields")
    if fallbacks:
        console.print(f"[yellow]Used fallback values for {len(fallbacks)} fields:[/yellow]")
        for form_field in fallbacks:
            console.print(f"[yellow]  - {form_field.name}: {form_field.llm.error}[/yellow]")


@app.command()
def generate(
    fields_path: Path = typer.Option(
        ...,
        "--fields",
        "-f",
        help="Field definitions with LLM markers"
    ),
    previous_path: Optional[Path] = typer.Option(
        None,
        "--previous",
        "-p",
        help="Previous NCOER JSON for context (from the PDF extractor)"
    ),
    unit_config_path: Optional[Path] = typer.Option(
        None,
        "--unit-config",
        "-u",
        help="Unit configuration JSON for static fields and current unit data"
    ),
    output_path: Path = typer.Option(
        Path("fields-enriched.json"),
        "--output",
        "-o",
        help="Output enriched fields JSON"
    ),
    api_key: Optional[str] = typer.Option(
        None,
        "--api-key",
        help="Provider API key (or set ANTHROPIC_API_KEY / OPENAI_API_KEY)"
    ),
    model: Optional[str] = typer.Option(
        None,
        "--model",
        "-m",
        help="Model to use (defaults to the provider setting)"
    ),
    provider: Optional[str] = typer.Option(
        None,
        "--provider",
        help="LLM provider: anthropic or openai (defaults to APP_LLM_PROVIDER)"
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Preview prompts without calling the API"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show detailed progress"
    ),
) -> None:
    """
    Generate field content and write the enriched fields JSON
    """
    configure_logging(verbose)

    fields = load_fields(fields_path)

    report = validate_fields(fields)
    if not report.valid:
        console.print("[red]Field configuration errors:[/red]")
        for error in report.errors:
            console.print(f"[red]  - {error}[/red]")
        raise typer.Exit(1)
    if report.warnings and verbose:
        console.print("[yellow]Warnings:[/yellow]")
        for warning in report.warnings:
            console.print(f"[yellow]  - {warning}[/yellow]")

    previous_document = None
    if previous_path:
        previous_document = PreviousDocument.from_dict(load_object(previous_path, "previous NCOER"))
        logger.info(f"Loaded previous NCOER context from {previous_path}")

    unit_config = None
    if unit_config_path:
        unit_config = UnitConfig.from_dict(load_object(unit_config_path, "unit config"))
        logger.info(f"Loaded unit config from {unit_config_path}")

    logger.info("Configuration:")
    logger.info(f"  Fields: {fields_path}")
    logger.info(f"  Previous NCOER: {previous_path or '(none)'}")
    logger.info(f"  Unit config: {unit_config_path or '(none)'}")
    logger.info(f"  Output: {output_path}")
    logger.info(f"  Dry run: {dry_run}")

    try:
        service = FieldEnrichmentServiceFactory.create_default(provider)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    partial_path = output_path.with_suffix(".partial.json")
    options = EnrichmentOptions(
        api_key=api_key,
        model=model,
        provider=provider,
        verbose=verbose,
        dry_run=dry_run,
        unit_config=unit_config,
        checkpoint_path=None if dry_run else partial_path,
    )

    result = service(fields, previous_document, options)
    if result.is_err():
        console.print(f"\n[red]Error: {result.unwrap_err()}[/red]")
        raise typer.Exit(1)

    enriched = result.unwrap()

    if dry_run:
        for preview in service.previews:
            display_preview(preview)
        console.print(f"[cyan]Dry run complete: {len(service.previews)} prompts previewed, nothing written[/cyan]")
        return

    write_json(output_path, fields_to_json(enriched))
    if partial_path.exists():
        # results from an earlier aborted run are superseded
        partial_path.unlink()
        logger.info(f"Removed stale partial results {partial_path}")
    console.print(f"\n[green]Enriched fields written to {output_path}[/green]")
    display_summary(enriched)


@app.command()
def validate(
    fields_path: Path = typer.Option(
        ...,
        "--fields",
        "-f",
        help="Field definitions with LLM markers"
    ),
) -> None:
    """
    Check field LLM configuration without generating anything
    """
    configure_logging(False)
    fields = load_fields(fields_path)
    report = validate_fields(fields)

    for warning in report.warnings:
        console.print(f"[yellow]Warning: {warning}[/yellow]")

    if not report.valid:
        console.print("[red]Field configuration errors:[/red]")
        for error in report.errors:
            console.print(f"[red]  - {error}[/red]")
        raise typer.Exit(1)

    llm_count = sum(1 for f in fields if f.wants_generation)
    static_count = sum(1 for f in fields if f.config_key)
    console.print(
        f"[green]✓ {len(fields)} fields valid[/green] "
        f"({llm_count} generated, {static_count} static)"
    )


@app.command("list-prompts")
def list_prompts() -> None:
    """
    List available prompt keys
    """
    table = Table(title="Available prompt keys", box=box.SIMPLE)
    table.add_column("Key", style="cyan")
    table.add_column("Description")
    for entry in list_prompt_keys():
        table.add_row(entry["key"], entry["description"])
    console.print(table)


@app.command()
def version() -> None:
    """Show ncoerfill version"""
    console.print(f"[bold blue]ncoerfill[/bold blue] version [green]{__version__}[/green]")


def main() -> None:
    """Entry point for the CLI application"""
    app()


if __name__ == "__main__":
    main()
