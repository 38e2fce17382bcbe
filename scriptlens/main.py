"""Command line entry point for scriptlens."""

import asyncio
import json
from dataclasses import asdict
from pathlib import Path

import click

from scriptlens.analysis.models import AnalysisOptions, FocusArea, SummaryLength
from scriptlens.config.settings import Settings
from scriptlens.documents.exceptions import DocumentProcessingError, ValidationFailedError
from scriptlens.documents.registry import ProcessorRegistry
from scriptlens.llm.exceptions import GenerationError
from scriptlens.llm.models import GenerationProgress
from scriptlens.llm.orchestrator import SummaryOrchestrator
from scriptlens.logging.logger import Log


def _echo_json(payload: object) -> None:
    click.echo(json.dumps(payload, indent=2, default=str))


def _processor_for(registry: ProcessorRegistry, path: Path):
    try:
        return registry.create_processor_by_extension(path.suffix)
    except DocumentProcessingError as exc:
        raise click.ClickException(str(exc)) from exc


def _print_progress(progress: GenerationProgress) -> None:
    click.echo(f"[{progress.progress:3d}%] {progress.stage}: {progress.message}", err=True)


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Screenplay ingestion and AI-assisted script analysis."""
    settings = Settings()
    Log.configure(settings.log_level)
    ctx.obj = settings


@cli.command()
@click.argument("path", type=click.Path(path_type=Path))
@click.pass_obj
def validate(settings: Settings, path: Path) -> None:
    """Validate a screenplay file and print the result as JSON."""
    processor = _processor_for(ProcessorRegistry.from_settings(settings), path)
    result = processor.validate(path)
    _echo_json(result.to_dict())
    if not result.is_valid:
        raise SystemExit(1)


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_obj
def extract(settings: Settings, path: Path) -> None:
    """Extract plain text and quality metadata from a screenplay file."""
    processor = _processor_for(ProcessorRegistry.from_settings(settings), path)
    try:
        document = processor.parse(path)
    except DocumentProcessingError as exc:
        raise click.ClickException(str(exc)) from exc
    metadata = asdict(document.metadata)
    metadata["additional_metadata"].pop("extracted_html", None)
    _echo_json(
        {
            "title": document.title,
            "confidence": round(document.confidence, 3),
            "warnings": document.warnings or [],
            "metadata": metadata,
            "content": document.content,
        }
    )


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--length",
    type=click.Choice([length.value for length in SummaryLength]),
    default=SummaryLength.STANDARD.value,
    show_default=True,
)
@click.option(
    "--focus",
    "focus_areas",
    multiple=True,
    type=click.Choice([area.value for area in FocusArea]),
    help="Focus area; repeat for several.",
)
@click.option("--model", default=None, help="Model id; defaults to LLM_MODEL_NAME.")
@click.option("--no-production-notes", is_flag=True, help="Skip production notes.")
@click.option("--marketability", is_flag=True, help="Include a marketability assessment.")
@click.option("--temperature", type=click.FloatRange(0.0, 1.0), default=None)
@click.option("--max-tokens", type=click.IntRange(min=1), default=None)
@click.option("--instructions", default=None, help="Extra free-text instructions.")
@click.pass_obj
def summarize(
    settings: Settings,
    path: Path,
    length: str,
    focus_areas: tuple[str, ...],
    model: str | None,
    no_production_notes: bool,
    marketability: bool,
    temperature: float | None,
    max_tokens: int | None,
    instructions: str | None,
) -> None:
    """Parse a screenplay and generate a structured summary."""
    processor = _processor_for(ProcessorRegistry.from_settings(settings), path)
    try:
        document = processor.parse(path)
    except ValidationFailedError as exc:
        messages = "; ".join(e.message for e in exc.result.errors)
        raise click.ClickException(f"{exc} ({messages})") from exc
    except DocumentProcessingError as exc:
        raise click.ClickException(str(exc)) from exc

    options = AnalysisOptions(
        length=SummaryLength(length),
        focus_areas=frozenset(FocusArea(area) for area in focus_areas),
        custom_instructions=instructions,
        include_production_notes=not no_production_notes,
        assess_marketability=marketability,
        temperature=temperature,
        max_tokens=max_tokens,
    )
    orchestrator = SummaryOrchestrator.from_settings(settings)

    async def run():
        try:
            if model:
                await orchestrator.set_active_model(model)
            return await orchestrator.generate_summary(
                document.content, options, on_progress=_print_progress
            )
        finally:
            await orchestrator.close()

    try:
        summary = asyncio.run(run())
    except GenerationError as exc:
        raise click.ClickException(str(exc)) from exc
    _echo_json({"title": document.title, "summary": summary.to_dict()})


@cli.command()
@click.pass_obj
def models(settings: Settings) -> None:
    """List the models served by the configured endpoint."""
    orchestrator = SummaryOrchestrator.from_settings(settings)

    async def run():
        try:
            return await orchestrator.list_models()
        finally:
            await orchestrator.close()

    try:
        available = asyncio.run(run())
    except GenerationError as exc:
        raise click.ClickException(str(exc)) from exc
    _echo_json([asdict(model) for model in available])


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
