"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import logging
import sqlite3
import uuid
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn

from resume_builder.clients.llm_client import LLMClient
from resume_builder.config import AppConfig, load_config
from resume_builder.errors import InputError, RenderError
from resume_builder.export.pdf_renderer import convert_markdown_file
from resume_builder.logging.models import UsageLog
from resume_builder.logging.usage_store import UsageStore
from resume_builder.output.naming import person_from_master
from resume_builder.output.writer import save_application
from resume_builder.parsers.jd_parser import load_job_posting, read_job_posting
from resume_builder.parsers.master_parser import load_master_document
from resume_builder.pipeline.orchestrator import ApplicationOrchestrator, ApplicationResult

app = typer.Typer(
    name="resume-builder",
    help="Generate job-tailored resumes and cover letters from a master resume",
    no_args_is_help=True,
)
console = Console()
logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _record_usage(config: AppConfig, result: ApplicationResult) -> None:
    """Store one usage row per document. A broken store never changes the run's outcome."""
    if not config.usage.enabled:
        return
    run_id = str(uuid.uuid4())
    try:
        store = UsageStore(db_path=config.usage.resolved_db_path)
        for outcome in result.documents.values():
            store.save_log(UsageLog(
                run_id=run_id,
                kind=outcome.kind.value,
                company_name=result.job.company,
                role=result.job.role,
                model=config.llm.model,
                attempts=outcome.attempts,
                elapsed_seconds=outcome.elapsed_seconds,
                input_tokens=outcome.input_tokens,
                output_tokens=outcome.output_tokens,
                success=outcome.succeeded,
                error_message=outcome.error,
            ))
    except (sqlite3.Error, OSError) as e:
        logger.warning("Could not record usage in %s: %s", config.usage.resolved_db_path, e)


@app.command()
def build(
    master: Path = typer.Option(Path("master-resume.md"), "--master", "-m", help="Master resume path (.md/.txt)"),
    role: str = typer.Option(None, "--role", "-r", help="Target role/title; skips the job description prompt"),
    jd: Path = typer.Option(None, "--jd", help="Job description text file; skips the prompt"),
    cover_letter: bool = typer.Option(False, "--cover-letter", "-c", help="Also generate a cover letter"),
    inject_fabrication: bool = typer.Option(
        False, "--inject-fabrication", hidden=True,
        help="Test only: add a fabricated claim to the first cover letter attempt",
    ),
    config_path: Path = typer.Option(None, "--config", help="config.yaml path"),
    output_dir: Path = typer.Option(None, "--output-dir", "-o", help="Output root directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Generate a tailored resume (and optionally a cover letter) for one job."""
    _configure_logging(verbose)
    try:
        config = load_config(config_path)
        config.require_credentials()
        master_text = load_master_document(master)
        if role:
            target_context = role
        elif jd:
            target_context = load_job_posting(jd)
        else:
            console.print(
                "\n[bold]Paste the job title and description[/bold] (two blank lines to finish):\n"
            )
            target_context = read_job_posting()
        if not target_context:
            raise InputError("A job description or --role is required")
    except (InputError, ValueError) as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    if verbose:
        console.print(f"[dim]Master resume: {len(master_text)} chars[/dim]")
        console.print(f"[dim]Target: {len(target_context)} chars[/dim]")
        console.print(f"[dim]Model: {config.llm.model}[/dim]")

    llm = LLMClient(config.llm)
    orchestrator = ApplicationOrchestrator(
        llm,
        max_attempts=config.pipeline.max_attempts,
        inject_fabrication=inject_fabrication,
    )

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task("Starting...", total=None)

        def on_phase(phase: str, detail: str) -> None:
            progress.update(task, description=detail)

        result = asyncio.run(
            orchestrator.run(
                master_text,
                target_context,
                role=role,
                include_cover_letter=cover_letter,
                on_phase=on_phase,
            )
        )

    person = person_from_master(master_text, config.output.person_name)
    try:
        written = save_application(result, output_dir or config.output.resolved_output_dir, person)
    except (RenderError, OSError) as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    finally:
        _record_usage(config, result)

    for path in written:
        console.print(f"[green]Saved: {path}[/green]")

    lines = [f"{result.job.role} at {result.job.company}"]
    for outcome in result.documents.values():
        status = "[green]validated[/green]" if outcome.succeeded else "[red]failed[/red]"
        lines.append(f"{outcome.kind.value}: {status} after {outcome.attempts} attempt(s)")
    tokens = llm.get_token_summary()
    lines.append(f"Tokens: {tokens['input']} in / {tokens['output']} out | {result.elapsed_seconds:.1f}s")
    console.print(Panel("\n".join(lines), title="Result"))

    if not result.succeeded:
        for error in result.errors():
            console.print(f"[red]{error}[/red]")
        raise typer.Exit(1)


@app.command()
def convert(
    input_path: Path = typer.Argument(help="Markdown file to convert (.md)"),
    output_path: Path = typer.Argument(None, help="PDF path (default: input with .pdf)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Convert a Markdown file to a paginated PDF."""
    _configure_logging(verbose)
    try:
        with console.status("Converting to PDF..."):
            written = convert_markdown_file(input_path, output_path)
    except (InputError, RenderError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Successfully converted {input_path} to {written}[/green]")


if __name__ == "__main__":
    app()
