"""Typer CLI entrypoint for bulk resume screening."""

from __future__ import annotations

from pathlib import Path
from typing import Any, List, Optional

import typer
import yaml
from pydantic import ValidationError

from .container import create_container
from .core import coverage_ratio
from .llm import ScoringError
from .logging import configure_logging
from .pipeline import OutputWriter
from .schemas import SourceFile
from .schemas.config import load_config
from .stores import CandidateStore, StoreError

app = typer.Typer(help="Bulk resume screening CLI.")

ConfigOption = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path.")
LogLevelOption = typer.Option("WARNING", help="Log level for structured logging.")
StoreOption = typer.Option(None, help="Candidate store: 'local' or 'rest'.")
StorePathOption = typer.Option(None, file_okay=False, help="Directory of the local store.")
StoreUrlOption = typer.Option(None, envvar="STORE_URL", help="Hosted backend URL.")
StoreKeyOption = typer.Option(None, envvar="STORE_KEY", help="Hosted backend API key.")
LLMEndpointOption = typer.Option(None, envvar="LLM_ENDPOINT", help="Chat-completion endpoint.")
LLMKeyOption = typer.Option(None, envvar="LLM_API_KEY", help="Chat-completion API key.")
LLMModelOption = typer.Option(None, envvar="LLM_MODEL", help="Model identifier.")


def _load_settings(config: Optional[Path], **overrides: Any) -> dict[str, Any]:
    raw: Any = None
    if config:
        with config.open("r", encoding="utf-8") as handle:
            raw = yaml.safe_load(handle)
    try:
        app_config = load_config(raw)
    except (ValueError, ValidationError) as exc:
        raise typer.BadParameter(f"Invalid config file: {exc}", param_name="config") from exc

    settings = app_config.to_settings()
    for key, value in overrides.items():
        if value is None:
            continue
        section, field = key.split("__", 1)
        settings.setdefault(section, {})[field] = value
    return settings


def _open_store(
    config: Optional[Path],
    log_level: str,
    store: Optional[str],
    store_path: Optional[Path],
    store_url: Optional[str],
    store_key: Optional[str],
) -> CandidateStore:
    settings = _load_settings(
        config,
        store__kind=store,
        store__path=str(store_path) if store_path else None,
        store__url=store_url,
        store__api_key=store_key,
    )
    configure_logging(log_level)
    return create_container(settings=settings).store()


@app.command()
def run(
    resumes: List[Path] = typer.Argument(..., exists=True, readable=True, dir_okay=False, help="Resume files (PDF, DOC, DOCX)."),
    job_id: str = typer.Option(..., "--job-id", help="Job position identifier."),
    output: Path = typer.Option(
        Path("screening_results.json"),
        dir_okay=False,
        resolve_path=True,
        help="Output JSON path.",
    ),
    config: Optional[Path] = ConfigOption,
    log_level: str = LogLevelOption,
    store: Optional[str] = StoreOption,
    store_path: Optional[Path] = StorePathOption,
    store_url: Optional[str] = StoreUrlOption,
    store_key: Optional[str] = StoreKeyOption,
    llm_endpoint: Optional[str] = LLMEndpointOption,
    llm_api_key: Optional[str] = LLMKeyOption,
    llm_model: Optional[str] = LLMModelOption,
) -> None:
    """Screen resumes against a job position and rank them."""
    settings = _load_settings(
        config,
        store__kind=store,
        store__path=str(store_path) if store_path else None,
        store__url=store_url,
        store__api_key=store_key,
        llm__endpoint=llm_endpoint,
        llm__api_key=llm_api_key,
        llm__model=llm_model,
    )
    configure_logging(log_level)

    container = create_container(settings=settings)
    pipeline = container.pipeline()
    files = [SourceFile.from_path(path) for path in resumes]

    try:
        results = pipeline.run_batch(files, job_id)
    except StoreError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    OutputWriter().write(output, results, job_position_id=job_id)

    for result in results:
        coverage = result.result.requirement_coverage
        line = f"{result.rank:>3}. {result.match_score:5.1f}  {result.status:<9}  {result.file_name}"
        if coverage:
            line += f"  (requirements {coverage_ratio(coverage):.0%})"
        elif result.status == "failed":
            line += f"  [{result.error_kind}] {result.result.summary}"
        typer.echo(line)
    typer.echo(f"Processed {len(results)} resumes. Results saved to {output}.")


@app.command()
def status(
    candidate_id: str = typer.Argument(..., help="Candidate identifier."),
    new_status: str = typer.Argument(..., metavar="STATUS", help="new, accepted or rejected."),
    config: Optional[Path] = ConfigOption,
    log_level: str = LogLevelOption,
    store: Optional[str] = StoreOption,
    store_path: Optional[Path] = StorePathOption,
    store_url: Optional[str] = StoreUrlOption,
    store_key: Optional[str] = StoreKeyOption,
) -> None:
    """Update a candidate's review status."""
    candidate_store = _open_store(config, log_level, store, store_path, store_url, store_key)
    try:
        candidate = candidate_store.update_candidate_status(candidate_id, new_status)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_name="status") from exc
    except StoreError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    typer.echo(f"{candidate.name}: {candidate.status}")


@app.command()
def ask(
    question: str = typer.Argument(..., help="Question for the recruiter assistant."),
    candidate_id: Optional[str] = typer.Option(None, help="Candidate to discuss."),
    job_id: Optional[str] = typer.Option(None, "--job-id", help="Job position for context."),
    config: Optional[Path] = ConfigOption,
    log_level: str = LogLevelOption,
    store: Optional[str] = StoreOption,
    store_path: Optional[Path] = StorePathOption,
    store_url: Optional[str] = StoreUrlOption,
    store_key: Optional[str] = StoreKeyOption,
    llm_endpoint: Optional[str] = LLMEndpointOption,
    llm_api_key: Optional[str] = LLMKeyOption,
    llm_model: Optional[str] = LLMModelOption,
) -> None:
    """Ask the recruiter assistant about a candidate."""
    settings = _load_settings(
        config,
        store__kind=store,
        store__path=str(store_path) if store_path else None,
        store__url=store_url,
        store__api_key=store_key,
        llm__endpoint=llm_endpoint,
        llm__api_key=llm_api_key,
        llm__model=llm_model,
    )
    configure_logging(log_level)

    assistant = create_container(settings=settings).assistant()
    try:
        answer = assistant.reply(question, candidate_id=candidate_id, job_position_id=job_id)
    except (ScoringError, StoreError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    typer.echo(answer)


@app.command()
def jobs(
    config: Optional[Path] = ConfigOption,
    log_level: str = LogLevelOption,
    store: Optional[str] = StoreOption,
    store_path: Optional[Path] = StorePathOption,
    store_url: Optional[str] = StoreUrlOption,
    store_key: Optional[str] = StoreKeyOption,
) -> None:
    """List job positions, newest first."""
    candidate_store = _open_store(config, log_level, store, store_path, store_url, store_key)
    try:
        positions = candidate_store.list_job_positions()
    except StoreError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    if not positions:
        typer.echo("No job positions found.")
    for job in positions:
        typer.echo(f"{job.id}  {job.status:<8}  {job.title}  ({len(job.requirements)} requirements)")


@app.command()
def candidates(
    status_filter: Optional[str] = typer.Option(None, "--status", help="Only show new, accepted or rejected candidates."),
    config: Optional[Path] = ConfigOption,
    log_level: str = LogLevelOption,
    store: Optional[str] = StoreOption,
    store_path: Optional[Path] = StorePathOption,
    store_url: Optional[str] = StoreUrlOption,
    store_key: Optional[str] = StoreKeyOption,
) -> None:
    """List candidates, newest first."""
    candidate_store = _open_store(config, log_level, store, store_path, store_url, store_key)
    try:
        records = candidate_store.list_candidates(status_filter)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_name="status") from exc
    except StoreError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    if not records:
        typer.echo("No candidates found.")
    for candidate in records:
        typer.echo(f"{candidate.id}  {candidate.status:<8}  {candidate.name}")


@app.command()
def analyses(
    limit: int = typer.Option(10, min=1, help="Number of analyses to show."),
    config: Optional[Path] = ConfigOption,
    log_level: str = LogLevelOption,
    store: Optional[str] = StoreOption,
    store_path: Optional[Path] = StorePathOption,
    store_url: Optional[str] = StoreUrlOption,
    store_key: Optional[str] = StoreKeyOption,
) -> None:
    """Show the most recent resume analyses."""
    candidate_store = _open_store(config, log_level, store, store_path, store_url, store_key)
    try:
        records = candidate_store.list_recent_analyses(limit)
    except StoreError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    if not records:
        typer.echo("No analyses found.")
    for record in records:
        typer.echo(
            f"{record.analysis_results.match_score:5.1f}  {record.candidate_name or record.candidate_id}"
            f"  {record.file_name}  (candidate {record.candidate_id})"
        )


def main() -> None:
    app()


if __name__ == "__main__":
    main()
