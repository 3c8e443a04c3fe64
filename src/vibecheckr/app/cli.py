from __future__ import annotations

import json
from pathlib import Path

import typer
import uvicorn
from dotenv import load_dotenv

from .config import AppConfig
from .cli_formatter import format_report
from .main import analyze as run_analysis, create_container
from .server import create_app
from ..core.domain.exceptions import AcquisitionError, InvalidRequestError

load_dotenv()

app = typer.Typer(add_completion=False, no_args_is_help=True)


def _with_overrides(
    config: AppConfig,
    *,
    strategy: str | None = None,
    log_level: str | None = None,
    console_output: bool | None = None,
) -> AppConfig:
    """Return a copy of the frozen config with CLI overrides applied."""
    update: dict[str, object] = {}
    if strategy:
        update["analysis"] = config.analysis.model_copy(update={"strategy": strategy})
    logging_update: dict[str, object] = {}
    if log_level:
        logging_update["level"] = log_level.upper()
    if console_output is not None:
        logging_update["console_output"] = console_output
    if logging_update:
        update["logging"] = config.logging.model_copy(update=logging_update)
    return config.model_copy(update=update) if update else config


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", help="Bind address (default from config)"),
    port: int | None = typer.Option(None, "--port", help="Bind port (default from config)"),
    log_level: str = typer.Option("INFO", "--log-level", help="Log level", case_sensitive=False),
):
    """Run the HTTP service."""
    config = _with_overrides(AppConfig(), log_level=log_level, console_output=True)
    container = create_container(config)
    bind_host = host or config.server.host
    bind_port = port or config.server.port

    typer.echo(f"VibeCheckr listening on http://{bind_host}:{bind_port}")
    typer.echo(f"Log file: {config.directories.logs_dir / config.logging.log_file}")
    try:
        uvicorn.run(create_app(container), host=bind_host, port=bind_port, log_level=log_level.lower())
    finally:
        # Always shutdown resources to close file handles
        container.shutdown_resources()


@app.command()
def analyze(
    github_url: str | None = typer.Argument(None, help="Git URL of the repository to analyze"),
    zip_path: Path | None = typer.Option(None, "--zip", exists=True, dir_okay=False, help="ZIP archive to analyze"),
    strategy: str | None = typer.Option(None, "--strategy", help="single-pass or multi-agent"),
    log_level: str = typer.Option("INFO", "--log-level", help="Log level", case_sensitive=False),
    json_output: bool = typer.Option(False, "--json", help="Output result as JSON"),
):
    """Analyze one repository locally and print the report."""
    if not github_url and zip_path is None:
        typer.echo("Error: provide a Git URL or --zip PATH", err=True)
        raise typer.Exit(code=2)
    if strategy and strategy not in ("single-pass", "multi-agent"):
        typer.echo(f"Error: Invalid strategy '{strategy}'. Must be 'single-pass' or 'multi-agent'.", err=True)
        raise typer.Exit(code=2)

    config = _with_overrides(AppConfig(), strategy=strategy, log_level=log_level)
    if not json_output:
        typer.echo(f"Starting analysis: {github_url or zip_path}")
        typer.echo(f"Strategy: {config.analysis.strategy}, Provider: {config.llm.provider_name}, Model: {config.llm.model_name}")

    try:
        report = run_analysis(github_url, zip_path=zip_path, config=config)
    except InvalidRequestError as e:
        typer.echo(f"Error: {e.message}: {e.details}", err=True)
        raise typer.Exit(code=2)
    except AcquisitionError as e:
        typer.echo(f"Error: {e.message}: {e.details}", err=True)
        raise typer.Exit(code=1)

    if json_output:
        typer.echo(json.dumps(report, ensure_ascii=False, indent=2))
    else:
        typer.echo(format_report(report))


if __name__ == "__main__":
    app()
