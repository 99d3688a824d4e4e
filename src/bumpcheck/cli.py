"""Command line interface for bumpcheck."""

import logging
from pathlib import Path
from typing import Any, List, Optional

import typer

from bumpcheck.checker import CheckOutcome, CheckResult, check_directory
from bumpcheck.config import Config, get_config
from bumpcheck.exceptions import BumpCheckError
from bumpcheck.vcs.git import GitTool
from bumpcheck.vcs.process import ProcessRunner

app = typer.Typer(help="Check that a project's descriptor version was bumped before committing.")

logger = logging.getLogger(__name__)

EXIT_CODES = {
    CheckOutcome.NOT_A_REPOSITORY: 0,
    CheckOutcome.NO_UNCOMMITTED_CHANGES: 0,
    CheckOutcome.NEW_PROJECT: 0,
    CheckOutcome.VERSION_BUMPED: 0,
    CheckOutcome.VERSION_UNCHANGED: 1,
    CheckOutcome.INTERNAL_ERROR: 2,
}


def configure_logging(level: str) -> None:
    """Send log records to stderr at ``level``."""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _build_tool(config: Config) -> GitTool:
    return GitTool(
        executable=config.GIT_EXECUTABLE,
        runner=ProcessRunner(timeout=config.PROCESS_TIMEOUT_SECONDS),
    )


def _load_config(**overrides) -> Config:
    try:
        return get_config(**overrides)
    except ValueError as e:
        typer.echo(f"Error: invalid configuration: {e}", err=True)
        raise SystemExit(2)


def exit_code_for(results: List[CheckResult]) -> int:
    """Worst exit code over all results (0 when there are none)."""
    return max((EXIT_CODES[r.outcome] for r in results), default=0)


@app.command()
def check(
    directories: Optional[List[Path]] = typer.Argument(
        None, help="Working directories to check (default: current directory)."
    ),
    descriptor: Optional[str] = typer.Option(
        None, "--descriptor", help="Descriptor path relative to the repository root (default: pom.xml)."
    ),
    field: Optional[str] = typer.Option(
        None, "--field", help="Top-level element holding the version (default: version)."
    ),
    revision: Optional[str] = typer.Option(
        None, "--revision", help="Revision to compare against: HEAD~n, commit id or tag (default: HEAD~0)."
    ),
    git: Optional[str] = typer.Option(None, "--git", help="git executable to use."),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="Seconds before a git process is killed; 0 waits forever."
    ),
    config_file: Optional[Path] = typer.Option(None, "--config", help="YAML config file."),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING or ERROR."),
) -> None:
    """Check each directory and print one line per directory.

    Exits 0 when every directory is fine, 1 when a version was not bumped,
    and 2 when a check could not be completed.
    """
    config = _load_config(
        DESCRIPTOR_FILE=descriptor,
        VERSION_FIELD=field,
        REVISION=revision,
        GIT_EXECUTABLE=git,
        PROCESS_TIMEOUT_SECONDS=timeout,
        CONFIG_FILE=str(config_file) if config_file else None,
        LOG_LEVEL=log_level,
    )
    configure_logging(config.LOG_LEVEL)

    tool = _build_tool(config)
    results = []
    for directory in directories or [Path(".")]:
        result = check_directory(directory, config, tool=tool)
        typer.echo(result.message, err=result.outcome is CheckOutcome.INTERNAL_ERROR)
        results.append(result)

    raise typer.Exit(code=exit_code_for(results))


@app.command(name="git-version")
def git_version(
    git: Optional[str] = typer.Option(None, "--git", help="git executable to use."),
) -> None:
    """Print the version of the git executable bumpcheck would use."""
    config = _load_config(GIT_EXECUTABLE=git)
    configure_logging(config.LOG_LEVEL)
    try:
        typer.echo(_build_tool(config).ensure_available())
    except BumpCheckError as e:
        typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(code=2)


# Entry point for console script
def main(argv: Optional[List[str]] = None) -> Any:
    """Run the CLI with ``argv`` (defaults to ``sys.argv[1:]``)."""
    return app(args=argv, prog_name="bumpcheck")
