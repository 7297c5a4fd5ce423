from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import replace
from pathlib import Path
from typing import NoReturn

import typer

from gitea_release import __version__
from gitea_release.api.gitea import GiteaClient
from gitea_release.api.http import RealHttpClient
from gitea_release.core.config import load_inputs, parse_bool
from gitea_release.core.errors import ErrorCode
from gitea_release.core.result import Err
from gitea_release.output.console import ActionsConsole, ConsoleProtocol, RichConsole
from gitea_release.output.sink import sink_from_env
from gitea_release.release.errors import ReleaseError
from gitea_release.release.model import VersioningStrategy
from gitea_release.release.orchestrator import run_release
from gitea_release.release.versioning import resolve_next_version


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def _exit(console: ConsoleProtocol, message: str, *, code: ErrorCode) -> NoReturn:
    console.error(message)
    raise typer.Exit(code=int(code))


def _in_actions(environ: Mapping[str, str]) -> bool:
    return any(parse_bool(environ.get(k, "")) for k in ("GITHUB_ACTIONS", "GITEA_ACTIONS"))


def make_console() -> ConsoleProtocol:
    if _in_actions(os.environ):
        return ActionsConsole()
    return RichConsole()


def _exit_code(error: ReleaseError) -> ErrorCode:
    if error.kind == "outputs_failed":
        return ErrorCode.IO_ERROR
    return ErrorCode.API_ERROR


@app.command()
def run(
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Resolve version and changelog without creating anything."
    ),
    output_file: Path | None = typer.Option(
        None,
        "--output-file",
        help="Append outputs here instead of $GITHUB_OUTPUT.",
    ),
) -> None:
    """Create the release and/or release pull request configured by INPUT_* variables."""
    console = make_console()

    loaded = load_inputs(os.environ)
    if isinstance(loaded, Err):
        _exit(console, loaded.error.message, code=ErrorCode.USER_ERROR)
    inputs = loaded.value
    if dry_run:
        inputs = replace(inputs, dry_run=True)

    client = GiteaClient(
        RealHttpClient(inputs.token, proxy_server=inputs.proxy_server),
        api_url=inputs.api_url,
        owner=inputs.owner,
        repo=inputs.repo,
    )
    result = run_release(
        inputs=inputs,
        client=client,
        console=console,
        sink=sink_from_env(os.environ, override=output_file),
    )
    if isinstance(result, Err):
        _exit(console, result.error.pretty(), code=_exit_code(result.error))


@app.command("next-version")
def next_version(
    latest: str | None = typer.Option(None, "--latest", help="Latest release tag (omit for none)."),
    strategy: str = typer.Option(
        VersioningStrategy.ALWAYS_BUMP_PATCH.value,
        "--strategy",
        help="always-bump-major, always-bump-minor or always-bump-patch.",
    ),
) -> None:
    """Print the version that would follow LATEST."""
    typer.echo(str(resolve_next_version(latest, strategy)))


def _print_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(
        False, "--version", callback=_print_version, is_eager=True, help="Show version and exit."
    ),
) -> None:
    del version


def main() -> None:
    app()
