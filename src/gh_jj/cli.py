import asyncio
import logging
from pathlib import Path
import sys

import typer

from . import __version__
from .errors import GhJjError, iter_causes
from .models import CloneRequest
from .pipeline import clone_repository


app = typer.Typer(
    help="Work with GitHub repositories using the Jujutsu VCS.", no_args_is_help=True
)


def split_passthrough(argv: list[str]) -> tuple[list[str], list[str]]:
    """Split off everything after the first `--`; it goes to `jj git clone` as is."""
    if "--" not in argv:
        return argv, []
    i = argv.index("--")
    return argv[:i], argv[i + 1 :]


def report_error(exc: GhJjError) -> None:
    typer.echo(f"Error: {exc}", err=True)
    for cause in iter_causes(exc):
        typer.echo(f"  caused by: {cause}", err=True)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"gh-jj {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log debug information to stderr."
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@app.command()
def clone(
    ctx: typer.Context,
    repository: str = typer.Argument(
        ...,
        metavar="REPOSITORY",
        help="Repository to clone. Uses the same syntax as `gh repo clone`.",
    ),
    directory: Path | None = typer.Argument(
        None,
        help="Directory into which to clone the repository. "
        "By default, a new directory named after the repo is created in CWD.",
    ),
    colocate: bool = typer.Option(
        False,
        "--colocate",
        help="Colocate the repository (place `.git` in the root of the repository).",
    ),
    upstream_remote_name: str = typer.Option(
        "upstream",
        "--upstream-remote-name",
        "-u",
        help="Upstream remote name when cloning a fork.",
    ),
    hostname: str | None = typer.Option(
        None,
        "--hostname",
        envvar="GH_HOST",
        help="GitHub host to look the repository up on (default github.com).",
    ),
) -> None:
    """
    Clone a repository from GitHub and initialize it as a Jujutsu repo.

    Arguments after `--` are passed to `jj git clone`.
    """
    rest = (ctx.obj or {}).get("rest", [])
    request = CloneRequest(
        repository=repository,
        directory=directory,
        colocate=colocate,
        upstream_remote_name=upstream_remote_name,
        extra_args=tuple(rest),
        hostname=hostname,
    )
    try:
        asyncio.run(clone_repository(request))
    except GhJjError as e:
        report_error(e)
        raise typer.Exit(code=1) from e


def main() -> None:
    args, rest = split_passthrough(sys.argv[1:])
    app(args=args, obj={"rest": rest}, prog_name="gh-jj")
