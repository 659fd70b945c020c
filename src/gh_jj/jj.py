"""Run the `jj` CLI.

Only stderr of ``jj git clone`` is captured. It is drained line by line while
the child runs, because an unread pipe would eventually block jj.
"""

import asyncio
import logging
from pathlib import Path
from typing import AsyncIterator, Sequence

import typer

from .errors import CloneProcessError, RemoteWiringError
from .models import CloneOutcome
from .utils import jj_command


logger = logging.getLogger(__name__)

READ_CHUNK = 64 * 1024


def clone_command(
    repo_url: str,
    destination: Path | None,
    colocate: bool,
    extra_args: Sequence[str] = (),
    tool: Sequence[str] | None = None,
) -> list[str]:
    cmd = [*(tool or jj_command()), "git", "clone"]
    if colocate:
        cmd.append("--colocate")
    cmd.append(repo_url)
    if destination is not None:
        cmd.append(str(destination))
    cmd += list(extra_args)
    return cmd


def remote_add_command(
    directory: Path, remote_name: str, url: str, tool: Sequence[str] | None = None
) -> list[str]:
    return [
        *(tool or jj_command()),
        "-R",
        str(directory),
        "git",
        "remote",
        "add",
        remote_name,
        url,
    ]


async def read_lines(stream: asyncio.StreamReader | None) -> AsyncIterator[bytes]:
    """Yield newline-terminated chunks of *stream*, however long the lines get."""
    if stream is None:
        return
    pending = b""
    while True:
        chunk = await stream.read(READ_CHUNK)
        if not chunk:
            break
        pending += chunk
        *lines, pending = pending.split(b"\n")
        for line in lines:
            yield line + b"\n"
    if pending:
        yield pending


async def clone(
    repo_url: str,
    destination: Path | None = None,
    colocate: bool = False,
    extra_args: Sequence[str] = (),
    tool: Sequence[str] | None = None,
) -> CloneOutcome:
    cmd = clone_command(repo_url, destination, colocate, extra_args, tool)
    logger.debug("Running %s", cmd)
    try:
        process = await asyncio.create_subprocess_exec(
            *cmd, stderr=asyncio.subprocess.PIPE
        )
    except OSError as e:
        raise CloneProcessError(f"Failed to spawn {cmd[0]}") from e

    outcome = CloneOutcome()
    try:
        async for raw in read_lines(process.stderr):
            line = raw.decode("utf-8", errors="replace").rstrip("\r\n")
            typer.echo(line, err=True)
            outcome.record_line(line)
    except OSError as e:
        # jj would block on a full pipe nobody reads any more
        if process.returncode is None:
            process.kill()
        await process.wait()
        raise CloneProcessError(f"Failed to read {cmd[0]} output") from e

    returncode = await process.wait()
    outcome.exit_success = returncode == 0
    logger.debug(
        "jj git clone exited with %s, directory %s",
        returncode,
        outcome.discovered_directory,
    )
    if not outcome.exit_success:
        raise CloneProcessError(f"JJ clone failed with exit status {returncode}")
    return outcome


async def add_remote(
    directory: Path, remote_name: str, url: str, tool: Sequence[str] | None = None
) -> None:
    cmd = remote_add_command(directory, remote_name, url, tool)
    logger.debug("Running %s", cmd)
    try:
        process = await asyncio.create_subprocess_exec(*cmd)
    except OSError as e:
        raise RemoteWiringError(f"Failed to spawn {cmd[0]}") from e
    returncode = await process.wait()
    if returncode != 0:
        raise RemoteWiringError(
            f"Failed to add {remote_name} remote {url} in {directory} "
            f"(exit status {returncode})"
        )
