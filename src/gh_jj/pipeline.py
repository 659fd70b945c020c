import logging
from pathlib import Path
from typing import Callable, Sequence

from . import jj
from .errors import MissingDirectoryError
from .github import GitHubClient
from .hosts import Hosts
from .models import (
    CloneOutcome,
    CloneRequest,
    CloneResult,
    ForkParent,
    HostedRepo,
)
from .utils import default_host, parse_source


logger = logging.getLogger(__name__)

ClientFactory = Callable[[Hosts, str, str | None], GitHubClient]


def resolve_directory(destination: Path | None, outcome: CloneOutcome) -> Path:
    if destination is not None:
        return destination
    if outcome.discovered_directory is not None:
        return outcome.discovered_directory
    raise MissingDirectoryError(
        "Couldn't find directory: jj did not report where it cloned the repo"
    )


async def clone_repository(
    request: CloneRequest,
    hosts: Hosts | None = None,
    client_factory: ClientFactory | None = None,
    tool: Sequence[str] | None = None,
) -> CloneResult:
    """Clone *request.repository* with jj and add an upstream remote for forks."""
    source = parse_source(request.repository)
    logger.debug("Resolved %r to %s", request.repository, source)

    upstream: ForkParent | None = None
    if isinstance(source, HostedRepo):
        host = request.hostname or default_host()
        if hosts is None:
            hosts = Hosts.load()
        factory = client_factory or GitHubClient.from_hosts
        async with factory(hosts, host, source.owner) as client:
            metadata = await client.fetch(source.owner, source.name)
        repo_url = metadata.canonical_url
        upstream = metadata.fork_parent
    else:
        repo_url = source.location

    outcome = await jj.clone(
        repo_url,
        request.directory,
        request.colocate,
        request.extra_args,
        tool=tool,
    )

    if upstream is None:
        return CloneResult(
            url=repo_url,
            directory=request.directory or outcome.discovered_directory,
            upstream=None,
        )

    directory = resolve_directory(request.directory, outcome)
    await jj.add_remote(directory, request.upstream_remote_name, upstream.url, tool=tool)
    return CloneResult(url=repo_url, directory=directory, upstream=upstream)
