from dataclasses import dataclass, field
from pathlib import Path
import re


CLONE_DIRECTORY_RE = re.compile(r'^Fetching into new repo in "(.*)"$')


@dataclass(frozen=True)
class HostedRepo:
    owner: str | None
    name: str


@dataclass(frozen=True)
class RawLocation:
    location: str


Source = HostedRepo | RawLocation


@dataclass(frozen=True)
class HostEntry:
    user: str | None = None
    oauth_token: str | None = None
    git_protocol: str | None = None


@dataclass(frozen=True)
class Credential:
    token: str
    default_owner: str | None


@dataclass(frozen=True)
class ForkParent:
    url: str
    full_name: str | None = None


@dataclass(frozen=True)
class RepositoryMetadata:
    canonical_url: str
    fork_parent: ForkParent | None = None


@dataclass
class CloneOutcome:
    discovered_directory: Path | None = None
    exit_success: bool = False

    def record_line(self, line: str) -> None:
        """Remember the directory jj reports, keeping only the first one."""
        if self.discovered_directory is not None:
            return
        m = CLONE_DIRECTORY_RE.match(line.strip())
        if m:
            self.discovered_directory = Path(m.group(1))


@dataclass(frozen=True)
class CloneRequest:
    repository: str
    directory: Path | None = None
    colocate: bool = False
    upstream_remote_name: str = "upstream"
    extra_args: tuple[str, ...] = field(default_factory=tuple)
    hostname: str | None = None


@dataclass(frozen=True)
class CloneResult:
    url: str
    directory: Path | None
    upstream: ForkParent | None
