import os
from pathlib import Path
import re

from .models import HostedRepo, RawLocation, Source


DEFAULT_HOST = "github.com"

# Same short forms `gh repo clone` accepts: "repo" or "owner/repo"
SHORT_SOURCE_RE = re.compile(r"^(?:([a-zA-Z0-9-]+)/)?([a-zA-Z0-9_.-]+)$")


def parse_source(repository: str) -> Source:
    m = SHORT_SOURCE_RE.match(repository)
    if m is None:
        return RawLocation(repository)
    return HostedRepo(owner=m.group(1), name=m.group(2))


def default_host() -> str:
    return os.environ.get("GH_HOST") or DEFAULT_HOST


def config_dir() -> Path:
    explicit = os.environ.get("GH_CONFIG_DIR")
    if explicit:
        return Path(explicit)
    base = os.environ.get("XDG_CONFIG_HOME", str(Path.home() / ".config"))
    return Path(base) / "gh"


def api_base_url(host: str) -> str:
    if host == DEFAULT_HOST:
        return "https://api.github.com"
    return f"https://{host}/api/v3"


def web_url(host: str, owner: str, name: str) -> str:
    return f"https://{host}/{owner}/{name}"


def jj_command() -> list[str]:
    return [os.environ.get("GH_JJ_BIN") or "jj"]
