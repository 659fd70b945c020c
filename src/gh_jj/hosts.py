"""Read-only access to the GitHub CLI host configuration.

``gh`` keeps one entry per host in ``hosts.yml``::

    github.com:
        user: alice
        oauth_token: gho_xxx
        git_protocol: https

Newer ``gh`` releases keep the token in the system keyring instead, so
:meth:`Hosts.retrieve_token` falls back to ``gh auth token``.
"""

import logging
import os
from pathlib import Path
import subprocess

import yaml

from .errors import AuthenticationError, ConfigurationError
from .models import Credential, HostEntry
from .utils import DEFAULT_HOST, config_dir


logger = logging.getLogger(__name__)

GITHUB_TOKEN_VARS = ("GH_TOKEN", "GITHUB_TOKEN")
ENTERPRISE_TOKEN_VARS = ("GH_ENTERPRISE_TOKEN", "GITHUB_ENTERPRISE_TOKEN")


class Hosts:
    def __init__(self, entries: dict[str, HostEntry] | None = None) -> None:
        self.entries = dict(entries or {})

    @classmethod
    def load(cls, path: Path | None = None) -> "Hosts":
        path = path or config_dir() / "hosts.yml"
        if not path.exists():
            logger.debug("No gh hosts file at %s", path)
            return cls()
        try:
            with path.open("r", encoding="utf-8") as f:
                raw = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to read gh hosts file {path}") from e
        if raw is None:
            return cls()
        if not isinstance(raw, dict):
            raise ConfigurationError(f"Malformed gh hosts file {path}")

        entries: dict[str, HostEntry] = {}
        for host, data in raw.items():
            data = data or {}
            if not isinstance(data, dict):
                raise ConfigurationError(
                    f"Malformed entry for host '{host}' in gh hosts file {path}"
                )
            entries[str(host)] = HostEntry(
                user=data.get("user"),
                oauth_token=data.get("oauth_token"),
                git_protocol=data.get("git_protocol"),
            )
        logger.debug("Loaded %d gh host(s) from %s", len(entries), path)
        return cls(entries)

    def get(self, hostname: str) -> HostEntry | None:
        return self.entries.get(hostname)

    def retrieve_token(self, hostname: str) -> str | None:
        env_vars = GITHUB_TOKEN_VARS if hostname == DEFAULT_HOST else ENTERPRISE_TOKEN_VARS
        for var in env_vars:
            token = os.environ.get(var)
            if token:
                logger.debug("Using token from $%s", var)
                return token

        entry = self.get(hostname)
        if entry is not None and entry.oauth_token:
            return entry.oauth_token
        if entry is None:
            return None
        return keyring_token(hostname)

    def credential(self, hostname: str, owner: str | None = None) -> Credential:
        """Resolve the owner to clone from and the token to authenticate with."""
        entry = self.get(hostname)
        if owner is None:
            if entry is None:
                raise ConfigurationError(f"No {hostname} host found")
            if not entry.user:
                raise ConfigurationError(f"No {hostname} user found")
            owner = entry.user

        token = self.retrieve_token(hostname)
        if not token:
            raise AuthenticationError(f"No {hostname} token found")
        return Credential(token=token, default_owner=owner)


def keyring_token(hostname: str) -> str | None:
    # gh stores tokens in the system keyring unless --insecure-storage was used
    try:
        res = subprocess.run(
            ["gh", "auth", "token", "--hostname", hostname],
            check=False,
            capture_output=True,
            text=True,
        )
    except OSError as e:
        logger.debug("Could not run gh to read the keyring: %s", e)
        return None
    if res.returncode != 0:
        logger.debug("gh auth token failed: %s", res.stderr.strip())
        return None
    return res.stdout.strip() or None
