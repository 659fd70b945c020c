"""The one GitHub API call gh-jj needs: look up a repository."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .errors import ConfigurationError, RemoteLookupError
from .hosts import Hosts
from .models import Credential, ForkParent, RepositoryMetadata
from .utils import api_base_url, web_url


logger = logging.getLogger(__name__)

API_VERSION = "2022-11-28"


class GitHubClient:
    """Authenticated client for a single GitHub host.

    Use as an async context manager so the underlying connection pool is
    closed when the lookup is done.
    """

    def __init__(
        self,
        host: str,
        credential: Credential,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.host = host
        self.credential = credential
        self._client = httpx.AsyncClient(
            base_url=api_base_url(host),
            headers={
                "Authorization": f"Bearer {credential.token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": API_VERSION,
            },
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_hosts(
        cls,
        hosts: Hosts,
        host: str,
        owner: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> GitHubClient:
        return cls(host, hosts.credential(host, owner), transport=transport)

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    async def get_repository(self, owner: str, name: str) -> dict[str, Any]:
        path = f"/repos/{owner}/{name}"
        logger.debug("GET %s%s", self._client.base_url, path)
        try:
            response = await self._client.get(path)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise RemoteLookupError(
                f"Failed to get repo info for {owner}/{name}: "
                f"HTTP {e.response.status_code}"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise RemoteLookupError(f"Failed to get repo info for {owner}/{name}") from e
        if not isinstance(data, dict):
            raise RemoteLookupError(
                f"Failed to get repo info for {owner}/{name}: unexpected response"
            )
        return data

    async def fetch(self, owner: str | None, name: str) -> RepositoryMetadata:
        owner = owner or self.credential.default_owner
        if owner is None:
            raise ConfigurationError(f"No {self.host} user found")

        data = await self.get_repository(owner, name)
        parent = data.get("parent") or None
        if parent is not None and not isinstance(parent, dict):
            raise RemoteLookupError(
                f"Failed to get repo info for {owner}/{name}: unexpected parent"
            )
        fork_parent = None
        if parent and parent.get("html_url"):
            fork_parent = ForkParent(
                url=parent["html_url"], full_name=parent.get("full_name")
            )
            logger.debug("%s/%s is a fork of %s", owner, name, fork_parent.url)

        return RepositoryMetadata(
            canonical_url=web_url(self.host, owner, name),
            fork_parent=fork_parent,
        )
