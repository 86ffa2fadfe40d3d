"""Branch head lookup against the GitHub REST API."""

from __future__ import annotations

from typing import Any

import httpx

from branch_updater.constants import SHA_HASH_LENGTH
from branch_updater.logging import get_logger
from branch_updater.models import Found, RemoteHead, Unavailable

log = get_logger("branch_updater.github")


class BranchLookup:
    """Resolves the head commit of one branch.

    A single GET, no retries. Every failure mode collapses into
    ``Unavailable`` so the caller only has to branch on the result type.
    """

    def __init__(
        self,
        url: str,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._url = url
        self._timeout = timeout
        self._client = client

    @property
    def url(self) -> str:
        return self._url

    async def get_head(self) -> RemoteHead:
        """Query the branch endpoint and return its head revision."""
        try:
            if self._client is not None:
                resp = await self._client.get(self._url, headers={"Accept": "application/json"})
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    resp = await client.get(self._url, headers={"Accept": "application/json"})
        except httpx.HTTPError as exc:
            log.warning("branch_lookup_request_failed", url=self._url, error=str(exc))
            return Unavailable(reason=f"request failed: {exc}")

        if resp.status_code != 200:
            log.warning("branch_lookup_bad_status", url=self._url, status=resp.status_code)
            return Unavailable(reason=f"status {resp.status_code}")

        try:
            data = resp.json()
        except ValueError:
            log.warning("branch_lookup_invalid_json", url=self._url)
            return Unavailable(reason="invalid json")

        sha = _extract_sha(data)
        if sha is None:
            log.warning("branch_lookup_missing_sha", url=self._url)
            return Unavailable(reason="missing commit sha")

        log.debug("branch_lookup_ok", url=self._url, sha=sha)
        return Found(sha=sha)


def _extract_sha(data: Any) -> str | None:
    """Pull ``commit.sha`` out of a branch payload, or None if malformed."""
    if not isinstance(data, dict):
        return None
    commit = data.get("commit")
    if not isinstance(commit, dict):
        return None
    sha = commit.get("sha")
    if not isinstance(sha, str) or len(sha) != SHA_HASH_LENGTH:
        return None
    return sha
