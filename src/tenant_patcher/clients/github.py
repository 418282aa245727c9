"""GitHub REST client for reading tenant files and opening change proposals."""

from __future__ import annotations

import base64
import logging
from urllib.parse import quote

import httpx

from tenant_patcher.errors import UpstreamError

logger = logging.getLogger(__name__)


def _github_headers(token: str) -> dict[str, str]:
    headers = {
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": "2022-11-28",
        "User-Agent": "Tenant-Patcher/1.0",
    }
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def _nested_sha(payload: dict[str, object], key: str) -> str:
    inner = payload.get(key)
    if not isinstance(inner, dict) or not isinstance(inner.get("sha"), str):
        raise UpstreamError(f"github payload missing {key}.sha", retryable=False)
    return inner["sha"]


class GitHubClient:
    def __init__(
        self,
        token: str,
        owner: str,
        repo: str,
        *,
        base_url: str = "https://api.github.com",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.owner = owner
        self.repo = repo
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._headers = _github_headers(token)
        self._transport = transport

    @property
    def repo_url(self) -> str:
        return f"{self.base_url}/repos/{self.owner}/{self.repo}"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout, headers=self._headers, transport=self._transport
        )

    @staticmethod
    def _json(response: httpx.Response, action: str) -> dict[str, object]:
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            detail = response.text[:300]
            raise UpstreamError(
                f"github {action} failed ({response.status_code}): {detail}",
                retryable=response.status_code >= 500,
            ) from exc
        payload = response.json()
        if not isinstance(payload, dict):
            raise UpstreamError(f"github {action} payload is not an object", retryable=False)
        return payload

    async def get_file_text(self, path: str, ref: str | None = None) -> str:
        params = {"ref": ref} if ref else None
        try:
            async with self._client() as client:
                response = await client.get(
                    f"{self.repo_url}/contents/{quote(path, safe='/')}", params=params
                )
        except httpx.HTTPError as exc:
            raise UpstreamError(f"github read of {path} failed: {exc}") from exc
        payload = self._json(response, f"read of {path}")
        content = payload.get("content")
        if payload.get("type", "file") != "file" or not isinstance(content, str):
            raise UpstreamError(f"{path} is not a file", retryable=False)
        return base64.b64decode(content).decode("utf-8")

    async def create_pull_request(
        self,
        *,
        title: str,
        body: str,
        base: str,
        head: str,
        files: dict[str, str],
        commit_message: str,
    ) -> dict[str, object] | None:
        """Commit ``files`` on a new ``head`` branch off ``base`` and open a pull request.

        Returns None when the files would not change the base tree.
        """
        try:
            async with self._client() as client:
                ref = self._json(
                    await client.get(f"{self.repo_url}/git/ref/heads/{quote(base, safe='')}"),
                    "base ref lookup",
                )
                base_sha = _nested_sha(ref, "object")
                base_commit = self._json(
                    await client.get(f"{self.repo_url}/git/commits/{base_sha}"),
                    "base commit lookup",
                )
                base_tree = _nested_sha(base_commit, "tree")

                tree = self._json(
                    await client.post(
                        f"{self.repo_url}/git/trees",
                        json={
                            "base_tree": base_tree,
                            "tree": [
                                {"path": path, "mode": "100644", "type": "blob", "content": text}
                                for path, text in files.items()
                            ],
                        },
                    ),
                    "tree create",
                )
                if tree.get("sha") == base_tree:
                    logger.info("No changes against %s; skipping pull request", base)
                    return None

                commit = self._json(
                    await client.post(
                        f"{self.repo_url}/git/commits",
                        json={
                            "message": commit_message,
                            "tree": tree.get("sha"),
                            "parents": [base_sha],
                        },
                    ),
                    "commit create",
                )
                self._json(
                    await client.post(
                        f"{self.repo_url}/git/refs",
                        json={"ref": f"refs/heads/{head}", "sha": commit.get("sha")},
                    ),
                    "branch create",
                )
                response = await client.post(
                    f"{self.repo_url}/pulls",
                    json={"title": title, "body": body, "head": head, "base": base},
                )
        except httpx.HTTPError as exc:
            raise UpstreamError(f"github pull request flow failed: {exc}") from exc
        pull = self._json(response, "pull request create")
        return pull or None
