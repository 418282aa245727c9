"""In-memory stand-ins for the registry and GitHub HTTP APIs."""

from __future__ import annotations

import base64
import json

import httpx

NEXT_CONFIG = """module.exports = {
  async rewrites() {
    return [
      // [REWRITES ENTRY-POINT]
    ];
  },
};
"""

MF_CONFIG = """export const config = {
  items: [
    // [ITEMS ENTRY-POINT]
    { route: "/", title: "Home", pageName: "Home"},
  ],
};
"""

APP_CONFIG_MODULE = """import { AppConfig } from "@mfe-frameworks/config";

export default {
  basePath: "/billing",
  items: [
    {
      route: "/home",
      pageName: "Home",
      title: "Home",
    },
  ],
} as AppConfig;
"""


class FakeRegistry:
    def __init__(
        self, bundle: bytes, config_text: str = APP_CONFIG_MODULE, *, config_status: int = 200
    ) -> None:
        self.bundle = bundle
        self.config_text = config_text
        self.config_status = config_status
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/api/app":
            name = request.url.params.get("name")
            if name != "billing":
                return httpx.Response(404, json={"error": "not found"})
            return httpx.Response(
                200,
                json={
                    "downloadUrl": "https://cdn.test/billing.zip",
                    "appConfigDownloadUrl": "https://cdn.test/billing.config.ts",
                },
            )
        if request.url.path == "/billing.zip":
            return httpx.Response(200, content=self.bundle)
        if request.url.path == "/billing.config.ts":
            if self.config_status != 200:
                return httpx.Response(self.config_status, text="upstream failure")
            return httpx.Response(200, json=self.config_text)
        return httpx.Response(404)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


class FakeGitHub:
    """Minimal git data API over a single repository."""

    def __init__(
        self,
        files: dict[str, str] | None = None,
        *,
        owner: str = "acme-org",
        repo: str = "host-app",
        unchanged_tree: bool = False,
        empty_pull: bool = False,
    ) -> None:
        self.files = dict(files or {})
        self.prefix = f"/repos/{owner}/{repo}"
        self.unchanged_tree = unchanged_tree
        self.empty_pull = empty_pull
        self.trees: list[dict[str, object]] = []
        self.commits: list[dict[str, object]] = []
        self.refs: list[dict[str, object]] = []
        self.pulls: list[dict[str, object]] = []
        self.requests: list[httpx.Request] = []

    @property
    def committed_files(self) -> dict[str, str]:
        tree = self.trees[-1]["tree"]
        assert isinstance(tree, list)
        return {str(item["path"]): str(item["content"]) for item in tree}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if not path.startswith(self.prefix):
            return httpx.Response(404, json={"message": "Not Found"})
        path = path[len(self.prefix) :]
        if request.method == "GET" and path.startswith("/contents/"):
            name = path[len("/contents/") :]
            if name not in self.files:
                return httpx.Response(404, json={"message": "Not Found"})
            encoded = base64.b64encode(self.files[name].encode("utf-8")).decode("ascii")
            chunked = "\n".join(encoded[i : i + 60] for i in range(0, len(encoded), 60))
            return httpx.Response(200, json={"type": "file", "path": name, "content": chunked})
        if request.method == "GET" and path == "/git/ref/heads/main":
            return httpx.Response(200, json={"ref": "refs/heads/main", "object": {"sha": "c0"}})
        if request.method == "GET" and path == "/git/commits/c0":
            return httpx.Response(200, json={"sha": "c0", "tree": {"sha": "t0"}})
        payload = json.loads(request.content.decode("utf-8")) if request.content else {}
        if request.method == "POST" and path == "/git/trees":
            self.trees.append(payload)
            sha = "t0" if self.unchanged_tree else f"t{len(self.trees)}"
            return httpx.Response(201, json={"sha": sha})
        if request.method == "POST" and path == "/git/commits":
            self.commits.append(payload)
            return httpx.Response(201, json={"sha": f"c{len(self.commits)}"})
        if request.method == "POST" and path == "/git/refs":
            self.refs.append(payload)
            return httpx.Response(201, json={"ref": payload["ref"]})
        if request.method == "POST" and path == "/pulls":
            self.pulls.append(payload)
            if self.empty_pull:
                return httpx.Response(201, json={})
            number = 40 + len(self.pulls)
            return httpx.Response(
                201,
                json={
                    "number": number,
                    "html_url": f"https://github.test/acme-org/host-app/pull/{number}",
                },
            )
        return httpx.Response(404, json={"message": "Not Found"})

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)
