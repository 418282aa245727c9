"""Build and submit the change proposal that installs an app on a tenant."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Protocol

from tenant_patcher.errors import GatewayError
from tenant_patcher.ids import head_branch_name
from tenant_patcher.models import ChangeProposal, ProposalResult

logger = logging.getLogger(__name__)


class PullRequestHost(Protocol):
    async def create_pull_request(
        self,
        *,
        title: str,
        body: str,
        base: str,
        head: str,
        files: dict[str, str],
        commit_message: str,
    ) -> dict[str, object] | None: ...


def render_body(app: str, tenant: str) -> str:
    return (
        "# THIS IS AN AUTOMATED PULL REQUEST.\n"
        " This pull request addresses:\n"
        f" - App {app} installation on tenant {tenant}. \n\n"
        "> Note that we're creating PRs just for the sake of keeping this repository clean. "
        "On a real-world application, the merge should be automated, once human review of "
        "app updates for possibly thousands of tenants wouldn't be humanly possible."
    )


def build_proposal(
    files: Mapping[str, str],
    app: str,
    tenant: str,
    *,
    base: str = "main",
) -> ChangeProposal:
    return ChangeProposal(
        title=f"Install {app} on {tenant}",
        body=render_body(app, tenant),
        base=base,
        head=head_branch_name(tenant),
        commit_message=f"chore(tenant:{tenant}): install {app}",
        files=dict(files),
    )


async def submit_proposal(host: PullRequestHost, proposal: ChangeProposal) -> ProposalResult:
    response = await host.create_pull_request(
        title=proposal.title,
        body=proposal.body,
        base=proposal.base,
        head=proposal.head,
        files=proposal.files,
        commit_message=proposal.commit_message,
    )
    if not response:
        raise GatewayError("repository host returned no pull request")
    number = response.get("number")
    url = response.get("html_url")
    if not isinstance(number, int) or not isinstance(url, str):
        raise GatewayError("repository host returned an incomplete pull request")
    logger.info("Opened pull request #%d from %s", number, proposal.head)
    return ProposalResult(number=number, url=url)


async def submit(
    host: PullRequestHost,
    files: Mapping[str, str],
    app: str,
    tenant: str,
    *,
    base: str = "main",
) -> ProposalResult:
    return await submit_proposal(host, build_proposal(files, app, tenant, base=base))
