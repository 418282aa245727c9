import pytest

from tenant_patcher.errors import GatewayError
from tenant_patcher.submitter import build_proposal, submit, submit_proposal


class StubHost:
    def __init__(self, response):
        self.response = response
        self.calls: list[dict[str, object]] = []

    async def create_pull_request(self, **kwargs):
        self.calls.append(kwargs)
        return self.response


def test_build_proposal_names_branch_and_commit() -> None:
    proposal = build_proposal({"a/acme/x.ts": "x"}, "billing", "acme", base="main")
    assert proposal.title == "Install billing on acme"
    assert proposal.commit_message == "chore(tenant:acme): install billing"
    assert proposal.head.startswith("acme-")
    assert len(proposal.head) == len("acme-") + 36
    assert "AUTOMATED PULL REQUEST" in proposal.body
    assert "merge should be automated" in proposal.body
    assert proposal.files == {"a/acme/x.ts": "x"}


def test_head_branch_is_fresh_per_proposal() -> None:
    first = build_proposal({}, "billing", "acme")
    second = build_proposal({}, "billing", "acme")
    assert first.head != second.head


@pytest.mark.asyncio
async def test_submit_returns_number_and_url() -> None:
    host = StubHost({"number": 7, "html_url": "https://github.test/pull/7"})
    result = await submit(host, {"a/acme/x.ts": "x"}, "billing", "acme")
    assert result.number == 7
    assert result.url == "https://github.test/pull/7"
    assert result.message == (
        "Pull request #7 successfully created. Visit it at https://github.test/pull/7"
    )
    call = host.calls[0]
    assert call["base"] == "main"
    assert call["files"] == {"a/acme/x.ts": "x"}


@pytest.mark.asyncio
@pytest.mark.parametrize("response", [None, {}])
async def test_falsy_host_response_is_gateway_error(response) -> None:
    host = StubHost(response)
    with pytest.raises(GatewayError):
        await submit_proposal(host, build_proposal({}, "billing", "acme"))


@pytest.mark.asyncio
async def test_incomplete_host_response_is_gateway_error() -> None:
    host = StubHost({"number": "7"})
    with pytest.raises(GatewayError, match="incomplete"):
        await submit_proposal(host, build_proposal({}, "billing", "acme"))
