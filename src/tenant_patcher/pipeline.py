"""Install an app bundle on a tenant as a single pull request."""

from __future__ import annotations

import asyncio
import logging

from tenant_patcher.appconfig import coerce
from tenant_patcher.bundle import extract
from tenant_patcher.clients import GitHubClient, RegistryClient
from tenant_patcher.merger import merge_items, merge_rewrite
from tenant_patcher.models import (
    NEXT_CONFIG_FILE,
    TENANT_CONFIG_FILE,
    ProposalResult,
    check_name,
)
from tenant_patcher.submitter import submit

logger = logging.getLogger(__name__)


def tenant_file(examples_base_path: str, tenant: str, name: str) -> str:
    return f"{examples_base_path.rstrip('/')}/{tenant}/{name}"


async def patch_tenant(
    app: str,
    tenant: str,
    *,
    registry: RegistryClient,
    github: GitHubClient,
    examples_base_path: str,
    base_branch: str = "main",
) -> ProposalResult:
    check_name("app", app)
    check_name("tenant", tenant)
    location = await registry.resolve_app(app)

    archive, raw_config = await asyncio.gather(
        registry.download_bundle(location.download_url),
        registry.download_config(location.app_config_download_url),
    )
    files = await asyncio.to_thread(
        extract, archive, app, tenant, examples_base_path=examples_base_path
    )
    config = coerce(raw_config)
    logger.info(
        "App %s config: base path %s, %d nav items", app, config.base_path, len(config.items)
    )

    next_config_path = tenant_file(examples_base_path, tenant, NEXT_CONFIG_FILE)
    tenant_config_path = tenant_file(examples_base_path, tenant, TENANT_CONFIG_FILE)
    next_config, tenant_config = await asyncio.gather(
        github.get_file_text(next_config_path, ref=base_branch),
        github.get_file_text(tenant_config_path, ref=base_branch),
    )

    files.add(next_config_path, merge_rewrite(next_config, config, app))
    files.add(tenant_config_path, merge_items(tenant_config, config, app))

    return await submit(github, files, app, tenant, base=base_branch)
