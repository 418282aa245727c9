"""Tenant patching route."""

import logging

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field, model_validator
from slowapi import Limiter
from slowapi.util import get_remote_address

from tenant_patcher.clients import GitHubClient, RegistryClient
from tenant_patcher.config import Settings, get_settings
from tenant_patcher.logging import install_context
from tenant_patcher.models import NAME_PATTERN
from tenant_patcher.pipeline import patch_tenant
from tenant_patcher.routes.dependencies import get_github_client, get_registry_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["api-tenants"])
limiter = Limiter(key_func=get_remote_address)

def _install_rate_limit() -> str:
    return f"{get_settings().rate_limit_installs_per_minute}/minute"


class TenantInstallBody(BaseModel):
    app: str = Field(min_length=1, max_length=100, pattern=NAME_PATTERN)
    tenant: str = Field(min_length=1, max_length=100, pattern=NAME_PATTERN)

    @model_validator(mode="before")
    @classmethod
    def _unwrap_data_envelope(cls, value: object) -> object:
        # Dashboard clients post {"data": {"app": ..., "tenant": ...}}.
        if isinstance(value, dict) and isinstance(value.get("data"), dict):
            return value["data"]
        return value


@router.post("/patch-tenant", status_code=201)
@limiter.limit(_install_rate_limit)
async def patch_tenant_route(
    request: Request,
    body: TenantInstallBody,
    registry: RegistryClient = Depends(get_registry_client),  # noqa: B008
    github: GitHubClient = Depends(get_github_client),  # noqa: B008
    settings: Settings = Depends(get_settings),  # noqa: B008
) -> dict[str, str]:
    del request
    with install_context(body.app, body.tenant):
        logger.info("Installing %s on %s", body.app, body.tenant)
        result = await patch_tenant(
            body.app,
            body.tenant,
            registry=registry,
            github=github,
            examples_base_path=settings.examples_base_path,
            base_branch=settings.github_base_branch,
        )
    return {"message": result.message}
