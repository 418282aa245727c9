"""FastAPI entrypoint."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from tenant_patcher.config import get_settings, validate_settings_for_env
from tenant_patcher.errors import GatewayError, InvalidNameError
from tenant_patcher.logging import configure_logging
from tenant_patcher.routes.health import router as health_router
from tenant_patcher.routes.tenants import limiter
from tenant_patcher.routes.tenants import router as tenants_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    validate_settings_for_env(settings)
    configure_logging(settings)
    logger.info(
        "Tenant patcher ready (repo=%s/%s base=%s registry=%s)",
        settings.github_repo_owner,
        settings.github_repo_name,
        settings.github_base_branch,
        settings.registry_url,
    )
    yield


app = FastAPI(title="Tenant Patcher", version="0.1.0", lifespan=lifespan)
app.state.limiter = limiter


@app.exception_handler(RateLimitExceeded)
async def _rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    return JSONResponse(
        status_code=429,
        content={"error": "rate limit exceeded", "detail": str(exc.detail)},
    )


@app.exception_handler(GatewayError)
async def _gateway_handler(request: Request, exc: GatewayError) -> JSONResponse:
    logger.warning("Repository host gave no result for %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=502,
        content={"error": "bad gateway", "detail": str(exc)},
    )


@app.exception_handler(InvalidNameError)
async def _invalid_name_handler(request: Request, exc: InvalidNameError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"error": "invalid name", "detail": str(exc)})


app.include_router(health_router)
app.include_router(tenants_router)
