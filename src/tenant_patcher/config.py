"""Application configuration contract."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from tenant_patcher.errors import ConfigError

DEV_REGISTRY_URL = "http://localhost:3001/api"
HOSTED_REGISTRY_URL = "https://mfe-frameworks-registry.vercel.app/api"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = Field(alias="APP_ENV", default="dev")
    log_level: str = Field(alias="LOG_LEVEL", default="INFO")

    github_token: str = Field(alias="GITHUB_TOKEN", default="")
    github_api_base_url: str = Field(alias="GITHUB_API_BASE_URL", default="https://api.github.com")
    github_repo_owner: str = Field(alias="GITHUB_REPO_OWNER", default="marcelovicentegc")
    github_repo_name: str = Field(alias="GITHUB_REPO_NAME", default="microfrontend-framework")
    github_base_branch: str = Field(alias="GITHUB_BASE_BRANCH", default="main")

    registry_base_url: str = Field(alias="REGISTRY_BASE_URL", default=HOSTED_REGISTRY_URL)
    registry_dev_base_url: str = Field(alias="REGISTRY_DEV_BASE_URL", default=DEV_REGISTRY_URL)

    examples_base_path: str = Field(
        alias="EXAMPLES_BASE_PATH", default="nextjs-build-time-integration/examples"
    )
    http_timeout_seconds: float = Field(alias="HTTP_TIMEOUT_SECONDS", default=30.0)

    # Security: bind host defaults to loopback
    bind_host: str = Field(alias="BIND_HOST", default="127.0.0.1")
    bind_port: int = Field(alias="BIND_PORT", default=8000)

    rate_limit_installs_per_minute: int = Field(
        alias="RATE_LIMIT_INSTALLS_PER_MINUTE", default=30
    )

    @property
    def registry_url(self) -> str:
        if self.app_env == "dev":
            return self.registry_dev_base_url.rstrip("/")
        return self.registry_base_url.rstrip("/")


def validate_settings_for_env(settings: Settings) -> None:
    import logging as _logging
    import warnings

    _logger = _logging.getLogger(__name__)

    if settings.app_env == "prod" and settings.bind_host == "0.0.0.0":
        msg = (
            "SECURITY WARNING: BIND_HOST=0.0.0.0 in production. "
            "This exposes the API to all network interfaces. "
            "Set BIND_HOST=127.0.0.1 and use a reverse proxy."
        )
        _logger.warning(msg)
        warnings.warn(msg, stacklevel=2)

    if settings.app_env != "prod":
        return

    missing: list[str] = []
    required_non_empty = {
        "GITHUB_TOKEN": settings.github_token,
        "GITHUB_REPO_OWNER": settings.github_repo_owner,
        "GITHUB_REPO_NAME": settings.github_repo_name,
        "GITHUB_BASE_BRANCH": settings.github_base_branch,
        "REGISTRY_BASE_URL": settings.registry_base_url,
        "EXAMPLES_BASE_PATH": settings.examples_base_path,
    }
    for key, value in required_non_empty.items():
        if not value.strip():
            missing.append(key)
    if not settings.registry_base_url.startswith("https://"):
        missing.append("REGISTRY_BASE_URL(https required)")

    if missing:
        keys = ", ".join(sorted(set(missing)))
        raise ConfigError(f"invalid production configuration: {keys}")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
