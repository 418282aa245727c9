"""Collaborator clients built from settings at request composition time."""

from fastapi import Depends

from tenant_patcher.clients import GitHubClient, RegistryClient
from tenant_patcher.config import Settings, get_settings


def get_registry_client(settings: Settings = Depends(get_settings)) -> RegistryClient:  # noqa: B008
    return RegistryClient(settings.registry_url, timeout=settings.http_timeout_seconds)


def get_github_client(settings: Settings = Depends(get_settings)) -> GitHubClient:  # noqa: B008
    return GitHubClient(
        settings.github_token,
        settings.github_repo_owner,
        settings.github_repo_name,
        base_url=settings.github_api_base_url,
        timeout=settings.http_timeout_seconds,
    )
