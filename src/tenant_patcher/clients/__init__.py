"""HTTP clients for the registry, bundle transport and repository host."""

from tenant_patcher.clients.github import GitHubClient
from tenant_patcher.clients.registry import RegistryClient

__all__ = ["GitHubClient", "RegistryClient"]
