import pytest

from tenant_patcher.config import (
    DEV_REGISTRY_URL,
    get_settings,
    validate_settings_for_env,
)
from tenant_patcher.errors import ConfigError


def _prod_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_ENV", "prod")
    monkeypatch.setenv("GITHUB_TOKEN", "ghp_prod")
    monkeypatch.setenv("REGISTRY_BASE_URL", "https://registry.example.com/api")
    get_settings.cache_clear()


def test_dev_env_uses_local_registry(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_ENV", "dev")
    get_settings.cache_clear()
    assert get_settings().registry_url == DEV_REGISTRY_URL


def test_non_dev_env_uses_configured_registry() -> None:
    assert get_settings().registry_url == "https://registry.test/api"


def test_validate_settings_prod_ok(monkeypatch: pytest.MonkeyPatch) -> None:
    _prod_env(monkeypatch)
    validate_settings_for_env(get_settings())


def test_validate_settings_prod_missing_token(monkeypatch: pytest.MonkeyPatch) -> None:
    _prod_env(monkeypatch)
    monkeypatch.setenv("GITHUB_TOKEN", "")
    get_settings.cache_clear()
    with pytest.raises(ConfigError, match="GITHUB_TOKEN"):
        validate_settings_for_env(get_settings())


def test_validate_settings_prod_requires_https_registry(monkeypatch: pytest.MonkeyPatch) -> None:
    _prod_env(monkeypatch)
    monkeypatch.setenv("REGISTRY_BASE_URL", "http://registry.internal/api")
    get_settings.cache_clear()
    with pytest.raises(ConfigError, match="https required"):
        validate_settings_for_env(get_settings())


def test_validate_settings_warns_on_public_bind_in_prod(monkeypatch: pytest.MonkeyPatch) -> None:
    _prod_env(monkeypatch)
    monkeypatch.setenv("BIND_HOST", "0.0.0.0")
    get_settings.cache_clear()
    with pytest.warns(UserWarning, match="BIND_HOST=0.0.0.0"):
        validate_settings_for_env(get_settings())


def test_validate_settings_skips_checks_outside_prod(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITHUB_TOKEN", "")
    get_settings.cache_clear()
    validate_settings_for_env(get_settings())
