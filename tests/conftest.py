import io
import zipfile

import pytest

from tenant_patcher.config import get_settings
from tenant_patcher.routes.tenants import limiter


@pytest.fixture(autouse=True)
def test_env(monkeypatch):
    monkeypatch.setenv("APP_ENV", "test")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("GITHUB_TOKEN", "test-token")
    monkeypatch.setenv("GITHUB_API_BASE_URL", "https://github.test")
    monkeypatch.setenv("GITHUB_REPO_OWNER", "acme-org")
    monkeypatch.setenv("GITHUB_REPO_NAME", "host-app")
    monkeypatch.setenv("GITHUB_BASE_BRANCH", "main")
    monkeypatch.setenv("REGISTRY_BASE_URL", "https://registry.test/api")
    monkeypatch.delenv("RATE_LIMIT_INSTALLS_PER_MINUTE", raising=False)
    get_settings.cache_clear()
    limiter.reset()
    yield
    get_settings.cache_clear()
    limiter.reset()


@pytest.fixture
def zip_bundle():
    def build(files: dict[str, str], dirs: tuple[str, ...] = ()) -> bytes:
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w") as zf:
            for name in dirs:
                zf.writestr(name.rstrip("/") + "/", "")
            for name, text in files.items():
                zf.writestr(name, text)
        return buffer.getvalue()

    return build
