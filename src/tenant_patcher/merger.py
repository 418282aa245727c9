"""Splice app config entries into tenant config files at their entry point markers."""

from __future__ import annotations

from tenant_patcher.errors import MarkerError
from tenant_patcher.models import ITEMS_MARKER, REWRITES_MARKER, AppConfig


def require_marker(text: str, marker: str, *, source: str = "tenant file") -> None:
    count = text.count(marker)
    if count == 0:
        raise MarkerError(f"{source} is missing entry point marker {marker!r}")
    if count > 1:
        raise MarkerError(f"{source} contains entry point marker {marker!r} {count} times")


def render_items(config: AppConfig) -> str:
    return ",".join(
        f'{{ route: "{config.base_path}{item.route}", title: "{item.title}", '
        f'pageName: "{item.page_name}"}}'
        for item in config.items
    )


def render_rewrite(config: AppConfig, app: str) -> str:
    return f'{{ source: "{config.base_path}/:path*",\n destination: "/{app}/:path*", }},'


def _insert_after(text: str, marker: str, block: str, source: str) -> str:
    require_marker(text, marker, source=source)
    return text.replace(marker, f"{marker}\n{block}", 1)


def merge_items(tenant_config_text: str, config: AppConfig, app: str) -> str:
    """Insert one navigation entry per app item right after the ITEMS marker."""
    del app
    return _insert_after(tenant_config_text, ITEMS_MARKER, render_items(config), "mf-config.ts")


def merge_rewrite(next_config_text: str, config: AppConfig, app: str) -> str:
    """Insert the app's rewrite rule right after the REWRITES marker."""
    return _insert_after(
        next_config_text, REWRITES_MARKER, render_rewrite(config, app), "next.config.js"
    )
