"""Application bundle extraction into tenant-namespaced repository paths."""

from __future__ import annotations

import io
import logging
import zipfile
import zlib

from tenant_patcher.errors import ArchiveError
from tenant_patcher.models import (
    ALLOWED_PATHS,
    FORBIDDEN_ENTRIES,
    PAGES_RULE,
    RELATIVE_IMPORT_PATHS,
    BundleEntry,
    FileChangeSet,
)

logger = logging.getLogger(__name__)


def read_entries(archive: bytes) -> list[BundleEntry]:
    """Decompress a zip bundle into entries; a bad archive fails as a whole."""
    try:
        with zipfile.ZipFile(io.BytesIO(archive)) as zf:
            entries: list[BundleEntry] = []
            for info in zf.infolist():
                if info.is_dir():
                    entries.append(BundleEntry(path=info.filename, content="", is_dir=True))
                    continue
                raw = zf.read(info)
                entries.append(
                    BundleEntry(
                        path=info.filename,
                        content=raw.decode("utf-8", errors="replace"),
                    )
                )
    # Encrypted entries raise RuntimeError, unknown compression NotImplementedError.
    except (
        zipfile.BadZipFile,
        zipfile.LargeZipFile,
        EOFError,
        zlib.error,
        RuntimeError,
        NotImplementedError,
    ) as exc:
        raise ArchiveError(f"malformed application bundle: {exc}") from exc
    return entries


def _rule_offset(path: str, rule: str) -> int:
    if path.startswith(rule):
        return 0
    idx = path.find(f"/{rule}")
    return idx + 1 if idx >= 0 else -1


def match_rule(path: str) -> tuple[str, int] | None:
    """Return the first allowed rule found in ``path`` and where it starts."""
    for rule in ALLOWED_PATHS:
        offset = _rule_offset(path, rule)
        if offset >= 0:
            return rule, offset
    return None


def is_forbidden(path: str) -> bool:
    return any(marker in path for marker in FORBIDDEN_ENTRIES)


def destination_path(
    path: str,
    rule: str,
    offset: int,
    *,
    app: str,
    tenant: str,
    examples_base_path: str,
) -> str:
    remainder = path[offset + len(rule) :]
    custom = f"{path[:offset]}{rule}{app}/{remainder}"
    return f"{examples_base_path.rstrip('/')}/{tenant}/{custom}"


def rewrite_relative_imports(text: str, rule: str, app: str) -> str:
    """Add one directory hop and the app segment to relative imports in page files.

    Plain substring replacement; anything outside the page tree is returned as is.
    """
    if rule != PAGES_RULE:
        return text
    for import_path in RELATIVE_IMPORT_PATHS:
        text = text.replace(import_path, f"../../{import_path}{app}/")
    return text


def _check_entry_path(path: str) -> None:
    if path.startswith("/") or ".." in path.split("/"):
        raise ArchiveError(f"bundle entry {path!r} escapes the archive root")


def extract_entries(
    entries: list[BundleEntry],
    *,
    app: str,
    tenant: str,
    examples_base_path: str,
) -> FileChangeSet:
    files = FileChangeSet(f"{examples_base_path.rstrip('/')}/{tenant}")
    skipped = 0
    for entry in entries:
        if entry.is_dir:
            continue
        _check_entry_path(entry.path)
        matched = match_rule(entry.path)
        if matched is None or is_forbidden(entry.path):
            skipped += 1
            continue
        rule, offset = matched
        dest = destination_path(
            entry.path,
            rule,
            offset,
            app=app,
            tenant=tenant,
            examples_base_path=examples_base_path,
        )
        files.add(dest, rewrite_relative_imports(entry.content, rule, app))
    logger.info(
        "Extracted %d bundle files for %s on %s (%d skipped)", len(files), app, tenant, skipped
    )
    return files


def extract(
    archive: bytes,
    app: str,
    tenant: str,
    *,
    examples_base_path: str,
) -> FileChangeSet:
    return extract_entries(
        read_entries(archive),
        app=app,
        tenant=tenant,
        examples_base_path=examples_base_path,
    )
