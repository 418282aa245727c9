"""Request-scoped data model for tenant patching."""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field

from tenant_patcher.errors import ArchiveError, InvalidNameError

# Order matters: the first rule found in an entry path wins.
ALLOWED_PATHS: tuple[str, ...] = ("components/", "pages/api/", "pages/")
PAGES_RULE = "pages/"
FORBIDDEN_ENTRIES: tuple[str, ...] = ("/_app.tsx",)
RELATIVE_IMPORT_PATHS: tuple[str, ...] = ("../components/",)

ITEMS_MARKER = "[ITEMS ENTRY-POINT]"
REWRITES_MARKER = "[REWRITES ENTRY-POINT]"

NEXT_CONFIG_FILE = "next.config.js"
TENANT_CONFIG_FILE = "mf-config.ts"

# App and tenant names become path segments and part of the head branch name.
NAME_PATTERN = r"^[A-Za-z0-9][A-Za-z0-9._-]*$"
_NAME_RE = re.compile(NAME_PATTERN)


def check_name(kind: str, value: str) -> str:
    if len(value) > 100 or ".." in value or not _NAME_RE.fullmatch(value):
        raise InvalidNameError(f"invalid {kind} name {value!r}")
    return value


@dataclass(slots=True, frozen=True)
class BundleEntry:
    path: str
    content: str
    is_dir: bool = False


@dataclass(slots=True, frozen=True)
class AppLocation:
    download_url: str
    app_config_download_url: str


class NavItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    route: str
    page_name: str = Field(alias="pageName")
    title: str


class AppConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    base_path: str = Field(alias="basePath")
    items: list[NavItem] = Field(default_factory=list)


class FileChangeSet(Mapping[str, str]):
    """Repository path to file text, every path rooted under one tenant tree.

    Adding a path twice is an error rather than an overwrite.
    """

    def __init__(self, root: str) -> None:
        self.root = root.rstrip("/")
        self._files: dict[str, str] = {}

    def add(self, path: str, content: str) -> None:
        if not path.startswith(f"{self.root}/"):
            raise ArchiveError(f"path {path!r} is outside {self.root!r}")
        if path in self._files:
            raise ArchiveError(f"duplicate destination path {path!r}")
        self._files[path] = content

    def __getitem__(self, path: str) -> str:
        return self._files[path]

    def __iter__(self) -> Iterator[str]:
        return iter(self._files)

    def __len__(self) -> int:
        return len(self._files)

    def as_dict(self) -> dict[str, str]:
        return dict(self._files)


@dataclass(slots=True)
class ChangeProposal:
    title: str
    body: str
    base: str
    head: str
    commit_message: str
    files: dict[str, str] = field(default_factory=dict)


@dataclass(slots=True, frozen=True)
class ProposalResult:
    number: int
    url: str

    @property
    def message(self) -> str:
        return f"Pull request #{self.number} successfully created. Visit it at {self.url}"
