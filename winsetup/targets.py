"""
Tagged variants for the things a plan can target: editors and repositories.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Union

from winsetup.settings import Settings


class EditorType(Enum):
    VSCODE = "vscode"
    CURSOR = "cursor"

    @classmethod
    def parse(cls, value: str) -> "EditorType":
        for member in cls:
            if member.value == value.lower():
                return member
        known = ", ".join(m.value for m in cls)
        raise ValueError(f"Unsupported editor type: {value!r} (expected one of: {known})")

    @property
    def display_name(self) -> str:
        if self is EditorType.VSCODE:
            return "Visual Studio Code"
        if self is EditorType.CURSOR:
            return "Cursor"
        raise ValueError(f"Unhandled editor type: {self!r}")

    @property
    def package_id(self) -> str:
        if self is EditorType.VSCODE:
            return "Microsoft.VisualStudioCode"
        if self is EditorType.CURSOR:
            return "Anysphere.Cursor"
        raise ValueError(f"Unhandled editor type: {self!r}")

    def install_dir(self, settings: Settings) -> Path:
        if self is EditorType.VSCODE:
            return settings.local_app_data / "Programs" / "Microsoft VS Code"
        if self is EditorType.CURSOR:
            return settings.local_app_data / "Programs" / "cursor"
        raise ValueError(f"Unhandled editor type: {self!r}")

    def executable(self, settings: Settings) -> Path:
        if self is EditorType.VSCODE:
            return self.install_dir(settings) / "Code.exe"
        if self is EditorType.CURSOR:
            return self.install_dir(settings) / "Cursor.exe"
        raise ValueError(f"Unhandled editor type: {self!r}")

    def cli(self, settings: Settings) -> Path:
        if self is EditorType.VSCODE:
            return self.install_dir(settings) / "bin" / "code.cmd"
        if self is EditorType.CURSOR:
            return self.install_dir(settings) / "resources" / "app" / "bin" / "cursor.cmd"
        raise ValueError(f"Unhandled editor type: {self!r}")

    def user_dir(self, settings: Settings) -> Path:
        if self is EditorType.VSCODE:
            return settings.app_data / "Code" / "User"
        if self is EditorType.CURSOR:
            return settings.app_data / "Cursor" / "User"
        raise ValueError(f"Unhandled editor type: {self!r}")


@dataclass(frozen=True)
class GitHubRepository:
    owner: str
    name: str
    branch: str = "master"

    @property
    def ssh_url(self) -> str:
        return f"git@github.com:{self.owner}/{self.name}.git"


@dataclass(frozen=True)
class AzureDevOpsRepository:
    organization: str
    owner: str  # Azure DevOps project
    name: str
    branch: str = "master"

    @property
    def ssh_url(self) -> str:
        return f"git@ssh.dev.azure.com:v3/{self.organization}/{self.owner}/{self.name}"


RepositorySpec = Union[GitHubRepository, AzureDevOpsRepository]

REPOSITORY_TYPES = ("GitHub", "AzureDevOps")


def _require(value: str | None, *, what: str) -> str:
    if not isinstance(value, str) or not value:
        raise ValueError(f"'{what}' must be a non-empty string")
    return value


def make_repository(
    repo_type: str,
    *,
    owner: str,
    name: str,
    branch: str = "master",
    organization: str | None = None,
) -> RepositorySpec:
    owner = _require(owner, what="owner")
    name = _require(name, what="name")
    branch = _require(branch, what="branch")

    if repo_type == "GitHub":
        return GitHubRepository(owner=owner, name=name, branch=branch)
    if repo_type == "AzureDevOps":
        org = _require(organization, what="organization")
        return AzureDevOpsRepository(organization=org, owner=owner, name=name, branch=branch)
    known = ", ".join(REPOSITORY_TYPES)
    raise ValueError(f"Unsupported repository type: {repo_type!r} (expected one of: {known})")


def parse_github_slug(slug: str, *, branch: str = "master") -> GitHubRepository:
    """Parse ``OWNER/NAME`` into a GitHub repository."""
    owner, sep, name = slug.partition("/")
    if not sep or not owner or not name or "/" in name:
        raise ValueError(f"Repository must be given as OWNER/NAME, got {slug!r}")
    return GitHubRepository(owner=owner, name=name, branch=branch)
