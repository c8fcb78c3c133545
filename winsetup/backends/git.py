from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from winsetup.util import CommandRunner


def as_git_path(p: Path) -> str:
    # git stores safe.directory entries with forward slashes on Windows.
    return str(p).replace("\\", "/")


@dataclass(frozen=True)
class GitBackend:
    runner: CommandRunner
    logger: logging.Logger
    executable: Path

    def _git(self, *args: str, cwd: Path | None = None, check: bool = True):
        return self.runner.run([str(self.executable), *args], check=check, cwd=cwd)

    def set_global(self, key: str, value: str) -> None:
        self._git("config", "--global", key, value)

    def global_values(self, key: str) -> list[str]:
        # --get-all exits 1 when the key is unset.
        res = self._git("config", "--global", "--get-all", key, check=False)
        if res.returncode != 0:
            return []
        return [line.strip() for line in res.stdout.splitlines() if line.strip()]

    def clone(self, url: str, dest: Path) -> None:
        self._git("clone", url, str(dest))

    def pull(self, repo: Path, *, branch: str) -> None:
        self._git("-C", str(repo), "pull", "origin", branch)

    def is_safe_directory(self, repo: Path) -> bool:
        wanted = as_git_path(repo)
        return any(v in {wanted, "*"} for v in self.global_values("safe.directory"))

    def add_safe_directory(self, repo: Path) -> None:
        self._git("config", "--global", "--add", "safe.directory", as_git_path(repo))
