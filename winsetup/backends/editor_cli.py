from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from winsetup.util import CommandRunner


@dataclass(frozen=True)
class EditorCliBackend:
    runner: CommandRunner
    logger: logging.Logger
    executable: Path

    def list_extensions(self) -> list[str]:
        res = self.runner.run([str(self.executable), "--list-extensions"], check=True)
        return [line.strip() for line in res.stdout.splitlines() if line.strip()]

    def install_extension(self, extension_id: str) -> None:
        self.runner.run([str(self.executable), "--install-extension", extension_id], check=True)
