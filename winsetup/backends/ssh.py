from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from winsetup.util import CommandRunner


@dataclass(frozen=True)
class SshBackend:
    runner: CommandRunner
    logger: logging.Logger
    keygen_executable: Path
    add_executable: Path

    def generate_key(self, key: Path, *, key_type: str, comment: str) -> None:
        # Interactive: ssh-keygen asks for the passphrase on the console.
        self.runner.run(
            [str(self.keygen_executable), "-t", key_type, "-C", comment, "-f", str(key)],
            check=True,
            capture=False,
        )

    def loaded_keys(self) -> list[str]:
        # ssh-add -L exits 1 when the agent holds no identities.
        res = self.runner.run([str(self.add_executable), "-L"], check=False)
        if res.returncode != 0:
            return []
        return [line.strip() for line in res.stdout.splitlines() if line.strip()]

    def add_key(self, key: Path) -> None:
        self.runner.run([str(self.add_executable), str(key)], check=True, capture=False)
