from __future__ import annotations

import logging
from dataclasses import dataclass

from winsetup.util import CommandRunner, sh_join

# APPINSTALLER_CLI_ERROR_UPDATE_NOT_APPLICABLE: package already installed, nothing newer.
WINGET_ALREADY_INSTALLED = 0x8A15002B


@dataclass(frozen=True)
class WingetBackend:
    runner: CommandRunner
    logger: logging.Logger
    executable: str = "winget"

    def install(self, package_id: str) -> None:
        argv = [
            self.executable,
            "install",
            "--id",
            package_id,
            "--exact",
            "--source",
            "winget",
            "--accept-package-agreements",
            "--accept-source-agreements",
            "--silent",
        ]
        res = self.runner.run(argv, check=False)
        # Windows reports HRESULTs as unsigned; normalize before comparing.
        code = res.returncode & 0xFFFFFFFF
        if code == 0:
            return
        if code == WINGET_ALREADY_INSTALLED:
            self.logger.debug("winget: %s already installed", package_id)
            return
        raise RuntimeError(f"Command failed ({res.returncode}): {sh_join(argv)}\n{res.stdout}{res.stderr}")
