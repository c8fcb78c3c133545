from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from winsetup.util import CommandRunner


@dataclass(frozen=True)
class ClipboardBackend:
    runner: CommandRunner
    logger: logging.Logger
    command: Sequence[str] = ("clip",)

    def copy(self, text: str) -> None:
        self.runner.run(list(self.command), check=True, input_text=text)
