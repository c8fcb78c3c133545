from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from winsetup.util import CommandRunner

_STATE_RE = re.compile(r"^\s*STATE\s*:\s*\d+\s+(\w+)", re.MULTILINE)


def parse_service_state(text: str) -> str | None:
    """Extract the state word (RUNNING, STOPPED, ...) from `sc.exe query` output."""
    m = _STATE_RE.search(text)
    return m.group(1).upper() if m else None


@dataclass(frozen=True)
class ScServiceBackend:
    runner: CommandRunner
    logger: logging.Logger
    executable: str = "sc.exe"

    def set_automatic(self, service: str) -> None:
        # sc.exe wants "start=" and the value as separate arguments.
        self.runner.run([self.executable, "config", service, "start=", "auto"], check=True)

    def state(self, service: str) -> str | None:
        res = self.runner.run([self.executable, "query", service], check=True)
        return parse_service_state(res.stdout)

    def is_running(self, service: str) -> bool:
        return self.state(service) == "RUNNING"

    def start(self, service: str) -> None:
        self.runner.run([self.executable, "start", service], check=True)
