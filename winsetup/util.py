from __future__ import annotations

import os
import shlex
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping, Sequence


def config_home() -> Path:
    """
    Per-user configuration root.

    %APPDATA% on Windows; $XDG_CONFIG_HOME (or ~/.config) elsewhere so the tool
    can be exercised from a non-Windows shell.
    """
    if sys.platform == "win32" and os.environ.get("APPDATA"):
        return Path(os.environ["APPDATA"])
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))


def expand_path(s: str) -> Path:
    # Expand ~, $VARS and %VARS%
    return Path(os.path.expandvars(os.path.expanduser(s)))


def sh_join(args: Sequence[str]) -> str:
    return shlex.join(list(args))


@dataclass(frozen=True)
class RunResult:
    args: list[str]
    returncode: int
    stdout: str
    stderr: str


class CommandRunner:
    def __init__(self, *, dry_run: bool, logger) -> None:
        self._dry_run = dry_run
        self._logger = logger

    @property
    def dry_run(self) -> bool:
        return self._dry_run

    def run(
        self,
        args: Iterable[str],
        *,
        check: bool = False,
        capture: bool = True,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
        input_text: str | None = None,
    ) -> RunResult:
        argv = [str(a) for a in args]

        # Process-level logs stay at DEBUG; steps report one INFO line each.
        self._logger.debug("RUN %s", sh_join(argv))
        if self._dry_run:
            return RunResult(args=argv, returncode=0, stdout="", stderr="")

        merged_env = None
        if env is not None:
            merged_env = dict(os.environ)
            merged_env.update(dict(env))

        cp = subprocess.run(
            argv,
            text=True,
            input=input_text,
            capture_output=capture,
            check=False,  # we handle below to include stderr
            cwd=str(cwd) if cwd is not None else None,
            env=merged_env,
        )
        if check and cp.returncode != 0:
            raise RuntimeError(
                f"Command failed ({cp.returncode}): {sh_join(argv)}\n{cp.stderr or ''}"
            )
        return RunResult(
            args=argv,
            returncode=cp.returncode,
            stdout=cp.stdout or "",
            stderr=cp.stderr or "",
        )
