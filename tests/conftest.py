from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

import pytest

from winsetup.core import Context, Options
from winsetup.settings import Settings, default_settings
from winsetup.util import CommandRunner, RunResult, sh_join


class FakeRunner(CommandRunner):
    """
    Records every command instead of running it.

    `responses` maps an argument prefix (argv without the executable) to
    either (returncode, stdout) or a callable taking argv and returning one.
    """

    def __init__(self, responses=None, *, dry_run: bool = False) -> None:
        super().__init__(dry_run=dry_run, logger=logging.getLogger("winsetup.test"))
        self.responses: dict[tuple[str, ...], tuple[int, str] | Callable] = dict(responses or {})
        self.calls: list[list[str]] = []
        self.inputs: list[str | None] = []

    def _lookup(self, argv: list[str]) -> tuple[int, str]:
        for prefix, resp in self.responses.items():
            if tuple(argv[1 : len(prefix) + 1]) == prefix:
                return resp(argv) if callable(resp) else resp
        return 0, ""

    def run(self, args, *, check=False, capture=True, cwd=None, env=None, input_text=None) -> RunResult:
        argv = [str(a) for a in args]
        self.calls.append(argv)
        self.inputs.append(input_text)
        rc, out = self._lookup(argv)
        if check and rc != 0:
            raise RuntimeError(f"Command failed ({rc}): {sh_join(argv)}\n")
        return RunResult(args=argv, returncode=rc, stdout=out, stderr="")

    def commands(self) -> list[list[str]]:
        # argv without the executable path, which differs per machine
        return [c[1:] for c in self.calls]


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    home = tmp_path / "home"
    home.mkdir()
    return default_settings(
        {
            "USERPROFILE": str(home),
            "ProgramFiles": str(tmp_path / "ProgramFiles"),
            "LOCALAPPDATA": str(home / "AppData" / "Local"),
            "APPDATA": str(home / "AppData" / "Roaming"),
            "SystemRoot": str(tmp_path / "Windows"),
        }
    )


@pytest.fixture
def make_runner():
    return FakeRunner


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def make_ctx(settings: Settings):
    def _make(runner: CommandRunner, *, non_interactive: bool = False, answer: str = "me@example.com"):
        # the runner carries the dry-run flag; Context rejects a mismatch
        return Context(
            settings=settings,
            logger=logging.getLogger("winsetup.test"),
            runner=runner,
            options=Options(dry_run=runner.dry_run, non_interactive=non_interactive),
            prompt=lambda _q: answer,
        )

    return _make


@pytest.fixture
def ctx(make_ctx, runner: FakeRunner) -> Context:
    return make_ctx(runner)
