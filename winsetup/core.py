from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Protocol

from winsetup.settings import Settings
from winsetup.util import CommandRunner


class Step(Protocol):
    """
    One idempotent provisioning action.

    `check` reports whether the desired state already holds; `apply` is only
    called when it does not, and returns a one-line summary for the log.
    """

    name: str

    def check(self, ctx: "Context") -> bool: ...

    def apply(self, ctx: "Context") -> str: ...


class StepFailed(RuntimeError):
    def __init__(self, step: str, error: BaseException) -> None:
        super().__init__(f"Step {step!r} failed: {error}")
        self.step = step
        self.error = error


class PrivilegeError(RuntimeError):
    pass


@dataclass(frozen=True)
class Options:
    dry_run: bool
    non_interactive: bool


@dataclass(frozen=True)
class Context:
    settings: Settings
    logger: logging.Logger
    runner: CommandRunner
    options: Options
    prompt: Callable[[str], str] = field(default=input)

    def __post_init__(self) -> None:
        if self.runner.dry_run != self.options.dry_run:
            raise ValueError(
                f"Runner dry_run={self.runner.dry_run} disagrees with options dry_run={self.options.dry_run}"
            )

    @property
    def dry_run(self) -> bool:
        return self.options.dry_run

    def ask(self, question: str) -> str:
        if self.options.non_interactive:
            raise ValueError(f"Input required but running non-interactively: {question}")
        return self.prompt(question).strip()


def build_context(
    *,
    settings: Settings,
    options: Options,
    logger: logging.Logger,
    prompt: Callable[[str], str] = input,
) -> Context:
    runner = CommandRunner(dry_run=options.dry_run, logger=logger)
    return Context(
        settings=settings,
        logger=logger,
        runner=runner,
        options=options,
        prompt=prompt,
    )
