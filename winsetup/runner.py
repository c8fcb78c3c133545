from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from winsetup.core import Context, Step, StepFailed


@dataclass
class PlanResult:
    applied: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    messages: list[str] = field(default_factory=list)


def run_plan(plan: Sequence[Step], ctx: Context) -> PlanResult:
    """
    Run steps in order. A step is applied only when its check fails.

    The first exception aborts the plan and is re-raised as StepFailed with the
    step's name; side effects of earlier steps stay in place.
    """
    result = PlanResult()
    last = len(plan)
    for i, step in enumerate(plan, start=1):
        branch = "└─" if i == last else "├─"
        try:
            if step.check(ctx):
                msg = f"{step.name}: already done."
                result.skipped.append(step.name)
            else:
                msg = step.apply(ctx)
                result.applied.append(step.name)
        except Exception as e:
            ctx.logger.info("%s %s: FAILED", branch, step.name)
            raise StepFailed(step.name, e) from e
        result.messages.append(msg)
        ctx.logger.info("%s %s", branch, msg)
    return result
