"""Concurrent fan-out with per-task outcomes.

All tasks of one trigger start together and the trigger is handled once every
task has settled. A failing task is logged and recorded; it never cancels or
hides its siblings.
"""

import asyncio
from collections.abc import Awaitable
from dataclasses import dataclass, field
from typing import Any

import structlog

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class TaskOutcome:
    name: str
    ok: bool
    result: Any = None
    error: str | None = None


@dataclass
class FanoutReport:
    outcomes: list[TaskOutcome] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(outcome.ok for outcome in self.outcomes)

    def outcome(self, name: str) -> TaskOutcome | None:
        return next((outcome for outcome in self.outcomes if outcome.name == name), None)


async def run_concurrently(tasks: dict[str, Awaitable]) -> FanoutReport:
    """Await every named awaitable concurrently and collect each outcome."""
    names = list(tasks)
    results = await asyncio.gather(*tasks.values(), return_exceptions=True)

    report = FanoutReport()
    for name, result in zip(names, results, strict=True):
        if isinstance(result, BaseException):
            logger.error(
                "Fan-out task failed",
                task=name,
                error=str(result),
                exc_info=(type(result), result, result.__traceback__),
            )
            report.outcomes.append(TaskOutcome(name=name, ok=False, error=str(result)))
        else:
            logger.debug("Fan-out task completed", task=name)
            report.outcomes.append(TaskOutcome(name=name, ok=True, result=result))
    return report
