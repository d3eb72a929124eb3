"""Gather-all combinator used for every fan-out in the import.

Policy: start everything, wait for everything to settle, report every
failure, continue with the successes.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Generic, List, Optional, Sequence, Tuple, TypeVar

from .reporter import Reporter

T = TypeVar("T")


@dataclass
class BatchResult(Generic[T]):
    """Outcome of a settled batch.

    successes keep submission order. failures pair the submission index
    with the exception raised.
    """

    successes: List[T] = field(default_factory=list)
    failures: List[Tuple[int, BaseException]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


async def gather_settled(
    aws: Sequence[Awaitable[T]],
    reporter: Optional[Reporter] = None,
    describe: Optional[Callable[[int, BaseException], str]] = None,
) -> BatchResult[T]:
    """Await all of aws concurrently without letting one failure cancel the rest.

    Args:
        aws: Coroutines or futures to run.
        reporter: Receives a warning per failure, if given.
        describe: Builds the warning text from (index, exception).

    Returns:
        BatchResult with successes and failures.
    """
    outcomes: List[Any] = await asyncio.gather(*aws, return_exceptions=True)

    result: BatchResult[T] = BatchResult()
    for index, outcome in enumerate(outcomes):
        if isinstance(outcome, BaseException):
            # Cancellation is not a per-item failure
            if isinstance(outcome, asyncio.CancelledError):
                raise outcome
            result.failures.append((index, outcome))
            if reporter is not None:
                message = (
                    describe(index, outcome)
                    if describe
                    else f"Task {index} failed: {outcome}"
                )
                reporter.warn(message)
        else:
            result.successes.append(outcome)
    return result
