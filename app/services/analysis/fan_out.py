"""Fan-out/fan-in over independent awaitables.

``gather_settled`` starts every awaitable at once and waits for all of them
to settle. A failure in one never cancels the others; each settlement is
reported as a TaskOutcome.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Dict, Mapping, Optional


@dataclass(frozen=True)
class TaskOutcome:
    """Settlement of one named task: either a value or an error."""

    name: str
    value: Any = None
    error: Optional[BaseException] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


async def gather_settled(tasks: Mapping[str, Awaitable[Any]]) -> Dict[str, TaskOutcome]:
    """Run named awaitables concurrently and collect every outcome.

    Args:
        tasks: Mapping of task name to awaitable

    Returns:
        Dict of task name to TaskOutcome, in the mapping's order
    """
    names = list(tasks)
    results = await asyncio.gather(*tasks.values(), return_exceptions=True)

    outcomes: Dict[str, TaskOutcome] = {}
    for name, result in zip(names, results):
        if isinstance(result, BaseException):
            outcomes[name] = TaskOutcome(name=name, error=result)
        else:
            outcomes[name] = TaskOutcome(name=name, value=result)
    return outcomes
