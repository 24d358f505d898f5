from __future__ import annotations

import asyncio
from typing import Any, Generator, Generic, TypeVar

T = TypeVar("T")


class SettleOnce(Generic[T]):
    """Single-assignment result cell.

    The first ``settle`` call fixes the value; every later call is a no-op that
    returns False. Racing signals (success, failure, timeout) may all call
    ``settle`` and exactly one of them is observed by awaiters.
    """

    def __init__(self) -> None:
        self._future: asyncio.Future[T] = asyncio.get_running_loop().create_future()

    def settle(self, value: T) -> bool:
        if self._future.done():
            return False
        self._future.set_result(value)
        return True

    def __await__(self) -> Generator[Any, None, T]:
        return self._future.__await__()
