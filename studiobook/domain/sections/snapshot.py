"""Snapshots and optimistic changes for rollback on failed saves"""

import copy
import logging
from typing import Awaitable, Callable, Generic, Optional, TypeVar

from ...schemas import ApiResult

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Snapshot(Generic[T]):
    """Deep copy of a value taken before it is changed"""

    def __init__(self, value: T):
        self._value = copy.deepcopy(value)

    @classmethod
    def capture(cls, value: T) -> "Snapshot[T]":
        return cls(value)

    @property
    def value(self) -> T:
        return copy.deepcopy(self._value)

    def restore(self) -> T:
        """Return a fresh copy of the captured value"""
        return copy.deepcopy(self._value)


class OptimisticChange(Generic[T]):
    """
    Apply a change locally, persist it, and undo it if persisting fails.

    The snapshot is taken inside ``run`` right before the mutation, so a
    caller cannot mutate without also getting the rollback.

    Args:
        get_state: Returns the live state
        set_state: Replaces the live state
        mutate: Builds the new state from the current one
    """

    def __init__(
        self,
        get_state: Callable[[], T],
        set_state: Callable[[T], None],
        mutate: Callable[[T], T],
    ):
        self.get_state = get_state
        self.set_state = set_state
        self.mutate = mutate
        self.snapshot: Optional[Snapshot[T]] = None

    async def run(self, commit: Callable[[T], Awaitable[ApiResult]]) -> ApiResult:
        self.snapshot = Snapshot.capture(self.get_state())
        self.set_state(self.mutate(self.get_state()))

        result = await commit(self.get_state())
        if not result.success:
            logger.info(f"🔄 Rolling back optimistic change: {result.message}")
            self.set_state(self.snapshot.restore())
        return result
