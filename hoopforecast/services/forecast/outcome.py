"""Tagged value-or-error result of one concurrent orchestrator branch."""
from dataclasses import dataclass
from typing import Any, Awaitable, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class BranchOutcome(Generic[T]):
    """
    Outcome of a named branch.

    Exactly one of ``value``/``error`` is meaningful: ``ok`` tells which.
    A branch that legitimately produced None is still ``ok``.
    """
    branch: str
    value: Optional[T] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, branch: str, value: Any) -> "BranchOutcome":
        return cls(branch=branch, value=value)

    @classmethod
    def failure(cls, branch: str, error: BaseException) -> "BranchOutcome":
        return cls(branch=branch, error=error)


async def capture(branch: str, awaitable: Awaitable[T]) -> BranchOutcome[T]:
    """
    Await a branch and tag its result.

    Only ``Exception`` is captured; cancellation still propagates.
    """
    try:
        return BranchOutcome.success(branch, await awaitable)
    except Exception as e:
        return BranchOutcome.failure(branch, e)
