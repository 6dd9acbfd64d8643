"""Per-item results for lookups whose failures must stay isolated."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Iterable, TypeVar

from crate_metadata.query.errors import LookupFailure

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Outcome(Generic[T]):
    """Either a value or the LookupFailure that prevented computing it."""

    value: T | None = None
    error: LookupFailure | None = None

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: LookupFailure) -> "Outcome[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value or re-raise the stored failure."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


def capture(func: Callable[..., T], *args, **kwargs) -> Outcome[T]:
    """Run ``func`` and turn a raised LookupFailure into a failed outcome."""
    try:
        return Outcome.success(func(*args, **kwargs))
    except LookupFailure as exc:
        return Outcome.failure(exc)


def collect_present(outcomes: Iterable[Outcome[T | None]]) -> Outcome[list[T]]:
    """Collapse per-item outcomes into one, omitting items that found nothing.

    The first failed item fails the whole collection.
    """
    present: list[T] = []
    for outcome in outcomes:
        if not outcome.ok:
            return Outcome.failure(outcome.error)  # type: ignore[arg-type]
        if outcome.value is not None:
            present.append(outcome.value)
    return Outcome.success(present)


__all__ = ["Outcome", "capture", "collect_present"]
