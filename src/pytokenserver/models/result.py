"""Single-shot outcome of an exchange."""

from __future__ import annotations

import dataclasses
from typing import Generic, TypeVar

from pytokenserver.exceptions import TokenServerExchangeError
from pytokenserver.models.errors import TokenServerError

T = TypeVar("T")


@dataclasses.dataclass(frozen=True)
class Result(Generic[T]):
    """Holds exactly one of ``success_value`` or ``failure_value``."""

    success_value: T | None = None
    failure_value: TokenServerError | None = None

    def __post_init__(self) -> None:
        if (self.success_value is None) == (self.failure_value is None):
            raise ValueError("Result needs exactly one of success_value or failure_value")

    @classmethod
    def success(cls, value: T) -> Result[T]:
        return cls(success_value=value)

    @classmethod
    def failure(cls, error: TokenServerError) -> Result[T]:
        return cls(failure_value=error)

    @property
    def is_success(self) -> bool:
        return self.failure_value is None

    @property
    def is_failure(self) -> bool:
        return self.failure_value is not None

    def unwrap(self) -> T:
        """Return the success value or raise :class:`TokenServerExchangeError`."""
        if self.failure_value is not None:
            raise TokenServerExchangeError(self.failure_value)
        assert self.success_value is not None  # noqa: S101
        return self.success_value
