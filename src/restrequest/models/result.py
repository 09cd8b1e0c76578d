from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

from .errors import RestError

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a dispatch operation: exactly one of `value` or `error`.

    Use `Result.success` / `Result.failure` to construct instances.
    """

    value: Optional[T] = None
    error: Optional[RestError] = None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: RestError) -> "Result[T]":
        return cls(error=error)

    @property
    def is_success(self) -> bool:
        return self.error is None

    @property
    def is_failure(self) -> bool:
        return self.error is not None

    def unwrap(self) -> T:
        """Return the value, or raise the carried `RestError`."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Result):
            return NotImplemented
        if self.is_failure and other.is_failure:
            return True
        if self.is_success and other.is_success:
            return self.value == other.value
        return False

    def __hash__(self) -> int:
        return hash((self.is_success, self.error))


CompletionHandler = Callable[[Result[T]], None]
