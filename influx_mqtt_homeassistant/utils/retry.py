"""
Fixed-delay retry policy for the bridge's two network dependencies.
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from ..const import MAX_ATTEMPTS, RETRY_DELAY
from ..logging import get_logger


logger = get_logger("retry")

T = TypeVar("T")


class RetryError(Exception):
    """Raised when every attempt of an operation failed."""

    def __init__(self, operation: str, attempts: int, last_error: BaseException | None):
        self.operation = operation
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"{operation} failed after {attempts} attempts: {last_error}")


@dataclass(frozen=True)
class RetryPolicy:
    """
    Bounded attempts separated by a fixed delay.

    The sleep function is injectable so tests can record delays
    instead of waiting.
    """

    max_attempts: int = MAX_ATTEMPTS
    delay: float = RETRY_DELAY
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")
        if self.delay < 0:
            raise ValueError(f"delay must not be negative, got {self.delay}")

    async def call(
        self,
        operation: Callable[[], Awaitable[T]],
        description: str,
        retry_on: tuple[type[BaseException], ...] = (Exception,),
    ) -> T:
        """
        Run an async operation until it succeeds or attempts run out.

        Args:
            operation: Zero-argument coroutine function
            description: Human-readable operation name for logs
            retry_on: Exception types that trigger another attempt

        Returns:
            The operation's result

        Raises:
            RetryError: After max_attempts failures, chained to the last error
        """
        last_error: BaseException | None = None

        for attempt in range(1, self.max_attempts + 1):
            try:
                return await operation()
            except retry_on as e:
                last_error = e
                logger.warning(f"{description} failed (attempt {attempt}/{self.max_attempts}): {e}")

            if attempt < self.max_attempts:
                await self.sleep(self.delay)

        raise RetryError(description, self.max_attempts, last_error) from last_error
