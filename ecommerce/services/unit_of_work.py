"""
Unit of Work

Runs one action inside one database transaction. Writes become visible
only if the action completes without raising; otherwise the session is
rolled back. Transient infrastructure faults re-run the action from
scratch under a bounded exponential backoff.
"""

from typing import Awaitable, Callable, List, TypeVar

import structlog
from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from ..core import metrics
from ..core.exceptions import TransientDatabaseException

logger = structlog.get_logger()

T = TypeVar("T")


def is_transient(error: BaseException) -> bool:
    """Return True for faults where re-running the whole action is expected to help."""
    if isinstance(error, TransientDatabaseException):
        return True
    if isinstance(error, (OperationalError, InterfaceError)):
        return True
    if isinstance(error, DBAPIError) and error.connection_invalidated:
        return True
    return isinstance(error, ConnectionError)


class UnitOfWork:
    """
    Transaction boundary around a handler invocation.

    The action may run more than once when a transient fault occurs, so it
    must be idempotent with respect to anything outside the database
    session. Calls to external systems made inside the action are repeated
    on retry and are not deduplicated.
    """

    def __init__(
        self,
        session: AsyncSession,
        max_attempts: int = 3,
        min_wait: float = 0.1,
        max_wait: float = 2.0,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.session = session
        self.max_attempts = max_attempts
        self.min_wait = min_wait
        self.max_wait = max_wait
        self._after_commit: List[Callable[[], None]] = []

    def _before_sleep(self, retry_state) -> None:
        metrics.transaction_retries_total.inc()
        error = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            "Transient database fault, retrying transaction",
            attempt=retry_state.attempt_number,
            max_attempts=self.max_attempts,
            wait_time=retry_state.next_action.sleep if retry_state.next_action else None,
            error=str(error),
            error_type=type(error).__name__ if error else None,
        )

    def after_commit(self, callback: Callable[[], None]) -> None:
        """
        Run ``callback`` once the current attempt has committed.

        Callbacks registered by an attempt that rolls back are discarded,
        so a retried action records its side effects exactly once.
        """
        self._after_commit.append(callback)

    def _run_after_commit(self) -> None:
        callbacks, self._after_commit = self._after_commit, []
        for callback in callbacks:
            try:
                callback()
            except Exception as e:
                logger.error("After-commit callback failed", error=str(e), error_type=type(e).__name__)

    async def _run_once(self, action: Callable[[], Awaitable[T]]) -> T:
        self._after_commit = []
        try:
            result = await action()
            await self.session.commit()
        except BaseException as e:
            self._after_commit = []
            try:
                await self.session.rollback()
            except Exception as rollback_error:
                logger.error(
                    "Rollback failed",
                    error=str(rollback_error),
                    original_error=str(e),
                )
            raise
        self._run_after_commit()
        return result

    async def execute_in_transaction(self, action: Callable[[], Awaitable[T]]) -> T:
        """
        Run ``action`` and commit its writes atomically.

        Args:
            action: Zero-argument coroutine function; re-invoked from scratch
                on transient faults

        Returns:
            Whatever ``action`` returned

        Raises:
            The action's exception after rollback, or the last transient
            fault once attempts are exhausted
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.min_wait or 1, min=self.min_wait, max=self.max_wait),
            retry=retry_if_exception(is_transient),
            before_sleep=self._before_sleep,
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    result = await self._run_once(action)
        except BaseException:
            metrics.transactions_total.labels(outcome="rolled_back").inc()
            raise

        metrics.transactions_total.labels(outcome="committed").inc()
        return result
