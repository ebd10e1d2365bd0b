"""Bounded retries for remote calls that answer with a transient status."""

from __future__ import annotations

import dataclasses
import logging
from typing import TYPE_CHECKING, Optional, TypeVar

from tenacity import Retrying, before_sleep_log, retry_if_result, stop_after_attempt, wait_none

from share_fs._errors import ProtocolError, RetryExhausted
from share_fs._status import NTStatus, raise_for_status, status_name

if TYPE_CHECKING:
    from collections.abc import Callable

    from tenacity import RetryCallState

T = TypeVar("T")

log = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class RetryPolicy:
    """Re-issue a call while it returns a transient status, up to ``attempts`` calls.

    :param name: Label used in logs and errors.
    :param attempts: Maximum number of calls, including the first.
    :param transient: Statuses that trigger another attempt.
    """

    name: str
    attempts: int
    transient: frozenset[int]

    def __post_init__(self) -> None:
        if self.attempts < 1:
            raise ValueError(f"attempts must be at least 1, got {self.attempts}")

    def call(self, fn: Callable[[], tuple[int, T]]) -> tuple[int, T]:
        """Invoke ``fn`` until its status is not transient or the budget is spent.

        Exceptions raised by ``fn`` propagate immediately.

        :returns: The ``(status, value)`` of the last attempt.
        """
        retrying = Retrying(
            retry=retry_if_result(self._is_transient),
            stop=stop_after_attempt(self.attempts),
            wait=wait_none(),
            before_sleep=before_sleep_log(log, logging.DEBUG),  # type: ignore[arg-type,unused-ignore]
            retry_error_callback=_last_result,
            reraise=True,
        )
        return retrying(fn)

    def check(self, status: int, *, path: Optional[str] = None, host: Optional[str] = None) -> None:
        """Raise for a non-success status left after :meth:`call`.

        :raises RetryExhausted: If the status is still transient.
        """
        if status in self.transient:
            raise RetryExhausted(
                f"{self.name}: still {status_name(status)} after {self.attempts} attempts",
                path=path,
                host=host,
                status=status,
                attempts=self.attempts,
            )
        raise_for_status(status, path=path, host=host)

    def _is_transient(self, result: tuple[int, object]) -> bool:
        return result[0] in self.transient


def _last_result(retry_state: RetryCallState) -> object:
    if retry_state.outcome is None:
        raise ProtocolError("Retry finished without an attempt on record")
    return retry_state.outcome.result()


OPEN_RETRY = RetryPolicy("open", 5, frozenset({NTStatus.STATUS_PENDING}))

# The target can disappear between create and query; reopen and ask again.
OPEN_INFO_RETRY = RetryPolicy("open+info", 5, frozenset({NTStatus.STATUS_NETWORK_NAME_DELETED}))

DELETE_RETRY = RetryPolicy("delete", 3, frozenset({NTStatus.STATUS_PENDING}))
