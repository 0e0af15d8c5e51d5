from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from loguru import logger
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from cigrader.domain.errors import TransientIOError

DEFAULT_FETCH_ATTEMPTS = 3
MAX_WAIT_S = 30

T = TypeVar("T")


def retry_transient(
    fetch: Callable[..., Awaitable[T]],
    what: str,
    attempts: int = DEFAULT_FETCH_ATTEMPTS,
    wait_multiplier: float = 1.0,
) -> Callable[..., Awaitable[T]]:
    """Wrap a CI call so TransientIOError is retried with exponential backoff.

    Other errors propagate at once. When all attempts fail tenacity raises
    RetryError, whose last attempt holds the final TransientIOError.
    """

    def log_retry(retry_state: Any) -> None:
        exc = retry_state.outcome.exception()
        logger.warning("Retry {} fetching {}: {}", retry_state.attempt_number, what, exc)

    return retry(
        retry=retry_if_exception_type(TransientIOError),
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=wait_multiplier, max=MAX_WAIT_S),
        before_sleep=log_retry,
    )(fetch)
