from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from scriptlens.analysis.exceptions import (
    AnalysisValidationError,
    MalformedJsonError,
    NoJsonFoundError,
    ResponseParseError,
)
from scriptlens.llm.exceptions import EmptyResponseError, GenerationNetworkError
from scriptlens.logging.logger import Log

# Cancellation is a BaseException and is never retried.
RETRYABLE_ERRORS: tuple[type[Exception], ...] = (
    GenerationNetworkError,
    EmptyResponseError,
    ResponseParseError,
    NoJsonFoundError,
    MalformedJsonError,
    AnalysisValidationError,
)

MAX_BACKOFF_SECONDS = 30


def _log_retry(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    Log.warning(
        f"Attempt {retry_state.attempt_number} failed, retrying: {exc}",
        attempt=retry_state.attempt_number,
    )


def retrying(max_retries: int, base_delay: float) -> AsyncRetrying:
    """Bounded retry over the whole generate-then-parse cycle.

    One initial attempt plus max_retries retries, waiting base_delay * 2**n
    seconds in between. The last error is re-raised when the bound is hit.
    """
    return AsyncRetrying(
        stop=stop_after_attempt(max_retries + 1),
        wait=wait_exponential(multiplier=base_delay, max=MAX_BACKOFF_SECONDS),
        retry=retry_if_exception_type(RETRYABLE_ERRORS),
        before_sleep=_log_retry,
        reraise=True,
    )
