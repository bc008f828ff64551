import asyncio
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional

from tenacity import AsyncRetrying, RetryCallState, retry_if_exception_type, stop_after_attempt, stop_never, wait_fixed

from attestation_tracker.config import config
from attestation_tracker.exceptions import RateLimitedError
from attestation_tracker.utils.logger import logger


def _log_throttle(retry_state: RetryCallState) -> None:
    error = retry_state.outcome.exception()
    logger.warning("Rate limit reached. Retrying request...",
                   url=getattr(error, "url", None),
                   attempt=retry_state.attempt_number,
                   delay=retry_state.next_action.sleep if retry_state.next_action else None)


@dataclass
class RetryPolicy:
    """
    Fixed-delay retry on HTTP 429.

    Every throttled attempt waits `delay` seconds and re-issues the identical
    request. `max_retries` counts re-issues after the first attempt; None keeps
    retrying for as long as the API throttles.
    """
    delay: float = config.RETRY_DELAY
    max_retries: Optional[int] = config.MAX_RETRY_ATTEMPTS
    sleep: Callable[[float], Awaitable[Any]] = field(default=asyncio.sleep, repr=False)

    def retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_never if self.max_retries is None else stop_after_attempt(self.max_retries + 1),
            wait=wait_fixed(self.delay),
            retry=retry_if_exception_type(RateLimitedError),
            before_sleep=_log_throttle,
            sleep=self.sleep,
            reraise=True
        )

    async def call(self, fn: Callable[..., Awaitable[Any]], *args, **kwargs) -> Any:
        """Run `fn` under this policy."""
        return await self.retrying()(fn, *args, **kwargs)
