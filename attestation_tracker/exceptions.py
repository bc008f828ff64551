from typing import Any, Optional


class AttestationTrackerError(Exception):
    """Base class for all errors raised by the tracker."""


class FetchError(AttestationTrackerError):
    """An outbound HTTP call failed and was not recovered."""

    def __init__(self, url: str, status: Optional[int] = None, body: Any = None, message: str = None):
        self.url = url
        self.status = status
        self.body = body
        if message is None:
            message = f"Request to {url} failed" + (f" with status {status}" if status is not None else "")
        super().__init__(message)


class RateLimitedError(FetchError):
    """The remote API answered HTTP 429."""

    def __init__(self, url: str, body: Any = None):
        super().__init__(url, 429, body, f"Rate limit reached for {url}")
