import aiohttp
import asyncio
import json
from typing import Optional, Dict, Any

from attestation_tracker.config import config
from attestation_tracker.exceptions import FetchError, RateLimitedError
from attestation_tracker.utils.retry import RetryPolicy

class AdmissionGate:
    """Caps the number of requests in flight and keeps count of them."""
    
    def __init__(self, capacity: int = config.MAX_CONCURRENT_REQUESTS):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self.in_flight = 0
        self._semaphore = asyncio.Semaphore(capacity)
    
    async def __aenter__(self):
        await self._semaphore.acquire()
        self.in_flight += 1
        return self
    
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.in_flight -= 1
        self._semaphore.release()

class RateLimitedFetcher:
    """HTTP client with a bounded in-flight gate and fixed-delay retry on 429."""
    
    def __init__(self, session: Optional[aiohttp.ClientSession] = None,
                 gate: Optional[AdmissionGate] = None,
                 retry_policy: Optional[RetryPolicy] = None,
                 timeout: int = config.REQUEST_TIMEOUT):
        self.session = session
        self._owns_session = session is None
        self.gate = gate or AdmissionGate()
        self.retry_policy = retry_policy or RetryPolicy()
        self.timeout = timeout
    
    async def __aenter__(self):
        """Async context manager entry."""
        await self.start()
        return self
    
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
    
    async def start(self):
        """Initialize the HTTP session."""
        if not self.session:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            self.session = aiohttp.ClientSession(timeout=timeout)
            self._owns_session = True
    
    async def close(self):
        """Close the HTTP session if this fetcher created it."""
        if self.session and self._owns_session:
            await self.session.close()
            self.session = None
    
    @property
    def in_flight(self) -> int:
        return self.gate.in_flight
    
    async def fetch(self, url: str, method: str = "GET",
                    params: Optional[Dict[str, str]] = None,
                    payload: Any = None) -> Any:
        """
        Perform a request and return the decoded JSON body.

        Throttled requests are re-issued unchanged according to the retry
        policy. Any other failure raises FetchError.
        """
        if not self.session:
            await self.start()
        return await self.retry_policy.call(self._send, method, url, params, payload)
    
    async def _send(self, method: str, url: str, params: Optional[Dict[str, str]], payload: Any) -> Any:
        async with self.gate:
            try:
                async with self.session.request(method, url, params=params, json=payload) as response:
                    if response.status == 429:
                        raise RateLimitedError(url, await self._read_body(response))
                    
                    if response.status >= 400:
                        raise FetchError(url, response.status, await self._read_body(response))
                    
                    try:
                        return await response.json(content_type=None)
                    except ValueError as e:
                        raise FetchError(url, response.status,
                                         message=f"Invalid JSON from {url}: {e}") from e
            
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                raise FetchError(url, message=f"Request to {url} failed: {e!r}") from e
    
    @staticmethod
    async def _read_body(response) -> Any:
        """Error bodies are JSON on the APIs we talk to, but not always."""
        text = await response.text()
        try:
            return json.loads(text)
        except ValueError:
            return text
