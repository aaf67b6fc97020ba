r"""httpx transports that retry requests with backoff.

``RetryTransport`` and ``AsyncRetryTransport`` wrap another httpx
transport and replay each request through a retry driver. They plug into a
client like any transport:

```python
import httpx
from aretry import ExponentialBuilder
from aretry.integrations import RetryTransport

transport = RetryTransport(
    httpx.HTTPTransport(), ExponentialBuilder(), retry_statuses=(502, 503)
)
with httpx.Client(transport=transport) as client:
    response = client.get("https://api.example.com/data")
```

Transport errors (``httpx.TransportError``: connection failures, timeouts,
protocol errors) are retried by default. Responses whose status code is
listed in ``retry_statuses`` are retried too; when the backoff runs out on
such a response, that last response is returned to the client instead of an
error, and every response discarded along the way is closed.
"""

from __future__ import annotations

__all__ = ["AsyncRetryTransport", "RetryTransport", "RetryableStatusError"]

import logging
from typing import TYPE_CHECKING, Any

import httpx

from aretry.backoff.exponential import ExponentialBuilder
from aretry.exceptions import AretryError
from aretry.retry.blocking import retry
from aretry.retry.future import retry_async

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from aretry.retry.core import RetryCore

logger: logging.Logger = logging.getLogger(__name__)


class RetryableStatusError(AretryError):
    """Raised inside the retry loop for a response with a retryable status.

    It never escapes the transport: when the loop ends on it, the response
    it carries is returned.

    Args:
        request: The request that was sent.
        response: The response with the retryable status code.
    """

    def __init__(self, request: httpx.Request, response: httpx.Response) -> None:
        self.request = request
        self.response = response
        super().__init__(
            f"{request.method} request to {request.url} "
            f"returned retryable status {response.status_code}"
        )


def default_retry_if(error: Exception) -> bool:
    """Retry transport errors and retryable statuses."""
    return isinstance(error, (httpx.TransportError, RetryableStatusError))


class _RetryTransportBase:
    def __init__(
        self,
        backoff: Any = None,
        *,
        retry_statuses: Iterable[int] = (),
        retry_if: Callable[[Exception], bool] | None = None,
        on_retry: Callable[[Exception, float], None] | None = None,
        sleep: Any = None,
    ) -> None:
        self.backoff = ExponentialBuilder() if backoff is None else backoff
        self.retry_statuses = frozenset(retry_statuses)
        self.retry_if = default_retry_if if retry_if is None else retry_if
        self.on_retry = on_retry
        self.sleeper = sleep

    def _check_status(self, request: httpx.Request, response: httpx.Response) -> httpx.Response:
        if response.status_code in self.retry_statuses:
            raise RetryableStatusError(request, response)
        return response

    def _configure(self, driver: RetryCore, notify: Callable[[Exception, float], None]) -> Any:
        driver.when(self.retry_if).notify(notify)
        if self.sleeper is not None:
            driver.sleeper(self.sleeper)
        return driver

    def _notify(self, error: Exception, delay: float) -> None:
        if self.on_retry is not None:
            self.on_retry(error, delay)


class RetryTransport(_RetryTransportBase, httpx.BaseTransport):
    """Synchronous httpx transport retrying requests with backoff.

    Args:
        transport: The transport that actually sends requests. Defaults to
            ``httpx.HTTPTransport()``.
        backoff: The backoff policy. Defaults to ``ExponentialBuilder()``.
        retry_statuses: Response status codes that trigger a retry.
        retry_if: Predicate deciding which errors are retried. Defaults to
            transport errors and retryable statuses.
        on_retry: Hook called with the error and the delay before each
            retry.
        sleep: Blocking sleeper. Defaults to ``time.sleep``.
    """

    def __init__(
        self,
        transport: httpx.BaseTransport | None = None,
        backoff: Any = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(backoff, **kwargs)
        self.transport = httpx.HTTPTransport() if transport is None else transport

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        # Buffer the body so that it can be sent again
        request.read()

        def attempt() -> httpx.Response:
            return self._check_status(request, self.transport.handle_request(request))

        try:
            return self._configure(retry(attempt, self.backoff), self._discard).call()
        except RetryableStatusError as exc:
            logger.debug(f"Giving up on {request.method} {request.url}: {exc}")
            return exc.response

    def _discard(self, error: Exception, delay: float) -> None:
        if isinstance(error, RetryableStatusError):
            error.response.close()
        self._notify(error, delay)

    def close(self) -> None:
        self.transport.close()


class AsyncRetryTransport(_RetryTransportBase, httpx.AsyncBaseTransport):
    """Asynchronous httpx transport retrying requests with backoff.

    Discarded responses are closed before the next attempt starts, or when
    the request ends, whichever comes first.

    Args:
        transport: The transport that actually sends requests. Defaults to
            ``httpx.AsyncHTTPTransport()``.
        backoff: The backoff policy. Defaults to ``ExponentialBuilder()``.
        retry_statuses: Response status codes that trigger a retry.
        retry_if: Predicate deciding which errors are retried. Defaults to
            transport errors and retryable statuses.
        on_retry: Hook called with the error and the delay before each
            retry.
        sleep: Async sleeper. Defaults to ``asyncio.sleep``.
    """

    def __init__(
        self,
        transport: httpx.AsyncBaseTransport | None = None,
        backoff: Any = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(backoff, **kwargs)
        self.transport = httpx.AsyncHTTPTransport() if transport is None else transport

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        await request.aread()
        discarded: list[httpx.Response] = []

        def remember(error: Exception, delay: float) -> None:
            if isinstance(error, RetryableStatusError):
                discarded.append(error.response)
            self._notify(error, delay)

        async def close_discarded() -> None:
            while discarded:
                await discarded.pop().aclose()

        async def attempt() -> httpx.Response:
            # The notify hook must not suspend, so close discarded responses here
            await close_discarded()
            response = await self.transport.handle_async_request(request)
            return self._check_status(request, response)

        try:
            return await self._configure(retry_async(attempt, self.backoff), remember)
        except RetryableStatusError as exc:
            logger.debug(f"Giving up on {request.method} {request.url}: {exc}")
            return exc.response
        finally:
            # Reached with a queued response when cancelled during a delay
            await close_discarded()

    async def aclose(self) -> None:
        await self.transport.aclose()
