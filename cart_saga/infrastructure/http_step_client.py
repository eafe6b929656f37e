import asyncio
import logging
import typing
from time import perf_counter

import aiohttp
from aiohttp.client import ClientSession

from cart_saga.saga.errors import TransportFault
from cart_saga.saga.step_client import IStepClient, PAYMENT, REVERSE_PAYMENT
from cart_saga.saga.step_outcome import Failure, StepOutcome, Success

__all__ = (
    "HttpStepClient",
)


_logger = logging.getLogger(__name__)


class HttpStepClient(IStepClient):
    """Calls ``POST <base_url>/<step>/process`` without a body.

    Any 2xx answer is a success, any other status a failure response. The
    body only becomes the outcome message, so undecodable bytes are replaced.
    Connection errors and timeouts raise TransportFault.
    """
    response_time: float

    def __init__(
            self,
            base_urls: typing.Mapping[str, str],
            client_session: ClientSession | None = None,
            timeout: float | None = None,
    ):
        """Initialize HTTP step client.

        Args:
            base_urls: Base URL of the backend of each step. The reversal of
                a payment goes to the payment backend unless mapped itself.
            client_session: Session to reuse; by default one is created on
                first use and closed by close().
            timeout: Total timeout of a single request in seconds.
        """
        self._base_urls: dict[str, str] = dict(base_urls)
        if PAYMENT in self._base_urls:
            self._base_urls.setdefault(REVERSE_PAYMENT, self._base_urls[PAYMENT])
        self._client_session: ClientSession | None = client_session
        self._owns_session: bool = client_session is None
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self.response_time = 0.0

    def url_for(self, step_name: str) -> str:
        try:
            base_url = self._base_urls[step_name]
        except KeyError:
            raise ValueError("No backend configured for step %r" % step_name)
        return "%s/%s/process" % (base_url.rstrip('/'), step_name)

    async def invoke(self, step_name: str) -> StepOutcome:
        url = self.url_for(step_name)
        time_start = perf_counter()
        try:
            async with self._session().post(url, timeout=self._timeout) as response:
                text = await response.text(errors='replace')
                status = response.status
                reason = response.reason
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportFault("POST %s: %s" % (url, str(e) or type(e).__name__)) from e
        finally:
            self.response_time += perf_counter() - time_start

        _logger.debug("POST %s -> %s", url, status)
        if 200 <= status < 300:
            return Success(text)
        return Failure("%s backend responded %s %s" % (step_name, status, reason or ''))

    def _session(self) -> ClientSession:
        if self._client_session is None:
            self._client_session = ClientSession()
        return self._client_session

    async def close(self) -> None:
        if self._owns_session and self._client_session is not None:
            await self._client_session.close()
            self._client_session = None

    async def __aenter__(self) -> 'HttpStepClient':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
