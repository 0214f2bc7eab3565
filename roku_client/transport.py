# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
RokuTransport -- issues single ECP HTTP requests to one device with aiohttp.

There is no retry or caching; a non-2xx status raises RokuTransportError.
"""

from __future__ import annotations

import aiohttp
from yarl import URL

from .internal_types import *
from .pkg_logging import logger
from .constants import DEFAULT_TIMEOUT
from .exceptions import RokuTransportError

class RokuTransport(AsyncContextManager['RokuTransport']):
    base_address: str
    """The device base address; e.g., "http://192.168.1.2:8060"."""

    timeout_secs: float
    """The total timeout for each request, when this transport creates its own session."""

    _session: Optional[aiohttp.ClientSession] = None
    _owns_session: bool = False

    def __init__(
            self,
            base_address: str,
            session: Optional[aiohttp.ClientSession]=None,
            timeout_secs: float=DEFAULT_TIMEOUT,
          ) -> None:
        """Creates a transport for one device.

        Parameters:
            base_address: The normalized device address, "scheme://host:port".
            session:      An aiohttp session to use. If None, a session is created on first use
                          and closed by close().
            timeout_secs: The total timeout for each request on a session created by this transport.
        """
        self.base_address = base_address
        self.timeout_secs = timeout_secs
        self._session = session

    def endpoint(self, path: str) -> str:
        return f"{self.base_address}/{path}"

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self.timeout_secs))
            self._owns_session = True
        return self._session

    async def get(self, path: str) -> aiohttp.ClientResponse:
        """Issues a GET and returns the unread response. The caller must read or release it."""
        endpoint = self.endpoint(path)
        logger.debug(f"GET {endpoint}")
        response = await self._get_session().get(URL(endpoint, encoded=True))
        if not 200 <= response.status < 300:
            response.release()
            raise RokuTransportError('GET', endpoint, response.status, response.reason)
        return response

    async def post(self, path: str) -> None:
        """Issues a POST with an empty body."""
        endpoint = self.endpoint(path)
        logger.debug(f"POST {endpoint}")
        async with self._get_session().post(URL(endpoint, encoded=True)) as response:
            if not 200 <= response.status < 300:
                raise RokuTransportError('POST', endpoint, response.status, response.reason)

    async def close(self) -> None:
        """Closes the session if this transport created it."""
        session = self._session
        if session is not None and self._owns_session:
            self._session = None
            self._owns_session = False
            await session.close()

    async def __aenter__(self) -> RokuTransport:
        return self

    async def __aexit__(
            self,
            exc_type: Optional[type[BaseException]],
            exc: Optional[BaseException],
            tb: Optional[TracebackType]
      ) -> bool:
        await self.close()
        return False

    def __str__(self) -> str:
        return f"RokuTransport({self.base_address})"

    def __repr__(self) -> str:
        return str(self)
