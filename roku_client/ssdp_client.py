# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
SsdpClient -- An SSDP client that can:

  1. Send an M-SEARCH discovery request to a multicast UDP address (typically 239.255.255.250:1900)
  2. Receive and decode discovery response SsdpDatagram's from remote nodes
  3. Yield responses received within a configurable timeout period
"""

from __future__ import annotations

import asyncio
import socket
import re
import time
import datetime

from .internal_types import *
from .pkg_logging import logger
from .constants import (
    SSDP_MULTICAST_ADDRESS,
    SSDP_PORT,
    ROKU_ECP_SEARCH_TARGET,
    DEFAULT_DISCOVERY_TIMEOUT,
    DEFAULT_SEARCH_MX,
  )

from .ssdp_datagram import SsdpDatagram
from .ssdp_socket import SsdpSocket, SsdpSocketBinding, SsdpDatagramSubscriber
from .util import get_local_ip_addresses

class SsdpResponseInfo:
    socket_binding: SsdpSocketBinding
    """The socket binding on which the response was received"""

    src_addr: HostAndPort
    """The source address of the response"""

    datagram: SsdpDatagram
    """The response datagram"""

    status_code: int
    """The status code in the statement line (e.g. 200)"""

    status: str
    """The status string in the statement line (e.g. "OK")"""

    monotonic_time: float
    """The value of time.monotonic() when the response was received."""

    utc_time: datetime.datetime
    """The UTC time at which the response was received."""

    def __init__(
            self,
            socket_binding: SsdpSocketBinding,
            src_addr: HostAndPort,
            datagram: SsdpDatagram,
            status_code: int,
            status: str
          ) -> None:
        self.socket_binding = socket_binding
        self.src_addr = src_addr
        self.datagram = datagram
        self.status_code = status_code
        self.status = status
        self.monotonic_time = time.monotonic()
        self.utc_time = datetime.datetime.now(datetime.timezone.utc)

    @property
    def location(self) -> Optional[str]:
        return self.datagram.hdr_location

    def __str__(self) -> str:
        return f"SsdpResponseInfo(addr={self.src_addr}, {self.datagram})"

    def __repr__(self) -> str:
        return str(self)

class SsdpSearchRequest(
        AsyncContextManager['SsdpSearchRequest'],
        AsyncIterable[SsdpResponseInfo]
      ):
    """An object that manages a single search request on an SsdpClient and all of the received responses
       within an AsyncContextManager/AsyncIterable interface."""

    _response_statement_re = re.compile(r'^HTTP/(?P<version>[0-9]+\.[0-9]+) +(?P<status_code>[0-9]+) *(?P<status>.*?) *$')

    ssdp_client: SsdpClient
    search_target: str
    dg_subscriber: SsdpDatagramSubscriber
    response_wait_time: float
    include_error_responses: bool
    end_time: float = 0.0

    def __init__(
            self,
            ssdp_client: SsdpClient,
            search_target: Optional[str]=None,
            response_wait_time: Optional[float]=None,
            include_error_responses: bool=False,
          ):
        """Create an async context manager/iterable that sends a multicast search request and returns the responses
        as they arrive.

        Parameters:
            ssdp_client:             The SsdpClient instance to use for sending the search request and receiving responses.
            search_target:           The ST value to search for. Defaults to ssdp_client.search_target.
            response_wait_time:      The amount of time (in seconds) to wait for responses to come in. Defaults to
                                        ssdp_client.response_wait_time.
            include_error_responses: If True, responses with a non-200 status code will be included in the results.

        Usage:
            async with SsdpSearchRequest(ssdp_client, ...) as search_request:
                async for response in search_request:
                    print(response.location)
                    # It is possible to break out of the loop early if desired
        """
        self.ssdp_client = ssdp_client
        self.search_target = ssdp_client.search_target if search_target is None else search_target
        self.response_wait_time = ssdp_client.response_wait_time if response_wait_time is None else response_wait_time
        self.include_error_responses = include_error_responses
        self.dg_subscriber = SsdpDatagramSubscriber(self.ssdp_client)

    async def __aenter__(self) -> SsdpSearchRequest:
        # The subscriber must be started before the search request is sent so that we don't miss any responses.
        await self.dg_subscriber.__aenter__()
        try:
            search_datagram = SsdpDatagram.new_search(
                self.search_target,
                mx=self.ssdp_client.mx,
                host=f"{self.ssdp_client.multicast_address}:{self.ssdp_client.multicast_port}",
              )
            for socket_binding in self.ssdp_client.socket_bindings:
                socket_binding.sendto(search_datagram, (self.ssdp_client.multicast_address, self.ssdp_client.multicast_port))
            self.end_time = time.monotonic() + self.response_wait_time
        except BaseException as e:
            # __aexit__ is not called when __aenter__ raises, so the subscriber must be cleaned up here.
            await self.dg_subscriber.__aexit__(type(e), e, e.__traceback__)
            raise
        return self

    async def __aexit__(
            self,
            exc_type: Optional[type[BaseException]],
            exc: Optional[BaseException],
            tb: Optional[TracebackType]
      ) -> bool:
        return await self.dg_subscriber.__aexit__(exc_type, exc, tb)

    def parse_response(
            self,
            socket_binding: SsdpSocketBinding,
            addr: HostAndPort,
            datagram: SsdpDatagram
          ) -> Optional[SsdpResponseInfo]:
        """Decodes the statement line of a received datagram. Returns None if the datagram is not an
           acceptable search response."""
        m = self._response_statement_re.match(datagram.statement_line)
        if m is None:
            logger.debug(f"Ignoring non-response datagram from {addr}: {datagram.statement_line!r}")
            return None
        status_code = int(m.group('status_code'))
        if status_code != 200 and not self.include_error_responses:
            return None
        return SsdpResponseInfo(socket_binding, addr, datagram, status_code, m.group('status'))

    async def iter_responses(self) -> AsyncIterator[SsdpResponseInfo]:
        while True:
            remaining_time = self.end_time - time.monotonic()
            if remaining_time <= 0.0:
                break
            try:
                resp_tuple = await asyncio.wait_for(self.dg_subscriber.receive(), remaining_time)
            except asyncio.TimeoutError:
                # re-check the deadline; the loop clock may fire slightly early
                continue
            if resp_tuple is None:
                break
            info = self.parse_response(*resp_tuple)
            if info is not None:
                logger.debug(f"Received SSDP response from {info.src_addr} on {info.socket_binding}: "
                             f"status_code={info.status_code}, headers={dict(info.datagram.headers)}")
                yield info

    def __aiter__(self) -> AsyncIterator[SsdpResponseInfo]:
        return self.iter_responses()


class SsdpClient(SsdpSocket):
    """
    An SSDP client that can:

      1. Send an M-SEARCH request to a multicast UDP address (typically 239.255.255.250:1900)
      2. Receive and decode discovery response SsdpDatagram's from remote nodes
      3. Yield responses received within a configurable timeout period
    """
    search_target: str
    """The default ST value for search requests."""

    response_wait_time: float
    """The default amount of time (in seconds) to wait for responses to come in."""

    mx: int
    """The MX (maximum response delay) value advertised in search requests."""

    multicast_address: str
    """The multicast address to send requests to."""

    multicast_port: int
    """The multicast port to send requests to."""

    bind_addresses: List[str]
    """The local IP addresses to bind to, one socket per address."""

    def __init__(
            self,
            search_target: str=ROKU_ECP_SEARCH_TARGET,
            response_wait_time: float=DEFAULT_DISCOVERY_TIMEOUT,
            mx: int=DEFAULT_SEARCH_MX,
            multicast_address: str=SSDP_MULTICAST_ADDRESS,
            multicast_port: int=SSDP_PORT,
            bind_addresses: Optional[Iterable[str]]=None,
            include_loopback: bool = False
          ) -> None:
        super().__init__()
        self.search_target = search_target
        self.response_wait_time = response_wait_time
        self.mx = mx
        self.multicast_address = multicast_address
        self.multicast_port = multicast_port
        if bind_addresses is None:
            bind_addresses = get_local_ip_addresses(include_loopback=include_loopback)
        self.bind_addresses = list(bind_addresses)
        if len(self.bind_addresses) == 0:
            # no usable interface addresses; let the OS pick one
            self.bind_addresses = [ '' ]

    #@override
    async def add_socket_bindings(self) -> None:
        """Creates one unicast UDP socket per bind address. Search requests are multicast from each
           socket and the responses are unicast back to it."""
        logger.debug(f"Creating socket bindings to {self.bind_addresses}")
        for bind_address in self.bind_addresses:
            sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
            try:
                sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
                sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_TTL, 2)
                if bind_address != '':
                    sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_IF, socket.inet_aton(bind_address))
                sock.bind((bind_address, 0))
                sock.setblocking(False)
            except BaseException:
                sock.close()
                raise
            self.add_socket_binding(SsdpSocketBinding(sock))

    def search(
            self,
            search_target: Optional[str]=None,
            response_wait_time: Optional[float]=None,
            include_error_responses: bool=False,
          ) -> SsdpSearchRequest:
        """Create an async context manager/iterable that sends a multicast search request and returns the responses
           as they arrive.

        Usage:
            async with ssdp_client.search(...) as search_request:
                async for response in search_request:
                    print(response.location)
        """
        return SsdpSearchRequest(
                self,
                search_target=search_target,
                response_wait_time=response_wait_time,
                include_error_responses=include_error_responses,
              )
