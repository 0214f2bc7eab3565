#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
SsdpSocket -- An abstract base class for an SSDP socket that can:

  1. Listen on one or more bound UDP sockets
  2. Receive and decode SsdpDatagrams from remote nodes and deliver them to any number of async subscribers
  3. Send SsdpDatagrams to a remote multicast or unicast address

  Each subscriber receives a sequence of (SsdpSocketBinding, HostAndPort, SsdpDatagram)
  tuples from receive() until the socket is closed.

  Subclasses must implement the add_socket_bindings() method to create and bind the sockets that will be
  used to receive and send datagrams.
"""

from __future__ import annotations

import asyncio
from asyncio import Future
import socket
from abc import ABC, abstractmethod

from .internal_types import *
from .pkg_logging import logger
from .exceptions import RokuError
from .ssdp_datagram import SsdpDatagram

MAX_QUEUE_SIZE = 1000

SubscriberItem = Tuple['SsdpSocketBinding', HostAndPort, SsdpDatagram]

class SsdpSocketBinding:
    """
    An encapsulation of the binding of an SsdpSocket to a single low-level
    bound datagram socket. There is one instance of this class created for each
    low-level socket that is in use (typically one per network interface).
    """

    ssdp_socket: Optional[SsdpSocket] = None
    """The SsdpSocket that is bound to this low-level socket. """

    index: int = -1
    """The index of this socket binding within SsdpSocket. Set to -1 until this socket binding is added."""

    sock: Optional[socket.socket] = None
    """The low-level socket that is bound to this SsdpSocket."""

    _protocol: Optional[_SsdpSocketProtocol] = None

    _transport: Optional[asyncio.DatagramTransport] = None

    unicast_addr: HostAndPort
    """The local unicast ip address and port associated with this binding."""

    sockname: str
    """The name of the socket as it should be displayed in logs, etc"""

    def __init__(self, sock: socket.socket, unicast_addr: Optional[HostAndPort]=None, sockname: Optional[str]=None):
        self.sock = sock
        if unicast_addr is None:
            unicast_addr = sock.getsockname()[:2]
        self.unicast_addr = unicast_addr
        self.sockname = str(unicast_addr) if sockname is None else sockname

    def attach_to_ssdp_socket(self, ssdp_socket: SsdpSocket, index: int) -> None:
        if self.index >= 0:
            raise RokuError(f"Attempt to reattach SsdpSocketBinding: {self}")
        self.ssdp_socket = ssdp_socket
        self.index = index

    @property
    def transport(self) -> Optional[asyncio.DatagramTransport]:
        return self._transport

    @transport.setter
    def transport(self, transport: Optional[asyncio.DatagramTransport]) -> None:
        if transport != self._transport:
            assert self._transport is None or transport is None
        self._transport = transport

    @property
    def protocol(self) -> Optional[_SsdpSocketProtocol]:
        return self._protocol

    @protocol.setter
    def protocol(self, protocol: _SsdpSocketProtocol) -> None:
        if protocol != self._protocol:
            assert self._protocol is None
        self._protocol = protocol

    def sendto(self, datagram: SsdpDatagram, addr: HostAndPort) -> None:
        logger.debug(f"Sending SsdpDatagram via {self} to {addr}: {datagram}")
        if self.transport is None:
            raise RokuError(f"SsdpSocketBinding {self} is not connected")
        self.transport.sendto(datagram.raw_data, addr)

    def __str__(self) -> str:
        return f"SsdpSocketBinding({self.index}: {self.sockname})"

    def __repr__(self) -> str:
        return str(self)

class _SsdpSocketProtocol(asyncio.DatagramProtocol):
    """An adapter between the asyncio transport and SsdpSocket. There is one instance of this class
       created for each low-level socket."""
    socket_binding: SsdpSocketBinding

    def __init__(self, socket_binding: SsdpSocketBinding):
        self.socket_binding = socket_binding

    @property
    def ssdp_socket(self) -> SsdpSocket:
        assert self.socket_binding.ssdp_socket is not None
        return self.socket_binding.ssdp_socket

    def connection_made(self, transport: asyncio.BaseTransport):
        # asyncio datagram transports do not inherit from asyncio.DatagramTransport, hence the ignore
        self.socket_binding.transport = transport # type: ignore[assignment]
        self.ssdp_socket.connection_made(self.socket_binding)

    def datagram_received(self, data: bytes, addr: Tuple[str, int]):
        self.ssdp_socket.datagram_received(self.socket_binding, addr[:2], data)

    def error_received(self, exc: Exception):
        """Called when a send or receive operation raises an OSError.

        (Other than BlockingIOError or InterruptedError.)
        """
        self.ssdp_socket.error_received(self.socket_binding, exc)

    def connection_lost(self, exc: Optional[Exception]) -> None:
        self.ssdp_socket.connection_lost(self.socket_binding, exc)
        self.socket_binding.transport = None


class SsdpDatagramSubscriber(AsyncContextManager['SsdpDatagramSubscriber']):
    """A queue of datagrams received by an SsdpSocket while the subscriber is active.

    Datagrams that arrive before the subscriber is entered, or after it is exited, are
    never delivered to it.
    """
    ssdp_socket: SsdpSocket
    queue: asyncio.Queue[Optional[SubscriberItem]]
    eos: bool = False
    eos_exc: Optional[BaseException] = None

    def __init__(self, ssdp_socket: SsdpSocket, max_queue_size: int=MAX_QUEUE_SIZE):
        self.ssdp_socket = ssdp_socket
        self.queue = asyncio.Queue(max_queue_size)

    async def __aenter__(self) -> SsdpDatagramSubscriber:
        self.ssdp_socket.add_subscriber(self)
        return self

    async def __aexit__(
            self,
            exc_type: Optional[type[BaseException]],
            exc: Optional[BaseException],
            tb: Optional[TracebackType]
      ) -> bool:
        self.ssdp_socket.remove_subscriber(self)
        self.on_end_of_stream()
        return False

    async def receive(self) -> Optional[SubscriberItem]:
        """Waits for the next datagram. Returns None at end of stream.

        Raises the transport exception if the stream was ended by a transport error.
        """
        if self.eos and self.queue.empty():
            result = None
        else:
            result = await self.queue.get()
            self.queue.task_done()
        if result is None:
            # leave the end-of-stream marker for any other waiters
            self._put_eos_marker()
            if self.eos_exc is not None:
                raise self.eos_exc
        return result

    def on_datagram(self, socket_binding: SsdpSocketBinding, addr: HostAndPort, datagram: SsdpDatagram) -> None:
        if not self.eos:
            try:
                self.queue.put_nowait((socket_binding, addr, datagram))
            except asyncio.QueueFull:
                logger.warning(f"Queue full, dropping datagram from {socket_binding} {addr}: {datagram}")

    def on_end_of_stream(self, exc: Optional[BaseException]=None) -> None:
        if not self.eos:
            self.eos = True
            self.eos_exc = exc
            self._put_eos_marker()

    def _put_eos_marker(self) -> None:
        try:
            # wake up any waiting tasks
            self.queue.put_nowait(None)
        except asyncio.QueueFull:
            # queue is full so waiters will wake up soon
            pass

class SsdpSocket(AsyncContextManager['SsdpSocket'], ABC):
    """
    An abstract async SSDP socket that can:

      1. Listen on one or more bound UDP sockets
      2. Receive and decode SsdpDatagrams from remote nodes and deliver them to any number of async subscribers
      3. Send SsdpDatagrams to a remote multicast or unicast address

      Subclasses must implement the add_socket_bindings() method.
    """

    socket_bindings: List[SsdpSocketBinding]
    """A list of SsdpSocketBinding instances, one for each low-level socket that is in use."""

    final_result: Future[None]
    """A future that is set when the ssdp_socket is stopped."""

    datagram_subscribers: Set[SsdpDatagramSubscriber]
    """The subscribers that currently wish to receive SSDP Datagrams. Owned by this instance."""

    def __init__(self) -> None:
        self.final_result = asyncio.get_running_loop().create_future()
        self.socket_bindings = []
        self.datagram_subscribers = set()

    def add_subscriber(self, subscriber: SsdpDatagramSubscriber) -> None:
        self.datagram_subscribers.add(subscriber)
        if self.final_result.done():
            subscriber.on_end_of_stream()

    def remove_subscriber(self, subscriber: SsdpDatagramSubscriber) -> None:
        self.datagram_subscribers.discard(subscriber)

    def add_socket_binding(self, socket_binding: SsdpSocketBinding) -> None:
        i = len(self.socket_bindings)
        socket_binding.attach_to_ssdp_socket(self, i)
        self.socket_bindings.append(socket_binding)
        logger.debug(f"Added socket binding {i}: {socket_binding}")

    @abstractmethod
    async def add_socket_bindings(self) -> None:
        """Abstract method that creates and binds the sockets that will be used to receive
           and send datagrams (typically one per interface), and adds them with self.add_socket_binding().
           Must be overridden by subclasses."""
        raise NotImplementedError()

    async def start(self) -> None:
        try:
            loop = asyncio.get_running_loop()
            await self.add_socket_bindings()
            if len(self.socket_bindings) == 0:
                raise RokuError("No datagram sockets were added to SsdpSocket")

            for socket_binding in self.socket_bindings:
                _, protocol = await loop.create_datagram_endpoint(
                    lambda: _SsdpSocketProtocol(socket_binding),
                    sock=socket_binding.sock
                  )
                assert isinstance(protocol, _SsdpSocketProtocol)
                logger.debug(f"Created datagram endpoint for {socket_binding}")
                socket_binding.protocol = protocol
        except BaseException as e:
            self.set_final_exception(e)
            raise

    def connection_made(self, socket_binding: SsdpSocketBinding) -> None:
        logger.debug(f"Connection made: {socket_binding}")

    def datagram_received(self, socket_binding: SsdpSocketBinding, addr: HostAndPort, data: bytes) -> None:
        """Called when some datagram is received. Datagrams that cannot be parsed are logged and dropped."""
        try:
            datagram = SsdpDatagram(raw_data=data)
        except Exception as e:
            logger.warning(f"Error parsing datagram from {addr}, raw=[{data!r}]: {e}")
            return
        logger.debug(f"Received datagram from {socket_binding} {addr}: {datagram}")
        for subscriber in list(self.datagram_subscribers):
            try:
                subscriber.on_datagram(socket_binding, addr, datagram)
            except Exception as e:
                logger.warning(f"Subscriber raised exception processing datagram {datagram}: {e}")

    def error_received(self, socket_binding: SsdpSocketBinding, exc: Exception) -> None:
        """Called when a send or receive operation raises an OSError."""
        logger.info(f"Error received from transport {socket_binding}: {exc}")
        self._end_subscribers(exc)
        self.set_final_exception(exc)

    def connection_lost(self, socket_binding: SsdpSocketBinding, exc: Optional[Exception]) -> None:
        logger.debug(f"Connection to transport lost on {socket_binding}, exc={exc}")
        self._end_subscribers(exc)
        if exc is None:
            self.set_final_result()
        else:
            self.set_final_exception(exc)

    def _end_subscribers(self, exc: Optional[BaseException]) -> None:
        for subscriber in list(self.datagram_subscribers):
            subscriber.on_end_of_stream(exc)

    def _close_all_transports(self) -> None:
        for socket_binding in self.socket_bindings:
            transport = socket_binding.transport
            if transport is not None:
                try:
                    transport.close()
                except Exception as e:
                    logger.error(f"Error closing transport on {socket_binding}: {e}")
                socket_binding.transport = None

    def _close_all_socks(self) -> None:
        for socket_binding in self.socket_bindings:
            if socket_binding.sock is not None:
                try:
                    socket_binding.sock.close()
                except Exception as e:
                    logger.error(f"Error closing socket on {socket_binding}: {e}")
                socket_binding.sock = None

    def set_final_exception(self, exc: BaseException) -> None:
        if not self.final_result.done():
            logger.debug(f"SsdpSocket: Setting final exception: {exc}")
            self.final_result.set_exception(exc)
            # mark the exception as retrieved
            self.final_result.exception()
            self._end_subscribers(None)
            self._close_all_transports()
            self._close_all_socks()

    def set_final_result(self) -> None:
        if not self.final_result.done():
            logger.debug("SsdpSocket: Setting final result to success")
            self.final_result.set_result(None)
            self._end_subscribers(None)
            self._close_all_transports()
            self._close_all_socks()

    async def __aenter__(self) -> Self:
        await self.start()
        return self

    async def __aexit__(
            self,
            exc_type: Optional[type[BaseException]],
            exc: Optional[BaseException],
            tb: Optional[TracebackType]
      ) -> bool:
        # GeneratorExit means an enclosing async generator was closed early; that is a normal stop
        if exc is None or isinstance(exc, GeneratorExit):
            self.set_final_result()
        else:
            self.set_final_exception(exc)
        return False
