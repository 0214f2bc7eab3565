# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Discovery of Roku devices on the local network.

A single SSDP M-SEARCH for the "roku:ecp" search target is multicast, and the
LOCATION header of each reply is reduced to the device's ECP base address
("http://<host>:<port>"). Every call uses its own SsdpClient session, which is
closed before the call returns or raises.
"""

from __future__ import annotations

from .internal_types import *
from .pkg_logging import logger
from .constants import ROKU_ECP_SEARCH_TARGET, DEFAULT_DISCOVERY_TIMEOUT
from .exceptions import RokuDiscoveryTimeoutError
from .ssdp_client import SsdpClient, SsdpResponseInfo
from .util import address_from_location

SsdpClientFactory = Callable[[], SsdpClient]
"""A callable that creates a new, unstarted SsdpClient."""

class RokuDiscoverer:
    """Finds Roku devices with SSDP.

    Instances hold only configuration; each discover_one()/discover_all() call
    runs an independent discovery session.
    """
    search_target: str
    bind_addresses: Optional[List[str]]

    def __init__(
            self,
            bind_addresses: Optional[Iterable[str]]=None,
            search_target: str=ROKU_ECP_SEARCH_TARGET,
            ssdp_client_factory: Optional[SsdpClientFactory]=None,
          ) -> None:
        self.bind_addresses = None if bind_addresses is None else list(bind_addresses)
        self.search_target = search_target
        self._ssdp_client_factory = ssdp_client_factory

    def new_ssdp_client(self) -> SsdpClient:
        if self._ssdp_client_factory is not None:
            return self._ssdp_client_factory()
        return SsdpClient(search_target=self.search_target, bind_addresses=self.bind_addresses)

    async def iter_addresses(self, timeout: float) -> AsyncIterator[str]:
        """Yields each distinct device address as its first reply arrives, until timeout seconds
           have elapsed. Replies without a usable LOCATION and repeated replies are skipped."""
        seen: Set[str] = set()
        async with self.new_ssdp_client() as ssdp_client:
            async with ssdp_client.search(search_target=self.search_target, response_wait_time=timeout) as search_request:
                async for info in search_request:
                    address = self._address_of(info)
                    if address is None or address in seen:
                        continue
                    seen.add(address)
                    logger.debug(f"Discovered Roku device at {address}")
                    yield address

    async def discover_one(self, timeout: float=DEFAULT_DISCOVERY_TIMEOUT) -> str:
        """Returns the address of the first device that replies.

        Raises RokuDiscoveryTimeoutError if no device replies within timeout seconds.
        """
        addresses = self.iter_addresses(timeout)
        try:
            async for address in addresses:
                return address
        finally:
            # stop listening immediately
            await addresses.aclose()
        raise RokuDiscoveryTimeoutError(timeout)

    async def discover_all(self, timeout: float=DEFAULT_DISCOVERY_TIMEOUT) -> List[str]:
        """Waits the full timeout and returns the distinct addresses of every device that replied,
           in the order they were first seen. Returns an empty list if nothing replied."""
        return [ address async for address in self.iter_addresses(timeout) ]

    @staticmethod
    def _address_of(info: SsdpResponseInfo) -> Optional[str]:
        location = info.location
        if location is None:
            logger.debug(f"Ignoring SSDP reply from {info.src_addr} without a LOCATION header")
            return None
        address = address_from_location(location)
        if address is None:
            logger.debug(f"Ignoring SSDP reply from {info.src_addr} with invalid LOCATION {location!r}")
        return address

async def discover(timeout: float=DEFAULT_DISCOVERY_TIMEOUT, bind_addresses: Optional[Iterable[str]]=None) -> str:
    """Returns the address of the first Roku device found on the network.

    Raises RokuDiscoveryTimeoutError if none is found within timeout seconds.
    """
    return await RokuDiscoverer(bind_addresses=bind_addresses).discover_one(timeout)

async def discover_all(timeout: float=DEFAULT_DISCOVERY_TIMEOUT, bind_addresses: Optional[Iterable[str]]=None) -> List[str]:
    """Returns the addresses of all Roku devices that respond within timeout seconds."""
    return await RokuDiscoverer(bind_addresses=bind_addresses).discover_all(timeout)
