# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
RokuClient -- controls one Roku device through its External Control Protocol (ECP):

  1. Query installed apps, the active app, device info, and app icons
  2. Launch apps and the DTV tuner
  3. Send keypress/keydown/keyup events and literal text

Every request is awaited before the next is issued, so the device observes
key events in exactly the order they were sent.
"""

from __future__ import annotations

import re
from urllib.parse import quote
import xml.etree.ElementTree as ET

from .internal_types import *
from .constants import DEFAULT_DISCOVERY_TIMEOUT, DEFAULT_TIMEOUT
from .exceptions import RokuMalformedResponseError
from .keys import KeyType, get_command
from .models import RokuApp, RokuAppId, RokuDeviceInfo, RokuIcon
from .transport import RokuTransport
from .util import normalize_address, camelcase, maybe_boolean
from .discovery import RokuDiscoverer

from .commander import Commander

if TYPE_CHECKING:
    import aiohttp

_image_type_re = re.compile(r'image/([^;\s]+)')

class RokuClient(AsyncContextManager['RokuClient']):
    """A client for one Roku device."""

    address: str
    """The device's ECP base address, e.g., "http://192.168.1.2:8060". Never changes."""

    transport: RokuTransport
    """The transport used to issue requests. Any object with async get(path) and post(path)
       methods may be supplied."""

    def __init__(
            self,
            address: str,
            *,
            transport: Optional[RokuTransport]=None,
            session: Optional[aiohttp.ClientSession]=None,
            timeout_secs: float=DEFAULT_TIMEOUT,
          ) -> None:
        """Creates a client for the device at address.

        Parameters:
            address:      The device address. "http://" is assumed if no scheme is given, and the
                          default Roku ECP port (8060) if no port is given.
            transport:    The transport to use. If None, a RokuTransport is created.
            session:      An aiohttp session for the created RokuTransport. If None, the transport
                          creates (and owns) its own.
            timeout_secs: The per-request timeout for the created RokuTransport.
        """
        self.address = normalize_address(address)
        if transport is None:
            transport = RokuTransport(self.address, session=session, timeout_secs=timeout_secs)
        self.transport = transport

    @classmethod
    async def discover(
            cls,
            timeout: float=DEFAULT_DISCOVERY_TIMEOUT,
            discoverer: Optional[RokuDiscoverer]=None,
          ) -> RokuClient:
        """Returns a client for the first Roku device discovered on the network.

        Raises RokuDiscoveryTimeoutError if no device responds within timeout seconds.
        """
        if discoverer is None:
            discoverer = RokuDiscoverer()
        return cls(await discoverer.discover_one(timeout))

    @classmethod
    async def discover_all(
            cls,
            timeout: float=DEFAULT_DISCOVERY_TIMEOUT,
            discoverer: Optional[RokuDiscoverer]=None,
          ) -> List[RokuClient]:
        """Returns a client for each Roku device that responds within timeout seconds."""
        if discoverer is None:
            discoverer = RokuDiscoverer()
        return [ cls(address) for address in await discoverer.discover_all(timeout) ]

    async def apps(self) -> List[RokuApp]:
        """Returns the apps installed on this device."""
        root = await self._get_xml('query/apps')
        return [ RokuApp.from_element(element) for element in root.findall('app') ]

    async def active_app(self) -> Optional[RokuApp]:
        """Returns the active app, or None if the home screen is displayed.

        Raises RokuMalformedResponseError if the device does not return exactly one app element.
        """
        root = await self._get_xml('query/active-app')
        elements = root.findall('app')
        if len(elements) != 1:
            raise RokuMalformedResponseError(
                f"Expected 1 active app but received {len(elements)}",
                count=len(elements),
              )
        element = elements[0]
        # With no app active, the device returns a single element without any attributes
        if not element.get('id'):
            return None
        return RokuApp.from_element(element)

    async def info(self) -> RokuDeviceInfo:
        """Returns the device info. Field names are converted to camelCase (so user-device-name
           becomes userDeviceName), and "true"/"false" values become booleans. The fields
           present vary between devices."""
        root = await self._get_xml('query/device-info')
        result: RokuDeviceInfo = {}
        for element in root:
            result[camelcase(element.tag)] = maybe_boolean(element.text or '')
        return result

    async def icon(self, app_id: RokuAppId) -> RokuIcon:
        """Fetches the icon of an app. The returned RokuIcon holds the unread response, which the
           caller must read or release."""
        response = await self.transport.get(f'query/icon/{app_id}')
        content_type = response.headers.get('Content-Type') or None
        extension: Optional[str] = None
        if content_type is not None:
            m = _image_type_re.search(content_type)
            if m is not None:
                extension = f".{m.group(1)}"
        return RokuIcon(content_type, extension, response)

    async def launch(self, app_id: RokuAppId) -> None:
        """Launches an app by id."""
        await self.transport.post(f'launch/{app_id}')

    async def launch_dtv(self, channel: Optional[Union[int, str]]=None) -> None:
        """Launches the DTV tuner, optionally on a channel. With no channel the tuner opens to
           the last channel watched."""
        channel_query = '' if channel is None or channel == '' else f'?ch={channel}'
        await self.launch(f'tvinput.dtv{channel_query}')

    async def _key_helper(self, verb: str, key: KeyType) -> None:
        command = get_command(key)
        # single characters are not in the key table; send them as literal characters
        if len(command) == 1:
            command = f"Lit_{quote(command, safe='')}"
        await self.transport.post(f'{verb}/{command}')

    async def keypress(self, key: KeyType) -> None:
        """Equivalent to pressing and releasing a remote control key."""
        await self._key_helper('keypress', key)

    async def keydown(self, key: KeyType) -> None:
        """Equivalent to pressing and holding a remote control key."""
        await self._key_helper('keydown', key)

    async def keyup(self, key: KeyType) -> None:
        """Equivalent to releasing a remote control key held with keydown()."""
        await self._key_helper('keyup', key)

    async def text(self, text: str) -> None:
        """Types a string, one keypress per character, in order."""
        for char in text:
            await self.keypress(char)

    def command(self) -> Commander:
        """Returns a Commander that chains remote control commands for this device.

        Example:
            await client.command().volume_up(10).up(2).select().text('Breaking Bad').enter().send()
        """
        return Commander(self)

    async def _get_xml(self, path: str) -> ET.Element:
        response = await self.transport.get(path)
        try:
            body = await response.text()
        finally:
            response.release()
        try:
            return ET.fromstring(body)
        except ET.ParseError as e:
            raise RokuMalformedResponseError(f"Invalid XML returned by {self.address}/{path}: {e}") from e

    async def close(self) -> None:
        await self.transport.close()

    async def __aenter__(self) -> RokuClient:
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
        return f"RokuClient({self.address})"

    def __repr__(self) -> str:
        return str(self)
