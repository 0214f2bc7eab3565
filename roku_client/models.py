# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Values returned by RokuClient queries."""

from __future__ import annotations

import xml.etree.ElementTree as ET

from .internal_types import *

if TYPE_CHECKING:
    import aiohttp

RokuAppId = Union[int, str]
"""The id used by Roku to identify an app."""

RokuDeviceInfo = Dict[str, Union[str, bool]]
"""Device info as returned by RokuClient.info(). Keys are camelCase field names; the
   set of fields varies between device models and firmware versions."""

class RokuApp(NamedTuple):
    """An app installed on a Roku device."""

    id: str
    """The id, used within the ECP api."""

    name: str
    """The display name of the app."""

    type: str
    """The app type (menu, tvin, appl, etc)."""

    version: str
    """The app version."""

    @classmethod
    def from_element(cls, element: ET.Element) -> RokuApp:
        """Converts an <app id=".." type=".." version="..">Name</app> element."""
        return cls(
            id=element.get('id', ''),
            name=(element.text or '').strip(),
            type=element.get('type', ''),
            version=element.get('version', ''),
          )

class RokuIcon:
    """The response from RokuClient.icon().

    The response body has not been read; the caller owns it and must read or
    release it (e.g., with `async with icon:` or `await icon.read()`).
    """

    type: Optional[str]
    """The mime type of the icon file, if the device reported one."""

    extension: Optional[str]
    """The file extension of the icon file (e.g., ".png"), derived from the mime type."""

    response: aiohttp.ClientResponse
    """The HTTP response."""

    def __init__(self, type: Optional[str], extension: Optional[str], response: aiohttp.ClientResponse) -> None:
        self.type = type
        self.extension = extension
        self.response = response

    async def read(self) -> bytes:
        """Reads the whole icon body and releases the response."""
        try:
            return await self.response.read()
        finally:
            self.response.release()

    def release(self) -> None:
        self.response.release()

    async def __aenter__(self) -> RokuIcon:
        return self

    async def __aexit__(
            self,
            exc_type: Optional[type[BaseException]],
            exc: Optional[BaseException],
            tb: Optional[TracebackType]
      ) -> bool:
        self.release()
        return False

    def __str__(self) -> str:
        return f"RokuIcon(type={self.type!r}, extension={self.extension!r})"

    def __repr__(self) -> str:
        return str(self)
