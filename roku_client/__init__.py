# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Package roku_client discovers Roku media players and controls them with the External Control Protocol (ECP).

Roku devices answer SSDP M-SEARCH requests for the search target "roku:ecp" with a
LOCATION header that points at a small HTTP server (normally on port 8060). That server
accepts simple GET queries (installed apps, the active app, device info, app icons) and
POST commands (launch an app, press/hold/release remote-control keys, type literal characters).

Typical use:

    address = await discover()
    async with RokuClient(address) as client:
        await client.command().home().down(2).select().text("hello").send()
"""

from .version import __version__

from .internal_types import Jsonable, JsonableDict, HostAndPort

from .exceptions import (
    RokuError,
    RokuDiscoveryTimeoutError,
    RokuTransportError,
    RokuMalformedResponseError,
    RokuCommandChainError,
  )

from .constants import (
    SSDP_MULTICAST_ADDRESS,
    SSDP_PORT,
    ROKU_ECP_SEARCH_TARGET,
    ROKU_DEFAULT_PORT,
    DEFAULT_DISCOVERY_TIMEOUT,
    DEFAULT_TIMEOUT,
  )

from .keys import Key, KeyType, get_command, lookup_key
from .ssdp_datagram import SsdpDatagram
from .ssdp_socket import SsdpSocket, SsdpSocketBinding, SsdpDatagramSubscriber
from .ssdp_client import SsdpClient, SsdpSearchRequest, SsdpResponseInfo
from .discovery import RokuDiscoverer, discover, discover_all
from .transport import RokuTransport
from .models import RokuApp, RokuAppId, RokuDeviceInfo, RokuIcon
from .client import RokuClient
from .commander import Commander, KeyEntry, TextEntry, CommandEntry
from .client_config import RokuClientConfig
from .util import CaseInsensitiveDict

__all__ = [
    '__version__',
    'Jsonable', 'JsonableDict', 'HostAndPort',
    'RokuError', 'RokuDiscoveryTimeoutError', 'RokuTransportError',
    'RokuMalformedResponseError', 'RokuCommandChainError',
    'SSDP_MULTICAST_ADDRESS', 'SSDP_PORT', 'ROKU_ECP_SEARCH_TARGET', 'ROKU_DEFAULT_PORT',
    'DEFAULT_DISCOVERY_TIMEOUT', 'DEFAULT_TIMEOUT',
    'Key', 'KeyType', 'get_command', 'lookup_key',
    'SsdpDatagram',
    'SsdpSocket', 'SsdpSocketBinding', 'SsdpDatagramSubscriber',
    'SsdpClient', 'SsdpSearchRequest', 'SsdpResponseInfo',
    'RokuDiscoverer', 'discover', 'discover_all',
    'RokuTransport',
    'RokuApp', 'RokuAppId', 'RokuDeviceInfo', 'RokuIcon',
    'RokuClient',
    'Commander', 'KeyEntry', 'TextEntry', 'CommandEntry',
    'RokuClientConfig',
    'CaseInsensitiveDict',
]
