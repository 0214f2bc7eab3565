#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Simple utility functions used by this package
"""

from __future__ import annotations

from typing_extensions import SupportsIndex

import netifaces
import re
import socket
from ipaddress import IPv4Address, IPv6Address
from urllib.parse import urlsplit

from .internal_types import *
from .constants import ROKU_DEFAULT_PORT

from email.parser import BytesHeaderParser
from email.message import Message as EmailParserMessage
from email.header import Header as EmailParserHeader
from requests.structures import CaseInsensitiveDict

_port_suffix_re = re.compile(r':\d+$')
_word_re = re.compile(r"[^-_\s]+")

def split_bytes_at_lf_or_crlf(data: bytes, maxsplit: SupportsIndex = -1) -> List[bytes]:
    """Split a byte string at LF or CRLF.

    If maxsplit is given, at most maxsplit splits are done.

    Returns a List[bytes] representing the delimited lines with the delimiters removed.
    """
    parts = data.split(b'\n', maxsplit)
    for i, part in enumerate(parts):
        if part.endswith(b'\r'):
            parts[i] = part[:-1]
    return parts

def split_headers_and_body(data: bytes) -> Tuple[bytes, bytes]:
    """Splits a byte string with HTTP headers and an optional body into the headers and the body.

    A relaxed interpretation of '\\n' as a line delimiter is accepted even though '\\r\\n' is required
    by the standard.

    Returns a Tuple[headers: bytes, body: bytes]. If there is no body, b'' is returned for the body.
    """
    first_i = -1
    first_nb = 0
    for delim in (b'\n\r\n', b'\n\n'):
        i = data.find(delim)
        if i != -1 and (first_i == -1 or i < first_i):
            first_i = i
            first_nb = len(delim)
    if first_i == -1:
        return (data, b'')
    headers, body = data[:first_i], data[first_i + first_nb:]
    if headers.endswith(b'\r'):
        headers = headers[:-1]
    return (headers, body)

def parse_http_headers(data: bytes) -> Tuple[CaseInsensitiveDict[str], bytes]:
    """Parse HTTP-style headers out of a byte string. Also returns the body of the message, if any.

    A relaxed interpretation of '\\n' as a line delimiter is accepted. The final line of the headers
    does not need to be terminated by a newline.

    It is assumed that any preceding statement line (e.g., "HTTP/1.1 200 OK\\r\\n") has already been removed.

    Returns a tuple of (headers: CaseInsensitiveDict[str], body: bytes).
    """
    headers_data, body = split_headers_and_body(data)
    # Normalize the header line endings to '\r\n' so the email parser accepts them
    lines = split_bytes_at_lf_or_crlf(headers_data)
    headers_data = b'\r\n'.join(lines)
    msg: EmailParserMessage = BytesHeaderParser().parsebytes(headers_data)
    headers: CaseInsensitiveDict[str] = CaseInsensitiveDict(
        (name, str(value).strip()) for name, value in msg.items()
      )
    return (headers, body)

def encode_http_header(name: str, value: str) -> bytes:
    """Encodes a raw HTTP header name/value pair into a byte string.

    The result is terminated with '\\r\\n'.
    """
    h = EmailParserHeader(value, header_name=name)
    return name.encode() + b': ' + h.encode(linesep='\r\n').encode() + b'\r\n'

def get_local_ip_addresses_and_interfaces(
        address_family: Union[socket.AddressFamily, int]=socket.AF_INET,
        include_loopback: bool=True
    ) -> List[Tuple[str, str]]:
    """Returns a list of Tuple[ip_address: str, interface_name: str] for the IP addresses of the local host
       in a requested address family. The result is sorted in a way that attempts to place the "preferred"
       canonical IP address first in the list, according to the following scheme:
           1. Addresses on the default gateway interface precede all other addresses.
           2. Non-loopback addresses precede loopback addresses.
           3. IPV4 addresses that begin with 172. follow other IPV4 addresses. This is a hack to
              deprioritize local docker network addresses.
    """
    result_with_priority: List[Tuple[int, str, str]] = []
    assert int(address_family) in (int(socket.AF_INET), int(socket.AF_INET6))
    is_ipv6 = int(address_family) == int(socket.AF_INET6)
    _, default_gateway_ifname = get_default_ip_gateway(address_family)
    netiface_family = netifaces.AF_INET6 if is_ipv6 else netifaces.AF_INET
    for ifname in netifaces.interfaces():
        ifinfo = netifaces.ifaddresses(ifname)
        for addrinfo in ifinfo.get(netiface_family, []):
            ip_str = addrinfo['addr']
            assert isinstance(ip_str, str)
            is_loopback = IPv6Address(ip_str.split('%', 1)[0]).is_loopback if is_ipv6 else IPv4Address(ip_str).is_loopback
            if ifname == default_gateway_ifname:
                priority = 0
            elif is_loopback:
                if not include_loopback:
                    continue
                priority = 3
            elif not is_ipv6 and ip_str.startswith('172.'):
                priority = 2
            else:
                priority = 1
            result_with_priority.append((priority, ip_str, ifname))
    return [ (ip, ifname) for _, ip, ifname in sorted(result_with_priority)]

def get_local_ip_addresses(address_family: Union[socket.AddressFamily, int]=socket.AF_INET, include_loopback: bool=True) -> List[str]:
    """Returns a List[ip_address: str] for the IP addresses of the local host in a requested
       address family, preferred address first. See get_local_ip_addresses_and_interfaces."""
    return [ ip for ip, _ in get_local_ip_addresses_and_interfaces(address_family, include_loopback=include_loopback)]

def get_default_ip_gateway(address_family: Union[socket.AddressFamily, int]=socket.AF_INET) -> Tuple[Optional[str], Optional[str]]:
    """Returns the (gateway_ip_address: str, gateway_interface_name: str) for the default IP gateway in the
       requested family, if any.
       returns (None, None) if there is no default gateway in the requested family."""
    assert int(address_family) in (int(socket.AF_INET), int(socket.AF_INET6))
    netiface_family = netifaces.AF_INET if int(address_family) == int(socket.AF_INET) else netifaces.AF_INET6
    gws = netifaces.gateways()
    default_gateway_infos = gws.get("default", {})
    if netiface_family in default_gateway_infos:
        gw_ip, gw_interface_name = default_gateway_infos[netiface_family][:2]
        return (gw_ip, gw_interface_name)
    return (None, None)

def normalize_address(address: str, default_port: int=ROKU_DEFAULT_PORT) -> str:
    """Returns a device base address of the form "scheme://host:port".

    "http://" is prefixed if the address has no scheme, and ":<default_port>" is appended if
    the address does not end with a port number. A trailing '/' is removed.
    """
    address = address.strip().rstrip('/')
    if not (address.startswith('http://') or address.startswith('https://')):
        address = f"http://{address}"
    if not _port_suffix_re.search(address):
        address = f"{address}:{default_port}"
    return address

def address_from_location(location: Optional[str]) -> Optional[str]:
    """Reduces an SSDP LOCATION URL to its "scheme://host:port" portion, dropping the resource path.

    Returns None if location is empty or is not an absolute URL.
    """
    if location is None:
        return None
    parts = urlsplit(location.strip())
    if parts.scheme == '' or parts.netloc == '':
        return None
    return f"{parts.scheme}://{parts.netloc}"

def camelcase(name: str) -> str:
    """Converts a dashed/underscored/spaced field name to camelCase; e.g.,
       "user-device-name" becomes "userDeviceName". Only the first letter of each word after the
       first is changed, so "has-wifi-5G-support" becomes "hasWifi5GSupport"."""
    words = _word_re.findall(name)
    if len(words) == 0:
        return ''
    return words[0] + ''.join(w[:1].upper() + w[1:] for w in words[1:])

def maybe_boolean(value: str) -> Union[str, bool]:
    """Returns True or False if value is exactly "true" or "false"; otherwise returns value unchanged."""
    if value == 'true':
        return True
    if value == 'false':
        return False
    return value
