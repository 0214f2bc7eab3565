#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Abstraction of a Datagram packet used in the SSDP protocol.
"""

from __future__ import annotations

from .internal_types import *
from .constants import SSDP_MULTICAST_ADDRESS, SSDP_PORT, DEFAULT_SEARCH_MX

from .util import (
    CaseInsensitiveDict,
    split_bytes_at_lf_or_crlf,
    parse_http_headers,
    encode_http_header,
)

class SsdpDatagram(MutableMapping[str, str]):
    """Wrapper for a raw SSDP datagram.

    This class provides parsing and formatting of the HTTP-like packets, a dict-like
    case-insensitive interface to the headers, and accessors for the headers used
    in discovery.
    """

    _raw_data: bytes
    """The raw UDP datagram contents"""

    _statement_line: str
    """The first line of the datagram; e.g., "HTTP/1.1 200 OK",
       "M-SEARCH * HTTP/1.1", etc."""

    _headers: CaseInsensitiveDict[str]
    """The headers as a CaseInsensitiveDict[str]."""

    _body: bytes
    """The body of the datagram, if any. If there is no body, b'' is returned."""

    def __init__(
            self,
            statement: Optional[str]=None,
            headers: Optional[Mapping[str, str]]=None,
            body: Optional[bytes]=None,
            raw_data: Optional[bytes]=None,
          ):
        self._headers = CaseInsensitiveDict()
        if raw_data is None:
            if statement is None:
                raise ValueError("Either statement or raw_data must be provided")
            self._statement_line = statement
            self._body = b'' if body is None else body
            if headers is not None:
                self._headers.update(headers)
            self._rebuild_raw_data()
        else:
            if not (statement is None and headers is None and body is None):
                raise ValueError("If raw_data is provided, statement, headers, and body must be None")
            self.raw_data = raw_data

    @classmethod
    def new_search(
            cls,
            search_target: str,
            mx: int=DEFAULT_SEARCH_MX,
            host: str=f"{SSDP_MULTICAST_ADDRESS}:{SSDP_PORT}",
          ) -> SsdpDatagram:
        """Creates an M-SEARCH request for a single search target."""
        return cls(
            "M-SEARCH * HTTP/1.1",
            headers={
                "HOST": host,
                "MAN": '"ssdp:discover"',
                "MX": str(mx),
                "ST": search_target,
              },
          )

    def __str__(self) -> str:
        return f"SsdpDatagram('{self._statement_line}', headers={dict(self._headers)}, body={self._body!r})"

    def __repr__(self) -> str:
        return str(self)

    @property
    def raw_data(self) -> bytes:
        """The raw UDP datagram contents"""
        return self._raw_data

    @raw_data.setter
    def raw_data(self, value: bytes) -> None:
        """Set the raw UDP datagram contents, and recompute headers."""
        assert isinstance(value, bytes)
        self._raw_data = value
        statement_and_remainder = split_bytes_at_lf_or_crlf(value, 1)
        self._statement_line = statement_and_remainder[0].decode('utf-8').strip()
        headers_and_body = b'' if len(statement_and_remainder) < 2 else statement_and_remainder[1]
        self._headers, self._body = parse_http_headers(headers_and_body)

    @property
    def statement_line(self) -> str:
        """The first line of the datagram; e.g., "HTTP/1.1 200 OK"."""
        return self._statement_line

    @property
    def body(self) -> bytes:
        return self._body

    @property
    def headers(self) -> CaseInsensitiveDict[str]:
        return self._headers

    def _get_str_header(self, name: str) -> Optional[str]:
        result = self._headers.get(name)
        if result is None or result == '':
            return None
        return result

    @property
    def hdr_location(self) -> Optional[str]:
        """Returns the "LOCATION" header, or None if it is missing or empty."""
        return self._get_str_header("Location")

    @property
    def hdr_st(self) -> Optional[str]:
        """Returns the "ST" (search target) header, or None."""
        return self._get_str_header("ST")

    @property
    def hdr_usn(self) -> Optional[str]:
        """Returns the "USN" (unique service name) header, or None."""
        return self._get_str_header("USN")

    @property
    def hdr_server(self) -> Optional[str]:
        return self._get_str_header("Server")

    def __setitem__(self, key: str, value: str) -> None:
        self._headers[key] = value
        self._rebuild_raw_data()

    def __getitem__(self, key: str) -> str:
        return self._headers[key]

    def __delitem__(self, key: str) -> None:
        del self._headers[key]
        self._rebuild_raw_data()

    def __iter__(self):
        return iter(self._headers)

    def __len__(self):
        return len(self._headers)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, SsdpDatagram):
            return False
        return (self._statement_line == other._statement_line and
                self._headers == other._headers and
                self._body == other._body)

    def _rebuild_raw_data(self) -> None:
        """Rebuild the raw data from the statement line, headers, and body."""
        raw_data = self._statement_line.encode('utf-8') + b'\r\n'
        for k, v in self._headers.items():
            raw_data += encode_http_header(k, v)
        raw_data += b'\r\n'
        raw_data += self._body
        self._raw_data = raw_data
