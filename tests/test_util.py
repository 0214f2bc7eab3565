# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

import pytest

from roku_client.util import (
    split_bytes_at_lf_or_crlf,
    split_headers_and_body,
    parse_http_headers,
    encode_http_header,
    normalize_address,
    address_from_location,
    camelcase,
    maybe_boolean,
  )

def test_split_lines_accepts_lf_and_crlf():
    assert split_bytes_at_lf_or_crlf(b"a\r\nb\nc") == [b"a", b"b", b"c"]
    assert split_bytes_at_lf_or_crlf(b"a\r\nb\r\nc", 1) == [b"a", b"b\r\nc"]

def test_split_headers_and_body():
    assert split_headers_and_body(b"A: 1\r\nB: 2\r\n\r\nhello") == (b"A: 1\r\nB: 2", b"hello")
    assert split_headers_and_body(b"A: 1\nB: 2\n\nhello") == (b"A: 1\nB: 2", b"hello")
    assert split_headers_and_body(b"A: 1") == (b"A: 1", b"")

def test_parse_http_headers_is_case_insensitive():
    headers, body = parse_http_headers(b"ST: roku:ecp\r\nLocation:  http://10.0.0.5:8060/ \r\n\r\n")
    assert headers['st'] == 'roku:ecp'
    assert headers['LOCATION'] == 'http://10.0.0.5:8060/'
    assert body == b''

def test_encode_http_header():
    assert encode_http_header("ST", "roku:ecp") == b"ST: roku:ecp\r\n"

@pytest.mark.parametrize("address, expected", [
    ("192.168.1.2", "http://192.168.1.2:8060"),
    ("192.168.1.2:9000", "http://192.168.1.2:9000"),
    ("http://192.168.1.2:8060/", "http://192.168.1.2:8060"),
    ("https://roku.local", "https://roku.local:8060"),
    ("  10.0.0.7  ", "http://10.0.0.7:8060"),
  ])
def test_normalize_address(address, expected):
    assert normalize_address(address) == expected

def test_address_from_location():
    assert address_from_location("http://192.168.1.134:8060/") == "http://192.168.1.134:8060"
    assert address_from_location("http://192.168.1.134:8060/dial/dd.xml") == "http://192.168.1.134:8060"
    assert address_from_location(None) is None
    assert address_from_location("") is None
    assert address_from_location("/just/a/path") is None

@pytest.mark.parametrize("name, expected", [
    ("user-device-name", "userDeviceName"),
    ("udn", "udn"),
    ("is-tv", "isTv"),
    ("supports_ethernet", "supportsEthernet"),
    ("has-wifi-5G-support", "hasWifi5GSupport"),
    ("secure-device", "secureDevice"),
  ])
def test_camelcase(name, expected):
    assert camelcase(name) == expected

def test_maybe_boolean():
    assert maybe_boolean("true") is True
    assert maybe_boolean("false") is False
    assert maybe_boolean("True") == "True"
    assert maybe_boolean("3.1") == "3.1"
    assert maybe_boolean("") == ""
