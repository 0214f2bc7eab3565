# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Constants used by this package"""

SSDP_MULTICAST_ADDRESS = "239.255.255.250"
"""The multicast address used by SSDP for UDP multicast."""

SSDP_PORT = 1900
"""The port number used by SSDP for UDP multicast."""

ROKU_ECP_SEARCH_TARGET = "roku:ecp"
"""The SSDP search target (ST) that Roku devices respond to."""

ROKU_DEFAULT_PORT = 8060
"""The default port a Roku device listens on for ECP commands."""

DEFAULT_DISCOVERY_TIMEOUT = 10.0
"""The default amount of time (in seconds) to wait for discovery responses."""

DEFAULT_SEARCH_MX = 3
"""The MX value (maximum response delay in seconds) advertised in M-SEARCH requests."""

DEFAULT_TIMEOUT = 10.0
"""The default total timeout for a single ECP HTTP request, in seconds."""
