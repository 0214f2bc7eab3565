# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Roku client configuration.

Settings are layered: built-in defaults, then an optional JSON config file named by
ROKU_CLIENT_CONFIG_FILE, then the ROKU_CLIENT_* environment variables, then explicit
constructor arguments.
"""

from __future__ import annotations

import os
import json

from .internal_types import *
from .exceptions import RokuError
from .constants import DEFAULT_TIMEOUT, DEFAULT_DISCOVERY_TIMEOUT

def _parse_secs(name: str, value: Any) -> float:
    try:
        result = float(value)
    except (TypeError, ValueError) as e:
        raise RokuError(f"Invalid {name} value: {value!r}") from e
    if result <= 0.0:
        raise RokuError(f"{name} must be positive: {value!r}")
    return result

class RokuClientConfig:
    """Roku client configuration."""
    default_host: Optional[str]
    timeout_secs: float
    discovery_timeout_secs: float

    def __init__(
            self,
            default_host: Optional[str]=None,
            *,
            timeout_secs: Optional[float]=None,
            discovery_timeout_secs: Optional[float]=None,
            base_config: Optional[RokuClientConfig]=None,
            use_config_file: bool=True,
          ) -> None:
        """Creates a configuration for a Roku client.

           Args:
             default_host: The address of the device, "host", "host:port" or "http://host:port".
                   If None, the ROKU_CLIENT_HOST environment variable is used. If that is
                   also unset, the device is found with SSDP discovery.
             timeout_secs:
                   The timeout for each ECP HTTP request, in seconds. If None,
                   ROKU_CLIENT_TIMEOUT, or DEFAULT_TIMEOUT.
             discovery_timeout_secs:
                   How long to wait for discovery responses, in seconds. If None,
                   ROKU_CLIENT_DISCOVERY_TIMEOUT, or DEFAULT_DISCOVERY_TIMEOUT.
             base_config:
                   An optional base configuration to copy instead of the defaults.
             use_config_file:
                   If False, ROKU_CLIENT_CONFIG_FILE is ignored.
        """
        if base_config is None:
            self.init_from_defaults(use_config_file=use_config_file)
        else:
            self.init_from_base_config(base_config)

        if default_host is not None and default_host != '':
            self.default_host = default_host

        if timeout_secs is not None:
            self.timeout_secs = _parse_secs('timeout_secs', timeout_secs)

        if discovery_timeout_secs is not None:
            self.discovery_timeout_secs = _parse_secs('discovery_timeout_secs', discovery_timeout_secs)

    def init_from_defaults(self, use_config_file: bool=True) -> None:
        """Initializes the configuration from defaults, the config file and the environment."""
        self.default_host = None
        self.timeout_secs = DEFAULT_TIMEOUT
        self.discovery_timeout_secs = DEFAULT_DISCOVERY_TIMEOUT

        if use_config_file:
            config_file = os.environ.get('ROKU_CLIENT_CONFIG_FILE')
            if config_file is not None and config_file != '':
                with open(config_file, 'r', encoding='utf-8') as f:
                    config_jsonable = json.load(f)
                self.update_from_jsonable(config_jsonable)

        default_host = os.environ.get('ROKU_CLIENT_HOST')
        if default_host is not None and default_host != '':
            self.default_host = default_host
        timeout_str = os.environ.get('ROKU_CLIENT_TIMEOUT')
        if timeout_str is not None and timeout_str != '':
            self.timeout_secs = _parse_secs('ROKU_CLIENT_TIMEOUT', timeout_str)
        discovery_timeout_str = os.environ.get('ROKU_CLIENT_DISCOVERY_TIMEOUT')
        if discovery_timeout_str is not None and discovery_timeout_str != '':
            self.discovery_timeout_secs = _parse_secs('ROKU_CLIENT_DISCOVERY_TIMEOUT', discovery_timeout_str)

    def init_from_base_config(self, base_config: RokuClientConfig) -> None:
        self.default_host = base_config.default_host
        self.timeout_secs = base_config.timeout_secs
        self.discovery_timeout_secs = base_config.discovery_timeout_secs

    def to_jsonable(self) -> JsonableDict:
        """Returns a JSON-serializable representation of the configuration."""
        return dict(
            default_host=self.default_host,
            timeout_secs=self.timeout_secs,
            discovery_timeout_secs=self.discovery_timeout_secs,
          )

    def to_json(self) -> str:
        return json.dumps(self.to_jsonable())

    def update_from_jsonable(self, jsonable: JsonableDict) -> None:
        """Updates the configuration from a JSON-serializable dict. Missing or empty values are ignored."""
        default_host = jsonable.get('default_host')
        if default_host is not None and default_host != '':
            self.default_host = str(default_host)
        timeout_secs = jsonable.get('timeout_secs')
        if timeout_secs is not None and timeout_secs != '':
            self.timeout_secs = _parse_secs('timeout_secs', timeout_secs)
        discovery_timeout_secs = jsonable.get('discovery_timeout_secs')
        if discovery_timeout_secs is not None and discovery_timeout_secs != '':
            self.discovery_timeout_secs = _parse_secs('discovery_timeout_secs', discovery_timeout_secs)

    @classmethod
    def from_jsonable(cls, jsonable: JsonableDict, use_config_file: bool=True) -> RokuClientConfig:
        result = cls(use_config_file=use_config_file)
        result.update_from_jsonable(jsonable)
        return result

    @classmethod
    def from_json(cls, json_str: str, use_config_file: bool=True) -> RokuClientConfig:
        return cls.from_jsonable(json.loads(json_str), use_config_file=use_config_file)

    def __str__(self) -> str:
        return (
            f"RokuClientConfig("
            f"default_host={self.default_host!r}, "
            f"timeout_secs={self.timeout_secs!r}, "
            f"discovery_timeout_secs={self.discovery_timeout_secs!r})"
          )

    def __repr__(self) -> str:
        return str(self)
