# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Remote control keys understood by the Roku ECP keypress/keydown/keyup endpoints."""

from __future__ import annotations

from enum import Enum

from .internal_types import *

class Key(str, Enum):
    """A symbolic remote control key. The value is the ECP command token."""
    BACK = 'Back'
    BACKSPACE = 'Backspace'
    CHANNEL_DOWN = 'ChannelDown'
    CHANNEL_UP = 'ChannelUp'
    DOWN = 'Down'
    ENTER = 'Enter'
    FIND_REMOTE = 'FindRemote'
    FORWARD = 'Fwd'
    HOME = 'Home'
    INFO = 'Info'
    INPUT_AV1 = 'InputAV1'
    INPUT_HDMI1 = 'InputHDMI1'
    INPUT_HDMI2 = 'InputHDMI2'
    INPUT_HDMI3 = 'InputHDMI3'
    INPUT_HDMI4 = 'InputHDMI4'
    INPUT_TUNER = 'InputTuner'
    INSTANT_REPLAY = 'InstantReplay'
    LEFT = 'Left'
    PLAY = 'Play'
    POWER = 'Power'
    POWER_OFF = 'PowerOff'
    POWER_ON = 'PowerOn'
    REVERSE = 'Rev'
    RIGHT = 'Right'
    SEARCH = 'Search'
    SELECT = 'Select'
    UP = 'Up'
    VOLUME_DOWN = 'VolumeDown'
    VOLUME_MUTE = 'VolumeMute'
    VOLUME_UP = 'VolumeUp'

    def __str__(self) -> str:
        return self.value

KeyType = Union[Key, str]
"""A Key, a raw ECP command token, or a single literal character."""

def get_command(key: KeyType) -> str:
    """Returns the ECP command token for a key. Strings are returned unchanged, so a single
       character stays a single character."""
    if isinstance(key, Key):
        return key.value
    if not isinstance(key, str) or key == '':
        raise ValueError(f"Invalid key: {key!r}")
    return key

def lookup_key(name: str) -> KeyType:
    """Resolves a user-supplied key name (e.g., "volume_up", "VolumeUp", "a") to a Key if one
       matches by name or command token, ignoring case and '-'/'_'. Otherwise the name is
       returned unchanged."""
    if len(name) == 1:
        return name
    folded = name.replace('-', '').replace('_', '').lower()
    for key in Key:
        if folded in (key.name.replace('_', '').lower(), key.value.lower()):
            return key
    return name
