# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Commander -- chains remote control commands for one device and sends them in order.

Each chained call only records an entry; send() replays the recorded entries
against the client, awaiting every request before issuing the next. The
entries are kept after send(), so calling send() again replays the same plan.
"""

from __future__ import annotations

from .internal_types import *
from .pkg_logging import logger
from .exceptions import RokuCommandChainError
from .keys import Key, KeyType

if TYPE_CHECKING:
    from .client import RokuClient

class KeyEntry(NamedTuple):
    """Press a key repeat times."""
    key: KeyType
    repeat: int

class TextEntry(NamedTuple):
    """Type a string."""
    text: str

CommandEntry = Union[KeyEntry, TextEntry]

class Commander:
    client: RokuClient
    _entries: List[CommandEntry]

    def __init__(self, client: RokuClient) -> None:
        self.client = client
        self._entries = []

    @property
    def entries(self) -> Tuple[CommandEntry, ...]:
        """The recorded entries, in the order they will be sent."""
        return tuple(self._entries)

    def key(self, key: KeyType, count: int=1) -> Commander:
        """Adds count presses of key. key may be a Key, a command token, or a single character."""
        if count < 1:
            raise ValueError(f"Key repeat count must be at least 1: {count}")
        self._entries.append(KeyEntry(key, count))
        return self

    def text(self, text: str) -> Commander:
        """Adds typing of a string, one keypress per character."""
        self._entries.append(TextEntry(text))
        return self

    async def send(self) -> None:
        """Sends all recorded entries in order.

        Raises RokuCommandChainError if any entry fails; entries after the failing one are not
        sent, and entries already sent are not undone.
        """
        for index, entry in enumerate(self._entries):
            logger.debug(f"Sending command step {index}: {entry}")
            try:
                if isinstance(entry, TextEntry):
                    await self.client.text(entry.text)
                else:
                    for _ in range(entry.repeat):
                        await self.client.keypress(entry.key)
            except Exception as e:
                raise RokuCommandChainError(index, entry, e) from e

    def back(self, count: int=1) -> Commander:
        return self.key(Key.BACK, count)

    def backspace(self, count: int=1) -> Commander:
        return self.key(Key.BACKSPACE, count)

    def channel_down(self, count: int=1) -> Commander:
        return self.key(Key.CHANNEL_DOWN, count)

    def channel_up(self, count: int=1) -> Commander:
        return self.key(Key.CHANNEL_UP, count)

    def down(self, count: int=1) -> Commander:
        return self.key(Key.DOWN, count)

    def enter(self, count: int=1) -> Commander:
        return self.key(Key.ENTER, count)

    def find_remote(self, count: int=1) -> Commander:
        return self.key(Key.FIND_REMOTE, count)

    def forward(self, count: int=1) -> Commander:
        return self.key(Key.FORWARD, count)

    def home(self, count: int=1) -> Commander:
        return self.key(Key.HOME, count)

    def info(self, count: int=1) -> Commander:
        return self.key(Key.INFO, count)

    def input_av1(self, count: int=1) -> Commander:
        return self.key(Key.INPUT_AV1, count)

    def input_hdmi1(self, count: int=1) -> Commander:
        return self.key(Key.INPUT_HDMI1, count)

    def input_hdmi2(self, count: int=1) -> Commander:
        return self.key(Key.INPUT_HDMI2, count)

    def input_hdmi3(self, count: int=1) -> Commander:
        return self.key(Key.INPUT_HDMI3, count)

    def input_hdmi4(self, count: int=1) -> Commander:
        return self.key(Key.INPUT_HDMI4, count)

    def input_tuner(self, count: int=1) -> Commander:
        return self.key(Key.INPUT_TUNER, count)

    def instant_replay(self, count: int=1) -> Commander:
        return self.key(Key.INSTANT_REPLAY, count)

    def left(self, count: int=1) -> Commander:
        return self.key(Key.LEFT, count)

    def play(self, count: int=1) -> Commander:
        return self.key(Key.PLAY, count)

    def power(self, count: int=1) -> Commander:
        return self.key(Key.POWER, count)

    def power_off(self, count: int=1) -> Commander:
        return self.key(Key.POWER_OFF, count)

    def power_on(self, count: int=1) -> Commander:
        return self.key(Key.POWER_ON, count)

    def reverse(self, count: int=1) -> Commander:
        return self.key(Key.REVERSE, count)

    def right(self, count: int=1) -> Commander:
        return self.key(Key.RIGHT, count)

    def search(self, count: int=1) -> Commander:
        return self.key(Key.SEARCH, count)

    def select(self, count: int=1) -> Commander:
        return self.key(Key.SELECT, count)

    def up(self, count: int=1) -> Commander:
        return self.key(Key.UP, count)

    def volume_down(self, count: int=1) -> Commander:
        return self.key(Key.VOLUME_DOWN, count)

    def volume_mute(self, count: int=1) -> Commander:
        return self.key(Key.VOLUME_MUTE, count)

    def volume_up(self, count: int=1) -> Commander:
        return self.key(Key.VOLUME_UP, count)

    def __str__(self) -> str:
        return f"Commander({self.client}, entries={len(self._entries)})"

    def __repr__(self) -> str:
        return str(self)
