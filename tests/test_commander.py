# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

import asyncio

import pytest

from roku_client import (
    RokuClient,
    Key,
    KeyEntry,
    TextEntry,
    RokuCommandChainError,
    RokuTransportError,
  )

from fakes import RecordingTransport

def make_client(fail_on=None):
    transport = RecordingTransport(fail_on=fail_on)
    return RokuClient("192.168.1.2", transport=transport), transport

def test_chain_is_sent_in_order():
    client, transport = make_client()
    commander = client.command().key(Key.DOWN, 3).text("ab").key(Key.SELECT, 1)
    assert transport.calls == []
    asyncio.run(commander.send())
    assert transport.posts == [
        'keypress/Down', 'keypress/Down', 'keypress/Down',
        'keypress/Lit_a', 'keypress/Lit_b',
        'keypress/Select',
      ]

def test_named_key_methods():
    client, transport = make_client()
    commander = (client.command()
        .home()
        .volume_up(2)
        .input_hdmi1()
        .forward()
        .reverse()
        .instant_replay()
        .key('5'))
    asyncio.run(commander.send())
    assert transport.posts == [
        'keypress/Home',
        'keypress/VolumeUp', 'keypress/VolumeUp',
        'keypress/InputHDMI1',
        'keypress/Fwd',
        'keypress/Rev',
        'keypress/InstantReplay',
        'keypress/Lit_5',
      ]

def test_every_key_has_a_method():
    client, _ = make_client()
    for key in Key:
        commander = client.command()
        getattr(commander, key.name.lower())()
        assert commander.entries == (KeyEntry(key, 1),)

def test_entries():
    client, _ = make_client()
    commander = client.command().up(2).text("x")
    assert commander.entries == (KeyEntry(Key.UP, 2), TextEntry("x"))

def test_count_must_be_positive():
    client, _ = make_client()
    commander = client.command()
    with pytest.raises(ValueError):
        commander.key(Key.UP, 0)
    with pytest.raises(ValueError):
        commander.left(-1)
    assert commander.entries == ()

def test_send_replays_without_clearing():
    client, transport = make_client()
    commander = client.command().select().text("z")

    async def run():
        await commander.send()
        await commander.send()

    asyncio.run(run())
    assert transport.posts == ['keypress/Select', 'keypress/Lit_z'] * 2
    assert len(commander.entries) == 2

def test_failure_halts_the_chain():
    client, transport = make_client(fail_on={'keypress/Lit_b'})
    commander = client.command().home().text("abc").select()
    with pytest.raises(RokuCommandChainError) as exc_info:
        asyncio.run(commander.send())
    error = exc_info.value
    assert error.index == 1
    assert error.entry == TextEntry("abc")
    assert isinstance(error.__cause__, RokuTransportError)
    assert transport.posts == ['keypress/Home', 'keypress/Lit_a', 'keypress/Lit_b']
