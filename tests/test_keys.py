# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

import pytest

from roku_client import Key, get_command, lookup_key

def test_get_command():
    assert get_command(Key.HOME) == 'Home'
    assert get_command(Key.FORWARD) == 'Fwd'
    assert get_command(Key.INPUT_HDMI1) == 'InputHDMI1'
    assert get_command('5') == '5'
    assert get_command('Lit_x') == 'Lit_x'

@pytest.mark.parametrize("key", ['', None, 5])
def test_get_command_rejects_invalid_keys(key):
    with pytest.raises(ValueError):
        get_command(key)

def test_str_is_command_token():
    assert str(Key.VOLUME_UP) == 'VolumeUp'

@pytest.mark.parametrize("name, expected", [
    ('home', Key.HOME),
    ('VOLUME_UP', Key.VOLUME_UP),
    ('volume-up', Key.VOLUME_UP),
    ('VolumeUp', Key.VOLUME_UP),
    ('fwd', Key.FORWARD),
    ('forward', Key.FORWARD),
    ('input_hdmi2', Key.INPUT_HDMI2),
    ('a', 'a'),
    ('Lit_a', 'Lit_a'),
  ])
def test_lookup_key(name, expected):
    assert lookup_key(name) == expected
