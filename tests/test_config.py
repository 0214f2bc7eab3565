# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

import json

import pytest

from roku_client import RokuClientConfig, RokuError, DEFAULT_TIMEOUT, DEFAULT_DISCOVERY_TIMEOUT

ENV_VARS = ('ROKU_CLIENT_CONFIG_FILE', 'ROKU_CLIENT_HOST', 'ROKU_CLIENT_TIMEOUT', 'ROKU_CLIENT_DISCOVERY_TIMEOUT')

@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)

def test_defaults():
    config = RokuClientConfig()
    assert config.default_host is None
    assert config.timeout_secs == DEFAULT_TIMEOUT
    assert config.discovery_timeout_secs == DEFAULT_DISCOVERY_TIMEOUT

def test_environment_overrides_defaults(monkeypatch):
    monkeypatch.setenv('ROKU_CLIENT_HOST', '192.168.1.2')
    monkeypatch.setenv('ROKU_CLIENT_TIMEOUT', '2.5')
    monkeypatch.setenv('ROKU_CLIENT_DISCOVERY_TIMEOUT', '4')
    config = RokuClientConfig()
    assert config.default_host == '192.168.1.2'
    assert config.timeout_secs == 2.5
    assert config.discovery_timeout_secs == 4.0

def test_arguments_override_environment(monkeypatch):
    monkeypatch.setenv('ROKU_CLIENT_HOST', '192.168.1.2')
    monkeypatch.setenv('ROKU_CLIENT_TIMEOUT', '2.5')
    config = RokuClientConfig('10.0.0.9', timeout_secs=1.0)
    assert config.default_host == '10.0.0.9'
    assert config.timeout_secs == 1.0

def test_config_file_is_overridden_by_environment(monkeypatch, tmp_path):
    config_file = tmp_path / 'roku.json'
    config_file.write_text(json.dumps(dict(default_host='10.0.0.3', timeout_secs=3, discovery_timeout_secs=6)))
    monkeypatch.setenv('ROKU_CLIENT_CONFIG_FILE', str(config_file))
    monkeypatch.setenv('ROKU_CLIENT_TIMEOUT', '7')
    config = RokuClientConfig()
    assert config.default_host == '10.0.0.3'
    assert config.timeout_secs == 7.0
    assert config.discovery_timeout_secs == 6.0
    assert RokuClientConfig(use_config_file=False).default_host is None

@pytest.mark.parametrize("value", ['abc', '0', '-1'])
def test_invalid_timeout(monkeypatch, value):
    monkeypatch.setenv('ROKU_CLIENT_TIMEOUT', value)
    with pytest.raises(RokuError):
        RokuClientConfig()

def test_json_round_trip_and_base_config():
    config = RokuClientConfig('10.0.0.9', timeout_secs=1.5, discovery_timeout_secs=3.0)
    copy = RokuClientConfig.from_json(config.to_json())
    assert copy.to_jsonable() == config.to_jsonable()
    derived = RokuClientConfig(base_config=config, timeout_secs=9.0)
    assert derived.default_host == '10.0.0.9'
    assert derived.timeout_secs == 9.0
    assert derived.discovery_timeout_secs == 3.0
