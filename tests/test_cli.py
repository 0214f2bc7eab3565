# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

import asyncio
import json

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from roku_client import __version__
from roku_client.__main__ import run, arun

@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ('ROKU_CLIENT_CONFIG_FILE', 'ROKU_CLIENT_HOST', 'ROKU_CLIENT_TIMEOUT', 'ROKU_CLIENT_DISCOVERY_TIMEOUT'):
        monkeypatch.delenv(name, raising=False)

def test_version(capsys):
    assert run(['version']) == 0
    assert capsys.readouterr().out.strip() == __version__

def test_missing_command(capsys):
    assert run([]) == 1

def test_bad_option_value(capsys):
    assert run(['--timeout', 'abc', 'version']) == 2

def test_error_is_reported(capsys):
    assert run(['--host', '127.0.0.1:1', '--timeout', '-1', 'apps']) == 1
    assert capsys.readouterr().err.startswith("roku: error: ")

def test_commands_against_server(capsys):
    requests = []

    async def handle(request):
        requests.append((request.method, request.raw_path))
        if request.raw_path == '/query/device-info':
            return web.Response(body=b'<device-info><is-tv>true</is-tv><model-name>Roku Ultra</model-name></device-info>')
        return web.Response()

    async def run_commands():
        app = web.Application()
        app.router.add_route('*', '/{tail:.*}', handle)
        server = TestServer(app)
        await server.start_server()
        try:
            host = f"{server.host}:{server.port}"
            results = [
                await arun(['--host', host, 'info']),
                await arun(['--host', host, 'keypress', 'volume-up', 'a']),
                await arun(['--host', host, 'text', 'hi']),
                await arun(['--host', host, 'dtv', '3']),
              ]
        finally:
            await server.close()
        return results

    assert asyncio.run(run_commands()) == [0, 0, 0, 0]
    out = capsys.readouterr().out
    assert json.loads(out) == {'isTv': True, 'modelName': 'Roku Ultra'}
    assert requests == [
        ('GET', '/query/device-info'),
        ('POST', '/keypress/VolumeUp'),
        ('POST', '/keypress/Lit_a'),
        ('POST', '/keypress/Lit_h'),
        ('POST', '/keypress/Lit_i'),
        ('POST', '/launch/tvinput.dtv?ch=3'),
      ]
