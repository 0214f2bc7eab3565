# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

import asyncio

import pytest

from roku_client import (
    RokuClient,
    RokuApp,
    Key,
    RokuMalformedResponseError,
    RokuTransportError,
  )

from fakes import FakeResponse, RecordingTransport

APPS_XML = b"""<?xml version="1.0" encoding="UTF-8" ?>
<apps>
    <app id="31012" type="menu" version="1.9.0">FandangoNOW Movies &amp; TV</app>
    <app id="12" type="appl" version="4.1.218">Netflix</app>
    <app id="tvinput.hdmi1" type="tvin" version="1.0.0">Blu-ray player</app>
</apps>
"""

ACTIVE_APP_XML = b"""<?xml version="1.0" encoding="UTF-8" ?>
<active-app>
    <app id="12" type="appl" version="4.1.218">Netflix</app>
</active-app>
"""

HOME_SCREEN_XML = b"""<?xml version="1.0" encoding="UTF-8" ?>
<active-app>
    <app>Roku</app>
</active-app>
"""

DEVICE_INFO_XML = b"""<?xml version="1.0" encoding="UTF-8" ?>
<device-info>
    <udn>015e5108-9000-1046-8035-b0a737964dfb</udn>
    <serial-number>1GU48T017973</serial-number>
    <user-device-name> Living Room </user-device-name>
    <is-tv>true</is-tv>
    <supports-ethernet>false</supports-ethernet>
    <software-version>7.5.0</software-version>
    <search-channels-enabled>True</search-channels-enabled>
    <model-region></model-region>
    <has-wifi-5G-support>true</has-wifi-5G-support>
</device-info>
"""

def make_client(responses=None, fail_on=None):
    transport = RecordingTransport(responses, fail_on=fail_on)
    return RokuClient("192.168.1.2", transport=transport), transport

def test_address_is_normalized():
    assert RokuClient("192.168.1.2").address == "http://192.168.1.2:8060"
    assert RokuClient("https://192.168.1.2:9443").address == "https://192.168.1.2:9443"
    assert RokuClient("192.168.1.2:9000").address == "http://192.168.1.2:9000"

def test_apps():
    client, transport = make_client({'query/apps': FakeResponse(APPS_XML)})
    apps = asyncio.run(client.apps())
    assert transport.calls == [('GET', 'query/apps')]
    assert transport.responses['query/apps'].released
    assert apps == [
        RokuApp(id='31012', name='FandangoNOW Movies & TV', type='menu', version='1.9.0'),
        RokuApp(id='12', name='Netflix', type='appl', version='4.1.218'),
        RokuApp(id='tvinput.hdmi1', name='Blu-ray player', type='tvin', version='1.0.0'),
      ]

def test_active_app_with_app_running():
    client, _ = make_client({'query/active-app': FakeResponse(ACTIVE_APP_XML)})
    app = asyncio.run(client.active_app())
    assert app == RokuApp(id='12', name='Netflix', type='appl', version='4.1.218')

def test_active_app_on_home_screen_is_none():
    client, _ = make_client({'query/active-app': FakeResponse(HOME_SCREEN_XML)})
    assert asyncio.run(client.active_app()) is None

@pytest.mark.parametrize("body, count", [
    (b"<active-app></active-app>", 0),
    (b'<active-app><app id="1">A</app><app id="2">B</app></active-app>', 2),
  ])
def test_active_app_requires_exactly_one_element(body, count):
    client, _ = make_client({'query/active-app': FakeResponse(body)})
    with pytest.raises(RokuMalformedResponseError) as exc_info:
        asyncio.run(client.active_app())
    assert exc_info.value.count == count

def test_invalid_xml_is_malformed():
    client, _ = make_client({'query/apps': FakeResponse(b"<apps><app>")})
    with pytest.raises(RokuMalformedResponseError):
        asyncio.run(client.apps())

def test_info():
    client, transport = make_client({'query/device-info': FakeResponse(DEVICE_INFO_XML)})
    info = asyncio.run(client.info())
    assert transport.calls == [('GET', 'query/device-info')]
    assert info == {
        'udn': '015e5108-9000-1046-8035-b0a737964dfb',
        'serialNumber': '1GU48T017973',
        'userDeviceName': ' Living Room ',
        'isTv': True,
        'supportsEthernet': False,
        'softwareVersion': '7.5.0',
        'searchChannelsEnabled': 'True',
        'modelRegion': '',
        'hasWifi5GSupport': True,
      }

def test_icon():
    response = FakeResponse(b"\x89PNG...", headers={'Content-Type': 'image/png'})
    client, transport = make_client({'query/icon/12': response})

    async def run():
        icon = await client.icon(12)
        return icon, await icon.read()

    icon, data = asyncio.run(run())
    assert transport.calls == [('GET', 'query/icon/12')]
    assert icon.type == 'image/png'
    assert icon.extension == '.png'
    assert data == b"\x89PNG..."
    assert response.released

def test_icon_without_content_type():
    client, _ = make_client({'query/icon/12': FakeResponse(b"data")})
    icon = asyncio.run(client.icon('12'))
    assert icon.type is None
    assert icon.extension is None

def test_launch():
    client, transport = make_client()
    asyncio.run(client.launch(12))
    assert transport.calls == [('POST', 'launch/12')]

def test_launch_dtv():
    client, transport = make_client()

    async def run():
        await client.launch_dtv()
        await client.launch_dtv(5)
        await client.launch_dtv('2.1')

    asyncio.run(run())
    assert transport.posts == ['launch/tvinput.dtv', 'launch/tvinput.dtv?ch=5', 'launch/tvinput.dtv?ch=2.1']

def test_key_verbs():
    client, transport = make_client()

    async def run():
        await client.keypress(Key.HOME)
        await client.keydown(Key.FORWARD)
        await client.keyup('Fwd')

    asyncio.run(run())
    assert transport.posts == ['keypress/Home', 'keydown/Fwd', 'keyup/Fwd']

def test_single_characters_are_literal():
    client, transport = make_client()

    async def run():
        await client.keypress('5')
        await client.keypress('/')
        await client.keypress(' ')
        await client.keypress(Key.VOLUME_UP)

    asyncio.run(run())
    assert transport.posts == ['keypress/Lit_5', 'keypress/Lit_%2F', 'keypress/Lit_%20', 'keypress/VolumeUp']

def test_invalid_key():
    client, transport = make_client()
    with pytest.raises(ValueError):
        asyncio.run(client.keypress(''))
    assert transport.calls == []

def test_text_is_sent_in_order():
    client, transport = make_client()
    asyncio.run(client.text("hi 5"))
    assert transport.posts == ['keypress/Lit_h', 'keypress/Lit_i', 'keypress/Lit_%20', 'keypress/Lit_5']

def test_transport_error_propagates():
    client, transport = make_client(fail_on={'launch/12'})
    with pytest.raises(RokuTransportError) as exc_info:
        asyncio.run(client.launch(12))
    assert exc_info.value.status == 500
    assert exc_info.value.method == 'POST'
    assert transport.calls == [('POST', 'launch/12')]

def test_context_manager_closes_transport():
    client, transport = make_client()

    async def run():
        async with client:
            await client.keypress(Key.SELECT)

    asyncio.run(run())
    assert transport.closed
