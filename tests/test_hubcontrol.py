'''

The MIT License (MIT)

Copyright (c) 2021 @hanyazou

Permission is hereby granted, free of charge, to any person obtaining a copy
of this software and associated documentation files (the "Software"), to deal
in the Software without restriction, including without limitation the rights
to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
copies of the Software, and to permit persons to whom the Software is
furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in all
copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
SOFTWARE.

'''

import pytest
import usb

from hubswitch.errors import OpenError, TransferError
from hubswitch.hubcontrol import DirectAccess, HubControl, InterfaceAccess

from conftest import FakeAccess, FakeDevice, make_hub, make_record


def open_hub(dev, usb_version=0x0200):
    return HubControl(make_hub([2], dev=dev, usb_version=usb_version), access=FakeAccess)


def test_port_count_reads_byte_2():
    dev = FakeDevice(descriptor=[0x09, 0x04, 0x07] + [0] * 9)
    with open_hub(dev) as hub:
        assert hub.port_count() == 7
    bmRequestType, bRequest, wValue, wIndex, length, timeout = dev.transfers[0]
    assert bmRequestType == 0xa0
    assert bRequest == 6
    assert wIndex == 0
    assert length == 12
    assert timeout == 5000


@pytest.mark.parametrize('usb_version, descriptor_type', [
    (0x0110, 0x29),
    (0x0200, 0x29),
    (0x0210, 0x29),
    (0x0300, 0x2a),
    (0x0320, 0x2a),
])
def test_port_count_descriptor_type(usb_version, descriptor_type):
    dev = FakeDevice()
    with open_hub(dev, usb_version) as hub:
        assert hub.is_superspeed == (usb_version >= 0x0300)
        hub.port_count()
    assert dev.transfers[0][2] == descriptor_type << 8


def test_port_count_short_descriptor():
    with open_hub(FakeDevice(descriptor=[0x09, 0x29])) as hub:
        with pytest.raises(TransferError):
            hub.port_count()


def test_port_count_timeout(timeout_error):
    with open_hub(FakeDevice(fail={6: timeout_error})) as hub:
        with pytest.raises(TransferError) as excinfo:
            hub.port_count()
    assert excinfo.value.__cause__ is timeout_error


@pytest.mark.parametrize('byte0', [0x00, 0x01, 0x03, 0xff])
@pytest.mark.parametrize('byte1, powered', [
    (0x00, False),
    (0x01, True),
    (0x02, False),
    (0x03, True),
    (0xfe, False),
    (0xff, True),
])
def test_status_is_bit_0_of_byte_1(byte0, byte1, powered):
    dev = FakeDevice(ports={3: [byte0, byte1, 0, 0]})
    with open_hub(dev) as hub:
        assert hub.status(3) is powered
    bmRequestType, bRequest, wValue, wIndex, length, timeout = dev.transfers[0]
    assert (bmRequestType, bRequest, wValue, wIndex, length, timeout) == (0xa3, 0, 0, 3, 4, 1000)


def test_port_status_word():
    with open_hub(FakeDevice(ports={1: [0x03, 0x01, 0, 0]})) as hub:
        assert hub.port_status(1) == 0x0103


def test_status_error(timeout_error):
    with open_hub(FakeDevice(fail={0: timeout_error})) as hub:
        with pytest.raises(TransferError):
            hub.status(1)


@pytest.mark.parametrize('port', [0, 256, -1])
def test_status_port_out_of_range(port):
    dev = FakeDevice()
    with open_hub(dev) as hub:
        with pytest.raises(ValueError):
            hub.status(port)
    assert not dev.transfers


@pytest.mark.parametrize('port', [1, 4, 7])
@pytest.mark.parametrize('enabled, bRequest', [(True, 3), (False, 1)])
def test_set_port(port, enabled, bRequest):
    dev = FakeDevice()
    with open_hub(dev) as hub:
        hub.set_port(port, enabled)
    assert dev.transfers == [(0x23, bRequest, 8, port, None, 5000)]


def test_on_off():
    dev = FakeDevice()
    with open_hub(dev) as hub:
        hub.on(2)
        assert hub.status(2)
        hub.off(2)
        assert not hub.status(2)
    assert [t[1] for t in dev.transfers] == [3, 0, 1, 0]


def test_set_port_error():
    dev = FakeDevice(fail={1: usb.core.USBError('Pipe error', errno=32)})
    with open_hub(dev) as hub:
        with pytest.raises(TransferError):
            hub.off(1)


@pytest.mark.parametrize('initial', [0x00, 0x01])
def test_toggle_twice_restores_state(initial):
    dev = FakeDevice(ports={2: [0x01, initial, 0, 0]})
    with open_hub(dev) as hub:
        before = hub.status(2)
        hub.toggle(2)
        assert hub.status(2) is not before
        hub.toggle(2)
        assert hub.status(2) is before


def test_toggle_sends_inverted_request():
    dev = FakeDevice(ports={2: [0x00, 0x01, 0, 0]})
    with open_hub(dev) as hub:
        hub.toggle(2)
    assert dev.transfers[-1] == (0x23, 1, 8, 2, None, 5000)


def test_context_manager_closes_once(access):
    with HubControl(make_hub([1]), access=access) as hub:
        hub.close()
    assert access.opened == 1
    assert access.closed == 1


def test_open_without_device():
    with pytest.raises(OpenError):
        HubControl(make_record([1], device_class=0x09))


def test_open_error(monkeypatch):
    class Denied(FakeDevice):
        def get_active_configuration(self):
            raise usb.core.USBError('Access denied (insufficient permissions)', errno=13)

    disposed = []
    monkeypatch.setattr(usb.util, 'dispose_resources', disposed.append)
    dev = Denied()
    with pytest.raises(OpenError):
        HubControl(make_hub([1], dev=dev), access=DirectAccess)
    assert disposed == [dev]


def test_interface_access_claims_and_releases(monkeypatch):
    calls = []
    monkeypatch.setattr(usb.util, 'claim_interface', lambda dev, intf: calls.append(('claim', intf)))
    monkeypatch.setattr(usb.util, 'release_interface', lambda dev, intf: calls.append(('release', intf)))
    monkeypatch.setattr(usb.util, 'dispose_resources', lambda dev: calls.append(('dispose', None)))
    with HubControl(make_hub([1]), access=InterfaceAccess) as hub:
        hub.status(1)
        assert calls == [('claim', 0)]
    assert calls == [('claim', 0), ('release', 0), ('dispose', None)]
