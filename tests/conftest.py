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

import array

import pytest
import usb

from hubswitch.device import DeviceRecord
from hubswitch.hubcontrol import HubControl


class FakeDevice:
    '''Stands in for usb.core.Device; answers hub class requests from a port table'''

    def __init__(self, descriptor=None, ports=None, fail=None):
        self.descriptor = descriptor if descriptor is not None else [0x09, 0x29, 0x04] + [0] * 9
        # port -> [byte 0, byte 1, byte 2, byte 3] of the port status
        self.ports = ports if ports is not None else {}
        # request code -> exception raised by ctrl_transfer
        self.fail = fail if fail is not None else {}
        self.transfers = []

    def get_active_configuration(self):
        return None

    def ctrl_transfer(self, bmRequestType, bRequest, wValue=0, wIndex=0, data_or_wLength=None, timeout=None):
        self.transfers.append((bmRequestType, bRequest, wValue, wIndex, data_or_wLength, timeout))
        if bRequest in self.fail:
            raise self.fail[bRequest]
        if bRequest == 6:
            return array.array('B', self.descriptor[:data_or_wLength])
        if bRequest == 0:
            return array.array('B', self.ports.setdefault(wIndex, [0, 0, 0, 0])[:data_or_wLength])
        status = self.ports.setdefault(wIndex, [0, 0, 0, 0])
        if wValue == 8:
            if bRequest == 3:
                status[1] |= 1
            elif bRequest == 1:
                status[1] &= ~1
        return 0


class FakeAccess:
    opened = 0
    closed = 0

    def __init__(self, dev):
        self.dev = dev

    def open(self):
        FakeAccess.opened += 1

    def dispose(self):
        pass

    def close(self):
        FakeAccess.closed += 1


def make_record(port_chain, vendor_id=0x1234, product_id=0x5678, bus=1, device_class=0,
                usb_version=0x0200, product=None, manufacturer=None, serial_number=None, dev=None):
    return DeviceRecord(vendor_id=vendor_id, product_id=product_id, usb_version=usb_version,
                        bus=bus, device_class=device_class, port_chain=tuple(port_chain),
                        product=product, manufacturer=manufacturer,
                        serial_number=serial_number, dev=dev)


def make_hub(port_chain, dev=None, **kwargs):
    if dev is None:
        dev = FakeDevice()
    return make_record(port_chain, device_class=0x09, dev=dev, **kwargs)


def fake_control(record):
    return HubControl(record, access=FakeAccess)


@pytest.fixture
def access():
    FakeAccess.opened = 0
    FakeAccess.closed = 0
    return FakeAccess


@pytest.fixture
def timeout_error():
    return usb.core.USBTimeoutError('Operation timed out', errno=110)
