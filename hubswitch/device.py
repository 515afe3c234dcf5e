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

import collections

import usb

from .errors import EnumerationError
from .usbutils import USBUtil
from .utils import Util

_DeviceRecord = collections.namedtuple(
    '_DeviceRecord',
    (
        'vendor_id',
        'product_id',
        'usb_version',
        'bus',
        'device_class',
        'port_chain',
        'product',
        'manufacturer',
        'serial_number',
        'dev',
    ),
    defaults=(None, None, None, None),
)


class DeviceRecord(_DeviceRecord):
    '''Read-only snapshot of one enumerated USB device'''

    __slots__ = ()

    @property
    def is_hub(self):
        return self.device_class == usb.CLASS_HUB

    @property
    def is_superspeed(self):
        return self.usb_version >= USBUtil.USB_VERSION_3_0


def from_usb(dev: usb.core.Device) -> DeviceRecord:
    # port_numbers is None when the backend can't tell the topology
    port_chain = tuple(dev.port_numbers or ())
    return DeviceRecord(
        vendor_id=dev.idVendor,
        product_id=dev.idProduct,
        usb_version=dev.bcdUSB,
        bus=dev.bus,
        device_class=dev.bDeviceClass,
        port_chain=port_chain,
        product=USBUtil.get_string(dev, dev.iProduct),
        manufacturer=USBUtil.get_string(dev, dev.iManufacturer),
        serial_number=USBUtil.get_string(dev, dev.iSerialNumber),
        dev=dev,
    )


def list_devices(backend=None) -> list:
    try:
        devices = list(usb.core.find(find_all=True, backend=backend))
    except (usb.core.USBError, usb.core.NoBackendError) as e:
        raise EnumerationError(f"can't list USB devices: {e}") from e
    records = []
    for dev in devices:
        record = from_usb(dev)
        Util.log(Util.LOG_DEBUG, f'found {record.vendor_id:04x}:{record.product_id:04x} '
                                 f'class {record.device_class:02x} @ {record.bus} '
                                 f'{USBUtil.port_chain_string(record.port_chain)}')
        records.append(record)
    return records
