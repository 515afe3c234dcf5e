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

import sys

import usb

from .device import DeviceRecord
from .errors import OpenError, TransferError
from .usbutils import USBUtil
from .utils import Util

class DirectAccess:
    '''Issue hub class requests on the device itself'''

    def __init__(self, dev: usb.core.Device):
        self.dev = dev

    def open(self):
        # pyusb opens lazily; reading the configuration forces the open
        # so that a missing permission shows up here and not mid-session
        self.dev.get_active_configuration()

    def dispose(self):
        usb.util.dispose_resources(self.dev)

    def close(self):
        self.dispose()


class InterfaceAccess(DirectAccess):
    '''Claim the hub interface first; WinUSB refuses requests on an unclaimed device'''

    interface = 0

    def open(self):
        usb.util.claim_interface(self.dev, self.interface)

    def close(self):
        try:
            usb.util.release_interface(self.dev, self.interface)
        finally:
            self.dispose()


if sys.platform == 'win32':
    DefaultAccess = InterfaceAccess
else:
    DefaultAccess = DirectAccess


class HubControl:
    '''One open USB hub and the hub class requests for its port power.

    Use it as a context manager so that the handle, and the claimed
    interface where there is one, are released on every exit path.
    '''

    MAX_PORT = 255

    def __init__(self, record: DeviceRecord, access=None):
        if record.dev is None:
            raise OpenError(f'{record.vendor_id:04x}:{record.product_id:04x} has no device to open')
        Util.log(Util.LOG_DEBUG, f'Opening device {record.vendor_id:04x}:{record.product_id:04x}...')
        self.record = record
        self.is_superspeed = record.is_superspeed
        self.dev = record.dev
        if access is None:
            access = DefaultAccess
        self._access = access(self.dev)
        try:
            self._access.open()
        except (usb.core.USBError, NotImplementedError) as e:
            self._access.dispose()
            raise OpenError(f"can't open {record.vendor_id:04x}:{record.product_id:04x}: {e}") from e
        self._opened = True

    def close(self):
        if not self._opened:
            return
        self._opened = False
        self._access.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def __str__(self):
        return f'{self.record.vendor_id:04x}:{self.record.product_id:04x}'

    def _check_port(self, port):
        if not 1 <= port <= self.MAX_PORT:
            raise ValueError(f'port number {port} is out of range')

    def _control_in(self, bmRequestType, request, value, index, length, timeout, what):
        try:
            response = self.dev.ctrl_transfer(bmRequestType, request, value, index, length, timeout=timeout)
        except usb.core.USBError as e:
            raise TransferError(f'{what}: {e}') from e
        Util.log(Util.LOG_DEBUG, f'{what} data: {USBUtil.hexstr(response)}')
        return response

    def descriptor_type(self):
        return USBUtil.DT_SUPERSPEED_HUB if self.is_superspeed else usb.DT_HUB

    def port_count(self) -> int:
        response = self._control_in(USBUtil.hub_request_type(usb.util.CTRL_IN),
                                    usb.REQ_GET_DESCRIPTOR,
                                    self.descriptor_type() << 8, 0,
                                    USBUtil.HUB_DESCRIPTOR_LENGTH,
                                    USBUtil.DESCRIPTOR_TIMEOUT,
                                    'Port count')
        if len(response) <= USBUtil.OFFSET_NBR_PORTS:
            raise TransferError(f'Port count: short hub descriptor ({len(response)} bytes)')
        return response[USBUtil.OFFSET_NBR_PORTS]

    def _get_port_status(self, port):
        self._check_port(port)
        response = self._control_in(USBUtil.port_request_type(usb.util.CTRL_IN),
                                    usb.REQ_GET_STATUS, 0, port,
                                    USBUtil.PORT_STATUS_LENGTH,
                                    USBUtil.STATUS_TIMEOUT,
                                    'Port status')
        if len(response) < 2:
            raise TransferError(f'Port status: short response ({len(response)} bytes)')
        return response

    def status(self, port) -> bool:
        '''True when the port is powered.

        wPortStatus is little endian; PORT_POWER is bit 8, that is bit 0 of
        the second byte. Bit 0 of the first byte is the connection status.
        '''
        response = self._get_port_status(port)
        return response[USBUtil.OFFSET_PORT_POWER] & 1 != 0

    def port_status(self, port) -> int:
        response = self._get_port_status(port)
        return (response[1] << 8) | response[0]

    def set_port(self, port, enabled: bool) -> None:
        self._check_port(port)
        request = usb.REQ_SET_FEATURE if enabled else usb.REQ_CLEAR_FEATURE
        Util.log(Util.LOG_DEBUG, f'Turning port {port} {"on" if enabled else "off"}...')
        try:
            self.dev.ctrl_transfer(USBUtil.port_request_type(usb.util.CTRL_OUT), request,
                                   USBUtil.PORT_FEAT_POWER, port, None,
                                   timeout=USBUtil.FEATURE_TIMEOUT)
        except usb.core.USBError as e:
            raise TransferError(f'Port power: {e}') from e

    def on(self, port) -> None:
        self.set_port(port, True)

    def off(self, port) -> None:
        self.set_port(port, False)

    def toggle(self, port) -> None:
        self.set_port(port, not self.status(port))
