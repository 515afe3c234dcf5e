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

import usb

class USBUtil:
    # Universal Serial Bus Specification Revision 2.0
    ''' 11.23.2.1 Hub Descriptor
    Universal Serial Bus 3.1 Specification 10.15.2.1 Hub Descriptor
    '''
    DT_SUPERSPEED_HUB = 0x2a

    # bcdUSB of the first SuperSpeed revision
    USB_VERSION_3_0 = 0x0300

    ''' 11.24.2.7.1 PortStatusBits
    Table 11-21. Port Status Field, wPortStatus
    '''
    PORT_STAT_CONNECTION   = (1 << 0)
    PORT_STAT_ENABLE       = (1 << 1)
    PORT_STAT_SUSPEND      = (1 << 2)
    PORT_STAT_OVER_CURRENT = (1 << 3)
    PORT_STAT_RESET        = (1 << 4)
    PORT_STAT_POWER        = (1 << 8)
    PORT_STAT_LOW_SPEED    = (1 << 9)
    PORT_STAT_HIGH_SPEED   = (1 << 10)
    PORT_STAT_TEST         = (1 << 11)
    PORT_STAT_INDICATION   = (1 << 12)

    ''' 11.24.2 Class-specific Requests
    Table 11-17. Hub Class Feature Selectors
    '''
    PORT_FEAT_POWER = 8

    HUB_DESCRIPTOR_LENGTH = 12
    PORT_STATUS_LENGTH = 4

    # milliseconds
    DESCRIPTOR_TIMEOUT = 5000
    STATUS_TIMEOUT = 1000
    FEATURE_TIMEOUT = 5000

    # offsets in the hub descriptor and the port status response
    OFFSET_NBR_PORTS = 2
    OFFSET_PORT_POWER = 1

    _port_status_names = (
        ( PORT_STAT_INDICATION,   'indication' ),
        ( PORT_STAT_TEST,         'test' ),
        ( PORT_STAT_HIGH_SPEED,   'high-speed' ),
        ( PORT_STAT_LOW_SPEED,    'low-speed' ),
        ( PORT_STAT_POWER,        'power' ),
        ( PORT_STAT_RESET,        'reset' ),
        ( PORT_STAT_OVER_CURRENT, 'over-current' ),
        ( PORT_STAT_SUSPEND,      'suspend' ),
        ( PORT_STAT_ENABLE,       'enable' ),
        ( PORT_STAT_CONNECTION,   'connect' ),
    )

    def hub_request_type(direction):
        return usb.util.build_request_type(direction, usb.util.CTRL_TYPE_CLASS,
                                           usb.util.CTRL_RECIPIENT_DEVICE)

    def port_request_type(direction):
        return usb.util.build_request_type(direction, usb.util.CTRL_TYPE_CLASS,
                                           usb.util.CTRL_RECIPIENT_OTHER)

    def port_status_string(wPortStatus: int) -> str:
        if wPortStatus == 0:
            return 'off'
        return ' '.join([ name for bit, name in USBUtil._port_status_names if wPortStatus & bit ])

    def hexstr(buf) -> str:
        return ' '.join([ f'{x:02x}' for x in buf ])

    def get_string(dev: usb.core.Device, index):
        if not index:
            return None
        try:
            string = usb.util.get_string(dev, index)
        except (usb.core.USBError, ValueError, NotImplementedError):
            # no permission to open the device, or no language id
            return None
        if string:
            string = string.rstrip(' ')
        return string

    def port_chain_string(port_chain) -> str:
        return '[' + ', '.join([ str(port) for port in port_chain ]) + ']'
