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

from .device import DeviceRecord
from .errors import TopologyError
from .usbutils import USBUtil
from .utils import Util

NO_DEVICE = '<no device>'
UNKNOWN_DEVICE = '<unknown>'
UNKNOWN_VENDOR = '[unknown vendor]'

Topology = collections.namedtuple('Topology', ('children', 'errors'))


def port_of(hub: DeviceRecord, candidate: DeviceRecord):
    '''Port of hub that candidate is plugged into, or None if it is not a direct child'''
    if candidate.bus != hub.bus:
        return None
    chain = tuple(hub.port_chain)
    candidate_chain = tuple(candidate.port_chain)
    if len(candidate_chain) != len(chain) + 1:
        return None
    if candidate_chain[:len(chain)] != chain:
        return None
    port = candidate_chain[-1]
    if port == 0:
        raise TopologyError(candidate, port)
    return port


def child_name(record: DeviceRecord, ids=None) -> str:
    if ids and (name := ids.product_name(record.vendor_id, record.product_id)):
        return name
    if record.product:
        vendor = ids.vendor_name(record.vendor_id) if ids else None
        return f'{record.product} from {vendor or UNKNOWN_VENDOR}'
    return UNKNOWN_DEVICE


def resolve(devices, hub: DeviceRecord, port_count: int, ids=None) -> Topology:
    children = { port: NO_DEVICE for port in range(1, port_count + 1) }
    errors = []
    for candidate in devices:
        try:
            port = port_of(hub, candidate)
            if port is None:
                continue
            if port not in children:
                raise TopologyError(candidate, port)
        except TopologyError as e:
            Util.log(Util.LOG_ERROR, f'{e} on hub {USBUtil.port_chain_string(hub.port_chain)}')
            errors.append(e)
            continue
        children[port] = child_name(candidate, ids)
    return Topology(children, errors)
