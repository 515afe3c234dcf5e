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

from prompt_toolkit.shortcuts import radiolist_dialog

from .device import DeviceRecord, list_devices
from .errors import OpenError, TransferError
from .hubcontrol import HubControl
from .topology import resolve
from .usbids import UsbIds
from .usbutils import USBUtil
from .utils import Util

def hub_name(record: DeviceRecord, ids=None) -> str:
    vendor = ids.vendor_name(record.vendor_id) if ids else None
    product = ids.product_name(record.vendor_id, record.product_id) if ids else None
    return (f'Hub {record.vendor_id:04x}:{record.product_id:04x} '
            f'{record.product or "[no product name]"} / '
            f'{record.manufacturer or "[no manufacturer]"} / '
            f'{record.serial_number or "[no serial number]"} '
            f'({vendor or "[unknown vendor]"} / {product or "[unknown product]"}) '
            f'@ {record.bus} {USBUtil.port_chain_string(record.port_chain)}')


class SelectableHub:
    def __init__(self, name, record: DeviceRecord, port_count=None, children=None):
        self.name = name
        self.record = record
        self.port_count = port_count
        self.children = children if children else {}

    def __str__(self):
        lines = [ self.name ]
        if self.port_count is None:
            lines.append("    can't inquire port count")
        for port, child in self.children.items():
            lines.append(f'    {port}: {child}')
        return '\n'.join(lines)


class TogglablePort:
    def __init__(self, index, name, enabled):
        self.index = index
        self.name = name
        self.enabled = enabled

    def __str__(self):
        return f'    {self.index}: {self.name} -- {"ON" if self.enabled else "off"}'


class TogglableHub:
    def __init__(self, name, control: HubControl, children):
        self.name = name
        self.control = control
        # [ [ child name, port power ], ... ] indexed by port - 1
        self.children = children

    @staticmethod
    def open(hub: SelectableHub, control=HubControl):
        control = control(hub.record)
        children = []
        try:
            for port, child in hub.children.items():
                try:
                    enabled = control.status(port)
                except TransferError as e:
                    Util.log(Util.LOG_WARNING, f"can't read status of port {port}: {e}")
                    enabled = False
                children.append([ child, enabled ])
        except BaseException:
            control.close()
            raise
        return TogglableHub(hub.name, control, children)

    def close(self):
        self.control.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def __str__(self):
        return self.name

    def toggle(self, port):
        if not 1 <= port <= len(self.children):
            raise ValueError(f'port number {port} is out of range')
        self.control.toggle(port)
        self.children[port - 1][1] = not self.children[port - 1][1]

    def selection(self):
        return [ TogglablePort(index + 1, name, enabled)
                 for index, (name, enabled) in enumerate(self.children) ]


class Prompter:
    '''Selection prompt; select() returns None when the user cancels'''

    def __init__(self, title='hubswitch'):
        self.title = title

    def select(self, message, choices, default=0):
        if not choices:
            return None
        values = [ (index, str(choice)) for index, choice in enumerate(choices) ]
        index = radiolist_dialog(title=self.title, text=message, values=values,
                                 default=min(default, len(choices) - 1)).run()
        if index is None:
            return None
        return choices[index]


class HubSwitch:

    def __init__(self, ids=None, prompter=None, control=HubControl, output=print):
        self.ids = ids if ids is not None else UsbIds()
        self.prompter = prompter if prompter else Prompter()
        self.control = control
        self.output = output

    def inquire_port_count(self, record: DeviceRecord):
        try:
            with self.control(record) as control:
                return control.port_count()
        except (OpenError, TransferError) as e:
            Util.log(Util.LOG_WARNING, f'{record.vendor_id:04x}:{record.product_id:04x}: {e}')
            return None

    def list_hubs(self, devices) -> list:
        hubs = []
        for record in devices:
            if not record.is_hub:
                continue
            name = hub_name(record, self.ids)
            port_count = self.inquire_port_count(record)
            children = None
            if port_count is None:
                self.output("Can't inquire port count from hub")
            else:
                children = resolve(devices, record, port_count, self.ids).children
            hubs.append(SelectableHub(name, record, port_count, children))
        return hubs

    def show(self, devices) -> int:
        hubs = self.list_hubs(devices)
        if not hubs:
            self.output('No USB hub found')
            return 1
        for hub in hubs:
            self.output(hub.name)
            if hub.port_count is None:
                continue
            try:
                with self.control(hub.record) as control:
                    for port, child in hub.children.items():
                        try:
                            wPortStatus = control.port_status(port)
                        except TransferError as e:
                            self.output(f'   Port {port}: ???? ({e}) -- {child}')
                            continue
                        self.output(f'   Port {port}: {wPortStatus:04x} '
                                    f'{USBUtil.port_status_string(wPortStatus)} -- {child}')
            except OpenError as e:
                self.output(f'   {e}')
        return 0

    def toggle_loop(self, hub: TogglableHub):
        index = 0
        while (port := self.prompter.select('Select a port to toggle', hub.selection(), index)) is not None:
            index = port.index - 1
            try:
                hub.toggle(port.index)
            except TransferError as e:
                self.output(f"Couldn't toggle port {port.index}: {e}")
            else:
                self.output(f'Toggled port {port.index} {"off" if port.enabled else "ON"}')

    def run(self, devices=None) -> int:
        if devices is None:
            devices = list_devices()
        hubs = self.list_hubs(devices)
        if not hubs:
            self.output('No USB hub found')
            return 1
        selection = self.prompter.select('Select a hub', hubs)
        if selection is None:
            self.output('Done')
            return 0
        with TogglableHub.open(selection, control=self.control) as hub:
            self.toggle_loop(hub)
        self.output('Done')
        return 0
