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

class HubSwitchError(Exception):
    pass


class EnumerationError(HubSwitchError):
    '''USB devices could not be listed at all'''


class OpenError(HubSwitchError):
    '''The hub could not be opened or its interface claimed'''


class TransferError(HubSwitchError):
    '''A hub class control transfer timed out, stalled or was cut off'''


class TopologyError(HubSwitchError):
    def __init__(self, record, port):
        self.record = record
        self.port = port
        super().__init__(record, port)

    def __str__(self):
        return (f'invalid port number {self.port} for device '
                f'{self.record.vendor_id:04x}:{self.record.product_id:04x} '
                f'@ {self.record.bus} {list(self.record.port_chain)}')
