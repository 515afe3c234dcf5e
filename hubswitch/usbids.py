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

import os

from .utils import Util

class UsbIds:
    '''Vendor and product names from the usb.ids database shipped with usbutils/hwdata.

    The file is parsed on first lookup. Only the vendor section is read:
    vendor lines are "vvvv  name", product lines are "\\tpppp  name".
    '''

    search_paths = (
        '/usr/share/hwdata/usb.ids',
        '/usr/share/usb.ids',
        '/usr/share/misc/usb.ids',
        '/var/lib/usbutils/usb.ids',
    )

    def __init__(self, path=None):
        self.path = path
        self._vendors = None
        self._products = None

    def _find(self):
        if self.path:
            return self.path
        for path in self.search_paths:
            if os.path.isfile(path):
                return path
        return None

    def _load(self):
        if self._vendors is not None:
            return
        self._vendors = {}
        self._products = {}
        path = self._find()
        if not path:
            Util.log(Util.LOG_WARNING, 'usb.ids not found, device names are not available')
            return
        Util.log(Util.LOG_DEBUG, f'load {path}')
        try:
            with open(path, 'r', encoding='utf-8', errors='replace') as file:
                self.parse(file)
        except OSError as e:
            if self.path:
                raise
            Util.log(Util.LOG_WARNING, f"can't read {path}: {e}")

    def parse(self, lines):
        if self._vendors is None:
            self._vendors = {}
            self._products = {}
        vendor = None
        for line in lines:
            line = line.rstrip('\n\r')
            if not line or line.startswith('#'):
                continue
            if line.startswith('\t\t'):
                # interface
                continue
            if line.startswith('\t'):
                if vendor is None:
                    continue
                if (entry := self._parse_id(line[1:])) is not None:
                    self._products[(vendor, entry[0])] = entry[1]
                continue
            if (entry := self._parse_id(line)) is None:
                # "C 00  ..." and the other sections follow the vendors
                break
            vendor = entry[0]
            self._vendors[vendor] = entry[1]

    def _parse_id(self, line):
        if len(line) < 6 or line[4] != ' ':
            return None
        try:
            number = int(line[:4], 16)
        except ValueError:
            return None
        return number, line[5:].strip()

    def vendor_name(self, vendor_id):
        self._load()
        return self._vendors.get(vendor_id)

    def product_name(self, vendor_id, product_id):
        self._load()
        return self._products.get((vendor_id, product_id))
