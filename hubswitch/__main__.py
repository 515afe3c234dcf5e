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
import argparse

from hubswitch.errors import EnumerationError, OpenError
from hubswitch.hubswitch import HubSwitch
from hubswitch.device import list_devices
from hubswitch.logger import ConsoleLogger
from hubswitch.preferences import Preferences
from hubswitch.usbids import UsbIds
from hubswitch.utils import Util

def main(argv=None):
    argparser = argparse.ArgumentParser(prog='hubswitch',
                                        description='Toggle the power of USB hub ports')
    argparser.add_argument("-l", "--list", dest="list", action="store_true",
                           help="list hubs and port status, then exit")
    argparser.add_argument("--usb-ids", dest="usb_ids", type=str,
                           help="usb.ids file to take device names from")
    argparser.add_argument("-v", "--verbose", dest="verbose", action="store_true",
                           help="increase output verbosity")
    args = argparser.parse_args(argv)

    prefs = Preferences.getInstance()
    if args.verbose:
        prefs.log_level = Util.LOG_DEBUG
    if args.usb_ids:
        prefs.usb_ids = args.usb_ids
    Util.set_logger(ConsoleLogger(prefs.log_level))

    app = HubSwitch(ids=UsbIds(prefs.usb_ids))
    try:
        devices = list_devices()
        if args.list:
            return app.show(devices)
        return app.run(devices)
    except (EnumerationError, OpenError) as e:
        print(f'ERROR: {e}', file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
