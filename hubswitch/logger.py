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
from datetime import datetime

from .utils import Util

class ConsoleLogger:

    level_names = {
        Util.LOG_DEBUG:   'DEBUG',
        Util.LOG_INFO:    'INFO',
        Util.LOG_WARNING: 'WARN',
        Util.LOG_ERROR:   'ERROR',
    }

    def __init__(self, log_level=Util.LOG_WARNING, writer=None):
        self.log_level = log_level
        self.writer = writer

    def log(self, level, message=None):
        if level < self.log_level or level == Util.LOG_NONE:
            return
        if message is None:
            message = ''
        if isinstance(message, str):
            message = message.rstrip('\n\r')
        writer = self.writer if self.writer else sys.stderr
        writer.write('{} {:5} {}\n'.format(datetime.now(), self.level_names.get(level, level), message))
        writer.flush()
