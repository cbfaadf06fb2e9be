'''
log.py
Handles common logging functions

rmrender draws reMarkable notebooks as images and PDF documents.
Copyright (C) 2020-23  Davis Remmel

This program is free software: you can redistribute it and/or modify
it under the terms of the GNU Affero General Public License as
published by the Free Software Foundation, either version 3 of the
License, or (at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
GNU Affero General Public License for more details.

You should have received a copy of the GNU Affero General Public License
along with this program.  If not, see <https://www.gnu.org/licenses/>.
'''

import sys

DEBUG = 0
INFO = 1
WARNING = 2
ERROR = 3
NONE = 4

level = WARNING

def set_level(new_level):
    global level
    if new_level not in (DEBUG, INFO, WARNING, ERROR, NONE):
        raise ValueError('invalid log level {}'.format(new_level))
    level = new_level

def get_string(args):
    na = []
    for a in args:
        na.append(str(a))
    if len(na) == 1:
        string = str(''.join(na)) + '\n'
    else:
        string = str(' '.join(na)) + '\n'
    return string

def debug(*args):
    if level <= DEBUG:
        sys.stderr.write('===(debug)===> ' + get_string(args))

def info(*args):
    if level <= INFO:
        sys.stdout.write(get_string(args))

def warning(*args):
    if level <= WARNING:
        sys.stderr.write('warning: ' + get_string(args))

def error(*args):
    if level <= ERROR:
        sys.stderr.write(get_string(args))
