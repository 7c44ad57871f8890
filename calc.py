#!/usr/bin/env python
"""The keypad calculator command-line interface"""

BANNER = """
                           _     A Keypad
                          /  _.| _   | _._|_ _ ._
                          \\_(_||(_|_||(_| |_(_)|

                 keys: 0-9  +  -  X  /  =  AC
"""

import sys

from functools import partial
stderr = partial(print, file=sys.stderr)

import calclib

def feed(calculator, line):
    """Push every key on a line; stop at the first one that's refused."""
    for key in calclib.tokenize_keys(line):
        calculator.push(key)

def main():
    stderr(BANNER)
    calculator = calclib.Calculator()
    try:
        while True:
            try:
                line = input('calc> ').strip()
                if line:
                    feed(calculator, line)
            except calclib.CalcError as ex:
                stderr('error:', ex)
            print(calculator)
    except EOFError:
        stderr('\ncaught EOF')
    except KeyboardInterrupt:
        stderr('\ninterrupted')

if __name__ == '__main__':
    main()
