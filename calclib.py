"""calclib - The keypad calculator engine used by calc"""

# ---------------------------
#  The Process in a Nutshell
# ---------------------------
#
#             +--------+     +----------+     +------------+
# [keys]  >>> | push() | >>> | to_rpn() | >>> | eval_rpn() | >>> [result]
#          |  +--------+  |  +----------+  |  +------------+  |
#          |              |                |                  |
#     one at a time  infix tokens    tokens in RPN      integer (or inf/nan)

import re
import sys
import math
import operator

MAX_NUMBER_LENGTH = 3

AC = 'AC'
CALCULATE = '='

ERROR_MESSAGES = {
    'SYNTAX_ERROR': "enter a number before entering an operator",
    'MAX_LENGTH_ERROR': "numbers are limited to %d digits" % MAX_NUMBER_LENGTH,
    'NOT_A_NUMBER_ERROR': "only numbers can be calculated; press AC to start over",
}

class CalcError(ValueError):
    """Base class for every key the calculator refuses."""
    message = None

    def __init__(self, message=None):
        ValueError.__init__(self, message or self.__class__.message)

class CalcSyntaxError(CalcError):
    message = ERROR_MESSAGES['SYNTAX_ERROR']

class MaxLengthError(CalcError):
    message = ERROR_MESSAGES['MAX_LENGTH_ERROR']

class NotANumberError(CalcError):
    message = ERROR_MESSAGES['NOT_A_NUMBER_ERROR']

class CalcKeyError(CalcError):
    pass

class Number(int):
    """A committed operand. Immutable, like the int it wraps."""

    # int has no __str__ of its own; keep the display from using __repr__
    __str__ = int.__repr__

    def __repr__(self):
        return 'Number(%d)' % self

class Operator(object):
    """The base class for operators.

    Do not instantiate this class directly; use create_operator_class().
    Every operator is binary and left associative.
    """
    name = None
    precedence = None
    func = None

    def __init__(self):
        if self.__class__ is Operator:
            raise NotImplementedError("Operator class is abstract; it cannot be called directly")

    def __call__(self, a, b):
        """Apply the operator as `a OP b`."""
        return self.__class__.func(a, b)

    def __eq__(self, other):
        return self.__class__ is other.__class__

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return hash(self.__class__)

    def __repr__(self):
        return self.__class__.__name__

    def __str__(self):
        return self.__class__.name

def ieee_arithmetic(func):
    """Give the value a float unit would, instead of an exception.

    A keypad has no way to report an exception mid-calculation, so
    x/0 becomes +inf or -inf, 0/0 becomes nan, and an int too large
    for a float becomes a signed inf. The engine then refuses further
    keys until it is cleared.
    """
    def newfunc(a, b):
        try:
            result = func(a, b)
        except ZeroDivisionError:
            if a == 0 or (isinstance(a, float) and math.isnan(a)):
                return float('nan')
            inf = float('inf') if a > 0 else float('-inf')
            return inf * math.copysign(1.0, b)
        except OverflowError:
            return float('-inf') if (a < 0) != (b < 0) else float('inf')
        # Keep ints within float range so later float arithmetic can't raise
        if isinstance(result, int) and abs(result) > sys.float_info.max:
            return float('inf') if result > 0 else float('-inf')
        return result
    return newfunc

def create_operator_class(clsname, name_, precedence_, func_):
    """Factory function for creating a new operator class."""
    class newop(Operator):
        name = name_
        precedence = precedence_
        func = staticmethod(ieee_arithmetic(func_))
    newop.__name__ = clsname
    return newop

binary = {
    'X': create_operator_class('Multiplication', 'X', 2, operator.mul),
    '/': create_operator_class('Division',       '/', 2, operator.truediv),
    '+': create_operator_class('Addition',       '+', 1, operator.add),
    '-': create_operator_class('Subtraction',    '-', 1, operator.sub),
}

aliases = {
    '*': 'X',
    '×': 'X',
    'x': 'X',
}

def operator_for(key):
    """Return the operator class for a key, or None if it isn't one."""
    if not isinstance(key, str):
        return None
    return binary.get(aliases.get(key, key))

def is_digit(key):
    return isinstance(key, str) and len(key) == 1 and key in '0123456789'

key_re = re.compile(r"""
    \s*
    (?:
        (?P<clear>  [aA][cC])
      | (?P<digit>  [0-9])
      | (?P<symbol> [^\s])
    )
""", re.UNICODE | re.VERBOSE)

def tokenize_keys(s):
    """Split a line of keypad input into individual keys."""
    pos = 0
    keys = []
    s = s.rstrip()

    while pos < len(s):
        m = key_re.match(s, pos)
        d = m.groupdict()

        if d['clear']:
            keys.append(AC)
        elif d['digit']:
            keys.append(d['digit'])
        else:
            key = d['symbol']
            if key == CALCULATE:
                keys.append(key)
            elif operator_for(key) is not None:
                keys.append(operator_for(key).name)
            else:
                raise CalcKeyError("invalid key '%s' at position %d" % (key, m.start('symbol')))

        pos = m.end()
    return keys

def to_rpn(tokens):
    """Convert a list of infix tokens to reverse Polish notation using
    the shunting yard algorithm.

    See <http://en.wikipedia.org/wiki/Shunting_yard_algorithm>
    """
    # Output, in reverse Polish order
    out = []
    # Operator stack
    stack = []

    for token in tokens:
        if isinstance(token, Number):
            out.append(token)

        elif isinstance(token, Operator):
            # Equal precedence pops too, so a - b - c is (a - b) - c
            while stack and stack[-1].precedence >= token.precedence:
                out.append(stack.pop())
            stack.append(token)

        else:
            raise ValueError("found foreign object: %s" % repr(token))

    # Finally, pop off anything still on the stack
    while stack:
        out.append(stack.pop())

    return out

def eval_rpn(tokens):
    """Evaluate a list of tokens in reverse Polish order.

    An empty list evaluates to 0. An operator without two operands
    to work on (the user pressed '=' straight after an operator)
    produces nan rather than an exception.
    """
    stack = []

    for token in tokens:
        if isinstance(token, Number):
            stack.append(int(token))
        elif isinstance(token, Operator):
            if len(stack) < 2:
                stack[-2:] = [float('nan')]
            else:
                # Replace the operator's arguments with the result
                stack[-2:] = [token(*stack[-2:])]
        else:
            raise ValueError("found alien object: %s" % repr(token))

    if not stack:
        return 0
    return stack[0]

class Calculator(object):
    """The state behind a keypad: the digits being typed, the committed
    infix tokens and the last result.

    Keys go in through push(); the display comes out through str().
    A rejected key raises a CalcError subclass and leaves everything as
    it was.
    """

    def __init__(self):
        self.clear_all()

    @property
    def result(self):
        return self._result

    def clear_all(self):
        self._buffer = ''
        self._infix = []
        self._result = 0

    def push(self, key):
        if key == AC:
            self.clear_all()
            return

        self._validate(key)

        if key == CALCULATE:
            self._push_buffer()
            self._calculate()
        elif is_digit(key):
            self._buffer = Calculator.remove_leading_zero(self._buffer + key)
        else:
            self._push_buffer()
            self._infix.append(operator_for(key)())

    def _validate(self, key):
        if key != CALCULATE and not is_digit(key) and operator_for(key) is None:
            raise CalcKeyError("invalid key: %r" % (key,))

        # Only a finite calculation is truncated back to an int
        if not isinstance(self._result, int):
            raise NotANumberError()

        if is_digit(key):
            if len(self._buffer) >= MAX_NUMBER_LENGTH:
                raise MaxLengthError()
        elif key != CALCULATE and self._buffer == '':
            raise CalcSyntaxError()

    def _push_buffer(self):
        if self._buffer == '':
            return
        self._infix.append(Number(self._buffer))
        self._buffer = ''

    def _calculate(self):
        result = eval_rpn(to_rpn(self._infix))
        # ints may be too large for math.isfinite(); they are exact anyway
        if isinstance(result, float) and math.isfinite(result):
            result = int(result)
        self._result = result
        self._buffer = str(result)
        self._infix = []

    @staticmethod
    def remove_leading_zero(number_string):
        return str(int(number_string))

    def __str__(self):
        return ''.join(str(token) for token in self._infix) + self._buffer

    def __repr__(self):
        return '<Calculator %r result=%r>' % (str(self), self._result)
