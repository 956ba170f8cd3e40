# MIT License
#
# Copyright (c) 2025 Democratize Technology
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""Value coercion units for envset.

A coercion unit owns the current value of one setting and converts it to
and from text. Every unit implements:

- ``set(text)``: parse *text* and store the result, raising ``ValueError``
  (usually ``ParseError`` or ``RangeError``) when the text is unusable. A
  failed ``set`` leaves the stored value untouched.
- ``__str__()``: render the stored value as text. The text captured right
  after declaration becomes the setting's default.
- ``zero()``: build a canonical zero-valued instance of the same unit, used
  by the usage renderer to decide whether a default is worth showing.

Units that can hand back their native value also implement ``get()`` and
satisfy the ``Getter`` protocol. ``FuncValue`` is the only built-in unit
that does not.

Custom units subclass ``Value``. They are free to keep state across calls
to ``set``; an accumulating list that appends on every call is as valid as
a scalar that overwrites.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import timedelta
from decimal import Decimal
import math
import re
import struct
from typing import Any, ClassVar, Generic, Protocol, TypeVar, runtime_checkable

from .duration import format_duration, parse_duration
from .exceptions import ParseError, RangeError

T = TypeVar("T")

# Width of the platform's native integer.
INT_SIZE = struct.calcsize("P") * 8

_TRUE_TOKENS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_TOKENS = frozenset({"0", "f", "F", "FALSE", "false", "False"})

_BASE_PREFIXES = {"0x": 16, "0o": 8, "0b": 2}
_DIGIT_PATTERNS = {
    2: re.compile(r"[01]+(?:_[01]+)*"),
    8: re.compile(r"[0-7]+(?:_[0-7]+)*"),
    10: re.compile(r"[0-9]+(?:_[0-9]+)*"),
    16: re.compile(r"[0-9a-fA-F]+(?:_[0-9a-fA-F]+)*"),
}
_FLOAT_SPECIALS = frozenset({"inf", "infinity", "nan"})


def parse_bool(text: str) -> bool:
    """Parse one of the accepted truthy/falsy tokens."""
    if text in _TRUE_TOKENS:
        return True
    if text in _FALSE_TOKENS:
        return False
    raise ParseError(text)


def parse_integer(text: str, bits: int, signed: bool) -> int:
    """Parse an integer literal of the given width.

    Accepts decimal, ``0x``/``0o``/``0b`` prefixed literals and a bare
    leading ``0`` for octal. Digits may be grouped with single underscores.
    Signs are only accepted for signed widths.

    Raises:
        ParseError: If *text* is not a well-formed literal.
        RangeError: If the literal does not fit in *bits*.
    """
    body = text
    negative = False
    if signed and body[:1] in ("+", "-"):
        negative = body[0] == "-"
        body = body[1:]

    base = _BASE_PREFIXES.get(body[:2].lower())
    if base is not None:
        digits = body[2:]
    elif len(body) > 1 and body[0] == "0":
        base, digits = 8, body[1:]
    else:
        base, digits = 10, body

    if not _DIGIT_PATTERNS[base].fullmatch(digits):
        raise ParseError(text)
    try:
        number = int(digits.replace("_", ""), base)
    except ValueError as e:
        # Decimal literals beyond the interpreter's digit limit
        raise RangeError(text) from e
    if negative:
        number = -number

    if signed:
        low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    else:
        low, high = 0, (1 << bits) - 1
    if not low <= number <= high:
        raise RangeError(text)
    return number


def parse_float(text: str) -> float:
    """Parse a 64-bit floating point literal.

    Raises:
        ParseError: If *text* is not a well-formed literal.
        RangeError: If a finite literal overflows to infinity.
    """
    if not text or not text.isascii() or text != text.strip():
        raise ParseError(text)
    unsigned = text.lstrip("+-").lower()
    if len(text) - len(unsigned) > 1:
        raise ParseError(text)
    hexadecimal = unsigned.startswith("0x")
    if hexadecimal and "p" not in unsigned:
        raise ParseError(text)  # hex mantissa needs a binary exponent
    try:
        if hexadecimal:
            number = float.fromhex(text)
        else:
            number = float(text)
    except OverflowError as e:
        raise RangeError(text) from e
    except ValueError as e:
        raise ParseError(text) from e
    if math.isinf(number) and unsigned not in _FLOAT_SPECIALS:
        raise RangeError(text)
    return number


def format_float(number: float) -> str:
    """Format *number* in its shortest round-trip ``%g`` form.

    Exponent notation is used when the decimal exponent is below -4 or at
    least 6, matching ``2.7``, ``100000``, ``1e+06`` and ``2.718e+31``.
    """
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "+Inf" if number > 0 else "-Inf"
    if number == 0:
        return "-0" if math.copysign(1.0, number) < 0 else "0"

    sign, digit_tuple, exponent = Decimal(repr(number)).as_tuple()
    point = len(digit_tuple) + exponent
    digits = "".join(map(str, digit_tuple)).rstrip("0")
    count = len(digits)

    precision = 6
    decimal_exponent = point - 1
    prefix = "-" if sign else ""

    if decimal_exponent < -4 or decimal_exponent >= precision:
        mantissa = digits[0] + ("." + digits[1:] if count > 1 else "")
        exponent_sign = "+" if decimal_exponent >= 0 else "-"
        return f"{prefix}{mantissa}e{exponent_sign}{abs(decimal_exponent):02d}"
    if point <= 0:
        return f"{prefix}0.{'0' * -point}{digits}"
    if point >= count:
        return prefix + digits + "0" * (point - count)
    return f"{prefix}{digits[:point]}.{digits[point:]}"


@runtime_checkable
class Getter(Protocol):
    """A coercion unit whose native value can be retrieved."""

    def get(self) -> Any: ...


class Value(ABC):
    """Base class for coercion units.

    ``set`` reports unusable text by raising ``ValueError`` or ``TypeError``,
    which the registry wraps in ``InvalidValueError`` and routes through its
    error handling policy. Any other exception escapes ``parse`` and ``set``
    unchanged, before any reporting or policy handling.
    """

    # Placeholder shown in usage output when the help text names none.
    placeholder: ClassVar[str] = "value"

    @abstractmethod
    def set(self, text: str) -> None:
        """Parse *text* and store it as the current value."""

    @abstractmethod
    def __str__(self) -> str:
        """Render the current value as text."""

    @classmethod
    def zero(cls) -> "Value":
        """Return a zero-valued instance of this unit."""
        return cls()


class BoundValue(Value, Generic[T]):
    """A unit whose value lives in its own slot or on a caller's object.

    Passing ``bind=(obj, "attr")`` makes the unit read and write
    ``obj.attr`` instead of private storage. The caller keeps *obj* alive
    for as long as the registry is in use.
    """

    zero_value: ClassVar[Any] = None

    def __init__(self, default: T | None = None, *, bind: tuple[Any, str] | None = None) -> None:
        self._bind = bind
        self._value: Any = self.zero_value
        self.value = self.zero_value if default is None else default

    @property
    def value(self) -> T:
        """The current value."""
        if self._bind is not None:
            target, attr = self._bind
            return getattr(target, attr)
        return self._value

    @value.setter
    def value(self, value: T) -> None:
        if self._bind is not None:
            target, attr = self._bind
            setattr(target, attr, value)
        else:
            self._value = value

    def get(self) -> T:
        """Return the current native value."""
        return self.value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.value!r})"


class BoolValue(BoundValue[bool]):
    placeholder = "bool"
    zero_value = False

    def set(self, text: str) -> None:
        self.value = parse_bool(text)

    def __str__(self) -> str:
        return "true" if self.value else "false"


class IntValue(BoundValue[int]):
    """Signed integer of the platform's native width."""

    placeholder = "int"
    zero_value = 0
    bits: ClassVar[int] = INT_SIZE
    signed: ClassVar[bool] = True

    def set(self, text: str) -> None:
        self.value = parse_integer(text, self.bits, self.signed)

    def __str__(self) -> str:
        return str(self.value)


class Int64Value(IntValue):
    bits = 64


class UintValue(IntValue):
    """Unsigned integer of the platform's native width."""

    placeholder = "uint"
    signed = False


class Uint64Value(UintValue):
    bits = 64


class Float64Value(BoundValue[float]):
    placeholder = "float"
    zero_value = 0.0

    def set(self, text: str) -> None:
        self.value = parse_float(text)

    def __str__(self) -> str:
        return format_float(float(self.value))


class StringValue(BoundValue[str]):
    placeholder = "string"
    zero_value = ""

    def set(self, text: str) -> None:
        self.value = text

    def __str__(self) -> str:
        return self.value


class DurationValue(BoundValue[timedelta]):
    placeholder = "duration"
    zero_value = timedelta(0)

    def set(self, text: str) -> None:
        self.value = parse_duration(text)

    def __str__(self) -> str:
        return format_duration(self.value)


class TextValue(BoundValue[Any]):
    """Custom unit driven by caller-supplied parse and format callables.

    *parse* turns text into the stored object and signals bad text by
    raising ``ValueError``. *format* renders a stored object back to text.
    A stored ``None`` renders as the empty string.
    """

    def __init__(
        self,
        parse: Callable[[str], Any] = str,
        format: Callable[[Any], str] = str,
        default: Any = None,
        *,
        bind: tuple[Any, str] | None = None,
    ) -> None:
        self._parse = parse
        self._format = format
        super().__init__(default, bind=bind)

    def set(self, text: str) -> None:
        self.value = self._parse(text)

    def __str__(self) -> str:
        if self.value is None:
            return ""
        return self._format(self.value)


class FuncValue(Value):
    """Unit that only forwards each value to a callback.

    It has no retrievable value and always renders as the empty string.
    """

    def __init__(self, fn: Callable[[str], Any] | None = None) -> None:
        self._fn = fn

    def set(self, text: str) -> None:
        if self._fn is not None:
            self._fn(text)

    def __str__(self) -> str:
        return ""
