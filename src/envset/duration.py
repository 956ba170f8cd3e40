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

"""Duration text grammar.

Durations are written as an optionally signed sequence of decimal numbers,
each with an optional fraction and a unit suffix, such as ``300ms``,
``-1.5h`` or ``2h45m``. Valid units are ``ns``, ``us`` (or ``µs``), ``ms``,
``s``, ``m`` and ``h``. The bare string ``0`` is also accepted.

Values are held as ``datetime.timedelta``, so anything finer than a
microsecond is truncated after parsing.
"""

from datetime import timedelta

from .exceptions import ParseError

NANOSECOND = 1
MICROSECOND = 1000 * NANOSECOND
MILLISECOND = 1000 * MICROSECOND
SECOND = 1000 * MILLISECOND
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE

UNITS = {
    "ns": NANOSECOND,
    "us": MICROSECOND,
    "µs": MICROSECOND,  # U+00B5 micro sign
    "μs": MICROSECOND,  # U+03BC Greek small letter mu
    "ms": MILLISECOND,
    "s": SECOND,
    "m": MINUTE,
    "h": HOUR,
}

# Durations are limited to a signed 64-bit nanosecond count.
MAX_NANOSECONDS = (1 << 63) - 1

_DIGITS = "0123456789"


def _leading_digits(text: str) -> tuple[str, str]:
    """Split *text* into its run of leading ASCII digits and the rest."""
    i = 0
    while i < len(text) and text[i] in _DIGITS:
        i += 1
    return text[:i], text[i:]


def parse_nanoseconds(text: str) -> int:
    """Parse a duration string into a nanosecond count.

    Raises:
        ParseError: If *text* does not follow the duration grammar or the
            result does not fit in a signed 64-bit nanosecond count.
    """
    rest = text
    negative = False
    if rest and rest[0] in "-+":
        negative = rest[0] == "-"
        rest = rest[1:]
    if rest == "0":
        return 0
    if not rest:
        raise ParseError(text)

    total = 0
    while rest:
        if rest[0] != "." and rest[0] not in _DIGITS:
            raise ParseError(text)

        whole, rest = _leading_digits(rest)
        fraction = ""
        if rest.startswith("."):
            fraction, rest = _leading_digits(rest[1:])
            if not whole and not fraction:
                raise ParseError(text)

        unit_end = 0
        while unit_end < len(rest) and rest[unit_end] != "." and rest[unit_end] not in _DIGITS:
            unit_end += 1
        if unit_end == 0:
            raise ParseError(text)  # missing unit
        unit = UNITS.get(rest[:unit_end])
        if unit is None:
            raise ParseError(text)  # unknown unit
        rest = rest[unit_end:]

        amount = int(whole or "0") * unit
        if fraction:
            amount += int(fraction) * unit // 10 ** len(fraction)
        total += amount
        if total > MAX_NANOSECONDS + 1:
            raise ParseError(text)

    if negative:
        return -total
    if total > MAX_NANOSECONDS:
        raise ParseError(text)
    return total


def parse_duration(text: str) -> timedelta:
    """Parse a duration string into a ``timedelta``."""
    nanoseconds = parse_nanoseconds(text)
    microseconds = abs(nanoseconds) // MICROSECOND
    return timedelta(microseconds=-microseconds if nanoseconds < 0 else microseconds)


def to_nanoseconds(value: timedelta) -> int:
    """Return the exact nanosecond count of *value*."""
    return ((value.days * 86400 + value.seconds) * 1_000_000 + value.microseconds) * MICROSECOND


def _format_fraction(amount: int, scale: int) -> str:
    """Format ``amount / scale`` with trailing fractional zeros trimmed."""
    whole, remainder = divmod(amount, scale)
    if not remainder:
        return str(whole)
    width = len(str(scale)) - 1
    return f"{whole}.{str(remainder).rjust(width, '0').rstrip('0')}"


def format_duration(value: timedelta) -> str:
    """Format *value* in its canonical text form.

    The largest unit is hours, leading zero units are omitted and a zero
    duration formats as ``0s``. Durations under one second use the
    smallest unit (``ns``, ``µs`` or ``ms``) that keeps the leading digit
    non-zero.

    >>> format_duration(timedelta(hours=1, minutes=30))
    '1h30m0s'
    >>> format_duration(timedelta(milliseconds=1500))
    '1.5s'
    """
    nanoseconds = to_nanoseconds(value)
    if nanoseconds == 0:
        return "0s"
    sign = "-" if nanoseconds < 0 else ""
    magnitude = abs(nanoseconds)

    if magnitude < SECOND:
        if magnitude < MICROSECOND:
            return f"{sign}{magnitude}ns"
        if magnitude < MILLISECOND:
            return f"{sign}{_format_fraction(magnitude, MICROSECOND)}µs"
        return f"{sign}{_format_fraction(magnitude, MILLISECOND)}ms"

    hours, magnitude = divmod(magnitude, HOUR)
    minutes, magnitude = divmod(magnitude, MINUTE)
    text = f"{_format_fraction(magnitude, SECOND)}s"
    if hours or minutes:
        text = f"{minutes}m{text}"
    if hours:
        text = f"{hours}h{text}"
    return sign + text
