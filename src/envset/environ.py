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

"""Process-wide default registry.

``get_environ()`` returns the single registry used by the module-level
functions below. It is created on first use with no prefix and the
``EXIT`` error handling policy, and its usage message is headed with the
program name. Applications that prefer explicit wiring can fetch it once at
startup and pass it to the code that needs it.

The default registry is shared mutable state. Declare and parse during
startup only; ``reset_for_testing`` is the only supported way to replace it.
"""

from collections.abc import Callable, Iterable
from datetime import timedelta
import io
import logging
import sys
import threading
from typing import Any

from .registry import EnvSet, ErrorHandling, Setting
from .sources import environ_entries
from .values import (
    BoolValue,
    DurationValue,
    Float64Value,
    Int64Value,
    IntValue,
    StringValue,
    Uint64Value,
    UintValue,
    Value,
)

logger = logging.getLogger(__name__)

_lock = threading.Lock()
_environ: EnvSet | None = None


def program_usage(envset: EnvSet) -> None:
    """Write a usage message headed with the program name."""
    print(f"Usage of {sys.argv[0]}:", file=envset.output)
    envset.print_defaults()


def _new_environ(error_handling: ErrorHandling) -> EnvSet:
    envset = EnvSet("", error_handling)
    envset.usage = lambda: program_usage(envset)
    return envset


def get_environ() -> EnvSet:
    """Return the default registry, creating it on first use."""
    global _environ
    if _environ is None:
        with _lock:
            if _environ is None:
                _environ = _new_environ(ErrorHandling.EXIT)
                logger.debug("Created default registry")
    return _environ


def reset_for_testing(usage: Callable[[], None] | None = None) -> EnvSet:
    """Replace the default registry with a fresh one and return it.

    The replacement uses the ``CONTINUE`` policy so parse failures do not
    exit, and discards its output.

    Args:
        usage: Usage callback for the new registry; defaults to the
            program usage message
    """
    global _environ
    envset = _new_environ(ErrorHandling.CONTINUE)
    envset.set_output(io.StringIO())
    if usage is not None:
        envset.usage = usage
    with _lock:
        _environ = envset
    return envset


def usage() -> None:
    """Run the default registry's usage callback."""
    envset = get_environ()
    if envset.usage is None:
        envset.default_usage()
    else:
        envset.usage()


def parse(entries: Iterable[str] | None = None) -> None:
    """Parse *entries*, or the process environment, into the default registry."""
    get_environ().parse(environ_entries() if entries is None else entries)


def parsed() -> bool:
    return get_environ().parsed


def visit_all(fn: Callable[[Setting], Any]) -> None:
    get_environ().visit_all(fn)


def visit(fn: Callable[[Setting], Any]) -> None:
    get_environ().visit(fn)


def lookup(name: str) -> Setting | None:
    return get_environ().lookup(name)


def set_value(name: str, value: str) -> None:
    """Set a default-registry setting outside of a parse pass."""
    get_environ().set(name, value)


def num_set() -> int:
    return get_environ().num_set()


def print_defaults() -> None:
    get_environ().print_defaults()


def var(value: Value, name: str, help: str) -> None:
    get_environ().var(value, name, help)


def func(name: str, help: str, fn: Callable[[str], Any]) -> None:
    get_environ().func(name, help, fn)


def text_var(
    target: Any,
    attr: str,
    name: str,
    default: Any,
    help: str,
    parse: Callable[[str], Any],
    format: Callable[[Any], str] = str,
    kind: type | None = None,
) -> None:
    get_environ().text_var(target, attr, name, default, help, parse, format, kind)


def boolean(name: str, default: bool, help: str) -> BoolValue:
    return get_environ().boolean(name, default, help)


def boolean_var(target: Any, attr: str, name: str, default: bool, help: str) -> None:
    get_environ().boolean_var(target, attr, name, default, help)


def integer(name: str, default: int, help: str) -> IntValue:
    return get_environ().integer(name, default, help)


def integer_var(target: Any, attr: str, name: str, default: int, help: str) -> None:
    get_environ().integer_var(target, attr, name, default, help)


def int64(name: str, default: int, help: str) -> Int64Value:
    return get_environ().int64(name, default, help)


def int64_var(target: Any, attr: str, name: str, default: int, help: str) -> None:
    get_environ().int64_var(target, attr, name, default, help)


def uint(name: str, default: int, help: str) -> UintValue:
    return get_environ().uint(name, default, help)


def uint_var(target: Any, attr: str, name: str, default: int, help: str) -> None:
    get_environ().uint_var(target, attr, name, default, help)


def uint64(name: str, default: int, help: str) -> Uint64Value:
    return get_environ().uint64(name, default, help)


def uint64_var(target: Any, attr: str, name: str, default: int, help: str) -> None:
    get_environ().uint64_var(target, attr, name, default, help)


def float64(name: str, default: float, help: str) -> Float64Value:
    return get_environ().float64(name, default, help)


def float64_var(target: Any, attr: str, name: str, default: float, help: str) -> None:
    get_environ().float64_var(target, attr, name, default, help)


def string(name: str, default: str, help: str) -> StringValue:
    return get_environ().string(name, default, help)


def string_var(target: Any, attr: str, name: str, default: str, help: str) -> None:
    get_environ().string_var(target, attr, name, default, help)


def duration(name: str, default: timedelta, help: str) -> DurationValue:
    return get_environ().duration(name, default, help)


def duration_var(target: Any, attr: str, name: str, default: timedelta, help: str) -> None:
    get_environ().duration_var(target, attr, name, default, help)
