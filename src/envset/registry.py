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

"""Setting registry for envset.

An ``EnvSet`` holds a collection of declared settings and populates them in
one pass from a list of ``NAME=VALUE`` entries:

- Names are case-insensitive and stored uppercased. A name may not contain
  ``=`` and may be declared only once; violating either raises
  ``DeclarationError``.
- A registry with a prefix only considers entries named
  ``<PREFIX>_<NAME>``. Entries outside the prefix, and entries naming
  undeclared settings, are skipped silently.
- The first entry that fails to parse stops the pass. The failure is
  written to the output sink, the usage callback runs and the registry's
  ``ErrorHandling`` policy decides what happens next.

Registries are not thread-safe. Declare everything during startup on one
thread, parse once, and only read afterwards.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
import logging
import sys
from typing import Any, TextIO, TypeVar

from . import usage as usage_renderer
from .exceptions import (
    DeclarationError,
    EntrySyntaxError,
    InvalidValueError,
    NoSuchSettingError,
    ParsePanic,
    quote,
)
from .values import (
    BoolValue,
    BoundValue,
    DurationValue,
    Float64Value,
    FuncValue,
    Int64Value,
    IntValue,
    StringValue,
    TextValue,
    Uint64Value,
    UintValue,
    Value,
)

logger = logging.getLogger(__name__)

V = TypeVar("V", bound=BoundValue)

# Exit status used by the exit policy.
EXIT_STATUS = 2


class ErrorHandling(str, Enum):
    """How ``EnvSet.parse`` behaves when an entry fails to parse.

    Attributes:
        CONTINUE: Raise the recoverable error to the caller
        EXIT: Terminate the process with exit status 2
        PANIC: Raise ``ParsePanic`` carrying the error
    """

    CONTINUE = "continue"
    EXIT = "exit"
    PANIC = "panic"


@dataclass(frozen=True)
class Setting:
    """A declared setting.

    Attributes:
        name: Canonical uppercase name, without any registry prefix
        help: Help text shown in usage output
        value: Coercion unit holding the current value
        default: Text of the value at declaration time, never recomputed
    """

    name: str
    help: str
    value: Value
    default: str


class EnvSet:
    """A registry of typed settings parsed from ``NAME=VALUE`` entries."""

    def __init__(
        self,
        prefix: str = "",
        error_handling: ErrorHandling = ErrorHandling.CONTINUE,
    ) -> None:
        """Create an empty registry.

        Args:
            prefix: Scope prefix; when set only ``<PREFIX>_<NAME>`` entries
                are parsed and the prefix labels usage output
            error_handling: Policy applied when parsing fails
        """
        # Called on parse failure; None selects the default usage message.
        self.usage: Callable[[], None] | None = None
        self._prefix = prefix
        self._error_handling = error_handling
        self._parsed = False
        self._formal: dict[str, Setting] = {}
        self._actual: dict[str, Setting] = {}
        self._output: TextIO | None = None

    def init(self, prefix: str, error_handling: ErrorHandling) -> None:
        """Reset the prefix and error handling policy."""
        self._prefix = prefix
        self._error_handling = error_handling

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def error_handling(self) -> ErrorHandling:
        return self._error_handling

    @property
    def parsed(self) -> bool:
        """Whether ``parse`` has been called, whatever its outcome."""
        return self._parsed

    @property
    def output(self) -> TextIO:
        """Destination for usage and error messages, ``sys.stderr`` if unset."""
        if self._output is None:
            return sys.stderr
        return self._output

    def set_output(self, output: TextIO | None) -> None:
        """Set the destination for usage and error messages."""
        self._output = output

    def scope_prefix(self) -> str:
        """Return the prefix as it appears on entry names, e.g. ``APP_``."""
        if not self._prefix:
            return ""
        return self._prefix.removeprefix("_").upper() + "_"

    # -- Querying --

    def visit_all(self, fn: Callable[[Setting], Any]) -> None:
        """Call *fn* for every declared setting in name order."""
        for setting in _sorted_settings(self._formal):
            fn(setting)

    def visit(self, fn: Callable[[Setting], Any]) -> None:
        """Call *fn* in name order for the settings set by the last parse."""
        for setting in _sorted_settings(self._actual):
            fn(setting)

    def lookup(self, name: str) -> Setting | None:
        """Return the setting declared as *name*, or None."""
        return self._formal.get(name.upper())

    def num_set(self) -> int:
        """Return the number of settings that have been set."""
        return len(self._actual)

    def set(self, name: str, value: str) -> None:
        """Set the named setting outside of a parse pass.

        Raises:
            NoSuchSettingError: If *name* was never declared
            InvalidValueError: If the setting rejects *value*
        """
        name = name.upper()
        setting = self._formal.get(name)
        if setting is None:
            raise NoSuchSettingError(name)
        try:
            setting.value.set(value)
        except (ValueError, TypeError) as e:
            raise InvalidValueError(name, value, e) from e
        self._actual[name] = setting

    # -- Declaration --

    def var(self, value: Value, name: str, help: str) -> None:
        """Declare a setting backed by an arbitrary coercion unit.

        The unit's current rendering is captured as the default.

        Raises:
            DeclarationError: If *name* contains ``=`` or is already declared
        """
        if "=" in name:
            raise DeclarationError(self._report(f"setting {quote(name)} contains ="))

        name = name.upper()
        if name in self._formal:
            if self._prefix:
                message = f"{self._prefix} setting redefined: {name}"
            else:
                message = f"setting redefined: {name}"
            raise DeclarationError(self._report(message))

        self._formal[name] = Setting(name=name, help=help, value=value, default=str(value))
        logger.debug("Declared setting %s (%s)", name, type(value).__name__)

    def func(self, name: str, help: str, fn: Callable[[str], Any]) -> None:
        """Declare a setting that passes every value it receives to *fn*.

        *fn* signals a bad value by raising ``ValueError``.
        """
        self.var(FuncValue(fn), name, help)

    def text_var(
        self,
        target: Any,
        attr: str,
        name: str,
        default: Any,
        help: str,
        parse: Callable[[str], Any],
        format: Callable[[Any], str] = str,
        kind: type | None = None,
    ) -> None:
        """Declare a setting stored on ``target.attr`` via custom callables.

        Args:
            target: Object owning the storage attribute
            attr: Attribute name on *target*
            name: Setting name
            default: Initial value, stored on *target* immediately
            help: Help text
            parse: Converts text to a stored object
            format: Converts a stored object back to text
            kind: Expected type of stored objects; *default* must match it

        Raises:
            DeclarationError: If *default* is not an instance of *kind*
        """
        if kind is not None and default is not None and not isinstance(default, kind):
            raise DeclarationError(
                "default type does not match variable type: "
                f"{type(default).__name__} != {kind.__name__}",
            )
        self.var(TextValue(parse, format, default, bind=(target, attr)), name, help)

    def _declare(self, cls: type[V], name: str, default: Any, help: str) -> V:
        value = cls(default)
        self.var(value, name, help)
        return value

    def _declare_bound(
        self,
        cls: type[BoundValue],
        target: Any,
        attr: str,
        name: str,
        default: Any,
        help: str,
    ) -> None:
        self.var(cls(default, bind=(target, attr)), name, help)

    def boolean(self, name: str, default: bool, help: str) -> BoolValue:
        """Declare a bool setting and return the unit holding its value."""
        return self._declare(BoolValue, name, default, help)

    def boolean_var(self, target: Any, attr: str, name: str, default: bool, help: str) -> None:
        """Declare a bool setting stored on ``target.attr``."""
        self._declare_bound(BoolValue, target, attr, name, default, help)

    def integer(self, name: str, default: int, help: str) -> IntValue:
        """Declare an int setting and return the unit holding its value."""
        return self._declare(IntValue, name, default, help)

    def integer_var(self, target: Any, attr: str, name: str, default: int, help: str) -> None:
        """Declare an int setting stored on ``target.attr``."""
        self._declare_bound(IntValue, target, attr, name, default, help)

    def int64(self, name: str, default: int, help: str) -> Int64Value:
        return self._declare(Int64Value, name, default, help)

    def int64_var(self, target: Any, attr: str, name: str, default: int, help: str) -> None:
        self._declare_bound(Int64Value, target, attr, name, default, help)

    def uint(self, name: str, default: int, help: str) -> UintValue:
        return self._declare(UintValue, name, default, help)

    def uint_var(self, target: Any, attr: str, name: str, default: int, help: str) -> None:
        self._declare_bound(UintValue, target, attr, name, default, help)

    def uint64(self, name: str, default: int, help: str) -> Uint64Value:
        return self._declare(Uint64Value, name, default, help)

    def uint64_var(self, target: Any, attr: str, name: str, default: int, help: str) -> None:
        self._declare_bound(Uint64Value, target, attr, name, default, help)

    def float64(self, name: str, default: float, help: str) -> Float64Value:
        return self._declare(Float64Value, name, default, help)

    def float64_var(self, target: Any, attr: str, name: str, default: float, help: str) -> None:
        self._declare_bound(Float64Value, target, attr, name, default, help)

    def string(self, name: str, default: str, help: str) -> StringValue:
        return self._declare(StringValue, name, default, help)

    def string_var(self, target: Any, attr: str, name: str, default: str, help: str) -> None:
        self._declare_bound(StringValue, target, attr, name, default, help)

    def duration(self, name: str, default: timedelta, help: str) -> DurationValue:
        """Declare a duration setting, e.g. ``1h30m``, and return its unit."""
        return self._declare(DurationValue, name, default, help)

    def duration_var(
        self,
        target: Any,
        attr: str,
        name: str,
        default: timedelta,
        help: str,
    ) -> None:
        self._declare_bound(DurationValue, target, attr, name, default, help)

    # -- Parsing --

    def parse(self, entries: Iterable[str]) -> None:
        """Parse ``NAME=VALUE`` entries into the declared settings.

        Entries are processed in order and processing stops at the first
        failure. Call after every setting is declared.

        Raises:
            EntrySyntaxError: Under ``CONTINUE``, for an entry without ``=``
            InvalidValueError: Under ``CONTINUE``, for a rejected value
            ParsePanic: Under ``PANIC``, for either failure
            SystemExit: Under ``EXIT``, for either failure
        """
        self._parsed = True
        self._actual = {}
        try:
            for entry in entries:
                self._parse_one(entry)
        except (EntrySyntaxError, InvalidValueError) as err:
            logger.warning("Parse failed: %s", err)
            if self._error_handling is ErrorHandling.EXIT:
                logger.error("Exiting with status %d after parse failure", EXIT_STATUS)
                sys.exit(EXIT_STATUS)
            if self._error_handling is ErrorHandling.PANIC:
                raise ParsePanic(err) from err
            raise

        logger.debug("Parsed entries, %d settings set", len(self._actual))

    def _parse_one(self, entry: str) -> None:
        """Apply a single entry, skipping it if it is out of scope."""
        raw_name, sep, value = entry.partition("=")
        if not sep:
            raise self._fail(EntrySyntaxError(entry))

        name = raw_name.upper()
        prefix = self.scope_prefix()
        if not name.startswith(prefix):
            return
        name = name[len(prefix) :]

        setting = self._formal.get(name)
        if setting is None:
            return

        try:
            setting.value.set(value)
        except (ValueError, TypeError) as e:
            raise self._fail(InvalidValueError(name, value, e)) from e

        self._actual[name] = setting

    # -- Output --

    def print_defaults(self) -> None:
        """Write the defaults listing to the output sink."""
        usage_renderer.print_defaults(self)

    def default_usage(self) -> None:
        """Write a usage header and the defaults listing to the output sink."""
        usage_renderer.default_usage(self)

    def _report(self, message: str) -> str:
        """Write *message* to the output sink and return it."""
        print(message, file=self.output)
        return message

    def _fail(self, error: InvalidValueError | EntrySyntaxError) -> Exception:
        """Report *error* and the usage message, then return *error*."""
        self._report(str(error))
        if self.usage is None:
            self.default_usage()
        else:
            self.usage()
        return error


def _sorted_settings(settings: dict[str, Setting]) -> list[Setting]:
    """Return the settings in lexicographical name order."""
    return [settings[name] for name in sorted(settings)]
