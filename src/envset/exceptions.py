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

"""Custom exceptions for envset.

Two families live here. ``EnvSetError`` subclasses are recoverable: they are
raised for bad input and reported through a registry's error handling
policy. ``EnvSetFault`` subclasses signal programming errors (or the panic
policy) and are never routed through a policy.
"""

from datetime import datetime, timezone
from typing import Any


class EnvSetError(Exception):
    """Base exception for all recoverable envset errors."""

    ERROR_CATEGORY = "GENERAL"
    ERROR_CODE = "ENV_0000"

    def __init__(
        self,
        message: str,
        user_message: str | None = None,
        error_code: str | None = None,
        context: dict[str, Any] | None = None,
        recovery_suggestion: str | None = None,
    ) -> None:
        super().__init__(message)
        self.user_message = user_message or message
        self.error_code = error_code or self.ERROR_CODE
        self.error_category = self.ERROR_CATEGORY
        self.context = context or {}
        self.recovery_suggestion = recovery_suggestion
        self.timestamp = datetime.now(timezone.utc)


class CoercionError(EnvSetError, ValueError):
    """Text could not be converted to a setting's type."""

    ERROR_CATEGORY = "CLIENT_ERROR"
    ERROR_CODE = "ENV_1000"
    DEFAULT_MESSAGE = "coercion error"

    def __init__(self, text: str | None = None, message: str | None = None) -> None:
        context = {"text": text} if text is not None else {}
        super().__init__(message or self.DEFAULT_MESSAGE, context=context)
        self.text = text


class ParseError(CoercionError):
    """Text is not a well-formed literal of the target type."""

    ERROR_CODE = "ENV_1001"
    DEFAULT_MESSAGE = "parse error"


class RangeError(CoercionError):
    """Text is well formed but does not fit the target width."""

    ERROR_CODE = "ENV_1002"
    DEFAULT_MESSAGE = "value out of range"


class EntrySyntaxError(EnvSetError):
    """An input entry is not of the form ``NAME=VALUE``."""

    ERROR_CATEGORY = "CLIENT_ERROR"
    ERROR_CODE = "ENV_1100"

    def __init__(self, entry: str) -> None:
        super().__init__(
            f"bad entry syntax: {entry}",
            context={"entry": entry},
            recovery_suggestion="Provide entries as NAME=VALUE",
        )
        self.entry = entry


class InvalidValueError(EnvSetError):
    """A declared setting rejected the value supplied for it."""

    ERROR_CATEGORY = "CLIENT_ERROR"
    ERROR_CODE = "ENV_1200"

    def __init__(self, name: str, value: str, cause: BaseException) -> None:
        super().__init__(
            f"invalid value {quote(value)} for setting {name}: {cause}",
            context={"name": name, "value": value, "cause": str(cause)},
            recovery_suggestion=f"Check the value supplied for {name}",
        )
        self.name = name
        self.value = value
        self.cause = cause


class NoSuchSettingError(EnvSetError):
    """A setting was addressed by a name that was never declared."""

    ERROR_CATEGORY = "CLIENT_ERROR"
    ERROR_CODE = "ENV_2000"

    def __init__(self, name: str) -> None:
        super().__init__(f"no such setting {name}", context={"name": name})
        self.name = name


class SourceError(EnvSetError):
    """An environment source could not be read or has the wrong shape."""

    ERROR_CATEGORY = "CLIENT_ERROR"
    ERROR_CODE = "ENV_3000"


class EnvSetFault(RuntimeError):
    """Base for unrecoverable envset faults."""


class DeclarationError(EnvSetFault):
    """A setting was declared with a bad or duplicate name."""


class ParsePanic(EnvSetFault):
    """Raised by a registry using the panic error handling policy."""

    def __init__(self, error: EnvSetError) -> None:
        super().__init__(str(error))
        self.error = error


def quote(text: str) -> str:
    """Return *text* double-quoted with backslash escapes."""
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    escaped = escaped.replace("\n", "\\n").replace("\t", "\\t").replace("\r", "\\r")
    return f'"{escaped}"'
