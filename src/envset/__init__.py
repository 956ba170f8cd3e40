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

"""Typed settings parsed from environment variables.

Declare named settings of known types, each with a default and help text,
then populate them in one pass from ``NAME=VALUE`` entries:

    >>> envs = EnvSet("app", ErrorHandling.CONTINUE)
    >>> host = envs.string("host", "localhost", "App host name")
    >>> port = envs.integer("port", 443, "App `port` to listen on")
    >>> envs.parse(["APP_HOST=example.org", "OTHER=1"])
    >>> host.value, port.value
    ('example.org', 443)

This package provides:
- Coercion units for bool, integer, float, string and duration settings,
  plus custom units
- The ``EnvSet`` registry with prefix scoping and error handling policies
- Deterministic usage and defaults rendering
- A process-wide default registry with module-level helpers
- Environment sources and a pydantic snapshot/export
"""

from .environ import get_environ, reset_for_testing
from .exceptions import (
    CoercionError,
    DeclarationError,
    EntrySyntaxError,
    EnvSetError,
    EnvSetFault,
    InvalidValueError,
    NoSuchSettingError,
    ParseError,
    ParsePanic,
    RangeError,
    SourceError,
)
from .export import EnvSetSnapshot, SettingSnapshot, export_settings, snapshot
from .registry import EnvSet, ErrorHandling, Setting
from .sources import environ_entries, load_entries
from .usage import format_defaults, unquote_usage
from .values import (
    BoolValue,
    DurationValue,
    Float64Value,
    FuncValue,
    Getter,
    Int64Value,
    IntValue,
    StringValue,
    TextValue,
    Uint64Value,
    UintValue,
    Value,
)

__version__ = "1.0.0"

__all__ = [
    "BoolValue",
    "CoercionError",
    "DeclarationError",
    "DurationValue",
    "EntrySyntaxError",
    "EnvSet",
    "EnvSetError",
    "EnvSetFault",
    "EnvSetSnapshot",
    "ErrorHandling",
    "Float64Value",
    "FuncValue",
    "Getter",
    "Int64Value",
    "IntValue",
    "InvalidValueError",
    "NoSuchSettingError",
    "ParseError",
    "ParsePanic",
    "RangeError",
    "Setting",
    "SettingSnapshot",
    "SourceError",
    "StringValue",
    "TextValue",
    "Uint64Value",
    "UintValue",
    "Value",
    "environ_entries",
    "export_settings",
    "format_defaults",
    "get_environ",
    "load_entries",
    "reset_for_testing",
    "snapshot",
    "unquote_usage",
]
