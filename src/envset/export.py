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

"""Snapshot and export of a registry's settings.

``snapshot`` captures the declared settings of an ``EnvSet`` as pydantic
models, in name order, and ``export_settings`` serializes that snapshot to
JSON or YAML. Native values are included for units that expose them and
whose type serializes cleanly; anything else is reported as text only.
"""

from datetime import timedelta
import json
from typing import Any

from pydantic import BaseModel, Field
import yaml

from .registry import EnvSet, ErrorHandling, Setting
from .usage import unquote_usage
from .values import Getter

_NATIVE_TYPES = (bool, int, float, str, timedelta)


class SettingSnapshot(BaseModel):
    """State of one declared setting."""

    name: str = Field(description="Canonical uppercase setting name")
    help: str = Field(default="", description="Help text as declared")
    placeholder: str = Field(description="Placeholder shown in usage output")
    default: str = Field(description="Default value captured at declaration")
    current: str = Field(description="Current value rendered as text")
    value: bool | int | float | str | timedelta | None = Field(
        default=None,
        description="Current native value, when the unit exposes one",
    )
    is_set: bool = Field(default=False, description="Set by the most recent parse or set call")


class EnvSetSnapshot(BaseModel):
    """State of a whole registry."""

    prefix: str = ""
    parsed: bool = False
    error_handling: ErrorHandling = ErrorHandling.CONTINUE
    settings: list[SettingSnapshot] = Field(default_factory=list)


def _native_value(setting: Setting) -> Any:
    if not isinstance(setting.value, Getter):
        return None
    value = setting.value.get()
    return value if isinstance(value, _NATIVE_TYPES) else None


def snapshot(envset: EnvSet) -> EnvSetSnapshot:
    """Capture the declared settings of *envset*."""
    set_names: set[str] = set()
    envset.visit(lambda setting: set_names.add(setting.name))

    settings: list[SettingSnapshot] = []

    def capture(setting: Setting) -> None:
        placeholder, _ = unquote_usage(setting)
        settings.append(
            SettingSnapshot(
                name=setting.name,
                help=setting.help,
                placeholder=placeholder,
                default=setting.default,
                current=str(setting.value),
                value=_native_value(setting),
                is_set=setting.name in set_names,
            ),
        )

    envset.visit_all(capture)
    return EnvSetSnapshot(
        prefix=envset.prefix,
        parsed=envset.parsed,
        error_handling=envset.error_handling,
        settings=settings,
    )


def export_settings(envset: EnvSet, format: str = "json") -> str:
    """Export the settings of *envset* as JSON or YAML text.

    Raises:
        ValueError: If *format* is neither ``json`` nor ``yaml``
    """
    data = snapshot(envset).model_dump(mode="json")
    fmt = format.lower()
    if fmt == "yaml":
        return str(yaml.safe_dump(data, default_flow_style=False, indent=2, sort_keys=False))
    if fmt == "json":
        return json.dumps(data, indent=2)
    raise ValueError(f"Unsupported export format: {format}")
