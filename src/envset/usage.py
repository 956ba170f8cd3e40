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

"""Usage and defaults rendering for envset registries.

For an integer setting ``X`` the defaults listing has the form::

      X int   usage-message-for-x (default 7)

The parenthetical default is omitted when it equals the zero value of the
setting's type. The listed placeholder (``int`` here) can be changed by
placing a back-quoted name in the help text: the first such item is shown
as the placeholder and the back quotes are stripped from the help text.
Given ``string("DIR", "", "search `directory` for include files")`` the
output is::

      DIR directory   search directory for include files
"""

import logging
from typing import TYPE_CHECKING

from .exceptions import quote
from .values import StringValue

if TYPE_CHECKING:
    from .registry import EnvSet, Setting

logger = logging.getLogger(__name__)

INDENT = "      "

# Spaces between the widest name column and the help text.
COLUMN_GAP = 3


def unquote_usage(setting: "Setting") -> tuple[str, str]:
    """Extract a back-quoted placeholder from a setting's help text.

    Given ``"a `name` to show"`` this returns ``("name", "a name to show")``.
    Without a matched pair of back quotes the placeholder is inferred from
    the setting's coercion unit and the help text is returned unchanged.
    """
    help_text = setting.help
    start = help_text.find("`")
    if start != -1:
        end = help_text.find("`", start + 1)
        if end != -1:
            name = help_text[start + 1 : end]
            return name, help_text[:start] + name + help_text[end + 1 :]
    return getattr(setting.value, "placeholder", "value"), help_text


def is_zero_value(setting: "Setting", text: str) -> bool:
    """Report whether *text* is how a zero value of the setting's type renders.

    Building or rendering the zero value runs caller code for custom units
    and may raise anything.
    """
    zero = type(setting.value).zero()
    return text == str(zero)


def format_defaults(envset: "EnvSet") -> str:
    """Render the defaults listing for every declared setting, in name order."""
    prefix = envset.scope_prefix()
    rows: list[tuple[str, str]] = []
    faults: list[str] = []

    def add_row(setting: "Setting") -> None:
        head = f"{INDENT}{prefix}{setting.name}"
        name, help_text = unquote_usage(setting)
        if name:
            head += " " + name

        try:
            zero = is_zero_value(setting, setting.default)
        except Exception as e:
            logger.warning("Could not render zero value for setting %s: %s", setting.name, e)
            faults.append(
                f"fault rendering zero value for type {type(setting.value).__qualname__} "
                f"for setting {setting.name}: {e}",
            )
        else:
            if not zero:
                if isinstance(setting.value, StringValue):
                    help_text += f" (default {quote(setting.default)})"
                else:
                    help_text += f" (default {setting.default})"

        rows.append((head, help_text))

    envset.visit_all(add_row)
    if not rows:
        return ""

    column = max(len(head) for head, _ in rows) + COLUMN_GAP
    continuation = "\n" + " " * column
    lines = [head.ljust(column) + help_text.replace("\n", continuation) for head, help_text in rows]

    # Faults follow the listing, separated by a blank line.
    if faults:
        lines.append("")
        lines.extend(faults)
    return "\n".join(lines) + "\n"


def print_defaults(envset: "EnvSet") -> None:
    """Write the defaults listing to the registry's output sink."""
    envset.output.write(format_defaults(envset))


def usage_header(envset: "EnvSet") -> str:
    if envset.prefix:
        return f"Usage of {envset.prefix}:"
    return "Usage:"


def default_usage(envset: "EnvSet") -> None:
    """Write a usage header followed by the defaults listing."""
    print(usage_header(envset), file=envset.output)
    print_defaults(envset)
