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

"""Environment sources for envset.

A source produces the ordered ``NAME=VALUE`` list that ``EnvSet.parse``
consumes. Sources never validate entries; a malformed line is passed
through so the registry reports it like any other bad entry.

Supported inputs:
- The process environment (or any mapping)
- ``.env`` style files: one ``NAME=VALUE`` per line, ``#`` comments, an
  optional ``export`` keyword and optional matching quotes around values
- JSON and YAML documents holding a flat mapping
"""

from collections.abc import Mapping
import json
import logging
import os
from pathlib import Path
from typing import Any

import yaml

from .exceptions import SourceError

logger = logging.getLogger(__name__)

_QUOTES = ("'", '"')


def environ_entries(environ: Mapping[str, str] | None = None) -> list[str]:
    """Format *environ* (default ``os.environ``) as ``NAME=VALUE`` entries."""
    mapping = os.environ if environ is None else environ
    return [f"{name}={value}" for name, value in mapping.items()]


def parse_env_lines(text: str) -> list[str]:
    """Turn the contents of a ``.env`` file into entries."""
    entries = []
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export ") :].lstrip()

        name, sep, value = line.partition("=")
        if not sep:
            entries.append(line)
            continue
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in _QUOTES:
            value = value[1:-1]
        entries.append(f"{name.strip()}={value}")
    return entries


def _format_scalar(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def mapping_entries(data: Any, origin: str = "mapping") -> list[str]:
    """Turn a flat mapping of names to scalars into entries.

    Raises:
        SourceError: If *data* is not a mapping or holds nested values
    """
    if data is None:
        return []
    if not isinstance(data, Mapping):
        raise SourceError(
            f"{origin} must contain a mapping, got {type(data).__name__}",
            context={"origin": origin},
        )

    entries = []
    for name, value in data.items():
        if isinstance(value, (Mapping, list)):
            raise SourceError(
                f"{origin} value for {name} must be a scalar",
                context={"origin": origin, "name": str(name)},
            )
        entries.append(f"{name}={_format_scalar(value)}")
    return entries


def load_entries(path: str | Path) -> list[str]:
    """Read entries from a ``.env``, JSON or YAML file.

    The format is chosen from the file suffix; ``.json``, ``.yaml`` and
    ``.yml`` are structured, anything else is read as ``.env`` lines.

    Raises:
        SourceError: If the file cannot be read or decoded
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceError(f"Failed to read {path}: {e}", context={"path": str(path)}) from e

    suffix = path.suffix.lower()
    try:
        if suffix == ".json":
            entries = mapping_entries(json.loads(text), str(path))
        elif suffix in (".yaml", ".yml"):
            entries = mapping_entries(yaml.safe_load(text), str(path))
        else:
            entries = parse_env_lines(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise SourceError(f"Failed to decode {path}: {e}", context={"path": str(path)}) from e

    logger.info("Loaded %d entries from %s", len(entries), path)
    return entries
