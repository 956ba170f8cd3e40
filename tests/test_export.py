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

"""
Tests for registry snapshots and export.
"""

from datetime import timedelta
import json

import pytest
import yaml

from envset import EnvSet, EnvSetSnapshot, ErrorHandling, export_settings, snapshot


@pytest.fixture()
def app_envs(output):
    """Provide a prefixed registry with a parsed mix of settings."""
    envs = EnvSet("app", ErrorHandling.CONTINUE)
    envs.set_output(output)
    envs.string("host", "localhost", "App host name")
    envs.integer("port", 443, "App `port` to listen on")
    envs.duration("timeout", timedelta(seconds=5), "Request timeout")
    envs.func("hook", "Callback setting", lambda value: None)
    envs.parse(["APP_PORT=8443"])
    return envs


class TestSnapshot:
    """Test capturing registry state."""

    def test_snapshot_fields(self, app_envs):
        """The snapshot should describe every setting in name order."""
        snap = snapshot(app_envs)
        assert isinstance(snap, EnvSetSnapshot)
        assert snap.prefix == "app"
        assert snap.parsed is True
        assert snap.error_handling is ErrorHandling.CONTINUE
        assert [s.name for s in snap.settings] == ["HOOK", "HOST", "PORT", "TIMEOUT"]

        port = snap.settings[2]
        assert port.placeholder == "port"
        assert port.default == "443"
        assert port.current == "8443"
        assert port.value == 8443
        assert port.is_set is True

        host = snap.settings[1]
        assert host.value == "localhost"
        assert host.is_set is False

    def test_units_without_getter(self, app_envs):
        """Function settings have no native value."""
        hook = snapshot(app_envs).settings[0]
        assert hook.value is None
        assert hook.current == ""

    def test_duration_native_value(self, app_envs):
        """Durations keep their timedelta value."""
        timeout = snapshot(app_envs).settings[3]
        assert timeout.value == timedelta(seconds=5)
        assert timeout.current == "5s"


class TestExportSettings:
    """Test serializing snapshots."""

    def test_json_export(self, app_envs):
        """JSON export should round-trip through json.loads."""
        data = json.loads(export_settings(app_envs))
        assert data["prefix"] == "app"
        assert data["error_handling"] == "continue"
        assert data["settings"][2]["name"] == "PORT"
        assert data["settings"][2]["current"] == "8443"

    def test_yaml_export(self, app_envs):
        """YAML export should keep the field order of the snapshot."""
        text = export_settings(app_envs, format="YAML")
        data = yaml.safe_load(text)
        assert list(data) == ["prefix", "parsed", "error_handling", "settings"]
        assert data["settings"][1]["default"] == "localhost"

    def test_unsupported_format(self, app_envs):
        """Unknown formats should be rejected."""
        with pytest.raises(ValueError, match="Unsupported export format: toml"):
            export_settings(app_envs, format="toml")
