"""
Tests for usage and defaults rendering.
"""

from datetime import timedelta

import pytest

from envset import EnvSet, ErrorHandling, TextValue, Value, format_defaults, unquote_usage
from envset.usage import usage_header


class StringList(Value):
    """Accumulating unit rendering as a bracketed list."""

    placeholder = "list"

    def __init__(self, items=None):
        self.items = list(items or [])

    def set(self, text):
        self.items.append(text)

    def __str__(self):
        return "[" + " ".join(self.items) + "]"


class ZeroPanicker(Value):
    """Unit whose zero instance cannot be rendered."""

    def __init__(self, dont_panic=False, value=""):
        self.dont_panic = dont_panic
        self.value = value

    def set(self, text):
        self.value = text

    def __str__(self):
        if not self.dont_panic:
            raise RuntimeError("panic!")
        return self.value


DEFAULT_OUTPUT = """\
      PRINTDEFAULTS_A bool              for bootstrapping, allow 'any' type
      PRINTDEFAULTS_ALONGENVNAME bool   disable bounds checking
      PRINTDEFAULTS_C bool              a boolean defaulting to true (default true)
      PRINTDEFAULTS_D path              set relative path for local imports
      PRINTDEFAULTS_E string            issue 23543 (default "0")
      PRINTDEFAULTS_F number            a non-zero number (default 2.7)
      PRINTDEFAULTS_G float             a float that defaults to zero
      PRINTDEFAULTS_M string            a multiline
                                        help
                                        string
      PRINTDEFAULTS_MAXT timeout        set timeout for dial
      PRINTDEFAULTS_N int               a non-zero int (default 27)
      PRINTDEFAULTS_O bool              a setting
                                        multiline help string (default true)
      PRINTDEFAULTS_V list              a list of strings (default [a b])
      PRINTDEFAULTS_Z int               an int that defaults to zero
      PRINTDEFAULTS_ZP0 value           a setting whose rendering fails when it is zero
      PRINTDEFAULTS_ZP1 value           a setting whose rendering fails when it is zero

fault rendering zero value for type ZeroPanicker for setting ZP0: panic!
fault rendering zero value for type ZeroPanicker for setting ZP1: panic!
"""


@pytest.fixture()
def print_defaults_envs(output):
    """Provide a prefixed registry declaring a mix of settings and faulty units."""
    envs = EnvSet("PrintDefaults", ErrorHandling.CONTINUE)
    envs.set_output(output)
    envs.boolean("A", False, "for bootstrapping, allow 'any' type")
    envs.boolean("Alongenvname", False, "disable bounds checking")
    envs.boolean("C", True, "a boolean defaulting to true")
    envs.string("D", "", "set relative `path` for local imports")
    envs.string("E", "0", "issue 23543")
    envs.float64("F", 2.7, "a non-zero `number`")
    envs.float64("G", 0, "a float that defaults to zero")
    envs.string("M", "", "a multiline\nhelp\nstring")
    envs.duration("MAXT", timedelta(0), "set `timeout` for dial")
    envs.integer("N", 27, "a non-zero int")
    envs.boolean("O", True, "a setting\nmultiline help string")
    envs.var(StringList(["a", "b"]), "V", "a `list` of strings")
    envs.integer("Z", 0, "an int that defaults to zero")
    envs.var(
        ZeroPanicker(True, ""),
        "ZP0",
        "a setting whose rendering fails when it is zero",
    )
    envs.var(
        ZeroPanicker(True, "something"),
        "ZP1",
        "a setting whose rendering fails when it is zero",
    )
    return envs


class TestPrintDefaults:
    """Test the defaults listing."""

    def test_full_listing(self, print_defaults_envs, output):
        """The listing should align help text and list faults last."""
        print_defaults_envs.print_defaults()
        assert output.getvalue() == DEFAULT_OUTPUT

    def test_listing_is_stable(self, print_defaults_envs):
        """Rendering twice with no changes should give identical text."""
        assert format_defaults(print_defaults_envs) == format_defaults(print_defaults_envs)

    def test_listing_uses_declaration_defaults(self, print_defaults_envs):
        """Parsed values should not change the defaults shown."""
        print_defaults_envs.parse(["PRINTDEFAULTS_N=99", "PRINTDEFAULTS_Z=5"])
        listing = format_defaults(print_defaults_envs)
        assert "(default 27)" in listing
        assert "(default 99)" not in listing
        assert "(default 5)" not in listing

    def test_fault_is_logged(self, print_defaults_envs, caplog):
        """Zero-value rendering faults should be logged as warnings."""
        format_defaults(print_defaults_envs)
        assert "Could not render zero value for setting ZP0" in caplog.text

    def test_empty_registry(self, envs, output):
        """A registry with no settings renders nothing."""
        envs.print_defaults()
        assert output.getvalue() == ""

    def test_text_value_zero_default_suppressed(self, envs):
        """A custom unit holding nothing shows no default."""
        envs.var(TextValue(), "addr", "listen address")
        assert format_defaults(envs) == "      ADDR value   listen address\n"


class TestUnquoteUsage:
    """Test placeholder extraction from help text."""

    @pytest.mark.parametrize(
        ("help_text", "expected"),
        [
            (
                "search `directory` for include files",
                ("directory", "search directory for include files"),
            ),
            ("a `list` of `many` things", ("list", "a list of `many` things")),
            ("unterminated `quote", ("int", "unterminated `quote")),
            ("plain help", ("int", "plain help")),
            ("empty `` name", ("", "empty  name")),
        ],
    )
    def test_placeholder_extraction(self, envs, help_text, expected):
        """Only the first matched pair of back quotes names the placeholder."""
        envs.integer("x", 0, help_text)
        assert unquote_usage(envs.lookup("x")) == expected

    @pytest.mark.parametrize(
        ("method", "default", "placeholder"),
        [
            ("boolean", False, "bool"),
            ("integer", 0, "int"),
            ("int64", 0, "int"),
            ("uint", 0, "uint"),
            ("uint64", 0, "uint"),
            ("float64", 0.0, "float"),
            ("string", "", "string"),
            ("duration", timedelta(0), "duration"),
        ],
    )
    def test_inferred_placeholders(self, envs, method, default, placeholder):
        """Without back quotes the placeholder comes from the unit type."""
        getattr(envs, method)("x", default, "help")
        assert unquote_usage(envs.lookup("x"))[0] == placeholder

    def test_func_placeholder(self, envs):
        """Function settings use the generic placeholder."""
        envs.func("hook", "a hook", print)
        assert unquote_usage(envs.lookup("hook"))[0] == "value"

    def test_empty_placeholder_omitted_from_listing(self, envs):
        """An empty back-quoted name leaves no placeholder in the listing."""
        envs.boolean("verbose", False, "be ``verbose``")
        assert format_defaults(envs) == "      VERBOSE   be verbose``\n"


class TestDefaultUsage:
    """Test the usage header."""

    def test_header_without_prefix(self, envs, output):
        """An unprefixed registry uses a bare header."""
        envs.integer("port", 443, "App port")
        envs.default_usage()
        assert output.getvalue() == "Usage:\n      PORT int   App port (default 443)\n"

    def test_header_with_prefix(self, output):
        """A prefixed registry names its prefix in the header."""
        envs = EnvSet("app", ErrorHandling.CONTINUE)
        envs.set_output(output)
        envs.integer("port", 443, "App port")
        assert usage_header(envs) == "Usage of app:"
        envs.default_usage()
        assert output.getvalue() == "Usage of app:\n      APP_PORT int   App port (default 443)\n"
