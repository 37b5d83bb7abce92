"""Tests for placeholder interpolation."""

from sonarorchestrator.config import interpolate, interpolate_all


class TestInterpolate:
    """Tests for interpolate()."""

    def test_value_without_placeholder_is_unchanged(self):
        """Values without placeholders pass through untouched."""
        assert interpolate("plain value", {"plain": "x"}) == "plain value"

    def test_substitutes_known_key(self):
        """A known key is replaced by its value."""
        assert interpolate("${root}/bin", {"root": "/opt/sonar"}) == "/opt/sonar/bin"

    def test_substitutes_several_placeholders(self):
        """Every placeholder in a value is substituted."""
        props = {"host": "localhost", "port": "9000"}

        assert interpolate("http://${host}:${port}/", props) == "http://localhost:9000/"

    def test_missing_key_left_verbatim(self):
        """Unknown keys keep their literal placeholder."""
        assert interpolate("${missing}", {}) == "${missing}"
        assert interpolate("a-${missing}-b", {"other": "x"}) == "a-${missing}-b"

    def test_none_value_left_verbatim(self):
        """A key mapped to None does not resolve."""
        assert interpolate("${unset}", {"unset": None}) == "${unset}"

    def test_none_passes_through(self):
        """None input yields None."""
        assert interpolate(None, {"a": "b"}) is None

    def test_unterminated_placeholder_is_literal(self):
        """Text that only starts a placeholder is not touched."""
        assert interpolate("${root", {"root": "/opt"}) == "${root"

    def test_escaped_placeholder_is_literal(self):
        """$${key} yields the literal placeholder text."""
        props = {"root": "/opt"}

        assert interpolate("$${root}", props) == "${root}"
        assert interpolate("$${root}/bin:${root}/lib", props) == "${root}/bin:/opt/lib"


class TestInterpolateAll:
    """Tests for interpolate_all()."""

    def test_idempotent_without_placeholders(self):
        """A map without placeholders is returned unchanged."""
        props = {"a": "1", "b": "two"}

        assert interpolate_all(props) == props
        assert interpolate_all(interpolate_all(props)) == props

    def test_self_reference_terminates(self):
        """A key referencing itself is left as is."""
        assert interpolate_all({"a": "${a}"}) == {"a": "${a}"}

    def test_mutual_reference_terminates(self):
        """Two keys referencing each other swap their raw values once."""
        result = interpolate_all({"a": "${b}", "b": "${a}"})

        assert result == {"a": "${a}", "b": "${b}"}

    def test_single_pass_does_not_follow_chains(self):
        """Substituted text is not rescanned for placeholders."""
        result = interpolate_all({"a": "${b}", "b": "${c}", "c": "x"})

        assert result["a"] == "${c}"
        assert result["b"] == "x"
        assert result["c"] == "x"

    def test_lookup_uses_original_values(self):
        """Lookups do not depend on iteration order."""
        forward = interpolate_all({"a": "${b}", "b": "${c}", "c": "x"})
        backward = interpolate_all({"c": "x", "b": "${c}", "a": "${b}"})

        assert forward == backward
