"""Tests for the template registry."""

import pytest

from action_logger.errors import TemplateRegistryFrozen
from action_logger.templates import DEFAULT_TEMPLATES, TemplateRegistry, format_message


class TestFormatMessage:
    def test_formats_args(self):
        assert format_message("user %s logged in from %s", "bob", "10.0.0.1") == (
            "user bob logged in from 10.0.0.1"
        )

    def test_no_args_collapses_escaped_percent(self):
        assert format_message("100%% done") == "100% done"

    def test_no_args_with_placeholder_returns_format(self):
        assert format_message("value=%s") == "value=%s"

    def test_too_many_args_does_not_raise(self):
        result = format_message("only %s", 1, 2)
        assert result.startswith("only %s (format error:")
        assert "[1, 2]" in result

    def test_too_few_args_does_not_raise(self):
        result = format_message("%s and %s", "one")
        assert result.startswith("%s and %s (format error:")


class TestTemplateRegistry:
    def test_lookup_is_case_insensitive(self):
        registry = TemplateRegistry()
        registry.add_template("foo", "foo: %s")
        assert registry.resolve("FOO", 1) == "foo: 1"
        assert registry.resolve("Foo", 1) == "foo: 1"
        assert registry.resolve("foo", 1) == "foo: 1"
        assert dict(registry.templates) == {"FOO": "foo: %s"}

    def test_last_write_wins(self):
        registry = TemplateRegistry()
        registry.add_template("Greeting", "hello %s")
        registry.add_template("GREETING", "hi %s")
        assert len(registry) == 1
        assert registry.resolve("greeting", "ann") == "hi ann"

    def test_unknown_name_is_used_as_format(self):
        registry = TemplateRegistry()
        assert "X_UNKNOWN" not in registry
        assert registry.resolve("X_UNKNOWN", 1, 2) == format_message("X_UNKNOWN", 1, 2)

    def test_unknown_name_with_placeholders(self):
        registry = TemplateRegistry()
        assert registry.resolve("Action event (%s) recorded", "reboot") == (
            "Action event (reboot) recorded"
        )

    def test_default_templates(self):
        registry = TemplateRegistry()
        registry.load_default_templates()
        assert len(registry) == len(DEFAULT_TEMPLATES)
        assert registry.resolve("genericerror", "disk full") == "An error occurred: disk full"
        assert registry.resolve("ActionRecorded", "reboot", "c-1") == (
            "Action event (reboot) recorded for customer c-1"
        )

    def test_constructor_mapping(self):
        registry = TemplateRegistry({"a": "A=%s"})
        assert registry.resolve("A", 3) == "A=3"


class TestFreeze:
    def test_add_after_freeze_raises(self):
        registry = TemplateRegistry({"a": "A"})
        registry.freeze()
        assert registry.frozen is True
        with pytest.raises(TemplateRegistryFrozen):
            registry.add_template("b", "B")
        assert registry.resolve("a") == "A"

    def test_view_is_read_only(self):
        registry = TemplateRegistry({"a": "A"})
        with pytest.raises(TypeError):
            registry.templates["B"] = "B"


class TestTemplatesFile:
    def test_loads_yaml_mapping(self, tmp_path):
        path = tmp_path / "templates.yaml"
        path.write_text('DeviceOffline: "Device %s went offline"\nreboot: "Reboot of %s"\n')

        registry = TemplateRegistry()
        assert registry.load_templates_file(str(path)) == 2
        assert registry.resolve("deviceoffline", "aa:bb") == "Device aa:bb went offline"
        assert registry.resolve("REBOOT", "p1") == "Reboot of p1"

    def test_missing_file_is_skipped(self, tmp_path):
        registry = TemplateRegistry()
        assert registry.load_templates_file(str(tmp_path / "nope.yaml")) == 0
        assert len(registry) == 0

    def test_empty_file(self, tmp_path):
        path = tmp_path / "templates.yaml"
        path.write_text("")
        assert TemplateRegistry().load_templates_file(str(path)) == 0

    def test_non_mapping_rejected(self, tmp_path):
        path = tmp_path / "templates.yaml"
        path.write_text("- one\n- two\n")
        with pytest.raises(ValueError):
            TemplateRegistry().load_templates_file(str(path))
