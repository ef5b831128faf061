"""Tests for the control script runner and its mutation API."""

from __future__ import annotations

import pytest

from pith.core.config_runner import CONTROL_FILE, ConfigAPI, ConfigRunner, ConfigurationError


HELPER_SCRIPT = """\
project.ignore("*.bak")
project.assume_directory_index = True

@project.helper
def shout(text):
    return text.upper()

@project.helper("whisper")
def _whisper(text):
    return text.lower()
"""


class TestConfigRunner:
    """The runner executes the control script against the project."""

    def test_no_control_file(self, project):
        """run reports False when there is no control script."""
        assert ConfigRunner(project).run() is False

    def test_control_file_path(self, project):
        """The script lives at _pith/config.py below the source root."""
        runner = ConfigRunner(project)
        assert runner.control_file == CONTROL_FILE
        assert runner.script_path == project.source_root / "_pith" / "config.py"

    def test_script_mutates_project(self, project, write):
        """Ignores, attributes and helpers set by the script reach the project."""
        write("_pith/config.py", HELPER_SCRIPT)
        assert ConfigRunner(project).run() is True
        assert "*.bak" in project.ignore_patterns
        assert project.assume_directory_index is True
        assert project.helpers["shout"]("a") == "A"
        assert project.helpers["whisper"]("A") == "a"

    def test_rerun_is_idempotent(self, project, write):
        """Running the same script twice leaves the project unchanged."""
        write("_pith/config.py", HELPER_SCRIPT)
        registry = project.helpers
        project.sync()
        patterns = project.ignore_patterns
        project.sync()
        assert project.helpers is registry
        assert project.ignore_patterns == patterns
        assert registry.names() == ["shout", "whisper"]

    def test_redefined_helper_replaces_previous(self, project, write):
        """Editing a helper replaces it inside the same registry."""
        script = write("_pith/config.py", "project.helper('greet', lambda: 'v1')\n")
        project.sync()
        registry = project.helpers
        script.write_text("project.helper('greet', lambda: 'v2')\n")
        project.sync()
        assert registry["greet"]() == "v2"
        assert len(registry) == 1

    def test_configure_sets_several_attributes(self, project, write):
        """configure sets several attributes in one call."""
        write(
            "_pith/config.py",
            "project.configure(assume_directory_index=True, assume_content_negotiation=True)\n",
        )
        project.sync()
        assert project.assume_directory_index is True
        assert project.assume_content_negotiation is True

    def test_script_can_read_attributes(self, project, write):
        """The script can read the current attribute values."""
        write(
            "_pith/config.py",
            "project.assume_content_negotiation = not project.assume_directory_index\n",
        )
        project.sync()
        assert project.assume_content_negotiation is True

    def test_script_may_define_classes(self, project, write):
        """Class definitions work under the restricted builtins."""
        write(
            "_pith/config.py",
            "class Fmt:\n"
            "    def __call__(self, x):\n"
            "        return f'<{x}>'\n"
            "project.helper('fmt', Fmt())\n",
        )
        project.sync()
        assert project.helpers["fmt"]("a") == "<a>"


class TestConfigApi:
    """The script-facing API only exposes recognized mutations."""

    def test_unknown_attribute_assignment(self, project):
        """Assigning an unknown attribute raises ConfigurationError."""
        api = ConfigAPI(project)
        with pytest.raises(ConfigurationError):
            api.colour = "red"

    def test_unknown_attribute_read(self, project):
        """Reading an unknown attribute raises ConfigurationError."""
        with pytest.raises(ConfigurationError):
            ConfigAPI(project).colour

    def test_dunder_lookup_is_attribute_error(self, project):
        """Dunder lookups fail with AttributeError so introspection behaves."""
        assert hasattr(ConfigAPI(project), "__wrapped__") is False

    def test_helper_call_form_returns_function(self, project):
        """The call form registers and returns the function."""
        fn = lambda: 1  # noqa: E731
        assert ConfigAPI(project).helper("one", fn) is fn
        assert project.helpers["one"] is fn
