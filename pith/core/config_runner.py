"""Control script execution.

If ``_pith/config.py`` exists under the source root it is executed at
the start of every sync, so edits take effect on the next cycle without
restarting anything.  The script sees a single binding, ``project``,
which is a :class:`ConfigAPI` limited to three kinds of mutation:

* ``project.ignore("*.bak")`` adds an ignore pattern
* ``@project.helper`` or ``project.helper("name", fn)`` registers a helper
* ``project.assume_directory_index = True`` /
  ``project.configure(assume_content_negotiation=True)`` sets an attribute

Example control script::

    project.ignore("drafts")
    project.assume_directory_index = True

    @project.helper
    def shout(text):
        return text.upper()

Rerunning the script is safe: ignore patterns are a set and helper
registration overwrites in place.

No rollback
-----------
A script that raises part-way through aborts the sync with a
``ConfigurationError``, but whatever it mutated before the fault stays
applied.  Snapshotting and restoring project state around every run is
not worth its cost for a file the user edits by hand; the next
successful run brings the project back in line.
"""

from __future__ import annotations

import ast
import builtins
import logging
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING, Any

from pith.core.helpers import Helper

if TYPE_CHECKING:
    from collections.abc import Callable

    from pith.core.project import Project

logger = logging.getLogger(__name__)

CONTROL_FILE = PurePosixPath("_pith/config.py")

# Builtins visible to the control script.  No file, import, code
# evaluation or dynamic attribute primitives.  Together with the dunder
# attribute check in ConfigRunner.run this narrows the script's reach;
# it is not a security sandbox.
_ALLOWED_BUILTINS: tuple[str, ...] = (
    "abs", "all", "any", "bool", "callable", "dict", "divmod", "enumerate",
    "filter", "float", "format", "frozenset", "int", "isinstance",
    "issubclass", "iter", "len", "list", "map", "max", "min", "next",
    "object", "print", "range", "repr", "reversed", "round", "set",
    "slice", "sorted", "str", "sum", "tuple", "type", "zip",
    "ArithmeticError", "AttributeError", "Exception", "IndexError",
    "KeyError", "LookupError", "RuntimeError", "TypeError", "ValueError",
    "ZeroDivisionError", "__build_class__",
)
SAFE_BUILTINS: dict[str, Any] = {
    name: getattr(builtins, name) for name in _ALLOWED_BUILTINS if hasattr(builtins, name)
}


class ConfigurationError(RuntimeError):
    """Raised for unrecognized options or attributes, an unsafe output
    root, or any fault while executing the control script.

    It aborts the sync or build in progress; the project itself stays
    usable and the next sync runs the script again.
    """


def reject_dunder_access(tree: ast.AST, path: Path) -> None:
    """Refuse scripts that read or write ``__dunder__`` attributes.

    Attribute chains such as ``().__class__.__base__.__subclasses__()``
    reach arbitrary loaded classes without any builtin.  Defining dunder
    methods in a class body is still allowed.

    Raises
    ------
    ConfigurationError
        On the first dunder attribute found, naming its line.
    """
    for node in ast.walk(tree):
        if isinstance(node, ast.Attribute) and node.attr.startswith("__"):
            raise ConfigurationError(
                f"{path}:{node.lineno}: access to attribute {node.attr!r} is not allowed"
            )


class ConfigAPI:
    """The mutation surface bound as ``project`` inside the control script.

    Parameters
    ----------
    project:
        The running project.
    """

    __slots__ = ("_project",)

    def __init__(self, project: Project) -> None:
        object.__setattr__(self, "_project", project)

    def ignore(self, pattern: str) -> None:
        """Add an ignore pattern.  Adding an existing pattern is a no-op."""
        self._project.ignore(pattern)

    def helper(
        self, name: str | Helper | None = None, fn: Helper | None = None
    ) -> Callable[[Helper], Helper] | Helper:
        """Register a helper, as a call or as a decorator.

        ``project.helper("name", fn)`` registers directly;
        ``@project.helper`` and ``@project.helper("name")`` decorate.
        """
        registry = self._project.helpers
        if callable(name):
            return registry.helper()(name)
        if fn is not None:
            registry.register(name, fn)
            return fn
        return registry.helper(name)

    def configure(self, **attributes: Any) -> None:
        """Set several recognized attributes at once."""
        for name, value in attributes.items():
            self._project.set_attribute(name, value)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("__"):
            raise AttributeError(name)
        return self._project.get_attribute(name)

    def __setattr__(self, name: str, value: Any) -> None:
        self._project.set_attribute(name, value)


class ConfigRunner:
    """Executes the control script against a project.

    Parameters
    ----------
    project:
        The project the script configures.
    control_file:
        Path of the script relative to the source root.
    """

    def __init__(self, project: Project, control_file: PurePosixPath = CONTROL_FILE) -> None:
        self.project = project
        self.control_file = control_file
        self.api = ConfigAPI(project)

    @property
    def script_path(self) -> Path:
        return self.project.source_root / self.control_file

    def run(self) -> bool:
        """Execute the control script if present.

        Returns True if a script was executed.

        Raises
        ------
        ConfigurationError
            If the script cannot be read or compiled, touches a dunder
            attribute, or raises while running.  Mutations made before
            the fault are kept.
        """
        path = self.script_path
        if not path.is_file():
            return False

        try:
            source = path.read_text(encoding="utf-8")
            tree = ast.parse(source, filename=str(path))
        except (OSError, UnicodeDecodeError, SyntaxError) as exc:
            raise ConfigurationError(f"Cannot load {path}: {exc}") from exc
        reject_dunder_access(tree, path)
        code = compile(tree, str(path), "exec")

        namespace: dict[str, Any] = {
            "__builtins__": SAFE_BUILTINS,
            "__name__": "pith_config",
            "__file__": str(path),
            "project": self.api,
        }
        try:
            exec(code, namespace)
        except ConfigurationError:
            raise
        except Exception as exc:
            raise ConfigurationError(f"Error in {path}: {exc}") from exc

        logger.debug("Loaded control script %s", path)
        return True
