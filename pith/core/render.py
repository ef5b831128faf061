"""Jinja2 rendering for template entries.

Templates are loaded by their path relative to the source root, so a
page can ``{% extends "_layout.html.j2" %}`` or include any other file
in the tree, ignored or not.
"""

from __future__ import annotations

import posixpath
from pathlib import PurePosixPath
from typing import TYPE_CHECKING, Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

if TYPE_CHECKING:
    from pith.core.artifact import Artifact
    from pith.core.project import Project

TEMPLATE_SUFFIXES: frozenset[str] = frozenset({".j2", ".jinja", ".jinja2"})

# Markup outputs get autoescaping; matched against the full template name.
_AUTOESCAPE_EXTENSIONS: tuple[str, ...] = tuple(
    f"{markup}{suffix}"
    for markup in ("html", "htm", "xml")
    for suffix in sorted(TEMPLATE_SUFFIXES)
)


def is_template(path: PurePosixPath) -> bool:
    """Whether ``path`` names a template (by its final suffix)."""
    return path.suffix in TEMPLATE_SUFFIXES


def relative_href(
    from_path: PurePosixPath,
    to_path: PurePosixPath,
    *,
    assume_content_negotiation: bool = False,
    assume_directory_index: bool = False,
) -> str:
    """Link from one output path to another, relative to the first's directory.

    >>> relative_href(PurePosixPath("a/b.html"), PurePosixPath("c/index.html"),
    ...               assume_directory_index=True)
    '../c/'
    >>> relative_href(PurePosixPath("index.html"), PurePosixPath("about.html"),
    ...               assume_content_negotiation=True)
    'about'
    """
    start = from_path.parent.as_posix()
    target = to_path.as_posix()
    if assume_directory_index and to_path.name == "index.html":
        target_dir = to_path.parent.as_posix()
        href = posixpath.relpath(target_dir, start)
        return "./" if href == "." else href + "/"
    href = posixpath.relpath(target, start)
    if assume_content_negotiation and href.endswith(".html"):
        href = href[: -len(".html")]
    return href


class TemplateRenderer:
    """Renders template entries with the project's helpers in scope.

    Parameters
    ----------
    project:
        The owning project.  Its helper registry and link attributes are
        read at render time, so changes made by the control script take
        effect on the next build.
    """

    def __init__(self, project: Project) -> None:
        self.project = project
        self.environment = Environment(
            loader=FileSystemLoader(str(project.source_root)),
            autoescape=select_autoescape(
                enabled_extensions=_AUTOESCAPE_EXTENSIONS,
                default_for_string=False,
            ),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            # Sources change between builds; always re-read templates
            cache_size=0,
        )

    def context_for(self, artifact: Artifact) -> dict[str, Any]:
        project = self.project

        def href(target: str | PurePosixPath) -> str:
            return relative_href(
                artifact.path,
                PurePosixPath(str(target)),
                assume_content_negotiation=project.assume_content_negotiation,
                assume_directory_index=project.assume_directory_index,
            )

        context: dict[str, Any] = project.helpers.as_dict()
        context.update(
            helpers=project.helpers,
            project=project,
            page=artifact.entry,
            output=artifact,
            href=href,
        )
        return context

    def render(self, artifact: Artifact) -> str:
        """Render the artifact's entry and return the output text."""
        template = self.environment.get_template(artifact.entry.path.as_posix())
        return template.render(self.context_for(artifact))
