"""Tests for template rendering and relative links."""

from __future__ import annotations

from pathlib import PurePosixPath

import pytest

from pith.core.render import is_template, relative_href


def href(src: str, dst: str, **flags) -> str:
    return relative_href(PurePosixPath(src), PurePosixPath(dst), **flags)


class TestRelativeHref:
    """Links are relative to the linking page's directory."""

    def test_same_directory(self):
        """Links between siblings are bare filenames."""
        assert href("index.html", "about.html") == "about.html"

    def test_up_and_across(self):
        """Links climb out of the source directory as needed."""
        assert href("blog/post.html", "css/site.css") == "../css/site.css"

    def test_content_negotiation_drops_html(self):
        """Content negotiation strips the .html extension."""
        assert href("index.html", "about.html", assume_content_negotiation=True) == "about"

    def test_content_negotiation_keeps_other_extensions(self):
        """Content negotiation leaves non-HTML extensions alone."""
        assert href("index.html", "feed.xml", assume_content_negotiation=True) == "feed.xml"

    def test_directory_index_for_root(self):
        """Directory index links to the root index end in a slash."""
        assert href("blog/post.html", "index.html", assume_directory_index=True) == "../"

    def test_directory_index_same_directory(self):
        """A link to the current directory's index is './'."""
        assert href("index.html", "index.html", assume_directory_index=True) == "./"

    def test_directory_index_subdirectory(self):
        """Directory index links point at the directory, not the file."""
        assert href("index.html", "blog/index.html", assume_directory_index=True) == "blog/"

    def test_directory_index_off_keeps_filename(self):
        """Without directory index the filename is kept."""
        assert href("index.html", "blog/index.html") == "blog/index.html"


class TestIsTemplate:
    """Template detection goes by the final suffix."""

    @pytest.mark.parametrize("name", ["a.html.j2", "a.jinja", "a.xml.jinja2"])
    def test_templates(self, name: str):
        """Template suffixes are recognized."""
        assert is_template(PurePosixPath(name)) is True

    @pytest.mark.parametrize("name", ["a.html", "a.j2.html", "j2"])
    def test_non_templates(self, name: str):
        """Only the final suffix decides template-ness."""
        assert is_template(PurePosixPath(name)) is False


class TestTemplateRenderer:
    """Templates render with helpers, links and layouts."""

    def test_renders_with_helpers_and_page(self, project, write):
        """Helpers and the current page are in the template context."""
        write("_pith/config.py", "project.helper('shout', lambda s: s.upper())\n")
        write("index.html.j2", "{{ shout('hi') }} {{ page.path }}")
        project.build()
        assert (project.output_root / "index.html").read_text() == "HI index.html.j2"

    def test_helpers_namespace(self, project, write):
        """Helpers are also reachable through the helpers namespace."""
        write("_pith/config.py", "project.helper('shout', lambda s: s.upper())\n")
        write("index.html.j2", "{{ helpers.shout('yo') }}")
        project.build()
        assert (project.output_root / "index.html").read_text() == "YO"

    def test_extends_ignored_layout(self, project, write):
        """Templates may extend an ignored layout that is never built itself."""
        write("_layout.html.j2", "<main>{% block body %}{% endblock %}</main>")
        write("index.html.j2", '{% extends "_layout.html.j2" %}{% block body %}hi{% endblock %}')
        project.build()
        assert project.artifact("_layout.html") is None
        assert (project.output_root / "index.html").read_text() == "<main>hi</main>"

    def test_html_output_is_autoescaped(self, project, write):
        """HTML templates autoescape; plain text templates do not."""
        write("_pith/config.py", "project.helper('tag', lambda: '<b>')\n")
        write("index.html.j2", "{{ tag() }}")
        write("plain.txt.j2", "{{ tag() }}")
        project.build()
        assert (project.output_root / "index.html").read_text() == "&lt;b&gt;"
        assert (project.output_root / "plain.txt").read_text() == "<b>"

    def test_href_honours_project_attributes(self, make_project, write):
        """href follows both link attributes of the project."""
        write("blog/post.html.j2", "{{ href('index.html') }}|{{ href('about.html') }}")
        project = make_project(
            options={"assume_directory_index": True, "assume_content_negotiation": True}
        )
        project.build()
        assert (project.output_root / "blog/post.html").read_text() == "../|../about"
