from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from foliosite.config import load_config
from foliosite.errors import MissingTemplateError, MissingTemplateTokenError, UnresolvedTemplateTokenError
from foliosite.templates import PageSource, PageTemplates, TemplateSource, find_tokens, substitute_tokens


def test_substitute_tokens_basic() -> None:
    assert substitute_tokens("<p>{{FOO}}</p>{{BAR}}", {"FOO": "x", "BAR": "y"}) == "<p>x</p>y"


def test_substitute_tokens_replaces_every_occurrence() -> None:
    html = substitute_tokens("<h1>{{NAME}}</h1><p>{{NAME}} {{COUNT}}</p>", {"NAME": "Ada", "COUNT": "3"})
    assert html == "<h1>Ada</h1><p>Ada 3</p>"


def test_substitute_tokens_rejects_unknown_placeholders() -> None:
    with pytest.raises(UnresolvedTemplateTokenError) as excinfo:
        substitute_tokens("{{B}} {{A}} {{KNOWN}}", {"KNOWN": "x"}, source="src/index.html")

    assert excinfo.value.tokens == ["A", "B"]
    assert excinfo.value.path == "src/index.html"
    assert "{{A}}, {{B}}" in str(excinfo.value)


def test_substitution_is_single_pass() -> None:
    html = substitute_tokens("<p>{{TITLE}}</p>", {"TITLE": "{{SECRET}}", "SECRET": "leaked"})
    assert html == "<p>{{SECRET}}</p>"


def test_lowercase_braces_are_left_alone() -> None:
    template = "<script>const t = '{{ not_a_token }}';</script>{{X}}"
    assert substitute_tokens(template, {"X": "ok"}) == "<script>const t = '{{ not_a_token }}';</script>ok"


def test_find_tokens_preserves_first_appearance_order() -> None:
    assert find_tokens("{{NAV}} {{BODY}} {{NAV}} {{FOOTER}}") == ["NAV", "BODY", "FOOTER"]


def _templates(page_text: str, required: tuple[str, ...] = ("NAV", "FOOTER")) -> PageTemplates:
    return PageTemplates(
        partials={
            "NAV": TemplateSource("partials/nav.html", "<nav>{{SITE_NAME}}</nav>"),
            "FOOTER": TemplateSource("partials/footer.html", "<footer>&copy; {{SITE_NAME}}</footer>"),
        },
        pages=(PageSource("index.html", TemplateSource("src/index.html", page_text), required),),
    )


def test_assemble_resolves_partials_then_pages() -> None:
    templates = _templates("{{NAV}}<main>{{SKILLS}}</main>{{FOOTER}}")

    pages = templates.assemble({"SITE_NAME": "Ada &amp; Co", "SKILLS": "<ul></ul>"})

    assert pages == {
        "index.html": "<nav>Ada &amp; Co</nav><main><ul></ul></main><footer>&copy; Ada &amp; Co</footer>"
    }


def test_assemble_requires_configured_tokens() -> None:
    templates = _templates("<main>{{SKILLS}}</main>{{FOOTER}}")

    with pytest.raises(MissingTemplateTokenError) as excinfo:
        templates.assemble({"SITE_NAME": "Ada", "SKILLS": ""})
    assert excinfo.value.tokens == ["NAV"]
    assert excinfo.value.path == "src/index.html"


def test_assemble_rejects_unresolved_partial_tokens() -> None:
    templates = PageTemplates(
        partials={"NAV": TemplateSource("partials/nav.html", "<nav>{{MENU}}</nav>")},
        pages=(PageSource("index.html", TemplateSource("src/index.html", "{{NAV}}"), ("NAV",)),),
    )

    with pytest.raises(UnresolvedTemplateTokenError) as excinfo:
        templates.assemble({})
    assert excinfo.value.path == "partials/nav.html"


def test_load_reports_missing_partial(make_project: Callable[..., Path]) -> None:
    root = make_project()
    (root / "partials" / "footer.html").unlink()

    with pytest.raises(MissingTemplateError, match="template not found") as excinfo:
        PageTemplates.load(load_config(root))
    assert excinfo.value.path == "partials/footer.html"


def test_load_reads_pages_in_configured_order(make_project: Callable[..., Path]) -> None:
    root = make_project()
    templates = PageTemplates.load(load_config(root))

    assert [page.name for page in templates.pages] == ["index.html", "reading.html"]
    assert templates.pages[0].template.label == "src/index.html"
    assert set(templates.partials) == {"NAV", "FOOTER"}
