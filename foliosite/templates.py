"""Page templates and ``{{TOKEN}}`` substitution."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from .config import Config
from .errors import MissingTemplateError, MissingTemplateTokenError, UnresolvedTemplateTokenError

logger = logging.getLogger(__name__)

TOKEN_RE = re.compile(r"\{\{([A-Z][A-Z0-9_]*)\}\}")


def find_tokens(template: str) -> list[str]:
    """Return placeholder names in order of first appearance."""
    seen: dict[str, None] = {}
    for name in TOKEN_RE.findall(template):
        seen.setdefault(name, None)
    return list(seen)


def substitute_tokens(template: str, tokens: Mapping[str, str], *, source: str | None = None) -> str:
    """Replace every ``{{NAME}}`` placeholder in a single pass.

    Placeholders are matched against the template only; replacement values
    are inserted verbatim and never scanned again. Any placeholder without a
    replacement raises ``UnresolvedTemplateTokenError``.
    """
    unresolved = sorted({name for name in TOKEN_RE.findall(template) if name not in tokens})
    if unresolved:
        raise UnresolvedTemplateTokenError(unresolved, path=source)
    return TOKEN_RE.sub(lambda match: tokens[match.group(1)], template)


@dataclass(frozen=True, slots=True)
class TemplateSource:
    """Template text plus the project-relative label used in error messages."""

    label: str
    text: str


@dataclass(frozen=True, slots=True)
class PageSource:
    name: str
    template: TemplateSource
    required_tokens: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class PageTemplates:
    """Partials and page sources loaded once per build."""

    partials: Mapping[str, TemplateSource]
    pages: tuple[PageSource, ...]

    @classmethod
    def load(cls, config: Config) -> "PageTemplates":
        partials = {
            token: _read_template(config.partials_dir / filename, config)
            for token, filename in config.partials.items()
        }
        pages = tuple(
            PageSource(
                name=page.name,
                template=_read_template(config.page_source(page), config),
                required_tokens=tuple(page.required_tokens),
            )
            for page in config.pages
        )
        return cls(partials=partials, pages=pages)

    def assemble(self, sections: Mapping[str, str]) -> dict[str, str]:
        """Assemble every page from rendered section fragments.

        Partials are resolved first against the section tokens; pages are then
        resolved against the sections plus the assembled partials.
        """
        tokens: dict[str, str] = dict(sections)
        for token, partial in self.partials.items():
            tokens[token] = substitute_tokens(partial.text, sections, source=partial.label)

        assembled: dict[str, str] = {}
        for page in self.pages:
            present = set(find_tokens(page.template.text))
            missing = [token for token in page.required_tokens if token not in present]
            if missing:
                raise MissingTemplateTokenError(missing, path=page.template.label)
            assembled[page.name] = substitute_tokens(page.template.text, tokens, source=page.template.label)
            logger.debug("Assembled %s from %s", page.name, page.template.label)
        return assembled


def _read_template(path: Path, config: Config) -> TemplateSource:
    label = config.display_path(path)
    if not path.is_file():
        raise MissingTemplateError("template not found", path=label)
    return TemplateSource(label=label, text=path.read_text(encoding="utf-8"))
