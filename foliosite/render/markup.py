"""Escaping and small markup helpers shared by the section renderers."""

from __future__ import annotations

import re
from html import escape
from typing import Iterable

from ..assets import ImageSource
from ..sanitize import is_external_href, safe_asset_path, safe_href

_SLUG_RE = re.compile(r"[^a-z0-9_-]+")


def text(value: str) -> str:
    """Escape text content (``& < > " '``)."""
    return escape(value, quote=True)


def attr(value: str) -> str:
    """Escape a value for a double-quoted attribute."""
    return escape(value, quote=True)


def link_attributes(raw_href: str, field_path: str) -> str:
    """Return ``href`` (and new-tab attributes for external links) for an anchor.

    The href is run through the permissive sanitizer again before escaping.
    """
    href = safe_href(raw_href, field_path)
    attributes = f'href="{attr(href)}"'
    if is_external_href(href):
        attributes += ' target="_blank" rel="noopener noreferrer"'
    return attributes


def asset_src(raw_path: str, field_path: str, prefix: str = "") -> str:
    """Re-check an asset path and escape it for a ``src`` attribute.

    ``prefix`` locates the asset root relative to the page being written.
    """
    checked = safe_asset_path(raw_path, field_path)
    return attr(prefix + checked) if checked else ""


def dimension_attributes(source: ImageSource) -> str:
    if source.width is None or source.height is None:
        return ""
    return f' width="{source.width}" height="{source.height}"'


def slug(value: str, fallback: str) -> str:
    cleaned = _SLUG_RE.sub("-", value.lower()).strip("-")
    return cleaned or fallback


def initials(value: str) -> str:
    letters = [word[0] for word in value.split() if word[:1].isalnum()]
    return "".join(letters[:2]).upper() or "?"


def tag_list(tags: Iterable[str], *, label: str, css_class: str = "tag-list") -> list[str]:
    items = list(tags)
    if not items:
        return []
    lines = [f'<ul class="{css_class}" aria-label="{attr(label)}">']
    lines.extend(f'  <li class="tag">{text(tag)}</li>' for tag in items)
    lines.append("</ul>")
    return lines


def indent_lines(lines: Iterable[str], depth: int = 1) -> list[str]:
    pad = "  " * depth
    return [f"{pad}{line}" if line else line for line in lines]
