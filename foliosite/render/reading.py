"""Reading-list grid and filter controls.

The grid items and filter buttons carry data attributes read by the client
filter script. Their names and encodings are a fixed contract:

* item: ``data-reading-item``, ``data-year`` (four digits), ``data-tags``
  (comma-joined lowercase tags), ``data-title``, ``data-author`` and
  ``data-isbn`` (lowercased, whitespace-collapsed text; empty when absent)
* button: ``data-filter-group`` (``year`` or ``tag``) and
  ``data-filter-value`` (``all``, a year, or a tag)
"""

from __future__ import annotations

import re
from typing import Iterable, Sequence

from ..assets import AssetResolver, ImageVariants
from ..content.models import ReadingEntry
from ..sanitize import safe_asset_path
from .markup import asset_src, attr, dimension_attributes, initials, link_attributes, tag_list, text

FILTER_ALL = "all"

TAG_KEYWORDS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("security", re.compile(r"\b(?:secur\w*|hack\w*|crypt\w*|threat\w*|privacy|attack\w*|cyber\w*)", re.I)),
    ("engineering", re.compile(r"\b(?:code|coding|software|engineer\w*|program\w*|architect\w*|systems?|devops)\b", re.I)),
    ("data", re.compile(r"\b(?:data|analytics|statistic\w*|machine learning|algorithm\w*|ai)\b", re.I)),
    ("leadership", re.compile(r"\b(?:lead\w*|manag\w*|teams?|culture|coach\w*)\b", re.I)),
    ("business", re.compile(r"\b(?:business|startup\w*|strateg\w*|market\w*|product\w*|econom\w*)\b", re.I)),
    ("mindset", re.compile(r"\b(?:habit\w*|mind\w*|think\w*|focus|psycholog\w*|stoic\w*)\b", re.I)),
    ("history", re.compile(r"\b(?:history|histories|war|empire\w*|century)\b", re.I)),
)

_WHITESPACE_RE = re.compile(r"\s+")


def entry_tags(entry: ReadingEntry, default_tag: str = "general") -> list[str]:
    """Normalized explicit tags, or tags inferred from the title when none are given."""
    if entry.tags:
        return _unique(_search_text(tag.replace(",", " ")) for tag in entry.tags)
    return infer_tags(entry.title, default_tag)


def infer_tags(title: str, default_tag: str = "general") -> list[str]:
    inferred = [tag for tag, pattern in TAG_KEYWORDS if pattern.search(title)]
    return inferred or [default_tag]


def filter_attributes(entry: ReadingEntry, tags: Sequence[str]) -> str:
    """Return the data attributes the client filter script reads."""
    values = (
        ("data-year", str(entry.year)),
        ("data-tags", ",".join(tags)),
        ("data-title", _search_text(entry.title)),
        ("data-author", _search_text(entry.author or "")),
        ("data-isbn", _search_text(entry.isbn)),
    )
    return "data-reading-item " + " ".join(f'{name}="{attr(value)}"' for name, value in values)


def render_reading_grid(
    entries: Sequence[ReadingEntry],
    assets: AssetResolver,
    *,
    default_tag: str = "general",
) -> str:
    """Render one card per reading entry, in input order."""
    lines: list[str] = []
    for index, entry in enumerate(entries):
        path = f"reading[{index}]"
        tags = entry_tags(entry, default_tag)
        lines.append(f'<article class="reading-card" {filter_attributes(entry, tags)}>')
        lines.extend(f"  {line}" for line in _cover_lines(entry, path, assets))
        lines.append('  <div class="reading-card__body">')
        lines.append(f'    <h3 class="reading-card__title">{_title_markup(entry, path)}</h3>')
        if entry.author:
            lines.append(f'    <p class="reading-card__author">{text(entry.author)}</p>')
        lines.append(
            f'    <p class="reading-card__meta"><span class="reading-card__year">{entry.year}</span> '
            f'<span class="reading-card__isbn">ISBN {text(entry.isbn)}</span></p>'
        )
        lines.extend(f"    {line}" for line in tag_list(tags, label="Topics"))
        lines.append("  </div>")
        lines.append("</article>")
    return "\n".join(lines)


def render_reading_filters(entries: Sequence[ReadingEntry], *, default_tag: str = "general") -> str:
    """Render year and tag filter buttons (newest year first, tags alphabetical)."""
    years = sorted({entry.year for entry in entries}, reverse=True)
    tags = sorted({tag for entry in entries for tag in entry_tags(entry, default_tag)})

    lines: list[str] = []
    lines.extend(_filter_group("year", "Filter by year", "All years", [str(year) for year in years]))
    lines.extend(_filter_group("tag", "Filter by topic", "All topics", tags))
    return "\n".join(lines)


def _filter_group(group: str, label: str, all_label: str, values: Sequence[str]) -> list[str]:
    lines = [f'<div class="reading-filters__group" role="group" aria-label="{attr(label)}">']
    lines.append(_filter_button(group, FILTER_ALL, all_label, active=True))
    lines.extend(_filter_button(group, value, value, active=False) for value in values)
    lines.append("</div>")
    return lines


def _filter_button(group: str, value: str, label: str, *, active: bool) -> str:
    css_class = "filter-chip is-active" if active else "filter-chip"
    pressed = "true" if active else "false"
    return (
        f'  <button type="button" class="{css_class}" data-filter-group="{group}" '
        f'data-filter-value="{attr(value)}" aria-pressed="{pressed}">{text(label)}</button>'
    )


def _title_markup(entry: ReadingEntry, path: str) -> str:
    if not entry.link:
        return text(entry.title)
    return f'<a class="text-link" {link_attributes(entry.link, f"{path}.link")}>{text(entry.title)}</a>'


def _cover_lines(entry: ReadingEntry, path: str, assets: AssetResolver) -> list[str]:
    variants = assets.cover_variants(entry.cover, f"{path}.cover") if entry.cover else None
    if variants is None:
        return [
            '<div class="reading-card__cover reading-card__cover--placeholder" aria-hidden="true">',
            f"  <span>{text(initials(entry.title))}</span>",
            "</div>",
        ]
    return [
        '<figure class="reading-card__cover">',
        *(f"  {line}" for line in _picture_lines(entry, variants, f"{path}.cover", assets.url_prefix)),
        "</figure>",
    ]


def _picture_lines(entry: ReadingEntry, variants: ImageVariants, path: str, prefix: str) -> list[str]:
    alt = f"Cover of {entry.title}"
    img = f'<img src="{asset_src(variants.primary.path, path, prefix)}"'
    srcset = variants.srcset()
    if srcset:
        img += f' srcset="{attr(_checked_srcset(srcset, path, prefix))}"'
    img += f' alt="{attr(alt)}"{dimension_attributes(variants.primary)} loading="lazy" decoding="async">'

    webp_srcset = variants.webp_srcset()
    if not webp_srcset:
        return [img]
    return [
        "<picture>",
        f'  <source type="image/webp" srcset="{attr(_checked_srcset(webp_srcset, path, prefix))}">',
        f"  {img}",
        "</picture>",
    ]


def _checked_srcset(srcset: str, path: str, prefix: str) -> str:
    # Candidates are derived from a sanitized cover; each is checked again.
    candidates = []
    for candidate in srcset.split(", "):
        url, _, descriptor = candidate.partition(" ")
        checked = safe_asset_path(url, path)
        if checked:
            candidates.append(f"{prefix}{checked} {descriptor}".strip())
    return ", ".join(candidates)


def _search_text(value: str) -> str:
    return _WHITESPACE_RE.sub(" ", value).strip().lower()


def _unique(values: Iterable[str]) -> list[str]:
    seen: dict[str, None] = {}
    for value in values:
        if value and value not in seen:
            seen[value] = None
    return list(seen)
