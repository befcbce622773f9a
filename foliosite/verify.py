"""Post-build checks over generated HTML pages.

Each page is parsed once. Every ``href``/``src``/``srcset`` value is checked
for dangerous schemes and, when it points inside the output directory, for
existence. Markup-level policy (new-tab links, inline styles, the reading
filter attributes) is checked on the same pass.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from html.parser import HTMLParser
from pathlib import Path
from typing import Iterable, Iterator, NamedTuple
from urllib.parse import unquote, urlsplit

READING_ITEM_ATTRIBUTES = ("data-year", "data-tags", "data-title", "data-author", "data-isbn")
FILTER_GROUPS = frozenset({"year", "tag"})
WARNING_KINDS = frozenset({"inline-style"})

_SOURCE_TAGS = frozenset({"img", "script", "iframe", "audio", "video", "source", "track", "embed"})
_MEDIA_TAGS = frozenset({"img", "picture", "source", "audio", "video", "track"})
_PLACEHOLDER_RE = re.compile(r"\{\{[^{}]*\}\}")
_DANGEROUS_SCHEME_RE = re.compile(r"^(?:javascript:|vbscript:|data:text)", re.IGNORECASE)
_INVISIBLE_RE = re.compile(r"[\x00-\x20\x7f]")
_SKIPPED_SCHEMES = frozenset({"https", "http", "mailto", "tel", "data"})


class IssueSeverity(Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(slots=True)
class VerificationIssue:
    """One finding on a generated page."""

    kind: str
    source: Path
    target: str
    message: str
    severity: IssueSeverity = IssueSeverity.ERROR


@dataclass(slots=True)
class VerificationReport:
    scanned_files: int
    issues: list[VerificationIssue] = field(default_factory=list)

    def _count(self, severity: IssueSeverity) -> int:
        return len([issue for issue in self.issues if issue.severity is severity])

    @property
    def error_count(self) -> int:
        return self._count(IssueSeverity.ERROR)

    @property
    def warning_count(self) -> int:
        return self._count(IssueSeverity.WARNING)


class _Reference(NamedTuple):
    tag: str
    attribute: str
    value: str


class _Finding(NamedTuple):
    kind: str
    target: str
    message: str


class _PageScanner(HTMLParser):
    """Collect link references and markup findings from one page."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.references: list[_Reference] = []
        self.findings: list[_Finding] = []

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        values = {name: value or "" for name, value in attrs}
        self._collect_references(tag, values)
        self._check_markup(tag, values)

    def _collect_references(self, tag: str, values: dict[str, str]) -> None:
        if tag in {"a", "area", "link"} and "href" in values:
            self.references.append(_Reference(tag, "href", values["href"]))
        if tag in _SOURCE_TAGS and values.get("src"):
            self.references.append(_Reference(tag, "src", values["src"]))
        if tag in {"img", "source"} and "srcset" in values:
            self.references.extend(_Reference(tag, "srcset", url) for url in _srcset_urls(values["srcset"]))

    def _check_markup(self, tag: str, values: dict[str, str]) -> None:
        if tag == "a" and values.get("target", "").lower() == "_blank":
            rel = set(values.get("rel", "").lower().split())
            if not {"noopener", "noreferrer"} <= rel:
                self.findings.append(
                    _Finding("unsafe-target", values.get("href", ""), 'new-tab link lacks rel="noopener noreferrer"')
                )
        if "style" in values:
            self.findings.append(_Finding("inline-style", tag, f"<{tag}> has an inline style attribute"))
        if "data-reading-item" in values:
            absent = [name for name in READING_ITEM_ATTRIBUTES if name not in values]
            if absent:
                self.findings.append(_Finding("contract", tag, f"reading item is missing {', '.join(absent)}"))
        if "data-filter-group" in values:
            group = values["data-filter-group"]
            if group not in FILTER_GROUPS or "data-filter-value" not in values:
                self.findings.append(
                    _Finding("contract", group, "filter control needs data-filter-group year|tag and data-filter-value")
                )


def verify_site(output_dir: Path, html_files: Iterable[Path] | None = None) -> VerificationReport:
    """Verify generated pages under ``output_dir``.

    When ``html_files`` is not given, the top-level ``*.html`` files of
    ``output_dir`` are scanned.
    """
    root = output_dir.resolve()
    pages = sorted(html_files) if html_files is not None else sorted(root.glob("*.html"))
    issues: list[VerificationIssue] = []
    for page in pages:
        issues.extend(_verify_page(page, root))
    return VerificationReport(scanned_files=len(pages), issues=issues)


def _verify_page(page: Path, root: Path) -> Iterator[VerificationIssue]:
    try:
        html = page.read_text(encoding="utf-8")
    except OSError as exc:
        yield VerificationIssue("unreadable", page, page.name, f"Unable to read page: {exc}")
        return

    for placeholder in sorted(set(_PLACEHOLDER_RE.findall(html))):
        yield VerificationIssue("placeholder", page, placeholder, f"Unresolved placeholder {placeholder}")

    scanner = _PageScanner()
    scanner.feed(html)
    scanner.close()

    for finding in scanner.findings:
        severity = IssueSeverity.WARNING if finding.kind in WARNING_KINDS else IssueSeverity.ERROR
        yield VerificationIssue(finding.kind, page, finding.target, finding.message, severity)

    for reference in scanner.references:
        issue = _check_reference(reference, page, root)
        if issue is not None:
            yield issue


def _check_reference(reference: _Reference, page: Path, root: Path) -> VerificationIssue | None:
    value = reference.value
    where = f"{reference.tag} {reference.attribute}"
    if _DANGEROUS_SCHEME_RE.match(_INVISIBLE_RE.sub("", value)):
        return VerificationIssue("unsafe-scheme", page, value, f"Dangerous URL scheme in {where}")

    local_path = _local_path(value)
    if local_path is None:
        return None

    base = root if local_path.startswith("/") else page.parent
    target = (base / local_path.lstrip("/")).resolve()
    if not target.is_relative_to(root):
        return VerificationIssue("out-of-bounds", page, value, f"{where} points outside the site: '{value}'")
    if _exists(target, local_path):
        return None
    return VerificationIssue(_missing_kind(reference.tag), page, value, f"Missing target for {where} '{value}'")


def _local_path(value: str) -> str | None:
    """Return the decoded path of a same-site reference, or None to skip it."""
    text = value.strip()
    if not text:
        return None
    parts = urlsplit(text)
    if parts.scheme.lower() in _SKIPPED_SCHEMES or parts.netloc:
        return None
    return unquote(parts.path) or None


def _exists(target: Path, local_path: str) -> bool:
    if target.is_file():
        return True
    # Directory-style links ("about/", "about") resolve to an index page.
    if local_path.endswith("/") or not target.suffix:
        return (target / "index.html").is_file()
    return False


def _srcset_urls(srcset: str) -> Iterator[str]:
    for candidate in srcset.split(","):
        url = candidate.strip().split(" ", 1)[0]
        if url:
            yield url


def _missing_kind(tag: str) -> str:
    if tag == "a":
        return "missing-page"
    if tag in _MEDIA_TAGS:
        return "missing-asset"
    return "missing-file"
