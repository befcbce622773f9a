"""Build orchestration: load, validate, render, assemble, then write.

Pages are written only after every section has rendered and every page has
been assembled, so a failing build leaves previously generated files as they
were.
"""

from __future__ import annotations

import logging
import os
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from .config import Config
from .content import SiteData, load_collections, validate_site_data
from .context import BuildContext
from .render import (
    render_certifications,
    render_experience,
    render_featured_projects,
    render_reading_filters,
    render_reading_grid,
    render_skills,
)
from .render.markup import text as escape_text
from .reporting import BuildReport, assemble_report, build_collection_stats, write_report

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RenderedSite:
    """Fully assembled pages held in memory, keyed by output file name."""

    data: SiteData
    pages: dict[str, str]
    missing_assets: list[str]


@dataclass(slots=True)
class BuildResult:
    data: SiteData
    written: list[Path]
    report: BuildReport
    report_path: Path | None = None


def validate_only(config: Config) -> SiteData:
    """Load and validate every collection without rendering."""
    return validate_site_data(load_collections(config))


def render_sections(data: SiteData, context: BuildContext) -> dict[str, str]:
    """Render each section fragment and return them keyed by token name."""
    default_tag = context.config.reading.default_tag
    return {
        "SITE_NAME": escape_text(context.config.site_name),
        "FEATURED_PROJECTS": render_featured_projects(data.featured),
        "SKILLS": render_skills(data.skills),
        "EXPERIENCE": render_experience(data.experience),
        "CERTIFICATIONS": render_certifications(data.certifications, context.assets),
        "READING_GRID": render_reading_grid(data.reading, context.assets, default_tag=default_tag),
        "READING_FILTERS": render_reading_filters(data.reading, default_tag=default_tag),
        "READING_COUNT": str(len(data.reading)),
    }


def render_site(config: Config) -> RenderedSite:
    """Run every step except writing."""
    context = BuildContext.create(config)
    data = validate_only(config)
    sections = render_sections(data, context)
    pages = context.templates.assemble(sections)
    return RenderedSite(data=data, pages=pages, missing_assets=list(context.assets.missing))


def write_pages(pages: Mapping[str, str], output_dir: Path) -> list[Path]:
    """Write every page to a temporary file, then rename them all into place.

    No page is replaced until all of them have been written, so a failure
    while writing leaves the previous output untouched.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    staged: list[tuple[Path, Path]] = []
    try:
        for name, html in pages.items():
            handle, temp_name = tempfile.mkstemp(prefix=f".{name}.", suffix=".tmp", dir=output_dir)
            staged.append((Path(temp_name), output_dir / name))
            with os.fdopen(handle, "w", encoding="utf-8", newline="\n") as stream:
                stream.write(html)
            os.chmod(temp_name, 0o644)
        for temp_path, destination in staged:
            os.replace(temp_path, destination)
    finally:
        for temp_path, _ in staged:
            temp_path.unlink(missing_ok=True)
    return [destination for _, destination in staged]


def build_site(config: Config, *, report_path: Path | None = None) -> BuildResult:
    """Generate every configured page; raises ``SiteBuildError`` on any failure."""
    start = time.perf_counter()
    rendered = render_site(config)
    written = write_pages(rendered.pages, config.output_dir)
    for path in written:
        logger.info("Wrote %s", config.display_path(path))

    report = assemble_report(
        project=config.site_name,
        duration_seconds=time.perf_counter() - start,
        collections=build_collection_stats(rendered.data),
        pages=[config.display_path(path) for path in written],
        missing_assets=rendered.missing_assets,
    )
    target = report_path or config.report_path
    written_report = write_report(report, target) if target is not None else None
    return BuildResult(data=rendered.data, written=written, report=report, report_path=written_report)
