"""Renderers for the landing-page sections."""

from __future__ import annotations

from typing import Sequence

from ..assets import AssetResolver
from ..content.models import Certification, ExperienceEntry, FeaturedProject, SkillGroup
from .markup import (
    asset_src,
    attr,
    dimension_attributes,
    indent_lines,
    initials,
    link_attributes,
    slug,
    tag_list,
    text,
)


def render_featured_projects(projects: Sequence[FeaturedProject]) -> str:
    """Render featured projects as a sequence of project cards."""
    lines: list[str] = []
    for index, project in enumerate(projects):
        path = f"featured[{index}]"
        anchor = slug(project.id, f"{index + 1}")
        lines.append(f'<article class="project-card" id="project-{attr(anchor)}" data-animate>')
        lines.append('  <header class="project-card__header">')
        lines.append(f'    <h3 class="project-card__title">{text(project.title)}</h3>')
        lines.append(f'    <p class="project-card__timeframe">{text(project.timeframe)}</p>')
        lines.append("  </header>")
        lines.append('  <dl class="project-card__details">')
        lines.append("    <dt>Problem</dt>")
        lines.append(f"    <dd>{text(project.problem)}</dd>")
        lines.append("    <dt>Impact</dt>")
        lines.append(f"    <dd>{text(project.impact)}</dd>")
        lines.append("  </dl>")
        lines.extend(indent_lines(tag_list(project.tech, label="Technologies")))
        if project.links:
            lines.append('  <p class="project-card__links">')
            for link_index, link in enumerate(project.links):
                attributes = link_attributes(link.url, f"{path}.links[{link_index}].url")
                lines.append(f'    <a class="text-link" {attributes}>{text(link.label)}</a>')
            lines.append("  </p>")
        lines.append("</article>")
    return "\n".join(lines)


def render_skills(groups: Sequence[SkillGroup]) -> str:
    lines: list[str] = []
    for group in groups:
        lines.append('<div class="skill-group" data-animate>')
        lines.append(f'  <h3 class="skill-group__title">{text(group.category)}</h3>')
        lines.extend(indent_lines(tag_list(group.items, label=group.category, css_class="chip-list")))
        lines.append("</div>")
    return "\n".join(lines)


def render_experience(entries: Sequence[ExperienceEntry]) -> str:
    """Render the experience timeline, one item per role."""
    lines: list[str] = ['<ol class="timeline">']
    for entry in entries:
        lines.append('  <li class="timeline-item" data-animate>')
        lines.append('    <header class="timeline-item__header">')
        lines.append(f'      <h3 class="timeline-item__role">{text(entry.role)}</h3>')
        lines.append(f'      <p class="timeline-item__org">{text(entry.org)}</p>')
        lines.append(f'      <p class="timeline-item__dates">{text(entry.dates)}</p>')
        lines.append("    </header>")
        lines.append('    <ul class="timeline-item__impact">')
        lines.extend(f"      <li>{text(bullet)}</li>" for bullet in entry.impact_bullets)
        lines.append("    </ul>")
        lines.extend(indent_lines(tag_list(entry.tech, label="Technologies"), 2))
        lines.append("  </li>")
    lines.append("</ol>")
    return "\n".join(lines)


def render_certifications(certifications: Sequence[Certification], assets: AssetResolver) -> str:
    """Render certification cards.

    Icons are optional: a missing or absent icon file degrades to an
    initials badge and the miss is recorded on ``assets``.
    """
    lines: list[str] = ['<ul class="cert-grid">']
    for index, cert in enumerate(certifications):
        path = f"certifications[{index}]"
        lines.append('  <li class="cert-card" data-animate>')
        lines.append(f'    <a class="cert-card__link" {link_attributes(cert.link, f"{path}.link")}>')
        lines.append(f"      {_certification_icon(cert, path, assets)}")
        lines.append(f'      <span class="cert-card__title">{text(cert.title)}</span>')
        lines.append("    </a>")
        lines.append(f'    <p class="cert-card__issuer">{text(cert.issuer)}</p>')
        lines.append(f'    <p class="cert-card__issued">{text(cert.issued)}</p>')
        if cert.credential_id:
            lines.append(
                f'    <p class="cert-card__credential">Credential ID: {text(cert.credential_id)}</p>'
            )
        lines.append("  </li>")
    lines.append("</ul>")
    return "\n".join(lines)


def _certification_icon(cert: Certification, path: str, assets: AssetResolver) -> str:
    source = assets.icon(cert.icon, f"{path}.icon") if cert.icon else None
    if source is None:
        return (
            '<span class="cert-card__icon cert-card__icon--placeholder" aria-hidden="true">'
            f"{text(initials(cert.issuer))}</span>"
        )
    alt = cert.icon_alt or f"{cert.issuer} logo"
    return (
        f'<img class="cert-card__icon" src="{asset_src(source.path, f"{path}.icon", assets.url_prefix)}" '
        f'alt="{attr(alt)}"{dimension_attributes(source)} loading="lazy" decoding="async">'
    )
