"""Typed, immutable records for validated portfolio content.

Field limits live on the records themselves; see ``fields`` for the
constrained types. Records are frozen and closed to unknown keys.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from .fields import (
    EmptyIfNull,
    Href,
    OptionalAssetPath,
    OptionalHref,
    OptionalText120,
    OptionalText160,
    Text40,
    Text80,
    Text120,
    Text160,
    Text200,
    Text220,
    Text240,
    Text500,
    Text900,
    Year,
)


class _Record(BaseModel):
    """Base for content records; frozen and closed to unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid")


class ProjectLink(_Record):
    """Labelled outbound link attached to a featured project."""

    label: Text80
    url: Href = Field(description="Sanitized href.")


class FeaturedProject(_Record):
    """Project highlighted on the landing page."""

    id: Text80
    title: Text200
    timeframe: Text120
    problem: Text900
    impact: Text900
    tech: Annotated[tuple[Text80, ...], Field(max_length=20), EmptyIfNull] = ()
    links: Annotated[tuple[ProjectLink, ...], Field(max_length=12), EmptyIfNull] = ()


class SkillGroup(_Record):
    """Named group of skills rendered as a chip list."""

    category: Text80
    items: Annotated[tuple[Text80, ...], Field(min_length=1, max_length=40)]


class ExperienceEntry(_Record):
    """Single role on the experience timeline."""

    org: Text120
    role: Text160
    dates: Text80
    impact_bullets: Annotated[tuple[Text500, ...], Field(min_length=1, max_length=20)]
    tech: Annotated[tuple[Text80, ...], Field(max_length=30), EmptyIfNull] = ()


class Certification(_Record):
    """Credential with a verification link and optional issuer icon."""

    title: Text220
    issuer: Text220
    issued: Text120
    link: Href = Field(description="Sanitized href.")
    credential_id: OptionalText120 = None
    icon: OptionalAssetPath = Field(default=None, description="Sanitized asset path.")
    icon_alt: OptionalText120 = None


class ReadingEntry(_Record):
    """Book on the reading list."""

    year: Year
    title: Text240
    isbn: Text80
    author: OptionalText160 = None
    link: OptionalHref = Field(default=None, description="Sanitized href.")
    cover: OptionalAssetPath = Field(default=None, description="Sanitized asset path.")
    tags: Annotated[tuple[Text40, ...], Field(max_length=20), EmptyIfNull] = ()


class SiteData(_Record):
    """All validated collections for one build."""

    featured: tuple[FeaturedProject, ...]
    skills: tuple[SkillGroup, ...]
    experience: tuple[ExperienceEntry, ...]
    certifications: tuple[Certification, ...]
    reading: tuple[ReadingEntry, ...]

    def counts(self) -> dict[str, int]:
        return {
            "featured": len(self.featured),
            "skills": len(self.skills),
            "experience": len(self.experience),
            "certifications": len(self.certifications),
            "reading": len(self.reading),
        }
