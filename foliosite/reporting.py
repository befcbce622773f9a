"""Build reporting helpers for foliosite."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

from pydantic import BaseModel, Field

from .content import SiteData


class CollectionStats(BaseModel):
    featured: int
    skills: int
    experience: int
    certifications: int
    reading: int

    @property
    def total(self) -> int:
        return self.featured + self.skills + self.experience + self.certifications + self.reading


class BuildReport(BaseModel):
    project: str
    generated_at: datetime
    duration_seconds: float
    collections: CollectionStats
    pages: list[str] = Field(default_factory=list)
    missing_assets: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


def build_collection_stats(data: SiteData) -> CollectionStats:
    return CollectionStats(**data.counts())


def assemble_report(
    *,
    project: str,
    duration_seconds: float,
    collections: CollectionStats,
    pages: Iterable[str],
    missing_assets: Iterable[str],
) -> BuildReport:
    missing = list(missing_assets)
    warnings = [f"Missing asset: {entry}" for entry in missing]
    return BuildReport(
        project=project,
        generated_at=datetime.now(timezone.utc),
        duration_seconds=duration_seconds,
        collections=collections,
        pages=list(pages),
        missing_assets=missing,
        warnings=warnings,
    )


def write_report(report: BuildReport, target: Path) -> Path:
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as handle:
        json.dump(report.model_dump(mode="json"), handle, ensure_ascii=False, indent=2)
    return target
