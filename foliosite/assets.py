"""Build-time lookups for optional image assets (covers and icons).

Existence checks only enhance output: a missing file never fails a build. The
resolver records which assets were expected but absent so the CLI and the
build report can surface them.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from PIL import Image

from .sanitize import safe_asset_path

logger = logging.getLogger(__name__)

_RETINA_SUFFIX_RE = re.compile(r"-300(?=\.(?:jpe?g|png)$)", re.IGNORECASE)
_JPEG_SUFFIX_RE = re.compile(r"\.jpe?g$", re.IGNORECASE)
_DIMENSIONLESS_SUFFIXES = {".svg"}


def derive_retina_path(path: str) -> str | None:
    """Return the 2x sibling of a ``-300`` cover (``x-300.jpg`` -> ``x.jpg``)."""
    derived = _RETINA_SUFFIX_RE.sub("", path, count=1)
    return derived if derived != path else None


def to_webp_path(path: str) -> str | None:
    """Swap a JPEG extension for ``.webp``; other formats have no WebP sibling."""
    derived = _JPEG_SUFFIX_RE.sub(".webp", path, count=1)
    return derived if derived != path else None


@dataclass(frozen=True, slots=True)
class ImageSource:
    """An existing image file, relative to the asset root."""

    path: str
    width: int | None = None
    height: int | None = None
    size_bytes: int = 0


@dataclass(frozen=True, slots=True)
class ImageVariants:
    """The set of files available for one cover image."""

    primary: ImageSource
    retina: ImageSource | None = None
    webp: ImageSource | None = None
    webp_retina: ImageSource | None = None

    def srcset(self) -> str | None:
        if self.retina is None:
            return None
        return f"{self.primary.path} 1x, {self.retina.path} 2x"

    def webp_srcset(self) -> str | None:
        if self.webp is None:
            return None
        if self.webp_retina is None:
            return self.webp.path
        return f"{self.webp.path} 1x, {self.webp_retina.path} 2x"


@dataclass(slots=True)
class AssetResolver:
    """Resolve asset paths against one asset root for the duration of a build."""

    root: Path
    max_retina_bytes: int | None = None
    url_prefix: str = ""
    missing: list[str] = field(default_factory=list)
    _cache: dict[str, ImageSource | None] = field(default_factory=dict)

    def image(self, relative: str) -> ImageSource | None:
        """Return details for an existing image, or None when it is absent."""
        if relative in self._cache:
            return self._cache[relative]
        source = self._probe(relative)
        self._cache[relative] = source
        return source

    def cover_variants(self, cover: str, field_path: str) -> ImageVariants | None:
        """Collect the 1x/2x/WebP files available for a cover image.

        Returns None (and records the miss) when the 1x cover itself is absent.
        """
        primary = self._required(cover, field_path)
        if primary is None:
            return None

        retina = self._optional_variant(derive_retina_path(primary.path), field_path)
        if retina is not None and self._too_heavy(retina):
            logger.info(
                "Skipping 2x cover %s (%d bytes exceeds %d).",
                retina.path,
                retina.size_bytes,
                self.max_retina_bytes,
            )
            retina = None

        webp = self._optional_variant(to_webp_path(primary.path), field_path)
        webp_retina = None
        if webp is not None and retina is not None:
            webp_retina = self._optional_variant(to_webp_path(retina.path), field_path)
            if webp_retina is not None and self._too_heavy(webp_retina):
                webp_retina = None

        return ImageVariants(primary=primary, retina=retina, webp=webp, webp_retina=webp_retina)

    def icon(self, icon: str, field_path: str) -> ImageSource | None:
        """Return an icon image, recording it as missing when absent."""
        return self._required(icon, field_path)

    def _required(self, relative: str, field_path: str) -> ImageSource | None:
        checked = safe_asset_path(relative, field_path)
        if not checked:
            return None
        source = self.image(checked)
        if source is None:
            entry = f"{field_path}: {checked}"
            if entry not in self.missing:
                self.missing.append(entry)
                logger.warning("Expected asset %s for %s is missing; rendering a placeholder.", checked, field_path)
        return source

    def _optional_variant(self, relative: str | None, field_path: str) -> ImageSource | None:
        if relative is None:
            return None
        checked = safe_asset_path(relative, field_path)
        if not checked:
            return None
        return self.image(checked)

    def _too_heavy(self, source: ImageSource) -> bool:
        return self.max_retina_bytes is not None and source.size_bytes > self.max_retina_bytes

    def _probe(self, relative: str) -> ImageSource | None:
        base = self.root.resolve()
        candidate = (base / relative).resolve()
        try:
            candidate.relative_to(base)
        except ValueError:
            logger.warning("Asset %s resolves outside the asset root; ignoring.", relative)
            return None
        if not candidate.is_file():
            return None

        size_bytes = candidate.stat().st_size
        if candidate.suffix.lower() in _DIMENSIONLESS_SUFFIXES:
            return ImageSource(path=relative, size_bytes=size_bytes)
        try:
            with Image.open(candidate) as image:
                width, height = image.size
        except (OSError, Image.DecompressionBombError) as exc:
            logger.warning("Unable to read image dimensions for %s: %s", relative, exc)
            return ImageSource(path=relative, size_bytes=size_bytes)
        return ImageSource(path=relative, width=width, height=height, size_bytes=size_bytes)
