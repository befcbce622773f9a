"""Per-build state passed explicitly through the pipeline."""

from __future__ import annotations

from dataclasses import dataclass

from .assets import AssetResolver
from .config import Config
from .templates import PageTemplates


@dataclass(slots=True)
class BuildContext:
    """Configuration, loaded templates, and the asset resolver for one build.

    A fresh context is created for every build so nothing carries over
    between runs in the same process.
    """

    config: Config
    templates: PageTemplates
    assets: AssetResolver

    @classmethod
    def create(cls, config: Config) -> "BuildContext":
        return cls(
            config=config,
            templates=PageTemplates.load(config),
            assets=AssetResolver(
                config.asset_root if config.asset_root is not None else config.output_dir,
                max_retina_bytes=config.reading.max_2x_bytes,
                url_prefix=config.asset_url_prefix(),
            ),
        )
