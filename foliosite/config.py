from pathlib import Path
from typing import Any
import re

import yaml
from pydantic import BaseModel, Field, field_validator

CONFIG_FILENAME = "foliosite.yml"
_TOKEN_NAME_RE = re.compile(r"[A-Z][A-Z0-9_]*")


class DataFilesConfig(BaseModel):
    """File names (under ``data_dir``) holding each content collection."""

    featured: str = Field(default="featured.json")
    skills: str = Field(default="skills.json")
    experience: str = Field(default="experience.json")
    certifications: str = Field(default="certifications.json")
    reading: str = Field(default="reading.json")

    def items(self) -> list[tuple[str, str]]:
        return [
            ("featured", self.featured),
            ("skills", self.skills),
            ("experience", self.experience),
            ("certifications", self.certifications),
            ("reading", self.reading),
        ]


class PageConfig(BaseModel):
    """A generated page and the source template it is assembled from."""

    name: str = Field(description="Output file name, e.g. 'index.html'.")
    source: Path | None = Field(
        default=None,
        description="Template path; defaults to '<source_dir>/<name>'.",
    )
    required_tokens: list[str] = Field(
        default_factory=lambda: ["NAV", "FOOTER"],
        description="Placeholders the page source must contain.",
    )

    @field_validator("name")
    def _plain_file_name(cls, value: str) -> str:
        text = value.strip()
        if not text or "/" in text or "\\" in text or text in {".", ".."}:
            raise ValueError(f"Page name '{value}' must be a plain file name in the output directory.")
        return text

    @field_validator("source", mode="before")
    def _ensure_path(cls, value: Any) -> Path | None:
        if value is None or value == "":
            return None
        return Path(value)

    @field_validator("required_tokens")
    def _token_names(cls, value: list[str]) -> list[str]:
        for name in value:
            if not _TOKEN_NAME_RE.fullmatch(name):
                raise ValueError(f"Token name '{name}' must be UPPER_SNAKE_CASE.")
        return value


def _default_pages() -> list[PageConfig]:
    return [PageConfig(name="index.html"), PageConfig(name="reading.html")]


class ReadingConfig(BaseModel):
    """Rendering options for the reading grid."""

    max_2x_bytes: int | None = Field(
        default=400_000,
        ge=1,
        description="Skip 2x cover variants larger than this many bytes (unset disables the cap).",
    )
    default_tag: str = Field(
        default="general",
        description="Tag applied when none are given and none can be inferred from the title.",
    )

    @field_validator("default_tag")
    def _normalize_tag(cls, value: str) -> str:
        text = value.strip().lower()
        if not text:
            raise ValueError("default_tag cannot be empty")
        return text


class Config(BaseModel):
    site_name: str = Field(default="Portfolio")
    root_dir: Path = Field(default=Path("."), description="Project root; set by load_config.")
    data_dir: Path = Field(default=Path("data"))
    source_dir: Path = Field(default=Path("src"))
    partials_dir: Path = Field(default=Path("partials"))
    output_dir: Path = Field(default=Path("."))
    asset_root: Path | None = Field(
        default=None,
        description="Directory that asset paths resolve against; defaults to output_dir and must lie inside it.",
    )
    data_files: DataFilesConfig = Field(default_factory=DataFilesConfig)
    partials: dict[str, str] = Field(
        default_factory=lambda: {"NAV": "nav.html", "FOOTER": "footer.html"},
        description="Mapping from token name to partial file name under partials_dir.",
    )
    pages: list[PageConfig] = Field(default_factory=_default_pages)
    reading: ReadingConfig = Field(default_factory=ReadingConfig)
    report_path: Path | None = Field(
        default=None,
        description="Optional path for a JSON build report.",
    )

    @field_validator(
        "root_dir",
        "data_dir",
        "source_dir",
        "partials_dir",
        "output_dir",
        mode="before",
    )
    def _ensure_path(cls, value: Any) -> Path:
        return Path(value)

    @field_validator("asset_root", "report_path", mode="before")
    def _ensure_optional_path(cls, value: Any) -> Path | None:
        if value is None or value == "":
            return None
        return Path(value)

    @field_validator("partials")
    def _partial_tokens(cls, value: dict[str, str]) -> dict[str, str]:
        for name in value:
            if not _TOKEN_NAME_RE.fullmatch(name):
                raise ValueError(f"Partial token '{name}' must be UPPER_SNAKE_CASE.")
        return value

    def page_source(self, page: PageConfig) -> Path:
        return page.source if page.source is not None else self.source_dir / page.name

    def asset_url_prefix(self) -> str:
        """Prefix that makes asset paths resolve from pages written to ``output_dir``."""
        assets = self.asset_root if self.asset_root is not None else self.output_dir
        relative = assets.relative_to(self.output_dir).as_posix()
        return "" if relative == "." else f"{relative}/"

    def display_path(self, path: Path) -> str:
        """Render ``path`` relative to the project root when possible."""
        try:
            return path.resolve().relative_to(self.root_dir.resolve()).as_posix()
        except ValueError:
            return path.name


def load_config(path: str | Path) -> Config:
    """Load configuration and resolve relative paths based on the config location.

    ``path`` may point to a config file or to a project directory. A directory
    without a ``foliosite.yml`` yields the defaults anchored at that directory.
    """
    candidate = Path(path)
    data: dict[str, Any] = {}
    if candidate.is_dir():
        config_file = candidate / CONFIG_FILENAME
        if config_file.exists():
            data = _read_yaml(config_file)
        base_dir = candidate.resolve()
    else:
        if not candidate.exists():
            raise FileNotFoundError(candidate)
        data = _read_yaml(candidate)
        base_dir = candidate.parent.resolve()

    cfg = Config(**data)

    def _abs_required(value: Path) -> Path:
        return value if value.is_absolute() else (base_dir / value).resolve()

    cfg.root_dir = base_dir
    cfg.data_dir = _abs_required(cfg.data_dir)
    cfg.source_dir = _abs_required(cfg.source_dir)
    cfg.partials_dir = _abs_required(cfg.partials_dir)
    cfg.output_dir = _abs_required(cfg.output_dir)
    cfg.asset_root = _abs_required(cfg.asset_root) if cfg.asset_root is not None else cfg.output_dir
    if not cfg.asset_root.is_relative_to(cfg.output_dir):
        raise ValueError(
            f"asset_root ({cfg.asset_root}) must be inside output_dir ({cfg.output_dir}) "
            "so pages can reference the images."
        )
    if cfg.report_path is not None:
        cfg.report_path = _abs_required(cfg.report_path)
    for page in cfg.pages:
        if page.source is not None:
            page.source = _abs_required(page.source)

    return cfg


def _read_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file {path.name} must define a mapping.")
    return data
