"""HTML fragment renderers for each content section."""

from .reading import entry_tags, infer_tags, render_reading_filters, render_reading_grid
from .sections import (
    render_certifications,
    render_experience,
    render_featured_projects,
    render_skills,
)

__all__ = [
    "entry_tags",
    "infer_tags",
    "render_certifications",
    "render_experience",
    "render_featured_projects",
    "render_reading_filters",
    "render_reading_grid",
    "render_skills",
]
