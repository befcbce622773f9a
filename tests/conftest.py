from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any, Callable

import pytest
from PIL import Image

VALID_DATA: dict[str, Any] = {
    "featured": [
        {
            "id": "project-alpha",
            "title": "Project Alpha",
            "timeframe": "2025",
            "problem": "Problem statement.",
            "impact": "Impact statement.",
            "tech": ["Node.js", "Security"],
            "links": [{"label": "GitHub", "url": "https://github.com/example/repo"}],
        }
    ],
    "skills": [{"category": "Languages", "items": ["JavaScript"]}],
    "experience": [
        {
            "org": "Example Org",
            "role": "Software Engineer",
            "dates": "2025",
            "impact_bullets": ["Delivered secure platform updates."],
            "tech": ["Node.js"],
        }
    ],
    "certifications": [
        {
            "title": "Secure Systems",
            "issuer": "Example Institute",
            "issued": "Issued 2025",
            "link": "https://credentials.example.com/secure-systems",
            "icon": "images/example-30.jpg",
            "icon_alt": "Example logo",
        }
    ],
    "reading": [
        {
            "year": 2025,
            "title": "Secure Design",
            "author": "A. Author",
            "isbn": "978-1-234567-89-7",
            "cover": "book/2025/secure-design-300.jpg",
            "link": "https://books.example.com/secure-design",
            "tags": ["Security"],
        }
    ],
}

INDEX_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta http-equiv="Content-Security-Policy" content="default-src 'self'">
<title>{{SITE_NAME}}</title>
</head>
<body>
{{NAV}}
<main>
<section id="projects">
{{FEATURED_PROJECTS}}
</section>
<section id="skills">
{{SKILLS}}
</section>
<section id="experience">
{{EXPERIENCE}}
</section>
<section id="certifications">
{{CERTIFICATIONS}}
</section>
</main>
{{FOOTER}}
</body>
</html>
"""

READING_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>Reading | {{SITE_NAME}}</title>
</head>
<body>
{{NAV}}
<main>
<p class="reading-count">{{READING_COUNT}} books</p>
<div class="reading-filters">
{{READING_FILTERS}}
</div>
<div class="reading-grid">
{{READING_GRID}}
</div>
</main>
{{FOOTER}}
</body>
</html>
"""

NAV_PARTIAL = (
    '<nav class="site-nav"><a href="index.html">{{SITE_NAME}}</a> '
    '<a href="reading.html">Reading</a> '
    '<a href="https://github.com/example" target="_blank" rel="noopener noreferrer">GitHub</a></nav>'
)
FOOTER_PARTIAL = "<footer><p>&copy; {{SITE_NAME}}</p></footer>"


def write_image(path: Path, size: tuple[int, int] = (30, 45)) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, color=(200, 80, 40)).save(path)
    return path


@pytest.fixture
def valid_data() -> dict[str, Any]:
    """A fresh copy of a valid data set with one entry per collection."""
    return copy.deepcopy(VALID_DATA)


@pytest.fixture
def make_project(tmp_path: Path) -> Callable[..., Path]:
    """Create a complete project (templates, partials, data, images) under tmp_path."""

    def _make(data: dict[str, Any] | None = None, *, with_images: bool = True) -> Path:
        root = tmp_path / "portfolio"
        (root / "src").mkdir(parents=True, exist_ok=True)
        (root / "partials").mkdir(parents=True, exist_ok=True)
        (root / "data").mkdir(parents=True, exist_ok=True)
        (root / "src" / "index.html").write_text(INDEX_TEMPLATE, encoding="utf-8")
        (root / "src" / "reading.html").write_text(READING_TEMPLATE, encoding="utf-8")
        (root / "partials" / "nav.html").write_text(NAV_PARTIAL, encoding="utf-8")
        (root / "partials" / "footer.html").write_text(FOOTER_PARTIAL, encoding="utf-8")
        (root / "foliosite.yml").write_text("site_name: Test Portfolio\n", encoding="utf-8")

        payload = copy.deepcopy(VALID_DATA) if data is None else data
        for name, value in payload.items():
            (root / "data" / f"{name}.json").write_text(json.dumps(value, indent=2), encoding="utf-8")

        if with_images:
            write_image(root / "images" / "example-30.jpg", (30, 30))
            write_image(root / "book" / "2025" / "secure-design-300.jpg", (150, 225))
        return root

    return _make
