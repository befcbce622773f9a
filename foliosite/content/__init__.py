"""Content records, loaders, and validators."""

from .fields import coerce_year
from .loader import load_collections, load_json_file
from .models import (
    Certification,
    ExperienceEntry,
    FeaturedProject,
    ProjectLink,
    ReadingEntry,
    SiteData,
    SkillGroup,
)
from .validators import (
    COLLECTION_BOUNDS,
    validate_certifications,
    validate_experience,
    validate_featured,
    validate_reading,
    validate_site_data,
    validate_skills,
)

__all__ = [
    "COLLECTION_BOUNDS",
    "Certification",
    "ExperienceEntry",
    "FeaturedProject",
    "ProjectLink",
    "ReadingEntry",
    "SiteData",
    "SkillGroup",
    "coerce_year",
    "load_collections",
    "load_json_file",
    "validate_certifications",
    "validate_experience",
    "validate_featured",
    "validate_reading",
    "validate_site_data",
    "validate_skills",
]
