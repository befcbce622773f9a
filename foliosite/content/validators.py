"""Structural validators for the portfolio content collections.

Each collection is validated in one pass by a pydantic ``TypeAdapter`` over
the frozen records in ``models``. The first failure is reported as a
``SchemaShapeError`` or ``FieldConstraintError`` with a ``collection[i].field``
path; nothing is accepted partially. When an item has several problems,
unknown keys are reported before missing keys, and both before field values.
The parsed input is never modified.
"""

from __future__ import annotations

from typing import Annotated, Any, Mapping, Sequence

from pydantic import Field, TypeAdapter, ValidationError
from pydantic_core import ErrorDetails

from ..errors import (
    FieldConstraintError,
    PathTraversalError,
    SchemaShapeError,
    SiteBuildError,
    UnsafeUrlError,
)
from .fields import SITE_RULE_ERROR
from .models import (
    Certification,
    ExperienceEntry,
    FeaturedProject,
    ReadingEntry,
    SiteData,
    SkillGroup,
)

COLLECTION_BOUNDS: dict[str, tuple[int, int]] = {
    "featured": (1, 50),
    "skills": (1, 50),
    "experience": (1, 100),
    "certifications": (1, 100),
    "reading": (1, 2000),
}

_RECORDS: dict[str, type] = {
    "featured": FeaturedProject,
    "skills": SkillGroup,
    "experience": ExperienceEntry,
    "certifications": Certification,
    "reading": ReadingEntry,
}

_ADAPTERS: dict[str, TypeAdapter[Any]] = {
    kind: TypeAdapter(Annotated[tuple[_RECORDS[kind], ...], Field(min_length=low, max_length=high)])
    for kind, (low, high) in COLLECTION_BOUNDS.items()
}

_RULE_ERRORS: dict[str, type[SiteBuildError]] = {
    cls.__name__: cls for cls in (FieldConstraintError, PathTraversalError, SchemaShapeError, UnsafeUrlError)
}

_EXTRA = "extra_forbidden"
_MISSING = "missing"


def validate_site_data(payloads: Mapping[str, Any]) -> SiteData:
    """Validate every collection, in a fixed order, and bundle the results."""
    for name in COLLECTION_BOUNDS:
        if name not in payloads:
            raise SchemaShapeError("collection is missing", path=name, reason="MissingCollection")
    return SiteData(
        featured=validate_featured(payloads["featured"]),
        skills=validate_skills(payloads["skills"]),
        experience=validate_experience(payloads["experience"]),
        certifications=validate_certifications(payloads["certifications"]),
        reading=validate_reading(payloads["reading"]),
    )


def validate_featured(value: Any, collection: str = "featured") -> tuple[FeaturedProject, ...]:
    return _validate("featured", value, collection)


def validate_skills(value: Any, collection: str = "skills") -> tuple[SkillGroup, ...]:
    return _validate("skills", value, collection)


def validate_experience(value: Any, collection: str = "experience") -> tuple[ExperienceEntry, ...]:
    return _validate("experience", value, collection)


def validate_certifications(
    value: Any, collection: str = "certifications"
) -> tuple[Certification, ...]:
    return _validate("certifications", value, collection)


def validate_reading(value: Any, collection: str = "reading") -> tuple[ReadingEntry, ...]:
    return _validate("reading", value, collection)


def _validate(kind: str, value: Any, collection: str) -> Any:
    try:
        return _ADAPTERS[kind].validate_python(value)
    except ValidationError as exc:
        raise _site_error(exc.errors(include_url=False), kind, collection) from exc


def _site_error(errors: Sequence[ErrorDetails], kind: str, collection: str) -> SiteBuildError:
    """Translate the first pydantic error into the build's error taxonomy."""
    first = min(errors, key=_priority)
    loc = tuple(first["loc"])
    category = _category(first)

    if category in (_EXTRA, _MISSING):
        parent = loc[:-1]
        names: list[str] = []
        for error in errors:
            name = str(error["loc"][-1]) if error["loc"] else ""
            if _category(error) == category and tuple(error["loc"][:-1]) == parent and name not in names:
                names.append(name)
        path = _field_path(collection, parent)
        if category == _EXTRA:
            return SchemaShapeError(
                f"unexpected key(s): {', '.join(sorted(names))}", path=path, reason="UnexpectedKeys"
            )
        return SchemaShapeError(f"missing required key(s): {', '.join(names)}", path=path, reason="MissingKeys")

    path = _field_path(collection, loc)
    ctx = first.get("ctx") or {}
    if category == SITE_RULE_ERROR:
        error_class = _RULE_ERRORS.get(ctx.get("error", ""), SchemaShapeError)
        return error_class(str(ctx.get("detail", first["msg"])), path=path, reason=ctx.get("reason"))
    if category in ("tuple_type", "list_type"):
        return SchemaShapeError("expected an array", path=path, reason="NotAnArray")
    if category in ("too_short", "too_long"):
        return SchemaShapeError(_bounds_message(first, loc, kind), path=path, reason="ArrayBounds")
    if category in ("model_type", "model_attributes_type", "dict_type"):
        return SchemaShapeError("expected an object", path=path, reason="NotAnObject")
    if category == "string_type":
        return SchemaShapeError("expected a string", path=path, reason="WrongType")
    if category == "string_too_short":
        return FieldConstraintError("must not be empty", path=path, reason="Empty")
    if category == "string_too_long":
        return FieldConstraintError(
            f"must be at most {ctx.get('max_length')} characters", path=path, reason="TooLong"
        )
    return SchemaShapeError(first["msg"], path=path)


def _category(error: ErrorDetails) -> str:
    kind = error["type"]
    loc = error["loc"]
    # A required key given as null counts as missing.
    if kind.endswith("_type") and error.get("input", ...) is None and loc and isinstance(loc[-1], str):
        return _MISSING
    return kind


def _priority(error: ErrorDetails) -> tuple[int, int, int]:
    loc = error["loc"]
    if not loc:
        return (0, 0, 0)
    item = loc[0] if isinstance(loc[0], int) else 0
    rank = {_EXTRA: 0, _MISSING: 1}.get(_category(error), 2)
    return (1, item, rank)


def _bounds_message(error: ErrorDetails, loc: tuple[Any, ...], kind: str) -> str:
    raw = error.get("input")
    count = len(raw) if isinstance(raw, Sequence) else error.get("ctx", {}).get("actual_length")
    if not loc:
        low, high = COLLECTION_BOUNDS[kind]
        return f"expected between {low} and {high} item(s), got {count}"
    ctx = error.get("ctx") or {}
    if error["type"] == "too_short":
        return f"expected at least {ctx.get('min_length')} item(s), got {count}"
    return f"expected at most {ctx.get('max_length')} item(s), got {count}"


def _field_path(collection: str, loc: Sequence[Any]) -> str:
    path = collection
    for part in loc:
        path += f"[{part}]" if isinstance(part, int) else f".{part}"
    return path
