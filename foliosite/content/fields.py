"""Constrained field types shared by the content records.

Text fields are trimmed before their length limits apply. Links, asset paths
and years run through the same checks the renderers rely on; a failure is
carried out of pydantic as a ``site_rule`` error that keeps the original
error class and reason.
"""

from __future__ import annotations

import re
from typing import Annotated, Any, Callable, Optional

from pydantic import AfterValidator, BeforeValidator, StringConstraints
from pydantic_core import PydanticCustomError

from ..errors import FieldConstraintError, SiteBuildError
from ..sanitize import sanitize_asset_path, sanitize_href

YEAR_MIN = 1900
YEAR_MAX = 2100

# Leading zeros are ignored; more than four significant digits is never a valid year.
_YEAR_TEXT_RE = re.compile(r"0*([0-9]{1,4})(?:\.0*)?")

SITE_RULE_ERROR = "site_rule"


def coerce_year(value: Any, field_path: str) -> int:
    """Accept a whole-number year given as a number or numeric string."""
    year: int | None = None
    if isinstance(value, bool):
        year = None
    elif isinstance(value, int):
        year = value
    elif isinstance(value, float) and value.is_integer():
        year = int(value)
    elif isinstance(value, str):
        match = _YEAR_TEXT_RE.fullmatch(value.strip())
        if match:
            year = int(match.group(1))

    if year is None or not YEAR_MIN <= year <= YEAR_MAX:
        raise FieldConstraintError(
            f"expected whole-number year in range {YEAR_MIN}..{YEAR_MAX}",
            path=field_path,
            reason="InvalidYear",
        )
    return year


def _site_rule(check: Callable[[Any, str], Any]) -> Callable[[Any], Any]:
    def run(value: Any) -> Any:
        try:
            return check(value, "")
        except SiteBuildError as exc:
            raise PydanticCustomError(
                SITE_RULE_ERROR,
                "{detail}",
                {"detail": exc.detail, "reason": exc.reason, "error": type(exc).__name__},
            ) from exc

    return run


_checked_year = _site_rule(coerce_year)


def _year(value: Any) -> Any:
    # None falls through so the int check reports the key as missing.
    return value if value is None else _checked_year(value)


def _empty_as_none(value: Any) -> Any:
    return None if value == "" else value


def _none_as_empty(value: Any) -> Any:
    return () if value is None else value


Text40 = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=40)]
Text80 = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=80)]
Text120 = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=120)]
Text160 = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=160)]
Text200 = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=200)]
Text220 = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=220)]
Text240 = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=240)]
Text500 = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=500)]
Text900 = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=900)]

OptionalText120 = Annotated[Optional[Text120], BeforeValidator(_empty_as_none)]
OptionalText160 = Annotated[Optional[Text160], BeforeValidator(_empty_as_none)]

Href = Annotated[str, AfterValidator(_site_rule(sanitize_href))]
AssetPath = Annotated[str, AfterValidator(_site_rule(sanitize_asset_path))]
OptionalHref = Annotated[Optional[Href], BeforeValidator(_empty_as_none)]
OptionalAssetPath = Annotated[Optional[AssetPath], BeforeValidator(_empty_as_none)]

Year = Annotated[int, BeforeValidator(_year)]

# Optional lists accept null as "no items".
EmptyIfNull = BeforeValidator(_none_as_empty)
