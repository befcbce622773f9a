"""Allow-list sanitizers for link and asset values read from content files.

``sanitize_href`` and ``sanitize_asset_path`` are the strict forms used while
validating content; they either return a normalized value or raise. The
``safe_*`` wrappers are the permissive forms used by renderers: they log and
substitute a harmless fallback instead of aborting.
"""

from __future__ import annotations

import logging
import posixpath
import re
from typing import Any
from urllib.parse import quote, unquote, urlsplit, urlunsplit

from .errors import PathTraversalError, SchemaShapeError, SiteBuildError, UnsafeUrlError

logger = logging.getLogger(__name__)

ALLOWED_SCHEMES = frozenset({"https"})

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*:")
_FRAGMENT_RE = re.compile(r"^#[A-Za-z0-9:_-]+$")
_BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")
# Browsers drop tabs/newlines inside URLs and treat backslashes as slashes.
_FORBIDDEN_CHARS_RE = re.compile(r"[\x00-\x20\x7f\\]")
_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f]")
_PATH_SAFE = "/%:@!$&'()*+,;=-._~"
_QUERY_SAFE = "/?%:@!$&'()*+,;=-._~"


def sanitize_href(raw: Any, field_path: str) -> str:
    """Validate a link target and return its normalized form.

    Absolute URLs must use ``https`` and carry no credentials. Relative links
    may be a named fragment (``#contact``), a site-absolute path
    (``/reading.html``) or a relative path, optionally followed by a query or
    fragment suffix which is kept verbatim.
    """
    value = _prepare(raw, field_path, UnsafeUrlError, empty_reason="EmptyUrl")

    if _SCHEME_RE.match(value):
        return _canonical_absolute_url(value, field_path)

    if value.startswith("//"):
        raise UnsafeUrlError(
            "protocol-relative URLs are not allowed",
            path=field_path,
            reason="ProtocolRelative",
        )

    if value.startswith("#"):
        if not _FRAGMENT_RE.match(value):
            raise UnsafeUrlError(
                "fragment links must match #[A-Za-z0-9:_-]+",
                path=field_path,
                reason="InvalidFragment",
            )
        return value

    cut = _suffix_index(value)
    path, suffix = value[:cut], value[cut:]
    if path == "/":
        return path + suffix
    leading = "/" if path.startswith("/") else ""
    normalized = normalize_relative_path(path[len(leading):], field_path, allow_trailing_slash=True)
    return f"{leading}{normalized}{suffix}"


def sanitize_asset_path(raw: Any, field_path: str) -> str:
    """Validate a path to a file under the asset root and return it normalized."""
    value = _prepare(raw, field_path, PathTraversalError, empty_reason="EmptySegment")

    if _SCHEME_RE.match(value):
        raise PathTraversalError(
            "must be relative; URI schemes are not allowed",
            path=field_path,
            reason="NotRelative",
        )
    if value.startswith("/"):
        raise PathTraversalError("must be relative to the asset root", path=field_path, reason="NotRelative")
    if "?" in value or "#" in value:
        raise PathTraversalError(
            "query strings and fragments are not allowed",
            path=field_path,
            reason="QueryOrHashNotAllowed",
        )
    return normalize_relative_path(value, field_path)


def normalize_relative_path(path: str, field_path: str, *, allow_trailing_slash: bool = False) -> str:
    """Check every segment of a relative path and return the collapsed path.

    Segments are percent-decoded before checking so encoded traversal
    (``%2e%2e``) and encoded separators (``%2f``) are caught as well.
    """
    body = path
    trailing = ""
    if allow_trailing_slash and len(body) > 1 and body.endswith("/"):
        body, trailing = body[:-1], "/"
    if not body:
        raise PathTraversalError("path must not be empty", path=field_path, reason="EmptySegment")

    for segment in body.split("/"):
        decoded = _decode_segment(segment, field_path)
        if decoded == "..":
            raise PathTraversalError("path traversal is not allowed", path=field_path, reason="PathTraversal")
        if decoded == ".":
            raise PathTraversalError("dot segments are not allowed", path=field_path, reason="DotSegment")
        if not decoded:
            raise PathTraversalError(
                "empty path segments are not allowed",
                path=field_path,
                reason="EmptySegment",
            )
        if "/" in decoded or "\\" in decoded:
            raise PathTraversalError(
                "path traversal is not allowed (encoded separator)",
                path=field_path,
                reason="PathTraversal",
            )
        if _CONTROL_RE.search(decoded):
            raise PathTraversalError(
                "control characters are not allowed",
                path=field_path,
                reason="BadEncoding",
            )

    normalized = posixpath.normpath(body)
    if normalized.startswith("/") or normalized == ".." or normalized.startswith("../"):
        raise PathTraversalError("path traversal is not allowed", path=field_path, reason="PathTraversal")
    return normalized + trailing


def safe_href(raw: Any, field_path: str, *, fallback: str = "#") -> str:
    """Permissive ``sanitize_href``: log and return ``fallback`` on failure."""
    try:
        return sanitize_href(raw, field_path)
    except (UnsafeUrlError, PathTraversalError, SchemaShapeError) as exc:
        logger.warning("Replacing unsafe link at %s with %r: %s", field_path, fallback, exc.detail)
        return fallback


def safe_asset_path(raw: Any, field_path: str, *, fallback: str = "") -> str:
    """Permissive ``sanitize_asset_path``: log and return ``fallback`` on failure."""
    try:
        return sanitize_asset_path(raw, field_path)
    except (PathTraversalError, SchemaShapeError) as exc:
        logger.warning("Dropping unsafe asset path at %s: %s", field_path, exc.detail)
        return fallback


def is_external_href(href: str) -> bool:
    """Return True for links that leave the site (absolute https URLs)."""
    return href.lower().startswith("https://")


def _prepare(
    raw: Any,
    field_path: str,
    error_cls: type[SiteBuildError],
    *,
    empty_reason: str,
) -> str:
    if not isinstance(raw, str):
        raise SchemaShapeError("expected a string", path=field_path, reason="NotAString")
    value = raw.strip()
    if not value:
        raise error_cls("must not be empty", path=field_path, reason=empty_reason)
    if _FORBIDDEN_CHARS_RE.search(value):
        raise error_cls(
            "whitespace, control characters and backslashes are not allowed",
            path=field_path,
            reason="InvalidCharacter",
        )
    return value


def _suffix_index(value: str) -> int:
    positions = [index for index in (value.find("?"), value.find("#")) if index >= 0]
    return min(positions) if positions else len(value)


def _decode_segment(segment: str, field_path: str) -> str:
    if _BAD_ESCAPE_RE.search(segment):
        raise PathTraversalError("malformed percent-encoding", path=field_path, reason="BadEncoding")
    try:
        return unquote(segment, errors="strict")
    except UnicodeDecodeError as exc:
        raise PathTraversalError(
            "percent-encoding is not valid UTF-8",
            path=field_path,
            reason="BadEncoding",
        ) from exc


def _canonical_absolute_url(value: str, field_path: str) -> str:
    scheme = value.split(":", 1)[0].lower()
    if scheme not in ALLOWED_SCHEMES:
        raise UnsafeUrlError("only https URLs are allowed", path=field_path, reason="UnsafeScheme")

    try:
        parts = urlsplit(value)
        port = parts.port
    except ValueError as exc:
        raise UnsafeUrlError("URL could not be parsed", path=field_path, reason="InvalidUrl") from exc

    if "@" in parts.netloc:
        raise UnsafeUrlError(
            "credentials are not allowed in URLs",
            path=field_path,
            reason="CredentialsInUrl",
        )
    host = parts.hostname
    if not host:
        raise UnsafeUrlError("URL must include a host", path=field_path, reason="InvalidUrl")
    try:
        host = host.encode("idna").decode("ascii")
    except UnicodeError as exc:
        raise UnsafeUrlError("URL host is not valid", path=field_path, reason="InvalidUrl") from exc
    if ":" in host:
        host = f"[{host}]"

    netloc = host if port in (None, 443) else f"{host}:{port}"
    path = quote(_remove_dot_segments(parts.path), safe=_PATH_SAFE)
    query = quote(parts.query, safe=_QUERY_SAFE)
    fragment = quote(parts.fragment, safe=_QUERY_SAFE)
    return urlunsplit((scheme, netloc, path, query, fragment))


def _remove_dot_segments(path: str) -> str:
    if not path:
        return "/"
    segments = path.split("/")
    resolved: list[str] = []
    for segment in segments[1:]:
        if segment == "..":
            if resolved:
                resolved.pop()
        elif segment != ".":
            resolved.append(segment)
    if segments[-1] in {".", ".."}:
        resolved.append("")
    return "/" + "/".join(resolved)
