"""Exception types raised by the foliosite build pipeline.

Every error is fatal to a build. Each carries the project-relative file or
the ``collection[index].field`` path that failed, plus a short ``reason`` code
so callers and tests can tell failures apart without parsing messages.
"""

from __future__ import annotations


class SiteBuildError(RuntimeError):
    """Base class for failures that abort a build."""

    default_reason = "BuildError"

    def __init__(self, message: str, *, path: str | None = None, reason: str | None = None) -> None:
        super().__init__(f"{path}: {message}" if path else message)
        self.detail = message
        self.path = path
        self.reason = reason or self.default_reason


class SchemaShapeError(SiteBuildError):
    """Raised for wrong types, array bounds, and missing or unexpected keys."""

    default_reason = "SchemaShape"


class FieldConstraintError(SiteBuildError):
    """Raised when a field value violates a length or range constraint."""

    default_reason = "FieldConstraint"


class UnsafeUrlError(SiteBuildError):
    """Raised for disallowed schemes, embedded credentials, or protocol-relative links."""

    default_reason = "UnsafeScheme"


class PathTraversalError(SiteBuildError):
    """Raised when a path could escape the asset root or is not a plain relative path."""

    default_reason = "PathTraversal"


class MissingDataFileError(SiteBuildError):
    """Raised when a content collection file does not exist."""

    default_reason = "MissingDataFile"


class MissingTemplateError(SiteBuildError):
    """Raised when a page source or partial file does not exist."""

    default_reason = "MissingTemplate"


class UnresolvedTemplateTokenError(SiteBuildError):
    """Raised when a template references a placeholder with no replacement."""

    default_reason = "UnresolvedToken"

    def __init__(self, tokens: list[str], *, path: str | None = None) -> None:
        names = ", ".join("{{" + token + "}}" for token in tokens)
        super().__init__(f"unresolved template token(s): {names}", path=path)
        self.tokens = tokens


class MissingTemplateTokenError(SiteBuildError):
    """Raised when a page source lacks a placeholder it is required to contain."""

    default_reason = "MissingToken"

    def __init__(self, tokens: list[str], *, path: str | None = None) -> None:
        names = ", ".join("{{" + token + "}}" for token in tokens)
        super().__init__(f"required template token(s) not found: {names}", path=path)
        self.tokens = tokens
