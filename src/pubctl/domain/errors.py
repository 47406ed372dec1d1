"""Error taxonomy for the publish cycle.

Structural errors (malformed front matter, missing or invalid fields,
duplicate identifiers) abort the whole cycle. Link and asset errors are
collected as warnings unless the matching ``strict`` option is set.

Every error carries a stable ``code`` so the service layer can surface it
inside a :class:`~pubctl.services.result.ServiceError` without string
matching.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any


class PublishError(Exception):
    """Base class for every error raised by the publish pipeline."""

    code: str = "PUBLISH_ERROR"
    structural: bool = True

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path

    def detail(self) -> dict[str, Any]:
        """Error-specific payload for reports."""
        return {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "path": str(self.path) if self.path is not None else None,
            "message": self.message,
            "detail": self.detail(),
        }

    def with_path(self, path: Path) -> PublishError:
        """Attach *path* if the error was raised before the file was known."""
        if self.path is None:
            self.path = path
        return self


class MalformedFrontMatterError(PublishError):
    """Front matter delimiters are missing or the block is not a mapping."""

    code = "MALFORMED_FRONT_MATTER"


class MissingFieldError(PublishError):
    """A required front matter field is absent or blank."""

    code = "MISSING_FIELD"

    def __init__(self, field: str, *, path: Path | None = None) -> None:
        super().__init__(f"Missing required field: {field!r}", path=path)
        self.field = field

    def detail(self) -> dict[str, Any]:
        return {"field": self.field}


class InvalidFieldError(PublishError):
    """A front matter field is present but has the wrong shape."""

    code = "INVALID_FIELD"

    def __init__(self, field: str, value: Any, *, path: Path | None = None) -> None:
        super().__init__(
            f"Field {field!r} must be a non-empty string, got {value!r}",
            path=path,
        )
        self.field = field
        self.value = value

    def detail(self) -> dict[str, Any]:
        return {"field": self.field, "value": repr(self.value)}


class InvalidDateError(PublishError):
    """The ``date`` field does not parse as a calendar date."""

    code = "INVALID_DATE"

    def __init__(self, value: Any, *, path: Path | None = None) -> None:
        super().__init__(f"Invalid date: {value!r}", path=path)
        self.value = value

    def detail(self) -> dict[str, Any]:
        return {"value": str(self.value)}


class DuplicateIdentifierError(PublishError):
    """Two source files derive the same identifier."""

    code = "DUPLICATE_IDENTIFIER"

    def __init__(
        self,
        identifier: str,
        *,
        path: Path | None = None,
        existing_path: Path | None = None,
    ) -> None:
        msg = f"Duplicate identifier {identifier!r}"
        if existing_path is not None:
            msg += f" (already defined by {existing_path})"
        super().__init__(msg, path=path)
        self.identifier = identifier
        self.existing_path = existing_path

    def detail(self) -> dict[str, Any]:
        data: dict[str, Any] = {"identifier": self.identifier}
        if self.existing_path is not None:
            data["existing_path"] = str(self.existing_path)
        return data


class NotFoundError(PublishError, KeyError):
    """No document is registered under the requested identifier."""

    code = "NOT_FOUND"

    def __init__(self, identifier: str) -> None:
        super().__init__(f"No document with identifier {identifier!r}")
        self.identifier = identifier

    def __str__(self) -> str:
        return self.message

    def detail(self) -> dict[str, Any]:
        return {"identifier": self.identifier}


class BrokenLinkError(PublishError):
    """Internal links point at identifiers missing from the registry."""

    code = "BROKEN_LINK"
    structural = False

    def __init__(self, broken: dict[str, set[str]]) -> None:
        total = sum(len(targets) for targets in broken.values())
        super().__init__(f"{total} broken internal link(s) in {len(broken)} document(s)")
        self.broken = broken

    def detail(self) -> dict[str, Any]:
        return {source: sorted(targets) for source, targets in sorted(self.broken.items())}


class AssetNotFoundError(PublishError):
    """A featured image does not resolve to an existing asset."""

    code = "ASSET_NOT_FOUND"
    structural = False

    def __init__(self, asset: str, *, path: Path | None = None) -> None:
        super().__init__(f"Featured image not found: {asset!r}", path=path)
        self.asset = asset

    def detail(self) -> dict[str, Any]:
        return {"asset": self.asset}


class RegistryFrozenError(PublishError):
    """The registry no longer accepts documents for this cycle."""

    code = "REGISTRY_FROZEN"


class InvalidTransitionError(PublishError):
    """A publish cycle attempted a transition its state machine forbids."""

    code = "INVALID_TRANSITION"

    def __init__(self, current: str, target: str) -> None:
        super().__init__(f"Cannot transition publish cycle from {current!r} to {target!r}")
        self.current = current
        self.target = target

    def detail(self) -> dict[str, Any]:
        return {"current": self.current, "target": self.target}


class DescriptionLengthWarning(PublishError):
    """A description exceeds the recommended excerpt length."""

    code = "DESCRIPTION_TOO_LONG"
    structural = False

    def __init__(self, length: int, limit: int, *, path: Path | None = None) -> None:
        super().__init__(
            f"Description is {length} characters (recommended maximum {limit})",
            path=path,
        )
        self.length = length
        self.limit = limit

    def detail(self) -> dict[str, Any]:
        return {"length": self.length, "limit": self.limit}


class SourceReadError(PublishError):
    """A source file could not be read or named."""

    code = "SOURCE_UNREADABLE"


class RenderError(PublishError):
    """A rendering plugin failed while the ordered set was being emitted."""

    code = "RENDER_FAILED"
