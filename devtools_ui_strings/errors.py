"""Error kinds raised while checking and generating DevTools UI strings."""
from typing import Optional


class UIStringsError(Exception):
    """Base class for every fatal condition of the generation step."""


class CatalogParseError(UIStringsError):
    """The frontend scan or the .grd/.grdp parse failed."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class UnresolvedResourcesError(UIStringsError):
    """Blocking diffs exist between the frontend strings and the catalog."""

    def __init__(self, diagnostics: str):
        super().__init__(diagnostics)
        self.diagnostics = diagnostics


class UnresolvedAdditions(UnresolvedResourcesError):
    """Strings used in the frontend are missing from the catalog."""


class UnresolvedModifications(UnresolvedResourcesError):
    """An IDS key in the catalog holds a different text than the frontend uses."""


class EncodingError(UIStringsError, ValueError):
    """A string cannot be represented inside a C++ string literal."""

    def __init__(self, text: str, position: int, reason: str):
        super().__init__(f"Cannot encode character at position {position} of {text!r}: {reason}")
        self.text = text
        self.position = position
        self.reason = reason


class ArtifactWriteError(UIStringsError):
    """Writing one of the generated files failed."""

    def __init__(self, path: str, cause: BaseException):
        super().__init__(f"Could not write '{path}'. Reason: {cause}")
        self.path = path
        self.cause = cause
