"""Exception types raised by the analysis pipeline and persistence layer."""
from __future__ import annotations


class SnaLabError(Exception):
    """Base class for errors surfaced to callers (API, CLI)."""


class InputDataError(SnaLabError):
    """Raised when an input provider yields no usable rows."""


class EmptyGraphError(SnaLabError):
    """Raised when no valid edge records remain after extraction."""

    def __init__(self, message: str = "No valid graph data. Rows need Source1, Source2, Weight values."):
        super().__init__(message)


class NoGraphError(SnaLabError):
    """Raised when analytics are requested before a graph has been drawn."""

    def __init__(self, message: str = "Draw a graph before running analytics."):
        super().__init__(message)


class MetricUnavailableError(SnaLabError):
    """Raised when ranking by a metric that could not be computed."""


class SessionNotFoundError(SnaLabError):
    """Raised when a session id is unknown or already disposed."""


class DocumentNotFoundError(SnaLabError):
    """Raised when a stored dataset or report does not exist."""


class MalformedDocumentError(InputDataError):
    """Raised when a submitted or stored document has fields of the wrong shape."""
