"""
Exception types raised by the report pipeline.

Only SessionNotFoundError is meant to reach the caller; provider failures are
absorbed by the pipeline and replaced with deterministic fallbacks.
"""


class ReportError(Exception):
    """Base class for report pipeline errors."""


class SessionNotFoundError(ReportError, LookupError):
    """The interview session does not exist."""

    def __init__(self, session_id):
        self.session_id = session_id
        super().__init__(f"Session not found: {session_id}")


class ProviderUnavailableError(ReportError):
    """An optional external provider (generator or embedder) is not configured."""
