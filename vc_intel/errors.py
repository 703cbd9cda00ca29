"""
Exception hierarchy for the aggregation core.

Only ConfigurationError is allowed to escape to callers at startup.
SourceFetchError and RecordValidationError are raised internally and
absorbed at the source boundary and by the scoring engine respectively.
"""


class VCIntelError(Exception):
    """Base exception for all vc_intel errors."""


class ConfigurationError(VCIntelError):
    """Raised when a source is registered in an unusable state."""


class SourceFetchError(VCIntelError):
    """
    Raised when a source's external retrieval fails.

    Carries the source id and capability so the failure can be logged
    and reported without extra context from the caller.
    """

    def __init__(
        self,
        message: str,
        source_id: str | None = None,
        capability: str | None = None,
    ):
        super().__init__(message)
        self.source_id = source_id
        self.capability = capability


class RecordValidationError(VCIntelError):
    """Raised when a record lacks the fields the scoring engine needs."""
