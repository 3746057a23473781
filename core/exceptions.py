"""
Exceptions for the Urban Impact Engine.

The engine degrades rather than aborts: data lookups raise
DataUnavailableError internally and recover with documented defaults at
their public boundary. Only configuration problems escape to callers.
"""


class UrbanImpactError(Exception):
    """
    Base exception for engine failures.

    Attributes:
        message: Human-readable error description
        details: Additional context about the failure
    """

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


class DataUnavailableError(UrbanImpactError):
    """
    An external data source returned nothing usable.

    Raised by provider internals when a request fails, times out, or the
    payload lacks the expected fields. Providers catch it at their public
    boundary and fall back to defaults.

    Attributes:
        source: Name of the data source
        reason: Short description of the failure
    """

    def __init__(self, source: str, reason: str = ""):
        message = f"Data source '{source}' unavailable"
        super().__init__(message, {"source": source, "reason": reason})
        self.source = source
        self.reason = reason


class ConfigurationError(UrbanImpactError, ValueError):
    """
    Configuration file could not be loaded or is malformed.

    Attributes:
        path: Configuration file path, if any
    """

    def __init__(self, message: str, path: str = None):
        super().__init__(message, {"path": path} if path else None)
        self.path = path
