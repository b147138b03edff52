"""Custom exceptions for the contact extraction domain."""


class HarvesterError(Exception):
    """Base exception for this project."""


class FetchError(HarvesterError):
    """Raised when a document cannot be fetched (DNS, connection, timeout)."""


class ParseError(HarvesterError):
    """Raised when markup is beyond the parser's tolerance."""


class ValidationError(HarvesterError):
    """Raised when a batch request is malformed."""


class ConfigError(ValidationError):
    """Raised when runtime configuration is invalid."""
