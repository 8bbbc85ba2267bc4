"""Custom exceptions for confimpact."""


class ConfImpactError(Exception):
    """Base exception for all confimpact errors."""


class DocumentNotFoundError(ConfImpactError, FileNotFoundError):
    """Raised when an input document does not exist."""


class ParseError(ConfImpactError):
    """Malformed JSON/YAML or a document of the wrong shape."""


class UnsupportedFormatError(ParseError):
    """Unknown file extension and the content is not valid JSON either."""


class ConfigError(ConfImpactError):
    """Configuration-related errors."""


class HistoryError(ConfImpactError):
    """History file errors."""
