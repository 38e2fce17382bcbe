class AnalysisError(Exception):
    """Base exception for prompt building and response parsing."""


class ResponseParseError(AnalysisError):
    """Raised when section-based parsing of a model response fails outright."""


class NoJsonFoundError(AnalysisError):
    """Raised when a response contains no brace-delimited JSON object."""


class MalformedJsonError(AnalysisError):
    """Raised when the located JSON object cannot be decoded."""


class AnalysisValidationError(AnalysisError):
    """Raised when sub-prompt JSON does not match the expected structure."""


class PromptTemplateError(AnalysisError):
    """Raised when a bundled prompt template cannot be loaded."""
