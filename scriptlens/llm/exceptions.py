class GenerationError(Exception):
    """Base exception for all text-generation failures."""


class ServiceUnavailableError(GenerationError):
    """Raised when the model-serving endpoint cannot be reached."""


class NoModelSelectedError(GenerationError):
    """Raised when generation is requested before a model is chosen."""


class ModelNotFoundError(GenerationError):
    """Raised when the requested model is not served by the endpoint."""


class GenerationNetworkError(GenerationError):
    """Raised when the provider call fails due to network/infrastructure issues."""


class EmptyResponseError(GenerationError):
    """Raised when the provider returns no usable text."""


class GenerationCancelledError(GenerationError):
    """Raised when an in-flight operation is cancelled through its operation id."""
