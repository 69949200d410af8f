"""Error taxonomy for the analysis pipeline."""


class PhishAgentError(Exception):
    """Base class for all phish agent errors."""
    kind = "error"


class ConfigurationError(PhishAgentError):
    """Missing or invalid API credential."""
    kind = "configuration"


class StorageError(PhishAgentError):
    """Persistent store could not be read or written."""
    kind = "storage"


class InvalidEmailError(PhishAgentError):
    """Email data absent or not a mapping."""
    kind = "invalid_email"


class AnalysisError(PhishAgentError):
    """Remote scan failed. Always recovered by the router."""
    kind = "analysis"


class TransportError(AnalysisError):
    """Network failure or non-success HTTP status."""
    kind = "transport"

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code


class EmptyResponseError(AnalysisError):
    """The model returned no content."""
    kind = "empty_response"


class MalformedResponseError(AnalysisError):
    """No parseable JSON object in the model output."""
    kind = "malformed_response"


class InvalidSchemaError(AnalysisError):
    """Parsed JSON lacks a required field or has the wrong type."""
    kind = "invalid_schema"
