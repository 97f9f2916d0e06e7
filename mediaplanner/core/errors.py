# mediaplanner/core/errors.py
from typing import Optional


class PlannerError(Exception):
    """Base for errors that map onto an HTTP response."""
    status_code = 500
    error = "internal_error"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail or self.error)
        self.detail = detail


class InvalidInputError(PlannerError):
    status_code = 400
    error = "invalid_input"


class InvalidCsvError(InvalidInputError):
    error = "invalid_csv"


class NotFoundError(PlannerError):
    status_code = 404
    error = "not_found"


class ProviderError(PlannerError):
    """The generative-text provider failed (transport, quota, bad response)."""
    status_code = 502
    error = "provider_error"


class ProviderConfigError(ProviderError):
    """No credential configured for the provider."""
    status_code = 500
    error = "provider_not_configured"
