"""
Exception types raised by services and the AI provider client.

Routes never let these escape: :func:`sitebuilder.api.response_builders.api_boundary`
renders ``ApiError`` subclasses, and the AI routes map the provider errors.
"""
from typing import Any, Optional


class ApiError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None, details: Any = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details


class NotFoundError(ApiError):
    status_code = 404

    def __init__(self, resource: str):
        super().__init__(f"{resource} not found")
        self.resource = resource


class ConflictError(ApiError):
    status_code = 409


class ProviderError(Exception):
    """AI provider call failed"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ProviderAuthError(ProviderError):
    """Provider rejected our credential, or none is configured"""


class ProviderRateLimitError(ProviderError):
    def __init__(self, message: str, retry_after: Optional[str] = None):
        super().__init__(message, status_code=429)
        self.retry_after = retry_after
