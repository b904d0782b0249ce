"""
SpecifyThat error types.

Nothing here is fatal: every error leaves the interview session in its last
good state and the triggering action can be retried.
"""

from typing import Any, Optional


class SpecifyThatError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details


class InputRejectedError(SpecifyThatError):
    """Answer failed a validation rule or the gibberish check."""

    def __init__(self, message: str, code: str = "input_rejected", details: Optional[dict[str, Any]] = None):
        super().__init__(code, message, details)


class ServiceError(SpecifyThatError):
    """A backend service call failed (HTTP status or transport)."""

    def __init__(self, message: str, code: str = "service_error", details: Optional[dict[str, Any]] = None):
        super().__init__(code, message, details)
