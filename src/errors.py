"""Exception hierarchy for the OpenFisca rule editor."""

from __future__ import annotations

from typing import Any


class RuleEditorError(Exception):
    """Base exception for all rule editor errors.

    Attributes:
        error_code: Machine-readable error code for callers.
        message: Human-readable error message, shown verbatim to the user.
        details: Additional error context.
    """

    error_code: str = "RULE_EDITOR_ERROR"

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        error_code: str | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message.
            details: Additional context (e.g., url, model).
            error_code: Override the class error code.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

        if error_code:
            self.error_code = error_code

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for display or JSON output."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class FetchError(RuleEditorError):
    """A rule description page could not be retrieved.

    Raised when:
    - The HTTP request fails or times out
    - The server answers with a non-success status
    - The response body is empty
    """

    error_code = "FETCH_ERROR"


class AuthConfigError(RuleEditorError):
    """The Gemini credential is missing or was rejected."""

    error_code = "AUTH_CONFIG_ERROR"


class GenerationError(RuleEditorError):
    """Error during Gemini generation.

    Raised when:
    - The Gemini API call fails or times out
    - The reply carries no extractable text
    """

    error_code = "GENERATION_ERROR"
