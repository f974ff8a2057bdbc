"""
Exception classes for the add-on registration system.

All exceptions inherit from RegistrationError and provide structured
error information with codes, messages, and optional details.
"""

from typing import Optional


class RegistrationError(Exception):
    """Base exception for all add-on registration errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> dict:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class WorkflowDefinitionError(RegistrationError):
    """Raised when a workflow graph is inconsistent (unknown step, bad edge)."""

    pass


class MissingActionError(WorkflowDefinitionError):
    """Raised when a declared workflow step has no action to run."""

    pass


class MissingTransitionError(WorkflowDefinitionError):
    """Raised when a step returns an outcome that has no edge for that step."""

    pass


class ProfileError(RegistrationError):
    """Raised when an unattended profile cannot be read, parsed or encoded."""

    pass


class FetchError(RegistrationError):
    """Raised by fetch backends when a media or network resource is unavailable."""

    pass
