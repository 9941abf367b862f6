"""Domain level failures raised by services and mapped to HTTP by routes."""

from __future__ import annotations


class SurveyNotFoundError(LookupError):
    """Survey is absent or not visible to the requesting organization."""

    def __init__(self, message: str = "Survey not found") -> None:
        super().__init__(message)
        self.message = message


class InvalidSubmissionError(ValueError):
    """A feedback submission failed validation."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class QrTokenExpiredError(Exception):
    """The QR token exists but is past its expiry."""

    def __init__(self, message: str = "QR expired") -> None:
        super().__init__(message)
        self.message = message
