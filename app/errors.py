"""
app/errors.py

Exception taxonomy for the user bulk import.
"""

from __future__ import annotations

from collections.abc import Sequence


class UserImportError(Exception):
    """Base exception for user import failures."""


class ImportConfigurationError(UserImportError):
    """
    Raised when the import cannot run with the current configuration.

    Covers failed preconditions and credentials rejected by the remote API.
    Never retried.
    """


class TransientDeliveryError(UserImportError):
    """
    One failed delivery attempt that may succeed when retried.
    """

    def __init__(
        self,
        *,
        attempt: int,
        status_code: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.attempt = attempt
        self.status_code = status_code
        self.cause = cause
        detail = f"status={status_code}" if status_code is not None else f"error={cause!r}"
        super().__init__(f"Bulk create attempt {attempt} failed ({detail}).")


class TerminalDeliveryError(UserImportError):
    """
    Raised when a batch cannot be delivered and no retry is left.

    Attributes:
        status_code: HTTP status of the last response, or None when the last
            attempt never reached the server.
        attempts: Number of attempts made for the batch.
        history: Transient errors recorded for every failed attempt.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None,
        attempts: int,
        history: Sequence[TransientDeliveryError] = (),
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.attempts = attempts
        self.history = tuple(history)


class InvalidDeliveryResponseError(TerminalDeliveryError):
    """Raised when a successful response body cannot be parsed."""
