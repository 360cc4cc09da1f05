class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when the operator password is wrong."""


class UnknownCodeError(DomainError):
    """Raised when a scanned code matches no student."""

    def __init__(self, code: str):
        super().__init__(f"NISN Tidak Dikenal: {code}")
        self.code = code


class DuplicateDateError(DomainError):
    """Raised by a raw ledger append when the student already has a record that day."""


class DispatchError(DomainError):
    """Base class for guardian notification failures."""


class GatewayConfigError(DispatchError):
    """External gateway selected without an endpoint."""


class GatewayTransportError(DispatchError):
    """Network failure or non-success response from the external gateway."""


class RateLimitError(DomainError):
    """An upstream API refused the call because of rate limiting or quota."""

    def __init__(self, message: str, *, status_code: int | None = 429, status: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.status = status


class ImportValidationError(DomainError):
    """Raised when an imported snapshot or spreadsheet cannot be read at all."""
