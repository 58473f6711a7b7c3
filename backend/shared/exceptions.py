"""
Base exception classes for the Bibliotecai backend.

Each module should define its own exceptions that inherit from these bases.
This enables consistent error handling across the application: the API layer
turns any BibliotecaiError into the `{success: false, error}` envelope using
the exception's status_code.
"""

from typing import Optional, Any


class BibliotecaiError(Exception):
    """
    Base exception for all Bibliotecai errors.

    All custom exceptions should inherit from this class.
    """

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for logs and diagnostics."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }

    def to_envelope(self) -> dict[str, Any]:
        """Convert exception to the public JSON error envelope."""
        return {"success": False, "error": self.message}


class NotFoundError(BibliotecaiError):
    """Resource not found."""

    status_code = 404


class ValidationError(BibliotecaiError):
    """Input validation failed."""

    status_code = 400


class ConfigurationError(BibliotecaiError):
    """Server configuration is incomplete or invalid."""

    pass


class MissingServerConfigurationError(ConfigurationError):
    """Raised when required Supabase settings are not set."""

    def __init__(self, missing: Optional[list[str]] = None):
        super().__init__(
            "Configuração incompleta no servidor",
            code="MISSING_SERVER_CONFIGURATION",
            details={"missing": missing or []},
        )


class InvalidServerConfigurationError(ConfigurationError):
    """Raised when Supabase settings are present but rejected by the client."""

    def __init__(self, reason: str):
        super().__init__(
            "Configuração inválida no servidor",
            code="INVALID_SERVER_CONFIGURATION",
            details={"reason": reason},
        )


class UnexpectedError(BibliotecaiError):
    """Catch-all for failures that have no dedicated error type."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or "Erro inesperado", code="UNEXPECTED_ERROR")
