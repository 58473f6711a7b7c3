"""
Invite module exceptions.

Messages are user-facing: the redemption forms show the `error` string of
the response envelope as-is.
"""

from typing import Optional

from shared.exceptions import BibliotecaiError, ValidationError


class InviteError(BibliotecaiError):
    """Base exception for invite redemption errors."""

    pass


class InvalidOrExpiredTokenError(ValidationError):
    """Raised when a token is unknown, inactive, used or expired."""

    def __init__(self, message: str = "Token inválido ou expirado"):
        super().__init__(message, code="INVALID_OR_EXPIRED_TOKEN")


class RoleNotAllowedError(ValidationError):
    """Raised when a token grants a role that cannot self-register."""

    def __init__(self, role: str):
        super().__init__(
            "Este token não permite cadastro para este tipo de usuário",
            code="ROLE_NOT_ALLOWED",
            details={"role": role},
        )


class IncompleteCredentialsError(ValidationError):
    """Raised when required fields are missing."""

    def __init__(self, message: str = "Dados incompletos"):
        super().__init__(message, code="INCOMPLETE_CREDENTIALS")


class WeakCredentialError(ValidationError):
    """Raised when the password (or matricula used as password) is too short."""

    def __init__(self, min_length: int, message: Optional[str] = None):
        super().__init__(
            message or f"A senha deve ter pelo menos {min_length} caracteres",
            code="WEAK_CREDENTIAL",
            details={"min_length": min_length},
        )


class IdentityCreationFailedError(InviteError):
    """Raised when the identity provider rejects the new account."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message, code="IDENTITY_CREATION_FAILED")


class RoleAssignmentFailedError(InviteError):
    """Raised when the user's role rows cannot be written."""

    def __init__(self, role: str, message: str = "Não foi possível definir a função do usuário"):
        super().__init__(message, code="ROLE_ASSIGNMENT_FAILED", details={"role": role})


class ProfileProvisioningFailedError(InviteError):
    """Raised when the profile cannot be looked up, created or updated."""

    def __init__(self, message: str = "Não foi possível criar o perfil do usuário"):
        super().__init__(message, code="PROFILE_PROVISIONING_FAILED")


class MatriculaAlreadyLinkedError(InviteError):
    """Raised when a student number is already bound to another account."""

    status_code = 400

    def __init__(self, matricula: str):
        super().__init__(
            "Esta matrícula já está vinculada a outra conta",
            code="MATRICULA_ALREADY_LINKED",
            details={"matricula": matricula},
        )
