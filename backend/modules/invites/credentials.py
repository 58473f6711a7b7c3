"""
Credential derivation for invite redemption.

Staff accounts sign in with the email and password they chose. Students
have no email: their auth email is synthesized from the matricula and the
matricula doubles as the password, so both must be returned to the client
to complete sign-in.
"""

import re
from typing import Optional

from .exceptions import IncompleteCredentialsError, WeakCredentialError
from .models import AccountCredentials, InviteRole, RedeemInviteRequest

_WHITESPACE = re.compile(r"\s+")


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


def student_auth_email(matricula: str, domain: str) -> str:
    """`<matricula without whitespace>@<domain>`"""
    return f"{_WHITESPACE.sub('', matricula)}@{domain}"


def derive_credentials(
    role: str,
    request: RedeemInviteRequest,
    student_email_domain: str,
    min_password_length: int = 6,
) -> AccountCredentials:
    """
    Build identity credentials for a generic invite.

    Args:
        role: The invite's role_destino (already validated)
        request: Redemption request body
        student_email_domain: Domain of synthesized student emails
        min_password_length: Minimum password/matricula length

    Returns:
        AccountCredentials ready for identity creation

    Raises:
        IncompleteCredentialsError: If the email/password or matricula is missing
        WeakCredentialError: If the password or matricula is too short
    """
    if role == InviteRole.ALUNO.value:
        matricula = (request.matricula or "").strip()
        if not matricula:
            raise IncompleteCredentialsError("Matrícula é obrigatória para aluno")
        credentials = AccountCredentials(
            email=student_auth_email(matricula, student_email_domain),
            password=matricula,
            matricula=matricula,
        )
    else:
        credentials = AccountCredentials(
            email=normalize_email(request.email),
            password=request.senha or "",
        )

    if not credentials.email or not credentials.password:
        raise IncompleteCredentialsError("Dados incompletos para criação da conta")

    check_password_strength(
        credentials.password,
        min_password_length,
        student=credentials.matricula is not None,
    )
    return credentials


def check_password_strength(password: str, min_length: int = 6, student: bool = False) -> None:
    """
    Raises:
        WeakCredentialError: If the password is shorter than min_length
    """
    if len(password) >= min_length:
        return
    if student:
        raise WeakCredentialError(
            min_length,
            f"A senha deve ter pelo menos {min_length} caracteres (matrícula mínima de {min_length}).",
        )
    raise WeakCredentialError(min_length)
