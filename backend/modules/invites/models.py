"""
Invite module data models.

These models define invite tokens, the provisioning inputs derived from
them, and the request/response bodies of the redemption endpoints.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class InviteRole(str, Enum):
    """Roles a user can hold."""

    GESTOR = "gestor"
    PROFESSOR = "professor"
    BIBLIOTECARIA = "bibliotecaria"
    ALUNO = "aluno"


# Roles that a generic invite token may grant
ALLOWED_INVITE_ROLES = frozenset({
    InviteRole.PROFESSOR.value,
    InviteRole.BIBLIOTECARIA.value,
    InviteRole.ALUNO.value,
})


class InviteToken(BaseModel):
    """
    Single-use invite granting one account with a pre-assigned role.

    Stored in `tokens_convite`. `role_destino` is kept as a plain string
    because the table may hold roles this service refuses to redeem.
    """

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    id: str
    token: Optional[str] = None
    role_destino: str
    escola_id: Optional[str] = None
    expira_em: datetime
    ativo: bool = True
    usado_por: Optional[str] = None
    usado_em: Optional[datetime] = None

    def is_redeemable(self, now: Optional[datetime] = None) -> bool:
        """Active, unused and not yet expired."""
        now = now or datetime.now(timezone.utc)
        return self.ativo and not self.usado_por and self.expira_em > now


class TenantInviteContext(BaseModel):
    """School and subdomain a gestor invite onboards into."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    escola_id: str
    subdominio: Optional[str] = None


class AccountCredentials(BaseModel):
    """Identity credentials derived from an invite redemption request."""

    model_config = ConfigDict(frozen=True)

    email: str
    password: str
    matricula: Optional[str] = None


class ProfileRecord(BaseModel):
    """Profile row in `usuarios_biblioteca`."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    id: str
    user_id: Optional[str] = None


class ProfilePayload(BaseModel):
    """Fields written to a profile on redemption."""

    user_id: str
    nome: str
    email: str
    tipo: str
    escola_id: Optional[str] = None
    matricula: Optional[str] = None


# =============================================================================
# API request/response models
# =============================================================================


class RedeemInviteRequest(BaseModel):
    """
    Body of a generic invite redemption.

    Staff roles send email and senha; students send matricula only.
    Fields are optional here so missing ones are reported through the
    error envelope rather than a schema error.
    """

    token: Optional[str] = None
    nome: Optional[str] = None
    email: Optional[str] = None
    senha: Optional[str] = None
    matricula: Optional[str] = None


class RedeemGestorInviteRequest(BaseModel):
    """Body of a gestor (tenant admin) invite redemption."""

    token: Optional[str] = None
    nome: Optional[str] = None
    email: Optional[str] = None
    senha: Optional[str] = None


class RedeemInviteResponse(BaseModel):
    """Successful generic redemption."""

    success: bool = True
    message: str = "Usuário registrado com sucesso"
    role: str
    auth_email: str
    auth_password: Optional[str] = Field(
        None, description="Generated password, returned for students only"
    )


class RedeemGestorInviteResponse(BaseModel):
    """Successful gestor redemption."""

    success: bool = True
    email: str
    role: str = InviteRole.GESTOR.value
    tenant_subdomain: Optional[str] = None


class InvitePreviewResponse(BaseModel):
    """Redeemable invite details shown before sign-up."""

    success: bool = True
    role_destino: str
    escola_id: Optional[str] = None
    expira_em: datetime


class TenantInvitePreviewResponse(BaseModel):
    """Gestor invite details shown before sign-up."""

    success: bool = True
    escola_id: str
    subdominio: Optional[str] = None
