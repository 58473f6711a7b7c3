"""
Invite module interfaces.

The redemption service depends on these protocols, not on Supabase
directly. Tests provide in-memory implementations.
"""

from datetime import datetime
from typing import Optional, Protocol, runtime_checkable

from .models import (
    InvitePreviewResponse,
    InviteToken,
    ProfilePayload,
    ProfileRecord,
    RedeemGestorInviteRequest,
    RedeemGestorInviteResponse,
    RedeemInviteRequest,
    RedeemInviteResponse,
    TenantInviteContext,
    TenantInvitePreviewResponse,
)


@runtime_checkable
class IIdentityProvider(Protocol):
    """Creates and deletes authentication identities."""

    def create_identity(self, email: str, password: str, nome: str) -> str:
        """
        Create a pre-confirmed identity tagged with `{nome}` metadata.

        Returns:
            The new user's ID

        Raises:
            IdentityCreationFailedError: If the provider rejects the account
        """
        ...

    def delete_identity(self, user_id: str) -> None:
        """Delete an identity. Used as compensation."""
        ...


@runtime_checkable
class IInviteRepository(Protocol):
    """Access to invite tokens and the records they guard."""

    def get_redeemable_token(self, token: str, now: datetime) -> Optional[InviteToken]:
        """
        Get a token that is active, unused and not expired at `now`.

        Returns:
            InviteToken if redeemable, None otherwise
        """
        ...

    def mark_token_used(self, token_id: str, user_id: str, used_at: datetime) -> None:
        """Record the consuming user on a generic invite."""
        ...

    def get_tenant_invite_context(self, token: str) -> Optional[TenantInviteContext]:
        """
        Resolve a gestor invite through the privileged lookup function.

        Returns:
            TenantInviteContext if the invite is redeemable, None otherwise
        """
        ...

    def mark_tenant_invite_used(self, token: str, user_id: str, used_at: datetime) -> None:
        """Consume a gestor invite, only if it is still unused."""
        ...

    def claim_school_gestor(self, escola_id: str, user_id: str) -> None:
        """Point a school at its gestor, only if none is set."""
        ...


@runtime_checkable
class IAccountRepository(Protocol):
    """Role assignments and library profiles."""

    def remove_other_roles(self, user_id: str, role: str) -> None:
        """Delete the user's role rows whose role differs from `role`."""
        ...

    def upsert_role(self, user_id: str, role: str) -> None:
        """Insert `(user_id, role)` unless it already exists."""
        ...

    def find_profile_by_user_id(self, user_id: str) -> Optional[ProfileRecord]:
        ...

    def find_profile_by_matricula(self, matricula: str) -> Optional[ProfileRecord]:
        ...

    def update_profile(self, profile_id: str, payload: ProfilePayload) -> None:
        ...

    def insert_profile(self, payload: ProfilePayload) -> None:
        ...


@runtime_checkable
class IInviteService(Protocol):
    """
    Interface for invite redemption.

    Every method raises a BibliotecaiError subclass on failure; the API
    layer converts it into the error envelope.
    """

    async def redeem_invite(self, request: RedeemInviteRequest) -> RedeemInviteResponse:
        """
        Provision a professor, bibliotecaria or aluno account from a token.

        Raises:
            IncompleteCredentialsError, InvalidOrExpiredTokenError,
            RoleNotAllowedError, WeakCredentialError,
            IdentityCreationFailedError, RoleAssignmentFailedError,
            ProfileProvisioningFailedError, MatriculaAlreadyLinkedError
        """
        ...

    async def redeem_gestor_invite(
        self, request: RedeemGestorInviteRequest
    ) -> RedeemGestorInviteResponse:
        """
        Provision a gestor account for the school of a tenant admin invite.
        """
        ...

    async def preview_invite(self, token: str) -> InvitePreviewResponse:
        """Describe a redeemable generic invite."""
        ...

    async def preview_gestor_invite(self, token: str) -> TenantInvitePreviewResponse:
        """Describe a redeemable gestor invite."""
        ...
