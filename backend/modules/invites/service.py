"""
Invite redemption service.

Turns a single-use invite token into a provisioned user: an identity, exactly
one role, and a library profile. Provisioning runs as a saga; if the role or
profile step fails, the identity created in the first step is deleted and
the step's error is raised.

Token bookkeeping after a successful provisioning is best-effort: the account
is valid even if marking the token as used fails, so such failures are
logged and the redemption still succeeds.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional, TypeVar

from shared.exceptions import BibliotecaiError
from shared.saga import Saga

from .credentials import check_password_strength, derive_credentials, normalize_email
from .exceptions import (
    IncompleteCredentialsError,
    InvalidOrExpiredTokenError,
    MatriculaAlreadyLinkedError,
    ProfileProvisioningFailedError,
    RoleAssignmentFailedError,
    RoleNotAllowedError,
)
from .interfaces import IAccountRepository, IIdentityProvider, IInviteRepository, IInviteService
from .models import (
    ALLOWED_INVITE_ROLES,
    InvitePreviewResponse,
    InviteRole,
    InviteToken,
    ProfilePayload,
    RedeemGestorInviteRequest,
    RedeemGestorInviteResponse,
    RedeemInviteRequest,
    RedeemInviteResponse,
    TenantInviteContext,
    TenantInvitePreviewResponse,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_STUDENT_EMAIL_DOMAIN = "temp.bibliotecai.com"
TENANT_INVITE_INVALID_MESSAGE = "Link inválido ou expirado"


@dataclass(frozen=True)
class ProvisioningMessages:
    """User-facing error message for each provisioning sub-step."""

    role_cleanup: str
    role_assignment: str
    profile_lookup: str
    roster_lookup: str
    profile_update: str
    profile_insert: str


INVITE_MESSAGES = ProvisioningMessages(
    role_cleanup="Não foi possível preparar a função do usuário",
    role_assignment="Não foi possível definir a função do usuário",
    profile_lookup="Não foi possível localizar o perfil do usuário",
    roster_lookup="Não foi possível criar o perfil do usuário",
    profile_update="Não foi possível criar o perfil do usuário",
    profile_insert="Não foi possível criar o perfil do usuário",
)

GESTOR_MESSAGES = ProvisioningMessages(
    role_cleanup="Não foi possível definir o papel gestor",
    role_assignment="Não foi possível definir o papel gestor",
    profile_lookup="Falha ao consultar perfil",
    roster_lookup="Falha ao consultar perfil",
    profile_update="Falha ao atualizar perfil",
    profile_insert="Falha ao criar perfil",
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InviteService(IInviteService):
    """
    Invite redemption with Supabase-backed collaborators.

    Stateless: each call handles one redemption. Concurrent redemptions of
    the same token are not coordinated here; the store's conditional
    updates decide which one consumes the token.
    """

    def __init__(
        self,
        invites: IInviteRepository,
        accounts: IAccountRepository,
        identity: IIdentityProvider,
        student_email_domain: str = DEFAULT_STUDENT_EMAIL_DOMAIN,
        min_password_length: int = 6,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._invites = invites
        self._accounts = accounts
        self._identity = identity
        self._student_email_domain = student_email_domain
        self._min_password_length = min_password_length
        self._clock = clock or _utcnow

    # -------------------------------------------------------------------------
    # Generic invites (professor, bibliotecaria, aluno)
    # -------------------------------------------------------------------------

    async def redeem_invite(self, request: RedeemInviteRequest) -> RedeemInviteResponse:
        if not request.token or not request.nome:
            raise IncompleteCredentialsError()

        invite = self._find_invite(request.token)
        role = invite.role_destino
        if role not in ALLOWED_INVITE_ROLES:
            raise RoleNotAllowedError(role)

        credentials = derive_credentials(
            role,
            request,
            self._student_email_domain,
            self._min_password_length,
        )

        saga = Saga(f"redeem-invite:{invite.id}")
        user_id = saga.run(
            "create_identity",
            lambda: self._identity.create_identity(
                credentials.email, credentials.password, request.nome
            ),
            compensate=self._delete_identity,
        )
        saga.run("assign_role", lambda: self._assign_single_role(user_id, role, INVITE_MESSAGES))

        payload = ProfilePayload(
            user_id=user_id,
            nome=request.nome,
            email=credentials.email,
            tipo=role,
            escola_id=invite.escola_id,
            matricula=credentials.matricula,
        )
        saga.run(
            "provision_profile",
            lambda: self._provision_profile(
                payload, INVITE_MESSAGES, matricula=credentials.matricula
            ),
        )
        saga.complete()

        try:
            self._invites.mark_token_used(invite.id, user_id, self._clock())
        except Exception as e:
            logger.warning(f"Failed to mark invite {invite.id} as used by {user_id}: {e}")

        logger.info(f"Provisioned {role} account {user_id} from invite {invite.id}")

        is_aluno = role == InviteRole.ALUNO.value
        return RedeemInviteResponse(
            role=role,
            auth_email=credentials.email,
            auth_password=credentials.password if is_aluno else None,
        )

    async def preview_invite(self, token: str) -> InvitePreviewResponse:
        if not token:
            raise InvalidOrExpiredTokenError()

        invite = self._find_invite(token)
        return InvitePreviewResponse(
            role_destino=invite.role_destino,
            escola_id=invite.escola_id,
            expira_em=invite.expira_em,
        )

    def _find_invite(self, token: str) -> InviteToken:
        now = self._clock()
        try:
            invite = self._invites.get_redeemable_token(token, now)
        except Exception as e:
            logger.error(f"Invite lookup failed: {e}")
            raise InvalidOrExpiredTokenError() from e

        if invite is None or not invite.is_redeemable(now):
            raise InvalidOrExpiredTokenError()
        return invite

    # -------------------------------------------------------------------------
    # Gestor invites
    # -------------------------------------------------------------------------

    async def redeem_gestor_invite(
        self, request: RedeemGestorInviteRequest
    ) -> RedeemGestorInviteResponse:
        if not request.token or not request.nome or not request.email or not request.senha:
            raise IncompleteCredentialsError()

        check_password_strength(request.senha, self._min_password_length)

        context = self._find_tenant_invite(request.token)
        email = normalize_email(request.email)
        role = InviteRole.GESTOR.value

        saga = Saga(f"redeem-gestor-invite:{context.escola_id}")
        user_id = saga.run(
            "create_identity",
            lambda: self._identity.create_identity(email, request.senha, request.nome),
            compensate=self._delete_identity,
        )
        saga.run(
            "assign_role",
            lambda: self._assign_single_role(user_id, role, GESTOR_MESSAGES),
        )
        payload = ProfilePayload(
            user_id=user_id,
            nome=request.nome,
            email=email,
            tipo=role,
            escola_id=context.escola_id,
            matricula=None,
        )
        saga.run("provision_profile", lambda: self._provision_profile(payload, GESTOR_MESSAGES))
        saga.complete()

        now = self._clock()
        try:
            self._invites.mark_tenant_invite_used(request.token, user_id, now)
        except Exception as e:
            logger.warning(f"Failed to mark gestor invite as used by {user_id}: {e}")

        try:
            self._invites.claim_school_gestor(context.escola_id, user_id)
        except Exception as e:
            logger.warning(f"Failed to set gestor of school {context.escola_id}: {e}")

        logger.info(f"Provisioned gestor account {user_id} for school {context.escola_id}")

        return RedeemGestorInviteResponse(
            email=email,
            role=role,
            tenant_subdomain=context.subdominio,
        )

    async def preview_gestor_invite(self, token: str) -> TenantInvitePreviewResponse:
        if not token:
            raise InvalidOrExpiredTokenError(TENANT_INVITE_INVALID_MESSAGE)

        context = self._find_tenant_invite(token)
        return TenantInvitePreviewResponse(
            escola_id=context.escola_id,
            subdominio=context.subdominio,
        )

    def _find_tenant_invite(self, token: str) -> TenantInviteContext:
        try:
            context = self._invites.get_tenant_invite_context(token)
        except Exception as e:
            logger.error(f"Tenant invite lookup failed: {e}")
            raise InvalidOrExpiredTokenError(TENANT_INVITE_INVALID_MESSAGE) from e

        if context is None:
            raise InvalidOrExpiredTokenError(TENANT_INVITE_INVALID_MESSAGE)
        return context

    # -------------------------------------------------------------------------
    # Provisioning steps
    # -------------------------------------------------------------------------

    def _delete_identity(self, user_id: str) -> None:
        logger.warning(f"Rolling back identity {user_id}")
        self._identity.delete_identity(user_id)

    def _assign_single_role(self, user_id: str, role: str, messages: ProvisioningMessages) -> None:
        """Leave the user with exactly one role row: `(user_id, role)`."""
        self._run_step(
            f"role cleanup for {user_id}",
            lambda: self._accounts.remove_other_roles(user_id, role),
            lambda: RoleAssignmentFailedError(role, messages.role_cleanup),
        )
        self._run_step(
            f"role assignment for {user_id} ({role})",
            lambda: self._accounts.upsert_role(user_id, role),
            lambda: RoleAssignmentFailedError(role, messages.role_assignment),
        )

    def _provision_profile(
        self,
        payload: ProfilePayload,
        messages: ProvisioningMessages,
        matricula: Optional[str] = None,
    ) -> None:
        """
        Create or update the user's profile.

        A profile already bound to the user is updated in place. For
        students, a pre-created roster profile with the same matricula and
        no bound user is claimed instead of inserting a duplicate.
        """
        user_id = payload.user_id
        existing = self._run_step(
            f"profile lookup for {user_id}",
            lambda: self._accounts.find_profile_by_user_id(user_id),
            lambda: ProfileProvisioningFailedError(messages.profile_lookup),
        )
        target = existing

        if target is None and matricula:
            precreated = self._run_step(
                f"roster lookup for {user_id}",
                lambda: self._accounts.find_profile_by_matricula(matricula),
                lambda: ProfileProvisioningFailedError(messages.roster_lookup),
            )
            if precreated is not None and precreated.user_id and precreated.user_id != user_id:
                raise MatriculaAlreadyLinkedError(matricula)
            target = precreated

        if target is not None:
            self._run_step(
                f"profile update for {user_id}",
                lambda: self._accounts.update_profile(target.id, payload),
                lambda: ProfileProvisioningFailedError(messages.profile_update),
            )
        else:
            self._run_step(
                f"profile insert for {user_id}",
                lambda: self._accounts.insert_profile(payload),
                lambda: ProfileProvisioningFailedError(messages.profile_insert),
            )

    @staticmethod
    def _run_step(
        description: str,
        action: Callable[[], T],
        error: Callable[[], BibliotecaiError],
    ) -> T:
        try:
            return action()
        except Exception as e:
            logger.error(f"Failed {description}: {e}")
            raise error() from e
