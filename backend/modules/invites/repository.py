"""
Invite and account repositories for database access.

Encapsulates all Supabase queries used by invite redemption:
- tokens_convite (generic invites)
- tenant_admin_invites / get_tenant_invite_context (gestor invites)
- escolas (gestor pointer)
- user_roles
- usuarios_biblioteca (profiles)

Conditional updates (`IS NULL` guards) are the only concurrency control;
repositories perform no authorization checks.
"""

from datetime import datetime
from typing import Optional

from supabase import Client

from shared.repository import BaseRepository
from .models import InviteToken, ProfilePayload, ProfileRecord, TenantInviteContext


class InviteRepository(BaseRepository[InviteToken]):
    """
    Repository for invite tokens.

    The gestor invite table is not readable with the caller's credentials,
    so its lookup goes through an RPC executed by `caller_db` (anon key plus
    the caller's Authorization header). Writes use the service-role client.
    """

    def __init__(self, db: Client, caller_db: Optional[Client] = None) -> None:
        super().__init__(db)
        self._caller_db = caller_db or db

    # -------------------------------------------------------------------------
    # Generic invites
    # -------------------------------------------------------------------------

    def get_redeemable_token(self, token: str, now: datetime) -> Optional[InviteToken]:
        query = (
            self._db.table("tokens_convite")
            .select("id, token, role_destino, escola_id, expira_em, ativo, usado_por, usado_em")
            .eq("token", token)
            .eq("ativo", True)
            .is_("usado_por", "null")
            .gt("expira_em", now.isoformat())
        )
        row = self._maybe_single(query)
        if row is None:
            return None
        return InviteToken.model_validate(row)

    def mark_token_used(self, token_id: str, user_id: str, used_at: datetime) -> None:
        self._db.table("tokens_convite").update({
            "usado_por": user_id,
            "usado_em": used_at.isoformat(),
        }).eq("id", token_id).execute()

    # -------------------------------------------------------------------------
    # Gestor invites
    # -------------------------------------------------------------------------

    def get_tenant_invite_context(self, token: str) -> Optional[TenantInviteContext]:
        query = self._caller_db.rpc("get_tenant_invite_context", {"_token": token})
        row = self._maybe_single(query)
        if row is None:
            return None
        return TenantInviteContext.model_validate(row)

    def mark_tenant_invite_used(self, token: str, user_id: str, used_at: datetime) -> None:
        self._db.table("tenant_admin_invites").update({
            "usado_em": used_at.isoformat(),
            "usado_por": user_id,
        }).eq("token", token).is_("usado_em", "null").execute()

    def claim_school_gestor(self, escola_id: str, user_id: str) -> None:
        self._db.table("escolas").update({
            "gestor_id": user_id,
        }).eq("id", escola_id).is_("gestor_id", "null").execute()


class AccountRepository(BaseRepository[ProfileRecord]):
    """
    Repository for role assignments and library profiles.

    `user_roles` is unique on (user_id, role), not on user_id, and
    `usuarios_biblioteca` has no unique user_id, so callers look up before
    they write.
    """

    def remove_other_roles(self, user_id: str, role: str) -> None:
        self._db.table("user_roles").delete().eq("user_id", user_id).neq("role", role).execute()

    def upsert_role(self, user_id: str, role: str) -> None:
        self._db.table("user_roles").upsert(
            {"user_id": user_id, "role": role},
            on_conflict="user_id,role",
        ).execute()

    def find_profile_by_user_id(self, user_id: str) -> Optional[ProfileRecord]:
        query = self._db.table("usuarios_biblioteca").select("id, user_id").eq("user_id", user_id)
        row = self._maybe_single(query)
        return ProfileRecord.model_validate(row) if row else None

    def find_profile_by_matricula(self, matricula: str) -> Optional[ProfileRecord]:
        query = self._db.table("usuarios_biblioteca").select("id, user_id").eq("matricula", matricula)
        row = self._maybe_single(query)
        return ProfileRecord.model_validate(row) if row else None

    def update_profile(self, profile_id: str, payload: ProfilePayload) -> None:
        self._db.table("usuarios_biblioteca").update(payload.model_dump()).eq("id", profile_id).execute()

    def insert_profile(self, payload: ProfilePayload) -> None:
        self._db.table("usuarios_biblioteca").insert(payload.model_dump()).execute()
