"""
Pytest fixtures for invite module tests.

Provides in-memory stand-ins for the token store, the account tables and
the identity provider, so redemption can be checked end to end without
Supabase. Failures are injected by setting `fail_on` to a method name.
"""

import itertools
from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest

from modules.invites.exceptions import IdentityCreationFailedError
from modules.invites.identity import ALREADY_REGISTERED_MESSAGE
from modules.invites.models import (
    InviteToken,
    ProfilePayload,
    ProfileRecord,
    TenantInviteContext,
)
from modules.invites.service import InviteService


NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


class _Failing:
    fail_on: set[str]

    def _maybe_fail(self, method: str) -> None:
        if method in self.fail_on:
            raise RuntimeError(f"{method} failed")


class FakeInviteRepository(_Failing):
    def __init__(self):
        self.tokens: dict[str, InviteToken] = {}
        self.tenant_invites: dict[str, dict] = {}
        self.school_gestors: dict[str, Optional[str]] = {}
        self.fail_on: set[str] = set()

    def add_token(self, token: str, role: str, escola_id: str = "E1", **fields) -> InviteToken:
        fields.setdefault("expira_em", NOW + timedelta(days=7))
        invite = InviteToken(
            id=f"tok-{len(self.tokens) + 1}",
            token=token,
            role_destino=role,
            escola_id=escola_id,
            **fields,
        )
        self.tokens[token] = invite
        return invite

    def add_tenant_invite(self, token: str, escola_id: str = "E1", subdominio: str = "escola1") -> None:
        self.tenant_invites[token] = {
            "escola_id": escola_id,
            "subdominio": subdominio,
            "usado_por": None,
            "usado_em": None,
        }
        self.school_gestors.setdefault(escola_id, None)

    def get_redeemable_token(self, token: str, now: datetime) -> Optional[InviteToken]:
        self._maybe_fail("get_redeemable_token")
        invite = self.tokens.get(token)
        if invite is None or not invite.is_redeemable(now):
            return None
        return invite

    def mark_token_used(self, token_id: str, user_id: str, used_at: datetime) -> None:
        self._maybe_fail("mark_token_used")
        for key, invite in self.tokens.items():
            if invite.id == token_id:
                self.tokens[key] = invite.model_copy(
                    update={"usado_por": user_id, "usado_em": used_at}
                )

    def get_tenant_invite_context(self, token: str) -> Optional[TenantInviteContext]:
        self._maybe_fail("get_tenant_invite_context")
        invite = self.tenant_invites.get(token)
        if invite is None or invite["usado_em"] is not None:
            return None
        return TenantInviteContext(escola_id=invite["escola_id"], subdominio=invite["subdominio"])

    def mark_tenant_invite_used(self, token: str, user_id: str, used_at: datetime) -> None:
        self._maybe_fail("mark_tenant_invite_used")
        invite = self.tenant_invites.get(token)
        if invite is not None and invite["usado_em"] is None:
            invite["usado_por"] = user_id
            invite["usado_em"] = used_at

    def claim_school_gestor(self, escola_id: str, user_id: str) -> None:
        self._maybe_fail("claim_school_gestor")
        if self.school_gestors.get(escola_id) is None:
            self.school_gestors[escola_id] = user_id


class FakeAccountRepository(_Failing):
    def __init__(self):
        self.roles: set[tuple[str, str]] = set()
        self.profiles: dict[str, dict] = {}
        self.fail_on: set[str] = set()
        self._ids = itertools.count(1)

    def add_profile(self, **fields) -> str:
        profile_id = f"p-{next(self._ids)}"
        self.profiles[profile_id] = {"user_id": None, **fields}
        return profile_id

    def roles_of(self, user_id: str) -> list[str]:
        return sorted(role for uid, role in self.roles if uid == user_id)

    def profiles_of(self, user_id: str) -> list[dict]:
        return [p for p in self.profiles.values() if p.get("user_id") == user_id]

    def remove_other_roles(self, user_id: str, role: str) -> None:
        self._maybe_fail("remove_other_roles")
        self.roles = {(uid, r) for uid, r in self.roles if uid != user_id or r == role}

    def upsert_role(self, user_id: str, role: str) -> None:
        self._maybe_fail("upsert_role")
        self.roles.add((user_id, role))

    def _find(self, key: str, value: str) -> Optional[ProfileRecord]:
        for profile_id, profile in self.profiles.items():
            if profile.get(key) == value:
                return ProfileRecord(id=profile_id, user_id=profile.get("user_id"))
        return None

    def find_profile_by_user_id(self, user_id: str) -> Optional[ProfileRecord]:
        self._maybe_fail("find_profile_by_user_id")
        return self._find("user_id", user_id)

    def find_profile_by_matricula(self, matricula: str) -> Optional[ProfileRecord]:
        self._maybe_fail("find_profile_by_matricula")
        return self._find("matricula", matricula)

    def update_profile(self, profile_id: str, payload: ProfilePayload) -> None:
        self._maybe_fail("update_profile")
        self.profiles[profile_id].update(payload.model_dump())

    def insert_profile(self, payload: ProfilePayload) -> None:
        self._maybe_fail("insert_profile")
        self.profiles[f"p-{next(self._ids)}"] = payload.model_dump()


class FakeIdentityProvider(_Failing):
    def __init__(self):
        self.users: dict[str, dict] = {}
        self.deleted: list[str] = []
        self.fail_on: set[str] = set()
        self._ids = itertools.count(1)

    def find_by_email(self, email: str) -> Optional[str]:
        for user_id, user in self.users.items():
            if user["email"] == email:
                return user_id
        return None

    def create_identity(self, email: str, password: str, nome: str) -> str:
        self._maybe_fail("create_identity")
        if self.find_by_email(email) is not None:
            raise IdentityCreationFailedError(ALREADY_REGISTERED_MESSAGE)
        user_id = f"user-{next(self._ids)}"
        self.users[user_id] = {"email": email, "password": password, "nome": nome}
        return user_id

    def delete_identity(self, user_id: str) -> None:
        self._maybe_fail("delete_identity")
        self.users.pop(user_id, None)
        self.deleted.append(user_id)


@pytest.fixture
def invites():
    return FakeInviteRepository()


@pytest.fixture
def accounts():
    return FakeAccountRepository()


@pytest.fixture
def identity():
    return FakeIdentityProvider()


@pytest.fixture
def service(invites, accounts, identity):
    return InviteService(
        invites,
        accounts,
        identity,
        student_email_domain="temp.bibliotecai.com",
        clock=lambda: NOW,
    )
