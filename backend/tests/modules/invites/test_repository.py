"""Tests for invite and account repositories."""

from datetime import datetime, timezone

import pytest
from unittest.mock import MagicMock

from modules.invites.models import ProfilePayload
from modules.invites.repository import AccountRepository, InviteRepository


NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)

TOKEN_ROW = {
    "id": 42,
    "token": "abc",
    "role_destino": "aluno",
    "escola_id": "E1",
    "expira_em": "2025-03-08T12:00:00+00:00",
    "ativo": True,
    "usado_por": None,
    "usado_em": None,
}


@pytest.fixture
def mock_db():
    return MagicMock()


def token_query(mock_db):
    """Builder after the token, ativo, usado_por and expira_em filters."""
    return (
        mock_db.table.return_value.select.return_value
        .eq.return_value.eq.return_value.is_.return_value.gt.return_value
    )


class TestInviteRepository:
    def test_get_redeemable_token(self, mock_db):
        token_query(mock_db).maybe_single.return_value.execute.return_value.data = TOKEN_ROW
        repo = InviteRepository(mock_db)

        invite = repo.get_redeemable_token("abc", NOW)

        assert invite.id == "42"
        assert invite.role_destino == "aluno"
        assert invite.expira_em == datetime(2025, 3, 8, 12, 0, tzinfo=timezone.utc)
        mock_db.table.assert_called_once_with("tokens_convite")

    def test_get_redeemable_token_filters(self, mock_db):
        token_query(mock_db).maybe_single.return_value.execute.return_value.data = TOKEN_ROW
        repo = InviteRepository(mock_db)

        repo.get_redeemable_token("abc", NOW)

        select = mock_db.table.return_value.select.return_value
        select.eq.assert_called_once_with("token", "abc")
        select.eq.return_value.eq.assert_called_once_with("ativo", True)
        select.eq.return_value.eq.return_value.is_.assert_called_once_with("usado_por", "null")
        select.eq.return_value.eq.return_value.is_.return_value.gt.assert_called_once_with(
            "expira_em", NOW.isoformat()
        )

    def test_get_redeemable_token_missing(self, mock_db):
        token_query(mock_db).maybe_single.return_value.execute.return_value = None
        repo = InviteRepository(mock_db)

        assert repo.get_redeemable_token("abc", NOW) is None

    def test_mark_token_used(self, mock_db):
        repo = InviteRepository(mock_db)

        repo.mark_token_used("42", "user-1", NOW)

        mock_db.table.assert_called_once_with("tokens_convite")
        mock_db.table.return_value.update.assert_called_once_with({
            "usado_por": "user-1",
            "usado_em": NOW.isoformat(),
        })
        mock_db.table.return_value.update.return_value.eq.assert_called_once_with("id", "42")

    def test_tenant_invite_lookup_uses_caller_client(self, mock_db):
        caller_db = MagicMock()
        caller_db.rpc.return_value.maybe_single.return_value.execute.return_value.data = {
            "escola_id": "E1",
            "subdominio": "escola1",
        }
        repo = InviteRepository(mock_db, caller_db=caller_db)

        context = repo.get_tenant_invite_context("tok")

        caller_db.rpc.assert_called_once_with("get_tenant_invite_context", {"_token": "tok"})
        mock_db.rpc.assert_not_called()
        assert context.escola_id == "E1"
        assert context.subdominio == "escola1"

    def test_tenant_invite_lookup_defaults_to_service_client(self, mock_db):
        mock_db.rpc.return_value.maybe_single.return_value.execute.return_value = None
        repo = InviteRepository(mock_db)

        assert repo.get_tenant_invite_context("tok") is None
        mock_db.rpc.assert_called_once()

    def test_mark_tenant_invite_used_only_once(self, mock_db):
        repo = InviteRepository(mock_db)

        repo.mark_tenant_invite_used("tok", "user-1", NOW)

        mock_db.table.assert_called_once_with("tenant_admin_invites")
        update = mock_db.table.return_value.update
        update.return_value.eq.assert_called_once_with("token", "tok")
        update.return_value.eq.return_value.is_.assert_called_once_with("usado_em", "null")

    def test_claim_school_gestor_only_when_unset(self, mock_db):
        repo = InviteRepository(mock_db)

        repo.claim_school_gestor("E1", "user-1")

        mock_db.table.assert_called_once_with("escolas")
        update = mock_db.table.return_value.update
        update.assert_called_once_with({"gestor_id": "user-1"})
        update.return_value.eq.assert_called_once_with("id", "E1")
        update.return_value.eq.return_value.is_.assert_called_once_with("gestor_id", "null")


class TestAccountRepository:
    def test_remove_other_roles(self, mock_db):
        repo = AccountRepository(mock_db)

        repo.remove_other_roles("user-1", "aluno")

        mock_db.table.assert_called_once_with("user_roles")
        delete = mock_db.table.return_value.delete.return_value
        delete.eq.assert_called_once_with("user_id", "user-1")
        delete.eq.return_value.neq.assert_called_once_with("role", "aluno")

    def test_upsert_role(self, mock_db):
        repo = AccountRepository(mock_db)

        repo.upsert_role("user-1", "aluno")

        mock_db.table.return_value.upsert.assert_called_once_with(
            {"user_id": "user-1", "role": "aluno"},
            on_conflict="user_id,role",
        )

    def test_find_profile_by_user_id(self, mock_db):
        select = mock_db.table.return_value.select.return_value
        select.eq.return_value.maybe_single.return_value.execute.return_value.data = {
            "id": 9,
            "user_id": "user-1",
        }
        repo = AccountRepository(mock_db)

        profile = repo.find_profile_by_user_id("user-1")

        mock_db.table.assert_called_once_with("usuarios_biblioteca")
        select.eq.assert_called_once_with("user_id", "user-1")
        assert profile.id == "9"
        assert profile.user_id == "user-1"

    def test_find_profile_by_matricula_missing(self, mock_db):
        select = mock_db.table.return_value.select.return_value
        select.eq.return_value.maybe_single.return_value.execute.return_value = None
        repo = AccountRepository(mock_db)

        assert repo.find_profile_by_matricula("654321") is None
        select.eq.assert_called_once_with("matricula", "654321")

    def test_update_and_insert_profile(self, mock_db):
        payload = ProfilePayload(
            user_id="user-1",
            nome="Ana",
            email="654321@temp.bibliotecai.com",
            tipo="aluno",
            escola_id="E1",
            matricula="654321",
        )
        repo = AccountRepository(mock_db)

        repo.update_profile("9", payload)
        repo.insert_profile(payload)

        table = mock_db.table.return_value
        table.update.assert_called_once_with(payload.model_dump())
        table.update.return_value.eq.assert_called_once_with("id", "9")
        table.insert.assert_called_once_with(payload.model_dump())
