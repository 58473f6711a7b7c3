"""Tests for invite models."""

from datetime import datetime, timedelta, timezone

import pytest

from modules.invites.models import (
    ALLOWED_INVITE_ROLES,
    InviteToken,
    RedeemInviteRequest,
    RedeemInviteResponse,
)


NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_token(**fields) -> InviteToken:
    values = {
        "id": "tok-1",
        "token": "abc",
        "role_destino": "professor",
        "escola_id": "E1",
        "expira_em": NOW + timedelta(days=1),
    }
    values.update(fields)
    return InviteToken(**values)


class TestInviteTokenRedeemable:
    def test_active(self):
        assert make_token().is_redeemable(NOW) is True

    def test_expired_at_exact_expiry(self):
        assert make_token(expira_em=NOW).is_redeemable(NOW) is False

    @pytest.mark.parametrize(
        "fields",
        [
            {"ativo": False},
            {"usado_por": "user-1"},
            {"expira_em": NOW - timedelta(days=1)},
            {"usado_por": "user-1", "ativo": False, "expira_em": NOW - timedelta(days=1)},
        ],
    )
    def test_not_redeemable(self, fields):
        assert make_token(**fields).is_redeemable(NOW) is False

    def test_defaults_to_current_time(self):
        token = make_token(expira_em=datetime.now(timezone.utc) + timedelta(hours=1))
        assert token.is_redeemable() is True


class TestAllowedRoles:
    def test_gestor_cannot_use_generic_invites(self):
        assert ALLOWED_INVITE_ROLES == {"professor", "bibliotecaria", "aluno"}


class TestRequestResponse:
    def test_request_fields_are_optional(self):
        request = RedeemInviteRequest.model_validate({})
        assert request.token is None

    def test_response_defaults(self):
        response = RedeemInviteResponse(role="professor", auth_email="a@b.c")

        assert response.success is True
        assert response.message == "Usuário registrado com sucesso"
        assert response.auth_password is None
