"""
Invite API endpoints.

Redemption endpoints answer with the `{success, ...}` envelope. Domain
errors are converted by the application's BibliotecaiError handler; any
other failure is logged here and reported as an UnexpectedError.
"""

import logging
from typing import Awaitable, TypeVar

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from api.dependencies import get_gestor_invite_service, get_invite_service
from api.models.errors import ErrorResponse
from shared.exceptions import BibliotecaiError, UnexpectedError

from .interfaces import IInviteService
from .models import (
    InvitePreviewResponse,
    RedeemGestorInviteRequest,
    RedeemGestorInviteResponse,
    RedeemInviteRequest,
    RedeemInviteResponse,
    TenantInvitePreviewResponse,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid request or token"},
    500: {"model": ErrorResponse, "description": "Server or provisioning failure"},
}

router = APIRouter(responses=ERROR_RESPONSES)
tenant_router = APIRouter(responses=ERROR_RESPONSES)


async def _envelope(operation: str, call: Awaitable[T]) -> T:
    try:
        return await call
    except BibliotecaiError:
        raise
    except Exception as e:
        logger.exception(f"Unexpected error during {operation}")
        raise UnexpectedError(str(e)) from e


def _preflight() -> PlainTextResponse:
    return PlainTextResponse("ok", headers=CORS_HEADERS)


# -----------------------------------------------------------------------------
# Generic invites
# -----------------------------------------------------------------------------


@router.options("/redeem", include_in_schema=False)
async def redeem_invite_preflight() -> PlainTextResponse:
    return _preflight()


@router.post(
    "/redeem",
    response_model=RedeemInviteResponse,
    response_model_exclude_none=True,
)
async def redeem_invite(
    request: RedeemInviteRequest,
    service: IInviteService = Depends(get_invite_service),
) -> RedeemInviteResponse:
    """
    Register a professor, bibliotecaria or aluno from an invite token.

    Students send `matricula` instead of email and password; the response
    then carries the generated `auth_email` and `auth_password` the client
    needs to sign in.
    """
    return await _envelope("invite redemption", service.redeem_invite(request))


@router.get("/{token}", response_model=InvitePreviewResponse)
async def preview_invite(
    token: str,
    service: IInviteService = Depends(get_invite_service),
) -> InvitePreviewResponse:
    """
    Describe a redeemable invite (role and school) before sign-up.
    """
    return await _envelope("invite preview", service.preview_invite(token))


# -----------------------------------------------------------------------------
# Gestor (tenant admin) invites
# -----------------------------------------------------------------------------


@tenant_router.options("/redeem", include_in_schema=False)
async def redeem_gestor_invite_preflight() -> PlainTextResponse:
    return _preflight()


@tenant_router.post("/redeem", response_model=RedeemGestorInviteResponse)
async def redeem_gestor_invite(
    request: RedeemGestorInviteRequest,
    service: IInviteService = Depends(get_gestor_invite_service),
) -> RedeemGestorInviteResponse:
    """
    Register the gestor of a school from a tenant admin invite.

    The invite is validated with the caller's credentials (forwarded
    Authorization header) through the privileged lookup function.
    """
    return await _envelope("gestor invite redemption", service.redeem_gestor_invite(request))


@tenant_router.get("/{token}", response_model=TenantInvitePreviewResponse)
async def preview_gestor_invite(
    token: str,
    service: IInviteService = Depends(get_gestor_invite_service),
) -> TenantInvitePreviewResponse:
    """
    Describe a redeemable gestor invite (school and subdomain).
    """
    return await _envelope("gestor invite preview", service.preview_gestor_invite(token))
