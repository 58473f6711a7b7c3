"""
Invite redemption module.

Provisions accounts (identity + role + profile) from single-use invite
tokens.

Public API:
- IInviteService: Interface for invite redemption
- IInviteRepository, IAccountRepository, IIdentityProvider: Collaborators
- Request/response models
- Invite exceptions: InvalidOrExpiredTokenError, RoleNotAllowedError, etc.
"""

from .interfaces import IAccountRepository, IIdentityProvider, IInviteRepository, IInviteService
from .models import (
    ALLOWED_INVITE_ROLES,
    InviteRole,
    InviteToken,
    TenantInviteContext,
    RedeemInviteRequest,
    RedeemInviteResponse,
    RedeemGestorInviteRequest,
    RedeemGestorInviteResponse,
    InvitePreviewResponse,
    TenantInvitePreviewResponse,
)
from .exceptions import (
    InviteError,
    InvalidOrExpiredTokenError,
    RoleNotAllowedError,
    IncompleteCredentialsError,
    WeakCredentialError,
    IdentityCreationFailedError,
    RoleAssignmentFailedError,
    ProfileProvisioningFailedError,
    MatriculaAlreadyLinkedError,
)

__all__ = [
    # Interfaces
    "IInviteService",
    "IInviteRepository",
    "IAccountRepository",
    "IIdentityProvider",
    # Models
    "ALLOWED_INVITE_ROLES",
    "InviteRole",
    "InviteToken",
    "TenantInviteContext",
    "RedeemInviteRequest",
    "RedeemInviteResponse",
    "RedeemGestorInviteRequest",
    "RedeemGestorInviteResponse",
    "InvitePreviewResponse",
    "TenantInvitePreviewResponse",
    # Exceptions
    "InviteError",
    "InvalidOrExpiredTokenError",
    "RoleNotAllowedError",
    "IncompleteCredentialsError",
    "WeakCredentialError",
    "IdentityCreationFailedError",
    "RoleAssignmentFailedError",
    "ProfileProvisioningFailedError",
    "MatriculaAlreadyLinkedError",
]
