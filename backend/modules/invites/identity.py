"""
Identity provider backed by Supabase Auth (GoTrue admin API).

Requires a service-role client.
"""

import logging

from supabase import Client

from .exceptions import IdentityCreationFailedError

logger = logging.getLogger(__name__)

ALREADY_REGISTERED_MARKERS = (
    "already been registered",
    "already registered",
    "User already registered",
)

ALREADY_REGISTERED_MESSAGE = "Esta conta já está cadastrada. Verifique seus dados ou faça login."


def map_signup_error(message: str) -> str:
    """Turn provider sign-up errors into messages for the sign-up form."""
    if not message:
        return "Não foi possível criar sua conta."
    if any(marker in message for marker in ALREADY_REGISTERED_MARKERS):
        return ALREADY_REGISTERED_MESSAGE
    return message


class SupabaseIdentityProvider:
    """Creates and deletes users through `auth.admin`."""

    def __init__(self, db: Client) -> None:
        self._db = db

    def create_identity(self, email: str, password: str, nome: str) -> str:
        try:
            response = self._db.auth.admin.create_user({
                "email": email,
                "password": password,
                "email_confirm": True,
                "user_metadata": {"nome": nome},
            })
        except Exception as e:
            message = getattr(e, "message", None) or str(e)
            logger.error(f"Identity creation failed for {email}: {message}")
            raise IdentityCreationFailedError(map_signup_error(message)) from e

        user = getattr(response, "user", None)
        if user is None:
            raise IdentityCreationFailedError(map_signup_error(""))
        return str(user.id)

    def delete_identity(self, user_id: str) -> None:
        self._db.auth.admin.delete_user(user_id)
        logger.info(f"Deleted identity {user_id}")
