"""Current-user resolution.

Authentication itself happens upstream: the auth gateway validates the session
and forwards the owner id in a request header. This module only turns that
header into an explicit :class:`AuthContext` that route handlers pass to every
service call.
"""
from __future__ import annotations

from dataclasses import dataclass

from fastapi import Depends, Request

from rolodex.core.config import Settings, get_settings
from rolodex.core.errors import NotAuthenticatedError


@dataclass(frozen=True)
class AuthContext:
    """Identity of the user on whose behalf an operation runs."""

    owner_id: str


def require_owner(auth: AuthContext | None) -> str:
    """Return the owner id or reject the operation."""

    if auth is None or not auth.owner_id:
        raise NotAuthenticatedError("You must be logged in to perform this action")
    return auth.owner_id


async def get_auth_context(
    request: Request, settings: Settings = Depends(get_settings)
) -> AuthContext | None:
    """Build the auth context from the gateway header, if present."""

    owner_id = (request.headers.get(settings.auth_header) or "").strip()
    if not owner_id:
        return None
    return AuthContext(owner_id=owner_id)
