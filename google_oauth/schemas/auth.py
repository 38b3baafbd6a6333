"""Schemas related to OAuth flows."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field


class AuthCodePayload(BaseModel):
    """JSON body accepted by the callback route."""

    code: Optional[str] = Field(None, description="Authorization code returned by Google OAuth.")


class StatusResponse(BaseModel):
    status: str = "ok"


class IdentityResponse(BaseModel):
    """Public view of the signed-in user; the access token is not echoed back."""

    id: str
    email: Optional[str] = None
    profile: Optional[Any] = None


__all__ = ["AuthCodePayload", "IdentityResponse", "StatusResponse"]
