"""Pydantic schemas exposed by the API."""

from .auth import AuthCodePayload, IdentityResponse, StatusResponse

__all__ = ["AuthCodePayload", "IdentityResponse", "StatusResponse"]
