"""
credgate API data models.

These models define the request and response bodies of the HTTP surface.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class ResponseStatus(str, Enum):
    """Value of the status field in every response body."""

    SUCCESS = "success"
    ERROR = "error"


# Request Models (API Input)


class LoginRequest(BaseModel):
    """Request to exchange the access password for a session token."""

    password: str = Field(default="", description="Access password")


class RegisterTokenRequest(BaseModel):
    """Request to add or replace an upstream credential."""

    token: str = Field(..., description="Upstream API token", min_length=1)
    tenant_url: str = Field(..., description="Tenant endpoint the token belongs to", min_length=1)


# Response Models (API Output)


class StatusResponse(BaseModel):
    """Bare success acknowledgement."""

    status: ResponseStatus = ResponseStatus.SUCCESS


class ErrorResponse(BaseModel):
    """Structured error body."""

    status: ResponseStatus = ResponseStatus.ERROR
    error: str


class LoginResponse(StatusResponse):
    """Successful login."""

    token: str = Field(..., description="Session token, valid for the session TTL")


class TokenInfo(BaseModel):
    """One credential of the pool."""

    token: str
    tenant_url: str


class TokenListResponse(StatusResponse):
    """All registered credentials."""

    tokens: List[TokenInfo] = Field(default_factory=list)


class CurrentTokenResponse(StatusResponse):
    """The pinned credential."""

    token: str
    tenant_url: str


class AdminOverviewResponse(StatusResponse):
    """Summary shown on the admin endpoint."""

    token_count: int
    current_token: Optional[str] = None
    auth_enabled: bool
