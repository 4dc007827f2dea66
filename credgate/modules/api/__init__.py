"""
API Module - Black Box Interface

Purpose: HTTP request/response contracts and pages
Interface: pydantic models, render_login_page()
Hidden: Field validation, HTML layout

The API module only describes the surface - it contains no business logic.
All logic is delegated to the auth and pool modules.
"""

from .models import (
    AdminOverviewResponse,
    CurrentTokenResponse,
    ErrorResponse,
    LoginRequest,
    LoginResponse,
    RegisterTokenRequest,
    ResponseStatus,
    StatusResponse,
    TokenInfo,
    TokenListResponse,
)
from .pages import render_login_page

__all__ = [
    "AdminOverviewResponse",
    "CurrentTokenResponse",
    "ErrorResponse",
    "LoginRequest",
    "LoginResponse",
    "RegisterTokenRequest",
    "ResponseStatus",
    "StatusResponse",
    "TokenInfo",
    "TokenListResponse",
    "render_login_page",
]
