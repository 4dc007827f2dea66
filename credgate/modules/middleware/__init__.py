"""
Session Gate Middleware Module - Black Box Interface

Purpose: Gate protected routes of any FastAPI/Starlette app behind a session token
Interface: SessionGateMiddleware
Hidden: Token extraction order, redirect formatting

Completely independent of how tokens are validated; the validator is injected.
"""

import logging
from typing import Awaitable, Callable, Optional, Sequence
from urllib.parse import urlencode

from fastapi import Request
from fastapi.responses import JSONResponse, RedirectResponse

from ...logging_config import mask_path

logger = logging.getLogger(__name__)

DEFAULT_PROTECTED_PATHS = ("/admin", "/api/")


class SessionGateMiddleware:
    """
    Session-token middleware for FastAPI applications.

    Requests under a protected path must carry a valid session token in the
    query string or, failing that, in a cookie. Invalid requests are halted
    with a redirect to the login page.
    """

    def __init__(
        self,
        auth_validator: Callable[[Optional[str]], Awaitable[bool]],
        protected_paths: Optional[Sequence[str]] = None,
        query_param: str = "token",
        cookie_name: str = "auth_token",
        login_path: str = "/login",
        error_code: str = "token_expired",
        log_attempts: bool = True,
    ):
        """
        Initialize session gate middleware.

        Args:
            auth_validator: Async function deciding whether a token may pass
            protected_paths: Path prefixes that require a session
            query_param: Query parameter checked first for the token
            cookie_name: Cookie checked when the query parameter is absent
            login_path: Redirect target for rejected requests
            error_code: Value of the error query parameter on redirect
            log_attempts: Whether to log rejected requests
        """
        self.auth_validator = auth_validator
        self.protected_paths = tuple(protected_paths or DEFAULT_PROTECTED_PATHS)
        self.query_param = query_param
        self.cookie_name = cookie_name
        self.login_path = login_path
        self.error_code = error_code
        self.log_attempts = log_attempts

    def is_protected(self, request: Request) -> bool:
        """Check if this request falls under a protected path."""
        path = str(request.url.path)
        return any(path.startswith(prefix) for prefix in self.protected_paths)

    def extract_token(self, request: Request) -> Optional[str]:
        """Extract session token from query string, then cookie."""
        token = request.query_params.get(self.query_param)
        if not token:
            token = request.cookies.get(self.cookie_name)
        return token or None

    def redirect_url(self) -> str:
        return f"{self.login_path}?{urlencode({'error': self.error_code})}"

    async def __call__(self, request: Request, call_next):
        """Process the request through the session gate."""
        if not self.is_protected(request):
            return await call_next(request)

        token = self.extract_token(request)

        try:
            allowed = await self.auth_validator(token)
        except Exception as e:
            logger.error(f"Error during session validation: {e}")
            return JSONResponse(
                status_code=500,
                content={"status": "error", "error": "Internal error during authentication"},
            )

        if not allowed:
            if self.log_attempts:
                logger.warning(
                    f"Rejected {request.method} {mask_path(request.url.path)}: "
                    f"{'invalid' if token else 'missing'} session token"
                )
            return RedirectResponse(url=self.redirect_url(), status_code=302)

        return await call_next(request)


# Module interface - what this module provides
__all__ = [
    "SessionGateMiddleware",
    "DEFAULT_PROTECTED_PATHS",
]
