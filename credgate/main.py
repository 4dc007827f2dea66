#!/usr/bin/env python3
"""
credgate - Main Entry Point

This is the thin orchestration layer that:
1. Loads configuration
2. Initializes modules
3. Runs the API server

All business logic is in the modules, following black box principles.
"""

import logging
import logging.config as log_config
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from credgate.config.provider import ConfigProvider, EnvConfigProvider
from credgate.errors import CredGateError, NotFoundError, StoreError
from credgate.logging_config import get_logging_config, mask_path

# Import modules through their black box interfaces
from credgate.modules.api import (
    AdminOverviewResponse,
    CurrentTokenResponse,
    ErrorResponse,
    LoginRequest,
    LoginResponse,
    RegisterTokenRequest,
    StatusResponse,
    TokenInfo,
    TokenListResponse,
    render_login_page,
)
from credgate.modules.auth import SessionGate
from credgate.modules.config import get_config
from credgate.modules.middleware import SessionGateMiddleware
from credgate.modules.pool import CredentialPool
from credgate.modules.storage import KeyValueStore, StorageModule

# Get configuration
config = get_config()

log_config.dictConfig(get_logging_config(config.get("log_level")))
logger = logging.getLogger(__name__)

# Configuration provider (centralized auth policy access)
config_provider: ConfigProvider = EnvConfigProvider()

SESSION_COOKIE = "auth_token"

# Module instances (initialized at startup)
storage_module: Optional[StorageModule] = None
store: Optional[KeyValueStore] = None
session_gate: Optional[SessionGate] = None
credential_pool: Optional[CredentialPool] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle - initialize and cleanup resources.
    """
    global storage_module, store, session_gate, credential_pool

    logger.info("Starting credgate...")

    storage_module = StorageModule(config.redis_url(), password=config.get("redis_password"))
    store = await storage_module.connect()

    auth_config = config_provider.get_auth_config()
    session_gate = SessionGate(store, auth_config, session_ttl=config.get("session_ttl"))
    credential_pool = CredentialPool(store)

    if auth_config.is_enabled:
        logger.info("Session gate enabled: access password configured")
    else:
        logger.warning("Session gate disabled: ACCESS_PWD is not set, admin routes are open")

    logger.info("credgate started successfully")

    yield

    logger.info("Shutting down credgate...")
    await storage_module.disconnect()
    logger.info("credgate shutdown complete")


# Create FastAPI application
app = FastAPI(
    title="credgate",
    description="Session gate and upstream credential pool for the API proxy",
    version="1.0.0",
    lifespan=lifespan,
)


def require_session_gate() -> SessionGate:
    if not session_gate:
        raise HTTPException(503, "Service not initialized")
    return session_gate


def require_credential_pool() -> CredentialPool:
    if not credential_pool:
        raise HTTPException(503, "Service not initialized")
    return credential_pool


async def authorize_session(token: Optional[str]) -> bool:
    """Resolve the gate at request time; modules are created in lifespan."""
    if not session_gate:
        raise RuntimeError("Service not initialized")
    return await session_gate.authorize(token)


gate_middleware = SessionGateMiddleware(
    auth_validator=authorize_session,
    cookie_name=SESSION_COOKIE,
)


@app.middleware("http")
async def session_gate_middleware(request: Request, call_next):
    return await gate_middleware(request, call_next)


# Login Endpoints


@app.get("/login", response_class=HTMLResponse)
async def login_page(error: Optional[str] = None):
    """Serve the login page."""
    return HTMLResponse(render_login_page(error))


@app.post("/login", response_model=LoginResponse)
async def login(payload: LoginRequest, response: Response):
    """
    Exchange the access password for a session token.

    Returns:
        200: Session token (also set as cookie)
        400: Invalid request body
        401: Wrong password
        500: Session could not be stored
    """
    gate = require_session_gate()

    try:
        token = await gate.issue_session(payload.password)
    except StoreError as e:
        raise StoreError(f"Failed to save session: {e}") from e

    response.set_cookie(
        SESSION_COOKIE,
        token,
        max_age=gate.session_ttl,
        httponly=True,
        samesite="lax",
    )
    return LoginResponse(token=token)


# Admin Endpoints (gated)


@app.get("/admin", response_model=AdminOverviewResponse)
async def admin_overview():
    """
    Overview of the credential pool.

    Returns:
        200: Number of credentials and the pinned token
    """
    gate = require_session_gate()
    pool = require_credential_pool()

    credentials = await pool.list_credentials()
    active = await pool.get_active()

    return AdminOverviewResponse(
        token_count=len(credentials),
        current_token=active.token if active else None,
        auth_enabled=gate.auth_enabled,
    )


@app.get("/api/tokens", response_model=TokenListResponse)
async def list_tokens():
    """
    List all registered upstream credentials.

    Returns:
        200: Credential list (possibly empty)
        500: Store failure
    """
    pool = require_credential_pool()

    try:
        credentials = await pool.list_credentials()
    except StoreError as e:
        raise StoreError(f"Failed to list tokens: {e}") from e

    return TokenListResponse(
        tokens=[TokenInfo(token=c.token, tenant_url=c.tenant_url) for c in credentials]
    )


@app.post("/api/tokens", response_model=StatusResponse)
async def register_token(payload: RegisterTokenRequest):
    """
    Register or replace an upstream credential.

    Returns:
        200: Stored
        400: Missing token or tenant URL
        500: Store failure
    """
    pool = require_credential_pool()
    await pool.register(payload.token, payload.tenant_url)
    return StatusResponse()


@app.get("/api/token/current", response_model=CurrentTokenResponse)
async def current_token():
    """
    Get the pinned credential.

    Returns:
        200: Pinned credential
        404: Nothing pinned
    """
    pool = require_credential_pool()

    active = await pool.get_active()
    if not active:
        raise NotFoundError("no token is currently in use")

    return CurrentTokenResponse(token=active.token, tenant_url=active.tenant_url)


@app.delete("/api/token/{token}", response_model=StatusResponse)
async def delete_token(token: str):
    """
    Delete an upstream credential.

    Returns:
        200: Deleted
        400: No token given
        404: Unknown token
        500: Store failure
    """
    pool = require_credential_pool()

    try:
        await pool.delete(token)
    except StoreError as e:
        raise StoreError(f"Failed to delete token: {e}") from e

    return StatusResponse()


@app.post("/api/token/{token}/use", response_model=StatusResponse)
async def use_token(token: str):
    """
    Pin an upstream credential as the current one.

    Returns:
        200: Pinned
        400: No token given
        404: Unknown token
        500: Store failure
    """
    pool = require_credential_pool()

    try:
        await pool.pin(token)
    except StoreError as e:
        raise StoreError(f"Failed to set current token: {e}") from e

    return StatusResponse()


# Health/Monitoring Endpoints


@app.get("/healthz")
async def healthz():
    """
    Minimal health check endpoint for liveness probes.

    Returns:
        200: Service is running
    """
    return {"status": "ok"}


@app.get("/health")
async def health_check():
    """
    Health check including store connectivity.

    Returns:
        200: Service healthy
        503: Service unhealthy
    """
    modules_ready = all([session_gate, credential_pool])

    try:
        store_status = "connected" if store and await store.ping() else "disconnected"
    except StoreError as e:
        logger.error(f"Health check failed: {e}")
        store_status = "disconnected"

    content = {
        "status": "healthy",
        "store": store_status,
        "modules": "initialized" if modules_ready else "not initialized",
        "auth": "enabled" if session_gate and session_gate.auth_enabled else "disabled",
        "version": "1.0.0",
    }

    if store_status == "connected" and modules_ready:
        return content

    content["status"] = "unhealthy"
    return JSONResponse(status_code=503, content=content)


# Error handlers


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump(mode="json"))


@app.exception_handler(CredGateError)
async def credgate_error_handler(request: Request, exc: CredGateError):
    """Render module errors as structured error bodies."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {mask_path(request.url.path)} failed: {exc}")
    else:
        logger.info(f"{request.method} {mask_path(request.url.path)} rejected: {exc}")
    return error_response(exc.status_code, str(exc))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Handle unparseable or incomplete request bodies."""
    # Only locations and error types; the rejected input may hold a password
    problems = [(".".join(map(str, e["loc"])), e["type"]) for e in exc.errors()]
    logger.info(f"Validation error on {mask_path(request.url.path)}: {problems}")
    return error_response(400, "Invalid request data")


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    """Keep framework errors in the same body format."""
    return error_response(exc.status_code, str(exc.detail))


if __name__ == "__main__":
    uvicorn.run(
        "credgate.main:app",
        host=config.get("host"),
        port=config.get("port"),
        log_level=config.get("log_level").lower(),
        reload=config.get("debug"),
        log_config=get_logging_config(config.get("log_level")),
    )
