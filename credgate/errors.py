"""
Error taxonomy shared by all credgate modules.

Each error carries the HTTP status the API layer answers with, so the
modules can raise without knowing anything about HTTP.
"""


class CredGateError(Exception):
    """Base class for all credgate errors."""

    status_code: int = 500


class ClientError(CredGateError):
    """Malformed or missing input (empty token, unparseable body)."""

    status_code = 400


class AuthError(CredGateError):
    """Wrong password."""

    status_code = 401


class NotFoundError(CredGateError):
    """Operation target is absent from the store."""

    status_code = 404


class StoreError(CredGateError):
    """Communication or operational failure against the key-value store."""

    status_code = 500
