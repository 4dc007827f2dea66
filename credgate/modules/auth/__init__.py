"""
Authentication Module - Black Box Interface

Purpose: Password login and session token validation
Interface: issue_session(), validate_token(), authorize()
Hidden: Token format, storage keys, TTL handling

This module can be replaced with any other auth implementation
(OAuth, JWT, external service) without affecting other modules.
"""

from .gate import SESSION_KEY_PREFIX, SESSION_TTL_SECONDS, SessionGate, generate_session_token

__all__ = ["SessionGate", "SESSION_KEY_PREFIX", "SESSION_TTL_SECONDS", "generate_session_token"]
