"""
Pool Module - Black Box Interface

Purpose: Manage the pool of upstream API credentials
Interface: register(), list_credentials(), pick_random(), delete(), pin(), select()
Hidden: Storage keys, record layout, selection strategy

Replaceable with any credential source (database, vault, static config).
"""

from .pool import CURRENT_TOKEN_KEY, EMPTY_SELECTION, TOKEN_KEY_PREFIX, Credential, CredentialPool

__all__ = ["CredentialPool", "Credential", "CURRENT_TOKEN_KEY", "EMPTY_SELECTION", "TOKEN_KEY_PREFIX"]
