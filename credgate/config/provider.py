"""Configuration provider following Black Box Design principles."""
import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol


class AuthMode(str, Enum):
    """Whether the session gate is active."""

    DISABLED = "disabled"
    ENABLED = "enabled"


@dataclass(frozen=True)
class AuthConfig:
    """
    Authentication policy.

    DISABLED means no access password is configured and every request
    passes the gate. ENABLED always carries a non-empty password.
    """
    mode: AuthMode
    access_password: Optional[str] = None

    def __post_init__(self):
        if self.mode is AuthMode.ENABLED and not self.access_password:
            raise ValueError("AuthMode.ENABLED requires a non-empty access password")

    @classmethod
    def disabled(cls) -> "AuthConfig":
        return cls(mode=AuthMode.DISABLED)

    @classmethod
    def enabled(cls, access_password: str) -> "AuthConfig":
        return cls(mode=AuthMode.ENABLED, access_password=access_password)

    @classmethod
    def from_password(cls, access_password: Optional[str]) -> "AuthConfig":
        """Empty or missing password selects the disabled policy."""
        if access_password:
            return cls.enabled(access_password)
        return cls.disabled()

    @property
    def is_enabled(self) -> bool:
        return self.mode is AuthMode.ENABLED


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_auth_config(self) -> AuthConfig:
        """Get authentication configuration."""
        ...


class EnvConfigProvider:
    """Environment-based configuration provider."""

    def get_auth_config(self) -> AuthConfig:
        """Get authentication configuration from environment variables."""
        return AuthConfig.from_password(os.getenv("ACCESS_PWD", ""))
