"""OpenStack provider implementations."""

from .secret_manager import SecretManager

__all__ = [
    "SecretManager",
]
