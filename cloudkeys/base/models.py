"""Pydantic models for key-manager resources."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

from cloudkeys.base.references import parse_secret_id


# Fixed attributes of every secret created by Cloudkeys
SECRET_ALGORITHM = "aes"
SECRET_MODE = "cbc"
SECRET_BIT_LENGTH = 256
SECRET_PAYLOAD_ENCODING = "base64"
OPAQUE_SECRET = "opaque"


class Secret(BaseModel):
    """A secret stored in the key-manager service.

    Lookups return metadata only; the payload is never fetched.
    """

    model_config = ConfigDict(frozen=True)

    secret_ref: str
    name: str | None = None
    secret_type: str | None = None
    status: str | None = None
    algorithm: str | None = None
    mode: str | None = None
    bit_length: int | None = None
    content_types: dict[str, str] | None = None
    expires_at: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @property
    def id(self) -> str:
        return parse_secret_id(self.secret_ref)

    @classmethod
    def from_sdk(cls, resource: Any) -> Secret:
        """Build a :class:`Secret` from an ``openstack.key_manager.v1.secret.Secret``."""
        fields = {
            field: getattr(resource, field, None)
            for field in cls.model_fields
        }
        return cls(**{k: v for k, v in fields.items() if v is not None})


__all__ = [
    "Secret",
    "SECRET_ALGORITHM",
    "SECRET_MODE",
    "SECRET_BIT_LENGTH",
    "SECRET_PAYLOAD_ENCODING",
    "OPAQUE_SECRET",
]
