"""
Pydantic configuration models for cloud provider configs.

Validates provider configs at initialization time instead of
silently passing bad values to SDK clients.
"""

from __future__ import annotations

import os
from typing import Any
from pydantic import BaseModel, ConfigDict, Field, model_validator


class OpenStackConfig(BaseModel):
    """Configuration for OpenStack services.

    Settings are resolved in order:
    1. Explicit values passed in the config dict.
    2. The standard ``OS_*`` environment variables (OS_CLOUD, OS_AUTH_URL, ...).

    Either a named cloud from ``clouds.yaml`` or an explicit ``auth_url``
    must be available after resolution.
    """

    model_config = ConfigDict(extra="forbid")

    cloud: str | None = Field(default=None, description="Named cloud in clouds.yaml")
    auth_url: str | None = Field(default=None, description="Keystone endpoint")
    username: str | None = Field(default=None, description="Keystone user name")
    password: str | None = Field(default=None, description="Keystone password")
    project_name: str | None = Field(default=None, description="Project (tenant) name")
    project_id: str | None = Field(default=None, description="Project (tenant) ID")
    user_domain_name: str | None = Field(default=None, description="User domain name")
    project_domain_name: str | None = Field(default=None, description="Project domain name")
    region_name: str | None = Field(default=None, description="Region (e.g. 'RegionOne')")
    interface: str | None = Field(
        default=None, description="Endpoint interface: public, internal or admin"
    )
    application_credential_id: str | None = Field(
        default=None, description="Keystone application credential ID"
    )
    application_credential_secret: str | None = Field(
        default=None, description="Keystone application credential secret"
    )
    app_name: str = Field(default="cloudkeys", description="User-Agent application name")

    @model_validator(mode="before")
    @classmethod
    def resolve_from_env(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Fall back to environment variables for missing settings."""
        env_map = {
            "cloud": "OS_CLOUD",
            "auth_url": "OS_AUTH_URL",
            "username": "OS_USERNAME",
            "password": "OS_PASSWORD",
            "project_name": "OS_PROJECT_NAME",
            "project_id": "OS_PROJECT_ID",
            "user_domain_name": "OS_USER_DOMAIN_NAME",
            "project_domain_name": "OS_PROJECT_DOMAIN_NAME",
            "region_name": "OS_REGION_NAME",
            "interface": "OS_INTERFACE",
            "application_credential_id": "OS_APPLICATION_CREDENTIAL_ID",
            "application_credential_secret": "OS_APPLICATION_CREDENTIAL_SECRET",
        }
        for field, env_var in env_map.items():
            if not values.get(field):
                values[field] = os.environ.get(env_var)
        return values

    @model_validator(mode="after")
    def validate_auth_source(self) -> OpenStackConfig:
        """Ensure there is something to authenticate against."""
        if self.cloud is None and self.auth_url is None:
            raise ValueError(
                "OpenStack cloud or auth_url is required. Set it explicitly or via "
                "OS_CLOUD / OS_AUTH_URL environment variable."
            )
        if self.application_credential_id and not self.application_credential_secret:
            raise ValueError(
                "application_credential_secret is required with application_credential_id"
            )
        return self

    def connect_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for :func:`openstack.connect`."""
        kwargs = {
            k: v for k, v in self.model_dump().items() if v is not None and v != ""
        }
        if self.application_credential_id:
            kwargs["auth_type"] = "v3applicationcredential"
        return kwargs


# Map provider names to their config models for dynamic validation
CONFIG_REGISTRY: dict[str, type[BaseModel]] = {
    "openstack": OpenStackConfig,
}


def validate_config(cloud_provider: str, config: dict) -> BaseModel:
    """Validate and return a typed config model for the given provider.

    Args:
        cloud_provider: The cloud provider name (e.g. 'openstack').
        config: Raw configuration dictionary.

    Returns:
        A validated Pydantic config model.

    Raises:
        ValueError: If the provider is unknown.
        pydantic.ValidationError: If the config is invalid.
    """
    model = CONFIG_REGISTRY.get(cloud_provider)
    if model is None:
        raise ValueError(f"No config model registered for provider: {cloud_provider}")
    return model(**config)


__all__ = [
    "OpenStackConfig",
    "CONFIG_REGISTRY",
    "validate_config",
]
