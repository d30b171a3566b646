"""Universal service factory.

Provides :func:`universal_factory`, the single entry-point for creating
key-manager service clients. The function dispatches to provider-specific
registries based on ``cloud_provider``.
"""

from cloudkeys.base import (
    SecretManagerBlueprint,
    existing_services,
    existing_cloud_providers,
)
from cloudkeys.base.config import validate_config
from cloudkeys.openstack.factory import SERVICE_REGISTRY as OPENSTACK_SERVICES


# Nested factory registry: cloud_provider -> service registry
_FACTORY_REGISTRY: dict[str, dict[str, type]] = {
    "openstack": OPENSTACK_SERVICES,
}


def universal_factory(
    service_name: existing_services,
    cloud_provider: existing_cloud_providers,
    config: dict,
) -> SecretManagerBlueprint:
    """
    Universal factory function to create service instances based on cloud provider and service name.
    Args:
        service_name: The name of the service (e.g., 'secret_manager').
        cloud_provider: The cloud provider (e.g., 'openstack').
        config: Configuration dictionary to initialize the service instance.
    Returns:
        An instance of the requested service class.
    Raises:
        ValueError: If the cloud provider or service is not supported, or the config is invalid.
    """
    if cloud_provider not in _FACTORY_REGISTRY:
        raise ValueError(f"Unsupported cloud provider: {cloud_provider}")

    provider_services = _FACTORY_REGISTRY[cloud_provider]

    if service_name not in provider_services:
        raise ValueError(
            f"Unsupported service '{service_name}' for provider '{cloud_provider}'"
        )

    service_class = provider_services[service_name]
    config_obj = validate_config(cloud_provider, config)
    return service_class(config_obj)
