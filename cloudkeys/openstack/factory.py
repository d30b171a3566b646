"""OpenStack service factory.

Maps service names to their openstacksdk implementations.
``SERVICE_REGISTRY`` is consumed by :func:`cloudkeys.factory.universal_factory`.
"""

from cloudkeys.openstack.secret_manager import SecretManager


# Service registry for OpenStack
SERVICE_REGISTRY: dict[str, type] = {
    "secret_manager": SecretManager,
}
