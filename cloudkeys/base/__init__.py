"""Abstract service blueprints and core utilities.

Every provider inherits from one of the blueprints defined here.
Import them to type-hint your own code or to create custom providers.
"""

from .secret_manager import SecretManagerBlueprint
from .models import Secret
from .references import parse_secret_id
from .context import RequestContext
from .supported_services import existing_services, existing_cloud_providers


__all__ = [
    "SecretManagerBlueprint",
    "Secret",
    "parse_secret_id",
    "RequestContext",
    "existing_services",
    "existing_cloud_providers",
]
