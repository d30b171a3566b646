"""Cloudkeys: key-manager secret helpers for OpenStack integrations.

Entry point for the library. Import :func:`universal_factory` to create
a secret manager with a single call::

    from cloudkeys import universal_factory

    sm = universal_factory("secret_manager", "openstack", {"cloud": "mycloud"})
    ref = sm.ensure_secret("lb-cert", "application/x-pkcs12", payload_b64)
"""

from .base import RequestContext, Secret, SecretManagerBlueprint, parse_secret_id
from .factory import universal_factory

__all__ = [
    "RequestContext",
    "Secret",
    "SecretManagerBlueprint",
    "parse_secret_id",
    "universal_factory",
]
