"""Secret Manager service blueprint."""

from __future__ import annotations

from abc import ABC, abstractmethod

from cloudkeys.base.context import RequestContext
from cloudkeys.base.exceptions import SecretNotFoundError
from cloudkeys.base.logger import ck_logger
from cloudkeys.base.models import Secret
from cloudkeys.base.references import parse_secret_id


class SecretManagerBlueprint(ABC):
    """Abstract interface for key-manager secret services.

    Maps to OpenStack Barbican. Secrets are looked up by name, which the
    service does not require to be unique; lookups that match more than
    one secret fail instead of picking one.
    """

    parse_secret_id = staticmethod(parse_secret_id)

    def ensure_secret(
        self,
        name: str,
        secret_type: str,
        payload: str,
        ctx: RequestContext | None = None,
    ) -> str:
        """Return the reference of secret *name*, creating it if absent.

        An existing secret is reused as is: its content type and payload
        are not compared with the requested ones.

        Args:
            name: Secret name.
            secret_type: Payload content type (e.g. 'application/x-pkcs12').
            payload: Base64-encoded secret content.
            ctx: Request context passed on to every remote call.

        Returns:
            The secret reference (URL).

        Raises:
            AmbiguousSecretError: If several secrets are named *name*.
            RemoteServiceError: If the lookup or the creation fails.
        """
        ctx = ctx or RequestContext()
        try:
            secret = self.get_secret(name, ctx=ctx)
        except SecretNotFoundError:
            ck_logger.debug(f"Secret '{name}' not found, creating it", operation="ensure_secret")
            return self.create_secret(name, secret_type, payload, ctx=ctx)
        return secret.secret_ref

    @abstractmethod
    def get_secret(self, name: str, ctx: RequestContext | None = None) -> Secret:
        """Return the only secret named *name*.

        Args:
            name: Exact secret name.
            ctx: Request context.

        Raises:
            SecretNotFoundError: If no secret has that name.
            AmbiguousSecretError: If more than one secret has that name.
        """
        pass

    @abstractmethod
    def create_secret(
        self,
        name: str,
        secret_type: str,
        payload: str,
        ctx: RequestContext | None = None,
    ) -> str:
        """Create an opaque secret and return its reference.

        Args:
            name: Secret name.
            secret_type: Payload content type.
            payload: Base64-encoded secret content.
            ctx: Request context.
        """
        pass

    @abstractmethod
    def delete_secrets(self, part_name: str, ctx: RequestContext | None = None) -> None:
        """Delete every opaque secret whose name contains *part_name*.

        Deletion stops at the first failure other than "already deleted",
        so a failed call may leave some matching secrets in place.

        Args:
            part_name: Case-sensitive substring of the secret names.
            ctx: Request context, checked before every delete.
        """
        pass
