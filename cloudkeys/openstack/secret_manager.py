"""OpenStack Barbican implementation of the SecretManager blueprint."""

from __future__ import annotations

import openstack
from openstack import exceptions as os_exc

from cloudkeys.base.config import OpenStackConfig
from cloudkeys.base.context import RequestContext
from cloudkeys.base.exceptions import (
    AmbiguousSecretError,
    RemoteServiceError,
    SecretNotFoundError,
)
from cloudkeys.base.logger import ck_logger
from cloudkeys.base.telemetry import traced_call
from cloudkeys.base.models import (
    OPAQUE_SECRET,
    SECRET_ALGORITHM,
    SECRET_BIT_LENGTH,
    SECRET_MODE,
    SECRET_PAYLOAD_ENCODING,
    Secret,
)

from cloudkeys.base import SecretManagerBlueprint

_PROVIDER = "openstack"
_RESOURCE = "secret"


def _remote_error(message: str, exc: os_exc.SDKException) -> RemoteServiceError:
    return RemoteServiceError(
        f"{message}: {str(exc)}", status_code=getattr(exc, "status_code", None)
    )


class SecretManager(SecretManagerBlueprint):
    """Barbican implementation for secret management.

    This provider implements the SecretManagerBlueprint interface on top of
    the ``key_manager`` proxy of an openstacksdk connection. Pagination,
    authentication and HTTP are left to the SDK.

    Attributes:
        conn: openstacksdk connection used for every request.
        region: Region name the connection was configured for, if any.
    """

    def __init__(
        self, config: OpenStackConfig, connection: openstack.connection.Connection | None = None
    ) -> None:
        """Initialize the Barbican client.

        Args:
            config: Validated OpenStack configuration.
            connection: Optional already authenticated
                :class:`openstack.connection.Connection`. When omitted, one is
                opened from *config*.
        """
        self.conn = connection or openstack.connect(**config.connect_kwargs())
        self.region = config.region_name

    def _list(self, ctx: RequestContext, **query: str) -> list[Secret]:
        ctx.check()
        found: list[Secret] = []
        try:
            with traced_call(_RESOURCE, "list") as span:
                # The SDK fetches pages lazily; stop pulling once ctx is done.
                for resource in self.conn.key_manager.secrets(**query):
                    ctx.check()
                    found.append(Secret.from_sdk(resource))
                span.set_attribute("cloudkeys.secret_count", len(found))
        except os_exc.SDKException as e:
            raise _remote_error(f"Failed to list secrets {query}", e) from e
        return found

    def get_secret(self, name: str, ctx: RequestContext | None = None) -> Secret:
        """Return the only Barbican secret named *name*.

        Args:
            name: Exact secret name.
            ctx: Request context.

        Returns:
            The matching secret (metadata only).

        Raises:
            SecretNotFoundError: If no secret has that name.
            AmbiguousSecretError: If more than one secret has that name.
            RemoteServiceError: If the listing fails.
        """
        ctx = ctx or RequestContext()
        found = self._list(ctx, name=name)
        if not found:
            raise SecretNotFoundError(f"Secret '{name}' not found.")
        if len(found) > 1:
            raise AmbiguousSecretError(
                f"Found {len(found)} secrets named '{name}', expected one."
            )
        return found[0]

    def create_secret(
        self,
        name: str,
        secret_type: str,
        payload: str,
        ctx: RequestContext | None = None,
    ) -> str:
        """Create an opaque AES-256/CBC secret in Barbican.

        Args:
            name: Secret name.
            secret_type: Payload content type (e.g. 'application/octet-stream').
            payload: Base64-encoded secret content.
            ctx: Request context.

        Returns:
            The secret reference assigned by Barbican.

        Raises:
            RemoteServiceError: If creation fails.
        """
        ctx = ctx or RequestContext()
        ctx.check()
        try:
            with traced_call(_RESOURCE, "create"):
                secret = self.conn.key_manager.create_secret(
                    name=name,
                    algorithm=SECRET_ALGORITHM,
                    mode=SECRET_MODE,
                    bit_length=SECRET_BIT_LENGTH,
                    payload_content_type=secret_type,
                    payload_content_encoding=SECRET_PAYLOAD_ENCODING,
                    payload=payload,
                    secret_type=OPAQUE_SECRET,
                )
        except os_exc.SDKException as e:
            raise _remote_error(f"Failed to create secret '{name}'", e) from e

        ck_logger.info(
            f"Created secret '{name}'",
            provider=_PROVIDER,
            service="secret_manager",
            operation="create_secret",
        )
        return secret.secret_ref

    def delete_secrets(self, part_name: str, ctx: RequestContext | None = None) -> None:
        """Delete every opaque Barbican secret whose name contains *part_name*.

        Secrets are listed by type only; the name match happens here.
        Secrets deleted concurrently (404 on delete) are skipped. Any other
        failure stops the batch, leaving the remaining matches in place.

        Args:
            part_name: Case-sensitive substring of the secret names.
            ctx: Request context, checked before every delete.

        Raises:
            MalformedReferenceError: If a matching secret has an unparseable reference.
            RemoteServiceError: If the listing or a delete fails.
            OperationCancelledError: If *ctx* is cancelled mid-batch.
        """
        ctx = ctx or RequestContext()
        for secret in self._list(ctx, secret_type=OPAQUE_SECRET):
            if part_name not in (secret.name or ""):
                continue
            secret_id = self.parse_secret_id(secret.secret_ref)
            ctx.check()
            try:
                with traced_call(_RESOURCE, "delete"):
                    self.conn.key_manager.delete_secret(secret_id, ignore_missing=False)
            except os_exc.ResourceNotFound:
                ck_logger.debug(
                    f"Secret '{secret.name}' ({secret_id}) already deleted",
                    provider=_PROVIDER,
                    operation="delete_secrets",
                )
                continue
            except os_exc.SDKException as e:
                ck_logger.error(
                    f"Stopped deleting secrets matching '{part_name}' at {secret_id}",
                    provider=_PROVIDER,
                    service="secret_manager",
                    operation="delete_secrets",
                )
                raise _remote_error(
                    f"Failed to delete secret '{secret.name}' ({secret_id})", e
                ) from e
            ck_logger.info(
                f"Deleted secret '{secret.name}' ({secret_id})",
                provider=_PROVIDER,
                service="secret_manager",
                operation="delete_secrets",
            )
