"""Secret reference parsing."""

from cloudkeys.base.exceptions import MalformedReferenceError


def parse_secret_id(ref: str) -> str:
    """Return the secret ID from a secret reference.

    The ID is the last ``/``-separated segment, e.g.
    ``https://barbican:9311/v1/secrets/abc123`` gives ``abc123``.

    Raises:
        MalformedReferenceError: If *ref* contains no ``/`` at all.
    """
    parts = ref.split("/")
    if len(parts) < 2:
        raise MalformedReferenceError(f"could not parse {ref}")
    return parts[-1]
