"""Tenant namespace derivation.

A caller's namespace is the BLAKE3 hex digest of its bearer token. Every
object key the caller touches lives under ``<namespace>/``.
"""

from blake3 import blake3


def get_token(authorization: str) -> str:
    """Return the token part of an ``Authorization: <scheme> <token>`` value.

    Anything that does not split into exactly two parts yields ``""``, which
    maps to the (isolated) empty-token namespace rather than an error.
    """
    items = authorization.split(" ")
    if len(items) == 2:
        return items[1]
    return ""


def derive_namespace(authorization: str) -> str:
    token = get_token(authorization).replace("=", "")
    return blake3(token.encode("utf-8")).hexdigest()


def object_key(authorization: str, object_id: str) -> str:
    """Full store key for ``object_id`` in the caller's namespace."""
    return f"{derive_namespace(authorization)}/{object_id}"


def tenant_root(authorization: str) -> str:
    """Listing root of the caller's namespace (``<namespace>/``)."""
    return object_key(authorization, "")


def local_key(key: str, root: str) -> str:
    """Strip the tenant root from a full key."""
    return key.removeprefix(root)
