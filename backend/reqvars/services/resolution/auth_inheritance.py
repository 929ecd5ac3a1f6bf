"""Auth inheritance between a request and its parent collection."""

from reqvars.schemas.auth import RequestAuth


def resolve_auth(
    request_auth: RequestAuth | None,
    collection_auth: RequestAuth | None,
) -> RequestAuth | None:
    """
    Choose the auth to apply to a request.

    Rules:
    1. Request auth of type "noauth" is an explicit override: no auth at all
    2. Request auth with any other type wins over the collection
    3. Otherwise the request inherits the collection auth (which may be None)

    No placeholder substitution happens here.
    """
    if request_auth is not None and request_auth.type == "noauth":
        return None

    if request_auth is not None and request_auth.type:
        return request_auth

    return collection_auth


def is_auth_inherited(
    request_auth: RequestAuth | None,
    collection_auth: RequestAuth | None,
) -> bool:
    """Whether the effective auth comes from the collection."""
    # An explicit type on the request, noauth included, is never inherited
    if request_auth is not None and request_auth.type:
        return False

    return collection_auth is not None
