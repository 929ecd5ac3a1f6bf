from reqvars.schemas.environment import Environment, EnvironmentVariable
from reqvars.schemas.auth import AuthParam, AuthToken, AuthTokenDraft, RequestAuth, TokenSource
from reqvars.schemas.request import (
    Collection,
    HeaderEntry,
    HttpRequest,
    QueryParam,
    RequestBody,
    RequestUrl,
    SavedRequest,
    SavedRequestDraft,
    http_request_to_saved_request,
    saved_request_to_http_request,
)
from reqvars.schemas.extraction import ExtractedToken, TokenMapping

__all__ = [
    "Environment",
    "EnvironmentVariable",
    "AuthParam",
    "AuthToken",
    "AuthTokenDraft",
    "RequestAuth",
    "TokenSource",
    "Collection",
    "HeaderEntry",
    "HttpRequest",
    "QueryParam",
    "RequestBody",
    "RequestUrl",
    "SavedRequest",
    "SavedRequestDraft",
    "http_request_to_saved_request",
    "saved_request_to_http_request",
    "ExtractedToken",
    "TokenMapping",
]
