"""Variable and credential resolution engine for a REST client."""

from reqvars.config import Settings, configure_logging, get_settings
from reqvars.services.http_response import HTTPResponse
from reqvars.services.resolution import (
    NOT_FOUND,
    InMemoryTokenStore,
    PayloadResolver,
    ResolvedRequest,
    ResolvedText,
    TokenExtractor,
    TokenStore,
    VariableResolver,
    apply_token_mappings,
    build_auth_headers,
    extract_tokens_from_response,
    extracted_tokens_to_auth_tokens,
    get_value_by_path,
    is_auth_inherited,
    parse_token_mappings,
    resolve_auth,
)

__version__ = "0.1.0"

__all__ = [
    "Settings",
    "configure_logging",
    "get_settings",
    "HTTPResponse",
    "NOT_FOUND",
    "InMemoryTokenStore",
    "PayloadResolver",
    "ResolvedRequest",
    "ResolvedText",
    "TokenExtractor",
    "TokenStore",
    "VariableResolver",
    "apply_token_mappings",
    "build_auth_headers",
    "extract_tokens_from_response",
    "extracted_tokens_to_auth_tokens",
    "get_value_by_path",
    "is_auth_inherited",
    "parse_token_mappings",
    "resolve_auth",
]
