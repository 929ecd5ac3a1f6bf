"""Variable and credential resolution services."""

from reqvars.services.resolution.variable_resolver import ResolvedText, VariableResolver
from reqvars.services.resolution.payload_resolver import (
    PayloadResolver,
    ResolvedRequest,
    build_auth_headers,
)
from reqvars.services.resolution.auth_inheritance import is_auth_inherited, resolve_auth
from reqvars.services.resolution.script_parser import (
    NOT_FOUND,
    apply_token_mappings,
    get_value_by_path,
    parse_token_mappings,
)
from reqvars.services.resolution.token_extractor import (
    TokenExtractor,
    extract_tokens_from_response,
    extracted_tokens_to_auth_tokens,
)
from reqvars.services.resolution.token_store import InMemoryTokenStore, TokenStore

__all__ = [
    "ResolvedText",
    "VariableResolver",
    "PayloadResolver",
    "ResolvedRequest",
    "build_auth_headers",
    "is_auth_inherited",
    "resolve_auth",
    "NOT_FOUND",
    "apply_token_mappings",
    "get_value_by_path",
    "parse_token_mappings",
    "TokenExtractor",
    "extract_tokens_from_response",
    "extracted_tokens_to_auth_tokens",
    "InMemoryTokenStore",
    "TokenStore",
]
