"""Discovery of credential-shaped fields in JSON responses."""

import json
import logging
import re
from typing import Any, Iterable

from reqvars.config import Settings, get_settings
from reqvars.schemas.auth import AuthTokenDraft
from reqvars.schemas.extraction import ExtractedToken
from reqvars.services.http_response import HTTPResponse

logger = logging.getLogger(__name__)

# Field name fragments that look like credentials
TOKEN_FIELD_NAMES = [
    "token",
    "access_token",
    "accessToken",
    "authToken",
    "bearerToken",
    "bearer_token",
    "apiKey",
    "api_key",
    "apikey",
    "api_token",
    "apiToken",
    "jwt",
    "jwtToken",
    "refresh_token",
    "refreshToken",
    "sessionToken",
    "session_token",
]

ACCESS_TOKEN_NAMES = {"accesstoken", "access_token", "token", "authtoken"}
REFRESH_TOKEN_NAMES = {"refreshtoken", "refresh_token"}

SEPARATOR_PATTERN = re.compile(r"[\s_\-.]")
NON_IDENTIFIER_PATTERN = re.compile(r"[^a-z0-9]")


def _compact(name: str) -> str:
    return SEPARATOR_PATTERN.sub("", name.lower())


_FIELD_FRAGMENTS = frozenset(_compact(name) for name in TOKEN_FIELD_NAMES)


def is_token_field(key: str) -> bool:
    """Whether a property name looks like a credential, ignoring case and separators."""
    compact = _compact(key)
    return any(fragment in compact for fragment in _FIELD_FRAGMENTS)


class TokenExtractor:
    """
    Scans successful JSON responses for credential-shaped fields.

    Each candidate gets a suggested variable name so extracted tokens line up
    with the names collections already reference, e.g. {{user_token}}.
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()

    def extract(self, response: HTTPResponse) -> list[ExtractedToken]:
        """
        Extract candidate tokens from a response.

        Returns:
            Candidates in document order; empty for non-2xx, empty or non-JSON bodies
        """
        if not response.body or not response.is_success:
            return []

        try:
            parsed = response.json()
        except json.JSONDecodeError:
            logger.debug("Response body is not JSON, skipping token extraction")
            return []

        candidates = [
            ExtractedToken(
                name=name,
                value=value,
                path=path,
                suggested_token_name=self.suggest_token_name(name),
            )
            for name, value, path in self._find_token_fields(parsed, "")
        ]
        logger.debug("Found %d token candidate(s) in response", len(candidates))
        return candidates

    def suggest_token_name(self, field_name: str) -> str:
        """Variable name a discovered field should be stored under."""
        lower_name = field_name.lower()
        if lower_name in ACCESS_TOKEN_NAMES:
            return self.settings.access_token_alias
        if lower_name in REFRESH_TOKEN_NAMES:
            return self.settings.refresh_token_alias
        return NON_IDENTIFIER_PATTERN.sub("_", lower_name)

    def _find_token_fields(self, value: Any, path: str) -> Iterable[tuple[str, str, str]]:
        """Yield (field name, value, path) for every matching property under `value`."""
        if isinstance(value, dict):
            for key, item in value.items():
                current_path = f"{path}.{key}" if path else key
                if isinstance(item, str) and item and is_token_field(key):
                    yield key, item, current_path
                if isinstance(item, (dict, list)):
                    yield from self._find_token_fields(item, current_path)

        elif isinstance(value, list):
            for index, item in enumerate(value):
                # Arrays of primitives hold no named fields
                if isinstance(item, (dict, list)):
                    yield from self._find_token_fields(item, f"{path}[{index}]")


def extract_tokens_from_response(
    response: HTTPResponse,
    settings: Settings | None = None,
) -> list[ExtractedToken]:
    """Extract candidate tokens from an HTTP response."""
    return TokenExtractor(settings).extract(response)


def extracted_tokens_to_auth_tokens(extracted: Iterable[ExtractedToken]) -> list[AuthTokenDraft]:
    """Convert candidates into token drafts; the token store assigns ids and timestamps."""
    return [
        AuthTokenDraft(name=token.suggested_token_name, value=token.value, source="extracted")
        for token in extracted
    ]
