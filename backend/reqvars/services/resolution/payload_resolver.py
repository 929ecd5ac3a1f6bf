"""Materializes request URL, body, headers and auth for dispatch."""

import base64
import json
import logging
from typing import Any, Mapping, Sequence
from dataclasses import dataclass, field
from urllib.parse import quote

from reqvars.config import Settings, get_settings
from reqvars.schemas.auth import AuthToken, RequestAuth
from reqvars.schemas.environment import Environment
from reqvars.schemas.request import (
    Collection,
    HeaderEntry,
    HttpRequest,
    RequestUrl,
    SavedRequestDraft,
    saved_request_to_http_request,
)
from reqvars.services.resolution.auth_inheritance import is_auth_inherited, resolve_auth
from reqvars.services.resolution.variable_resolver import VariableResolver

logger = logging.getLogger(__name__)

# Characters encodeURIComponent leaves alone besides alphanumerics
URI_COMPONENT_SAFE = "-_.!~*'()"

AUTH_PARAM_LISTS = ("bearer", "basic", "apikey")


@dataclass
class ResolvedRequest:
    """Request with every placeholder resolved, ready for the HTTP layer."""
    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: str = ""
    auth: RequestAuth | None = None
    auth_inherited: bool = False

    @property
    def auth_headers(self) -> dict[str, str]:
        return build_auth_headers(self.auth)


class PayloadResolver:
    """
    Applies placeholder substitution to the four request surfaces.

    All methods are pure: inputs are never mutated, new values are returned.
    """

    def __init__(
        self,
        variable_resolver: VariableResolver | None = None,
        settings: Settings | None = None,
    ):
        self.variable_resolver = variable_resolver or VariableResolver()
        self.settings = settings or get_settings()

    def resolve_url(
        self,
        url: str | RequestUrl | None,
        environment: Environment | None = None,
        auth_tokens: Sequence[AuthToken] | None = None,
    ) -> str:
        """
        Resolve a raw or structured URL.

        Args:
            url: Raw string, structured URL, or None
            environment: Active environment
            auth_tokens: Live auth tokens

        Returns:
            Resolved URL string, "" for a missing URL
        """
        if not url:
            return ""

        resolve = self.variable_resolver.resolve

        if isinstance(url, str):
            return resolve(url, environment, auth_tokens)

        if url.raw:
            return resolve(url.raw, environment, auth_tokens)

        protocol = url.protocol or self.settings.default_url_protocol
        host = ".".join(url.host or [])
        path = "/".join(url.path or [])

        query_parts = []
        for param in url.query or []:
            if param.disabled:
                continue
            if not param.value and not self.settings.keep_empty_query_params:
                continue
            key = resolve(param.key, environment, auth_tokens)
            value = resolve(param.value or "", environment, auth_tokens)
            query_parts.append(f"{key}={quote(value, safe=URI_COMPONENT_SAFE)}")
        query = "&".join(query_parts)

        constructed = f"{protocol}://{host}"
        if path:
            constructed += f"/{path}"
        if query:
            constructed += f"?{query}"

        return resolve(constructed, environment, auth_tokens)

    def resolve_body(
        self,
        body: str | None,
        environment: Environment | None = None,
        auth_tokens: Sequence[AuthToken] | None = None,
    ) -> str:
        """
        Resolve placeholders in a request body.

        JSON bodies are walked so only string values are substituted; object keys
        are kept as written. Anything that is not JSON is treated as plain text.
        """
        if not body:
            return ""

        try:
            parsed = json.loads(body)
        except json.JSONDecodeError:
            logger.debug("Body is not JSON, resolving as plain text")
            return self.variable_resolver.resolve(body, environment, auth_tokens)

        resolved = self.resolve_any(parsed, environment, auth_tokens)
        try:
            return json.dumps(resolved, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
        except ValueError:
            # NaN, Infinity or an overflowing number would not serialize as valid JSON
            logger.debug("Body has non-finite numbers, resolving as plain text")
            return self.variable_resolver.resolve(body, environment, auth_tokens)

    def resolve_any(
        self,
        value: Any,
        environment: Environment | None = None,
        auth_tokens: Sequence[AuthToken] | None = None,
    ) -> Any:
        """
        Resolve placeholders inside any parsed JSON value.

        Strings are substituted, objects and arrays are rebuilt with resolved
        members, every other value is returned as is.
        """
        if isinstance(value, str):
            return self.variable_resolver.resolve(value, environment, auth_tokens)
        elif isinstance(value, dict):
            return {
                key: self.resolve_any(item, environment, auth_tokens)
                for key, item in value.items()
            }
        elif isinstance(value, list):
            return [self.resolve_any(item, environment, auth_tokens) for item in value]
        else:
            return value

    def resolve_headers(
        self,
        headers: Mapping[str, str] | Sequence[HeaderEntry] | None,
        environment: Environment | None = None,
        auth_tokens: Sequence[AuthToken] | None = None,
    ) -> dict[str, str]:
        """
        Resolve header names and values independently.

        Disabled headers must be filtered out by the caller beforehand.
        """
        if not headers:
            return {}

        if isinstance(headers, Mapping):
            items = list(headers.items())
        else:
            items = [(entry.key, entry.value) for entry in headers]

        resolve = self.variable_resolver.resolve
        return {
            resolve(key, environment, auth_tokens): resolve(value, environment, auth_tokens)
            for key, value in items
        }

    def resolve_auth(
        self,
        auth: RequestAuth | None,
        environment: Environment | None = None,
        auth_tokens: Sequence[AuthToken] | None = None,
    ) -> RequestAuth | None:
        """Resolve parameter values of bearer, basic and API key auth."""
        if auth is None:
            return None

        updates = {}
        for attr in AUTH_PARAM_LISTS:
            params = getattr(auth, attr)
            if params is None:
                continue
            updates[attr] = [
                param.model_copy(
                    update={
                        "value": self.variable_resolver.resolve(param.value, environment, auth_tokens)
                    }
                )
                for param in params
            ]

        return auth.model_copy(update=updates)

    def resolve_request(
        self,
        request: HttpRequest,
        collection_auth: RequestAuth | None = None,
        environment: Environment | None = None,
        auth_tokens: Sequence[AuthToken] | None = None,
    ) -> ResolvedRequest:
        """
        Resolve a whole editor request in one call.

        Disabled headers are dropped and the effective auth is chosen between the
        request's own auth and its collection's before substitution.
        """
        enabled_headers = [h for h in request.header or [] if not h.disabled]
        effective_auth = resolve_auth(request.auth, collection_auth)

        return ResolvedRequest(
            method=(request.method or "GET").upper(),
            url=self.resolve_url(request.url, environment, auth_tokens),
            headers=self.resolve_headers(enabled_headers, environment, auth_tokens),
            body=self.resolve_body(request.body.raw if request.body else None, environment, auth_tokens),
            auth=self.resolve_auth(effective_auth, environment, auth_tokens),
            auth_inherited=is_auth_inherited(request.auth, collection_auth),
        )

    def resolve_saved_request(
        self,
        saved: SavedRequestDraft,
        collection: Collection | None = None,
        environment: Environment | None = None,
        auth_tokens: Sequence[AuthToken] | None = None,
    ) -> ResolvedRequest:
        """Resolve a stored request, inheriting auth from its collection."""
        return self.resolve_request(
            saved_request_to_http_request(saved),
            collection.auth if collection else None,
            environment,
            auth_tokens,
        )


def build_auth_headers(auth: RequestAuth | None) -> dict[str, str]:
    """Build authentication headers from an already resolved auth."""
    if auth is None:
        return {}

    if auth.type == "bearer":
        return {"Authorization": f"Bearer {auth.param('token')}"}

    elif auth.type == "basic":
        username = auth.param("username")
        password = auth.param("password")
        credentials = base64.b64encode(f"{username}:{password}".encode()).decode()
        return {"Authorization": f"Basic {credentials}"}

    elif auth.type == "apikey":
        key = auth.param("key")
        location = auth.param("in") or "header"
        if key and location == "header":
            return {key: auth.param("value")}
        # Query param auth is applied by the HTTP layer

    return {}
