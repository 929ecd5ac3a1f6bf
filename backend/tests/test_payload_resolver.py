"""Tests for URL, body, header and auth resolution."""

import base64
import json

import pytest

from reqvars.config import Settings
from reqvars.schemas.auth import AuthParam, RequestAuth
from reqvars.schemas.environment import Environment, EnvironmentVariable
from reqvars.schemas.request import (
    Collection,
    HeaderEntry,
    HttpRequest,
    QueryParam,
    RequestBody,
    RequestUrl,
    SavedRequest,
)
from reqvars.services.resolution.payload_resolver import PayloadResolver, build_auth_headers


@pytest.fixture
def resolver(settings):
    return PayloadResolver(settings=settings)


class TestResolveUrl:

    def test_missing_url(self, resolver, environment):
        assert resolver.resolve_url(None, environment) == ""
        assert resolver.resolve_url("", environment) == ""

    def test_raw_string(self, resolver, environment):
        assert resolver.resolve_url("{{base_url}}/users/{{user_id}}", environment) == (
            "https://staging.example.com/users/42"
        )

    def test_structured_url_prefers_raw(self, resolver, environment):
        url = RequestUrl(raw="{{base_url}}/a", host=["ignored", "com"], path=["b"])
        assert resolver.resolve_url(url, environment) == "https://staging.example.com/a"

    def test_rebuilds_from_parts(self, resolver, environment):
        url = RequestUrl(
            protocol="https",
            host=["api", "example", "com"],
            path=["users", "{{user_id}}"],
            query=[
                QueryParam(key="q", value="a b&c"),
                QueryParam(key="off", value="x", disabled=True),
                QueryParam(key="empty", value=""),
                QueryParam(key="none"),
                QueryParam(key="id", value="{{user_id}}"),
            ],
        )
        assert resolver.resolve_url(url, environment) == (
            "https://api.example.com/users/42?q=a%20b%26c&id=42"
        )

    def test_rebuild_defaults(self, resolver):
        url = RequestUrl(host=["localhost"])
        assert resolver.resolve_url(url) == "http://localhost"

    def test_query_values_are_resolved_before_encoding(self, resolver):
        url = RequestUrl(
            host=["example", "com"],
            query=[QueryParam(key="next", value="{{target}}")],
        )
        env = Environment(name="e", variables=[EnvironmentVariable(key="target", value="/a?b=c")])
        assert resolver.resolve_url(url, env) == "http://example.com?next=%2Fa%3Fb%3Dc"

    def test_encoding_keeps_uri_component_safe_characters(self, resolver):
        url = RequestUrl(host=["h"], query=[QueryParam(key="v", value="a-_.!~*'()z")])
        assert resolver.resolve_url(url) == "http://h?v=a-_.!~*'()z"

    def test_keep_empty_query_params(self):
        resolver = PayloadResolver(settings=Settings(_env_file=None, keep_empty_query_params=True))
        url = RequestUrl(host=["h"], query=[QueryParam(key="a", value=""), QueryParam(key="b", value="1")])
        assert resolver.resolve_url(url) == "http://h?a=&b=1"


class TestResolveBody:

    def test_missing_body(self, resolver, environment):
        assert resolver.resolve_body(None, environment) == ""
        assert resolver.resolve_body("", environment) == ""

    def test_json_round_trip(self, resolver):
        env = Environment(name="e", variables=[EnvironmentVariable(key="x", value="1")])
        assert json.loads(resolver.resolve_body('{"a":"{{x}}"}', env)) == {"a": "1"}

    def test_nested_structures(self, resolver, environment, auth_tokens):
        body = json.dumps({
            "user": {"id": "{{user_id}}", "tags": ["{{user_id}}", 7, None, {"t": "{{user_token}}"}]},
            "count": 3,
            "flag": True,
        })
        result = json.loads(resolver.resolve_body(body, environment, auth_tokens))
        assert result == {
            "user": {"id": "42", "tags": ["42", 7, None, {"t": "tok-123"}]},
            "count": 3,
            "flag": True,
        }

    def test_keys_are_not_substituted(self, resolver, environment):
        result = json.loads(resolver.resolve_body('{"{{user_id}}": "{{user_id}}"}', environment))
        assert result == {"{{user_id}}": "42"}

    def test_json_is_reserialized_compactly(self, resolver, environment):
        assert resolver.resolve_body('{ "a" : [ 1, 2 ] }', environment) == '{"a":[1,2]}'

    def test_non_json_falls_back_to_text(self, resolver, environment):
        body = "id={{user_id}}&name={{missing}}"
        assert resolver.resolve_body(body, environment) == "id=42&name={{missing}}"

    def test_invalid_json_with_placeholder_values(self, resolver, environment):
        # Unquoted placeholder makes the body invalid JSON until substituted
        assert resolver.resolve_body('{"id": {{user_id}}}', environment) == '{"id": 42}'

    def test_empty_structures(self, resolver, environment):
        assert resolver.resolve_body("{}", environment) == "{}"
        assert resolver.resolve_body("[]", environment) == "[]"

    def test_top_level_string(self, resolver, environment):
        assert resolver.resolve_body('"{{user_id}}"', environment) == '"42"'

    @pytest.mark.parametrize(
        "body,expected",
        [
            ('{"a":1e400,"b":"{{user_id}}"}', '{"a":1e400,"b":"42"}'),
            ('{"a":NaN,"b":"{{user_id}}"}', '{"a":NaN,"b":"42"}'),
            ('{"a":-Infinity,"b":"{{user_id}}"}', '{"a":-Infinity,"b":"42"}'),
        ],
    )
    def test_non_finite_numbers_fall_back_to_text(self, resolver, environment, body, expected):
        assert resolver.resolve_body(body, environment) == expected

    def test_finite_numbers_stay_json(self, resolver, environment):
        result = resolver.resolve_body('{"a":1e300,"b":"{{user_id}}"}', environment)
        assert json.loads(result) == {"a": 1e300, "b": "42"}


class TestResolveHeaders:

    def test_missing_headers(self, resolver):
        assert resolver.resolve_headers(None) == {}

    def test_keys_and_values_resolved(self, resolver, environment, auth_tokens):
        headers = {"Authorization": "Bearer {{user_token}}", "X-{{user_id}}": "{{missing}}"}
        assert resolver.resolve_headers(headers, environment, auth_tokens) == {
            "Authorization": "Bearer tok-123",
            "X-42": "{{missing}}",
        }

    def test_header_entries(self, resolver, environment):
        headers = [HeaderEntry(key="X-User", value="{{user_id}}")]
        assert resolver.resolve_headers(headers, environment) == {"X-User": "42"}


class TestResolveAuth:

    def test_missing_auth(self, resolver):
        assert resolver.resolve_auth(None) is None

    def test_bearer(self, resolver, bearer_auth, auth_tokens):
        resolved = resolver.resolve_auth(bearer_auth, None, auth_tokens)
        assert resolved.type == "bearer"
        assert resolved.bearer == [AuthParam(key="token", value="tok-123", type="string")]
        # Input untouched
        assert bearer_auth.bearer[0].value == "{{user_token}}"

    def test_basic_and_apikey(self, resolver, environment):
        auth = RequestAuth(
            type="basic",
            basic=[AuthParam(key="username", value="u{{user_id}}"), AuthParam(key="password", value="p")],
            apikey=[AuthParam(key="value", value="{{api_key}}")],
        )
        resolved = resolver.resolve_auth(auth, environment)
        assert [p.value for p in resolved.basic] == ["u42", "p"]
        assert [p.key for p in resolved.basic] == ["username", "password"]
        assert resolved.apikey[0].value == "env-key"
        assert resolved.bearer is None

    def test_noauth_passes_through(self, resolver):
        auth = RequestAuth(type="noauth")
        assert resolver.resolve_auth(auth) == auth


class TestBuildAuthHeaders:

    def test_bearer(self):
        auth = RequestAuth(type="bearer", bearer=[AuthParam(key="token", value="abc")])
        assert build_auth_headers(auth) == {"Authorization": "Bearer abc"}

    def test_basic(self):
        auth = RequestAuth(
            type="basic",
            basic=[AuthParam(key="username", value="user"), AuthParam(key="password", value="pass")],
        )
        expected = base64.b64encode(b"user:pass").decode()
        assert build_auth_headers(auth) == {"Authorization": f"Basic {expected}"}

    def test_apikey_header(self):
        auth = RequestAuth(
            type="apikey",
            apikey=[AuthParam(key="key", value="X-Api-Key"), AuthParam(key="value", value="secret")],
        )
        assert build_auth_headers(auth) == {"X-Api-Key": "secret"}

    def test_apikey_query_adds_no_header(self):
        auth = RequestAuth(
            type="apikey",
            apikey=[
                AuthParam(key="key", value="api_key"),
                AuthParam(key="value", value="secret"),
                AuthParam(key="in", value="query"),
            ],
        )
        assert build_auth_headers(auth) == {}

    @pytest.mark.parametrize("auth", [None, RequestAuth(type="noauth"), RequestAuth()])
    def test_no_auth(self, auth):
        assert build_auth_headers(auth) == {}


class TestResolveRequest:

    def test_inherits_collection_auth(self, resolver, environment, auth_tokens, bearer_auth):
        request = HttpRequest(
            method="post",
            url=RequestUrl(raw="{{base_url}}/login"),
            header=[
                HeaderEntry(key="X-User", value="{{user_id}}"),
                HeaderEntry(key="X-Off", value="1", disabled=True),
            ],
            body=RequestBody(raw='{"id":"{{user_id}}"}'),
        )
        resolved = resolver.resolve_request(request, bearer_auth, environment, auth_tokens)

        assert resolved.method == "POST"
        assert resolved.url == "https://staging.example.com/login"
        assert resolved.headers == {"X-User": "42"}
        assert resolved.body == '{"id":"42"}'
        assert resolved.auth_inherited
        assert resolved.auth_headers == {"Authorization": "Bearer tok-123"}

    def test_explicit_noauth(self, resolver, bearer_auth):
        request = HttpRequest(url=RequestUrl(raw="http://h"), auth=RequestAuth(type="noauth"))
        resolved = resolver.resolve_request(request, bearer_auth)

        assert resolved.auth is None
        assert not resolved.auth_inherited
        assert resolved.body == ""
        assert resolved.auth_headers == {}

    def test_saved_request_inherits_collection_auth(self, resolver, environment, auth_tokens, bearer_auth):
        saved = SavedRequest(
            name="Profile",
            url="{{base_url}}/users/{{user_id}}",
            headers={"Accept": "application/json"},
            collection_id="c1",
        )
        collection = Collection(id="c1", name="Users", requests=[saved.id], auth=bearer_auth)
        resolved = resolver.resolve_saved_request(saved, collection, environment, auth_tokens)

        assert resolved.method == "GET"
        assert resolved.url == "https://staging.example.com/users/42"
        assert resolved.headers == {"Accept": "application/json"}
        assert resolved.auth_inherited
        assert resolved.auth_headers == {"Authorization": "Bearer tok-123"}

    def test_saved_request_without_collection(self, resolver, environment):
        saved = SavedRequest(
            name="Login",
            method="post",
            url="{{base_url}}/login",
            body='{"user":"{{user_id}}"}',
            auth=RequestAuth(type="basic", basic=[AuthParam(key="username", value="{{user_id}}")]),
        )
        resolved = resolver.resolve_saved_request(saved, None, environment)

        assert resolved.method == "POST"
        assert resolved.body == '{"user":"42"}'
        assert not resolved.auth_inherited
        assert resolved.auth.param("username") == "42"
