"""
Shared fixtures for the reqvars test suite.
"""

import pytest

from reqvars.config import Settings
from reqvars.schemas.auth import AuthParam, AuthToken, RequestAuth
from reqvars.schemas.environment import Environment, EnvironmentVariable


@pytest.fixture
def settings():
    """Settings independent of the process environment and any .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def environment():
    return Environment(
        name="staging",
        variables=[
            EnvironmentVariable(key="base_url", value="https://staging.example.com"),
            EnvironmentVariable(key="user_id", value="42"),
            EnvironmentVariable(key="api_key", value="env-key"),
            EnvironmentVariable(key="old", value="disabled-value", disabled=True),
            EnvironmentVariable(key="dup", value="first"),
            EnvironmentVariable(key="dup", value="second"),
        ],
    )


@pytest.fixture
def auth_tokens():
    return [
        AuthToken(name="user_token", value="tok-123", source="extracted"),
        AuthToken(name="api_key", value="token-key", source="manual"),
    ]


@pytest.fixture
def bearer_auth():
    return RequestAuth(
        type="bearer",
        bearer=[AuthParam(key="token", value="{{user_token}}", type="string")],
    )
