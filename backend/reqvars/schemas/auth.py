"""Pydantic schemas for request auth and auth tokens."""

from datetime import datetime
from uuid import uuid4
from typing import Literal
from pydantic import BaseModel, Field


TokenSource = Literal["manual", "extracted", "imported"]

AuthType = Literal["noauth", "bearer", "basic", "apikey"]


class AuthParam(BaseModel):
    """One auth parameter, e.g. {"key": "token", "value": "{{user_token}}"}."""
    key: str
    value: str = ""
    type: str | None = None  # Postman stores "string" here; carried through untouched


class RequestAuth(BaseModel):
    """
    Auth configuration attached to a request or a collection.

    `type` discriminates the variant:
    - noauth: explicit override, no auth is sent
    - bearer: `bearer` carries the "token" parameter
    - basic: `basic` carries "username" and "password"
    - apikey: `apikey` carries "key", "value" and optionally "in" (header|query)
    - None: no explicit choice, the request inherits its collection's auth
    """
    type: AuthType | None = None
    bearer: list[AuthParam] | None = None
    basic: list[AuthParam] | None = None
    apikey: list[AuthParam] | None = None

    def param(self, key: str) -> str:
        """Value of the named parameter in the active variant, "" when missing."""
        params = getattr(self, self.type, None) if self.type and self.type != "noauth" else None
        for item in params or []:
            if item.key == key:
                return item.value
        return ""


class AuthTokenDraft(BaseModel):
    """Auth token without identity and timestamps, assigned by the token store."""
    name: str = Field(..., min_length=1)
    value: str
    source: TokenSource | None = None


class AuthToken(AuthTokenDraft):
    """Named credential resolvable as a {{name}} placeholder."""
    id: str = Field(default_factory=lambda: f"token_{uuid4().hex}")
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
