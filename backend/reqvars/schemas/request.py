"""Pydantic schemas for requests, saved requests and collections."""

from datetime import datetime
from uuid import uuid4
from typing import Literal
from pydantic import BaseModel, Field

from reqvars.schemas.auth import RequestAuth


class QueryParam(BaseModel):
    """Query parameter of a structured URL."""
    key: str
    value: str | None = None
    disabled: bool = False


class RequestUrl(BaseModel):
    """
    URL in raw or structured form.

    When `raw` is set it wins; otherwise the URL is rebuilt from its parts:
    {protocol}://{host joined by "."}/{path joined by "/"}?{query}
    """
    raw: str | None = None
    protocol: str | None = None
    host: list[str] | None = None
    path: list[str] | None = None
    query: list[QueryParam] | None = None


class HeaderEntry(BaseModel):
    """Request header row."""
    key: str
    value: str = ""
    disabled: bool = False


class RequestBody(BaseModel):
    """Request body configuration."""
    mode: Literal["raw", "urlencoded", "formdata", "none"] = "raw"
    raw: str | None = None


class HttpRequest(BaseModel):
    """Request as composed in the editor, before resolution."""
    method: str = "GET"
    url: RequestUrl | None = None
    header: list[HeaderEntry] | None = None
    body: RequestBody | None = None
    auth: RequestAuth | None = None
    test_script: str | None = None


class SavedRequestDraft(BaseModel):
    """Saved request without identity and timestamps."""
    name: str = Field(..., min_length=1, max_length=255)
    method: str = "GET"
    url: str = ""
    body: str | None = None
    headers: dict[str, str] | None = None
    auth: RequestAuth | None = None
    test_script: str | None = None
    collection_id: str | None = None


class SavedRequest(SavedRequestDraft):
    """Request stored in a collection."""
    id: str = Field(default_factory=lambda: str(uuid4()))
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class Collection(BaseModel):
    """Collection of saved requests; its auth is inherited by requests without their own."""
    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str = Field(..., min_length=1, max_length=255)
    requests: list[str] = Field(default_factory=list)  # request IDs
    collections: list[str] | None = None  # nested collection IDs
    auth: RequestAuth | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


def saved_request_to_http_request(saved: SavedRequestDraft) -> HttpRequest:
    """Convert a stored request into the editor form."""
    return HttpRequest(
        method=saved.method,
        url=RequestUrl(raw=saved.url),
        header=[HeaderEntry(key=key, value=value) for key, value in saved.headers.items()]
        if saved.headers
        else None,
        body=RequestBody(mode="raw", raw=saved.body) if saved.body else None,
        auth=saved.auth,
        test_script=saved.test_script,
    )


def http_request_to_saved_request(
    request: HttpRequest,
    name: str,
    collection_id: str | None = None,
) -> SavedRequestDraft:
    """Convert an editor request into a draft ready to be stored."""
    return SavedRequestDraft(
        name=name,
        method=request.method or "GET",
        url=(request.url.raw if request.url else None) or "",
        body=request.body.raw if request.body else None,
        headers={h.key: h.value for h in request.header} if request.header else None,
        auth=request.auth,
        test_script=request.test_script,
        collection_id=collection_id,
    )
