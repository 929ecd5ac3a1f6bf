"""Pydantic schemas for script mappings and extracted tokens."""

from pydantic import BaseModel, Field


class TokenMapping(BaseModel):
    """Intent to copy the value at `json_path` of the next response into `variable_name`."""
    variable_name: str = Field(..., min_length=1)
    json_path: str  # Simplified path, e.g. "accessToken" or "data.token"


class ExtractedToken(BaseModel):
    """Credential-shaped field discovered in a response body."""
    name: str  # Field name as it appears in the body
    value: str
    path: str  # e.g. "data.session.token" or "items[0].apiKey"
    suggested_token_name: str
