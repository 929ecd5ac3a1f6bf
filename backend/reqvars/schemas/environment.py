"""Pydantic schemas for Environments."""

from datetime import datetime
from uuid import uuid4
from pydantic import BaseModel, Field


class EnvironmentVariable(BaseModel):
    """Single key/value entry of an environment."""
    key: str
    value: str = ""
    disabled: bool = False  # Disabled variables never resolve placeholders


class Environment(BaseModel):
    """
    Named set of variables the user can switch between.

    Keys are not required to be unique; lookups use the first enabled match.
    """
    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str = Field(..., min_length=1, max_length=255)
    variables: list[EnvironmentVariable] = Field(default_factory=list)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    def find_variable(self, key: str) -> EnvironmentVariable | None:
        """Return the first enabled variable with an exactly matching key."""
        for variable in self.variables:
            if variable.key == key and not variable.disabled:
                return variable
        return None

    @property
    def enabled_variables(self) -> dict[str, str]:
        result: dict[str, str] = {}
        for variable in self.variables:
            if not variable.disabled and variable.key not in result:
                result[variable.key] = variable.value
        return result
