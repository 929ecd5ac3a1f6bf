"""Ephemeral auth token storage, cleared when the process exits."""

import logging
from datetime import datetime
from typing import Protocol, runtime_checkable

from reqvars.schemas.auth import AuthToken, AuthTokenDraft

logger = logging.getLogger(__name__)

# Fields a caller may change through update()
UPDATABLE_FIELDS = {"name", "value", "source"}


@runtime_checkable
class TokenStore(Protocol):
    """Load/save/delete interface the surrounding application persists tokens through."""

    def load(self) -> list[AuthToken]: ...

    def save(self, token: AuthTokenDraft) -> AuthToken: ...

    def delete(self, token_id: str) -> bool: ...


class InMemoryTokenStore:
    """
    Token store kept in memory only.

    Saving a token whose name already exists replaces the existing one, so
    names stay unique within a store.
    """

    def __init__(self, tokens: list[AuthToken] | None = None):
        self._tokens: list[AuthToken] = list(tokens or [])

    def save(self, token: AuthTokenDraft) -> AuthToken:
        """Insert a token, or replace the one with the same name."""
        now = datetime.utcnow()
        new_token = AuthToken(
            name=token.name,
            value=token.value,
            source=token.source,
            created_at=now,
            updated_at=now,
        )

        for index, existing in enumerate(self._tokens):
            if existing.name == token.name:
                self._tokens[index] = new_token
                logger.debug("Replaced token %s", token.name)
                break
        else:
            self._tokens.append(new_token)
            logger.debug("Added token %s", token.name)

        return new_token

    def save_all(self, tokens: list[AuthTokenDraft]) -> list[AuthToken]:
        return [self.save(token) for token in tokens]

    def load(self) -> list[AuthToken]:
        """Copy of the stored tokens; mutating it does not affect the store."""
        return list(self._tokens)

    def update(self, token_id: str, **changes) -> AuthToken | None:
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update token fields: {', '.join(sorted(unknown))}")

        for index, existing in enumerate(self._tokens):
            if existing.id == token_id:
                updated = existing.model_copy(update={**changes, "updated_at": datetime.utcnow()})
                self._tokens[index] = updated
                return updated
        return None

    def delete(self, token_id: str) -> bool:
        remaining = [t for t in self._tokens if t.id != token_id]
        deleted = len(remaining) < len(self._tokens)
        self._tokens = remaining
        return deleted

    def get(self, token_id: str) -> AuthToken | None:
        return next((t for t in self._tokens if t.id == token_id), None)

    def get_by_name(self, name: str) -> AuthToken | None:
        return next((t for t in self._tokens if t.name == name), None)

    def clear(self) -> None:
        """Forget every token, e.g. on logout."""
        self._tokens = []
