"""Placeholder substitution for request text."""

import logging
import re
from typing import Sequence
from dataclasses import dataclass

from reqvars.schemas.auth import AuthToken
from reqvars.schemas.environment import Environment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedText:
    """Text before and after substitution, as shown in the variable preview."""
    original: str
    resolved: str

    @property
    def changed(self) -> bool:
        return self.original != self.resolved


class VariableResolver:
    """
    Resolves {{variable}} placeholders with values from auth tokens and an environment.

    Lookup order for a placeholder name:
    1. First auth token whose name matches exactly
    2. First enabled environment variable whose key matches exactly

    Placeholders that match neither are left in the text unchanged.
    """

    VARIABLE_PATTERN = re.compile(r'\{\{([^}]+)\}\}')

    def resolve(
        self,
        text: str | None,
        environment: Environment | None = None,
        auth_tokens: Sequence[AuthToken] | None = None,
    ) -> str:
        """
        Resolve placeholders in a string.

        Args:
            text: String containing {{variable}} patterns
            environment: Active environment, if any
            auth_tokens: Live auth tokens, these take precedence over environment variables

        Returns:
            String with every resolvable placeholder replaced
        """
        if not text:
            return text or ""

        if not isinstance(text, str):
            raise TypeError(f"Expected text to resolve, got {type(text).__name__}")

        # First pass: resolve each distinct name once
        replacements: dict[str, str] = {}
        for name in self.extract_variables(text):
            value = self.lookup(name, environment, auth_tokens)
            if value is None:
                logger.debug("Unresolved placeholder {{%s}}", name)
                continue
            replacements[name] = value

        # Second pass: replace every occurrence, whatever the inner whitespace
        result = text
        for name, value in replacements.items():
            pattern = re.compile(r'\{\{\s*' + re.escape(name) + r'\s*\}\}')
            result = pattern.sub(lambda _match, value=value: value, result)

        return result

    def resolve_with_original(
        self,
        text: str | None,
        environment: Environment | None = None,
        auth_tokens: Sequence[AuthToken] | None = None,
    ) -> ResolvedText:
        """Resolve a string and keep the original next to the result."""
        original = text or ""
        return ResolvedText(
            original=original,
            resolved=self.resolve(original, environment, auth_tokens),
        )

    def lookup(
        self,
        name: str,
        environment: Environment | None = None,
        auth_tokens: Sequence[AuthToken] | None = None,
    ) -> str | None:
        """Value for a placeholder name, or None if nothing provides it."""
        for token in auth_tokens or ():
            if token.name == name:
                return token.value
        return self.get_variable_value(name, environment)

    @staticmethod
    def get_variable_value(key: str, environment: Environment | None) -> str | None:
        """Value of the first enabled environment variable named `key`."""
        if environment is None:
            return None
        variable = environment.find_variable(key)
        return variable.value if variable else None

    def has_variables(self, text: str | None) -> bool:
        """Check if a string contains any {{variable}} patterns."""
        if not text or not isinstance(text, str):
            return False
        return bool(self.VARIABLE_PATTERN.search(text))

    def extract_variables(self, text: str | None) -> list[str]:
        """Distinct variable names of a template, in order of first appearance."""
        if not text or not isinstance(text, str):
            return []
        names = (match.group(1).strip() for match in self.VARIABLE_PATTERN.finditer(text))
        return list(dict.fromkeys(names))
