"""Lexical extraction of variable assignments from Postman-style test scripts."""

import json
import logging
import re
from typing import Any, Iterable

from jsonpath_ng import parse as jsonpath_parse
from jsonpath_ng.exceptions import JsonPathLexerError, JsonPathParserError

from reqvars.schemas.extraction import TokenMapping

logger = logging.getLogger(__name__)


class _NotFound:
    """Result of a path lookup that found nothing; JSON null is a real value."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NOT_FOUND"


NOT_FOUND = _NotFound()

# pm.collectionVariables.set("name", value)
# pm.environment.set / pm.globals.set / pm.variables.set
# postman.setEnvironmentVariable("name", value) / postman.setGlobalVariable
SET_VARIABLE_PATTERN = re.compile(
    r'(?:pm\.(?:collectionVariables|environment|globals|variables)\.set'
    r'|postman\.set(?:Environment|Global)Variable)'
    r'\s*\(\s*["\']([^"\']+)["\']\s*,\s*([^)]+)\s*\)'
)

JSON_DATA_PATTERN = re.compile(r'jsonData\.([a-zA-Z0-9_.]+)')


def parse_token_mappings(script: str | None) -> list[TokenMapping]:
    """
    Find variable assignments in a test script.

    Only the call shape is recognized; the script is never evaluated. For
    `pm.environment.set("user_id", jsonData.user.id);` the mapping is
    user_id <- "user.id". When the value is not a jsonData reference, the raw
    expression is kept as the path.

    Returns:
        Mappings in script order, empty for empty or unmatched scripts
    """
    if not script:
        return []

    mappings = []
    for match in SET_VARIABLE_PATTERN.finditer(script):
        variable_name = match.group(1)
        expression = match.group(2).strip()

        json_data_match = JSON_DATA_PATTERN.search(expression)
        json_path = json_data_match.group(1) if json_data_match else expression
        json_path = json_path.removesuffix(";").strip()

        mappings.append(TokenMapping(variable_name=variable_name, json_path=json_path))

    logger.debug("Parsed %d token mapping(s) from script", len(mappings))
    return mappings


def get_value_by_path(obj: Any, path: str | None) -> Any:
    """
    Get a value from parsed JSON using dot notation.

    Examples:
        - "token" -> obj["token"]
        - "data.token" -> obj["data"]["token"]
        - "items.0.id" -> obj["items"][0]["id"]

    Returns:
        The value found, or NOT_FOUND
    """
    if not path or not obj:
        return NOT_FOUND

    if "." not in path:
        return _get_child(obj, path)

    current = obj
    for part in path.split("."):
        if not isinstance(current, (dict, list)):
            return NOT_FOUND
        current = _get_child(current, part)
        if current is NOT_FOUND:
            return NOT_FOUND

    return current


def _get_child(container: Any, key: str) -> Any:
    if isinstance(container, dict):
        return container.get(key, NOT_FOUND)
    if isinstance(container, list):
        # Plain ASCII digits only, int() would also take "1_0" or " 1"
        if not (key.isascii() and key.isdigit()):
            return NOT_FOUND
        index = int(key)
        if index < len(container):
            return container[index]
    return NOT_FOUND


def apply_token_mappings(
    mappings: Iterable[TokenMapping],
    body: Any,
) -> dict[str, Any]:
    """
    Evaluate mappings against a response body.

    Args:
        mappings: Mappings from parse_token_mappings
        body: Response body, raw JSON text or already parsed

    Returns:
        {variable_name: value} for every mapping whose path was found.
        Paths starting with "$" are evaluated as JSONPath (first match).
    """
    if isinstance(body, (str, bytes)):
        try:
            body = json.loads(body)
        except ValueError:
            # JSONDecodeError, or UnicodeDecodeError for undecodable bytes
            logger.debug("Response body is not JSON, no mapping applies")
            return {}

    values = {}
    for mapping in mappings:
        if mapping.json_path.startswith("$"):
            value = _find_jsonpath(body, mapping.json_path)
        else:
            value = get_value_by_path(body, mapping.json_path)

        if value is NOT_FOUND:
            logger.debug("No value at %r for variable %s", mapping.json_path, mapping.variable_name)
            continue
        values[mapping.variable_name] = value

    return values


def _find_jsonpath(body: Any, path: str) -> Any:
    try:
        matches = [match.value for match in jsonpath_parse(path).find(body)]
    except (JsonPathLexerError, JsonPathParserError):
        logger.debug("Invalid JSONPath %r", path)
        return NOT_FOUND
    return matches[0] if matches else NOT_FOUND
