"""Captured HTTP response handed to the resolution engine after a send."""

import json
from typing import Any
from dataclasses import dataclass, field


@dataclass
class HTTPResponse:
    """HTTP response as received by the surrounding client."""
    status_code: int
    body: str = ""
    headers: dict[str, str] = field(default_factory=dict)

    def json(self) -> Any:
        """Parse response body as JSON."""
        return json.loads(self.body)

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300
