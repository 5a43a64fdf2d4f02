import json
from dataclasses import dataclass, field
from typing import Any


@dataclass
class Request:
    method: str
    path: str
    headers: dict[str, str]
    query_params: dict[str, list]
    body: bytes
    version: str
    path_params: dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        try:
            self._json = json.loads(self.body) if self.body else None
        except (json.JSONDecodeError, UnicodeDecodeError):
            self._json = None

    @property
    def json(self) -> Any:
        """Decoded JSON body, or None if the body is empty or not JSON."""
        return self._json

    def param(self, name: str, default: Any = None) -> Any:
        """Look up a value from the path, then the query string."""
        if not name:
            raise ValueError("Parameter name cannot be empty")

        if name in self.path_params:
            return self.path_params[name]

        if name in self.query_params and self.query_params[name]:
            return self.query_params[name][0]

        return default
