"""Client configuration.

:class:`ClientConfig` carries every setting :class:`~gqlhttp.client.GraphQLClient`
needs to build and drive its own ``httpx.AsyncClient``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from gqlhttp.exceptions import ConfigError


class ClientConfig(BaseModel):
    """Settings for a :class:`~gqlhttp.client.GraphQLClient`.

    Attributes:
        endpoint: GraphQL endpoint URL every request is posted to.
        timeout: Default timeout in seconds for the owned HTTP client.
        close_connection: When *True*, every request asks the server to close
            the connection after the response (``Connection: close``).
        max_connections: Connection pool size of the owned HTTP client.
        max_keepalive_connections: Idle connections kept in the pool.
        headers: Headers sent with every request by the owned HTTP client.
        debug: When *True*, log request and response traces at DEBUG.
    """

    endpoint: str
    timeout: float = Field(default=30.0, gt=0)
    close_connection: bool = False
    max_connections: int = Field(default=20, ge=1)
    max_keepalive_connections: int = Field(default=10, ge=0)
    headers: dict[str, str] = Field(default_factory=dict)
    debug: bool = False

    model_config = {"frozen": True}

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, value: str) -> str:
        endpoint = value.strip()
        if not endpoint.startswith(("http://", "https://")):
            raise ValueError("endpoint must be an http:// or https:// URL")
        return endpoint


def load_config(path: str | Path) -> ClientConfig:
    """Load and validate a :class:`ClientConfig` from a JSON file."""
    config_path = Path(path).expanduser().resolve()
    try:
        raw_payload: Any = json.loads(config_path.read_text(encoding="utf-8"))
        return ClientConfig.model_validate(raw_payload)
    except OSError as exc:
        raise ConfigError(f"failed reading config file: {config_path}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"invalid JSON in config file: {config_path}") from exc
    except ValidationError as exc:
        raise ConfigError(f"invalid config: {exc}") from exc
