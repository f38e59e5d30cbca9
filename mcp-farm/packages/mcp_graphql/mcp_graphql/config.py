# mcp-farm/packages/mcp_graphql/mcp_graphql/config.py
from __future__ import annotations
import os
from dataclasses import dataclass, field
from typing import Any, Callable, List

from dotenv import load_dotenv, find_dotenv

from .errors import ConfigError

# Load .env from CWD (or nearest parent)
load_dotenv(find_dotenv(usecwd=True))

SERVICE_NAME = "graphql-mcp"


def _env(name: str, default: str = "") -> str:
    return os.getenv(name, default).strip()


def _env_number(name: str, default: str, cast: Callable[[str], Any]) -> Any:
    raw = _env(name, default)
    try:
        return cast(raw)
    except ValueError as e:
        raise ConfigError(f"Invalid value for {name}: {raw!r}") from e


def _environment() -> str:
    return _env("APP_ENV") or _env("NODE_ENV") or "development"


@dataclass
class GraphQLConfig:
    client_id: str = field(default_factory=lambda: _env("CLIENT_ID"))
    client_secret: str = field(default_factory=lambda: _env("CLIENT_SECRET"))
    auth_url: str = field(default_factory=lambda: _env("AUTH_URL"))
    graphql_url: str = field(default_factory=lambda: _env("GRAPHQL_URL"))
    log_level: str = field(default_factory=lambda: _env("LOG_LEVEL", "info"))
    environment: str = field(default_factory=_environment)
    log_dir: str = field(default_factory=lambda: _env("LOG_DIR", "logs"))
    request_timeout: float = field(default_factory=lambda: _env_number("REQUEST_TIMEOUT_SECONDS", "30", float))
    token_margin: int = field(default_factory=lambda: _env_number("TOKEN_EXPIRY_MARGIN_SECONDS", "60", int))

    # env var name -> attribute
    REQUIRED = {
        "CLIENT_ID": "client_id",
        "CLIENT_SECRET": "client_secret",
        "AUTH_URL": "auth_url",
        "GRAPHQL_URL": "graphql_url",
    }

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    def missing(self) -> List[str]:
        return [env for env, attr in self.REQUIRED.items() if not getattr(self, attr)]

    def validate(self) -> "GraphQLConfig":
        missing = self.missing()
        if missing:
            raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")
        return self
