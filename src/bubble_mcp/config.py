"""
Runtime configuration for the Bubble MCP server.

Settings are read once at startup from the process environment, with an
optional .env file filling in anything the environment does not define.
"""

import enum
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv


DEFAULT_TIMEOUT = 30.0
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000
VALID_TRANSPORTS = {"stdio", "http"}


class ServerMode(enum.Enum):
    """Whether mutating tools are allowed to reach the Bubble API."""

    READ_ONLY = "read-only"
    READ_WRITE = "read-write"

    @classmethod
    def from_value(cls, value: Optional[str]) -> "ServerMode":
        # Anything other than an explicit "read-write" stays read-only
        if value and value.strip().lower() == cls.READ_WRITE.value:
            return cls.READ_WRITE
        return cls.READ_ONLY

    @property
    def allows_writes(self) -> bool:
        return self is ServerMode.READ_WRITE


@dataclass(frozen=True)
class Settings:
    base_url: str
    api_token: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT
    mode: ServerMode = ServerMode.READ_ONLY
    transport: str = "stdio"
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT


def _parse_number(env: Mapping[str, str], name: str, default, cast):
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


def load_settings(env: Optional[Mapping[str, str]] = None, dotenv_path: Optional[str] = None) -> Settings:
    """Build Settings from environment variables.

    Args:
        env: Mapping to read from. Defaults to os.environ after loading .env.
        dotenv_path: Explicit .env location. Defaults to searching upward
                     from the working directory.

    Returns:
        Settings instance

    Raises:
        ValueError: If BUBBLE_BASE_URL is missing or a numeric setting is invalid
    """
    if env is None:
        load_dotenv(dotenv_path=dotenv_path, override=False)
        env = os.environ

    base_url = (env.get("BUBBLE_BASE_URL") or "").strip()
    if not base_url:
        raise ValueError(
            "BUBBLE_BASE_URL environment variable is not set. "
            "Use your app's API root, e.g. https://yourapp.bubbleapps.io"
        )

    transport = (env.get("MCP_TRANSPORT") or "stdio").strip().lower()
    if transport not in VALID_TRANSPORTS:
        raise ValueError(
            f"Invalid MCP_TRANSPORT: {transport!r}. "
            f"Valid values: {', '.join(sorted(VALID_TRANSPORTS))}"
        )

    return Settings(
        base_url=base_url,
        api_token=(env.get("BUBBLE_API_TOKEN") or "").strip() or None,
        timeout=_parse_number(env, "BUBBLE_TIMEOUT", DEFAULT_TIMEOUT, float),
        mode=ServerMode.from_value(env.get("MCP_MODE")),
        transport=transport,
        host=(env.get("MCP_HOST") or DEFAULT_HOST).strip(),
        port=_parse_number(env, "MCP_PORT", DEFAULT_PORT, int),
    )
