import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional
from urllib.parse import urlparse

import yaml

DEFAULT_BASE_URL = "https://quote-api.jup.ag/v6"
DEFAULT_USER_AGENT = "jupiter-swap-api/0.1"

BASE_URL_ENV = "API_BASE_URL"
API_KEY_ENV = "API_KEY"


@dataclass(frozen=True)
class ClientConfig:
    base_url: str = DEFAULT_BASE_URL
    api_key: Optional[str] = None
    # Passed straight to the transport; None waits indefinitely.
    timeout: Optional[float] = None
    user_agent: str = DEFAULT_USER_AGENT

    def __post_init__(self) -> None:
        if not self.base_url or not self.base_url.strip():
            raise ValueError("base_url must not be empty")
        parsed = urlparse(self.base_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"base_url is not an absolute http(s) URL: {self.base_url!r}")
        if self.api_key is not None and not self.api_key:
            raise ValueError("api_key must be None or a non-empty string")
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be positive")

    @property
    def authenticated(self) -> bool:
        return self.api_key is not None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, timeout: Optional[float] = None) -> "ClientConfig":
        env = os.environ if environ is None else environ
        base_url = env.get(BASE_URL_ENV) or DEFAULT_BASE_URL
        api_key = env.get(API_KEY_ENV) or None
        return cls(base_url=base_url, api_key=api_key, timeout=timeout)


def load_config(config_path: Path, environ: Optional[Mapping[str, str]] = None) -> ClientConfig:
    """Build a ClientConfig from a YAML file, falling back to the environment."""
    with config_path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{config_path} must contain a YAML mapping")

    defaults = ClientConfig.from_env(environ)
    timeout = data.get("timeout", defaults.timeout)
    return ClientConfig(
        base_url=data.get("base_url") or defaults.base_url,
        api_key=data.get("api_key") or defaults.api_key,
        timeout=float(timeout) if timeout is not None else None,
        user_agent=data.get("user_agent") or defaults.user_agent,
    )
