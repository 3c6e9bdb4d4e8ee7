import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

import yaml
from pydantic import BaseModel, Field

from webqa_flows.errors import ConfigurationError
from webqa_flows.utils.validation import is_blank, is_http_url

ENV_CLIENT_ID = "CLIENT_ID"
ENV_CLIENT_SECRET = "CLIENT_SECRET"
ENV_API_AUTH_URL = "API_AUTH_URL"
ENV_BUY_ORDER_ENDPOINT = "BUY_ORDER_ENDPOINT"

DEFAULT_BROWSER_CONFIG = {
    "viewport": {"width": 1280, "height": 720},
    "headless": True,
    "language": "en-US",
}


class RetryPolicy(BaseModel):
    """Bounded polling used while waiting for eventually-consistent UI state."""

    max_attempts: int = Field(default=3, ge=1)
    delay_ms: int = Field(default=0, ge=0)


class UiSettings(BaseModel):
    base_url: Optional[str] = None
    custom_wait_ms: int = Field(default=10000, gt=0)
    row_count_retry: RetryPolicy = Field(default_factory=RetryPolicy)
    delete_action_position: int = Field(default=0, ge=0)
    browser_config: Dict[str, Any] = Field(default_factory=lambda: dict(DEFAULT_BROWSER_CONFIG))
    cookies: Optional[Any] = None

    @classmethod
    def from_yaml_config(cls, config: Optional[Mapping[str, Any]]) -> "UiSettings":
        """Build from the ``ui`` and ``browser_config`` sections of a loaded YAML file."""
        config = config or {}
        ui = dict(config.get("ui") or {})
        browser_config = {**DEFAULT_BROWSER_CONFIG, **(config.get("browser_config") or {})}
        return cls(browser_config=browser_config, **ui)


@dataclass(frozen=True)
class Credentials:
    client_id: Optional[str]
    client_secret: Optional[str] = field(repr=False)
    token_endpoint: Optional[str]

    def __post_init__(self):
        # values sourced from .env lines may carry padding
        for name in ("client_id", "client_secret", "token_endpoint"):
            value = getattr(self, name)
            if isinstance(value, str):
                object.__setattr__(self, name, value.strip())

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Credentials":
        environ = os.environ if environ is None else environ
        credentials = cls(
            client_id=environ.get(ENV_CLIENT_ID),
            client_secret=environ.get(ENV_CLIENT_SECRET),
            token_endpoint=environ.get(ENV_API_AUTH_URL),
        )
        credentials.validate()
        return credentials

    def missing_fields(self) -> List[str]:
        missing = []
        if is_blank(self.client_id):
            missing.append(ENV_CLIENT_ID)
        if is_blank(self.client_secret):
            missing.append(ENV_CLIENT_SECRET)
        if is_blank(self.token_endpoint):
            missing.append(ENV_API_AUTH_URL)
        return missing

    def validate(self) -> "Credentials":
        missing = self.missing_fields()
        if missing:
            error_msg = (
                f"{', '.join(missing)} environment variable(s) not set. "
                "Please set them before running the tests."
            )
            logging.error(error_msg)
            raise ConfigurationError(error_msg)
        if not is_http_url(self.token_endpoint):
            error_msg = f"{ENV_API_AUTH_URL} is not a valid http(s) URL: '{self.token_endpoint}'"
            logging.error(error_msg)
            raise ConfigurationError(error_msg)
        return self


@dataclass(frozen=True)
class ApiSettings:
    """REST-side configuration, read once at process entry and passed to each component."""

    client_id: Optional[str] = None
    client_secret: Optional[str] = field(default=None, repr=False)
    api_auth_url: Optional[str] = None
    buy_order_endpoint: Optional[str] = None
    request_timeout: float = 30.0

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ApiSettings":
        environ = os.environ if environ is None else environ
        return cls(
            client_id=environ.get(ENV_CLIENT_ID),
            client_secret=environ.get(ENV_CLIENT_SECRET),
            api_auth_url=environ.get(ENV_API_AUTH_URL),
            buy_order_endpoint=environ.get(ENV_BUY_ORDER_ENDPOINT),
        )

    @property
    def credentials(self) -> Credentials:
        return Credentials(
            client_id=self.client_id,
            client_secret=self.client_secret,
            token_endpoint=self.api_auth_url,
        ).validate()


def find_config_file(args_config=None, search_dirs=None):
    """Locate the YAML config: an explicit path wins, then ``config/config.yaml`` and
    ``config.yaml`` under each search directory."""
    if args_config:
        if os.path.isfile(args_config):
            logging.info(f"Using specified config file: {args_config}")
            return args_config
        raise ConfigurationError(f"Specified config file not found: {args_config}")

    search_dirs = search_dirs or [os.getcwd()]
    default_paths = []
    for base in search_dirs:
        default_paths.append(os.path.join(base, "config", "config.yaml"))
        default_paths.append(os.path.join(base, "config.yaml"))

    for path in default_paths:
        if os.path.isfile(path):
            logging.info(f"Auto-discovered config file: {path}")
            return path

    raise ConfigurationError(f"Config file not found, checked: {', '.join(default_paths)}")


def load_yaml(path) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Failed to read YAML config {path}: {e}") from e
