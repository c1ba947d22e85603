"""Transport configuration."""
import logging
import os
import ssl as ssl_module
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from fastapi import APIRouter, FastAPI
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator

from .utils.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_PATH = "/ht-jsonrpc"
ENV_PREFIX = "HT_JSONRPC_"

_TRUTHY = {"1", "true", "yes", "on"}


class SSLOptions(BaseModel):
    """TLS options.

    The server uses ``certfile``/``keyfile`` (and ``password``) for its owned
    HTTPS listener. The client uses ``ca_certs`` and ``verify`` to check the
    server certificate.
    """

    model_config = ConfigDict(frozen=True)

    certfile: Optional[str] = None
    keyfile: Optional[str] = None
    password: Optional[str] = None
    ca_certs: Optional[str] = None
    verify: bool = True

    def client_context(self) -> ssl_module.SSLContext:
        """SSL context for outbound requests."""
        context = ssl_module.create_default_context(cafile=self.ca_certs)
        if not self.verify:
            context.check_hostname = False
            context.verify_mode = ssl_module.CERT_NONE
        return context


class TransportConfig(BaseModel):
    """Validated, immutable configuration shared by Server and Client.

    Either ``app`` (a caller-owned router) or both ``host`` and ``port`` must
    be given.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    host: Optional[str] = None
    port: Optional[int] = None
    path: str = DEFAULT_PATH
    ssl: Union[bool, SSLOptions] = False
    app: Optional[Union[FastAPI, APIRouter]] = None
    cors: bool = False

    @field_validator("path", mode="before")
    @classmethod
    def _default_path(cls, value: Any) -> Any:
        return DEFAULT_PATH if value is None else value

    @field_validator("ssl", mode="before")
    @classmethod
    def _default_ssl(cls, value: Any) -> Any:
        return False if value is None else value

    @model_validator(mode="after")
    def _require_app_or_address(self) -> "TransportConfig":
        if self.app is None and (not self.host or not self.port):
            raise ConfigurationError(
                "You must pass a configuration with either `app` or both `host` and `port`."
            )
        return self

    @property
    def shared_app(self) -> bool:
        """True when routes are mounted on a caller-owned router."""
        return self.app is not None

    @property
    def scheme(self) -> str:
        return "https" if self.ssl else "http"

    @classmethod
    def build(cls, config: Any = None, **fields: Any) -> "TransportConfig":
        """Build a config from an instance, a mapping, or keyword fields.

        Raises:
            ConfigurationError: If nothing usable is supplied or validation fails
        """
        if isinstance(config, TransportConfig):
            if not fields:
                return config
            config = {name: getattr(config, name) for name in cls.model_fields}

        if config is None and not fields:
            raise ConfigurationError("You must pass a configuration object to the HTTP Transport.")

        if config is not None and not isinstance(config, Mapping):
            raise ConfigurationError(
                f"Configuration must be a mapping or TransportConfig, got {type(config).__name__}"
            )

        values: Dict[str, Any] = dict(config or {})
        values.update(fields)
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(str(e)) from e

    @classmethod
    def from_env(cls, prefix: str = ENV_PREFIX, **overrides: Any) -> "TransportConfig":
        """Build a config from ``<prefix>HOST``, ``<prefix>PORT``... variables."""
        values: Dict[str, Any] = {}

        for field in ("host", "port", "path"):
            value = os.getenv(f"{prefix}{field.upper()}")
            if value:
                values[field] = value

        cors = os.getenv(f"{prefix}CORS")
        if cors is not None:
            values["cors"] = cors.strip().lower() in _TRUTHY

        ssl_values: Dict[str, Any] = {}
        for option in ("certfile", "keyfile", "password", "ca_certs"):
            value = os.getenv(f"{prefix}SSL_{option.upper()}")
            if value:
                ssl_values[option] = value
        verify = os.getenv(f"{prefix}SSL_VERIFY")
        if verify is not None:
            ssl_values["verify"] = verify.strip().lower() in _TRUTHY

        if ssl_values:
            values["ssl"] = SSLOptions(**ssl_values)
        elif os.getenv(f"{prefix}SSL", "").strip().lower() in _TRUTHY:
            values["ssl"] = True

        values.update(overrides)
        logger.debug(f"Loaded transport config from environment: {sorted(values)}")
        return cls.build(values)


def load_config(config_path: Union[str, Path], **overrides: Any) -> TransportConfig:
    """Load a transport configuration from a YAML file.

    Args:
        config_path: Path to a YAML mapping with ``host``, ``port``, ``path``,
            ``ssl`` (bool or mapping of SSL options) and ``cors`` keys
        overrides: Fields that take precedence over the file, e.g. ``app``

    Returns:
        The validated configuration
    """
    with open(config_path, "r") as f:
        values = yaml.safe_load(f) or {}

    if not isinstance(values, dict):
        raise ConfigurationError(f"Configuration file {config_path} must contain a mapping")

    logger.info(f"Loaded transport config from {config_path}")
    return TransportConfig.build(values, **overrides)
