"""Store configuration.

``StoreConfig`` describes which backend to use and how to reach it.  It can
be built from a mapping, a YAML document or environment variables::

    # sessions.yaml
    session_store:
      backend: redis
      url: redis://cache.internal:6379/2

    config = StoreConfig.from_yaml("sessions.yaml")

Classes
-------
- StoreConfig  — validated backend settings
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal, Mapping
from urllib.parse import urlsplit

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from gateway_session_store.errors import ConfigurationError

BackendName = Literal["memory", "memcached", "redis"]

_SECTION = "session_store"
_DEFAULT_PORTS: dict[str, int] = {"memcached": 11211, "redis": 6379}
_URL_SCHEMES: dict[str, frozenset[str]] = {
    "memcached": frozenset({"memcached"}),
    "redis": frozenset({"redis", "rediss", "unix"}),
}


class StoreConfig(BaseModel):
    """Settings for a session store.

    Parameters
    ----------
    backend:
        One of ``"memory"``, ``"memcached"`` or ``"redis"``.
    url:
        Connection URL.  Overrides ``host``/``port``/``db`` when supplied
        (e.g. ``"redis://localhost:6379/0"`` or
        ``"memcached://localhost:11211"``).
    host:
        Server hostname.  Defaults to ``"localhost"``.
    port:
        Server port.  Defaults to the backend's standard port.
    db:
        Redis logical database index.
    pool_size:
        Maximum number of pooled memcached connections.
    connect_timeout:
        Redis socket connect timeout in seconds.
    """

    backend: BackendName = "memory"
    url: str | None = None
    host: str = "localhost"
    port: int | None = Field(default=None, gt=0, lt=65536)
    db: int = Field(default=0, ge=0)
    pool_size: int = Field(default=2, ge=1)
    connect_timeout: float | None = Field(default=None, gt=0)

    model_config = {"frozen": True, "extra": "forbid"}

    @model_validator(mode="after")
    def _check_url(self) -> StoreConfig:
        if self.url is None or self.backend == "memory":
            return self
        scheme = urlsplit(self.url).scheme
        allowed = _URL_SCHEMES[self.backend]
        if scheme not in allowed:
            raise ValueError(
                f"url scheme {scheme!r} does not match backend {self.backend!r} "
                f"(expected one of: {', '.join(sorted(allowed))})"
            )
        return self

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def effective_port(self) -> int | None:
        """Return ``port`` or the backend's default port."""
        if self.port is not None:
            return self.port
        return _DEFAULT_PORTS.get(self.backend)

    def address(self) -> tuple[str, int]:
        """Return ``(host, port)``, taken from ``url`` when it is set."""
        if self.url is not None:
            parts = urlsplit(self.url)
            return parts.hostname or self.host, parts.port or self.effective_port or 0
        return self.host, self.effective_port or 0

    def redis_url(self) -> str:
        """Return the Redis connection URL for this configuration."""
        if self.url is not None:
            return self.url
        host, port = self.address()
        return f"redis://{host}:{port}/{self.db}"

    # ------------------------------------------------------------------
    # Loaders
    # ------------------------------------------------------------------

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> StoreConfig:
        """Validate ``data`` into a ``StoreConfig``.

        A mapping with a single ``session_store`` key is unwrapped first.

        Raises
        ------
        ConfigurationError
            If the settings are invalid.
        """
        if set(data) == {_SECTION}:
            data = data[_SECTION] or {}
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid session store configuration: {exc}") from exc

    @classmethod
    def from_yaml(cls, path: str | Path) -> StoreConfig:
        """Load settings from a YAML file.

        Raises
        ------
        ConfigurationError
            If the file is not a YAML mapping or the settings are invalid.
        """
        text = Path(path).read_text(encoding="utf-8")
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Could not parse {path}: {exc}") from exc
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"{path} must contain a mapping, got {type(data).__name__}")
        return cls.from_mapping(data)

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        prefix: str = "SESSION_STORE_",
    ) -> StoreConfig:
        """Load settings from ``<prefix><FIELD>`` environment variables.

        ``environ`` defaults to ``os.environ``.  Unknown variables carrying
        the prefix are rejected.
        """
        source = os.environ if environ is None else environ
        data = {
            name[len(prefix):].lower(): value
            for name, value in source.items()
            if name.startswith(prefix)
        }
        return cls.from_mapping(data)


__all__ = ["BackendName", "StoreConfig"]
