# -*- coding: utf-8 -*-
"""
Start-up configuration.

Settings come from the process environment (after loading a ``.env`` file with
python-dotenv) and are read exactly once. ``--env KEY=VALUE`` pairs given on
the command line win over the environment.

Env:
  API_KEY            bearer token for the upstream API (optional, warned when unset)
  API_BASE_URL       upstream base URL (SERVICE_URL is accepted as a fallback)
  CACHE_TTL          GET cache lifetime in seconds (default 300)
  CACHE_MAX_ENTRIES  optional LRU capacity for the GET cache
  RATE_LIMIT         requests per minute; declared for templates, not enforced
  SERVICE_TIMEOUT    upstream HTTP timeout in seconds (default 30)
  HOST / PORT        bind address for the HTTP modes
  MCP_LOG_LEVEL      DEBUG|INFO|WARNING|ERROR (LOG_LEVEL accepted as a fallback)
  LOG_DIR            when set, logs are also written to LOG_DIR/server.log
  APP_ENV            free-form environment label (default "development")
"""

import logging
import os
from typing import Mapping, Optional, Tuple

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

DEFAULT_BASE_URL = "https://api.example.com"
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(Exception):
    """Raised when the environment holds a value that cannot be used."""


class Settings(BaseModel):
    api_key: str = ""
    base_url: str = DEFAULT_BASE_URL
    cache_ttl_seconds: float = Field(default=300.0, ge=0)
    cache_max_entries: Optional[int] = Field(default=None, ge=1)
    rate_limit: int = Field(default=60, ge=1)
    service_timeout: float = Field(default=30.0, gt=0)
    host: str = "127.0.0.1"
    port: int = Field(default=8000, ge=1, le=65535)
    log_level: str = "INFO"
    log_dir: Optional[str] = None
    environment: str = "development"

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"must be one of {', '.join(_LOG_LEVELS)}")
        return level

    @field_validator("base_url")
    @classmethod
    def _absolute_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError("must be an absolute http(s) URL")
        return value

    @property
    def log_level_number(self) -> int:
        return getattr(logging, self.log_level, logging.INFO)


def env_pair(text: str) -> Tuple[str, str]:
    """Parse one ``KEY=VALUE`` command-line pair. The value may contain '='."""
    key, sep, value = text.partition("=")
    key = key.strip()
    if not sep or not key:
        raise ValueError(f"expected KEY=VALUE, got {text!r}")
    return key, value


def _first(env: Mapping[str, str], *names: str) -> Optional[str]:
    for name in names:
        value = env.get(name)
        if value not in (None, ""):
            return value
    return None


def load_settings(
    overrides: Optional[Mapping[str, str]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Build :class:`Settings` from the environment plus CLI overrides.

    ``environ`` replaces ``os.environ`` (and skips ``.env`` loading); tests use
    it to stay independent from the machine they run on.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ
    env = dict(environ)
    env.update(overrides or {})

    raw = {
        "api_key": env.get("API_KEY", ""),
        "base_url": _first(env, "API_BASE_URL", "SERVICE_URL"),
        "cache_ttl_seconds": _first(env, "CACHE_TTL"),
        "cache_max_entries": _first(env, "CACHE_MAX_ENTRIES"),
        "rate_limit": _first(env, "RATE_LIMIT"),
        "service_timeout": _first(env, "SERVICE_TIMEOUT"),
        "host": _first(env, "HOST"),
        "port": _first(env, "PORT"),
        "log_level": _first(env, "MCP_LOG_LEVEL", "LOG_LEVEL"),
        "log_dir": _first(env, "LOG_DIR"),
        "environment": _first(env, "APP_ENV"),
    }
    try:
        return Settings(**{k: v for k, v in raw.items() if v is not None})
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigError(f"Invalid configuration: {problems}") from e
