"""Built-in readable resources: process information and effective configuration."""

import platform
import sys
import time
from typing import Any, Dict

from .config import Settings
from .dispatcher import ResourceDefinition, ResourceRegistry

_STARTED = time.monotonic()


def system_info() -> Dict[str, Any]:
    return {
        "platform": sys.platform,
        "system": platform.system(),
        "pythonVersion": platform.python_version(),
        "uptime": round(time.monotonic() - _STARTED, 3),
    }


def build_resource_registry(settings: Settings) -> ResourceRegistry:
    def app_config() -> Dict[str, Any]:
        # never expose the API key
        return {
            "env": settings.environment,
            "port": settings.port,
            "baseUrl": settings.base_url,
            "cacheTtlSeconds": settings.cache_ttl_seconds,
            "apiKeyConfigured": bool(settings.api_key),
        }

    return ResourceRegistry([
        ResourceDefinition(
            uri="system://info",
            slug="system-info",
            name="System Information",
            description="Basic system information",
            producer=system_info,
        ),
        ResourceDefinition(
            uri="config://app",
            slug="app-config",
            name="Application Configuration",
            description="Current application configuration",
            producer=app_config,
        ),
    ])
