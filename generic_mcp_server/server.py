# -*- coding: utf-8 -*-
"""
Generic MCP server that can run in three modes:
  1) MCP over stdio        →  `generic-mcp-server --mode stdio`
  2) HTTP façade (FastAPI) →  `generic-mcp-server --mode http --host 0.0.0.0 --port 8000`
  3) MCP over HTTP         →  `generic-mcp-server --mode mcp-http --port 8000`   (endpoint /mcp)

Any setting can be overridden with `--env KEY=VALUE` (repeatable); see
generic_mcp_server.config for the variables.
"""

import argparse
import logging
import os
import signal
import sys
import traceback
from dataclasses import dataclass
from typing import List, Optional

import httpx

from .api_client import ApiClient
from .config import ConfigError, Settings, env_pair, load_settings
from .dispatcher import ResourceRegistry, ToolRegistry
from .resource_service import ResourceService
from .resources import build_resource_registry
from .tools import build_tool_registry

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
logger = logging.getLogger("generic_mcp")


# -----------------------------
# Logging
# -----------------------------
def configure_logging(settings: Settings) -> None:
    # stderr keeps stdout free for stdio transport frames
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if settings.log_dir:
        os.makedirs(settings.log_dir, exist_ok=True)
        handlers.append(logging.FileHandler(os.path.join(settings.log_dir, "server.log"), encoding="utf-8"))
    logging.basicConfig(level=settings.log_level_number, format=LOG_FORMAT, handlers=handlers, force=True)


# -----------------------------
# Wiring
# -----------------------------
@dataclass
class Application:
    settings: Settings
    api_client: ApiClient
    service: ResourceService
    tools: ToolRegistry
    resources: ResourceRegistry


def build_application(settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> Application:
    if not settings.api_key:
        logger.warning("API_KEY is not set; upstream requests will be sent without authorization")
    api_client = ApiClient.from_settings(settings, transport=transport)
    service = ResourceService(api_client)
    return Application(
        settings=settings,
        api_client=api_client,
        service=service,
        tools=build_tool_registry(service),
        resources=build_resource_registry(settings),
    )


def _install_signal_handlers():
    def _handler(signum, _frame):
        name = signal.Signals(signum).name
        logger.info(f"Received {name}. Shutting down gracefully…")
        for h in logging.getLogger().handlers:
            try:
                h.flush()
            except (OSError, ValueError):
                pass
        sys.exit(0)

    try:
        signal.signal(signal.SIGINT, _handler)
        signal.signal(signal.SIGTERM, _handler)
    except (ValueError, OSError) as e:
        # not the main thread, or a restricted runtime
        logger.debug(f"Signal handlers not installed: {e}")


# -----------------------------
# Entrypoint
# -----------------------------
def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Generic MCP server (stdio, HTTP façade or MCP over HTTP).")
    p.add_argument("--mode", choices=["stdio", "http", "mcp-http"], default="stdio",
                   help="Run as MCP over stdio (default), a plain HTTP API, or MCP over HTTP.")
    p.add_argument("--host", default=None, help="Bind host for the HTTP modes (default: HOST or 127.0.0.1).")
    p.add_argument("--port", type=int, default=None, help="Bind port for the HTTP modes (default: PORT or 8000).")
    p.add_argument("--env", dest="env", type=env_pair, action="append", default=[], metavar="KEY=VALUE",
                   help="Override an environment variable (repeatable).")
    return p.parse_args(argv)


def _run(args: argparse.Namespace, app: Application) -> None:
    settings = app.settings
    host = args.host or settings.host
    port = args.port or settings.port

    if args.mode == "stdio":
        from .mcp_binding import build_mcp_server

        build_mcp_server(app.tools, app.resources).run(transport="stdio")

    elif args.mode == "mcp-http":
        from .mcp_binding import build_mcp_server

        build_mcp_server(app.tools, app.resources).run(transport="http", host=host, port=port)

    elif args.mode == "http":
        import uvicorn

        from .http_app import build_http_app

        uvicorn.run(build_http_app(app.tools, app.resources), host=host, port=port,
                    log_level=settings.log_level.lower())


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    try:
        settings = load_settings(overrides=dict(args.env))
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(2)

    configure_logging(settings)
    logger.info(f"Starting generic-mcp-server in mode={args.mode}")
    logger.debug(f"Effective LOG_LEVEL={settings.log_level}")
    _install_signal_handlers()

    try:
        _run(args, build_application(settings))
    except Exception as e:
        tb = "".join(traceback.format_exception(type(e), e, e.__traceback__))
        logger.critical(f"Fatal {args.mode} server error:\n{tb}")
        sys.exit(1)


if __name__ == "__main__":
    main()
