# -*- coding: utf-8 -*-
"""
Plain HTTP façade over the same registries the MCP transport uses.

  GET  /health            liveness
  GET  /mcp-info          tool and resource catalogue
  POST /tools/{name}      JSON body = tool arguments
  GET  /resources/{name}  resource content by short name (e.g. system-info)
"""

import json
import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from . import __version__
from .dispatcher import ResourceRegistry, ToolRegistry, ToolResponse
from .errors import ErrorKind, ResourceNotFoundError, UpstreamError

logger = logging.getLogger("generic_mcp.http")

SERVICE_NAME = "generic-mcp-server"

_STATUS_BY_KIND = {
    ErrorKind.METHOD_NOT_FOUND: 404,
    ErrorKind.RESOURCE_NOT_FOUND: 404,
    ErrorKind.INVALID_ARGUMENTS: 400,
    ErrorKind.EXECUTION_ERROR: 500,
}


def status_for(response: ToolResponse) -> int:
    if response.ok:
        return 200
    if isinstance(getattr(response.error, "cause", None), UpstreamError):
        return 502
    return _STATUS_BY_KIND[response.error.kind]


def build_http_app(tools: ToolRegistry, resources: ResourceRegistry) -> FastAPI:
    app = FastAPI(title=f"{SERVICE_NAME} HTTP", version=__version__)

    @app.get("/health")
    def health():
        return {
            "status": "ok",
            "service": SERVICE_NAME,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @app.get("/mcp-info")
    def mcp_info():
        return {
            "name": SERVICE_NAME,
            "version": __version__,
            "description": "Generic MCP server exposing example tools and resources over HTTP",
            "tools": tools.list_tools(),
            "resources": resources.list_resources(),
        }

    @app.post("/tools/{name}")
    async def call_tool(name: str, request: Request):
        raw = await request.body()
        try:
            arguments = json.loads(raw) if raw.strip() else {}
        except ValueError as e:
            logger.warning(f"/tools/{name} malformed JSON body: {e}")
            return JSONResponse(status_code=400, content={"error": "Request body must be valid JSON"})

        response = await tools.dispatch(name, arguments)
        return JSONResponse(status_code=status_for(response), content=response.to_dict())

    @app.get("/resources/{name}")
    def read_resource(name: str):
        try:
            return resources.read_by_slug(name)
        except ResourceNotFoundError as e:
            return JSONResponse(status_code=404, content={"error": e.message})

    return app
