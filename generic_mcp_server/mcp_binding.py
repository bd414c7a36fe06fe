# -*- coding: utf-8 -*-
"""
MCP transport binding.

Tools are registered on FastMCP as thin ``Tool`` subclasses that forward the
raw arguments to :meth:`ToolRegistry.dispatch`; validation and error wrapping
stay in the dispatcher, and a failed envelope is re-raised as ``ToolError`` so
the client receives an ``isError`` result instead of a protocol fault.
"""

import logging
from typing import Any, Callable, Dict

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.tools import Tool
from fastmcp.tools.tool import ToolResult
from pydantic import PrivateAttr

from .dispatcher import ResourceDefinition, ResourceRegistry, ToolDefinition, ToolRegistry

logger = logging.getLogger("generic_mcp.mcp")

SERVER_NAME = "generic-mcp-server"


class DispatchedTool(Tool):
    _registry: ToolRegistry = PrivateAttr()

    @classmethod
    def bind(cls, registry: ToolRegistry, definition: ToolDefinition) -> "DispatchedTool":
        tool = cls(
            name=definition.name,
            description=definition.description,
            parameters=definition.input_schema,
        )
        tool._registry = registry
        return tool

    async def run(self, arguments: Dict[str, Any]) -> ToolResult:
        response = await self._registry.dispatch(self.name, arguments)
        if not response.ok:
            raise ToolError(response.text)
        return ToolResult(content=response.text)


def _reader(definition: ResourceDefinition) -> Callable[[], str]:
    def read() -> str:
        return definition.read_text()

    read.__name__ = definition.slug.replace("-", "_")
    return read


def build_mcp_server(tools: ToolRegistry, resources: ResourceRegistry, name: str = SERVER_NAME) -> FastMCP:
    mcp = FastMCP(name=name)
    for definition in tools:
        mcp.add_tool(DispatchedTool.bind(tools, definition))
    for resource in resources:
        mcp.resource(
            resource.uri,
            name=resource.name,
            description=resource.description,
            mime_type=resource.mime_type,
        )(_reader(resource))
    logger.debug(f"MCP server {name!r} exposes {len(tools)} tools")
    return mcp
