# -*- coding: utf-8 -*-
"""
Transport-agnostic tool and resource registries.

Tool invocation runs through four steps:
- Lookup: unknown names fail with ``method_not_found``; no handler runs.
- Validate: raw arguments are parsed into the tool's pydantic model.
- Execute: the handler runs with the validated model.
- Respond: the outcome (value or error) becomes a :class:`ToolResponse`.

``dispatch`` never raises for caller mistakes or handler failures; both the
MCP and the HTTP bindings rely on that and only translate the envelope.
"""

import json
import logging
import time
import traceback
import uuid
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple, Type

from pydantic import BaseModel, ValidationError

from .errors import (
    InvalidArgumentsError,
    McpServerError,
    ResourceNotFoundError,
    ToolExecutionError,
    ToolNotFoundError,
)

logger = logging.getLogger("generic_mcp.dispatch")

ToolHandler = Callable[[Any], Awaitable[Any]]


def _time_call() -> Tuple[float, Callable[[], float]]:
    """Simple wall-clock timer for execution duration."""
    start = time.perf_counter()

    def done() -> float:
        return time.perf_counter() - start

    return start, done


def describe_validation_error(exc: ValidationError) -> str:
    """One line per failed field: ``resourceId: Field required; limit: ...``."""
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "arguments"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


def render_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, indent=2, default=str)


# -----------------------------
# Tools
# -----------------------------
@dataclass(frozen=True)
class ToolDefinition:
    name: str
    description: str
    input_model: Type[BaseModel]
    handler: ToolHandler
    # used in execution error messages: "Failed to <operation>: ..."
    operation: Optional[str] = None

    @property
    def input_schema(self) -> Dict[str, Any]:
        return self.input_model.model_json_schema(by_alias=True)

    @property
    def operation_label(self) -> str:
        return self.operation or self.name.replace("_", " ").replace("-", " ")

    def parse(self, arguments: Any) -> BaseModel:
        try:
            return self.input_model.model_validate({} if arguments is None else arguments)
        except ValidationError as e:
            raise InvalidArgumentsError(describe_validation_error(e)) from e

    def describe(self) -> Dict[str, Any]:
        return {"name": self.name, "description": self.description, "inputSchema": self.input_schema}


@dataclass
class ToolResponse:
    """Uniform envelope for one tool invocation, success or failure."""

    call_id: str
    tool: str
    duration_s: float
    result: Any = None
    error: Optional[McpServerError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def text(self) -> str:
        if self.error is not None:
            return self.error.message
        return render_text(self.result)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "callId": self.call_id,
            "isError": not self.ok,
            "content": [{"type": "text", "text": self.text}],
        }
        if self.error is None:
            body["result"] = self.result
        else:
            body["error"] = {
                "kind": self.error.kind.value,
                "code": self.error.code,
                "message": self.error.message,
            }
        return body


class ToolRegistry:
    def __init__(self, definitions: Optional[List[ToolDefinition]] = None):
        self._tools: Dict[str, ToolDefinition] = {}
        for definition in definitions or []:
            self.register(definition)

    def register(self, definition: ToolDefinition) -> ToolDefinition:
        if definition.name in self._tools:
            raise ValueError(f"Tool already registered: {definition.name}")
        self._tools[definition.name] = definition
        return definition

    def get(self, name: str) -> ToolDefinition:
        try:
            return self._tools[name]
        except KeyError:
            raise ToolNotFoundError(name) from None

    def __iter__(self):
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)

    def list_tools(self) -> List[Dict[str, Any]]:
        return [definition.describe() for definition in self._tools.values()]

    async def dispatch(self, name: str, arguments: Any = None) -> ToolResponse:
        call_id = str(uuid.uuid4())
        logger.debug(f"[{call_id}] {name}() invoked with arguments={arguments!r}")
        _, done = _time_call()

        try:
            definition = self.get(name)
            args = definition.parse(arguments)
            try:
                result = await definition.handler(args)
            except McpServerError:
                raise
            except Exception as e:
                raise ToolExecutionError(definition.operation_label, e) from e

        except (ToolNotFoundError, InvalidArgumentsError) as e:
            duration = done()
            logger.warning(f"[{call_id}] {name}() rejected after {duration:.6f}s: {e.message}")
            return ToolResponse(call_id=call_id, tool=name, duration_s=duration, error=e)

        except McpServerError as e:
            duration = done()
            cause = e.__cause__ or e
            tb = "".join(traceback.format_exception(type(cause), cause, cause.__traceback__))
            logger.error(f"[{call_id}] {name}() failed after {duration:.6f}s:\n{tb}")
            return ToolResponse(call_id=call_id, tool=name, duration_s=duration, error=e)

        duration = done()
        logger.info(f"[{call_id}] {name}() success in {duration:.6f}s")
        return ToolResponse(call_id=call_id, tool=name, duration_s=duration, result=result)


# -----------------------------
# Resources
# -----------------------------
@dataclass(frozen=True)
class ResourceDefinition:
    uri: str
    slug: str
    name: str
    description: str
    producer: Callable[[], Any] = field(repr=False)
    mime_type: str = "application/json"

    def describe(self) -> Dict[str, Any]:
        return {
            "uri": self.uri,
            "name": self.name,
            "description": self.description,
            "mimeType": self.mime_type,
        }

    def read_text(self) -> str:
        return render_text(self.producer())


class ResourceRegistry:
    def __init__(self, definitions: Optional[List[ResourceDefinition]] = None):
        self._by_uri: Dict[str, ResourceDefinition] = {}
        self._by_slug: Dict[str, ResourceDefinition] = {}
        for definition in definitions or []:
            self.register(definition)

    def register(self, definition: ResourceDefinition) -> ResourceDefinition:
        if definition.uri in self._by_uri:
            raise ValueError(f"Resource already registered: {definition.uri}")
        if definition.slug in self._by_slug:
            raise ValueError(f"Resource name already registered: {definition.slug}")
        self._by_uri[definition.uri] = definition
        self._by_slug[definition.slug] = definition
        return definition

    def __iter__(self):
        return iter(self._by_uri.values())

    def list_resources(self) -> List[Dict[str, Any]]:
        return [definition.describe() for definition in self._by_uri.values()]

    def get(self, uri: str) -> ResourceDefinition:
        try:
            return self._by_uri[uri]
        except KeyError:
            raise ResourceNotFoundError(uri) from None

    def read(self, uri: str) -> Dict[str, Any]:
        definition = self.get(uri)
        return {
            "contents": [
                {"uri": definition.uri, "mimeType": definition.mime_type, "text": definition.read_text()}
            ]
        }

    def read_by_slug(self, slug: str) -> Dict[str, Any]:
        definition = self._by_slug.get(slug)
        if definition is None:
            raise ResourceNotFoundError(slug)
        return self.read(definition.uri)
