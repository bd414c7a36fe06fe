# -*- coding: utf-8 -*-
"""
Error taxonomy shared by the API client, the dispatcher and both transports.

Every dispatch-level failure carries a ``kind`` (what went wrong, in words the
caller can act on) and a JSON-RPC style ``code`` so the MCP and HTTP bindings
can translate it without inspecting the message.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    METHOD_NOT_FOUND = "method_not_found"
    RESOURCE_NOT_FOUND = "resource_not_found"
    INVALID_ARGUMENTS = "invalid_arguments"
    EXECUTION_ERROR = "execution_error"


class McpServerError(Exception):
    """Base class for failures surfaced to the caller as an error envelope."""

    kind: ErrorKind = ErrorKind.EXECUTION_ERROR
    code: int = -32603

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ToolNotFoundError(McpServerError):
    kind = ErrorKind.METHOD_NOT_FOUND
    code = -32601

    def __init__(self, name: str):
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class ResourceNotFoundError(McpServerError):
    kind = ErrorKind.RESOURCE_NOT_FOUND
    code = -32002

    def __init__(self, uri: str):
        super().__init__(f"Resource not found: {uri}")
        self.uri = uri


class InvalidArgumentsError(McpServerError):
    """Schema validation failure or a handler precondition that was not met."""

    kind = ErrorKind.INVALID_ARGUMENTS
    code = -32602

    def __init__(self, detail: str):
        super().__init__(f"Invalid arguments: {detail}")
        self.detail = detail


class ToolExecutionError(McpServerError):
    kind = ErrorKind.EXECUTION_ERROR
    code = -32603

    def __init__(self, operation: str, cause: BaseException):
        super().__init__(f"Failed to {operation}: {cause}")
        self.operation = operation
        self.cause = cause


class UpstreamError(Exception):
    """Non-2xx response or network fault talking to the upstream API.

    ``status_code`` is ``None`` when no HTTP response was received at all.
    """

    def __init__(self, status_code: Optional[int], body: str):
        if status_code is None:
            message = f"API request failed: {body}"
        else:
            message = f"API request failed with status {status_code}: {body}"
        super().__init__(message)
        self.status_code = status_code
        self.body = body
