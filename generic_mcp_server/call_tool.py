import argparse
import asyncio
import json
import logging
import sys
from typing import Any, Dict, Optional

from fastmcp import Client

# --- Logging setup -----------------------------------------------------------
log = logging.getLogger("generic_mcp.client")


async def call_tool(target: Any, name: str, arguments: Optional[Dict[str, Any]] = None,
                    timeout_s: float = 10.0) -> Any:
    """
    Connect to the MCP server at `target` (a URL, script path or in-process
    FastMCP instance) and call tool `name` with `arguments`.
    Returns the raw result (usually a CallToolResult).
    """
    log.debug("Preparing Client for: %r", target)
    client = Client(target)

    try:
        async with client:
            log.debug("Client connected. Calling tool %r with %r", name, arguments)
            result = await asyncio.wait_for(
                client.call_tool(name, arguments or {}),
                timeout=timeout_s,
            )
            log.debug("Raw result received from server: %r", result)
            return result

    except asyncio.TimeoutError:
        log.error("Timed out after %.1f seconds waiting for tool response.", timeout_s)
        raise
    except Exception as e:
        log.exception("Error while calling %r tool: %s", name, e)
        raise


def extract_payload(result: Any) -> Any:
    """
    Pull the useful value out of common FastMCP return shapes:

    - CallToolResult with .data / .structured_content
    - CallToolResult whose first content item holds text (JSON decoded when possible)
    - anything else is returned unchanged
    """
    data = getattr(result, "data", None)
    if data is not None:
        return data

    structured = getattr(result, "structured_content", None)
    if structured:
        return structured

    content = getattr(result, "content", None)
    if content:
        first = content[0]
        txt = first.get("text") if isinstance(first, dict) else getattr(first, "text", None)
        if isinstance(txt, str):
            try:
                return json.loads(txt)
            except ValueError:
                return txt

    return result


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Call one tool on a running MCP server and print the result."
    )
    parser.add_argument(
        "--url",
        default="http://127.0.0.1:8000/mcp",
        help="MCP server URL (default: %(default)s)",
    )
    parser.add_argument("--tool", default="calculate-sum", help="Tool name (default: %(default)s)")
    parser.add_argument(
        "--args",
        dest="arguments",
        type=json.loads,
        default={"a": 145, "b": 87},
        help="Tool arguments as a JSON object (default: %(default)s)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=10.0,
        help="Timeout in seconds for the tool call (default: %(default)s)",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


async def main_async(url: str, name: str, arguments: Dict[str, Any], timeout_s: float) -> None:
    log.info("Calling MCP %r tool at %s with %r", name, url, arguments)
    result = await call_tool(url, name, arguments, timeout_s=timeout_s)
    payload = extract_payload(result)
    print(payload if isinstance(payload, str) else json.dumps(payload, indent=2, default=str))


def run_entry() -> None:
    args = build_arg_parser().parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s | %(levelname)s | %(message)s",
        stream=sys.stderr,
    )
    asyncio.run(main_async(args.url, args.tool, args.arguments, args.timeout))


if __name__ == "__main__":
    run_entry()
