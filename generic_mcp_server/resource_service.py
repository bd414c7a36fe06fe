"""Client for the fictional "resources" API used by the example tools."""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from .api_client import ApiClient

logger = logging.getLogger("generic_mcp.service")


def _resource_path(resource_id: str) -> str:
    segment = quote(resource_id, safe="")
    # a bare "." or ".." would be collapsed as a dot-segment during URL resolution
    if segment in (".", ".."):
        segment = segment.replace(".", "%2E")
    return f"/resources/{segment}"


def _unwrap_list(data: Any) -> List[Dict[str, Any]]:
    # upstream answers either {"resources": [...]} or a bare list
    if isinstance(data, dict) and isinstance(data.get("resources"), list):
        return data["resources"]
    if isinstance(data, list):
        return data
    raise ValueError(f"Unexpected response shape: expected a list of resources, got {type(data).__name__}")


class ResourceService:
    def __init__(self, client: ApiClient):
        self.client = client

    async def list_resources(
        self,
        status: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        data = await self.client.get("/resources", {"status": status, "limit": limit, "offset": offset})
        return _unwrap_list(data)

    async def get_resource(self, resource_id: str) -> Dict[str, Any]:
        return await self.client.get(_resource_path(resource_id))

    async def create_resource(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self.client.post("/resources", data)

    async def update_resource(self, resource_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self.client.put(_resource_path(resource_id), data)

    async def delete_resource(self, resource_id: str) -> None:
        await self.client.delete(_resource_path(resource_id))

    async def search_by_name(self, name: str) -> List[Dict[str, Any]]:
        data = await self.client.get("/resources/search", {"name": name})
        return _unwrap_list(data)

    async def find_by_name(self, name: str) -> Optional[Dict[str, Any]]:
        """Exact, case-insensitive name match among the search results."""
        wanted = name.lower()
        for resource in await self.search_by_name(name):
            if str(resource.get("name", "")).lower() == wanted:
                return resource
        logger.debug(f"No resource named {name!r}")
        return None
