"""
Example tool catalogue.

``build_tool_registry`` binds each tool's handler to the service it needs;
nothing here holds global state. Handlers receive validated argument models
and raise ``InvalidArgumentsError`` only for preconditions the schema cannot
express.
"""

import random
from typing import Any, Callable, Dict, List, Sequence

from .dispatcher import ToolDefinition, ToolRegistry
from .errors import InvalidArgumentsError
from .models import (
    CalculateSumArgs,
    CreateResourceArgs,
    DeleteResourceArgs,
    GetResourceArgs,
    GetResourcesArgs,
    GetWeatherArgs,
    SearchResourcesArgs,
    UpdateResourceArgs,
)
from .resource_service import ResourceService

WEATHER_CONDITIONS = ("Sunny", "Cloudy", "Rainy")


def demo_tools(choose: Callable[[Sequence[str]], str] = random.choice) -> List[ToolDefinition]:
    async def calculate_sum(args: CalculateSumArgs) -> Any:
        return args.a + args.b

    async def get_weather(args: GetWeatherArgs) -> str:
        # mock forecast
        return f"The weather in {args.city} is {choose(WEATHER_CONDITIONS)}"

    return [
        ToolDefinition(
            name="calculate-sum",
            description="Calculates the sum of two numbers",
            input_model=CalculateSumArgs,
            handler=calculate_sum,
        ),
        ToolDefinition(
            name="get-weather",
            description="Get weather forecast for a city",
            input_model=GetWeatherArgs,
            handler=get_weather,
        ),
    ]


def _matches(resource: Dict[str, Any], args: SearchResourcesArgs) -> bool:
    if args.status and resource.get("status") != args.status:
        return False
    if args.tags:
        wanted = set(args.tags)
        if not wanted.intersection(resource.get("tags") or []):
            return False
    return True


def resource_tools(service: ResourceService) -> List[ToolDefinition]:
    async def get_resources(args: GetResourcesArgs) -> Dict[str, Any]:
        resources = await service.list_resources(status=args.status, limit=args.limit, offset=args.offset)
        return {
            "resources": resources,
            "count": len(resources),
            "filters": args.model_dump(exclude_none=True),
        }

    async def get_resource(args: GetResourceArgs) -> Dict[str, Any]:
        return await service.get_resource(args.resource_id)

    async def create_resource(args: CreateResourceArgs) -> Dict[str, Any]:
        resource = await service.create_resource(args.model_dump(exclude_unset=True))
        resource_id = resource.get("id") if isinstance(resource, dict) else None
        return {"message": f"Resource created successfully with ID: {resource_id}", "resource": resource}

    async def update_resource(args: UpdateResourceArgs) -> Dict[str, Any]:
        resource = await service.update_resource(args.resource_id, args.update_body())
        return {"message": f"Resource {args.resource_id} updated successfully", "resource": resource}

    async def delete_resource(args: DeleteResourceArgs) -> Dict[str, Any]:
        if not args.confirm:
            raise InvalidArgumentsError("Deletion must be confirmed by setting confirm=true")
        await service.delete_resource(args.resource_id)
        return {"message": f"Resource {args.resource_id} deleted successfully"}

    async def search_resources(args: SearchResourcesArgs) -> Dict[str, Any]:
        # upstream only searches by name; status and tags are narrowed here
        found = await service.search_by_name(args.query)
        resources = [r for r in found if _matches(r, args)]
        return {
            "resources": resources,
            "count": len(resources),
            "query": args.query,
            "filters": {"tags": args.tags, "status": args.status},
        }

    return [
        ToolDefinition(
            name="get_resources",
            description=(
                "Retrieve a list of resources with optional filtering. Use this tool to get an "
                "overview of available resources or to search for specific ones using filters."
            ),
            input_model=GetResourcesArgs,
            handler=get_resources,
        ),
        ToolDefinition(
            name="get_resource",
            description=(
                "Retrieve detailed information about a specific resource by ID. Use this when you "
                "need comprehensive details about a particular resource."
            ),
            input_model=GetResourceArgs,
            handler=get_resource,
        ),
        ToolDefinition(
            name="create_resource",
            description=(
                "Create a new resource with the specified properties. Use this tool when you need "
                "to add a new resource to the system."
            ),
            input_model=CreateResourceArgs,
            handler=create_resource,
        ),
        ToolDefinition(
            name="update_resource",
            description=(
                "Update an existing resource with new properties. Use this tool to modify resource "
                "details, status, or metadata."
            ),
            input_model=UpdateResourceArgs,
            handler=update_resource,
        ),
        ToolDefinition(
            name="delete_resource",
            description=(
                "Permanently remove a resource. Use this tool with caution as deletion cannot be undone."
            ),
            input_model=DeleteResourceArgs,
            handler=delete_resource,
        ),
        ToolDefinition(
            name="search_resources",
            description=(
                "Search for resources by name or other criteria. Use this tool when you need to "
                "find specific resources based on search terms."
            ),
            input_model=SearchResourcesArgs,
            handler=search_resources,
        ),
    ]


def build_tool_registry(service: ResourceService, **demo_kwargs) -> ToolRegistry:
    return ToolRegistry(demo_tools(**demo_kwargs) + resource_tools(service))
