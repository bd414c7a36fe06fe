"""
Argument schemas for the example tools.

Each tool validates its raw arguments against one of these models before the
handler runs, so handlers only ever see well-typed input. The JSON schema
published to clients is generated from the same models (camelCase aliases
included).
"""

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

ResourceStatus = Literal["active", "inactive", "pending", "archived"]
ResourcePriority = Literal[1, 2, 3, 4]


class ToolArguments(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# --------- Demo tools ---------
class CalculateSumArgs(ToolArguments):
    a: Union[int, float] = Field(description="The first number")
    b: Union[int, float] = Field(description="The second number")


class GetWeatherArgs(ToolArguments):
    city: str = Field(min_length=1, description="The city name")


# --------- Resource API tools ---------
class GetResourcesArgs(ToolArguments):
    status: Optional[ResourceStatus] = Field(default=None, description="Filter resources by status")
    limit: Optional[int] = Field(
        default=None, ge=1, le=100,
        description="Maximum number of resources to return (default: 20, max: 100)",
    )
    offset: Optional[int] = Field(default=None, ge=0, description="Number of resources to skip for pagination")


class GetResourceArgs(ToolArguments):
    resource_id: str = Field(alias="resourceId", min_length=1, description="ID of the resource to retrieve")


class CreateResourceArgs(ToolArguments):
    # unknown fields are forwarded to the upstream as given
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: str = Field(min_length=1, description="Name of the resource")
    description: Optional[str] = Field(default=None, description="Detailed description of the resource")
    status: Optional[ResourceStatus] = Field(
        default=None, description="Initial status of the resource (defaults to 'pending')"
    )
    priority: Optional[ResourcePriority] = Field(
        default=None, description="Priority level (1-4, where 1 is highest)"
    )
    tags: Optional[List[str]] = Field(default=None, description="Tags to associate with the resource")
    metadata: Optional[Dict[str, Any]] = Field(default=None, description="Custom metadata for the resource")


class UpdateResourceArgs(ToolArguments):
    resource_id: str = Field(alias="resourceId", min_length=1, description="ID of the resource to update")
    name: Optional[str] = Field(default=None, description="New name for the resource")
    description: Optional[str] = Field(default=None, description="New description for the resource")
    status: Optional[ResourceStatus] = Field(default=None, description="New status for the resource")
    # an explicit null clears the priority upstream
    priority: Optional[ResourcePriority] = Field(
        default=None, description="New priority level (1-4, where 1 is highest, or null to clear)"
    )
    tags: Optional[List[str]] = Field(
        default=None, description="New tags for the resource (replaces existing tags)"
    )
    metadata: Optional[Dict[str, Any]] = Field(
        default=None, description="New metadata for the resource (merged with existing metadata)"
    )

    def update_body(self) -> Dict[str, Any]:
        """Fields the caller actually set, without the identifier."""
        return self.model_dump(exclude_unset=True, exclude={"resource_id"})


class DeleteResourceArgs(ToolArguments):
    resource_id: str = Field(alias="resourceId", min_length=1, description="ID of the resource to delete")
    confirm: bool = Field(description="Confirmation flag to prevent accidental deletion")


class SearchResourcesArgs(ToolArguments):
    query: str = Field(
        min_length=1,
        description="Search query (matches against resource names and descriptions)",
    )
    tags: Optional[List[str]] = Field(
        default=None, description="Filter by tags (resources must have at least one matching tag)"
    )
    status: Optional[ResourceStatus] = Field(default=None, description="Filter by status")
