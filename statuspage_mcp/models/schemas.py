"""
Pydantic Models and Schemas
===========================

Statuspage resources, MCP tool arguments and tool results.
"""

from typing import Optional, List, Dict, Any, Literal
from enum import Enum
import json

from pydantic import BaseModel, ConfigDict, Field


# Enums
class IncidentStatus(str, Enum):
    """Lifecycle status of an incident."""
    INVESTIGATING = "investigating"
    IDENTIFIED = "identified"
    MONITORING = "monitoring"
    RESOLVED = "resolved"


class IncidentImpact(str, Enum):
    """Impact level of an incident."""
    CRITICAL = "critical"
    MAJOR = "major"
    MINOR = "minor"
    MAINTENANCE = "maintenance"


class ComponentStatus(str, Enum):
    """Operational status of a page component."""
    OPERATIONAL = "operational"
    DEGRADED_PERFORMANCE = "degraded_performance"
    PARTIAL_OUTAGE = "partial_outage"
    MAJOR_OUTAGE = "major_outage"
    UNDER_MAINTENANCE = "under_maintenance"


# Component status applied to default components, keyed by incident impact
IMPACT_COMPONENT_STATUS: Dict[IncidentImpact, ComponentStatus] = {
    IncidentImpact.CRITICAL: ComponentStatus.MAJOR_OUTAGE,
    IncidentImpact.MAJOR: ComponentStatus.PARTIAL_OUTAGE,
    IncidentImpact.MINOR: ComponentStatus.DEGRADED_PERFORMANCE,
    IncidentImpact.MAINTENANCE: ComponentStatus.UNDER_MAINTENANCE,
}


# Upstream resources
class IncidentComponent(BaseModel):
    """Component reference embedded in an incident."""
    model_config = ConfigDict(extra="ignore")

    id: str
    name: Optional[str] = None
    status: Optional[str] = None


class Incident(BaseModel):
    """Incident as returned by the Statuspage API."""
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str = ""
    status: str = ""
    impact: str = ""
    shortlink: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    components: Optional[List[IncidentComponent]] = None

    def summary(self) -> Dict[str, Any]:
        """Compact representation returned to tool callers."""
        return {
            "id": self.id,
            "name": self.name,
            "status": self.status,
            "impact": self.impact,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "shortlink": self.shortlink,
        }


class Component(BaseModel):
    """Page component as returned by the Statuspage API."""
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str = ""
    status: str = ""
    description: Optional[str] = None
    position: Optional[int] = None
    group_id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


# Tool arguments
class ComponentUpdate(BaseModel):
    """Requested status for one component."""
    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., description="Component ID")
    status: ComponentStatus = Field(..., description="Component status")


class CreateIncidentParams(BaseModel):
    """Arguments of the create-incident tool."""
    model_config = ConfigDict(extra="forbid")

    name: str
    status: IncidentStatus
    impact: IncidentImpact
    message: str
    notify: bool = True
    components: Optional[List[ComponentUpdate]] = Field(
        None, description="Component statuses to update"
    )


class UpdateIncidentParams(BaseModel):
    """Arguments of the update-incident tool."""
    model_config = ConfigDict(extra="forbid")

    incidentId: str = Field(..., description="ID of the incident to update")
    status: Optional[IncidentStatus] = Field(None, description="New status for the incident")
    impact: Optional[IncidentImpact] = Field(
        None, description="New impact level for the incident"
    )
    message: Optional[str] = Field(None, description="New message/description for the incident")
    name: Optional[str] = Field(None, description="New name/title for the incident")
    components: Optional[List[ComponentUpdate]] = Field(
        None, description="Component statuses to update"
    )

    def has_field_changes(self) -> bool:
        """Whether any incident field besides components is being changed."""
        return any([self.status, self.impact, self.message, self.name])

    def is_selection_request(self) -> bool:
        """Only the incident id was given; the caller still has to pick what to change."""
        return not self.has_field_changes() and self.components is None


class GetIncidentParams(BaseModel):
    """Arguments of the get-incident tool."""
    model_config = ConfigDict(extra="forbid")

    incidentId: str = Field(..., description="ID of the incident to retrieve")


class ListIncidentsParams(BaseModel):
    """Arguments of the list-incidents tool."""
    model_config = ConfigDict(extra="forbid")

    status: Optional[IncidentStatus] = Field(None, description="Filter incidents by status")
    limit: Optional[int] = Field(
        None, ge=1, le=100, description="Maximum number of incidents to return (default: 20)"
    )


class ListComponentsParams(BaseModel):
    """Arguments of the list-components tool."""
    model_config = ConfigDict(extra="forbid")

    random_string: Optional[str] = Field(
        None, description="Dummy parameter for no-parameter tools"
    )


# Tool results
class TextContent(BaseModel):
    """Text content item of a tool result."""

    type: Literal["text"] = "text"
    text: str


class ToolResult(BaseModel):
    """Result of a tool invocation."""
    model_config = ConfigDict(populate_by_name=True)

    content: List[TextContent] = Field(default_factory=list)
    is_error: bool = Field(default=False, alias="isError")

    @classmethod
    def from_payload(cls, payload: Dict[str, Any], is_error: bool = False) -> "ToolResult":
        """Build a single text item result holding a JSON document."""
        return cls(content=[TextContent(text=json.dumps(payload))], is_error=is_error)

    @classmethod
    def failure(cls, error: str) -> "ToolResult":
        return cls.from_payload({"success": False, "error": error}, is_error=True)

    def payload(self) -> Any:
        """Decode the first text item as JSON."""
        if not self.content:
            return None
        return json.loads(self.content[0].text)

    def to_wire(self) -> Dict[str, Any]:
        """Serialise with MCP field names."""
        return self.model_dump(by_alias=True)
