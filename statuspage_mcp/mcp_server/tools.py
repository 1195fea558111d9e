"""
MCP Server Tools
================

Tool implementations for the MCP (Model Context Protocol) server.
Provides incident creation, update, lookup and listing, plus component listing.

Upstream failures are reported as tool results with ``isError`` set; they never
escape as exceptions.
"""

from typing import Any, Dict, List, Type, TypeVar
import asyncio
import aiohttp

from pydantic import BaseModel, ValidationError

from statuspage_mcp.config.logging import get_logger
from statuspage_mcp.core.statuspage.client import StatusPageAPIError
from statuspage_mcp.models.schemas import (
    IMPACT_COMPONENT_STATUS,
    Component,
    ComponentStatus,
    ComponentUpdate,
    CreateIncidentParams,
    GetIncidentParams,
    IncidentStatus,
    IncidentImpact,
    ListComponentsParams,
    ListIncidentsParams,
    ToolResult,
    UpdateIncidentParams,
)

from .handlers import ToolContext
from .registry import ToolArgumentsError, ToolRegistry

logger = get_logger(__name__)

ParamsT = TypeVar("ParamsT", bound=BaseModel)

UPSTREAM_ERRORS = (StatusPageAPIError, aiohttp.ClientError, asyncio.TimeoutError)

INCIDENT_STATUSES = [status.value for status in IncidentStatus]
INCIDENT_IMPACTS = [impact.value for impact in IncidentImpact]
COMPONENT_STATUSES = [status.value for status in ComponentStatus]

_COMPONENTS_SCHEMA: Dict[str, Any] = {
    "description": "Component statuses to update",
    "type": "array",
    "items": {
        "type": "object",
        "additionalProperties": False,
        "properties": {
            "id": {"description": "Component ID", "type": "string"},
            "status": {
                "description": "Component status",
                "type": "string",
                "enum": COMPONENT_STATUSES,
            },
        },
        "required": ["id", "status"],
    },
}

CREATE_INCIDENT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "name": {"type": "string", "description": "The name of the incident"},
        "status": {"type": "string", "enum": INCIDENT_STATUSES},
        "impact": {"type": "string", "enum": INCIDENT_IMPACTS},
        "message": {"type": "string", "description": "The incident message/details"},
        "notify": {"type": "boolean", "default": True},
        "components": _COMPONENTS_SCHEMA,
    },
    "required": ["name", "status", "impact", "message"],
}

UPDATE_INCIDENT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "incidentId": {"type": "string", "description": "ID of the incident to update"},
        "status": {
            "type": "string",
            "enum": INCIDENT_STATUSES,
            "description": "New status for the incident",
        },
        "impact": {
            "type": "string",
            "enum": INCIDENT_IMPACTS,
            "description": "New impact level for the incident",
        },
        "name": {"type": "string", "description": "New name/title for the incident"},
        "message": {"type": "string", "description": "New message/description for the incident"},
        "components": _COMPONENTS_SCHEMA,
    },
    "required": ["incidentId"],
}

GET_INCIDENT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "incidentId": {"type": "string", "description": "ID of the incident to retrieve"},
    },
    "required": ["incidentId"],
}

LIST_INCIDENTS_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "status": {
            "type": "string",
            "enum": INCIDENT_STATUSES,
            "description": "Filter incidents by status",
        },
        "limit": {
            "type": "number",
            "minimum": 1,
            "maximum": 100,
            "description": "Maximum number of incidents to return (default: 20)",
        },
    },
}

LIST_COMPONENTS_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "random_string": {
            "type": "string",
            "description": "Dummy parameter for no-parameter tools",
        },
    },
}


def parse_arguments(tool_name: str, model: Type[ParamsT], arguments: Dict[str, Any]) -> ParamsT:
    """Validate raw tool arguments against the tool's parameter model."""
    try:
        return model.model_validate(arguments)
    except ValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'arguments'}: {error['msg']}"
            for error in e.errors()
        )
        raise ToolArgumentsError(tool_name, details) from e


def _simplify_components(components: List[Component]) -> List[Dict[str, Any]]:
    return [
        {"id": component.id, "name": component.name, "current_status": component.status}
        for component in components
    ]


def default_component_updates(
    params: CreateIncidentParams, component_ids: List[str]
) -> List[ComponentUpdate]:
    """Component updates for the configured default components."""
    if params.status == IncidentStatus.RESOLVED:
        component_status = ComponentStatus.OPERATIONAL
    else:
        component_status = IMPACT_COMPONENT_STATUS[params.impact]
    return [
        ComponentUpdate(id=component_id, status=component_status)
        for component_id in component_ids
    ]


async def create_incident(arguments: Dict[str, Any], context: ToolContext) -> ToolResult:
    """Create a new incident, or ask for a component selection when given an empty list."""
    params = parse_arguments("create-incident", CreateIncidentParams, arguments)
    log = logger.bind(tool="create-incident")

    if params.components is not None and not params.components:
        try:
            components = await context.client.list_components()
        except UPSTREAM_ERRORS as e:
            log.error("Error listing components", error=str(e))
            return ToolResult.failure(str(e))

        return ToolResult.from_payload(
            {
                "needs_component_selection": True,
                "message": "Please select components and their status for this incident.",
                "available_components": _simplify_components(components),
                "available_statuses": COMPONENT_STATUSES,
            }
        )

    components = params.components
    if components is None and context.credentials.default_component_ids:
        components = default_component_updates(
            params, list(context.credentials.default_component_ids)
        )

    try:
        incident = await context.client.create_incident(
            name=params.name,
            status=params.status.value,
            impact=params.impact.value,
            message=params.message,
            components=components,
            notify=params.notify,
        )
    except UPSTREAM_ERRORS as e:
        log.error("Error processing create-incident tool call", error=str(e))
        return ToolResult.failure(str(e))

    return ToolResult.from_payload(
        {"success": True, "incidentId": incident.id, "url": incident.shortlink}
    )


async def update_incident(arguments: Dict[str, Any], context: ToolContext) -> ToolResult:
    """Update an incident; with only an id, return what can be changed instead."""
    params = parse_arguments("update-incident", UpdateIncidentParams, arguments)
    log = logger.bind(tool="update-incident", incident_id=params.incidentId)

    if params.is_selection_request():
        try:
            incident = await context.client.get_incident(params.incidentId)
            components = await context.client.list_components()
        except UPSTREAM_ERRORS as e:
            log.error("Error retrieving incident details or components", error=str(e))
            return ToolResult.failure(str(e))

        return ToolResult.from_payload(
            {
                "needs_component_selection": True,
                "incident_details": {
                    "id": incident.id,
                    "name": incident.name,
                    "status": incident.status,
                    "impact": incident.impact,
                },
                "message": (
                    "Please select what you want to update for this incident. "
                    "Available components:"
                ),
                "available_components": _simplify_components(components),
                "available_statuses": COMPONENT_STATUSES,
            }
        )

    if not params.has_field_changes() and not params.components:
        return ToolResult.failure(
            "At least one of status, impact, message, name, or components "
            "must be provided for an update"
        )

    try:
        incident = await context.client.update_incident(
            params.incidentId,
            name=params.name,
            status=params.status.value if params.status else None,
            impact=params.impact.value if params.impact else None,
            message=params.message,
            components=params.components,
        )
    except UPSTREAM_ERRORS as e:
        log.error("Error processing update-incident tool call", error=str(e))
        return ToolResult.failure(str(e))

    return ToolResult.from_payload(
        {
            "success": True,
            "incidentId": incident.id,
            "url": incident.shortlink,
            "status": incident.status,
            "impact": incident.impact,
        }
    )


async def get_incident(arguments: Dict[str, Any], context: ToolContext) -> ToolResult:
    params = parse_arguments("get-incident", GetIncidentParams, arguments)
    try:
        incident = await context.client.get_incident(params.incidentId)
    except UPSTREAM_ERRORS as e:
        logger.error("Error processing get-incident tool call", error=str(e))
        return ToolResult.failure(str(e))

    return ToolResult.from_payload({"success": True, "incident": incident.summary()})


async def list_incidents(arguments: Dict[str, Any], context: ToolContext) -> ToolResult:
    params = parse_arguments("list-incidents", ListIncidentsParams, arguments)
    try:
        incidents = await context.client.list_incidents(
            status=params.status.value if params.status else None, limit=params.limit
        )
    except UPSTREAM_ERRORS as e:
        logger.error("Error processing list-incidents tool call", error=str(e))
        return ToolResult.failure(str(e))

    return ToolResult.from_payload(
        {
            "success": True,
            "count": len(incidents),
            "incidents": [incident.summary() for incident in incidents],
        }
    )


async def list_components(arguments: Dict[str, Any], context: ToolContext) -> ToolResult:
    parse_arguments("list-components", ListComponentsParams, arguments)
    try:
        components = await context.client.list_components()
    except UPSTREAM_ERRORS as e:
        logger.error("Error processing list-components tool call", error=str(e))
        return ToolResult.failure(str(e))

    return ToolResult.from_payload(
        {
            "success": True,
            "count": len(components),
            "components": [
                {
                    "id": component.id,
                    "name": component.name,
                    "status": component.status,
                    "description": component.description,
                }
                for component in components
            ],
        }
    )


def register_statuspage_tools(registry: ToolRegistry) -> ToolRegistry:
    """Register all Statuspage tools with a registry."""
    registry.register(
        "create-incident",
        "Create a new status page incident",
        CREATE_INCIDENT_SCHEMA,
        create_incident,
    )
    registry.register(
        "update-incident",
        "Update an existing status page incident",
        UPDATE_INCIDENT_SCHEMA,
        update_incident,
    )
    registry.register(
        "get-incident",
        "Get details of an existing status page incident",
        GET_INCIDENT_SCHEMA,
        get_incident,
    )
    registry.register(
        "list-incidents",
        "List status page incidents with optional filtering",
        LIST_INCIDENTS_SCHEMA,
        list_incidents,
    )
    registry.register(
        "list-components",
        "List available StatusPage components",
        LIST_COMPONENTS_SCHEMA,
        list_components,
    )
    return registry


def create_tool_registry() -> ToolRegistry:
    """Build the registry with every Statuspage tool."""
    return register_statuspage_tools(ToolRegistry())
