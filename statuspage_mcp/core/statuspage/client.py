"""
Statuspage API Client
=====================

HTTP client for the Atlassian Statuspage REST API.
Each client is bound to one set of credentials for the lifetime of a request.
"""

import aiohttp
from typing import Optional, Dict, Any, List

from statuspage_mcp.config.credentials import StatusPageCredentials
from statuspage_mcp.config.logging import get_logger
from statuspage_mcp.config.settings import Settings, get_settings
from statuspage_mcp.models.schemas import Component, ComponentUpdate, Incident

logger = get_logger(__name__)

DEFAULT_INCIDENT_LIMIT = 20


class StatusPageAPIError(Exception):
    """Exception raised when the Statuspage API returns a non-2xx response."""

    def __init__(self, action: str, status: int, body: str):
        self.action = action
        self.status = status
        self.body = body
        super().__init__(f"Failed to {action}: {body}")


def components_payload(components: Optional[List[ComponentUpdate]]) -> Optional[Dict[str, str]]:
    """Convert component updates to the ``{component_id: status}`` mapping the API expects."""
    if not components:
        return None
    return {component.id: component.status.value for component in components}


class StatusPageClient:
    """Client for one Statuspage page."""

    def __init__(
        self,
        credentials: StatusPageCredentials,
        settings: Optional[Settings] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.credentials = credentials
        self.settings = settings or get_settings()
        self.base_url = f"{self.settings.statuspage_api_base_url}/pages/{credentials.page_id}"
        self.logger: Any = logger.bind(component="statuspage_client", page_id=credentials.page_id)
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "StatusPageClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"OAuth {self.credentials.api_key}",
            "Content-Type": "application/json",
        }

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.settings.statuspage_request_timeout_seconds)
            self._session = aiohttp.ClientSession(timeout=timeout)
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the HTTP session if this client created it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def _request(
        self,
        method: str,
        path: str,
        action: str,
        json_body: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        session = await self._get_session()
        url = f"{self.base_url}{path}"
        self.logger.debug("StatusPage request", method=method, url=url, params=params)

        async with session.request(
            method, url, json=json_body, params=params, headers=self.headers
        ) as response:
            body = await response.text()
            if response.status < 200 or response.status >= 300:
                self.logger.warning(
                    "StatusPage request failed",
                    method=method,
                    url=url,
                    status=response.status,
                    response=body,
                )
                raise StatusPageAPIError(action, response.status, body)

            self.logger.debug("StatusPage response", method=method, url=url, status=response.status)
            return await response.json(content_type=None)

    async def create_incident(
        self,
        name: str,
        status: str,
        impact: str,
        message: str,
        components: Optional[List[ComponentUpdate]] = None,
        notify: bool = True,
    ) -> Incident:
        """Create a new incident."""
        incident: Dict[str, Any] = {
            "name": name,
            "status": status,
            "impact": impact,
            "body": message,
            "deliver_notifications": notify,
        }
        component_map = components_payload(components)
        if component_map:
            incident["components"] = component_map

        data = await self._request(
            "POST", "/incidents", "create incident", json_body={"incident": incident}
        )
        created = Incident.model_validate(data)
        self.logger.info("Created StatusPage incident", incident_id=created.id)
        return created

    async def update_incident(
        self,
        incident_id: str,
        name: Optional[str] = None,
        status: Optional[str] = None,
        impact: Optional[str] = None,
        message: Optional[str] = None,
        components: Optional[List[ComponentUpdate]] = None,
        notify: bool = True,
    ) -> Incident:
        """Update an existing incident, sending only the fields provided."""
        incident: Dict[str, Any] = {"deliver_notifications": notify}
        if name:
            incident["name"] = name
        if status:
            incident["status"] = status
        if impact:
            incident["impact"] = impact
        if message:
            incident["body"] = message
        component_map = components_payload(components)
        if component_map:
            incident["components"] = component_map

        data = await self._request(
            "PATCH",
            f"/incidents/{incident_id}",
            "update incident",
            json_body={"incident": incident},
        )
        updated = Incident.model_validate(data)
        self.logger.info("Updated StatusPage incident", incident_id=updated.id)
        return updated

    async def get_incident(self, incident_id: str) -> Incident:
        """Get details for a specific incident."""
        data = await self._request("GET", f"/incidents/{incident_id}", "get incident")
        return Incident.model_validate(data)

    async def list_incidents(
        self, status: Optional[str] = None, limit: Optional[int] = None
    ) -> List[Incident]:
        """List incidents with an optional status filter."""
        params: Dict[str, Any] = {"limit": limit or DEFAULT_INCIDENT_LIMIT}
        if status:
            params["status"] = status

        data = await self._request("GET", "/incidents", "list incidents", params=params)
        return [Incident.model_validate(item) for item in data]

    async def list_components(self) -> List[Component]:
        """List all components of the page."""
        data = await self._request("GET", "/components", "list components")
        return [Component.model_validate(item) for item in data]
