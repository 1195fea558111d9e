"""
Unit Tests for Statuspage Tools
===============================

Tool behaviour through ``ToolExecutor`` against an in-memory Statuspage API.
"""

import asyncio

import aiohttp
import pytest

from statuspage_mcp.config.credentials import MissingCredentialsError
from statuspage_mcp.core.statuspage.client import StatusPageAPIError
from statuspage_mcp.mcp_server.registry import ToolArgumentsError, ToolNotFoundError

from tests.utils.mocks import make_credentials

INCIDENT_ARGS = {
    "name": "API outage",
    "status": "investigating",
    "impact": "critical",
    "message": "We are investigating errors on the API",
}


class TestToolExecutor:
    """Test the shared execution path."""

    @pytest.mark.asyncio
    async def test_unknown_tool(self, executor, credentials, backend):
        with pytest.raises(ToolNotFoundError):
            await executor.execute("delete-page", {}, credentials)

        assert backend.clients_created == []

    @pytest.mark.asyncio
    async def test_missing_credentials_stop_before_client(self, executor, backend):
        with pytest.raises(MissingCredentialsError):
            await executor.execute("list-components", {}, make_credentials(api_key=""))

        assert backend.clients_created == []

    @pytest.mark.asyncio
    async def test_client_bound_to_request_credentials(self, executor, backend):
        credentials = make_credentials(page_id="page-42")

        await executor.execute("list-components", None, credentials)

        assert backend.clients_created == [credentials]
        assert backend.calls[0].credentials.page_id == "page-42"
        assert backend.clients_closed == 1

    @pytest.mark.asyncio
    async def test_invalid_arguments(self, executor, credentials):
        with pytest.raises(ToolArgumentsError) as exc_info:
            await executor.execute(
                "create-incident", {**INCIDENT_ARGS, "impact": "apocalyptic"}, credentials
            )

        assert exc_info.value.tool_name == "create-incident"
        assert "impact" in exc_info.value.detail

    @pytest.mark.asyncio
    async def test_unexpected_argument_rejected(self, executor, credentials):
        with pytest.raises(ToolArgumentsError):
            await executor.execute("get-incident", {"incidentId": "a", "extra": 1}, credentials)


class TestCreateIncident:
    """Test the create-incident tool."""

    @pytest.mark.asyncio
    async def test_create_success(self, executor, credentials, backend):
        result = await executor.execute("create-incident", INCIDENT_ARGS, credentials)

        assert result.is_error is False
        assert result.payload() == {
            "success": True,
            "incidentId": "inc-1",
            "url": "https://stspg.io/inc-1",
        }
        call = backend.calls_named("create_incident")[0]
        assert call.kwargs["message"] == INCIDENT_ARGS["message"]
        assert call.kwargs["notify"] is True
        assert call.kwargs["components"] is None

    @pytest.mark.asyncio
    async def test_empty_components_requests_selection(self, executor, credentials, backend):
        result = await executor.execute(
            "create-incident", {**INCIDENT_ARGS, "components": []}, credentials
        )

        payload = result.payload()
        assert result.is_error is False
        assert payload["needs_component_selection"] is True
        assert payload["available_components"] == [
            {"id": "cmp-api", "name": "API", "current_status": "operational"},
            {"id": "cmp-web", "name": "Website", "current_status": "operational"},
        ]
        assert "major_outage" in payload["available_statuses"]
        assert backend.calls_named("create_incident") == []

    @pytest.mark.asyncio
    async def test_explicit_components_sent(self, executor, credentials, backend):
        components = [{"id": "cmp-web", "status": "partial_outage"}]

        await executor.execute(
            "create-incident", {**INCIDENT_ARGS, "components": components}, credentials
        )

        call = backend.calls_named("create_incident")[0]
        assert call.kwargs["components"] == {"cmp-web": "partial_outage"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "impact,expected",
        [
            ("critical", "major_outage"),
            ("major", "partial_outage"),
            ("minor", "degraded_performance"),
            ("maintenance", "under_maintenance"),
        ],
    )
    async def test_default_components_status_follows_impact(
        self, executor, backend, impact, expected
    ):
        credentials = make_credentials(default_component_ids=("cmp-api", "cmp-web"))

        await executor.execute("create-incident", {**INCIDENT_ARGS, "impact": impact}, credentials)

        call = backend.calls_named("create_incident")[0]
        assert call.kwargs["components"] == {"cmp-api": expected, "cmp-web": expected}

    @pytest.mark.asyncio
    async def test_resolved_incident_marks_defaults_operational(self, executor, backend):
        credentials = make_credentials(default_component_ids=("cmp-api",))

        await executor.execute(
            "create-incident", {**INCIDENT_ARGS, "status": "resolved"}, credentials
        )

        call = backend.calls_named("create_incident")[0]
        assert call.kwargs["components"] == {"cmp-api": "operational"}

    @pytest.mark.asyncio
    async def test_notify_flag_forwarded(self, executor, credentials, backend):
        await executor.execute("create-incident", {**INCIDENT_ARGS, "notify": False}, credentials)

        assert backend.calls_named("create_incident")[0].kwargs["notify"] is False

    @pytest.mark.asyncio
    async def test_upstream_error_is_tool_error(self, executor, credentials, backend):
        backend.error = StatusPageAPIError("create incident", 401, '{"error":"Unauthorized"}')

        result = await executor.execute("create-incident", INCIDENT_ARGS, credentials)

        assert result.is_error is True
        assert result.payload() == {
            "success": False,
            "error": 'Failed to create incident: {"error":"Unauthorized"}',
        }


class TestUpdateIncident:
    """Test the update-incident tool."""

    @pytest.mark.asyncio
    async def test_only_id_requests_selection(self, executor, credentials, backend):
        result = await executor.execute(
            "update-incident", {"incidentId": "inc-existing"}, credentials
        )

        payload = result.payload()
        assert payload["needs_component_selection"] is True
        assert payload["incident_details"] == {
            "id": "inc-existing",
            "name": "Elevated error rates",
            "status": "investigating",
            "impact": "minor",
        }
        assert len(payload["available_components"]) == 2
        assert backend.calls_named("update_incident") == []

    @pytest.mark.asyncio
    async def test_empty_update_rejected(self, executor, credentials, backend):
        result = await executor.execute(
            "update-incident", {"incidentId": "inc-existing", "components": []}, credentials
        )

        assert result.is_error is True
        assert result.payload()["error"].startswith("At least one of")
        assert backend.calls == []

    @pytest.mark.asyncio
    async def test_update_success(self, executor, credentials, backend):
        result = await executor.execute(
            "update-incident",
            {"incidentId": "inc-existing", "status": "resolved", "message": "Fixed"},
            credentials,
        )

        assert result.payload() == {
            "success": True,
            "incidentId": "inc-existing",
            "url": "https://stspg.io/existing",
            "status": "resolved",
            "impact": "minor",
        }
        call = backend.calls_named("update_incident")[0]
        assert call.kwargs["status"] == "resolved"
        assert call.kwargs["message"] == "Fixed"
        assert call.kwargs["impact"] is None

    @pytest.mark.asyncio
    async def test_components_only_update(self, executor, credentials, backend):
        await executor.execute(
            "update-incident",
            {"incidentId": "inc-existing", "components": [{"id": "cmp-api", "status": "operational"}]},
            credentials,
        )

        call = backend.calls_named("update_incident")[0]
        assert call.kwargs["components"] == {"cmp-api": "operational"}

    @pytest.mark.asyncio
    async def test_unknown_incident(self, executor, credentials):
        result = await executor.execute(
            "update-incident", {"incidentId": "missing", "name": "New"}, credentials
        )

        assert result.is_error is True
        assert "Failed to update incident" in result.payload()["error"]


class TestReadTools:
    """Test get-incident, list-incidents and list-components."""

    @pytest.mark.asyncio
    async def test_get_incident(self, executor, credentials):
        result = await executor.execute("get-incident", {"incidentId": "inc-existing"}, credentials)

        assert result.payload() == {
            "success": True,
            "incident": {
                "id": "inc-existing",
                "name": "Elevated error rates",
                "status": "investigating",
                "impact": "minor",
                "created_at": "2024-01-01T12:00:00Z",
                "updated_at": "2024-01-01T12:05:00Z",
                "shortlink": "https://stspg.io/existing",
            },
        }

    @pytest.mark.asyncio
    async def test_list_incidents_with_filter(self, executor, credentials, backend):
        await executor.execute("create-incident", {**INCIDENT_ARGS, "status": "resolved"}, credentials)

        result = await executor.execute(
            "list-incidents", {"status": "resolved", "limit": 10}, credentials
        )

        payload = result.payload()
        assert payload["success"] is True
        assert payload["count"] == 1
        assert payload["incidents"][0]["status"] == "resolved"
        call = backend.calls_named("list_incidents")[0]
        assert call.kwargs == {"status": "resolved", "limit": 10}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("limit", [0, 101])
    async def test_list_incidents_limit_bounds(self, executor, credentials, limit):
        with pytest.raises(ToolArgumentsError):
            await executor.execute("list-incidents", {"limit": limit}, credentials)

    @pytest.mark.asyncio
    async def test_list_components(self, executor, credentials):
        result = await executor.execute(
            "list-components", {"random_string": "ignored"}, credentials
        )

        assert result.payload() == {
            "success": True,
            "count": 2,
            "components": [
                {"id": "cmp-api", "name": "API", "status": "operational", "description": "Public API"},
                {"id": "cmp-web", "name": "Website", "status": "operational", "description": None},
            ],
        }

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [aiohttp.ClientConnectionError("connection refused"), asyncio.TimeoutError()],
    )
    async def test_transport_errors_are_tool_errors(self, executor, credentials, backend, error):
        backend.error = error

        result = await executor.execute("list-components", {}, credentials)

        assert result.is_error is True
        assert result.payload()["success"] is False

    @pytest.mark.asyncio
    async def test_wire_format_uses_is_error_alias(self, executor, credentials):
        result = await executor.execute("list-components", {}, credentials)

        wire = result.to_wire()
        assert wire["isError"] is False
        assert wire["content"][0]["type"] == "text"
