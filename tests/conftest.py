"""
Test Configuration
==================

Pytest configuration with shared fixtures: isolated settings, an in-memory
Statuspage backend and the tool execution stack built on top of it.
"""

import pytest

from statuspage_mcp.config.credentials import CredentialStore, StatusPageCredentials
from statuspage_mcp.config.settings import Settings
from statuspage_mcp.mcp_server.handlers import ToolContext, ToolExecutor
from statuspage_mcp.mcp_server.registry import ToolRegistry
from statuspage_mcp.mcp_server.tools import create_tool_registry

from tests.utils.mocks import FakeStatusPageBackend, FakeStatusPageClient, make_credentials


def make_settings(**overrides) -> Settings:
    """Settings isolated from the .env file, with test credentials."""
    values = {
        "environment": "testing",
        "log_level": "DEBUG",
        "statuspage_api_key": "env-api-key-0001",
        "statuspage_page_id": "page-env",
        "statuspage_default_components": "",
        "statuspage_api_base_url": "https://statuspage.test/v1",
        "sse_heartbeat_interval_seconds": 0.05,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def test_settings() -> Settings:
    """Test settings fixture."""
    return make_settings()


@pytest.fixture
def backend() -> FakeStatusPageBackend:
    """In-memory Statuspage API."""
    return FakeStatusPageBackend()


@pytest.fixture
def registry() -> ToolRegistry:
    return create_tool_registry()


@pytest.fixture
def executor(
    registry: ToolRegistry, test_settings: Settings, backend: FakeStatusPageBackend
) -> ToolExecutor:
    return ToolExecutor(registry, test_settings, client_factory=backend)


@pytest.fixture
def credentials() -> StatusPageCredentials:
    return make_credentials()


@pytest.fixture
def credential_store(test_settings: Settings) -> CredentialStore:
    return CredentialStore.from_settings(test_settings)


@pytest.fixture
def tool_context(
    credentials: StatusPageCredentials, backend: FakeStatusPageBackend, test_settings: Settings
) -> ToolContext:
    """Context for calling a tool handler directly."""
    return ToolContext(
        credentials=credentials,
        client=FakeStatusPageClient(backend, credentials),  # type: ignore[arg-type]
        settings=test_settings,
    )
