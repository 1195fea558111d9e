"""
Application Settings
===================

Main application settings and environment configuration using Pydantic Settings.
Supports development, testing, and production environments.
"""

from typing import Annotated, Optional, List, Literal, Union
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
import json


DEFAULT_CORS_ALLOW_HEADERS = [
    "Content-Type",
    "Authorization",
    "x-statuspage-api-key",
    "x-statuspage-page-id",
    "x-statuspage-default-components",
]


def split_component_ids(value: Optional[str]) -> List[str]:
    """Split a comma-separated component id list, dropping blanks."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """Main application settings with environment variable support."""

    # Application Configuration
    app_name: str = Field(default="StatusPage MCP Server", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    service_name: str = Field(
        default="status-page-manager", description="Service name reported by health checks"
    )
    environment: str = Field(
        default="development", description="Environment: development, testing, production"
    )
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    # Server Configuration
    host: str = Field(default="0.0.0.0", description="HTTP server host")
    port: int = Field(default=6500, description="HTTP server port")

    # MCP Bridge Configuration
    mcp_server_name: str = Field(default="status-page", description="MCP server name")
    mcp_display_name: str = Field(
        default="Status Page Manager MCP", description="Name reported by mcp.connect"
    )
    mcp_protocol_version: str = Field(default="1.0", description="Bridge protocol version")
    mcp_discovery_schema_key: Literal["parameters", "inputSchema"] = Field(
        default="parameters", description="Key holding the tool schema in discovery payloads"
    )
    cors_allow_headers: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_CORS_ALLOW_HEADERS),
        description="Headers accepted in CORS preflight responses",
    )
    sticky_header_overrides: bool = Field(
        default=False,
        description="Persist header supplied credentials as defaults for later requests",
    )

    # SSE Configuration
    sse_enabled: bool = Field(default=True, description="Enable Server-Sent Events endpoint")
    sse_heartbeat_interval_seconds: float = Field(
        default=15.0, gt=0, description="SSE heartbeat interval in seconds"
    )
    sse_discovery_push: bool = Field(
        default=True, description="Push the tool list when an SSE stream opens"
    )

    # Statuspage Configuration (unprefixed environment variables)
    statuspage_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("STATUSPAGE_API_KEY", "statuspage_api_key"),
        description="Statuspage API key",
    )
    statuspage_page_id: str = Field(
        default="",
        validation_alias=AliasChoices("STATUSPAGE_PAGE_ID", "statuspage_page_id"),
        description="Statuspage page identifier",
    )
    statuspage_default_components: str = Field(
        default="",
        validation_alias=AliasChoices(
            "STATUSPAGE_DEFAULT_COMPONENTS", "statuspage_default_components"
        ),
        description="Comma-separated default component ids",
    )
    statuspage_api_base_url: str = Field(
        default="https://api.statuspage.io/v1", description="Statuspage REST API base URL"
    )
    statuspage_request_timeout_seconds: float = Field(
        default=30.0, gt=0, description="Upstream request timeout in seconds"
    )

    @property
    def default_component_ids(self) -> List[str]:
        """Default component ids parsed from the comma-separated setting."""
        return split_component_ids(self.statuspage_default_components)

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        allowed = {"development", "testing", "production"}
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    @field_validator("cors_allow_headers", mode="before")
    @classmethod
    def parse_cors_allow_headers(cls, v: Union[str, List[str]]) -> List[str]:
        """Parse allowed headers from string or list."""
        if isinstance(v, str):
            v = v.strip()
            if v.startswith("[") and v.endswith("]"):
                try:
                    return json.loads(v)
                except json.JSONDecodeError:
                    pass
            return [header.strip() for header in v.split(",") if header.strip()]
        return v

    @field_validator("statuspage_api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalise the base URL so paths can be appended."""
        return v.rstrip("/")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="STATUSPAGE_MCP_",
        populate_by_name=True,
        extra="ignore",
    )


# Global settings instance - will be initialized when needed
settings = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global settings
    if settings is None:
        settings = Settings()
    return settings


def reload_settings() -> Settings:
    """Reload settings from environment."""
    global settings
    settings = Settings()
    return settings
