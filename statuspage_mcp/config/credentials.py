"""
Statuspage Credentials
======================

Resolution of the Statuspage API key, page id and default components used by
a single tool invocation.

Base values come from the environment (see ``Settings``). HTTP callers may
override them per request with ``x-statuspage-*`` headers. The resolved value
is an immutable snapshot handed down the call chain, so two concurrent
requests carrying different headers never observe each other's credentials.
"""

from typing import Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .logging import get_logger, mask_secret
from .settings import Settings, split_component_ids

logger = get_logger(__name__)

API_KEY_HEADER = "x-statuspage-api-key"
PAGE_ID_HEADER = "x-statuspage-page-id"
DEFAULT_COMPONENTS_HEADER = "x-statuspage-default-components"

CREDENTIAL_HEADERS: Tuple[str, ...] = (API_KEY_HEADER, PAGE_ID_HEADER, DEFAULT_COMPONENTS_HEADER)


class MissingCredentialsError(ValueError):
    """Raised when the API key or page id needed for an upstream call is missing."""

    def __init__(self, missing: List[str]):
        self.missing = missing
        super().__init__(f"Missing StatusPage configuration: {', '.join(missing)}")


class StatusPageCredentials(BaseModel):
    """Credentials for one Statuspage page."""

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(default="", description="Statuspage API key")
    page_id: str = Field(default="", description="Statuspage page identifier")
    default_component_ids: Tuple[str, ...] = Field(
        default=(), description="Components attached to new incidents by default"
    )

    @classmethod
    def from_settings(cls, settings: Settings) -> "StatusPageCredentials":
        """Build base credentials from environment settings."""
        return cls(
            api_key=settings.statuspage_api_key,
            page_id=settings.statuspage_page_id,
            default_component_ids=tuple(settings.default_component_ids),
        )

    def missing_fields(self) -> List[str]:
        """Names of required values that are empty."""
        missing = []
        if not self.api_key:
            missing.append("api key")
        if not self.page_id:
            missing.append("page id")
        return missing

    @property
    def is_valid(self) -> bool:
        return not self.missing_fields()

    def validate_complete(self) -> "StatusPageCredentials":
        """
        Ensure both API key and page id are present.

        Raises:
            MissingCredentialsError: If either value is empty
        """
        missing = self.missing_fields()
        if missing:
            raise MissingCredentialsError(missing)
        return self

    def with_overrides(self, headers: Mapping[str, str]) -> "StatusPageCredentials":
        """Return a copy with values taken from recognised headers."""
        normalized = _normalize_headers(headers)
        updates: Dict[str, object] = {}

        api_key = normalized.get(API_KEY_HEADER)
        if api_key:
            updates["api_key"] = api_key

        page_id = normalized.get(PAGE_ID_HEADER)
        if page_id:
            updates["page_id"] = page_id

        components = normalized.get(DEFAULT_COMPONENTS_HEADER)
        if components is not None:
            updates["default_component_ids"] = tuple(split_component_ids(components))

        if not updates:
            return self
        return self.model_copy(update=updates)

    def describe(self) -> Dict[str, str]:
        """Loggable summary with the API key masked."""
        return {
            "page_id": self.page_id or "undefined",
            "api_key": mask_secret(self.api_key),
            "default_components": ", ".join(self.default_component_ids) or "undefined",
        }


def _normalize_headers(headers: Mapping[str, str]) -> Dict[str, str]:
    return {
        key.lower(): value.strip()
        for key, value in headers.items()
        if key.lower() in CREDENTIAL_HEADERS and value is not None
    }


class CredentialStore:
    """
    Holds the base credentials and resolves per-request snapshots.

    With ``sticky`` enabled, credentials supplied in headers become the base for
    later requests that send no headers. Each request still works with its own
    snapshot taken at resolution time.
    """

    def __init__(self, base: StatusPageCredentials, sticky: bool = False) -> None:
        self._base = base
        self.sticky = sticky
        self.logger = logger.bind(component="credential_store")

    @classmethod
    def from_settings(cls, settings: Settings) -> "CredentialStore":
        store = cls(
            StatusPageCredentials.from_settings(settings),
            sticky=settings.sticky_header_overrides,
        )
        store.logger.info("StatusPage configuration loaded", **store.base.describe())
        return store

    @property
    def base(self) -> StatusPageCredentials:
        return self._base

    def resolve(self, headers: Optional[Mapping[str, str]] = None) -> StatusPageCredentials:
        """
        Resolve the credentials for one request.

        Args:
            headers: Request headers; only ``x-statuspage-*`` names are read

        Returns:
            Immutable credentials snapshot for this request
        """
        if not headers:
            return self._base

        resolved = self._base.with_overrides(headers)
        if resolved is not self._base:
            self.logger.debug("Credentials overridden from headers", **resolved.describe())
            if self.sticky:
                self._base = resolved
        return resolved
