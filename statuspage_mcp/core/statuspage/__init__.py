"""
Statuspage Integration
======================

Async HTTP client for the Atlassian Statuspage REST API.
"""

from .client import StatusPageClient, StatusPageAPIError

__all__ = ["StatusPageClient", "StatusPageAPIError"]
