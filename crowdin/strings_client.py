"""
Crowdin Source Strings Client
Reads source strings (including custom fields) from the Crowdin REST API v2
"""

import logging
from typing import Any, Dict, Optional
from urllib.parse import urlparse

import httpx

from crowdin.errors import CrowdinApiError, StringNotFoundError

logger = logging.getLogger(__name__)


def organization_domain_from_base_url(base_url: str) -> Optional[str]:
    """
    Extract the organization sub-domain from a Crowdin base URL.
    Handles: https://acme.crowdin.com -> "acme", https://crowdin.com -> None
    """
    try:
        hostname = urlparse(base_url).hostname or ""
    except ValueError:
        logger.error(f"[Crowdin] Invalid baseUrl format: {base_url}")
        return None

    if hostname.endswith(".crowdin.com"):
        return hostname.split(".")[0]
    return None


class CrowdinStringsClient:
    """
    Minimal client for the source strings API.
    """

    API_HOST = "api.crowdin.com"

    def __init__(
        self,
        access_token: str,
        organization_domain: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.access_token = access_token
        self.organization_domain = organization_domain
        self.timeout = timeout
        self.transport = transport

    @property
    def api_base(self) -> str:
        if self.organization_domain:
            return f"https://{self.organization_domain}.{self.API_HOST}/api/v2"
        return f"https://{self.API_HOST}/api/v2"

    async def get_string(self, project_id: int, string_id: int) -> Dict[str, Any]:
        """
        Fetch a source string.

        Returns:
            The string object (``data`` member of the API response)

        Raises:
            StringNotFoundError: Crowdin answered 404
            CrowdinApiError: Any other failure
        """
        url = f"{self.api_base}/projects/{project_id}/strings/{string_id}"
        headers = {
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json"
        }

        logger.info(f"[Crowdin] Fetching string {string_id} of project {project_id}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(url, headers=headers)
        except httpx.HTTPError as e:
            raise CrowdinApiError(f"Crowdin API request failed: {e}", cause=e)

        if response.status_code == 404:
            raise StringNotFoundError("String not found")

        if response.status_code != 200:
            raise CrowdinApiError(
                f"Crowdin API returned {response.status_code}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise CrowdinApiError("Crowdin API returned invalid JSON", cause=e)

        return body.get("data") or {}
