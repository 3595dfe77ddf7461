"""
Crowdin Token Service
Issues, encrypts, and caches Crowdin API access tokens per organization
"""

import logging
import time
from typing import Dict, Optional, Union

import httpx
from cryptography.fernet import Fernet, InvalidToken
from sqlalchemy.orm import Session

from config import Settings
from crowdin.errors import TokenRefreshError
from Database.models import Organization

logger = logging.getLogger(__name__)


class TokenCipher:
    """Fernet encryption for secrets stored in the database."""

    def __init__(self, encryption_key: Union[str, bytes]):
        try:
            self.cipher = Fernet(encryption_key.encode() if isinstance(encryption_key, str) else encryption_key)
        except Exception as e:
            logger.error(f"Failed to initialize encryption: {e}")
            raise ValueError("Invalid encryption key. Generate one with: Fernet.generate_key()")

    def encrypt(self, value: str) -> str:
        return self.cipher.encrypt(value.encode()).decode()

    def decrypt(self, value: str) -> Optional[str]:
        try:
            return self.cipher.decrypt(value.encode()).decode()
        except InvalidToken:
            logger.error("[Auth] Failed to decrypt stored secret")
            return None


class CrowdinTokenService:
    """
    Provides a valid access token for an installed organization.

    Tokens are obtained with Crowdin's ``crowdin_app`` grant and reused
    until shortly before they expire.
    """

    GRANT_TYPE = "crowdin_app"
    EXPIRY_MARGIN_SECONDS = 60
    TIMEOUT = 30.0

    def __init__(
        self,
        settings: Settings,
        db: Session,
        cipher: Optional[TokenCipher] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.client_id = settings.CROWDIN_CLIENT_ID
        self.client_secret = settings.CROWDIN_CLIENT_SECRET
        self.token_url = settings.CROWDIN_TOKEN_URL
        self.db = db
        self.cipher = cipher or TokenCipher(settings.ENCRYPTION_KEY)
        self.transport = transport

    async def get_valid_token(self, organization: Organization) -> str:
        """
        Return a usable access token, refreshing it when needed.

        Args:
            organization: Installed organization

        Returns:
            Crowdin API access token

        Raises:
            TokenRefreshError: The token could not be refreshed
        """
        cached = self._cached_token(organization)
        if cached:
            return cached

        logger.info(f"[Auth] Refreshing Crowdin token for organization {organization.organization_id}")
        token_data = await self._request_token(organization)

        access_token = token_data.get("access_token")
        if not access_token:
            raise TokenRefreshError("Failed to refresh Crowdin token: no access_token in response")

        expires_in = int(token_data.get("expires_in") or 0)
        organization.encrypted_access_token = self.cipher.encrypt(access_token)
        organization.access_token_expires_at = int(time.time()) + expires_in
        self.db.add(organization)
        self.db.commit()

        logger.info("[Auth] ✓ Successfully refreshed Crowdin token")
        return access_token

    def _cached_token(self, organization: Organization) -> Optional[str]:
        if not organization.encrypted_access_token or not organization.access_token_expires_at:
            return None

        if organization.access_token_expires_at - self.EXPIRY_MARGIN_SECONDS <= time.time():
            return None

        return self.cipher.decrypt(organization.encrypted_access_token)

    async def _request_token(self, organization: Organization) -> Dict:
        app_secret = self.cipher.decrypt(organization.encrypted_app_secret)
        if app_secret is None:
            raise TokenRefreshError("Failed to refresh Crowdin token: app secret unreadable")

        payload = {
            "grant_type": self.GRANT_TYPE,
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "app_id": organization.app_id,
            "app_secret": app_secret,
            "domain": organization.domain,
            "user_id": organization.user_id,
        }

        try:
            async with httpx.AsyncClient(timeout=self.TIMEOUT, transport=self.transport) as client:
                response = await client.post(self.token_url, json=payload)
        except httpx.HTTPError as e:
            logger.error(f"[Auth] Token request failed: {e}")
            raise TokenRefreshError(f"Failed to refresh Crowdin token: {e}", cause=e)

        if response.status_code != 200:
            logger.error(f"[Auth] Token endpoint returned {response.status_code}")
            raise TokenRefreshError(f"Failed to refresh Crowdin token: HTTP {response.status_code}")

        try:
            return response.json()
        except ValueError as e:
            raise TokenRefreshError("Failed to refresh Crowdin token: invalid response", cause=e)
