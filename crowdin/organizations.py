"""
Organization Directory
Installations registered through the Crowdin lifecycle webhooks
"""

import logging
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from crowdin.auth import TokenCipher
from Database.models import Organization

logger = logging.getLogger(__name__)


class OrganizationDirectory:
    """Lookup and registration of installed organizations."""

    def __init__(self, db: Session, cipher: TokenCipher):
        self.db = db
        self.cipher = cipher

    def find_organization(self, domain: Optional[str], organization_id: int) -> Optional[Organization]:
        query = self.db.query(Organization).filter(Organization.organization_id == organization_id)
        if domain:
            query = query.filter(Organization.domain == domain)
        else:
            query = query.filter(Organization.domain.is_(None))
        return query.first()

    def register_installation(self, payload: Dict[str, Any]) -> Organization:
        """
        Create or update an organization from an ``installed`` event.

        Args:
            payload: Event body (appId, appSecret, domain, organizationId, userId, baseUrl)
        """
        domain = payload.get("domain") or None
        organization_id = int(payload["organizationId"])

        organization = self.find_organization(domain, organization_id)
        if organization is None:
            organization = Organization(domain=domain, organization_id=organization_id)
            logger.info(f"[Events] Registering organization {organization_id} ({domain or 'crowdin.com'})")
        else:
            logger.info(f"[Events] Updating organization {organization_id} ({domain or 'crowdin.com'})")

        organization.user_id = int(payload["userId"])
        organization.base_url = payload["baseUrl"]
        organization.app_id = str(payload["appId"])
        organization.encrypted_app_secret = self.cipher.encrypt(payload["appSecret"])

        # New app secret invalidates any cached token
        organization.encrypted_access_token = None
        organization.access_token_expires_at = None

        self.db.add(organization)
        self.db.commit()
        self.db.refresh(organization)
        return organization

    def remove_installation(self, payload: Dict[str, Any]) -> bool:
        """Delete the organization named by an ``uninstall`` event."""
        domain = payload.get("domain") or None
        organization_id = int(payload["organizationId"])

        organization = self.find_organization(domain, organization_id)
        if organization is None:
            logger.warning(f"[Events] Uninstall for unknown organization {organization_id}")
            return False

        self.db.delete(organization)
        self.db.commit()
        logger.info(f"[Events] Removed organization {organization_id}")
        return True
