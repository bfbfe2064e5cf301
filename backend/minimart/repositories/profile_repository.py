"""
Profile Repository - one profiles row per signed-in identity
"""
import logging
from typing import Optional

from minimart.core.database import DataClient

logger = logging.getLogger(__name__)

DEFAULT_PROFILE_ROLE = "buyer"


class ProfileRepository:

    table = "profiles"

    def __init__(self, client: DataClient):
        self.client = client

    def ensure_profile(self, identity, role: Optional[str] = None) -> bool:
        """
        Create the profile row for an identity if it does not exist yet

        role comes from the sign-up metadata; profiles default to buyer.

        Returns:
            True if a profile was created
        """
        existing = self.client.select(self.table, columns="id", filters={"id": identity.id}, limit=1)
        if existing:
            return False

        self.client.insert(self.table, {
            "id": identity.id,
            "full_name": identity.name or identity.email,
            "role": role or DEFAULT_PROFILE_ROLE
        })
        logger.info(f"Created profile for {identity.email}")
        return True
