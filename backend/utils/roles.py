import logging
from typing import List, Optional

from pydantic import BaseModel

from config.constants import SELLER_OAUTH_PROVIDER, CREATOR_OAUTH_PROVIDER
from models.auth import Identity, Role
from models.seller import SellerRecord
from utils.sellers import find_active_sellers

logger = logging.getLogger(__name__)


class RoleResolution(BaseModel):
    role: Role = Role.NONE
    owned_brands: List[SellerRecord] = []

    @property
    def default_brand(self) -> Optional[SellerRecord]:
        return self.owned_brands[0] if self.owned_brands else None


async def resolve_role(db, identity: Optional[Identity]) -> RoleResolution:
    """
    Derive the role of a freshly authenticated identity.

    Google identities are sellers only when allow-listed by at least one active
    seller row; Kakao identities are always creators. Anything else, including
    a failed seller lookup, resolves to ``Role.NONE``.
    """
    if identity is None:
        return RoleResolution()

    if identity.provider == SELLER_OAUTH_PROVIDER and identity.email:
        try:
            sellers = await find_active_sellers(db, identity.email)
            brands = [SellerRecord.from_doc(s) for s in sellers]
        except Exception:
            logger.exception("ROLE_LOOKUP_ERROR email=%s", identity.email)
            return RoleResolution()

        if brands:
            return RoleResolution(role=Role.SELLER, owned_brands=brands)

        logger.info("SELLER_NOT_ALLOWLISTED email=%s", identity.email)
        return RoleResolution()

    if identity.provider == CREATOR_OAUTH_PROVIDER:
        return RoleResolution(role=Role.CREATOR)

    return RoleResolution()
