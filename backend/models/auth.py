from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    SELLER = "seller"
    CREATOR = "creator"
    NONE = "none"


class Identity(BaseModel):
    """Authenticated principal as reported by the identity provider."""

    model_config = ConfigDict(frozen=True)

    subject: str
    provider: Optional[str] = None
    email: Optional[str] = None
    name: Optional[str] = None

    @property
    def display_name(self) -> Optional[str]:
        return self.name or self.email


# ======================
# Request bodies
# ======================

class SessionCreate(BaseModel):
    access_token: str = Field(..., min_length=1)


class BrandSelect(BaseModel):
    brand_code: str = Field(..., min_length=1)
