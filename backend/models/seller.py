from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class SellerRecord(BaseModel):
    """One allow-listed (email, brand) pair from the sellers collection."""

    id: str
    google_email: str
    brand_code: str
    brand_name: str
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_doc(cls, doc: dict) -> "SellerRecord":
        return cls(
            id=str(doc["_id"]),
            google_email=doc["google_email"],
            brand_code=doc["brand_code"],
            brand_name=doc["brand_name"],
            is_active=doc.get("is_active", False),
            created_at=doc.get("created_at"),
            updated_at=doc.get("updated_at"),
        )


# ======================
# Admin payloads
# ======================

class SellerCreate(BaseModel):
    google_email: EmailStr
    brand_code: str = Field(..., min_length=1)
    brand_name: str = Field(..., min_length=1)


class SellerUpdate(BaseModel):
    brand_name: Optional[str] = Field(None, min_length=1)
    is_active: Optional[bool] = None
