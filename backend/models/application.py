from enum import Enum
from typing import List, Literal

from pydantic import BaseModel, Field, HttpUrl, field_validator

from models.product import OptionalUrl


class ApplicationStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ApplicationCreate(BaseModel):
    creator_name: str = Field(..., min_length=1)
    phone_number: str = Field(..., min_length=10)
    address: str = Field(..., min_length=5)
    wconcept_id: str = Field(..., min_length=1)
    sns_links: List[HttpUrl] = Field(..., min_length=1)
    selected_options: List[str] = Field(..., min_length=1)

    @field_validator("sns_links", mode="before")
    @classmethod
    def drop_blank_links(cls, value):
        if isinstance(value, list):
            return [link for link in value if not (isinstance(link, str) and not link.strip())]
        return value

    @field_validator("selected_options")
    @classmethod
    def unique_options(cls, value: List[str]) -> List[str]:
        return list(dict.fromkeys(value))


class ApplicationUrlsUpdate(BaseModel):
    wconcept_styleclip_url: OptionalUrl = None
    sns_upload_url: OptionalUrl = None


class ApplicationStatusUpdate(BaseModel):
    status: Literal["approved", "rejected"]
