from pydantic import BaseModel, BeforeValidator, Field, HttpUrl
from typing import Annotated, List, Optional


def blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


# Form fields send "" for "not provided"
OptionalUrl = Annotated[Optional[HttpUrl], BeforeValidator(blank_to_none)]
OptionalText = Annotated[Optional[str], BeforeValidator(blank_to_none)]


class ProductOptionCreate(BaseModel):
    color: str = Field(..., min_length=1)
    size: str = Field(..., min_length=1)
    product_url: OptionalUrl = None
    image_url: OptionalUrl = None
    stock_quantity: int = Field(..., ge=0)


class ProductCreate(BaseModel):
    product_name: str = Field(..., min_length=1)
    base_url: OptionalUrl = None
    base_image_url: OptionalUrl = None
    description: OptionalText = None

    options: List[ProductOptionCreate] = Field(..., min_length=1)
