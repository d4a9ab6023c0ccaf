from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, Field, field_validator
from kisaanmitra.schemas.base import BaseSchema

class ListingCreate(BaseModel):
    title: str = Field(min_length=5, max_length=100)
    description: str = Field(min_length=10)
    price: int = Field(gt=0, description="Price in credits")
    category: str = Field(min_length=1, max_length=50)
    image_url: Optional[str] = None

    @field_validator("title", "description", "category", mode="before")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("image_url")
    @classmethod
    def empty_url_is_none(cls, value: Optional[str]) -> Optional[str]:
        return value or None

class Listing(BaseSchema):
    id: int
    seller_id: int
    title: str
    description: str
    price: int
    category: str
    image_url: Optional[str] = None
    seller_name: str
    seller_location: str
    status: Literal["active", "sold", "inactive"]
    created_at: datetime
