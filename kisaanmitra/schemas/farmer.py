from decimal import Decimal
from pydantic import BaseModel, Field
from kisaanmitra.schemas.base import TimestampSchema

class FarmerProfileBase(BaseModel):
    name: str = Field(min_length=2, description="Name must be at least 2 characters")
    location: str = Field(min_length=2, description="Location is required")
    land_size: Decimal = Field(gt=0, description="Land size must be a positive number")
    crop_type: str = Field(min_length=2, description="Crop type is required")
    phone: str = Field(min_length=10, max_length=20, description="Valid phone number is required")
    address: str = Field(min_length=5, description="Address is required")

class FarmerProfileSave(FarmerProfileBase):
    pass

class FarmerProfile(TimestampSchema, FarmerProfileBase):
    id: int
    user_id: int
    credit_score: int
    credit_balance: int
