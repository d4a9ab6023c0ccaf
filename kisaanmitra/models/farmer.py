from sqlalchemy import Column, String, Numeric, ForeignKey, Integer
from sqlalchemy.orm import relationship
from kisaanmitra.models.base import BaseModel

DEFAULT_CREDIT_SCORE = 650

class FarmerProfile(BaseModel):
    __tablename__ = "farmer_profiles"
    
    user_id = Column(Integer, ForeignKey('users.id'), nullable=False, unique=True, index=True)
    name = Column(String(100), nullable=False)
    phone = Column(String(20), nullable=False)
    location = Column(String(100), nullable=False)
    address = Column(String(255), nullable=False)
    crop_type = Column(String(50), nullable=False)
    land_size = Column(Numeric(10, 2), nullable=False)
    # Risk score, gates loan eligibility only
    credit_score = Column(Integer, nullable=False, default=DEFAULT_CREDIT_SCORE)
    # Spendable marketplace credits
    credit_balance = Column(Integer, nullable=False, default=0)
    
    user = relationship("User")
