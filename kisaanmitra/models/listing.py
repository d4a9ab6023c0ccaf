from sqlalchemy import Column, String, Integer, Enum, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from kisaanmitra.db.session import Base

LISTING_STATUSES = ('active', 'sold', 'inactive')

class Listing(Base):
    __tablename__ = "marketplace_listings"
    
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    seller_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)
    title = Column(String(100), nullable=False)
    description = Column(String, nullable=False)
    price = Column(Integer, nullable=False)
    category = Column(String(50), nullable=False)
    image_url = Column(String(255))
    seller_name = Column(String(100), nullable=False)
    seller_location = Column(String(100), nullable=False)
    status = Column(Enum(*LISTING_STATUSES, name='listing_status'), nullable=False, default='active')
    created_at = Column(DateTime, default=func.now(), nullable=False)
    
    seller = relationship("User")
