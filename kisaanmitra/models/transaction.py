from sqlalchemy import Column, Enum, String, ForeignKey, Integer, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from kisaanmitra.db.session import Base

class Transaction(Base):
    __tablename__ = "marketplace_transactions"
    
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    product_id = Column(Integer, ForeignKey('marketplace_listings.id'), nullable=False, index=True)
    buyer_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)
    seller_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)
    amount = Column(Integer, nullable=False)
    credits_used = Column(Integer)
    status = Column(Enum('pending', 'completed', 'failed', name='transaction_status'), default='completed')
    product_title = Column(String(100))
    created_at = Column(DateTime, default=func.now(), nullable=False)
    
    listing = relationship("Listing")
