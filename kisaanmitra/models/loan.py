from sqlalchemy import Column, Numeric, String, ForeignKey, Integer, Enum, DateTime
from sqlalchemy.orm import relationship
from kisaanmitra.models.base import BaseModel

class LoanApplication(BaseModel):
    __tablename__ = "loan_applications"
    
    user_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    purpose = Column(String, nullable=False)
    credit_score_at_application = Column(Integer, nullable=False)
    status = Column(Enum('pending', 'approved', 'rejected', name='loan_status'), nullable=False, default='pending')
    approved_at = Column(DateTime)
    rejected_reason = Column(String)
    
    user = relationship("User")
