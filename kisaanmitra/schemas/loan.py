from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field
from kisaanmitra.schemas.base import TimestampSchema

class LoanApplicationCreate(BaseModel):
    amount: Decimal = Field(gt=0)
    purpose: str = Field(min_length=10, description="Please provide a detailed purpose for the loan")

class LoanApplication(TimestampSchema):
    id: int
    user_id: int
    amount: Decimal
    purpose: str
    credit_score_at_application: int
    status: str
    approved_at: Optional[datetime] = None
    rejected_reason: Optional[str] = None

class LoanEligibility(BaseModel):
    credit_score: int
    eligible: bool
    max_loan_amount: int
