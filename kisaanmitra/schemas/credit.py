from typing import List, Literal
from pydantic import BaseModel, Field
from kisaanmitra.schemas.transaction import Transaction

class CreditBalance(BaseModel):
    user_id: int
    credit_balance: int

class CreditSummary(CreditBalance):
    credit_score: int
    loan_eligible: bool
    used_credits: int
    recent_transactions: List[Transaction]

class CreditPurchase(BaseModel):
    amount: int = Field(gt=0, description="Amount in rupees, converted 1:1 to credits")
    upi_id: str = Field(min_length=5)
    payment_method: Literal["upi", "paytm", "phonepay", "googlepay"] = "upi"
