from datetime import datetime
from typing import Optional
from kisaanmitra.schemas.base import BaseSchema

class Transaction(BaseSchema):
    id: int
    product_id: int
    buyer_id: int
    seller_id: int
    amount: int
    credits_used: Optional[int] = None
    status: str
    product_title: Optional[str] = None
    created_at: datetime
