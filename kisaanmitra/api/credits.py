from fastapi import APIRouter, Depends, Query

from kisaanmitra.auth.session import get_current_user
from kisaanmitra.db.store import RowStore, get_store
from kisaanmitra.models.user import User
from kisaanmitra.schemas.credit import CreditBalance, CreditPurchase, CreditSummary
from kisaanmitra.services.ledger import CreditLedger

router = APIRouter()

@router.get("/balance", response_model=CreditBalance)
def read_balance(
    store: RowStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    balance = CreditLedger(store).get_balance(current_user.id)
    return {"user_id": current_user.id, "credit_balance": balance}

@router.get("/summary", response_model=CreditSummary)
def read_credit_summary(
    limit: int = Query(3, ge=1, le=50, description="Number of recent transactions"),
    store: RowStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    return CreditLedger(store).summary(current_user.id, limit=limit)

@router.post("/purchase", response_model=CreditBalance)
def purchase_credits(
    purchase: CreditPurchase,
    store: RowStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    """
    Buy farm credits. Rupees convert to credits 1:1.

    - **amount**: rupees to spend (positive)
    - **upi_id**: payer UPI ID
    - **payment_method**: upi, paytm, phonepay or googlepay
    """
    with store.transaction():
        balance = CreditLedger(store).top_up(
            current_user.id, purchase.amount, purchase.payment_method, purchase.upi_id
        )
    return {"user_id": current_user.id, "credit_balance": balance}
