from fastapi import APIRouter, Depends, Query
from typing import List

from kisaanmitra.auth.session import get_current_user
from kisaanmitra.db.store import RowStore, get_store
from kisaanmitra.models.user import User
from kisaanmitra.schemas.transaction import Transaction as TransactionSchema
from kisaanmitra.services.marketplace import PurchaseWorkflow

router = APIRouter()

@router.get("/", response_model=List[TransactionSchema])
def read_transactions(
    limit: int = Query(100, ge=1, le=500, description="Maximum number of transactions"),
    store: RowStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    # Purchases and sales of the current user, newest first
    return PurchaseWorkflow(store).history(current_user.id, limit=limit)
