from typing import List

from fastapi import APIRouter, Depends, status

from kisaanmitra.auth.session import get_current_user
from kisaanmitra.db.store import RowStore, get_store
from kisaanmitra.models.user import User
from kisaanmitra.schemas.loan import LoanApplication, LoanApplicationCreate, LoanEligibility
from kisaanmitra.services.loans import LoanService

router = APIRouter()

@router.get("/eligibility", response_model=LoanEligibility)
def read_eligibility(
    store: RowStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    return LoanService(store).eligibility(current_user.id)

@router.post("/applications", response_model=LoanApplication, status_code=status.HTTP_201_CREATED)
def apply_for_loan(
    application: LoanApplicationCreate,
    store: RowStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    with store.transaction():
        db_application = LoanService(store).apply(
            current_user.id, application.amount, application.purpose
        )
    return db_application

@router.get("/applications", response_model=List[LoanApplication])
def read_my_applications(
    store: RowStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    return LoanService(store).list_for_user(current_user.id)
