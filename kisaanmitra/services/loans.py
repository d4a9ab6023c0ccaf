import logging
from decimal import Decimal, InvalidOperation
from typing import List

from kisaanmitra.db.store import RowStore
from kisaanmitra.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

MIN_ELIGIBLE_SCORE = 600

# (exclusive upper bound of the score band, maximum loan in rupees)
LOAN_BANDS = (
    (600, 0),
    (650, 25000),
    (700, 50000),
    (750, 100000),
)
TOP_BAND_AMOUNT = 200000


def max_loan_amount(credit_score: int) -> int:
    for upper, amount in LOAN_BANDS:
        if credit_score < upper:
            return amount
    return TOP_BAND_AMOUNT


def is_eligible(credit_score: int) -> bool:
    return credit_score >= MIN_ELIGIBLE_SCORE


class LoanService:
    def __init__(self, store: RowStore):
        self.store = store

    def eligibility(self, user_id: int) -> dict:
        profile = self.store.first("farmer_profiles", user_id=user_id)
        if profile is None:
            raise NotFoundError("Complete your farmer profile before applying for a loan")
        return {
            "credit_score": profile.credit_score,
            "eligible": is_eligible(profile.credit_score),
            "max_loan_amount": max_loan_amount(profile.credit_score),
        }

    def apply(self, user_id: int, amount, purpose: str):
        """Record a loan application; approval happens elsewhere."""
        status = self.eligibility(user_id)
        score = status["credit_score"]

        if not status["eligible"]:
            raise ValidationError(
                "Your credit score is too low to apply for a loan",
                errors={"credit_score": f"A credit score of at least {MIN_ELIGIBLE_SCORE} is required"},
            )

        try:
            amount = Decimal(str(amount))
        except InvalidOperation:
            raise ValidationError(errors={"amount": "Loan amount must be a positive number"})
        errors = {}
        if not amount.is_finite() or amount <= 0:
            errors["amount"] = "Loan amount must be a positive number"
        elif amount > status["max_loan_amount"]:
            errors["amount"] = (
                f"The maximum loan amount for your credit score is ₹{status['max_loan_amount']}"
            )
        if not purpose or len(purpose.strip()) < 10:
            errors["purpose"] = "Please provide a detailed purpose for the loan"
        if errors:
            raise ValidationError(errors=errors)

        application = self.store.insert("loan_applications", {
            "user_id": user_id,
            "amount": amount,
            "purpose": purpose.strip(),
            "credit_score_at_application": score,
            "status": "pending",
        })
        logger.info("Loan application %s for ₹%s submitted by user %s", application.id, amount, user_id)
        return application

    def list_for_user(self, user_id: int) -> List:
        return self.store.select(
            "loan_applications",
            filters={"user_id": user_id},
            order_by="created_at",
            descending=True,
        )
