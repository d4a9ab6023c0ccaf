"""Credit balances of farmer profiles.

All balance arithmetic happens in the database: debits are conditional decrements
and credits are increments, so no caller ever writes back a balance it read earlier.
Methods do not commit; wrap them in ``RowStore.transaction()``.
"""
import logging
from typing import Dict, Optional

from kisaanmitra.db.store import RowStore
from kisaanmitra.errors import InsufficientCreditsError, NotFoundError, ValidationError
from kisaanmitra.services.loans import is_eligible

logger = logging.getLogger(__name__)

PAYMENT_METHODS = ("upi", "paytm", "phonepay", "googlepay")


def _positive(amount) -> int:
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise ValidationError(errors={"amount": "Amount must be a positive whole number of credits"})
    return amount


class CreditLedger:
    def __init__(self, store: RowStore):
        self.store = store

    def _profile(self, user_id: int):
        profile = self.store.first("farmer_profiles", user_id=user_id)
        if profile is None:
            raise NotFoundError(f"No farmer profile for user {user_id}")
        return profile

    def get_balance(self, user_id: int) -> int:
        return self._profile(user_id).credit_balance

    def debit(self, user_id: int, amount: int) -> int:
        amount = _positive(amount)
        new_balance = self.store.decrement(user_id, amount)
        if new_balance is None:
            raise InsufficientCreditsError(required=amount, available=self.get_balance(user_id))
        logger.info("Debited %d credits from user %s, balance now %d", amount, user_id, new_balance)
        return new_balance

    def credit(self, user_id: int, amount: int) -> int:
        amount = _positive(amount)
        new_balance = self.store.increment(user_id, amount)
        logger.info("Credited %d credits to user %s, balance now %d", amount, user_id, new_balance)
        return new_balance

    def top_up(self, user_id: int, amount: int, payment_method: str, upi_id: Optional[str]) -> int:
        """Buy credits with rupees at a 1:1 rate."""
        errors = {}
        if payment_method not in PAYMENT_METHODS:
            errors["payment_method"] = "Please select a payment method"
        if not upi_id or len(upi_id.strip()) < 5:
            errors["upi_id"] = "Please enter a valid UPI ID"
        if errors:
            raise ValidationError(errors=errors)
        return self.credit(user_id, amount)

    def summary(self, user_id: int, limit: int = 3) -> Dict:
        profile = self._profile(user_id)
        recent = self.store.select(
            "marketplace_transactions",
            any_of=[("buyer_id", user_id), ("seller_id", user_id)],
            order_by="created_at",
            descending=True,
            limit=limit,
        )
        used = sum(t.credits_used or 0 for t in recent if t.buyer_id == user_id)
        return {
            "user_id": user_id,
            "credit_balance": profile.credit_balance,
            "credit_score": profile.credit_score,
            "loan_eligible": is_eligible(profile.credit_score),
            "used_credits": used,
            "recent_transactions": recent,
        }
