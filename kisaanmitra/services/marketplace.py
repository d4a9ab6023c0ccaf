"""Buying a marketplace listing with farm credits.

A purchase runs as one unit of work: the listing is claimed with a compare-and-set
on its status, the buyer is debited with a conditional decrement, the transaction is
recorded and the seller rewarded, then everything commits together. If any step
fails the whole purchase is rolled back, and a listing can only be claimed once.
"""
import logging

from kisaanmitra.db.store import RowStore
from kisaanmitra.errors import (
    InsufficientCreditsError,
    ListingUnavailableError,
    NotFoundError,
    ValidationError,
)
from kisaanmitra.services.ledger import CreditLedger

logger = logging.getLogger(__name__)

# Flat reward credited to the seller per sale, independent of the price
SELLER_REWARD = 50


class PurchaseWorkflow:
    def __init__(self, store: RowStore, ledger: CreditLedger = None):
        self.store = store
        self.ledger = ledger or CreditLedger(store)

    def purchase(self, buyer_id: int, listing_id: int):
        with self.store.transaction():
            listing = self.store.first("marketplace_listings", id=listing_id)
            if listing is None:
                raise NotFoundError("Listing not found")
            if listing.status != "active":
                raise ListingUnavailableError(f"This product is {listing.status} and can no longer be bought")
            if listing.seller_id == buyer_id:
                raise ValidationError(errors={"listing": "You cannot buy your own listing"})

            price = listing.price
            balance = self.ledger.get_balance(buyer_id)
            if balance < price:
                raise InsufficientCreditsError(required=price, available=balance)

            claimed = self.store.update(
                "marketplace_listings",
                {"status": "sold"},
                filters={"id": listing_id},
                expected={"status": "active"},
            )
            if claimed == 0:
                raise ListingUnavailableError("This product was just sold to another buyer")

            self.ledger.debit(buyer_id, price)
            transaction = self.store.insert("marketplace_transactions", {
                "product_id": listing.id,
                "buyer_id": buyer_id,
                "seller_id": listing.seller_id,
                "amount": price,
                "credits_used": price,
                "status": "completed",
                "product_title": listing.title,
            })
            if self.store.first("farmer_profiles", user_id=listing.seller_id) is not None:
                self.ledger.credit(listing.seller_id, SELLER_REWARD)
            else:
                logger.warning("Seller %s has no farmer profile, sale reward skipped", listing.seller_id)

        logger.info(
            "User %s bought listing %s from user %s for %d credits (transaction %s)",
            buyer_id, listing_id, transaction.seller_id, price, transaction.id,
        )
        return transaction

    def history(self, user_id: int, limit: int = 100):
        return self.store.select(
            "marketplace_transactions",
            any_of=[("buyer_id", user_id), ("seller_id", user_id)],
            order_by="created_at",
            descending=True,
            limit=limit,
        )
