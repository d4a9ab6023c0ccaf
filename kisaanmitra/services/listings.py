import logging
from typing import Any, List, Mapping, Optional, Union

from pydantic import ValidationError as SchemaError

from kisaanmitra.db.store import RowStore
from kisaanmitra.errors import ListingUnavailableError, NotFoundError, ValidationError, field_errors
from kisaanmitra.schemas.listing import ListingCreate

logger = logging.getLogger(__name__)

UNKNOWN_SELLER = "Unknown Seller"
UNKNOWN_LOCATION = "Unknown Location"


class ListingCatalog:
    def __init__(self, store: RowStore):
        self.store = store

    def create(self, seller_id: int, fields: Union[ListingCreate, Mapping[str, Any]]):
        if not isinstance(fields, ListingCreate):
            try:
                fields = ListingCreate.model_validate(dict(fields))
            except SchemaError as e:
                raise ValidationError(errors=field_errors(e))

        profile = self.store.first("farmer_profiles", user_id=seller_id)
        listing = self.store.insert("marketplace_listings", {
            **fields.model_dump(),
            "seller_id": seller_id,
            "seller_name": profile.name if profile else UNKNOWN_SELLER,
            "seller_location": profile.location if profile else UNKNOWN_LOCATION,
            "status": "active",
        })
        logger.info("User %s listed %r for %d credits", seller_id, listing.title, listing.price)
        return listing

    def get(self, listing_id: int):
        listing = self.store.first("marketplace_listings", id=listing_id)
        if listing is None:
            raise NotFoundError("Listing not found")
        return listing

    def list_active(self, category: Optional[str] = None) -> List:
        filters = {"status": "active"}
        if category:
            filters["category"] = category
        return self.store.select(
            "marketplace_listings", filters=filters, order_by="created_at", descending=True
        )

    def list_by_seller(self, seller_id: int) -> List:
        return self.store.select(
            "marketplace_listings",
            filters={"seller_id": seller_id},
            order_by="created_at",
            descending=True,
        )

    def deactivate(self, listing_id: int):
        """Take an active listing off the market. Callers check ownership."""
        listing = self.get(listing_id)
        changed = self.store.update(
            "marketplace_listings",
            {"status": "inactive"},
            filters={"id": listing_id},
            expected={"status": "active"},
        )
        if changed == 0:
            raise ListingUnavailableError(f"Listing is already {listing.status}")
        logger.info("Listing %s deactivated", listing_id)
        return self.get(listing_id)
