from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from kisaanmitra.auth.session import get_current_user
from kisaanmitra.db.store import RowStore, get_store
from kisaanmitra.models.user import User
from kisaanmitra.schemas.listing import Listing, ListingCreate
from kisaanmitra.schemas.transaction import Transaction
from kisaanmitra.services.listings import ListingCatalog
from kisaanmitra.services.marketplace import PurchaseWorkflow

router = APIRouter()

@router.get(
    "/listings",
    response_model=List[Listing],
    summary="Browse active listings",
    description="All listings still for sale, newest first."
)
def read_active_listings(
    category: Optional[str] = Query(None, description="Filter by category"),
    store: RowStore = Depends(get_store)
):
    return ListingCatalog(store).list_active(category=category)

@router.post(
    "/listings",
    response_model=Listing,
    status_code=status.HTTP_201_CREATED,
    summary="List a product for sale"
)
def create_listing(
    listing: ListingCreate,
    store: RowStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    """
    Put a product on the marketplace.

    - **title**: at least 5 characters
    - **description**: at least 10 characters
    - **price**: price in credits (positive whole number)
    - **category**: product category
    - **image_url**: optional image URL
    """
    with store.transaction():
        db_listing = ListingCatalog(store).create(current_user.id, listing)
    return db_listing

@router.get("/listings/mine", response_model=List[Listing], summary="My listings")
def read_my_listings(
    store: RowStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    return ListingCatalog(store).list_by_seller(current_user.id)

@router.get("/listings/{listing_id}", response_model=Listing)
def read_listing(listing_id: int, store: RowStore = Depends(get_store)):
    return ListingCatalog(store).get(listing_id)

@router.post("/listings/{listing_id}/deactivate", response_model=Listing)
def deactivate_listing(
    listing_id: int,
    store: RowStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    catalog = ListingCatalog(store)
    db_listing = catalog.get(listing_id)
    # Only the seller can take a listing down
    if db_listing.seller_id != current_user.id:
        raise HTTPException(status_code=403, detail="Not enough permissions")

    with store.transaction():
        db_listing = catalog.deactivate(listing_id)
    return db_listing

@router.post(
    "/listings/{listing_id}/purchase",
    response_model=Transaction,
    status_code=status.HTTP_201_CREATED,
    summary="Buy a listing with credits"
)
def purchase_listing(
    listing_id: int,
    store: RowStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    """
    Buy a listing. The buyer is debited the listing price, the listing is marked
    sold and the seller earns a flat 50 credit reward, all or nothing.
    """
    return PurchaseWorkflow(store).purchase(current_user.id, listing_id)
