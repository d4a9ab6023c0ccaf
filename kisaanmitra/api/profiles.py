from fastapi import APIRouter, Depends

from kisaanmitra.auth.session import get_current_user
from kisaanmitra.db.store import RowStore, get_store
from kisaanmitra.models.user import User
from kisaanmitra.schemas.farmer import FarmerProfile, FarmerProfileSave
from kisaanmitra.services.profiles import ProfileService

router = APIRouter()

@router.get("/me", response_model=FarmerProfile)
def read_my_profile(
    store: RowStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    return ProfileService(store).get(current_user.id)

@router.put("/me", response_model=FarmerProfile)
def save_my_profile(
    profile: FarmerProfileSave,
    store: RowStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    """
    Create the farmer profile on first submission, update it afterwards.

    - **name**, **location**, **crop_type**: at least 2 characters
    - **phone**: at least 10 characters
    - **address**: at least 5 characters
    - **land_size**: positive number
    """
    return ProfileService(store).save(current_user.id, profile)
