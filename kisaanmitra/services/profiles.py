import logging
from typing import Any, Mapping, Union

from pydantic import ValidationError as SchemaError

from kisaanmitra.db.store import RowStore
from kisaanmitra.errors import NotFoundError, ValidationError, field_errors
from kisaanmitra.schemas.farmer import FarmerProfileSave

logger = logging.getLogger(__name__)


class ProfileService:
    def __init__(self, store: RowStore):
        self.store = store

    def get(self, user_id: int):
        profile = self.store.first("farmer_profiles", user_id=user_id)
        if profile is None:
            raise NotFoundError("Farmer profile not found")
        return profile

    def save(self, user_id: int, fields: Union[FarmerProfileSave, Mapping[str, Any]]):
        """Create the profile on first submission, update it afterwards.

        Credit score and balance are never written here.
        """
        if not isinstance(fields, FarmerProfileSave):
            try:
                fields = FarmerProfileSave.model_validate(dict(fields))
            except SchemaError as e:
                raise ValidationError(errors=field_errors(e))
        values = fields.model_dump()

        with self.store.transaction():
            profile = self.store.first("farmer_profiles", user_id=user_id)
            if profile is None:
                profile = self.store.insert("farmer_profiles", {"user_id": user_id, **values})
                logger.info("Created farmer profile for user %s", user_id)
            else:
                self.store.update("farmer_profiles", values, filters={"user_id": user_id})
                logger.info("Updated farmer profile for user %s", user_id)
        return self.get(user_id)
