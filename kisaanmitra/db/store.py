"""Row-based data access over a SQLAlchemy session.

Tables are addressed by name. Balance changes go through :meth:`RowStore.increment`
and :meth:`RowStore.decrement`, which run as single conditional UPDATE statements so
concurrent writers cannot lose each other's changes.
"""
import logging
from contextlib import contextmanager
from functools import wraps
from typing import Any, Dict, Iterable, List, Optional, Tuple

from fastapi import Depends
from sqlalchemy import and_, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from kisaanmitra.db.session import get_db
from kisaanmitra.errors import NotFoundError, RemoteStoreError
from kisaanmitra.models.farmer import FarmerProfile
from kisaanmitra.models.listing import Listing
from kisaanmitra.models.loan import LoanApplication
from kisaanmitra.models.transaction import Transaction

logger = logging.getLogger(__name__)

TABLES = {
    "farmer_profiles": FarmerProfile,
    "marketplace_listings": Listing,
    "marketplace_transactions": Transaction,
    "loan_applications": LoanApplication,
}


def _store_call(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except SQLAlchemyError as e:
            raise RemoteStoreError(f"{func.__name__} failed: {e}") from e
    return wrapper


class RowStore:
    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def model(table: str):
        try:
            return TABLES[table]
        except KeyError:
            raise ValueError(f"Unknown table: {table}")

    @staticmethod
    def _conditions(model, filters: Optional[Dict[str, Any]]) -> list:
        return [getattr(model, column) == value for column, value in (filters or {}).items()]

    @_store_call
    def select(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        any_of: Optional[Iterable[Tuple[str, Any]]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Any]:
        model = self.model(table)
        query = select(model)

        conditions = self._conditions(model, filters)
        if conditions:
            query = query.where(and_(*conditions))
        if any_of:
            query = query.where(or_(*[getattr(model, column) == value for column, value in any_of]))

        if order_by:
            sort_column = getattr(model, order_by)
            # id breaks ties between rows stamped within the same second
            if descending:
                query = query.order_by(sort_column.desc(), model.id.desc())
            else:
                query = query.order_by(sort_column, model.id)
        if limit is not None:
            query = query.limit(limit)

        return list(self.db.scalars(query).all())

    def first(self, table: str, **filters) -> Optional[Any]:
        rows = self.select(table, filters=filters, limit=1)
        return rows[0] if rows else None

    @_store_call
    def insert(self, table: str, values: Dict[str, Any]) -> Any:
        row = self.model(table)(**values)
        self.db.add(row)
        self.db.flush()
        return row

    @_store_call
    def update(
        self,
        table: str,
        values: Dict[str, Any],
        filters: Dict[str, Any],
        expected: Optional[Dict[str, Any]] = None,
    ) -> int:
        """Update matching rows and return how many changed.

        ``expected`` adds compare-and-set conditions: rows whose current values differ
        are left alone, so a caller can detect that another writer got there first.
        """
        model = self.model(table)
        conditions = self._conditions(model, filters) + self._conditions(model, expected)
        stmt = update(model).where(and_(*conditions)).values(**values)
        return self._execute(model, stmt)

    @_store_call
    def increment(self, row_id: int, amount: int) -> int:
        """Add ``amount`` to the balance of the profile owned by ``row_id``."""
        stmt = (
            update(FarmerProfile)
            .where(FarmerProfile.user_id == row_id)
            .values(credit_balance=FarmerProfile.credit_balance + amount)
        )
        if self._execute(FarmerProfile, stmt) == 0:
            raise NotFoundError(f"No farmer profile for user {row_id}")
        return self._balance(row_id)

    @_store_call
    def decrement(self, row_id: int, amount: int) -> Optional[int]:
        """Subtract ``amount`` only if the balance covers it.

        Returns the new balance, or None when the balance is too low.
        """
        stmt = (
            update(FarmerProfile)
            .where(FarmerProfile.user_id == row_id, FarmerProfile.credit_balance >= amount)
            .values(credit_balance=FarmerProfile.credit_balance - amount)
        )
        if self._execute(FarmerProfile, stmt) == 0:
            if self._balance(row_id) is None:
                raise NotFoundError(f"No farmer profile for user {row_id}")
            return None
        return self._balance(row_id)

    def _execute(self, model, stmt) -> int:
        self.db.flush()
        changed = self.db.execute(stmt.execution_options(synchronize_session=False)).rowcount
        # Loaded rows of this table may now be stale
        for obj in list(self.db.identity_map.values()):
            if isinstance(obj, model):
                self.db.expire(obj)
        return changed

    def _balance(self, row_id: int) -> Optional[int]:
        return self.db.scalar(
            select(FarmerProfile.credit_balance).where(FarmerProfile.user_id == row_id)
        )

    @contextmanager
    def transaction(self):
        """Commit everything done inside the block, or nothing."""
        try:
            yield self
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Store transaction rolled back")
            raise RemoteStoreError(str(e)) from e
        except Exception:
            self.db.rollback()
            raise


def get_store(db: Session = Depends(get_db)) -> RowStore:
    return RowStore(db)
