from kisaanmitra.models.user import User, RevokedToken
from kisaanmitra.models.farmer import FarmerProfile
from kisaanmitra.models.listing import Listing
from kisaanmitra.models.transaction import Transaction
from kisaanmitra.models.loan import LoanApplication
from kisaanmitra.db.session import engine, Base


def init_db(bind=None):
    # Create all tables
    Base.metadata.create_all(bind=bind or engine)
