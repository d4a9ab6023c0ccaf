"""Tests for the purchase workflow."""
import threading

import pytest
from sqlalchemy.orm import sessionmaker

from kisaanmitra.db.init import init_db
from kisaanmitra.db.session import make_engine
from kisaanmitra.db.store import RowStore
from kisaanmitra.errors import (
    InsufficientCreditsError,
    KisaanMitraError,
    ListingUnavailableError,
    NotFoundError,
    RemoteStoreError,
    ValidationError,
)
from kisaanmitra.services.ledger import CreditLedger
from kisaanmitra.services.marketplace import SELLER_REWARD, PurchaseWorkflow
from factories import create_farmer, create_listing


@pytest.fixture
def workflow(store):
    return PurchaseWorkflow(store)


@pytest.fixture
def seller(db):
    return create_farmer(db, "seller", balance=10)


@pytest.fixture
def buyer(db):
    return create_farmer(db, "buyer", balance=200)


def transactions_for(store, listing_id):
    return store.select("marketplace_transactions", filters={"product_id": listing_id})


def test_purchase(store, workflow, buyer, seller):
    """Test a successful purchase end to end."""
    listing = create_listing(store, seller.id, price=120)

    transaction = workflow.purchase(buyer.id, listing.id)

    ledger = CreditLedger(store)
    assert ledger.get_balance(buyer.id) == 80
    assert ledger.get_balance(seller.id) == 10 + SELLER_REWARD
    assert store.first("marketplace_listings", id=listing.id).status == "sold"

    recorded = transactions_for(store, listing.id)
    assert len(recorded) == 1
    assert recorded[0].id == transaction.id
    assert transaction.credits_used == 120
    assert transaction.amount == 120
    assert transaction.status == "completed"
    assert transaction.buyer_id == buyer.id
    assert transaction.seller_id == seller.id
    assert transaction.product_title == "Fresh Tomatoes"


def test_seller_reward_is_flat(store, workflow, buyer, seller):
    """Test that the seller earns the same reward whatever the price."""
    listing = create_listing(store, seller.id, price=5)
    workflow.purchase(buyer.id, listing.id)
    assert CreditLedger(store).get_balance(seller.id) == 10 + 50


def test_purchase_with_insufficient_credits(store, workflow, seller, db):
    """Test that a buyer who cannot afford the listing changes nothing."""
    poor = create_farmer(db, "poor", balance=100)
    listing = create_listing(store, seller.id, price=120)

    with pytest.raises(InsufficientCreditsError) as exc_info:
        workflow.purchase(poor.id, listing.id)

    assert exc_info.value.required == 120
    assert exc_info.value.available == 100
    ledger = CreditLedger(store)
    assert ledger.get_balance(poor.id) == 100
    assert ledger.get_balance(seller.id) == 10
    assert store.first("marketplace_listings", id=listing.id).status == "active"
    assert transactions_for(store, listing.id) == []


@pytest.mark.parametrize("status", ["sold", "inactive"])
def test_purchase_of_unavailable_listing(store, workflow, buyer, seller, status):
    """Test that sold or withdrawn listings cannot be bought."""
    listing = create_listing(store, seller.id, status=status)

    with pytest.raises(ListingUnavailableError):
        workflow.purchase(buyer.id, listing.id)

    assert CreditLedger(store).get_balance(buyer.id) == 200
    assert CreditLedger(store).get_balance(seller.id) == 10
    assert transactions_for(store, listing.id) == []


def test_listing_cannot_be_bought_twice(store, workflow, buyer, seller, db):
    """Test that a retried or second purchase is rejected."""
    other = create_farmer(db, "other", balance=500)
    listing = create_listing(store, seller.id, price=120)

    workflow.purchase(buyer.id, listing.id)
    with pytest.raises(ListingUnavailableError):
        workflow.purchase(other.id, listing.id)
    with pytest.raises(ListingUnavailableError):
        workflow.purchase(buyer.id, listing.id)

    assert len(transactions_for(store, listing.id)) == 1
    assert CreditLedger(store).get_balance(other.id) == 500
    assert CreditLedger(store).get_balance(buyer.id) == 80


def test_purchase_of_missing_listing(workflow, buyer):
    """Test buying a listing that does not exist."""
    with pytest.raises(NotFoundError):
        workflow.purchase(buyer.id, 12345)


def test_purchase_of_own_listing(store, workflow, seller):
    """Test that sellers cannot buy their own listings."""
    listing = create_listing(store, seller.id, price=5)
    with pytest.raises(ValidationError):
        workflow.purchase(seller.id, listing.id)
    assert store.first("marketplace_listings", id=listing.id).status == "active"


def test_failure_rolls_back_whole_purchase(store, buyer, seller, monkeypatch):
    """Test that a failure while rewarding the seller undoes every step."""
    ledger = CreditLedger(store)
    listing = create_listing(store, seller.id, price=120)

    def broken_credit(user_id, amount):
        raise RemoteStoreError("increment failed")

    monkeypatch.setattr(ledger, "credit", broken_credit)

    with pytest.raises(RemoteStoreError):
        PurchaseWorkflow(store, ledger).purchase(buyer.id, listing.id)

    assert ledger.get_balance(buyer.id) == 200
    assert ledger.get_balance(seller.id) == 10
    assert store.first("marketplace_listings", id=listing.id).status == "active"
    assert transactions_for(store, listing.id) == []


def test_seller_without_profile(store, workflow, buyer, db):
    """Test that a sale still completes when the seller has no profile."""
    seller = create_farmer(db, "ghost", with_profile=False)
    listing = create_listing(store, seller.id, price=20)

    workflow.purchase(buyer.id, listing.id)

    assert CreditLedger(store).get_balance(buyer.id) == 180
    assert store.first("marketplace_listings", id=listing.id).status == "sold"


def test_history(store, workflow, buyer, seller):
    """Test that history covers purchases and sales, newest first."""
    first = create_listing(store, seller.id, title="Basmati Rice", price=10)
    second = create_listing(store, seller.id, title="Wheat Seeds", price=20)
    workflow.purchase(buyer.id, first.id)
    workflow.purchase(buyer.id, second.id)

    assert [t.product_title for t in workflow.history(buyer.id)] == ["Wheat Seeds", "Basmati Rice"]
    assert len(workflow.history(seller.id)) == 2


def test_concurrent_purchases_sell_listing_once(tmp_path):
    """Test that two buyers racing for one listing cannot both win."""
    engine = make_engine(f"sqlite:///{tmp_path / 'race.db'}")
    init_db(bind=engine)
    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    setup = Session()
    seller = create_farmer(setup, "seller", balance=0)
    buyers = [create_farmer(setup, f"buyer{i}", balance=300) for i in range(2)]
    listing = create_listing(RowStore(setup), seller.id, price=120)
    listing_id = listing.id
    buyer_ids = [b.id for b in buyers]
    seller_id = seller.id
    setup.close()

    barrier = threading.Barrier(len(buyer_ids))
    outcomes = {}

    def attempt(buyer_id):
        session = Session()
        try:
            barrier.wait()
            PurchaseWorkflow(RowStore(session)).purchase(buyer_id, listing_id)
            outcomes[buyer_id] = "ok"
        except KisaanMitraError as e:
            outcomes[buyer_id] = e
        finally:
            session.close()

    threads = [threading.Thread(target=attempt, args=(buyer_id,)) for buyer_id in buyer_ids]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)

    winners = [buyer_id for buyer_id, outcome in outcomes.items() if outcome == "ok"]
    assert len(outcomes) == 2
    assert len(winners) <= 1

    check = Session()
    store = RowStore(check)
    ledger = CreditLedger(store)
    sold = transactions_for(store, listing_id)
    assert len(sold) == len(winners)
    for buyer_id in buyer_ids:
        expected = 300 - 120 if buyer_id in winners else 300
        assert ledger.get_balance(buyer_id) == expected
    assert ledger.get_balance(seller_id) == 50 * len(winners)
    check.close()
    engine.dispose()
