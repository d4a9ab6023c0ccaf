"""Tests for loan eligibility and applications."""
from decimal import Decimal

import pytest

from kisaanmitra.errors import NotFoundError, ValidationError
from kisaanmitra.services.loans import LoanService, is_eligible, max_loan_amount
from factories import create_farmer


@pytest.mark.parametrize("score,amount", [
    (0, 0),
    (599, 0),
    (600, 25000),
    (649, 25000),
    (650, 50000),
    (699, 50000),
    (700, 100000),
    (749, 100000),
    (750, 200000),
    (849, 200000),
])
def test_max_loan_amount(score, amount):
    assert max_loan_amount(score) == amount


def test_is_eligible():
    assert is_eligible(600)
    assert is_eligible(800)
    assert not is_eligible(599)


@pytest.fixture
def loans(store):
    return LoanService(store)


def test_apply(db, loans):
    """Test a loan application within the limit."""
    user = create_farmer(db, "kiran", score=680)

    application = loans.apply(user.id, 40000, "Drip irrigation for two acres")
    db.commit()

    assert application.status == "pending"
    assert application.amount == Decimal("40000")
    assert application.credit_score_at_application == 680
    assert [a.id for a in loans.list_for_user(user.id)] == [application.id]


def test_apply_above_limit(db, loans, store):
    user = create_farmer(db, "kiran", score=610)
    with pytest.raises(ValidationError) as exc_info:
        loans.apply(user.id, 25001, "Buying a power tiller")
    assert "amount" in exc_info.value.errors
    assert store.select("loan_applications") == []


def test_apply_when_not_eligible(db, loans):
    user = create_farmer(db, "kiran", score=550)
    with pytest.raises(ValidationError) as exc_info:
        loans.apply(user.id, 1000, "Seeds for the kharif season")
    assert "credit_score" in exc_info.value.errors


@pytest.mark.parametrize("amount,purpose,field", [
    (0, "Seeds for the kharif season", "amount"),
    (-100, "Seeds for the kharif season", "amount"),
    ("lots", "Seeds for the kharif season", "amount"),
    (1000, "Seeds", "purpose"),
])
def test_apply_validation(db, loans, amount, purpose, field):
    user = create_farmer(db, "kiran", score=700)
    with pytest.raises(ValidationError) as exc_info:
        loans.apply(user.id, amount, purpose)
    assert field in exc_info.value.errors


def test_apply_without_profile(db, loans):
    user = create_farmer(db, "kiran", with_profile=False)
    with pytest.raises(NotFoundError):
        loans.apply(user.id, 1000, "Seeds for the kharif season")


def test_eligibility(db, loans):
    user = create_farmer(db, "kiran", score=720)
    assert loans.eligibility(user.id) == {
        "credit_score": 720,
        "eligible": True,
        "max_loan_amount": 100000,
    }
