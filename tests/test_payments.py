from decimal import Decimal

import pytest

from dao import bill as bill_dao
from dao import payment as payment_dao
from db.models.bill import BillStatus
from utils.errors import AmountExceedsPending, NotFound, ValidationError

from conftest import line


@pytest.fixture
def bill(user, feed, clock):
    # 2 x 850
    return bill_dao.create_bill(user.id, [line(feed, 2)], clock=clock)


def test_partial_then_paid(bill):
    payment_dao.record_payment(bill.id, 700)
    b = bill_dao.get_bill(bill.id)
    assert (b.paid_amount, b.pending_amount, b.status) == (700, 1000, BillStatus.PARTIAL)

    payment_dao.record_payment(bill.id, 1000, description="Cash")
    b = bill_dao.get_bill(bill.id)
    assert (b.paid_amount, b.pending_amount, b.status) == (1700, 0, BillStatus.PAID)
    assert b.paid_amount + b.pending_amount == b.total_amount

    descriptions = [t.description for t in payment_dao.list_transactions(bill.id)]
    assert sorted(descriptions) == ["Cash", f"Payment for {bill.bill_number}"]


def test_overpayment_is_rejected(bill):
    with pytest.raises(AmountExceedsPending) as ei:
        payment_dao.record_payment(bill.id, 1700.01)
    assert ei.value.to_dict()["pendingAmount"] == 1700
    assert payment_dao.list_transactions(bill.id) == []


@pytest.mark.parametrize("amount", [0, -5])
def test_non_positive_amount(bill, amount):
    with pytest.raises(ValidationError):
        payment_dao.record_payment(bill.id, amount)


def test_unknown_bill(app):
    with pytest.raises(NotFound):
        payment_dao.record_payment(12345, 10)


def test_paid_bill_takes_no_more(bill):
    payment_dao.record_payment(bill.id, 1700)
    with pytest.raises(AmountExceedsPending):
        payment_dao.record_payment(bill.id, 1)


def test_api_payment_flow(client, bill):
    r = client.post("/api/payments", json={"billId": bill.id, "amount": 200})
    assert r.status_code == 201
    assert r.get_json()["transaction"]["amount"] == 200

    r = client.post("/api/payments", json={"billId": bill.id, "amount": 5000})
    assert r.status_code == 400
    assert r.get_json()["error"] == "Payment amount exceeds pending amount"

    r = client.post("/api/payments", json={"billId": bill.id, "amount": 0})
    assert r.status_code == 400

    txs = client.get(f"/api/payments?billId={bill.id}").get_json()["transactions"]
    assert len(txs) == 1
    assert Decimal(str(txs[0]["amount"])) == Decimal("200")
