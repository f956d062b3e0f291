from decimal import Decimal

import pytest

from configs import db
from dao import bill as bill_dao
from dao import payment as payment_dao
from dao import stock as stock_dao
from db.models.bill import Bill, BillStatus, StorageLocation
from db.models.feed import Feed
from db.models.user import UserStatus
from utils.errors import (
    DuplicateBill,
    InsufficientStock,
    NotFound,
    ValidationError,
)

from conftest import line


def _create(user, lines, clock, **kw):
    return bill_dao.create_bill(user.id, lines, clock=clock, **kw)


def _feed(feed_id):
    return db.session.get(Feed, feed_id)


def test_new_bill_is_pending_and_debits_godown(user, feed, clock):
    bill = _create(user, [line(feed, 10)], clock)

    assert bill.total_amount == Decimal("8500")
    assert bill.status == BillStatus.PENDING
    assert bill.paid_amount == 0
    assert bill.pending_amount == Decimal("8500")
    assert bill.bill_number == "BILL-000001"
    assert bill.created_at == clock.now

    f = _feed(feed.id)
    assert f.godown_stock == 90
    assert f.stock == 90
    assert bill.items[0].stock_source == StorageLocation.GODOWN


def test_bill_then_full_payment(user, feed, clock):
    bill = _create(user, [line(feed, 10)], clock)
    tx = payment_dao.record_payment(bill.id, 8500)

    bill = bill_dao.get_bill(bill.id)
    assert bill.status == BillStatus.PAID
    assert bill.pending_amount == 0
    assert tx.amount == Decimal("8500")
    assert len(bill.transactions) == 1


def test_repeat_within_window_is_duplicate(user, feed, clock):
    first = _create(user, [line(feed, 10)], clock)
    clock.advance(5)

    with pytest.raises(DuplicateBill) as ei:
        _create(user, [line(feed, 10)], clock)

    assert ei.value.bill_id == first.id
    assert ei.value.to_dict()["duplicateBillNumber"] == first.bill_number
    assert _feed(feed.id).godown_stock == 90
    assert Bill.query.count() == 1


def test_repeat_after_window_is_accepted(user, feed, clock):
    _create(user, [line(feed, 10)], clock)
    clock.advance(11)
    second = _create(user, [line(feed, 10)], clock)

    assert second.bill_number == "BILL-000002"
    assert _feed(feed.id).godown_stock == 80


def test_same_total_different_items_is_not_duplicate(user, make_feed, clock):
    a = make_feed("A", price=100, godown_stock=50)
    b = make_feed("B", price=100, godown_stock=50)
    _create(user, [line(a, 2)], clock)
    _create(user, [line(b, 2)], clock)

    assert Bill.query.count() == 2


def test_duplicate_window_is_configurable(user, feed, clock):
    _create(user, [line(feed, 1)], clock, window_seconds=60)
    clock.advance(30)
    with pytest.raises(DuplicateBill):
        _create(user, [line(feed, 1)], clock, window_seconds=60)


def test_duplicate_guard_is_best_effort(user, feed, clock, monkeypatch):
    """
    Two submissions that both look for a recent twin before either commits
    are both accepted. The window check catches double clicks and retries;
    it does not make bills unique.
    """
    lines = [{"feed_id": feed.id, "quantity": Decimal("10")}]
    seen = [
        bill_dao.find_duplicate(user.id, Decimal("8500.00"), lines, clock.now)
        for _ in range(2)
    ]
    assert seen == [None, None]

    _create(user, [line(feed, 10)], clock)
    # the second submission already did its lookup
    monkeypatch.setattr(bill_dao, "find_duplicate", lambda *a, **kw: seen[1])
    _create(user, [line(feed, 10)], clock)

    assert Bill.query.count() == 2
    assert _feed(feed.id).godown_stock == 80


def test_other_user_is_not_duplicate(make_user, feed, clock):
    _create(make_user("A"), [line(feed, 1)], clock)
    _create(make_user("B"), [line(feed, 1)], clock)
    assert Bill.query.count() == 2


def test_insufficient_stock_leaves_nothing_behind(user, feed, clock):
    with pytest.raises(InsufficientStock) as ei:
        _create(user, [line(feed, 101)], clock)

    assert ei.value.available == 100
    assert "Available: 100" in ei.value.message
    assert Bill.query.count() == 0
    assert _feed(feed.id).godown_stock == 100


def test_failure_after_first_debit_rolls_everything_back(user, make_feed, clock, monkeypatch):
    a = make_feed("A", godown_stock=10)
    b = make_feed("B", godown_stock=10)
    real_check = stock_dao.check_lines

    def check_then_drain(lines, lock=False):
        feeds = real_check(lines, lock=lock)
        if lock:
            # a competing sale empties most of B after the locked re-check
            db.session.query(Feed).filter(Feed.id == b.id).update(
                {Feed.godown_stock: 2, Feed.stock: 2}, synchronize_session=False
            )
        return feeds

    monkeypatch.setattr(stock_dao, "check_lines", check_then_drain)
    with pytest.raises(InsufficientStock) as ei:
        _create(user, [line(a, 5), line(b, 5)], clock)

    assert ei.value.available == 2
    assert Bill.query.count() == 0
    for f in (a, b):
        f = _feed(f.id)
        assert (f.shop_stock, f.godown_stock, f.stock) == (0, 10, 10)


def test_repeated_lines_are_summed_against_stock(user, feed, clock):
    with pytest.raises(InsufficientStock):
        _create(user, [line(feed, 60), line(feed, 60)], clock)
    assert _feed(feed.id).godown_stock == 100


def test_shop_sale_draws_from_shop(user, make_feed, clock):
    f = make_feed(shop_stock=5, godown_stock=100)
    bill = _create(user, [line(f, 3, location="shop")], clock)

    f = _feed(f.id)
    assert (f.shop_stock, f.godown_stock, f.stock) == (2, 100, 102)
    assert bill.items[0].storage_location == "shop"

    with pytest.raises(InsufficientStock):
        _create(user, [line(f, 3, location="Shop")], clock)


def test_custom_location_draws_from_godown(user, make_feed, clock):
    f = make_feed(shop_stock=5, godown_stock=10)
    bill = _create(user, [line(f, 4, location="Back shed")], clock)

    f = _feed(f.id)
    assert (f.shop_stock, f.godown_stock) == (5, 6)
    assert bill.items[0].storage_location == "Back shed"


def test_legacy_stock_used_when_locations_empty(user, make_feed, clock):
    f = make_feed(stock=20)
    bill = _create(user, [line(f, 5)], clock)

    f = _feed(f.id)
    assert (f.shop_stock, f.godown_stock, f.stock) == (0, 0, 15)
    assert bill.items[0].stock_source == StorageLocation.LEGACY


def test_shop_sale_ignores_drifted_aggregate(user, make_feed, clock):
    f = make_feed(shop_stock=10, godown_stock=10)
    db.session.query(Feed).filter(Feed.id == f.id).update({Feed.stock: 5})
    db.session.commit()

    _create(user, [line(f, 8, location="shop")], clock)

    f = _feed(f.id)
    assert (f.shop_stock, f.godown_stock, f.stock) == (2, 10, 0)


def test_delete_restores_exact_counter(user, make_feed, clock):
    f = make_feed(shop_stock=10, godown_stock=10)
    bill = _create(user, [line(f, 4, location="shop"), line(f, 3)], clock)
    payment_dao.record_payment(bill.id, 100)

    bill_dao.delete_bill(bill.id)

    f = _feed(f.id)
    assert (f.shop_stock, f.godown_stock, f.stock) == (10, 10, 20)
    assert Bill.query.count() == 0
    assert payment_dao.list_transactions() == []


def test_bill_number_is_not_reused_after_delete(user, make_feed, clock):
    f = make_feed(godown_stock=100)
    first = _create(user, [line(f, 1)], clock)
    _create(user, [line(f, 2)], clock)
    bill_dao.delete_bill(first.id)

    third = _create(user, [line(f, 3)], clock)
    assert third.bill_number == "BILL-000003"


@pytest.mark.parametrize(
    "status, paid, expected",
    [
        ("paid", None, (Decimal("1700"), Decimal("0"), BillStatus.PAID)),
        ("partial", 700, (Decimal("700"), Decimal("1000"), BillStatus.PARTIAL)),
        (None, 1700, (Decimal("1700"), Decimal("0"), BillStatus.PAID)),
        (None, 0, (Decimal("0"), Decimal("1700"), BillStatus.PENDING)),
    ],
)
def test_settle_amounts(status, paid, expected):
    assert bill_dao.settle_amounts(1700, status, paid) == expected


@pytest.mark.parametrize(
    "status, paid",
    [("partial", None), ("paid", 100), ("pending", 100), (None, 1800), (None, -1)],
)
def test_settle_amounts_rejects_inconsistent_input(status, paid):
    with pytest.raises(ValidationError):
        bill_dao.settle_amounts(1700, status, paid)


def test_fractional_amounts_are_rounded_to_cents(user, feed, clock):
    bill = _create(
        user,
        [line(feed, Decimal("1.5"), Decimal("33.33"))],
        clock,
        paid_amount=Decimal("49.99"),
    )

    # 1.5 x 33.33 = 49.995
    assert bill.total_amount == Decimal("50.00")
    assert bill.items[0].total_price == Decimal("50.00")
    assert bill.pending_amount == Decimal("0.01")
    assert bill.paid_amount + bill.pending_amount == bill.total_amount
    assert bill.status == BillStatus.PARTIAL

    with pytest.raises(DuplicateBill):
        _create(user, [line(feed, Decimal("1.5"), Decimal("33.33"))], clock)


def test_zero_total_bill_is_paid(user, feed, clock):
    bill = _create(user, [line(feed, 1, price=0)], clock)
    assert bill.status == BillStatus.PAID
    assert bill.pending_amount == 0


def test_unknown_user_or_feed(user, feed, clock):
    with pytest.raises(NotFound) as ei:
        bill_dao.create_bill(999, [line(feed, 1)], clock=clock)
    assert ei.value.status_code == 400

    bad = line(feed, 1)
    bad["feed_id"] = 999
    with pytest.raises(NotFound):
        _create(user, [bad], clock)


def test_bill_reactivates_user(make_user, feed, clock):
    u = make_user(status="inactive")
    _create(u, [line(feed, 1)], clock)
    assert u.status == UserStatus.ACTIVE


# ---------- API ----------
def _body(user, feed, qty=10, **kw):
    body = {
        "userId": user.id,
        "items": [{"feedId": feed.id, "quantity": qty, "unitPrice": 850}],
    }
    body.update(kw)
    return body


def test_api_create_and_list(client, user, feed):
    r = client.post("/api/bills", json=_body(user, feed))
    assert r.status_code == 201
    bill = r.get_json()["bill"]
    assert bill["totalAmount"] == 8500
    assert bill["status"] == "pending"
    assert bill["user"]["name"] == user.name
    assert bill["items"][0]["storageLocation"] == "godown"

    bills = client.get(f"/api/bills?userId={user.id}").get_json()["bills"]
    assert [b["id"] for b in bills] == [bill["id"]]


def test_api_duplicate_is_409(client, user, feed, clock):
    first = client.post("/api/bills", json=_body(user, feed)).get_json()["bill"]
    clock.advance(3)
    r = client.post("/api/bills", json=_body(user, feed))

    assert r.status_code == 409
    assert r.get_json()["duplicateBillId"] == first["id"]


def test_api_rejects_bad_body(client, user, feed):
    r = client.post("/api/bills", json={"userId": user.id, "items": []})
    assert r.status_code == 400
    assert r.get_json()["details"]

    r = client.post("/api/bills", json=_body(user, feed, qty=0))
    assert r.status_code == 400

    body = _body(user, feed)
    body["items"][0]["unitPrice"] = "33.333"
    assert client.post("/api/bills", json=body).status_code == 400


def test_api_insufficient_stock(client, user, feed):
    r = client.post("/api/bills", json=_body(user, feed, qty=500))
    assert r.status_code == 400
    assert r.get_json()["available"] == 100


def test_api_detail_and_delete(client, user, feed):
    bill = client.post("/api/bills", json=_body(user, feed, paidAmount=500)).get_json()["bill"]
    assert bill["status"] == "partial"

    detail = client.get(f"/api/bills/{bill['id']}").get_json()["bill"]
    assert detail["transactions"] == []

    assert client.delete(f"/api/bills/{bill['id']}").status_code == 200
    assert client.get(f"/api/bills/{bill['id']}").status_code == 404
    assert _feed(feed.id).godown_stock == 100
