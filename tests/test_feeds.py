import pytest

from dao import bill as bill_dao
from dao import feed as feed_dao
from db.models.feed import FeedStatus
from utils.errors import ValidationError

from conftest import line


def test_location_counters_drive_aggregate(make_feed):
    f = make_feed(shop_stock=5, godown_stock=7, stock=999)
    assert f.stock == 12


def test_update_without_stock_keeps_counters(make_feed):
    f = make_feed(shop_stock=5, godown_stock=7)
    feed_dao.update_feed(f.id, "Tiwana", 50, 1650, brand="Premium")
    f = feed_dao.get_feed(f.id)
    assert (f.shop_stock, f.godown_stock, f.stock) == (5, 7, 12)
    assert f.label == "Tiwana (Premium) - 50kg"


def test_bare_aggregate_cannot_overwrite_located_stock(make_feed):
    f = make_feed(shop_stock=10, godown_stock=10)

    with pytest.raises(ValidationError):
        feed_dao.update_feed(f.id, "Renamed", 25, 850, stock=5)
    feed_dao.update_feed(f.id, "Tiwana", 25, 850, stock=20)

    f = feed_dao.get_feed(f.id)
    assert f.name == "Tiwana"
    assert (f.shop_stock, f.godown_stock, f.stock) == (10, 10, 20)


def test_aggregate_only_feed_can_be_restocked(make_feed):
    f = make_feed(stock=20)
    feed_dao.update_feed(f.id, "Tiwana", 25, 850, stock=35)
    assert feed_dao.get_feed(f.id).stock == 35


def test_list_reports_sold_and_total(make_feed, user, clock):
    f = make_feed(godown_stock=30)
    bill_dao.create_bill(user.id, [line(f, 4)], clock=clock)

    row = feed_dao.list_feeds()[0]
    assert row["stock"] == 26
    assert row["soldStock"] == 4
    assert row["totalStock"] == 30


def test_deactivated_feed_hidden_by_default(make_feed):
    f = make_feed()
    feed_dao.deactivate_feed(f.id)
    assert feed_dao.get_feed(f.id).status == FeedStatus.INACTIVE
    assert feed_dao.list_feeds() == []
    assert len(feed_dao.list_feeds(include_inactive=True)) == 1


def test_api_crud(client):
    r = client.post(
        "/api/feeds",
        json={"name": "Cattle Feed", "brand": "Premium", "weight": 25, "defaultPrice": 900, "godownStock": 40},
    )
    assert r.status_code == 201
    feed = r.get_json()["feed"]
    assert feed["godownStock"] == 40
    assert feed["stock"] == 40

    r = client.put(
        f"/api/feeds/{feed['id']}",
        json={"name": "Cattle Feed", "weight": 25, "defaultPrice": 950, "shopStock": 10},
    )
    assert r.get_json()["feed"]["stock"] == 50

    assert client.post("/api/feeds", json={"name": "x", "weight": 0, "defaultPrice": 1}).status_code == 400

    assert client.delete(f"/api/feeds/{feed['id']}").status_code == 200
    assert client.get("/api/feeds").get_json()["feeds"] == []
    assert client.get("/api/feeds/999").status_code == 404


def test_feed_list_cache_is_invalidated(client):
    assert client.get("/api/feeds").get_json()["feeds"] == []
    client.post("/api/feeds", json={"name": "Tiwana", "weight": 25, "defaultPrice": 850})
    assert len(client.get("/api/feeds").get_json()["feeds"]) == 1
