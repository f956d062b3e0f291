from datetime import datetime, timedelta

import pytest
from flask import g

from app import create_app
from configs import db
from dao import admin as admin_dao
from dao import feed as feed_dao
from dao import user as user_dao

ADMIN_MOBILE = "7410537296"
ADMIN_PASSWORD = "admin123"


class FrozenClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock():
    return FrozenClock(datetime(2025, 3, 14, 10, 30, 0))


@pytest.fixture
def app(clock):
    app = create_app(
        {
            "TESTING": True,
            "SECRET_KEY": "test",
            "SQLALCHEMY_DATABASE_URI": "sqlite://",
            "CLOCK": clock,
            "LOG_LEVEL": "WARNING",
        }
    )

    @app.teardown_request
    def _forget_login_user(exc):
        # The fixture's app context is reused by every test-client request, so
        # drop Flask-Login's cached user to keep clients isolated.
        g.pop("_login_user", None)

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def admin(app):
    return admin_dao.create_or_update_admin(ADMIN_MOBILE, ADMIN_PASSWORD)


@pytest.fixture
def client(app, admin):
    c = app.test_client()
    r = c.post(
        "/api/auth/login", json={"mobileNo": ADMIN_MOBILE, "password": ADMIN_PASSWORD}
    )
    assert r.status_code == 200
    return c


@pytest.fixture
def anon(app):
    return app.test_client()


@pytest.fixture
def make_feed(app):
    def _make(name="Tiwana", price=850, **kw):
        kw.setdefault("weight", 25)
        kw.setdefault("brand", "Premium")
        return feed_dao.create_feed(name, kw.pop("weight"), price, **kw)

    return _make


@pytest.fixture
def make_user(app):
    counter = {"n": 0}

    def _make(name="Rajesh Kumar", user_type="BMC", **kw):
        counter["n"] += 1
        kw.setdefault("mobile_no", f"98765432{counter['n']:02d}")
        return user_dao.create_user(name, kw.pop("mobile_no"), user_type=user_type, **kw)

    return _make


@pytest.fixture
def feed(make_feed):
    return make_feed(godown_stock=100)


@pytest.fixture
def user(make_user):
    return make_user()


def line(feed, qty, price=None, location=None):
    return {
        "feed_id": feed.id,
        "quantity": qty,
        "unit_price": feed.default_price if price is None else price,
        "storage_location": location,
    }
