from app import create_app
from configs import db
from dao import admin as admin_dao

from conftest import ADMIN_MOBILE, ADMIN_PASSWORD


def _login(c, password=ADMIN_PASSWORD):
    return c.post("/api/auth/login", json={"mobileNo": ADMIN_MOBILE, "password": password})


def test_api_requires_login(anon):
    for path in ("/api/feeds", "/api/users", "/api/bills", "/api/dashboard/stats"):
        r = anon.get(path)
        assert r.status_code == 401
        assert r.get_json() == {"error": "Unauthorized"}


def test_index_is_public(anon):
    body = anon.get("/").get_json()
    assert body["status"] == "ok"
    assert body["authenticated"] is False


def test_login_session_and_logout(anon, admin):
    assert _login(anon, "wrong-pass").status_code == 401

    r = _login(anon)
    assert r.status_code == 200
    assert r.get_json()["admin"]["mobileNo"] == ADMIN_MOBILE
    assert anon.get("/api/auth/me").get_json()["admin"]["id"] == admin.id

    assert anon.post("/api/auth/logout").get_json() == {"success": True}
    assert anon.get("/api/auth/me").status_code == 401


def test_login_body_is_validated(anon):
    r = anon.post("/api/auth/login", json={"mobileNo": "123", "password": "x"})
    assert r.status_code == 400
    fields = {d["field"] for d in r.get_json()["details"]}
    assert fields == {"mobileNo", "password"}


def test_bearer_token(app, anon, admin):
    token = _login(app.test_client()).get_json()["token"]

    r = anon.get("/api/feeds", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200

    r = anon.get("/api/feeds", headers={"Authorization": f"Bearer {token}x"})
    assert r.status_code == 401


def test_disabled_admin(anon, admin):
    admin.is_active = False
    db.session.commit()
    assert _login(anon).status_code == 403


def test_password_reset_by_seed(anon, admin):
    admin_dao.create_or_update_admin(ADMIN_MOBILE, "new-secret")
    assert _login(anon).status_code == 401
    assert _login(anon, "new-secret").status_code == 200


def test_back_office_needs_admin(anon, client):
    assert anon.get("/manage/").status_code == 401
    assert client.get("/manage/").status_code == 200
    assert client.get("/manage/admin_feed/").status_code == 200


def test_back_office_views_bind_to_extension(recwarn):
    create_app({"TESTING": True, "SQLALCHEMY_DATABASE_URI": "sqlite://"})
    assert not [w for w in recwarn if "session" in str(w.message).lower()]
