"""End-to-end HTTP flows: login, design, checkout, history, access control."""

import pytest
from sqlalchemy import func, select

from modules.order.draft import load_draft
from modules.order.models import TacoOrder, taco_order_tacos
from modules.taco.models import Taco
from modules.user.service import user_service

TEST_USERNAME = "habuma"
TEST_PASSWORD = "password"

HTML = {"accept": "text/html"}

VALID_ORDER = {
    "delivery_name": "Ada Lovelace",
    "delivery_address": "12 Analytical Way",
    "delivery_city": "London",
    "delivery_state": "LN",
    "delivery_zip": "10101",
    "cc_number": "4111111111111111",
    "cc_expiration": "12/29",
    "cc_cvv": "123",
}


def test_home_is_public(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "Welcome to Taco Cloud" in response.text


def test_protected_page_redirects_browser_to_login(client):
    response = client.get("/design", headers=HTML, follow_redirects=False)

    assert response.status_code == 302
    assert response.headers["location"] == "/login?next=%2Fdesign"


def test_protected_page_returns_401_for_api_clients(client):
    response = client.get("/orders", headers={"accept": "application/json"})
    assert response.status_code == 401


def test_wrong_password_rerenders_login(client):
    response = client.post("/login", data={"username": TEST_USERNAME, "password": "nope"})

    assert response.status_code == 401
    assert "Invalid username or password." in response.text
    assert "auth_token" not in client.cookies


def test_login_redirects_to_next(client):
    response = client.post(
        "/login",
        data={"username": TEST_USERNAME, "password": TEST_PASSWORD, "next_url": "/design"},
        follow_redirects=False,
    )
    assert response.status_code == 302
    assert response.headers["location"] == "/design"


def test_login_ignores_offsite_next(client):
    response = client.post(
        "/login",
        data={"username": TEST_USERNAME, "password": TEST_PASSWORD, "next_url": "//evil.example"},
        follow_redirects=False,
    )
    assert response.headers["location"] == "/"


def test_design_form_lists_ingredients_by_type(logged_in_client):
    response = logged_in_client.get("/design")

    assert response.status_code == 200
    assert "Designate your wrap" in response.text
    assert "Flour Tortilla" in response.text
    assert "Monterrey Jack" in response.text


def test_invalid_design_is_not_saved(logged_in_client, db):
    response = logged_in_client.post("/design", data={"name": "Tac", "ingredients": []})

    assert response.status_code == 200
    assert "Name must be at least 5 characters long" in response.text
    assert "You must choose at least 1 ingredient" in response.text
    assert db.query(func.count(Taco.id)).scalar() == 0


def test_full_order_flow(logged_in_client, db, user):
    for name in ("Carnitas Classic", "Beefy Supreme"):
        response = logged_in_client.post(
            "/design",
            data={"name": name, "ingredients": ["FLTO", "CARN", "CHED"]},
            follow_redirects=False,
        )
        assert response.status_code == 303
        assert response.headers["location"] == "/orders/current"

    current = logged_in_client.get("/orders/current")
    assert "Carnitas Classic" in current.text
    assert "Beefy Supreme" in current.text
    assert 'value="Craig Walls"' in current.text  # prefilled from profile

    response = logged_in_client.post("/orders", data=VALID_ORDER, follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/"

    home = logged_in_client.get("/")
    assert "placed. Your tacos are on the way!" in home.text
    # shown once
    assert "placed. Your tacos are on the way!" not in logged_in_client.get("/").text

    order = db.query(TacoOrder).one()
    assert order.user_id == user.id
    assert order.delivery_name == "Ada Lovelace"
    rows = db.execute(select(taco_order_tacos)).all()
    assert len(rows) == 2
    assert {r.taco_order for r in rows} == {order.id}

    # Draft is cleared after checkout
    assert "No tacos yet." in logged_in_client.get("/orders/current").text

    history = logged_in_client.get("/orders")
    assert history.status_code == 200
    assert "Ada Lovelace" in history.text
    assert "**** 1111" in history.text


def test_invalid_order_form_shows_errors_and_saves_nothing(logged_in_client, db):
    bad = dict(VALID_ORDER, cc_number="1234", cc_expiration="2029-12", cc_cvv="12", delivery_zip="")

    response = logged_in_client.post("/orders", data=bad)

    assert response.status_code == 200
    assert "Not a valid credit card number" in response.text
    assert "Must be formatted MM/YY" in response.text
    assert "Invalid CVV" in response.text
    assert "Zip code is required" in response.text
    assert db.query(func.count(TacoOrder.id)).scalar() == 0


def test_checkout_with_empty_draft_still_places_order(logged_in_client, db):
    response = logged_in_client.post("/orders", data=VALID_ORDER, follow_redirects=False)

    assert response.status_code == 303
    assert db.query(func.count(TacoOrder.id)).scalar() == 1
    assert db.execute(select(func.count()).select_from(taco_order_tacos)).scalar() == 0


def test_logout_drops_auth_and_draft(logged_in_client):
    logged_in_client.post("/design", data={"name": "Short Lived", "ingredients": ["COTO"]})
    session_id = logged_in_client.cookies.get("tc_session")
    assert [t.name for t in load_draft(session_id).tacos] == ["Short Lived"]

    response = logged_in_client.post("/logout", follow_redirects=False)
    assert response.status_code == 302
    assert response.headers["location"] == "/"

    after = logged_in_client.get("/design", headers=HTML, follow_redirects=False)
    assert after.status_code == 302
    assert load_draft(session_id).tacos == []

    logged_in_client.post("/login", data={"username": TEST_USERNAME, "password": TEST_PASSWORD})
    assert "No tacos yet." in logged_in_client.get("/orders/current").text


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_storage_outage_renders_retryable_error_page(logged_in_client, db, monkeypatch):
    from sqlalchemy.exc import OperationalError

    def broken_insert(*args, **kwargs):
        raise OperationalError("INSERT INTO taco_order", {}, Exception("connection refused"))

    monkeypatch.setattr("modules.order.service.insert_returning_key", broken_insert)

    response = logged_in_client.post("/orders", data=VALID_ORDER, headers=HTML)

    assert response.status_code == 503
    assert "Please try again shortly." in response.text
    assert "Try again" in response.text


def test_over_long_delivery_fields_rerender_form_and_save_nothing(logged_in_client, db):
    bad = dict(VALID_ORDER, delivery_state="Texas", delivery_zip="76227-12345678")

    response = logged_in_client.post("/orders", data=bad)

    assert response.status_code == 200
    assert "Must be at most 2 characters" in response.text
    assert "Must be at most 10 characters" in response.text
    assert db.query(func.count(TacoOrder.id)).scalar() == 0


def test_card_number_is_stored_as_digits_only(logged_in_client, db):
    order = dict(VALID_ORDER, cc_number="4111-1111 1111-1111")

    response = logged_in_client.post("/orders", data=order, follow_redirects=False)

    assert response.status_code == 303
    assert db.query(TacoOrder).one().cc_number == "4111111111111111"


@pytest.fixture
def roleless_client(client, db):
    user_service.create_user(db, "nobody", "password", roles=set(), fullname="No Roles")
    db.commit()
    response = client.post(
        "/login", data={"username": "nobody", "password": "password"}, follow_redirects=False,
    )
    assert response.status_code == 302
    return client


def test_signed_in_user_without_role_is_forbidden(roleless_client):
    response = roleless_client.get("/design", headers={"accept": "application/json"})

    assert response.status_code == 403
    assert response.json() == {"detail": "forbidden"}


def test_forbidden_page_is_rendered_for_browsers(roleless_client):
    response = roleless_client.get("/orders", headers=HTML, follow_redirects=False)

    assert response.status_code == 403
    assert "You do not have access to this page." in response.text
