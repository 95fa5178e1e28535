import pytest

from conftest import bearer, register

BASE = "/api/v1/expenses"


@pytest.fixture
def categories(client, auth_headers):
    defaults = client.get("/api/v1/categories/default", headers=auth_headers).get_json()["data"]
    by_name = {c["name"]: c["id"] for c in defaults}
    own = client.post("/api/v1/categories", json={"name": "Hobbies", "type": "expense"},
                      headers=auth_headers).get_json()["data"]
    by_name["Hobbies"] = own["id"]
    return by_name


def add(client, headers, category_id, name="Lunch", amount=12.5):
    return client.post(BASE, json={"name": name, "amount": amount, "category_id": category_id}, headers=headers)


def test_create_expense_in_default_and_own_category(client, auth_headers, categories):
    resp = add(client, auth_headers, categories["Food"])
    assert resp.status_code == 201
    data = resp.get_json()["data"]
    assert data["amount"] == "12.50"
    assert data["category"]["name"] == "Food"

    own = add(client, auth_headers, categories["Hobbies"], name="Paint", amount="30")
    assert own.status_code == 201
    assert own.get_json()["data"]["category"]["is_default"] is False


@pytest.mark.parametrize("amount", [0, -5, "abc"])
def test_amount_must_be_positive_number(client, auth_headers, categories, amount):
    resp = add(client, auth_headers, categories["Food"], amount=amount)
    assert resp.status_code == 400
    assert "amount" in resp.get_json()["details"]


def test_unknown_category_is_rejected(client, auth_headers, categories):
    resp = add(client, auth_headers, "00000000-0000-0000-0000-000000000000")
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Invalid category ID"


def test_other_users_category_is_rejected(client, auth_headers, categories):
    bob = bearer(register(client, email="bob@example.com", name="Bob").get_json()["data"]["token"])
    resp = add(client, bob, categories["Hobbies"])
    assert resp.status_code == 400


def test_expenses_are_private(client, auth_headers, categories):
    eid = add(client, auth_headers, categories["Food"]).get_json()["data"]["id"]
    bob = bearer(register(client, email="bob@example.com", name="Bob").get_json()["data"]["token"])

    assert client.get(f"{BASE}/{eid}", headers=bob).status_code == 404
    assert client.delete(f"{BASE}/{eid}", headers=bob).status_code == 404
    assert client.get(BASE, headers=bob).get_json()["data"]["total"] == 0
    assert client.get(f"{BASE}/{eid}", headers=auth_headers).status_code == 200


def test_list_filters_and_sorting(client, auth_headers, categories):
    add(client, auth_headers, categories["Food"], name="Lunch", amount=12)
    add(client, auth_headers, categories["Transport"], name="Bus", amount=2.5)
    add(client, auth_headers, categories["Salary"], name="Refund", amount=40)

    by_amount = client.get(f"{BASE}?sort_by=amount&order=desc", headers=auth_headers).get_json()["data"]
    assert [e["name"] for e in by_amount["items"]] == ["Refund", "Lunch", "Bus"]

    food = client.get(f"{BASE}?category_name=foo", headers=auth_headers).get_json()["data"]
    assert [e["name"] for e in food["items"]] == ["Lunch"]

    income = client.get(f"{BASE}?category_type=income", headers=auth_headers).get_json()["data"]
    assert [e["name"] for e in income["items"]] == ["Refund"]

    nothing = client.get(f"{BASE}?category_type=bogus", headers=auth_headers).get_json()["data"]
    assert nothing["total"] == 0

    paged = client.get(f"{BASE}?limit=1&page=3&sort_by=name", headers=auth_headers).get_json()["data"]
    assert paged["total_pages"] == 3
    assert [e["name"] for e in paged["items"]] == ["Refund"]


def test_update_and_delete(client, auth_headers, categories):
    eid = add(client, auth_headers, categories["Food"]).get_json()["data"]["id"]

    upd = client.put(f"{BASE}/{eid}", json={"name": "Dinner", "amount": 20, "category_id": categories["Hobbies"]},
                     headers=auth_headers)
    assert upd.status_code == 200
    data = upd.get_json()["data"]
    assert data["name"] == "Dinner"
    assert data["amount"] == "20.00"
    assert data["category"]["name"] == "Hobbies"

    assert client.delete(f"{BASE}/{eid}", headers=auth_headers).status_code == 200
    assert client.get(f"{BASE}/{eid}", headers=auth_headers).status_code == 404


def test_expenses_require_authentication(client):
    assert client.get(BASE).status_code == 401
    assert client.post(BASE, json={}).status_code == 401
