from datetime import datetime

import pytest


def now_iso() -> str:
    return datetime.now().replace(microsecond=0).isoformat()


def post(client, path, body, headers):
    r = client.post(path, json=body, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


def test_empty_dashboard(client, auth_a):
    overview = client.get("/dashboard/overview", headers=auth_a).json()

    assert overview["netWorth"] == 0
    assert overview["totalAssets"] == 0
    assert overview["totalDebt"] == 0
    assert overview["breakdown"]["stocks"] == {"count": 0, "value": 0}
    assert overview["monthly"]["savingsRate"] == 0


def test_zero_income_month(client, auth_a):
    post(client, "/expenses", {"amount": 100, "category": "FOOD", "date": now_iso()}, auth_a)

    monthly = client.get("/dashboard/overview", headers=auth_a).json()["monthly"]

    assert monthly == {"income": 0, "expenses": 100, "savings": -100, "savingsRate": 0}


def test_savings_rate_rounded(client, auth_a):
    post(client, "/incomes", {"amount": 3000, "type": "SALARY", "date": now_iso()}, auth_a)
    post(client, "/expenses", {"amount": 1000, "category": "RENT", "date": now_iso()}, auth_a)

    monthly = client.get("/dashboard/overview", headers=auth_a).json()["monthly"]

    assert monthly["savings"] == 2000
    assert monthly["savingsRate"] == 66.7


def test_old_transactions_excluded_from_monthly(client, auth_a):
    post(client, "/incomes", {"amount": 3000, "type": "SALARY", "date": "2001-01-15T00:00:00"}, auth_a)

    monthly = client.get("/dashboard/overview", headers=auth_a).json()["monthly"]
    assert monthly["income"] == 0


def test_eurobond_value_matches_summary_face_value(client, auth_a):
    post(
        client,
        "/eurobonds",
        {"name": "TURKEY 2030", "faceValue": 1000, "purchasePrice": 98.5, "quantity": 5,
         "couponRate": 0.05, "purchaseDate": "2024-02-01", "maturityDate": "2030-02-01"},
        auth_a,
    )

    summary = client.get("/eurobonds/summary", headers=auth_a).json()
    overview = client.get("/dashboard/overview", headers=auth_a).json()

    assert overview["breakdown"]["eurobonds"]["value"] == summary["totalFaceValue"] == 5000


def test_net_worth_subtracts_active_debt(client, auth_a):
    post(
        client,
        "/stocks",
        {"symbol": "AAPL", "name": "Apple", "quantity": 10, "purchasePrice": 150, "purchaseDate": "2024-01-15"},
        auth_a,
    )
    post(
        client,
        "/etfs",
        {"symbol": "VOO", "name": "Vanguard S&P 500", "quantity": 2, "purchasePrice": 500, "purchaseDate": "2024-01-15"},
        auth_a,
    )
    post(client, "/loans", {"name": "Car", "principalAmount": 1000, "startDate": "2024-01-01"}, auth_a)
    post(
        client,
        "/loans",
        {"name": "Old", "principalAmount": 5000, "status": "PAID_OFF", "startDate": "2020-01-01"},
        auth_a,
    )

    overview = client.get("/dashboard/overview", headers=auth_a).json()

    assert overview["totalAssets"] == 2500
    assert overview["totalDebt"] == 1000
    assert overview["netWorth"] == 1500
    assert overview["breakdown"]["loans"] == {"count": 1, "balance": 1000}


def test_dashboard_is_per_user(client, auth_a, auth_b):
    post(
        client,
        "/stocks",
        {"symbol": "AAPL", "name": "Apple", "quantity": 10, "purchasePrice": 150, "purchaseDate": "2024-01-15"},
        auth_a,
    )

    overview = client.get("/dashboard/overview", headers=auth_b).json()
    assert overview["totalAssets"] == 0


def test_recent_transactions_feed(client, auth_a):
    post(client, "/incomes", {"amount": 3000, "type": "SALARY", "date": "2024-05-01T00:00:00"}, auth_a)
    post(
        client,
        "/expenses",
        {"amount": 200, "category": "FOOD", "description": "Groceries", "date": "2024-05-03T00:00:00"},
        auth_a,
    )
    post(client, "/expenses", {"amount": 50, "category": "TRANSPORTATION", "date": "2024-04-20T00:00:00"}, auth_a)

    feed = client.get("/dashboard/transactions", params={"limit": 2}, headers=auth_a).json()

    assert [(t["type"], t["amount"]) for t in feed] == [("expense", -200), ("income", 3000)]
    assert feed[0]["description"] == "Groceries"
    assert feed[1]["description"] == "SALARY"

    full = client.get("/dashboard/transactions", headers=auth_a).json()
    assert len(full) == 3
    assert full[-1]["category"] == "TRANSPORTATION"


@pytest.mark.parametrize("limit", [0, -5])
def test_recent_transactions_limit_validated(client, auth_a, limit):
    r = client.get("/dashboard/transactions", params={"limit": limit}, headers=auth_a)
    assert r.status_code == 422
