import pytest

STOCK = {
    "symbol": "AAPL",
    "name": "Apple Inc.",
    "quantity": 10,
    "purchasePrice": 150,
    "currency": "USD",
    "purchaseDate": "2024-01-15",
    "broker": "IBKR",
}

EUROBOND = {
    "name": "TURKEY 2030",
    "isin": "US900123DG28",
    "faceValue": 1000,
    "purchasePrice": 98.5,
    "quantity": 5,
    "couponRate": 0.05,
    "purchaseDate": "2024-02-01",
    "maturityDate": "2030-02-01",
}


def create(client, path, body, headers):
    r = client.post(path, json=body, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


# -------------------------------------------------------------------
# Stocks: full CRUD surface
# -------------------------------------------------------------------

def test_create_and_read_stock(client, auth_a):
    stock = create(client, "/stocks", STOCK, auth_a)

    assert stock["userId"] == "user-a"
    assert stock["symbol"] == "AAPL"
    assert float(stock["purchasePrice"]) == 150
    assert stock["dividends"] == []

    r = client.get(f"/stocks/{stock['id']}", headers=auth_a)
    assert r.status_code == 200
    assert r.json()["id"] == stock["id"]

    listed = client.get("/stocks", headers=auth_a).json()
    assert [s["id"] for s in listed] == [stock["id"]]


def test_create_validates_body(client, auth_a):
    r = client.post("/stocks", json={"symbol": "AAPL"}, headers=auth_a)
    assert r.status_code == 422


def test_other_users_records_are_invisible(client, auth_a, auth_b):
    stock = create(client, "/stocks", STOCK, auth_a)
    path = f"/stocks/{stock['id']}"

    r = client.get(path, headers=auth_b)
    assert r.status_code == 404
    assert r.json() == {"statusCode": 404, "message": "Stock not found", "error": "Not Found"}

    assert client.patch(path, json={"quantity": 1}, headers=auth_b).status_code == 404
    assert client.delete(path, headers=auth_b).status_code == 404
    assert client.get("/stocks", headers=auth_b).json() == []

    # still intact for the owner
    assert float(client.get(path, headers=auth_a).json()["quantity"]) == 10


def test_empty_patch_is_noop(client, auth_a):
    stock = create(client, "/stocks", STOCK, auth_a)

    r = client.patch(f"/stocks/{stock['id']}", json={}, headers=auth_a)

    assert r.status_code == 200
    for key in ("symbol", "name", "quantity", "purchasePrice", "currency", "purchaseDate", "broker"):
        assert r.json()[key] == stock[key]


def test_patch_applies_only_sent_fields(client, auth_a):
    stock = create(client, "/stocks", STOCK, auth_a)

    r = client.patch(
        f"/stocks/{stock['id']}",
        json={"quantity": 12, "name": None, "broker": None},
        headers=auth_a,
    )

    body = r.json()
    assert float(body["quantity"]) == 12
    # required column: explicit null ignored; optional column: cleared
    assert body["name"] == "Apple Inc."
    assert body["broker"] is None
    assert body["symbol"] == "AAPL"


def test_second_delete_matches_never_existed(client, auth_a):
    stock = create(client, "/stocks", STOCK, auth_a)
    path = f"/stocks/{stock['id']}"

    first = client.delete(path, headers=auth_a)
    assert first.status_code == 200
    assert first.json() == {"message": "Stock deleted successfully"}

    second = client.delete(path, headers=auth_a)
    never = client.delete("/stocks/00000000-0000-0000-0000-000000000000", headers=auth_a)
    assert second.status_code == never.status_code == 404
    assert second.json() == never.json()


def test_stock_summary(client, auth_a):
    create(client, "/stocks", STOCK, auth_a)
    create(client, "/stocks", {**STOCK, "symbol": "MSFT", "quantity": 2, "purchasePrice": 400}, auth_a)

    summary = client.get("/stocks/summary", headers=auth_a).json()

    assert summary["totalStocks"] == 2
    assert summary["totalCost"] == 2300
    assert summary["totalDividends"] == 0
    assert {s["symbol"] for s in summary["stocks"]} == {"AAPL", "MSFT"}


# -------------------------------------------------------------------
# ETFs / Eurobonds
# -------------------------------------------------------------------

def test_etf_summary(client, auth_a):
    create(
        client,
        "/etfs",
        {"symbol": "VWRA", "name": "FTSE All-World", "quantity": 4, "purchasePrice": 120.5,
         "purchaseDate": "2024-03-01", "expenseRatio": 0.0022},
        auth_a,
    )

    summary = client.get("/etfs/summary", headers=auth_a).json()

    assert summary["totalEtfs"] == 1
    assert summary["totalValue"] == pytest.approx(482)
    assert summary["etfs"][0]["expenseRatio"] == pytest.approx(0.0022)


def test_eurobond_defaults_and_summary(client, auth_a):
    bond = create(client, "/eurobonds", EUROBOND, auth_a)

    assert bond["currency"] == "USD"
    assert bond["couponFrequency"] == 2
    assert bond["couponPayments"] == []

    summary = client.get("/eurobonds/summary", headers=auth_a).json()
    assert summary["totalFaceValue"] == 5000
    assert summary["totalCurrentValue"] == pytest.approx(4.925)
    assert summary["annualCouponIncome"] == pytest.approx(250)


def test_eurobonds_listed_by_maturity(client, auth_a):
    create(client, "/eurobonds", {**EUROBOND, "name": "LATE", "maturityDate": "2040-01-01"}, auth_a)
    create(client, "/eurobonds", {**EUROBOND, "name": "SOON", "maturityDate": "2026-01-01"}, auth_a)

    names = [b["name"] for b in client.get("/eurobonds", headers=auth_a).json()]
    assert names == ["SOON", "LATE"]


# -------------------------------------------------------------------
# Cash / Gold / Silver
# -------------------------------------------------------------------

def test_cash_summary(client, auth_a):
    create(client, "/cash", {"accountName": "Checking", "balance": 1000, "currency": "USD"}, auth_a)

    summary = client.get("/cash/summary", headers=auth_a).json()

    assert summary["totalAccounts"] == 1
    assert summary["totalBalance"] == 1000
    assert summary["byCurrency"] == {"USD": 1000}


def test_cash_summary_groups_currencies_without_conversion(client, auth_a):
    create(client, "/cash", {"accountName": "A", "balance": 1000, "currency": "USD"}, auth_a)
    create(client, "/cash", {"accountName": "B", "balance": 500, "currency": "USD"}, auth_a)
    create(client, "/cash", {"accountName": "C", "balance": 20000}, auth_a)

    summary = client.get("/cash/summary", headers=auth_a).json()

    assert summary["byCurrency"] == {"USD": 1500, "TRY": 20000}
    assert summary["totalBalance"] == 21500


def test_cash_not_found_message(client, auth_a):
    r = client.get("/cash/missing", headers=auth_a)
    assert r.json()["message"] == "Cash account not found"


@pytest.mark.parametrize("path,label", [("/gold", "Gold holding"), ("/silver", "Silver holding")])
def test_metal_holdings(client, auth_a, path, label):
    holding = create(
        client,
        path,
        {"name": "Bar", "quantity": 10, "purchasePrice": 2500, "purchaseDate": "2024-04-01", "purity": "999.9"},
        auth_a,
    )
    assert holding["currency"] == "TRY"

    summary = client.get(f"{path}/summary", headers=auth_a).json()
    assert summary["totalHoldings"] == 1
    assert summary["totalQuantity"] == 10
    assert summary["totalCost"] == 25000

    r = client.delete(f"{path}/{holding['id']}", headers=auth_a)
    assert r.json() == {"message": f"{label} deleted successfully"}


def test_gold_and_silver_are_separate(client, auth_a):
    create(client, "/gold", {"name": "Coin", "quantity": 7, "purchasePrice": 2600, "purchaseDate": "2024-04-01"}, auth_a)

    assert client.get("/silver", headers=auth_a).json() == []


# -------------------------------------------------------------------
# Loans
# -------------------------------------------------------------------

LOAN = {
    "name": "Mortgage",
    "lender": "Ziraat",
    "principalAmount": 100000,
    "startDate": "2023-06-01",
}


def test_loan_defaults_active(client, auth_a):
    loan = create(client, "/loans", LOAN, auth_a)

    assert loan["status"] == "ACTIVE"
    assert loan["remainingBalance"] is None


def test_loans_status_filter_and_summary(client, auth_a):
    create(client, "/loans", {**LOAN, "remainingBalance": 60000}, auth_a)
    paid = create(client, "/loans", {**LOAN, "name": "Car", "principalAmount": 20000}, auth_a)
    client.patch(f"/loans/{paid['id']}", json={"status": "PAID_OFF"}, headers=auth_a)

    active = client.get("/loans", params={"status": "ACTIVE"}, headers=auth_a).json()
    assert [l["name"] for l in active] == ["Mortgage"]

    summary = client.get("/loans/summary", headers=auth_a).json()
    assert summary["totalLoans"] == 2
    assert summary["activeLoans"] == 1
    assert summary["totalOutstanding"] == 60000


def test_loan_status_filter_rejects_unknown_value(client, auth_a):
    r = client.get("/loans", params={"status": "DEFAULTED"}, headers=auth_a)
    assert r.status_code == 422
