# app/services/aggregation.py
"""
Aggregation engine: summaries computed over rows that were already fetched.

Nothing in this module touches the database or the network. Monetary values
are Decimals at rest and become floats here, at the aggregation boundary.

No currency conversion happens anywhere: holdings in different currencies
are summed arithmetically. The valuation formulas are kept as small named
functions so a future correction only touches one line.
"""

from typing import Any, Dict, Iterable, List, Optional, Sequence

from models import LoanStatus


def _num(value) -> float:
    return float(value) if value is not None else 0.0


def _label(value) -> Optional[str]:
    # Enum members -> their plain string value
    if value is None:
        return None
    return getattr(value, "value", value)


# -------------------------------------------------------------------
# Valuation formulas
# -------------------------------------------------------------------

def holding_cost(holding) -> float:
    """Cost basis: quantity x purchase price."""
    return _num(holding.quantity) * _num(holding.purchase_price)


def eurobond_face_value(bond) -> float:
    return _num(bond.face_value) * _num(bond.quantity)


def eurobond_current_value(bond) -> float:
    # purchase_price is a percentage of face value
    return _num(bond.purchase_price) * _num(bond.quantity) / 100


def eurobond_annual_coupon(bond) -> float:
    return _num(bond.face_value) * _num(bond.quantity) * _num(bond.coupon_rate)


def loan_outstanding(loan) -> float:
    if loan.remaining_balance is not None:
        return _num(loan.remaining_balance)
    return _num(loan.principal_amount)


def _payments_total(payments: Iterable) -> float:
    return sum(_num(p.amount) for p in payments)


# -------------------------------------------------------------------
# Per-resource summaries
# -------------------------------------------------------------------

def summarize_stocks(stocks: Sequence) -> Dict[str, Any]:
    return {
        "totalStocks": len(stocks),
        "totalCost": sum(holding_cost(s) for s in stocks),
        "totalDividends": sum(_payments_total(s.dividends) for s in stocks),
        "stocks": [
            {
                "id": s.id,
                "symbol": s.symbol,
                "name": s.name,
                "quantity": _num(s.quantity),
                "purchasePrice": _num(s.purchase_price),
                "currency": _label(s.currency),
                "totalCost": holding_cost(s),
            }
            for s in stocks
        ],
    }


def summarize_etfs(etfs: Sequence) -> Dict[str, Any]:
    return {
        "totalEtfs": len(etfs),
        "totalValue": sum(holding_cost(e) for e in etfs),
        "totalDistributions": sum(_payments_total(e.distributions) for e in etfs),
        "etfs": [
            {
                "id": e.id,
                "symbol": e.symbol,
                "name": e.name,
                "quantity": _num(e.quantity),
                "purchasePrice": _num(e.purchase_price),
                "expenseRatio": _num(e.expense_ratio) if e.expense_ratio is not None else None,
                "currency": _label(e.currency),
                "totalValue": holding_cost(e),
            }
            for e in etfs
        ],
    }


def summarize_eurobonds(bonds: Sequence) -> Dict[str, Any]:
    return {
        "totalBonds": len(bonds),
        "totalFaceValue": sum(eurobond_face_value(b) for b in bonds),
        "totalCurrentValue": sum(eurobond_current_value(b) for b in bonds),
        "annualCouponIncome": sum(eurobond_annual_coupon(b) for b in bonds),
        "totalCouponPayments": sum(_payments_total(b.coupon_payments) for b in bonds),
        "eurobonds": [
            {
                "id": b.id,
                "name": b.name,
                "isin": b.isin,
                "faceValue": _num(b.face_value),
                "quantity": _num(b.quantity),
                "couponRate": _num(b.coupon_rate),
                "currency": _label(b.currency),
                "maturityDate": b.maturity_date,
            }
            for b in bonds
        ],
    }


def summarize_cash(accounts: Sequence) -> Dict[str, Any]:
    by_currency: Dict[str, float] = {}
    total_balance = 0.0

    for account in accounts:
        balance = _num(account.balance)
        currency = _label(account.currency)
        by_currency[currency] = by_currency.get(currency, 0.0) + balance
        total_balance += balance

    return {
        "totalAccounts": len(accounts),
        "totalBalance": total_balance,
        "byCurrency": by_currency,
        "accounts": [
            {
                "id": a.id,
                "accountName": a.account_name,
                "balance": _num(a.balance),
                "currency": _label(a.currency),
                "accountType": a.account_type,
                "bankName": a.bank_name,
            }
            for a in accounts
        ],
    }


def summarize_metal(holdings: Sequence) -> Dict[str, Any]:
    """Gold and silver share one summary shape (quantities in grams)."""
    return {
        "totalHoldings": len(holdings),
        "totalQuantity": sum(_num(h.quantity) for h in holdings),
        "totalCost": sum(holding_cost(h) for h in holdings),
        "holdings": [
            {
                "id": h.id,
                "name": h.name,
                "quantity": _num(h.quantity),
                "purchasePrice": _num(h.purchase_price),
                "purchaseDate": h.purchase_date,
                "purity": h.purity,
                "totalCost": holding_cost(h),
            }
            for h in holdings
        ],
    }


def summarize_loans(loans: Sequence) -> Dict[str, Any]:
    active = [l for l in loans if l.status == LoanStatus.ACTIVE]
    return {
        "totalLoans": len(loans),
        "activeLoans": len(active),
        "totalPrincipal": sum(_num(l.principal_amount) for l in loans),
        "totalOutstanding": sum(loan_outstanding(l) for l in active),
        "loans": [
            {
                "id": l.id,
                "name": l.name,
                "lender": l.lender,
                "principalAmount": _num(l.principal_amount),
                "outstanding": loan_outstanding(l),
                "currency": _label(l.currency),
                "status": _label(l.status),
            }
            for l in loans
        ],
    }


# -------------------------------------------------------------------
# Monthly transaction summaries
# -------------------------------------------------------------------

def _group_sum(rows: Iterable, attr: str) -> Dict[str, float]:
    groups: Dict[str, float] = {}
    for row in rows:
        key = _label(getattr(row, attr))
        if key is None:
            continue
        groups[key] = groups.get(key, 0.0) + _num(row.amount)
    return groups


def _monthly_totals(rows: Sequence, month: int, year: int) -> Dict[str, Any]:
    total = sum(_num(r.amount) for r in rows)
    recurring = sum(_num(r.amount) for r in rows if r.is_recurring)
    return {
        "month": month + 1,
        "year": year,
        "total": total,
        "recurring": recurring,
        "nonRecurring": total - recurring,
    }


def summarize_incomes(incomes: Sequence, month: int, year: int) -> Dict[str, Any]:
    """`month` is 0-indexed; the response carries it 1-indexed."""
    summary = _monthly_totals(incomes, month, year)
    summary["byType"] = _group_sum(incomes, "type")
    summary["count"] = len(incomes)
    return summary


def summarize_expenses(expenses: Sequence, month: int, year: int) -> Dict[str, Any]:
    """`month` is 0-indexed; rows without a payment method are left out of byPaymentMethod."""
    summary = _monthly_totals(expenses, month, year)
    summary["byCategory"] = _group_sum(expenses, "category")
    summary["byPaymentMethod"] = _group_sum(expenses, "payment_method")
    summary["count"] = len(expenses)
    return summary


# -------------------------------------------------------------------
# Dashboard
# -------------------------------------------------------------------

def savings_rate(income: float, expenses: float) -> float:
    if income <= 0:
        return 0.0
    return round((income - expenses) / income * 100, 1)


def build_overview(
    stocks: Sequence,
    etfs: Sequence,
    eurobonds: Sequence,
    monthly_incomes: Sequence,
    monthly_expenses: Sequence,
    active_loans: Sequence,
) -> Dict[str, Any]:
    """
    Net worth and this month's cash flow.

    Eurobonds count at face value here, unlike the cost-basis figures
    used for stocks and ETFs.
    """
    stocks_value = sum(holding_cost(s) for s in stocks)
    etfs_value = sum(holding_cost(e) for e in etfs)
    eurobonds_value = sum(eurobond_face_value(b) for b in eurobonds)
    total_debt = sum(loan_outstanding(l) for l in active_loans)

    total_assets = stocks_value + etfs_value + eurobonds_value
    income = sum(_num(i.amount) for i in monthly_incomes)
    expenses = sum(_num(e.amount) for e in monthly_expenses)

    return {
        "netWorth": total_assets - total_debt,
        "totalAssets": total_assets,
        "totalDebt": total_debt,
        "breakdown": {
            "stocks": {"count": len(stocks), "value": stocks_value},
            "etfs": {"count": len(etfs), "value": etfs_value},
            "eurobonds": {"count": len(eurobonds), "value": eurobonds_value},
            "loans": {"count": len(active_loans), "balance": total_debt},
        },
        "monthly": {
            "income": income,
            "expenses": expenses,
            "savings": income - expenses,
            "savingsRate": savings_rate(income, expenses),
        },
    }


def merge_recent_transactions(
    incomes: Sequence,
    expenses: Sequence,
    limit: int = 10,
) -> List[Dict[str, Any]]:
    """Incomes (positive) and expenses (negated) in one feed, newest first."""
    feed: List[Dict[str, Any]] = []

    for i in incomes:
        feed.append(
            {
                "id": i.id,
                "type": "income",
                "amount": _num(i.amount),
                "description": i.description or _label(i.type),
                "category": _label(i.type),
                "date": i.date,
                "currency": _label(i.currency),
            }
        )

    for e in expenses:
        feed.append(
            {
                "id": e.id,
                "type": "expense",
                "amount": -_num(e.amount),
                "description": e.description or _label(e.category),
                "category": _label(e.category),
                "date": e.date,
                "currency": _label(e.currency),
            }
        )

    feed.sort(key=lambda t: t["date"], reverse=True)
    return feed[:limit]
