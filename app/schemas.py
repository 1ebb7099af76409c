# app/schemas.py
# Role: Request/response models for every resource family.
#       Create* models validate POST bodies, Update* models carry partial PATCH
#       bodies (only fields the client sent are applied), *Read models shape
#       responses. Field names travel as camelCase on the wire.

"""
Pydantic schemas for the finance tracker API.

Numeric inputs are parsed into Decimal so nothing loses precision before it
reaches a Numeric column. Read models echo those Decimals back unchanged.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from models import (
    Currency,
    ExpenseCategory,
    Frequency,
    IncomeType,
    LoanStatus,
    PaymentMethod,
)


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class OwnedRead(CamelModel):
    id: str
    user_id: str
    created_at: datetime
    updated_at: datetime


# -------------------------------------------------------------------
# Sub-records
# -------------------------------------------------------------------

class PaymentRead(CamelModel):
    id: str
    amount: Decimal
    payment_date: date
    notes: Optional[str] = None


# -------------------------------------------------------------------
# Stocks
# -------------------------------------------------------------------

class StockCreate(CamelModel):
    symbol: str
    name: str
    quantity: Decimal
    purchase_price: Decimal
    currency: Currency = Currency.TRY
    purchase_date: date
    broker: Optional[str] = None
    notes: Optional[str] = None


class StockUpdate(CamelModel):
    symbol: Optional[str] = None
    name: Optional[str] = None
    quantity: Optional[Decimal] = None
    purchase_price: Optional[Decimal] = None
    currency: Optional[Currency] = None
    purchase_date: Optional[date] = None
    broker: Optional[str] = None
    notes: Optional[str] = None


class StockRead(OwnedRead):
    symbol: str
    name: str
    quantity: Decimal
    purchase_price: Decimal
    currency: Currency
    purchase_date: date
    broker: Optional[str] = None
    notes: Optional[str] = None
    dividends: List[PaymentRead] = []


# -------------------------------------------------------------------
# ETFs
# -------------------------------------------------------------------

class EtfCreate(CamelModel):
    symbol: str
    name: str
    quantity: Decimal
    purchase_price: Decimal
    currency: Currency = Currency.TRY
    purchase_date: date
    expense_ratio: Optional[Decimal] = None
    broker: Optional[str] = None
    notes: Optional[str] = None


class EtfUpdate(CamelModel):
    symbol: Optional[str] = None
    name: Optional[str] = None
    quantity: Optional[Decimal] = None
    purchase_price: Optional[Decimal] = None
    currency: Optional[Currency] = None
    purchase_date: Optional[date] = None
    expense_ratio: Optional[Decimal] = None
    broker: Optional[str] = None
    notes: Optional[str] = None


class EtfRead(OwnedRead):
    symbol: str
    name: str
    quantity: Decimal
    purchase_price: Decimal
    currency: Currency
    purchase_date: date
    expense_ratio: Optional[Decimal] = None
    broker: Optional[str] = None
    notes: Optional[str] = None
    distributions: List[PaymentRead] = []


# -------------------------------------------------------------------
# Eurobonds
# -------------------------------------------------------------------

class EurobondCreate(CamelModel):
    name: str
    isin: Optional[str] = None
    face_value: Decimal
    purchase_price: Decimal
    quantity: Decimal
    coupon_rate: Decimal
    currency: Currency = Currency.USD
    purchase_date: date
    maturity_date: date
    coupon_frequency: int = 2
    broker: Optional[str] = None
    notes: Optional[str] = None


class EurobondUpdate(CamelModel):
    name: Optional[str] = None
    isin: Optional[str] = None
    face_value: Optional[Decimal] = None
    purchase_price: Optional[Decimal] = None
    quantity: Optional[Decimal] = None
    coupon_rate: Optional[Decimal] = None
    currency: Optional[Currency] = None
    purchase_date: Optional[date] = None
    maturity_date: Optional[date] = None
    coupon_frequency: Optional[int] = None
    broker: Optional[str] = None
    notes: Optional[str] = None


class EurobondRead(OwnedRead):
    name: str
    isin: Optional[str] = None
    face_value: Decimal
    purchase_price: Decimal
    quantity: Decimal
    coupon_rate: Decimal
    currency: Currency
    purchase_date: date
    maturity_date: date
    coupon_frequency: int
    broker: Optional[str] = None
    notes: Optional[str] = None
    coupon_payments: List[PaymentRead] = []


# -------------------------------------------------------------------
# Cash
# -------------------------------------------------------------------

class CashCreate(CamelModel):
    account_name: str
    balance: Decimal
    currency: Currency = Currency.TRY
    account_type: Optional[str] = None
    bank_name: Optional[str] = None
    notes: Optional[str] = None


class CashUpdate(CamelModel):
    account_name: Optional[str] = None
    balance: Optional[Decimal] = None
    currency: Optional[Currency] = None
    account_type: Optional[str] = None
    bank_name: Optional[str] = None
    notes: Optional[str] = None


class CashRead(OwnedRead):
    account_name: str
    balance: Decimal
    currency: Currency
    account_type: Optional[str] = None
    bank_name: Optional[str] = None
    notes: Optional[str] = None


# -------------------------------------------------------------------
# Gold / Silver (same shape, quantity in grams)
# -------------------------------------------------------------------

class MetalCreate(CamelModel):
    name: str
    quantity: Decimal
    purchase_price: Decimal
    currency: Currency = Currency.TRY
    purchase_date: date
    purity: Optional[str] = None
    location: Optional[str] = None
    notes: Optional[str] = None


class MetalUpdate(CamelModel):
    name: Optional[str] = None
    quantity: Optional[Decimal] = None
    purchase_price: Optional[Decimal] = None
    currency: Optional[Currency] = None
    purchase_date: Optional[date] = None
    purity: Optional[str] = None
    location: Optional[str] = None
    notes: Optional[str] = None


class MetalRead(OwnedRead):
    name: str
    quantity: Decimal
    purchase_price: Decimal
    currency: Currency
    purchase_date: date
    purity: Optional[str] = None
    location: Optional[str] = None
    notes: Optional[str] = None


# -------------------------------------------------------------------
# Loans
# -------------------------------------------------------------------

class LoanCreate(CamelModel):
    name: str
    lender: Optional[str] = None
    principal_amount: Decimal
    remaining_balance: Optional[Decimal] = None
    interest_rate: Optional[Decimal] = None
    monthly_payment: Optional[Decimal] = None
    currency: Currency = Currency.TRY
    start_date: date
    end_date: Optional[date] = None
    status: LoanStatus = LoanStatus.ACTIVE
    notes: Optional[str] = None


class LoanUpdate(CamelModel):
    name: Optional[str] = None
    lender: Optional[str] = None
    principal_amount: Optional[Decimal] = None
    remaining_balance: Optional[Decimal] = None
    interest_rate: Optional[Decimal] = None
    monthly_payment: Optional[Decimal] = None
    currency: Optional[Currency] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[LoanStatus] = None
    notes: Optional[str] = None


class LoanRead(OwnedRead):
    name: str
    lender: Optional[str] = None
    principal_amount: Decimal
    remaining_balance: Optional[Decimal] = None
    interest_rate: Optional[Decimal] = None
    monthly_payment: Optional[Decimal] = None
    currency: Currency
    start_date: date
    end_date: Optional[date] = None
    status: LoanStatus
    notes: Optional[str] = None


# -------------------------------------------------------------------
# Incomes / Expenses
# -------------------------------------------------------------------

class IncomeCreate(CamelModel):
    amount: Decimal
    currency: Currency = Currency.TRY
    type: IncomeType
    description: Optional[str] = None
    date: datetime
    is_recurring: bool = False
    frequency: Optional[Frequency] = None
    notes: Optional[str] = None


class IncomeUpdate(CamelModel):
    amount: Optional[Decimal] = None
    currency: Optional[Currency] = None
    type: Optional[IncomeType] = None
    description: Optional[str] = None
    date: Optional[datetime] = None
    is_recurring: Optional[bool] = None
    frequency: Optional[Frequency] = None
    notes: Optional[str] = None


class IncomeRead(OwnedRead):
    amount: Decimal
    currency: Currency
    type: IncomeType
    description: Optional[str] = None
    date: datetime
    is_recurring: bool
    frequency: Optional[Frequency] = None
    notes: Optional[str] = None


class ExpenseCreate(CamelModel):
    amount: Decimal
    currency: Currency = Currency.TRY
    category: ExpenseCategory
    description: Optional[str] = None
    date: datetime
    is_recurring: bool = False
    frequency: Optional[Frequency] = None
    payment_method: Optional[PaymentMethod] = None
    notes: Optional[str] = None


class ExpenseUpdate(CamelModel):
    amount: Optional[Decimal] = None
    currency: Optional[Currency] = None
    category: Optional[ExpenseCategory] = None
    description: Optional[str] = None
    date: Optional[datetime] = None
    is_recurring: Optional[bool] = None
    frequency: Optional[Frequency] = None
    payment_method: Optional[PaymentMethod] = None
    notes: Optional[str] = None


class ExpenseRead(OwnedRead):
    amount: Decimal
    currency: Currency
    category: ExpenseCategory
    description: Optional[str] = None
    date: datetime
    is_recurring: bool
    frequency: Optional[Frequency] = None
    payment_method: Optional[PaymentMethod] = None
    notes: Optional[str] = None


# -------------------------------------------------------------------
# Misc responses
# -------------------------------------------------------------------

class MessageResponse(BaseModel):
    message: str
