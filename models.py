# models.py
# Role: SQLAlchemy ORM models for the finance tracker domain.
#       Holdings (stocks, ETFs, eurobonds, cash, gold, silver), loans,
#       incomes and expenses, each owned by exactly one user.

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    desc,
)
from sqlalchemy.orm import declared_attr, relationship

from db import Base


# Quantities keep 8 decimals (fractional shares, grams); money keeps 4.
QUANTITY = Numeric(24, 8)
MONEY = Numeric(20, 4)


def new_id() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# -------------------------------------------------------------------
# Enumerations
# -------------------------------------------------------------------

class Currency(str, enum.Enum):
    TRY = "TRY"
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    CHF = "CHF"


class IncomeType(str, enum.Enum):
    SALARY = "SALARY"
    RENTAL = "RENTAL"
    DIVIDEND = "DIVIDEND"
    INTEREST = "INTEREST"
    FREELANCE = "FREELANCE"
    BONUS = "BONUS"
    OTHER = "OTHER"


class ExpenseCategory(str, enum.Enum):
    RENT = "RENT"
    UTILITIES = "UTILITIES"
    FOOD = "FOOD"
    TRANSPORTATION = "TRANSPORTATION"
    EDUCATION = "EDUCATION"
    HEALTHCARE = "HEALTHCARE"
    ENTERTAINMENT = "ENTERTAINMENT"
    SHOPPING = "SHOPPING"
    INSURANCE = "INSURANCE"
    OTHER = "OTHER"


class PaymentMethod(str, enum.Enum):
    CASH = "CASH"
    CREDIT_CARD = "CREDIT_CARD"
    DEBIT_CARD = "DEBIT_CARD"
    BANK_TRANSFER = "BANK_TRANSFER"
    OTHER = "OTHER"


class Frequency(str, enum.Enum):
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    QUARTERLY = "QUARTERLY"
    SEMI_ANNUAL = "SEMI_ANNUAL"
    ANNUAL = "ANNUAL"


class LoanStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    PAID_OFF = "PAID_OFF"


def _enum(cls):
    # Stored as plain VARCHAR so SQLite and Postgres behave the same.
    return Enum(cls, native_enum=False, length=32)


# -------------------------------------------------------------------
# Users
# -------------------------------------------------------------------

class User(Base):
    """
    Local mirror of an identity-provider user.

    The primary key is the provider's user id; rows are upserted on every
    authenticated request (see app/deps.py:get_current_user).
    """

    __tablename__ = "users"

    id = Column(String(64), primary_key=True)
    email = Column(String, nullable=True)
    name = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)


class OwnedMixin:
    """Columns shared by every user-owned row."""

    id = Column(String(36), primary_key=True, default=new_id)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)

    @declared_attr
    def user_id(cls):
        return Column(String(64), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)


# -------------------------------------------------------------------
# Securities with income sub-records
# -------------------------------------------------------------------

class Stock(OwnedMixin, Base):
    __tablename__ = "stocks"

    symbol = Column(String(32), nullable=False)
    name = Column(String, nullable=False)
    quantity = Column(QUANTITY, nullable=False)
    purchase_price = Column(MONEY, nullable=False)
    currency = Column(_enum(Currency), default=Currency.TRY, nullable=False)
    purchase_date = Column(Date, nullable=False)
    broker = Column(String, nullable=True)
    notes = Column(Text, nullable=True)

    dividends = relationship(
        "Dividend",
        lazy="selectin",
        order_by=lambda: desc(Dividend.payment_date),
        cascade="all, delete-orphan",
    )


class Dividend(Base):
    __tablename__ = "dividends"

    id = Column(String(36), primary_key=True, default=new_id)
    stock_id = Column(String(36), ForeignKey("stocks.id", ondelete="CASCADE"), index=True, nullable=False)
    amount = Column(MONEY, nullable=False)
    payment_date = Column(Date, nullable=False)
    notes = Column(Text, nullable=True)


class ETF(OwnedMixin, Base):
    __tablename__ = "etfs"

    symbol = Column(String(32), nullable=False)
    name = Column(String, nullable=False)
    quantity = Column(QUANTITY, nullable=False)
    purchase_price = Column(MONEY, nullable=False)
    currency = Column(_enum(Currency), default=Currency.TRY, nullable=False)
    purchase_date = Column(Date, nullable=False)
    expense_ratio = Column(Numeric(10, 6), nullable=True)
    broker = Column(String, nullable=True)
    notes = Column(Text, nullable=True)

    distributions = relationship(
        "Distribution",
        lazy="selectin",
        order_by=lambda: desc(Distribution.payment_date),
        cascade="all, delete-orphan",
    )


class Distribution(Base):
    __tablename__ = "distributions"

    id = Column(String(36), primary_key=True, default=new_id)
    etf_id = Column(String(36), ForeignKey("etfs.id", ondelete="CASCADE"), index=True, nullable=False)
    amount = Column(MONEY, nullable=False)
    payment_date = Column(Date, nullable=False)
    notes = Column(Text, nullable=True)


class Eurobond(OwnedMixin, Base):
    """
    A USD/EUR-denominated bond position.

    purchase_price is quoted as a percentage of face value (e.g. 98.5),
    coupon_rate is the annual rate applied to face value.
    """

    __tablename__ = "eurobonds"

    name = Column(String, nullable=False)
    isin = Column(String(12), nullable=True)
    face_value = Column(MONEY, nullable=False)
    purchase_price = Column(MONEY, nullable=False)
    quantity = Column(QUANTITY, nullable=False)
    coupon_rate = Column(Numeric(10, 6), nullable=False)
    currency = Column(_enum(Currency), default=Currency.USD, nullable=False)
    purchase_date = Column(Date, nullable=False)
    maturity_date = Column(Date, nullable=False)
    coupon_frequency = Column(Integer, default=2, nullable=False)
    broker = Column(String, nullable=True)
    notes = Column(Text, nullable=True)

    coupon_payments = relationship(
        "CouponPayment",
        lazy="selectin",
        order_by=lambda: desc(CouponPayment.payment_date),
        cascade="all, delete-orphan",
    )


class CouponPayment(Base):
    __tablename__ = "coupon_payments"

    id = Column(String(36), primary_key=True, default=new_id)
    eurobond_id = Column(String(36), ForeignKey("eurobonds.id", ondelete="CASCADE"), index=True, nullable=False)
    amount = Column(MONEY, nullable=False)
    payment_date = Column(Date, nullable=False)
    notes = Column(Text, nullable=True)


# -------------------------------------------------------------------
# Simple holdings
# -------------------------------------------------------------------

class Cash(OwnedMixin, Base):
    __tablename__ = "cash_accounts"

    account_name = Column(String, nullable=False)
    balance = Column(MONEY, nullable=False)
    currency = Column(_enum(Currency), default=Currency.TRY, nullable=False)
    account_type = Column(String, nullable=True)
    bank_name = Column(String, nullable=True)
    notes = Column(Text, nullable=True)


class Gold(OwnedMixin, Base):
    # quantity in grams, purchase_price per gram
    __tablename__ = "gold_holdings"

    name = Column(String, nullable=False)
    quantity = Column(QUANTITY, nullable=False)
    purchase_price = Column(MONEY, nullable=False)
    currency = Column(_enum(Currency), default=Currency.TRY, nullable=False)
    purchase_date = Column(Date, nullable=False)
    purity = Column(String, nullable=True)
    location = Column(String, nullable=True)
    notes = Column(Text, nullable=True)


class Silver(OwnedMixin, Base):
    # quantity in grams, purchase_price per gram
    __tablename__ = "silver_holdings"

    name = Column(String, nullable=False)
    quantity = Column(QUANTITY, nullable=False)
    purchase_price = Column(MONEY, nullable=False)
    currency = Column(_enum(Currency), default=Currency.TRY, nullable=False)
    purchase_date = Column(Date, nullable=False)
    purity = Column(String, nullable=True)
    location = Column(String, nullable=True)
    notes = Column(Text, nullable=True)


class Loan(OwnedMixin, Base):
    __tablename__ = "loans"

    name = Column(String, nullable=False)
    lender = Column(String, nullable=True)
    principal_amount = Column(MONEY, nullable=False)
    # Null until the user records a repayment; dashboards fall back to principal.
    remaining_balance = Column(MONEY, nullable=True)
    interest_rate = Column(Numeric(10, 6), nullable=True)
    monthly_payment = Column(MONEY, nullable=True)
    currency = Column(_enum(Currency), default=Currency.TRY, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    status = Column(_enum(LoanStatus), default=LoanStatus.ACTIVE, nullable=False, index=True)
    notes = Column(Text, nullable=True)


# -------------------------------------------------------------------
# Transactions
# -------------------------------------------------------------------

class Income(OwnedMixin, Base):
    __tablename__ = "incomes"

    amount = Column(MONEY, nullable=False)
    currency = Column(_enum(Currency), default=Currency.TRY, nullable=False)
    type = Column(_enum(IncomeType), nullable=False)
    description = Column(String, nullable=True)
    date = Column(DateTime, index=True, nullable=False)
    is_recurring = Column(Boolean, default=False, nullable=False)
    frequency = Column(_enum(Frequency), nullable=True)
    notes = Column(Text, nullable=True)


class Expense(OwnedMixin, Base):
    __tablename__ = "expenses"

    amount = Column(MONEY, nullable=False)
    currency = Column(_enum(Currency), default=Currency.TRY, nullable=False)
    category = Column(_enum(ExpenseCategory), nullable=False)
    description = Column(String, nullable=True)
    date = Column(DateTime, index=True, nullable=False)
    is_recurring = Column(Boolean, default=False, nullable=False)
    frequency = Column(_enum(Frequency), nullable=True)
    payment_method = Column(_enum(PaymentMethod), nullable=True)
    notes = Column(Text, nullable=True)
