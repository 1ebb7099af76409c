# app/services/resource_store.py
"""
Ownership-scoped CRUD for every user-owned resource family.

One ResourceStore instance per ORM model (bottom of this module). Every read and
write path goes through owned_by(), so a record owned by someone else looks
exactly like a record that does not exist: find_one/update return None and
remove returns False in both cases.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy.orm import Session

from models import (
    Cash,
    ETF,
    Eurobond,
    Expense,
    Gold,
    Income,
    Loan,
    Silver,
    Stock,
)

logger = logging.getLogger(__name__)


def owned_by(model, owner_id: str, record_id: Optional[str] = None) -> list:
    """
    SQL criteria restricting `model` to rows owned by `owner_id`
    (and to a single row when `record_id` is given).
    """
    criteria = [model.user_id == owner_id]
    if record_id is not None:
        criteria.append(model.id == record_id)
    return criteria


class ResourceStore:
    def __init__(self, model, label: str, order_by: Sequence[Any] = ()):
        self.model = model
        self.label = label
        self.order_by = tuple(order_by)

    @property
    def not_found_message(self) -> str:
        return f"{self.label} not found"

    @property
    def deleted_message(self) -> str:
        return f"{self.label} deleted successfully"

    def _is_nullable(self, field: str) -> bool:
        column = self.model.__table__.columns.get(field)
        return column is None or bool(column.nullable)

    def create(self, db: Session, owner_id: str, fields: Dict[str, Any]):
        record = self.model(user_id=owner_id, **fields)
        db.add(record)
        db.commit()
        db.refresh(record)
        logger.debug("Created %s %s for user %s", self.label, record.id, owner_id)
        return record

    def find_all(self, db: Session, owner_id: str, *criteria, limit: Optional[int] = None) -> List[Any]:
        query = db.query(self.model).filter(*owned_by(self.model, owner_id), *criteria)
        if self.order_by:
            query = query.order_by(*self.order_by)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def find_one(self, db: Session, owner_id: str, record_id: str):
        return (
            db.query(self.model)
            .filter(*owned_by(self.model, owner_id, record_id))
            .first()
        )

    def update(self, db: Session, owner_id: str, record_id: str, changes: Dict[str, Any]):
        """
        Apply only the keys present in `changes`.

        An explicit null for a required column is ignored rather than
        written, so a PATCH can never blank out a mandatory field.
        """
        record = self.find_one(db, owner_id, record_id)
        if record is None:
            return None

        for field, value in changes.items():
            if value is None and not self._is_nullable(field):
                continue
            setattr(record, field, value)

        db.commit()
        db.refresh(record)
        return record

    def remove(self, db: Session, owner_id: str, record_id: str) -> bool:
        record = self.find_one(db, owner_id, record_id)
        if record is None:
            return False

        db.delete(record)
        db.commit()
        logger.debug("Deleted %s %s for user %s", self.label, record_id, owner_id)
        return True


# -------------------------------------------------------------------
# Store instances
# -------------------------------------------------------------------

stocks_store = ResourceStore(Stock, "Stock", order_by=[Stock.created_at.desc()])
etfs_store = ResourceStore(ETF, "ETF", order_by=[ETF.created_at.desc()])
eurobonds_store = ResourceStore(Eurobond, "Eurobond", order_by=[Eurobond.maturity_date.asc()])
cash_store = ResourceStore(Cash, "Cash account", order_by=[Cash.created_at.desc()])
gold_store = ResourceStore(Gold, "Gold holding", order_by=[Gold.created_at.desc()])
silver_store = ResourceStore(Silver, "Silver holding", order_by=[Silver.created_at.desc()])
loans_store = ResourceStore(Loan, "Loan", order_by=[Loan.created_at.desc()])
incomes_store = ResourceStore(Income, "Income", order_by=[Income.date.desc()])
expenses_store = ResourceStore(Expense, "Expense", order_by=[Expense.date.desc()])
