from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from models.category import Category


@dataclass
class Transaction:
    id: int
    user_id: int
    type: str               # 'income' | 'expense'
    amount: Decimal
    transaction_date: date
    description: str = ""
    due_date: Optional[date] = None
    category_id: Optional[int] = None
    is_paid: bool = False
    is_fixed: bool = False
    is_recurring: bool = False
    recurring_interval: Optional[str] = None    # 'weekly' | 'monthly' | 'yearly'
    is_installment: bool = False
    installment_number: Optional[int] = None
    installment_count: Optional[int] = None
    parent_transaction_id: Optional[int] = None
    created_at: str = ""
    updated_at: str = ""
    category: Optional[Category] = None         # display join, filled by the service

    @property
    def installment_label(self) -> str:
        """'3/12' for installment rows, '' otherwise."""
        if self.is_installment and self.installment_number and self.installment_count:
            return f"{self.installment_number}/{self.installment_count}"
        return ""

    @property
    def category_name(self) -> str:
        return self.category.name if self.category else ""


@dataclass
class TransactionDraft:
    """A creation request, before installment expansion."""
    type: str
    amount: Decimal
    transaction_date: date
    description: str = ""
    due_date: Optional[date] = None
    category_id: Optional[int] = None
    is_paid: bool = True
    is_fixed: bool = False
    is_recurring: bool = False
    recurring_interval: Optional[str] = None
    is_installment: bool = False
    installment_count: Optional[int] = None
