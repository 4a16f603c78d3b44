"""In-memory service stack shared by the service tests."""
from datetime import date
from decimal import Decimal
from types import SimpleNamespace

from database.backend import Backend
from database.category_dao import CategoryDAO
from database.db_manager import DatabaseManager
from database.profile_dao import ProfileDAO
from database.transaction_dao import TransactionDAO
from database.user_dao import UserDAO
from models.transaction import Transaction, TransactionDraft
from services.auth_service import AuthService
from services.category_service import CategoryService
from services.profile_service import ProfileService
from services.query_cache import QueryCache
from services.transaction_service import TransactionService

PASSWORD = "secret123"


def make_stack(email: str | None = "ana@example.com") -> SimpleNamespace:
    """Fresh database with one signed-up (and signed-in) user unless email is None."""
    db = DatabaseManager(":memory:")
    db.initialize()
    auth = AuthService(db, UserDAO(db))
    backend = Backend(db, auth.current_user_id)
    cache = QueryCache()
    category_dao = CategoryDAO(backend)
    tx_dao = TransactionDAO(backend)
    stack = SimpleNamespace(
        db=db,
        auth=auth,
        backend=backend,
        cache=cache,
        category_dao=category_dao,
        tx_dao=tx_dao,
        categories=CategoryService(category_dao, cache, auth.current_user_id),
        transactions=TransactionService(tx_dao, category_dao, cache, auth.current_user_id),
        profiles=ProfileService(ProfileDAO(backend), auth.current_user_id),
        user=None,
    )
    if email:
        stack.user = auth.sign_up(email, PASSWORD)
    return stack


def draft(**overrides) -> TransactionDraft:
    fields = dict(
        type="expense",
        amount=Decimal("100.00"),
        transaction_date=date(2024, 1, 15),
        description="Groceries",
    )
    fields.update(overrides)
    return TransactionDraft(**fields)


_next_id = iter(range(1, 1_000_000))


def tx(type_="expense", amount="10.00", on=date(2024, 1, 10), paid=True,
       due=None, category_id=None, **extra) -> Transaction:
    """A Transaction model without touching the database."""
    return Transaction(
        id=extra.pop("id", next(_next_id)),
        user_id=1,
        type=type_,
        amount=Decimal(amount),
        transaction_date=on,
        due_date=due,
        is_paid=paid,
        category_id=category_id,
        **extra,
    )
