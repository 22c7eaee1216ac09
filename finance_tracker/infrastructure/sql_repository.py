"""SQLAlchemy-backed repository for finance records."""

from collections.abc import Mapping
from dataclasses import replace
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    MetaData,
    Numeric,
    String,
    Table,
    delete,
    insert,
    select,
    update,
)
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from finance_tracker.application.ports.database import DatabaseEnginePort
from finance_tracker.application.ports.finance_repository import (
    FinanceRepositoryPort,
)
from finance_tracker.domain.errors import (
    AccountNotFoundError,
    PersistenceError,
    RecordNotFoundError,
)
from finance_tracker.domain.models import (
    Account,
    AccountKind,
    Bill,
    RecordSnapshot,
    RecurringFrequency,
    Transaction,
    TransactionCategory,
)
from finance_tracker.infrastructure.logging.logger import get_app_logger
from finance_tracker.utils.coercion import coerce_date, coerce_decimal


metadata = MetaData()

accounts_table = Table(
    "accounts",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("name", String(255), nullable=False),
    Column("institution", String(255), nullable=False),
    Column("kind", String(32), nullable=False),
    Column("balance", Numeric(14, 2), nullable=False),
    Column("account_number", String(64)),
    Column("is_active", Boolean, nullable=False),
)

transactions_table = Table(
    "transactions",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("occurred_on", Date, nullable=False),
    Column("amount", Numeric(14, 2), nullable=False),
    Column("description", String(255), nullable=False),
    Column("category", String(32), nullable=False),
    Column("account_id", String(64), nullable=False),
    Column("is_recurring", Boolean, nullable=False),
)

bills_table = Table(
    "bills",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("name", String(255), nullable=False),
    Column("amount", Numeric(14, 2), nullable=False),
    Column("due_date", Date, nullable=False),
    Column("is_paid", Boolean, nullable=False),
    Column("is_recurring", Boolean, nullable=False),
    Column("frequency", String(16), nullable=False),
    Column("category", String(64), nullable=False),
)


class SqlAlchemyFinanceRepository(FinanceRepositoryPort):
    """Repository backed by SQLAlchemy for accounts, transactions and bills.

    Every write runs in a single database transaction; SQLAlchemy and
    timeout failures are raised as ``PersistenceError``.
    """

    def __init__(self, db_port: DatabaseEnginePort, logger=None) -> None:
        """Initialize the repository.

        Args:
            db_port: Port providing access to the finance engine.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._db_port = db_port
        self._logger = logger or get_app_logger()

    def ensure_schema(self) -> None:
        """Create the finance tables if they do not exist."""
        engine = self._db_port.get_finance_engine()
        try:
            metadata.create_all(engine)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to create schema: {exc}") from exc
        self._logger.info("Finance tables are ready")

    def fetch_all(self) -> RecordSnapshot:
        def work(conn: Connection) -> RecordSnapshot:
            accounts = conn.execute(
                select(accounts_table).order_by(accounts_table.c.name)
            ).all()
            transactions = conn.execute(
                select(transactions_table).order_by(
                    transactions_table.c.occurred_on,
                    transactions_table.c.id,
                )
            ).all()
            bills = conn.execute(
                select(bills_table).order_by(
                    bills_table.c.due_date,
                    bills_table.c.id,
                )
            ).all()
            return RecordSnapshot(
                accounts=tuple(self._to_account(row) for row in accounts),
                transactions=tuple(
                    self._to_transaction(row) for row in transactions
                ),
                bills=tuple(self._to_bill(row) for row in bills),
            )

        snapshot = self._run("fetch_all", work, write=False)
        self._logger.info(
            f"Fetched {len(snapshot.accounts)} accounts, "
            f"{len(snapshot.transactions)} transactions and "
            f"{len(snapshot.bills)} bills"
        )
        return snapshot

    def create_account(self, account: Account) -> Account:
        def work(conn: Connection) -> Account:
            conn.execute(insert(accounts_table), self._account_params(account))
            return account

        return self._run("create_account", work)

    def update_account(self, account: Account) -> Account:
        def work(conn: Connection) -> Account:
            params = self._account_params(account)
            params.pop("balance")
            params.pop("id")
            result = conn.execute(
                update(accounts_table)
                .where(accounts_table.c.id == account.id)
                .values(**params)
            )
            if result.rowcount == 0:
                raise RecordNotFoundError("Account", account.id)
            balance = conn.execute(
                select(accounts_table.c.balance).where(
                    accounts_table.c.id == account.id
                )
            ).scalar_one()
            return replace(account, balance=coerce_decimal(balance))

        return self._run("update_account", work)

    def delete_account(self, account_id: str) -> None:
        def work(conn: Connection) -> None:
            result = conn.execute(
                delete(accounts_table).where(accounts_table.c.id == account_id)
            )
            if result.rowcount == 0:
                raise RecordNotFoundError("Account", account_id)

        self._run("delete_account", work)

    def create_transaction(
        self,
        transaction: Transaction,
        balance_changes: Mapping[str, Decimal],
    ) -> Transaction:
        def work(conn: Connection) -> Transaction:
            self._apply_changes(conn, balance_changes)
            conn.execute(
                insert(transactions_table),
                self._transaction_params(transaction),
            )
            return transaction

        return self._run("create_transaction", work)

    def update_transaction(
        self,
        transaction: Transaction,
        balance_changes: Mapping[str, Decimal],
    ) -> Transaction:
        def work(conn: Connection) -> Transaction:
            params = self._transaction_params(transaction)
            params.pop("id")
            result = conn.execute(
                update(transactions_table)
                .where(transactions_table.c.id == transaction.id)
                .values(**params)
            )
            if result.rowcount == 0:
                raise RecordNotFoundError("Transaction", transaction.id)
            self._apply_changes(conn, balance_changes)
            return transaction

        return self._run("update_transaction", work)

    def delete_transaction(
        self,
        transaction_id: str,
        balance_changes: Mapping[str, Decimal],
    ) -> None:
        def work(conn: Connection) -> None:
            result = conn.execute(
                delete(transactions_table).where(
                    transactions_table.c.id == transaction_id
                )
            )
            if result.rowcount == 0:
                raise RecordNotFoundError("Transaction", transaction_id)
            self._apply_changes(conn, balance_changes)

        self._run("delete_transaction", work)

    def create_bill(self, bill: Bill) -> Bill:
        def work(conn: Connection) -> Bill:
            conn.execute(insert(bills_table), self._bill_params(bill))
            return bill

        return self._run("create_bill", work)

    def update_bill(self, bill: Bill) -> Bill:
        def work(conn: Connection) -> Bill:
            params = self._bill_params(bill)
            params.pop("id")
            result = conn.execute(
                update(bills_table)
                .where(bills_table.c.id == bill.id)
                .values(**params)
            )
            if result.rowcount == 0:
                raise RecordNotFoundError("Bill", bill.id)
            return bill

        return self._run("update_bill", work)

    def delete_bill(self, bill_id: str) -> None:
        def work(conn: Connection) -> None:
            result = conn.execute(
                delete(bills_table).where(bills_table.c.id == bill_id)
            )
            if result.rowcount == 0:
                raise RecordNotFoundError("Bill", bill_id)

        self._run("delete_bill", work)

    def _run(self, action: str, work, write: bool = True):
        """Run ``work`` on a connection, translating driver failures.

        Writes run inside ``engine.begin()`` so a raised error rolls every
        statement back.
        """
        engine = self._db_port.get_finance_engine()
        try:
            context = engine.begin() if write else engine.connect()
            with context as conn:
                return work(conn)
        except (SQLAlchemyError, TimeoutError) as exc:
            self._logger.error(f"{action} failed: {exc}")
            raise PersistenceError(f"{action} failed: {exc}") from exc

    @staticmethod
    def _apply_changes(
        conn: Connection,
        balance_changes: Mapping[str, Decimal],
    ) -> None:
        for account_id, delta in balance_changes.items():
            result = conn.execute(
                update(accounts_table)
                .where(accounts_table.c.id == account_id)
                .values(balance=accounts_table.c.balance + delta)
            )
            if result.rowcount == 0:
                raise AccountNotFoundError(account_id)

    @staticmethod
    def _account_params(account: Account) -> dict:
        return {
            "id": account.id,
            "name": account.name,
            "institution": account.institution,
            "kind": account.kind.value,
            "balance": account.balance,
            "account_number": account.account_number,
            "is_active": account.is_active,
        }

    @staticmethod
    def _transaction_params(transaction: Transaction) -> dict:
        return {
            "id": transaction.id,
            "occurred_on": transaction.occurred_on,
            "amount": transaction.amount,
            "description": transaction.description,
            "category": transaction.category.value,
            "account_id": transaction.account_id,
            "is_recurring": transaction.is_recurring,
        }

    @staticmethod
    def _bill_params(bill: Bill) -> dict:
        return {
            "id": bill.id,
            "name": bill.name,
            "amount": bill.amount,
            "due_date": bill.due_date,
            "is_paid": bill.is_paid,
            "is_recurring": bill.is_recurring,
            "frequency": bill.frequency.value,
            "category": bill.category,
        }

    @staticmethod
    def _to_account(row) -> Account:
        return Account(
            id=row.id,
            name=row.name,
            institution=row.institution,
            kind=AccountKind(row.kind),
            balance=coerce_decimal(row.balance),
            account_number=row.account_number,
            is_active=bool(row.is_active),
        )

    @staticmethod
    def _to_transaction(row) -> Transaction:
        return Transaction(
            id=row.id,
            occurred_on=coerce_date(row.occurred_on),
            amount=coerce_decimal(row.amount),
            description=row.description,
            category=TransactionCategory(row.category),
            account_id=row.account_id,
            is_recurring=bool(row.is_recurring),
        )

    @staticmethod
    def _to_bill(row) -> Bill:
        return Bill(
            id=row.id,
            name=row.name,
            amount=coerce_decimal(row.amount),
            due_date=coerce_date(row.due_date),
            is_paid=bool(row.is_paid),
            is_recurring=bool(row.is_recurring),
            frequency=RecurringFrequency(row.frequency),
            category=row.category,
        )


__all__ = [
    "SqlAlchemyFinanceRepository",
    "metadata",
    "accounts_table",
    "transactions_table",
    "bills_table",
]
