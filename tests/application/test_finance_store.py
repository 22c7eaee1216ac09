"""Tests for the FinanceStore command handler."""

import threading
from dataclasses import replace
from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from finance_tracker.application.use_cases.finance_store import FinanceStore
from finance_tracker.application.use_cases.get_dashboard import (
    GetDashboardUseCase,
)
from finance_tracker.domain.errors import (
    AccountNotFoundError,
    PersistenceError,
    RecordNotFoundError,
    ValidationError,
)
from finance_tracker.domain.models import (
    AccountKind,
    BillStatus,
    DashboardSnapshot,
    RecordSnapshot,
)
from finance_tracker.infrastructure.memory_repository import (
    InMemoryFinanceRepository,
)
from finance_tracker.infrastructure.sql_repository import (
    SqlAlchemyFinanceRepository,
)


def _build_store(records, as_of, logger, repository=None) -> FinanceStore:
    repo = repository or InMemoryFinanceRepository(records)
    store = FinanceStore(
        repo,
        logger=logger,
        dashboard_use_case=GetDashboardUseCase(logger=logger),
        clock=lambda: as_of,
    )
    store.load()
    return store


def _balance(store: FinanceStore, account_id: str) -> Decimal:
    return store.records.find_account(account_id).balance


def test_load_publishes_dashboard(sample_records, as_of, logger) -> None:
    store = FinanceStore(
        InMemoryFinanceRepository(sample_records),
        logger=logger,
        clock=lambda: as_of,
    )
    received: list[DashboardSnapshot] = []
    store.subscribe(received.append)

    snapshot = store.load()

    assert received == [snapshot]
    assert store.dashboard is snapshot
    assert snapshot.net_worth.net_worth == Decimal("2700.00")


def test_dashboard_is_computed_lazily_before_load(as_of, logger) -> None:
    store = FinanceStore(
        InMemoryFinanceRepository(),
        logger=logger,
        clock=lambda: as_of,
    )

    assert store.dashboard.net_worth.net_worth == Decimal("0")
    assert store.dashboard.upcoming_bills == []


def test_add_then_edit_transaction_updates_balance(
    make_account,
    make_transaction,
    as_of,
    logger,
) -> None:
    """500.00 becomes 414.58 after the add and 455.00 after the edit."""
    repo = InMemoryFinanceRepository(
        RecordSnapshot(accounts=(make_account(balance="500.00"),))
    )
    store = _build_store(None, as_of, logger, repository=repo)
    transaction = make_transaction("tx-coffee", "-85.42")

    store.add_transaction(transaction)
    assert _balance(store, "acc-checking") == Decimal("414.58")

    store.update_transaction(replace(transaction, amount=Decimal("-45.00")))
    assert _balance(store, "acc-checking") == Decimal("455.00")
    assert repo.fetch_all().find_account("acc-checking").balance == Decimal(
        "455.00"
    )


def test_add_then_delete_transaction_round_trips(
    sample_records,
    make_transaction,
    as_of,
    logger,
) -> None:
    store = _build_store(sample_records, as_of, logger)
    before = {a.id: a.balance for a in store.records.accounts}
    transaction = make_transaction("tx-temp", "-19.99", account_id="acc-card")

    store.add_transaction(transaction)
    assert store.delete_transaction("tx-temp") is True

    assert {a.id: a.balance for a in store.records.accounts} == before
    assert store.records.find_transaction("tx-temp") is None


def test_update_to_unknown_account_is_rejected(
    sample_records,
    as_of,
    logger,
) -> None:
    repo = MagicMock(wraps=InMemoryFinanceRepository(sample_records))
    store = _build_store(None, as_of, logger, repository=repo)
    records_before = store.records
    original = records_before.find_transaction("tx-rent")

    with pytest.raises(AccountNotFoundError):
        store.update_transaction(replace(original, account_id="missing"))

    assert store.records is records_before
    assert store.records.find_transaction("tx-rent") == original
    assert _balance(store, "acc-checking") == Decimal("500.00")
    repo.update_transaction.assert_not_called()


def test_add_transaction_to_unknown_account_persists_nothing(
    sample_records,
    make_transaction,
    as_of,
    logger,
) -> None:
    repo = MagicMock(wraps=InMemoryFinanceRepository(sample_records))
    store = _build_store(None, as_of, logger, repository=repo)

    with pytest.raises(AccountNotFoundError):
        store.add_transaction(make_transaction(account_id="missing"))

    repo.create_transaction.assert_not_called()


def test_add_transaction_rejects_float_amount(
    sample_records,
    make_transaction,
    as_of,
    logger,
) -> None:
    store = _build_store(sample_records, as_of, logger)
    transaction = replace(make_transaction(), amount=12.5)

    with pytest.raises(ValidationError):
        store.add_transaction(transaction)


def test_persistence_failure_keeps_snapshot(
    sample_records,
    make_transaction,
    as_of,
    logger,
) -> None:
    repo = MagicMock()
    repo.fetch_all.return_value = sample_records
    repo.create_transaction.side_effect = PersistenceError("timed out")
    store = _build_store(None, as_of, logger, repository=repo)
    records_before = store.records
    dashboard_before = store.dashboard
    observer = MagicMock()
    store.subscribe(observer)

    with pytest.raises(PersistenceError):
        store.add_transaction(make_transaction("tx-new", "-5.00"))

    assert store.records is records_before
    assert store.dashboard is dashboard_before
    observer.assert_not_called()
    logger.error.assert_called()


def test_load_failure_keeps_previous_records(
    sample_records,
    as_of,
    logger,
) -> None:
    repo = MagicMock()
    repo.fetch_all.side_effect = [sample_records, PersistenceError("down")]
    store = _build_store(None, as_of, logger, repository=repo)

    with pytest.raises(PersistenceError):
        store.load()

    assert store.records is sample_records


def test_result_superseded_by_reload_is_discarded(
    make_bill,
    as_of,
    logger,
) -> None:
    """A reload while a write is in flight wins over the write's result."""

    class _ReloadingRepository(InMemoryFinanceRepository):
        store = None

        def create_bill(self, bill):
            self.store.load()
            return super().create_bill(bill)

    repo = _ReloadingRepository()
    store = _build_store(None, as_of, logger, repository=repo)
    repo.store = store

    result = store.add_bill(make_bill("bill-new"))

    assert result is None
    assert store.records.find_bill("bill-new") is None
    logger.warning.assert_called()


def test_unexpected_repository_error_clears_pending_request(
    make_bill,
    as_of,
    logger,
) -> None:
    repo = MagicMock()
    repo.fetch_all.return_value = RecordSnapshot()
    repo.create_bill.side_effect = RuntimeError("driver crashed")
    store = _build_store(None, as_of, logger, repository=repo)

    with pytest.raises(RuntimeError):
        store.add_bill(make_bill("bill-new"))

    assert store.cancel("bill-new") is False
    assert store.records.bills == ()
    logger.error.assert_called()


def test_cancelled_request_is_discarded(make_bill, as_of, logger) -> None:
    class _CancellingRepository(InMemoryFinanceRepository):
        store = None
        cancelled = None

        def create_bill(self, bill):
            self.cancelled = self.store.cancel(bill.id)
            return super().create_bill(bill)

    repo = _CancellingRepository()
    store = _build_store(None, as_of, logger, repository=repo)
    repo.store = store

    assert store.add_bill(make_bill("bill-new")) is None
    assert repo.cancelled is True
    assert store.records.bills == ()
    assert store.cancel("bill-new") is False


def test_update_account_keeps_tracked_balance(
    sample_records,
    as_of,
    logger,
) -> None:
    store = _build_store(sample_records, as_of, logger)
    account = store.records.find_account("acc-checking")

    saved = store.update_account(
        replace(account, name="Main Checking", balance=Decimal("1.00"))
    )

    assert saved.balance == Decimal("500.00")
    assert store.records.find_account("acc-checking").name == "Main Checking"
    assert _balance(store, "acc-checking") == Decimal("500.00")
    logger.warning.assert_called()


def test_update_missing_account_is_rejected(
    make_account,
    as_of,
    logger,
) -> None:
    store = _build_store(RecordSnapshot(), as_of, logger)

    with pytest.raises(RecordNotFoundError):
        store.update_account(make_account("ghost"))


def test_account_lifecycle(make_account, as_of, logger) -> None:
    store = _build_store(RecordSnapshot(), as_of, logger)
    account = make_account("acc-new", "10.00")

    store.add_account(account)
    with pytest.raises(ValidationError):
        store.add_account(account)
    assert store.dashboard.net_worth.net_worth == Decimal("10.00")

    assert store.delete_account("acc-new") is True
    assert store.records.accounts == ()


def test_delete_account_with_transactions_is_rejected(
    sample_records,
    as_of,
    logger,
) -> None:
    store = _build_store(sample_records, as_of, logger)

    with pytest.raises(ValidationError):
        store.delete_account("acc-checking")

    assert store.records.find_account("acc-checking") is not None


def test_mark_bill_paid_updates_status(sample_records, as_of, logger):
    store = _build_store(sample_records, as_of, logger)

    store.mark_bill_paid("bill-internet")

    by_id = {bill.id: bill for bill in store.dashboard.monthly_bills}
    assert by_id["bill-internet"].status is BillStatus.PAID
    assert by_id["bill-internet"].past_due_amount == Decimal("0")


def test_bill_update_and_delete(sample_records, as_of, logger) -> None:
    store = _build_store(sample_records, as_of, logger)
    phone = store.records.find_bill("bill-phone")

    store.update_bill(replace(phone, amount=Decimal("55.00")))
    assert store.records.find_bill("bill-phone").amount == Decimal("55.00")

    assert store.delete_bill("bill-phone") is True
    assert store.records.find_bill("bill-phone") is None
    with pytest.raises(RecordNotFoundError):
        store.delete_bill("bill-phone")


def test_observers_receive_each_mutation(
    sample_records,
    make_bill,
    as_of,
    logger,
) -> None:
    store = _build_store(sample_records, as_of, logger)
    received: list[DashboardSnapshot] = []
    unsubscribe = store.subscribe(received.append)

    store.add_bill(make_bill("bill-water", "25.00", date(2024, 5, 18)))
    unsubscribe()
    store.delete_bill("bill-water")

    assert len(received) == 1
    assert "bill-water" in [bill.id for bill in received[0].upcoming_bills]


def test_failing_observer_does_not_block_others(
    sample_records,
    as_of,
    logger,
) -> None:
    store = _build_store(sample_records, as_of, logger)
    healthy = MagicMock()
    store.subscribe(MagicMock(side_effect=RuntimeError("boom")))
    store.subscribe(healthy)

    store.refresh()

    healthy.assert_called_once()
    logger.error.assert_called()


def _sql_repository(accounts) -> SqlAlchemyFinanceRepository:
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
        future=True,
    )
    db_port = MagicMock()
    db_port.get_finance_engine.return_value = engine
    repository = SqlAlchemyFinanceRepository(db_port, logger=MagicMock())
    repository.ensure_schema()
    for account in accounts:
        repository.create_account(account)
    return repository


def _assert_balances_match_ledger(records, opening) -> None:
    for account_id, start in opening.items():
        total = sum(
            (
                t.amount
                for t in records.transactions
                if t.account_id == account_id
            ),
            start,
        )
        assert records.find_account(account_id).balance == total


def test_sub_cent_amount_is_rejected_before_sql_write(
    make_account,
    make_transaction,
    as_of,
    logger,
) -> None:
    repo = _sql_repository([make_account(balance="500.00")])
    store = _build_store(None, as_of, logger, repository=repo)

    with pytest.raises(ValidationError):
        store.add_transaction(make_transaction("tx-x", "-85.425"))

    store.load()
    assert store.records.transactions == ()
    assert _balance(store, "acc-checking") == Decimal("500.00")


def test_sql_balances_survive_reload(
    make_account,
    make_transaction,
    as_of,
    logger,
) -> None:
    repo = _sql_repository([make_account(balance="500.00")])
    store = _build_store(None, as_of, logger, repository=repo)

    store.add_transaction(make_transaction("tx-coffee", "-85.42"))
    in_memory = store.records
    store.load()

    reloaded = store.records.find_account("acc-checking")
    assert reloaded == in_memory.find_account("acc-checking")
    assert store.records.find_transaction("tx-coffee").amount == Decimal(
        "-85.42"
    )
    _assert_balances_match_ledger(
        store.records, {"acc-checking": Decimal("500.00")}
    )


def test_moving_transaction_between_accounts(
    make_account,
    make_transaction,
    as_of,
    logger,
) -> None:
    opening = {
        "acc-checking": Decimal("500.00"),
        "acc-savings": Decimal("2500.00"),
    }
    repo = _sql_repository(
        [
            make_account("acc-checking", "500.00"),
            make_account("acc-savings", "2500.00", name="Savings"),
        ]
    )
    store = _build_store(None, as_of, logger, repository=repo)
    transaction = make_transaction("tx-move", "-120.00")

    store.add_transaction(transaction)
    store.update_transaction(
        replace(
            transaction,
            account_id="acc-savings",
            amount=Decimal("-100.00"),
        )
    )

    assert _balance(store, "acc-checking") == Decimal("500.00")
    assert _balance(store, "acc-savings") == Decimal("2400.00")
    store.load()
    assert _balance(store, "acc-checking") == Decimal("500.00")
    assert _balance(store, "acc-savings") == Decimal("2400.00")
    _assert_balances_match_ledger(store.records, opening)


def test_mixed_sequence_keeps_balances_in_step(
    make_account,
    make_transaction,
    as_of,
    logger,
) -> None:
    opening = {
        "acc-checking": Decimal("500.00"),
        "acc-card": Decimal("-300.00"),
    }
    repo = _sql_repository(
        [
            make_account("acc-checking", "500.00"),
            make_account(
                "acc-card",
                "-300.00",
                AccountKind.CREDIT_CARD,
                name="Card",
            ),
        ]
    )
    store = _build_store(None, as_of, logger, repository=repo)

    store.add_transaction(make_transaction("tx-a", "2000.00"))
    store.add_transaction(
        make_transaction("tx-b", "-19.99", account_id="acc-card")
    )
    store.add_transaction(make_transaction("tx-c", "-1200.00"))
    store.update_transaction(
        make_transaction("tx-b", "-29.99", account_id="acc-card")
    )
    store.update_transaction(
        make_transaction("tx-c", "-1150.00", account_id="acc-card")
    )
    store.delete_transaction("tx-a")
    store.add_transaction(
        make_transaction("tx-d", "45.10", account_id="acc-card")
    )
    _assert_balances_match_ledger(store.records, opening)

    store.load()
    _assert_balances_match_ledger(store.records, opening)
    assert _balance(store, "acc-checking") == Decimal("500.00")
    assert _balance(store, "acc-card") == Decimal("-1434.89")


def test_concurrent_commands_on_one_account_never_interleave(
    make_account,
    make_transaction,
    as_of,
    logger,
) -> None:
    repo = InMemoryFinanceRepository(
        RecordSnapshot(accounts=(make_account(balance="500.00"),))
    )
    store = _build_store(None, as_of, logger, repository=repo)
    errors: list[Exception] = []

    def worker(worker_id: int) -> None:
        try:
            for step in range(20):
                tx_id = f"tx-{worker_id}-{step}"
                store.add_transaction(make_transaction(tx_id, "-1.25"))
                if step % 3 == 0:
                    store.update_transaction(make_transaction(tx_id, "2.50"))
                if step % 5 == 0:
                    store.delete_transaction(tx_id)
        except Exception as exc:
            errors.append(exc)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    opening = {"acc-checking": Decimal("500.00")}
    _assert_balances_match_ledger(store.records, opening)
    _assert_balances_match_ledger(repo.fetch_all(), opening)
    assert len(store.records.transactions) == 8 * 16
