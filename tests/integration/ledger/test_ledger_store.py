"""LedgerStore 통합 테스트"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.errors import ConflictError
from core.ledger.store import LedgerStore
from core.types import AccountTheme, TransactionType

OWNER = "owner-1"
OTHER = "owner-2"
T0 = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def store(db: SQLiteAdapter) -> LedgerStore:
    return LedgerStore(db)


async def add_tx(
    store: LedgerStore,
    account_id: str,
    amount_minor: int,
    type: TransactionType,
    date: datetime = T0,
    owner_id: str = OWNER,
    client_ref: str | None = None,
):
    return await store.insert_transaction_with_increment(
        owner_id=owner_id,
        account_id=account_id,
        amount_minor=amount_minor,
        type=type,
        category="Test",
        date=date,
        client_ref=client_ref,
    )


class TestAccounts:
    """계좌 저장 테스트"""

    @pytest.mark.asyncio
    async def test_insert_and_get(self, store: LedgerStore) -> None:
        account = await store.insert_account(OWNER, "Wallet", "Current", color="blue")

        loaded = await store.get_account(OWNER, account.account_id)

        assert loaded is not None
        assert loaded.account_id.startswith("acc-")
        assert loaded.name == "Wallet"
        assert loaded.balance == Decimal("0.00")
        assert loaded.color == "blue"
        assert loaded.created_at is not None

    @pytest.mark.asyncio
    async def test_owner_scoped(self, store: LedgerStore) -> None:
        """다른 소유자의 계좌는 보이지 않음"""
        account = await store.insert_account(OWNER, "Wallet", "Current")

        assert await store.get_account(OTHER, account.account_id) is None
        assert await store.list_accounts(OTHER) == []
        assert await store.increment_balance(OTHER, account.account_id, 100) is None

    @pytest.mark.asyncio
    async def test_list_ordered_by_created(self, store: LedgerStore) -> None:
        later = await store.insert_account(OWNER, "B", "Current", created_at=T0 + timedelta(days=1))
        earlier = await store.insert_account(OWNER, "A", "Current", created_at=T0)

        accounts = await store.list_accounts(OWNER)

        assert [a.account_id for a in accounts] == [earlier.account_id, later.account_id]

    @pytest.mark.asyncio
    async def test_find_by_name_and_client_ref(self, store: LedgerStore) -> None:
        account = await store.insert_account(OWNER, "Wallet", "Current", client_ref="local-1")

        by_name = await store.find_account_by_name(OWNER, "Wallet")
        by_ref = await store.find_account_by_client_ref(OWNER, "local-1")

        assert by_name.account_id == account.account_id
        assert by_ref.account_id == account.account_id
        assert await store.find_account_by_name(OWNER, "Other") is None

    @pytest.mark.asyncio
    async def test_update_fields(self, store: LedgerStore) -> None:
        account = await store.insert_account(OWNER, "Wallet", "Current")

        updated = await store.update_account_fields(
            OWNER, account.account_id, {"name": "Main Wallet", "color": "rose"}
        )

        assert updated.name == "Main Wallet"
        assert updated.color == "rose"
        assert updated.balance == Decimal("0.00")

    @pytest.mark.asyncio
    async def test_update_rejects_balance(self, store: LedgerStore) -> None:
        """잔액은 필드 수정으로 바꿀 수 없음"""
        account = await store.insert_account(OWNER, "Wallet", "Current")

        with pytest.raises(ValueError, match="balance_minor"):
            await store.update_account_fields(OWNER, account.account_id, {"balance_minor": 999})

    @pytest.mark.asyncio
    async def test_increment_balance(self, store: LedgerStore) -> None:
        """원자적 증감 후 잔액 반환"""
        account = await store.insert_account(OWNER, "Wallet", "Current")

        assert await store.increment_balance(OWNER, account.account_id, 10000) == Decimal("100.00")
        assert await store.increment_balance(OWNER, account.account_id, -13000) == Decimal("-30.00")

        loaded = await store.get_account(OWNER, account.account_id)
        assert loaded.balance == Decimal("-30.00")

    @pytest.mark.asyncio
    async def test_increment_missing_account(self, store: LedgerStore) -> None:
        assert await store.increment_balance(OWNER, "acc-missing", 100) is None


class TestTransactions:
    """거래 저장 테스트"""

    @pytest.mark.asyncio
    async def test_insert_with_increment(self, store: LedgerStore) -> None:
        account = await store.insert_account(OWNER, "Wallet", "Current")

        tx = await add_tx(store, account.account_id, 2500, TransactionType.EXPENSE)

        assert tx.transaction_id.startswith("tx-")
        assert tx.amount == Decimal("25.00")
        assert tx.type == TransactionType.EXPENSE
        assert tx.balance_at == Decimal("-25.00")
        assert tx.date == T0

    @pytest.mark.asyncio
    async def test_insert_with_increment_missing_account(self, store: LedgerStore) -> None:
        """계좌가 없으면 아무것도 삽입하지 않음"""
        assert await add_tx(store, "acc-missing", 100, TransactionType.INCOME) is None
        assert await store.list_transactions(OWNER) == []

    @pytest.mark.asyncio
    async def test_list_newest_first_with_filters(self, store: LedgerStore) -> None:
        a = await store.insert_account(OWNER, "A", "Current")
        b = await store.insert_account(OWNER, "B", "Current")
        old = await add_tx(store, a.account_id, 100, TransactionType.INCOME, T0)
        new = await add_tx(store, a.account_id, 50, TransactionType.EXPENSE, T0 + timedelta(hours=1))
        other = await add_tx(store, b.account_id, 70, TransactionType.INCOME, T0 + timedelta(hours=2))

        all_txs = await store.list_transactions(OWNER)
        by_account = await store.list_transactions(OWNER, account_id=a.account_id)
        incomes = await store.list_transactions(OWNER, tx_type=TransactionType.INCOME)
        page = await store.list_transactions(OWNER, limit=1, offset=1)

        assert [t.transaction_id for t in all_txs] == [
            other.transaction_id, new.transaction_id, old.transaction_id,
        ]
        assert [t.transaction_id for t in by_account] == [new.transaction_id, old.transaction_id]
        assert {t.transaction_id for t in incomes} == {old.transaction_id, other.transaction_id}
        assert [t.transaction_id for t in page] == [new.transaction_id]

    @pytest.mark.asyncio
    async def test_find_and_bulk_delete(self, store: LedgerStore) -> None:
        account = await store.insert_account(OWNER, "A", "Current")
        t1 = await add_tx(store, account.account_id, 100, TransactionType.INCOME)
        t2 = await add_tx(store, account.account_id, 200, TransactionType.INCOME)
        await add_tx(store, account.account_id, 300, TransactionType.INCOME)

        found = await store.find_transactions(OWNER, [t1.transaction_id, t2.transaction_id, "tx-nope"])
        removed = await store.delete_transactions(OWNER, [t1.transaction_id, t2.transaction_id])

        assert len(found) == 2
        assert removed == 2
        assert len(await store.list_transactions(OWNER)) == 1
        assert await store.find_transactions(OWNER, []) == []

    @pytest.mark.asyncio
    async def test_client_ref_exists(self, store: LedgerStore) -> None:
        account = await store.insert_account(OWNER, "A", "Current")
        await add_tx(store, account.account_id, 100, TransactionType.INCOME, client_ref="local-tx-1")

        assert await store.transaction_client_ref_exists(OWNER, "local-tx-1") is True
        assert await store.transaction_client_ref_exists(OTHER, "local-tx-1") is False


class TestAggregates:
    """정합성 점검용 집계 테스트"""

    @pytest.mark.asyncio
    async def test_signed_sums(self, store: LedgerStore) -> None:
        a = await store.insert_account(OWNER, "A", "Current")
        await add_tx(store, a.account_id, 10000, TransactionType.INCOME)
        await add_tx(store, a.account_id, 3000, TransactionType.EXPENSE)

        sums = await store.get_signed_sums(OWNER)

        assert sums == {a.account_id: 7000}

    @pytest.mark.asyncio
    async def test_orphan_delete(self, store: LedgerStore) -> None:
        a = await store.insert_account(OWNER, "A", "Current")
        await add_tx(store, a.account_id, 100, TransactionType.INCOME)
        await store.delete_account(OWNER, a.account_id)

        assert await store.delete_orphan_transactions(OWNER) == 1
        assert await store.delete_orphan_transactions(OWNER) == 0


class TestAccountTypes:
    """계좌 유형 저장 테스트"""

    @pytest.mark.asyncio
    async def test_insert_and_list(self, store: LedgerStore) -> None:
        record = await store.insert_account_type(OWNER, "Savings", AccountTheme.ORANGE)

        records = await store.list_account_types(OWNER)

        assert [r.account_type_id for r in records] == [record.account_type_id]
        assert records[0].theme == AccountTheme.ORANGE
        assert await store.account_type_label_exists(OWNER, "Savings") is True

    @pytest.mark.asyncio
    async def test_duplicate_label_conflict(self, store: LedgerStore) -> None:
        await store.insert_account_type(OWNER, "Savings", AccountTheme.ORANGE)

        with pytest.raises(ConflictError):
            await store.insert_account_type(OWNER, "Savings", AccountTheme.BLUE)

    @pytest.mark.asyncio
    async def test_same_label_other_owner(self, store: LedgerStore) -> None:
        """label 유일성은 소유자 단위"""
        await store.insert_account_type(OWNER, "Savings", AccountTheme.ORANGE)
        await store.insert_account_type(OTHER, "Savings", AccountTheme.ORANGE)

        assert len(await store.list_account_types(OTHER)) == 1
