"""SyncService 통합 테스트 (가져오기 / 기본 데이터 생성)"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.errors import InvalidArgumentError
from core.ledger import (
    BalanceEngine,
    LedgerReconciler,
    SyncAccount,
    SyncAccountType,
    SyncService,
    SyncTransaction,
)

OWNER = "owner-1"
OTHER = "owner-2"
T0 = datetime(2026, 2, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def service(db: SQLiteAdapter) -> SyncService:
    return SyncService(db)


def local_accounts() -> list[SyncAccount]:
    return [
        SyncAccount(client_id="L1", name="Wallet", type="Current", color="blue"),
        SyncAccount(client_id="L2", name="Savings", type="Savings"),
    ]


def local_transactions() -> list[SyncTransaction]:
    return [
        SyncTransaction(client_id="T1", account_client_id="L1", amount="100", type="income", category="Salary", date=T0),
        SyncTransaction(client_id="T2", account_client_id="L1", amount="30", type="expense", category="Food", date=T0),
        SyncTransaction(client_id="T3", account_client_id="L2", amount="12.50", type="income", category="Gift", date=T0),
    ]


class TestImportBatch:
    """import_batch 테스트"""

    @pytest.mark.asyncio
    async def test_creates_accounts_and_transactions(self, service: SyncService, engine: BalanceEngine) -> None:
        result = await service.import_batch(OWNER, local_accounts(), local_transactions())

        accounts = {a.name: a for a in await engine.list_accounts(OWNER)}
        assert result.accounts_mapped == 2
        assert result.transactions_inserted == 3
        assert accounts["Wallet"].balance == Decimal("70.00")
        assert accounts["Savings"].balance == Decimal("12.50")
        assert accounts["Wallet"].client_ref == "L1"
        assert await LedgerReconciler(service.db).verify_balances(OWNER) == []

    @pytest.mark.asyncio
    async def test_balance_at_recorded(self, service: SyncService, engine: BalanceEngine) -> None:
        await service.import_batch(OWNER, local_accounts(), local_transactions()[:2])

        txs = {t.client_ref: t for t in await engine.list_transactions(OWNER)}
        assert txs["T1"].balance_at == Decimal("100.00")
        assert txs["T2"].balance_at == Decimal("70.00")

    @pytest.mark.asyncio
    async def test_unmapped_account_dropped(self, service: SyncService, engine: BalanceEngine) -> None:
        """계좌 참조가 매핑되지 않는 거래는 조용히 버림"""
        transactions = local_transactions() + [
            SyncTransaction(client_id="T9", account_client_id="L-unknown", amount="5", type="income", category="x"),
        ]

        result = await service.import_batch(OWNER, local_accounts(), transactions)

        assert result.transactions_inserted == 3
        assert result.transactions_skipped == 0
        assert len(await engine.list_transactions(OWNER)) == 3

    @pytest.mark.asyncio
    async def test_rerun_does_not_double(self, service: SyncService, engine: BalanceEngine) -> None:
        """같은 데이터를 다시 가져와도 잔액 / 계좌 중복 없음"""
        await service.import_batch(OWNER, local_accounts(), local_transactions())

        second = await service.import_batch(OWNER, local_accounts(), local_transactions())

        accounts = await engine.list_accounts(OWNER)
        assert len(accounts) == 2
        assert second.transactions_inserted == 0
        assert second.transactions_skipped == 3
        assert {a.name: a.balance for a in accounts}["Wallet"] == Decimal("70.00")

    @pytest.mark.asyncio
    async def test_reuses_account_by_name(self, service: SyncService, engine: BalanceEngine) -> None:
        """client_ref가 없는 기존 계좌는 이름으로 재사용하고 client_ref 기록"""
        existing = await engine.create_account(OWNER, "Wallet", "Current", opening_balance="5")

        result = await service.import_batch(OWNER, local_accounts()[:1], local_transactions()[:1])

        account = await engine.get_account(OWNER, existing.account_id)
        assert result.accounts_mapped == 1
        assert len(await engine.list_accounts(OWNER)) == 1
        assert account.client_ref == "L1"
        assert account.balance == Decimal("105.00")

    @pytest.mark.asyncio
    async def test_client_balance_ignored(self, service: SyncService, engine: BalanceEngine) -> None:
        """로컬 계좌만 가져오면 잔액은 0"""
        await service.import_batch(OWNER, local_accounts(), [])

        assert all(a.balance == Decimal("0.00") for a in await engine.list_accounts(OWNER))

    @pytest.mark.asyncio
    async def test_transactions_without_client_id(self, service: SyncService, engine: BalanceEngine) -> None:
        """client_id 없는 거래는 중복 검사 없이 삽입"""
        tx = SyncTransaction(account_client_id="L1", amount="1", type="income", category="x")

        await service.import_batch(OWNER, local_accounts(), [tx])
        await service.import_batch(OWNER, local_accounts(), [tx])

        assert len(await engine.list_transactions(OWNER)) == 2

    @pytest.mark.asyncio
    async def test_invalid_transaction_rolls_back_batch(self, service: SyncService, engine: BalanceEngine) -> None:
        """잘못된 거래가 있으면 전체 롤백"""
        transactions = local_transactions() + [
            SyncTransaction(client_id="T4", account_client_id="L1", amount="-1", type="income", category="x"),
        ]

        with pytest.raises(InvalidArgumentError):
            await service.import_batch(OWNER, local_accounts(), transactions)

        assert await engine.list_accounts(OWNER) == []
        assert await engine.list_transactions(OWNER) == []

    @pytest.mark.asyncio
    async def test_account_types(self, service: SyncService) -> None:
        """계좌 유형: 새 label만 생성, 잘못된 테마는 건너뜀"""
        types = [
            SyncAccountType(label="Travel", theme="rose"),
            SyncAccountType(label="Travel", theme="blue"),
            SyncAccountType(label="Broken", theme="neon"),
        ]

        result = await service.import_batch(OWNER, [], [], types)

        records = await service.store.list_account_types(OWNER)
        assert result.account_types_created == 1
        assert [r.label for r in records] == ["Travel"]

    @pytest.mark.asyncio
    async def test_owner_isolation(self, service: SyncService, engine: BalanceEngine) -> None:
        await service.import_batch(OTHER, local_accounts(), local_transactions())

        result = await service.import_batch(OWNER, local_accounts(), local_transactions())

        assert result.transactions_inserted == 3
        assert len(await engine.list_accounts(OWNER)) == 2


class TestSeedDefaults:
    """seed_defaults 테스트"""

    @pytest.mark.asyncio
    async def test_creates_defaults(self, service: SyncService, engine: BalanceEngine) -> None:
        created = await service.seed_defaults(OWNER, "Jane Doe")

        accounts = await engine.list_accounts(OWNER)
        types = await service.store.list_account_types(OWNER)
        assert created == {"account_types": 4, "accounts": 4}
        assert [a.name for a in accounts] == [
            "Family Vault", "Salary Account", "Current Account", "Savings Goal",
        ]
        assert all(a.card_holder == "JANE DOE" for a in accounts)
        assert all(a.balance == Decimal("0.00") for a in accounts)
        assert [t.label for t in types] == ["Family", "Salary", "Current", "Savings"]

    @pytest.mark.asyncio
    async def test_idempotent(self, service: SyncService, engine: BalanceEngine) -> None:
        await service.seed_defaults(OWNER, "Jane")

        again = await service.seed_defaults(OWNER, "Jane")

        assert again == {"account_types": 0, "accounts": 0}
        assert len(await engine.list_accounts(OWNER)) == 4

    @pytest.mark.asyncio
    async def test_skips_existing(self, service: SyncService, engine: BalanceEngine) -> None:
        await engine.create_account(OWNER, "Salary Account", "Salary")

        created = await service.seed_defaults(OWNER, "")

        assert created["accounts"] == 3
        assert len(await engine.list_accounts(OWNER)) == 4

    @pytest.mark.asyncio
    async def test_empty_holder(self, service: SyncService, engine: BalanceEngine) -> None:
        await service.seed_defaults(OWNER, "  ")

        assert all(a.card_holder is None for a in await engine.list_accounts(OWNER))
