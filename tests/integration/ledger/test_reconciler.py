"""LedgerReconciler 통합 테스트"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from core.ledger import BalanceEngine, LedgerReconciler
from core.types import TransactionType

OWNER = "owner-1"
T0 = datetime(2026, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def reconciler(engine: BalanceEngine) -> LedgerReconciler:
    return LedgerReconciler(engine.db)


class TestVerifyBalances:
    """verify_balances 테스트"""

    @pytest.mark.asyncio
    async def test_consistent(self, engine: BalanceEngine, reconciler: LedgerReconciler) -> None:
        account = await engine.create_account(OWNER, "A", "Current", opening_balance="10")
        await engine.create_transaction(OWNER, account.account_id, "3", "expense", "x")

        assert await reconciler.verify_balances(OWNER) == []

    @pytest.mark.asyncio
    async def test_detects_drift(self, engine: BalanceEngine, reconciler: LedgerReconciler) -> None:
        """잔액을 직접 바꾸면 불일치로 감지"""
        account = await engine.create_account(OWNER, "A", "Current", opening_balance="10")
        await engine.store.increment_balance(OWNER, account.account_id, 500)
        await engine.db.commit()

        drifts = await reconciler.verify_balances(OWNER)

        assert len(drifts) == 1
        assert drifts[0].account_id == account.account_id
        assert drifts[0].stored == Decimal("15.00")
        assert drifts[0].derived == Decimal("10.00")
        assert drifts[0].difference == Decimal("5.00")

    @pytest.mark.asyncio
    async def test_account_without_transactions(self, engine: BalanceEngine, reconciler: LedgerReconciler) -> None:
        await engine.create_account(OWNER, "Empty", "Current")

        assert await reconciler.verify_balances(OWNER) == []


class TestUnpairedTransfers:
    """find_unpaired_transfers 테스트"""

    @pytest.mark.asyncio
    async def test_half_pair(self, engine: BalanceEngine, reconciler: LedgerReconciler) -> None:
        """같은 그룹에 지출만 있는 경우"""
        account = await engine.create_account(OWNER, "A", "Current")
        await engine.store.insert_transaction(
            owner_id=OWNER,
            account_id=account.account_id,
            amount_minor=100,
            type=TransactionType.EXPENSE,
            category="Transfer",
            date=T0,
            balance_at=Decimal("-1.00"),
            transfer_group_id="tg-legacy",
        )
        await engine.db.commit()

        assert await reconciler.find_unpaired_transfers(OWNER) == ["tg-legacy"]


class TestSweepOrphans:
    """sweep_orphans 테스트"""

    @pytest.mark.asyncio
    async def test_removes_orphans(self, engine: BalanceEngine, reconciler: LedgerReconciler) -> None:
        account = await engine.create_account(OWNER, "A", "Current")
        await engine.store.insert_transaction(
            owner_id=OWNER,
            account_id="acc-gone",
            amount_minor=100,
            type=TransactionType.INCOME,
            category="x",
            date=T0,
            balance_at=Decimal("1.00"),
        )
        await engine.db.commit()
        kept = await engine.create_transaction(OWNER, account.account_id, "2", "income", "x")

        assert await reconciler.sweep_orphans(OWNER) == 1
        assert await reconciler.sweep_orphans(OWNER) == 0
        assert [t.transaction_id for t in await engine.list_transactions(OWNER)] == [kept.transaction_id]


class TestReport:
    @pytest.mark.asyncio
    async def test_report_shape(self, engine: BalanceEngine, reconciler: LedgerReconciler) -> None:
        a = await engine.create_account(OWNER, "A", "Current", opening_balance="10")
        b = await engine.create_account(OWNER, "B", "Current")
        await engine.transfer(OWNER, a.account_id, b.account_id, "4")

        report = await reconciler.report(OWNER)

        assert report == {"consistent": True, "drifts": [], "unpaired_transfer_groups": []}
