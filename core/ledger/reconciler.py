"""
Ledger Reconciler

저장된 계좌 잔액과 거래 부호 합을 비교해 불일치(drift)를 감지하고,
짝이 맞지 않는 이체 그룹과 고아 거래를 찾는다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from core.ledger.store import LedgerStore
from core.utils.money import from_minor

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


@dataclass
class BalanceDrift:
    """잔액 불일치 정보"""

    account_id: str
    name: str
    stored: Decimal
    derived: Decimal

    @property
    def difference(self) -> Decimal:
        return self.stored - self.derived

    def to_dict(self) -> dict[str, Any]:
        return {
            "account_id": self.account_id,
            "name": self.name,
            "stored": str(self.stored),
            "derived": str(self.derived),
            "difference": str(self.difference),
        }


class LedgerReconciler:
    """잔액 정합성 점검기

    Args:
        db: SQLite 어댑터
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db
        self.store = LedgerStore(db)

    async def verify_balances(self, owner_id: str) -> list[BalanceDrift]:
        """계좌별 저장 잔액 vs 거래 부호 합 비교

        Returns:
            불일치 계좌 목록 (모두 일치하면 빈 목록)
        """
        sums = await self.store.get_signed_sums(owner_id)
        drifts: list[BalanceDrift] = []

        for account in await self.store.list_accounts(owner_id):
            derived = from_minor(sums.get(account.account_id, 0))
            if account.balance != derived:
                drifts.append(BalanceDrift(
                    account_id=account.account_id,
                    name=account.name,
                    stored=account.balance,
                    derived=derived,
                ))

        for drift in drifts:
            logger.warning(
                f"Balance drift: {drift.account_id} stored={drift.stored} derived={drift.derived}",
                extra={"owner_id": owner_id},
            )
        return drifts

    async def find_unpaired_transfers(self, owner_id: str) -> list[str]:
        """수입 1건 + 지출 1건으로 구성되지 않은 이체 그룹 ID 목록"""
        unpaired = []
        for group in await self.store.get_transfer_groups(owner_id):
            if (
                group["tx_total"] != 2
                or group["income_total"] != 1
                or group["expense_total"] != 1
            ):
                unpaired.append(group["transfer_group_id"])
        return unpaired

    async def sweep_orphans(self, owner_id: str) -> int:
        """계좌가 사라진 거래 삭제 (여러 번 실행해도 안전)"""
        async with self.db.transaction():
            removed = await self.store.delete_orphan_transactions(owner_id)

        if removed:
            logger.info(f"고아 거래 정리: {removed}건", extra={"owner_id": owner_id})
        return removed

    async def report(self, owner_id: str) -> dict[str, Any]:
        """점검 결과 요약"""
        drifts = await self.verify_balances(owner_id)
        unpaired = await self.find_unpaired_transfers(owner_id)
        return {
            "consistent": not drifts and not unpaired,
            "drifts": [d.to_dict() for d in drifts],
            "unpaired_transfer_groups": unpaired,
        }
