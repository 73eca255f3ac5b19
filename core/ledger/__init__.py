"""
잔액 정합성 Ledger

계좌(Vault) 잔액이 항상 소속 거래의 부호 합과 일치하도록
모든 변경을 Balance Engine 하나로 모은다.

사용 예시:
```python
from core.ledger import BalanceEngine, LedgerReconciler

engine = BalanceEngine(db)

account = await engine.create_account("user-1", "Salary Account", "Salary")
await engine.create_transaction(
    "user-1", account.account_id, "100.00", "income", "Salary"
)

# 잔액 점검
report = await LedgerReconciler(db).report("user-1")
```
"""

from core.ledger.account_types import AccountTypeService
from core.ledger.engine import BalanceEngine
from core.ledger.models import (
    Account,
    AccountTypeRecord,
    CleanupResult,
    SyncResult,
    Transaction,
    TransferResult,
)
from core.ledger.reconciler import BalanceDrift, LedgerReconciler
from core.ledger.store import LedgerStore
from core.ledger.sync import SyncAccount, SyncAccountType, SyncService, SyncTransaction

__all__ = [
    # 핵심 클래스
    "BalanceEngine",
    "LedgerStore",
    "LedgerReconciler",
    "SyncService",
    "AccountTypeService",
    # 레코드
    "Account",
    "Transaction",
    "AccountTypeRecord",
    "TransferResult",
    "CleanupResult",
    "SyncResult",
    "BalanceDrift",
    # Sync 입력
    "SyncAccount",
    "SyncTransaction",
    "SyncAccountType",
]
