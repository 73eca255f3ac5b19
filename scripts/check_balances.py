#!/usr/bin/env python3
"""
잔액 정합성 점검 스크립트

소유자별로 저장 잔액과 거래 부호 합을 비교하고 짝 없는 이체 그룹을 찾는다.
불일치가 있으면 종료 코드 1.

사용법:
    python -m scripts.check_balances --mode production
    python -m scripts.check_balances --owner user-1 --sweep
"""

import argparse
import asyncio
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from adapters.db.sqlite_adapter import SQLiteAdapter, get_db_path
from core.ledger import LedgerReconciler
from core.logging import setup_logging


async def list_owners(db: SQLiteAdapter) -> list[str]:
    rows = await db.fetchall(
        """
        SELECT owner_id FROM accounts
        UNION
        SELECT owner_id FROM transactions
        ORDER BY owner_id
        """
    )
    return [row[0] for row in rows]


async def check(db_path: Path, owner_id: str | None, sweep: bool) -> bool:
    """점검 실행 (모두 일치하면 True)"""
    consistent = True

    async with SQLiteAdapter(db_path) as db:
        reconciler = LedgerReconciler(db)
        owners = [owner_id] if owner_id else await list_owners(db)

        print(f"DB Path: {db_path}")
        print(f"Owners: {len(owners)}")

        for owner in owners:
            if sweep:
                removed = await reconciler.sweep_orphans(owner)
                if removed:
                    print(f"[{owner}] 고아 거래 {removed}건 삭제")

            report = await reconciler.report(owner)
            if report["consistent"]:
                print(f"[{owner}] OK")
                continue

            consistent = False
            for drift in report["drifts"]:
                print(
                    f"[{owner}] DRIFT {drift['name']} ({drift['account_id']}): "
                    f"stored={drift['stored']} derived={drift['derived']} "
                    f"diff={drift['difference']}"
                )
            for group_id in report["unpaired_transfer_groups"]:
                print(f"[{owner}] UNPAIRED TRANSFER {group_id}")

    return consistent


def main() -> None:
    parser = argparse.ArgumentParser(description="잔액 정합성 점검")
    parser.add_argument(
        "--mode",
        choices=["development", "production"],
        default="development",
    )
    parser.add_argument("--db", type=Path, default=None, help="DB 파일 경로 (mode보다 우선)")
    parser.add_argument("--owner", default=None, help="특정 소유자만 점검")
    parser.add_argument("--sweep", action="store_true", help="고아 거래 정리 후 점검")
    args = parser.parse_args()

    setup_logging("cli")
    ok = asyncio.run(check(args.db or get_db_path(args.mode), args.owner, args.sweep))
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
