"""
로컬 데이터 JSON 가져오기

클라이언트가 내보낸 JSON(accounts / transactions / accountTypes)을
소유자 데이터로 가져온다. 같은 파일을 여러 번 가져와도 이미 가져온
거래는 건너뛴다.

사용법:
    python -m scripts.import_json --owner user-1 export.json
    python -m scripts.import_json --owner user-1 --seed --holder "Jane Doe" export.json
"""

import argparse
import asyncio
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

# 프로젝트 루트를 Python 경로에 추가
import sys
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from adapters.db.sqlite_adapter import SQLiteAdapter, get_db_path, init_schema
from core.ledger import SyncAccount, SyncAccountType, SyncService, SyncTransaction
from core.logging import setup_logging

logger = logging.getLogger(__name__)


def parse_date(value: str | None) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def parse_payload(data: dict[str, Any]) -> tuple[
    list[SyncAccount], list[SyncTransaction], list[SyncAccountType]
]:
    """내보내기 JSON → Sync 입력"""
    accounts = [
        SyncAccount(
            client_id=str(a["id"]),
            name=a["name"],
            type=a.get("type", ""),
            color=a.get("color"),
            card_number=a.get("cardNumber"),
            card_holder=a.get("cardHolder"),
        )
        for a in data.get("accounts", [])
    ]
    transactions = [
        SyncTransaction(
            account_client_id=str(tx["accountId"]),
            amount=str(tx["amount"]),
            type=tx["type"],
            category=tx["category"],
            date=parse_date(tx.get("date")),
            description=tx.get("description"),
            client_id=str(tx["id"]) if tx.get("id") is not None else None,
        )
        for tx in data.get("transactions", [])
    ]
    account_types = [
        SyncAccountType(label=t["label"], theme=t["theme"])
        for t in data.get("accountTypes", [])
    ]
    return accounts, transactions, account_types


async def run(db_path: Path, owner_id: str, source: Path, seed: bool, holder: str) -> None:
    data = json.loads(source.read_text(encoding="utf-8"))
    accounts, transactions, account_types = parse_payload(data)

    async with SQLiteAdapter(db_path) as db:
        await init_schema(db)
        service = SyncService(db)

        if seed:
            created = await service.seed_defaults(owner_id, holder)
            logger.info(f"기본 데이터: {created}")

        result = await service.import_batch(owner_id, accounts, transactions, account_types)

    logger.info(
        f"가져오기 완료: 계좌 {result.accounts_mapped}, "
        f"거래 {result.transactions_inserted} (건너뜀 {result.transactions_skipped}), "
        f"계좌 유형 {result.account_types_created}"
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="로컬 데이터 JSON 가져오기")
    parser.add_argument("source", type=Path, help="내보내기 JSON 파일")
    parser.add_argument("--owner", required=True, help="소유자 ID")
    parser.add_argument(
        "--mode",
        choices=["development", "production"],
        default="development",
    )
    parser.add_argument("--db", type=Path, default=None, help="DB 파일 경로 (mode보다 우선)")
    parser.add_argument("--seed", action="store_true", help="가져오기 전에 기본 데이터 생성")
    parser.add_argument("--holder", default="", help="기본 Vault 카드 소유자 이름")
    args = parser.parse_args()

    setup_logging("cli")
    asyncio.run(
        run(args.db or get_db_path(args.mode), args.owner, args.source, args.seed, args.holder)
    )


if __name__ == "__main__":
    main()
