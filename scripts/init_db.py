"""
Ledger 스키마 초기화

사용법:
    python -m scripts.init_db --mode development
    python -m scripts.init_db --db data/custom.db
"""

import argparse
import asyncio
import logging
from pathlib import Path

# 프로젝트 루트를 Python 경로에 추가
import sys
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from adapters.db.sqlite_adapter import SQLiteAdapter, get_db_path, init_schema
from core.logging import setup_logging

logger = logging.getLogger(__name__)

TABLES = ("accounts", "transactions", "account_types")


async def run(db_path: Path) -> None:
    async with SQLiteAdapter(db_path) as db:
        await init_schema(db)

        for table in TABLES:
            exists = await db.table_exists(table)
            columns = await db.get_table_info(table) if exists else []
            logger.info(f"  {table}: {'OK' if exists else 'MISSING'} ({len(columns)} columns)")

    logger.info(f"스키마 초기화 완료: {db_path}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Ledger 스키마 초기화")
    parser.add_argument(
        "--mode",
        choices=["development", "production"],
        default="development",
        help="실행 모드 (기본: development)",
    )
    parser.add_argument("--db", type=Path, default=None, help="DB 파일 경로 (mode보다 우선)")
    args = parser.parse_args()

    setup_logging("cli")
    asyncio.run(run(args.db or get_db_path(args.mode)))


if __name__ == "__main__":
    main()
