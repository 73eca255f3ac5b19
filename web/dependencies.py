"""
의존성 주입

FastAPI의 Depends를 사용한 의존성 관리.
"""

from typing import AsyncGenerator

from fastapi import Depends, Header, HTTPException

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import Settings, get_settings
from core.ledger import AccountTypeService, BalanceEngine, LedgerReconciler, SyncService


def get_app_settings() -> Settings:
    """애플리케이션 설정 반환"""
    return get_settings()


async def get_db() -> AsyncGenerator[SQLiteAdapter, None]:
    """요청 단위 DB 세션 반환

    쓰기는 서비스 계층에서 db.transaction()으로 묶는다.
    """
    settings = get_settings()
    async with SQLiteAdapter(settings.db_path) as db:
        yield db


def get_owner_id(x_owner_id: str | None = Header(default=None)) -> str:
    """X-Owner-Id 헤더에서 소유자 ID 추출

    인증은 앞단에서 처리되고, 여기서는 검증된 소유자 ID만 받는다.

    Raises:
        HTTPException: 헤더가 없으면 401
    """
    if not x_owner_id or not x_owner_id.strip():
        raise HTTPException(status_code=401, detail="X-Owner-Id 헤더가 필요합니다")
    return x_owner_id.strip()


def get_engine(db: SQLiteAdapter = Depends(get_db)) -> BalanceEngine:
    return BalanceEngine(db)


def get_sync_service(db: SQLiteAdapter = Depends(get_db)) -> SyncService:
    return SyncService(db)


def get_account_type_service(db: SQLiteAdapter = Depends(get_db)) -> AccountTypeService:
    return AccountTypeService(db)


def get_reconciler(db: SQLiteAdapter = Depends(get_db)) -> LedgerReconciler:
    return LedgerReconciler(db)
