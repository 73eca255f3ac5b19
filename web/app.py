"""
FastAPI 애플리케이션

라우터 등록 및 앱 설정.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.config.loader import get_settings
from core.errors import (
    ConflictError,
    InvalidArgumentError,
    LedgerError,
    NotFoundError,
    StoreFailureError,
)
from core.logging import setup_logging

# 로깅 설정 (콘솔 + 파일)
setup_logging("web")

from web.routes import (
    account_types,
    accounts,
    finance,
    health,
    transactions,
    transfer,
)

logger = logging.getLogger(__name__)

# 도메인 예외 → HTTP 상태 코드
ERROR_STATUS: dict[type[LedgerError], int] = {
    NotFoundError: 404,
    InvalidArgumentError: 400,
    ConflictError: 409,
    StoreFailureError: 500,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """앱 생명주기 관리"""
    from adapters.db.sqlite_adapter import SQLiteAdapter, init_schema

    settings = get_settings()

    # 시작 시 - DB 스키마 자동 초기화
    async with SQLiteAdapter(settings.db_path) as db:
        await init_schema(db)
    logger.info(f"Web: DB 스키마 준비 완료 ({settings.db_path})")

    yield


app = FastAPI(
    title="Vaultbook API",
    description="계좌 잔액 정합성을 보장하는 가계부 API",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(get_settings().web.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    """도메인 예외를 HTTP 응답으로 변환"""
    status_code = 500
    for error_type, code in ERROR_STATUS.items():
        if isinstance(exc, error_type):
            status_code = code
            break

    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} 실패: {exc}")
    else:
        logger.info(f"{request.method} {request.url.path} → {status_code}: {exc}")

    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


# =========================================================================
# API 라우터 등록
# =========================================================================

app.include_router(health.router)
app.include_router(accounts.router)
app.include_router(account_types.router)
app.include_router(transactions.router)
app.include_router(transfer.router)
app.include_router(finance.router)
