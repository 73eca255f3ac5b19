"""
Finance API 라우터

- GET /api/data - 전체 계좌 + 거래
- POST /api/sync - 로컬 데이터 가져오기
- POST /api/seed - 기본 계좌 유형 / Vault 생성
- DELETE /api/reset - 소유자 데이터 전체 삭제
- GET /api/reconcile - 잔액 정합성 점검 (읽기 전용)
- POST /api/reconcile/sweep - 고아 거래 정리 + 점검
"""

from fastapi import APIRouter, Depends

from core.ledger import (
    BalanceEngine,
    LedgerReconciler,
    SyncAccount,
    SyncAccountType,
    SyncService,
    SyncTransaction,
)
from web.dependencies import get_engine, get_owner_id, get_reconciler, get_sync_service
from web.models.requests import SeedRequest, SyncRequest
from web.models.responses import (
    AccountResponse,
    DataResponse,
    ReconcileResponse,
    ResetResponse,
    SeedResponse,
    SyncResponse,
    TransactionResponse,
)

router = APIRouter(prefix="/api", tags=["Finance"])


@router.get("/data", response_model=DataResponse)
async def get_data(
    owner_id: str = Depends(get_owner_id),
    engine: BalanceEngine = Depends(get_engine),
) -> DataResponse:
    """소유자의 전체 계좌와 거래 (거래는 최신 날짜 순)"""
    accounts = await engine.list_accounts(owner_id)
    transactions = await engine.list_transactions(owner_id)
    return DataResponse(
        accounts=[AccountResponse(**a.to_dict()) for a in accounts],
        transactions=[TransactionResponse(**tx.to_dict()) for tx in transactions],
    )


@router.post("/sync", response_model=SyncResponse)
async def sync_data(
    request: SyncRequest,
    owner_id: str = Depends(get_owner_id),
    service: SyncService = Depends(get_sync_service),
) -> SyncResponse:
    """로컬 데이터 가져오기

    계좌 잔액은 요청 값을 쓰지 않고 가져온 거래로 계산한다.
    """
    result = await service.import_batch(
        owner_id,
        accounts=[
            SyncAccount(
                client_id=a.id,
                name=a.name,
                type=a.type,
                color=a.color,
                card_number=a.card_number,
                card_holder=a.card_holder,
            )
            for a in request.accounts
        ],
        transactions=[
            SyncTransaction(
                account_client_id=tx.account_id,
                amount=tx.amount,
                type=tx.type,
                category=tx.category,
                date=tx.date,
                description=tx.description,
                client_id=tx.id,
            )
            for tx in request.transactions
        ],
        account_types=[
            SyncAccountType(label=t.label, theme=t.theme) for t in request.account_types
        ],
    )
    return SyncResponse(
        accounts_mapped=result.accounts_mapped,
        transactions_inserted=result.transactions_inserted,
        transactions_skipped=result.transactions_skipped,
        account_types_created=result.account_types_created,
    )


@router.post("/seed", response_model=SeedResponse)
async def seed_defaults(
    request: SeedRequest,
    owner_id: str = Depends(get_owner_id),
    service: SyncService = Depends(get_sync_service),
) -> SeedResponse:
    """가입 시 기본 데이터 생성 (이미 있으면 건너뜀)"""
    created = await service.seed_defaults(owner_id, request.holder_name)
    return SeedResponse(**created)


@router.delete("/reset", response_model=ResetResponse)
async def reset_data(
    owner_id: str = Depends(get_owner_id),
    engine: BalanceEngine = Depends(get_engine),
) -> ResetResponse:
    removed = await engine.reset(owner_id)
    return ResetResponse(**removed)


@router.get("/reconcile", response_model=ReconcileResponse)
async def reconcile(
    owner_id: str = Depends(get_owner_id),
    reconciler: LedgerReconciler = Depends(get_reconciler),
) -> ReconcileResponse:
    """잔액 불일치 / 짝 없는 이체 점검 (읽기 전용)"""
    report = await reconciler.report(owner_id)
    return ReconcileResponse(**report)


@router.post("/reconcile/sweep", response_model=ReconcileResponse)
async def sweep_orphans(
    owner_id: str = Depends(get_owner_id),
    reconciler: LedgerReconciler = Depends(get_reconciler),
) -> ReconcileResponse:
    """계좌가 사라진 거래 삭제 후 점검 결과 반환"""
    orphans_removed = await reconciler.sweep_orphans(owner_id)
    report = await reconciler.report(owner_id)
    return ReconcileResponse(**report, orphans_removed=orphans_removed)
