"""
거래 API 라우터

거래 생성/수정/삭제는 모두 Balance Engine을 거쳐 계좌 잔액에 반영된다.
"""

from fastapi import APIRouter, Depends, Query

from core.constants import Defaults
from core.ledger import BalanceEngine
from web.dependencies import get_engine, get_owner_id
from web.models.requests import (
    BulkDeleteRequest,
    TransactionCreateRequest,
    TransactionUpdateRequest,
)
from web.models.responses import DeleteResponse, TransactionResponse

router = APIRouter(prefix="/api/transactions", tags=["Transactions"])


@router.get("", response_model=list[TransactionResponse])
async def list_transactions(
    account_id: str | None = Query(default=None, description="계좌 필터"),
    type: str | None = Query(default=None, description="income / expense"),
    limit: int = Query(default=Defaults.PAGE_LIMIT, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    owner_id: str = Depends(get_owner_id),
    engine: BalanceEngine = Depends(get_engine),
) -> list[TransactionResponse]:
    """거래 목록 (최신 날짜 순)"""
    transactions = await engine.list_transactions(
        owner_id,
        account_id=account_id,
        tx_type=type,
        limit=limit,
        offset=offset,
    )
    return [TransactionResponse(**tx.to_dict()) for tx in transactions]


@router.post("", response_model=TransactionResponse, status_code=201)
async def create_transaction(
    request: TransactionCreateRequest,
    owner_id: str = Depends(get_owner_id),
    engine: BalanceEngine = Depends(get_engine),
) -> TransactionResponse:
    tx = await engine.create_transaction(
        owner_id,
        account_id=request.account_id,
        amount=request.amount,
        type=request.type,
        category=request.category,
        date=request.date,
        description=request.description,
    )
    return TransactionResponse(**tx.to_dict())


# 정적 경로를 /{transaction_id}보다 먼저 등록
@router.delete("/bulk-delete", response_model=DeleteResponse)
async def bulk_delete_transactions(
    request: BulkDeleteRequest,
    owner_id: str = Depends(get_owner_id),
    engine: BalanceEngine = Depends(get_engine),
) -> DeleteResponse:
    """거래 일괄 삭제 (빈 목록 400, 일치 없음 404)"""
    deleted = await engine.bulk_delete_transactions(owner_id, request.ids)
    return DeleteResponse(deleted=deleted)


@router.delete("/delete-all", response_model=DeleteResponse)
async def delete_all_transactions(
    owner_id: str = Depends(get_owner_id),
    engine: BalanceEngine = Depends(get_engine),
) -> DeleteResponse:
    deleted = await engine.delete_all_transactions(owner_id)
    return DeleteResponse(deleted=deleted)


@router.get("/{transaction_id}", response_model=TransactionResponse)
async def get_transaction(
    transaction_id: str,
    owner_id: str = Depends(get_owner_id),
    engine: BalanceEngine = Depends(get_engine),
) -> TransactionResponse:
    tx = await engine.get_transaction(owner_id, transaction_id)
    return TransactionResponse(**tx.to_dict())


@router.put("/{transaction_id}", response_model=TransactionResponse)
async def update_transaction(
    transaction_id: str,
    request: TransactionUpdateRequest,
    owner_id: str = Depends(get_owner_id),
    engine: BalanceEngine = Depends(get_engine),
) -> TransactionResponse:
    """거래 수정 (계좌 이동 포함)"""
    tx = await engine.update_transaction(
        owner_id,
        transaction_id,
        amount=request.amount,
        type=request.type,
        category=request.category,
        description=request.description,
        date=request.date,
        account_id=request.account_id,
    )
    return TransactionResponse(**tx.to_dict())


@router.delete("/{transaction_id}", response_model=DeleteResponse)
async def delete_transaction(
    transaction_id: str,
    owner_id: str = Depends(get_owner_id),
    engine: BalanceEngine = Depends(get_engine),
) -> DeleteResponse:
    deleted = await engine.delete_transaction(owner_id, transaction_id)
    return DeleteResponse(deleted=deleted)
