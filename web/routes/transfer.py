"""
이체 API 라우터

POST /api/transfers - 계좌 간 이체 (지출 + 수입 거래 한 쌍)
"""

from fastapi import APIRouter, Depends

from core.ledger import BalanceEngine
from web.dependencies import get_engine, get_owner_id
from web.models.requests import TransferRequest
from web.models.responses import TransactionResponse, TransferResponse

router = APIRouter(prefix="/api/transfers", tags=["Transfer"])


@router.post("", response_model=TransferResponse, status_code=201)
async def create_transfer(
    request: TransferRequest,
    owner_id: str = Depends(get_owner_id),
    engine: BalanceEngine = Depends(get_engine),
) -> TransferResponse:
    """계좌 간 이체

    출금 계좌와 입금 계좌가 같으면 400, 둘 중 하나라도 없으면 404.
    """
    result = await engine.transfer(
        owner_id,
        source_account_id=request.source_account_id,
        target_account_id=request.target_account_id,
        amount=request.amount,
        date=request.date,
        description=request.description,
    )
    return TransferResponse(
        transfer_group_id=result.transfer_group_id,
        expense=TransactionResponse(**result.expense.to_dict()),
        income=TransactionResponse(**result.income.to_dict()),
    )
