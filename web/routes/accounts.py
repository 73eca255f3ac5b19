"""
계좌 API 라우터

계좌(Vault) CRUD, cascade 삭제, 중복 정리.
"""

from fastapi import APIRouter, Depends

from core.ledger import BalanceEngine
from web.dependencies import get_engine, get_owner_id
from web.models.requests import AccountCreateRequest, AccountUpdateRequest
from web.models.responses import AccountDeleteResponse, AccountResponse, CleanupResponse

router = APIRouter(prefix="/api/accounts", tags=["Accounts"])


@router.get("", response_model=list[AccountResponse])
async def list_accounts(
    owner_id: str = Depends(get_owner_id),
    engine: BalanceEngine = Depends(get_engine),
) -> list[AccountResponse]:
    """계좌 목록 (생성 순)"""
    accounts = await engine.list_accounts(owner_id)
    return [AccountResponse(**a.to_dict()) for a in accounts]


@router.post("", response_model=AccountResponse, status_code=201)
async def create_account(
    request: AccountCreateRequest,
    owner_id: str = Depends(get_owner_id),
    engine: BalanceEngine = Depends(get_engine),
) -> AccountResponse:
    """계좌 생성"""
    account = await engine.create_account(
        owner_id,
        name=request.name,
        type=request.type,
        color=request.color,
        card_number=request.card_number,
        card_holder=request.card_holder,
        opening_balance=request.opening_balance,
    )
    return AccountResponse(**account.to_dict())


# 정적 경로를 /{account_id}보다 먼저 등록
@router.post("/cleanup-duplicates", response_model=CleanupResponse)
async def cleanup_duplicates(
    owner_id: str = Depends(get_owner_id),
    engine: BalanceEngine = Depends(get_engine),
) -> CleanupResponse:
    """이름이 같은 중복 계좌 정리 (가장 오래된 계좌만 남김)"""
    result = await engine.cleanup_duplicate_accounts(owner_id)
    return CleanupResponse(
        removed_count=result.removed_count,
        affected_names=sorted(result.affected_names),
        removed_transactions=result.removed_transactions,
    )


@router.get("/{account_id}", response_model=AccountResponse)
async def get_account(
    account_id: str,
    owner_id: str = Depends(get_owner_id),
    engine: BalanceEngine = Depends(get_engine),
) -> AccountResponse:
    account = await engine.get_account(owner_id, account_id)
    return AccountResponse(**account.to_dict())


@router.put("/{account_id}", response_model=AccountResponse)
async def update_account(
    account_id: str,
    request: AccountUpdateRequest,
    owner_id: str = Depends(get_owner_id),
    engine: BalanceEngine = Depends(get_engine),
) -> AccountResponse:
    """계좌 표시 필드 수정"""
    account = await engine.update_account(
        owner_id,
        account_id,
        **request.model_dump(exclude_unset=True),
    )
    return AccountResponse(**account.to_dict())


@router.delete("/{account_id}", response_model=AccountDeleteResponse)
async def delete_account(
    account_id: str,
    owner_id: str = Depends(get_owner_id),
    engine: BalanceEngine = Depends(get_engine),
) -> AccountDeleteResponse:
    """계좌 삭제 (소속 거래 함께 삭제)"""
    removed = await engine.delete_account(owner_id, account_id)
    return AccountDeleteResponse(account_id=account_id, removed_transactions=removed)
