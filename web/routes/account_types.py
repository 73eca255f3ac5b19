"""
계좌 유형 API 라우터
"""

from fastapi import APIRouter, Depends, Response

from core.ledger import AccountTypeService
from web.dependencies import get_account_type_service, get_owner_id
from web.models.requests import AccountTypeCreateRequest
from web.models.responses import AccountTypeResponse

router = APIRouter(prefix="/api/account-types", tags=["Account Types"])


@router.get("", response_model=list[AccountTypeResponse])
async def list_account_types(
    owner_id: str = Depends(get_owner_id),
    service: AccountTypeService = Depends(get_account_type_service),
) -> list[AccountTypeResponse]:
    records = await service.list(owner_id)
    return [AccountTypeResponse(**r.to_dict()) for r in records]


@router.post("", response_model=AccountTypeResponse, status_code=201)
async def create_account_type(
    request: AccountTypeCreateRequest,
    owner_id: str = Depends(get_owner_id),
    service: AccountTypeService = Depends(get_account_type_service),
) -> AccountTypeResponse:
    """계좌 유형 생성 (같은 label이 있으면 409)"""
    record = await service.create(owner_id, request.label, request.theme)
    return AccountTypeResponse(**record.to_dict())


@router.delete("/{account_type_id}", status_code=204)
async def delete_account_type(
    account_type_id: str,
    owner_id: str = Depends(get_owner_id),
    service: AccountTypeService = Depends(get_account_type_service),
) -> Response:
    await service.delete(owner_id, account_type_id)
    return Response(status_code=204)
