"""
응답 스키마 (Pydantic)

Web API 응답 데이터 직렬화. 금액은 문자열 (Decimal 정밀도 유지).
"""

from datetime import datetime

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """헬스 체크 응답"""

    status: str = Field(default="ok", description="서비스 상태")
    mode: str = Field(..., description="실행 모드 (development/production)")
    timestamp: datetime = Field(..., description="응답 시간 (UTC)")


class AccountResponse(BaseModel):
    """계좌 응답"""

    account_id: str = Field(..., description="계좌 ID")
    name: str = Field(..., description="계좌 이름")
    type: str = Field(..., description="계좌 유형 label")
    balance: str = Field(..., description="잔액")
    color: str | None = Field(default=None, description="표시 색상")
    card_number: str | None = Field(default=None, description="카드 번호")
    card_holder: str | None = Field(default=None, description="카드 소유자")
    client_ref: str | None = Field(default=None, description="클라이언트 로컬 ID")
    created_at: str | None = Field(default=None, description="생성 시간")
    updated_at: str | None = Field(default=None, description="수정 시간")


class TransactionResponse(BaseModel):
    """거래 응답"""

    transaction_id: str = Field(..., description="거래 ID")
    account_id: str = Field(..., description="계좌 ID")
    amount: str = Field(..., description="금액")
    type: str = Field(..., description="거래 유형")
    category: str = Field(..., description="카테고리")
    description: str | None = Field(default=None, description="설명")
    date: str = Field(..., description="거래 일시")
    balance_at: str = Field(..., description="거래 반영 직후 잔액")
    transfer_group_id: str | None = Field(default=None, description="이체 그룹 ID")
    client_ref: str | None = Field(default=None, description="클라이언트 로컬 ID")


class AccountTypeResponse(BaseModel):
    """계좌 유형 응답"""

    account_type_id: str
    label: str
    theme: str


class DataResponse(BaseModel):
    """전체 데이터 응답"""

    accounts: list[AccountResponse]
    transactions: list[TransactionResponse]


class DeleteResponse(BaseModel):
    """삭제 결과"""

    deleted: int = Field(..., description="삭제된 거래 수")


class AccountDeleteResponse(BaseModel):
    """계좌 삭제 결과"""

    account_id: str
    removed_transactions: int = Field(..., description="함께 삭제된 거래 수")


class TransferResponse(BaseModel):
    """이체 결과"""

    transfer_group_id: str
    expense: TransactionResponse
    income: TransactionResponse


class CleanupResponse(BaseModel):
    """중복 계좌 정리 결과"""

    removed_count: int
    affected_names: list[str]
    removed_transactions: int


class SyncResponse(BaseModel):
    """Sync 결과"""

    accounts_mapped: int
    transactions_inserted: int
    transactions_skipped: int
    account_types_created: int


class SeedResponse(BaseModel):
    """기본 데이터 생성 결과"""

    account_types: int
    accounts: int


class ResetResponse(BaseModel):
    """전체 초기화 결과"""

    accounts: int
    transactions: int


class BalanceDriftResponse(BaseModel):
    """잔액 불일치 정보"""

    account_id: str
    name: str
    stored: str
    derived: str
    difference: str


class ReconcileResponse(BaseModel):
    """정합성 점검 결과"""

    consistent: bool
    drifts: list[BalanceDriftResponse]
    unpaired_transfer_groups: list[str]
    orphans_removed: int = 0
