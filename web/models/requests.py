"""
요청 스키마 (Pydantic)

Web API 요청 데이터 검증
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from core.constants import LedgerLimits


class AccountCreateRequest(BaseModel):
    """계좌 생성 요청"""

    name: str = Field(..., max_length=LedgerLimits.ACCOUNT_NAME_MAX, description="계좌 이름")
    type: str = Field(..., max_length=LedgerLimits.ACCOUNT_TYPE_LABEL_MAX, description="계좌 유형 label")
    color: str | None = Field(default=None, description="표시 색상")
    card_number: str | None = Field(default=None, description="카드 번호 (마스킹)")
    card_holder: str | None = Field(default=None, description="카드 소유자")
    opening_balance: Decimal | None = Field(
        default=None,
        description="초기 잔액 (양수면 Opening Balance 수입 거래로 기록)",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Travel Fund",
                    "type": "Savings",
                    "color": "orange",
                    "opening_balance": "250.00",
                }
            ]
        }
    }


class AccountUpdateRequest(BaseModel):
    """계좌 표시 필드 수정 요청 (잔액은 수정 불가)"""

    name: str | None = Field(default=None, max_length=LedgerLimits.ACCOUNT_NAME_MAX, description="계좌 이름")
    type: str | None = Field(default=None, max_length=LedgerLimits.ACCOUNT_TYPE_LABEL_MAX, description="계좌 유형 label")
    color: str | None = Field(default=None, description="표시 색상")
    card_number: str | None = Field(default=None, description="카드 번호")
    card_holder: str | None = Field(default=None, description="카드 소유자")


class AccountTypeCreateRequest(BaseModel):
    """계좌 유형 생성 요청"""

    label: str = Field(..., max_length=LedgerLimits.ACCOUNT_TYPE_LABEL_MAX, description="유형 이름")
    theme: str = Field(..., description="테마 (blue/emerald/orange/purple/rose/slate/indigo)")


class TransactionCreateRequest(BaseModel):
    """거래 생성 요청"""

    account_id: str = Field(..., description="계좌 ID")
    amount: Decimal = Field(..., description="금액 (양수, 소수점 2자리까지)")
    type: str = Field(..., description="거래 유형 (income/expense)")
    category: str = Field(..., max_length=LedgerLimits.CATEGORY_MAX, description="카테고리")
    date: datetime | None = Field(default=None, description="거래 일시 (없으면 현재 시각)")
    description: str | None = Field(default=None, max_length=LedgerLimits.DESCRIPTION_MAX, description="설명")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "account_id": "acc-0123456789abcdef",
                    "amount": "42.50",
                    "type": "expense",
                    "category": "Groceries",
                    "description": "Weekly shopping",
                }
            ]
        }
    }


class TransactionUpdateRequest(BaseModel):
    """거래 수정 요청 (None인 필드는 유지)"""

    account_id: str | None = Field(default=None, description="옮길 계좌 ID")
    amount: Decimal | None = Field(default=None, description="금액")
    type: str | None = Field(default=None, description="거래 유형 (income/expense)")
    category: str | None = Field(default=None, max_length=LedgerLimits.CATEGORY_MAX, description="카테고리")
    date: datetime | None = Field(default=None, description="거래 일시")
    description: str | None = Field(
        default=None,
        max_length=LedgerLimits.DESCRIPTION_MAX,
        description="설명 (빈 문자열이면 삭제)",
    )


class BulkDeleteRequest(BaseModel):
    """거래 일괄 삭제 요청"""

    ids: list[str] = Field(..., description="삭제할 거래 ID 목록")


class TransferRequest(BaseModel):
    """계좌 간 이체 요청"""

    source_account_id: str = Field(..., description="출금 계좌 ID")
    target_account_id: str = Field(..., description="입금 계좌 ID")
    amount: Decimal = Field(..., description="이체 금액")
    date: datetime | None = Field(default=None, description="이체 일시")
    description: str | None = Field(default=None, max_length=LedgerLimits.DESCRIPTION_MAX, description="설명")


class SyncAccountRequest(BaseModel):
    """Sync 대상 로컬 계좌"""

    id: str = Field(..., description="클라이언트 로컬 계좌 ID")
    name: str = Field(..., description="계좌 이름")
    type: str = Field(..., description="계좌 유형 label")
    color: str | None = None
    card_number: str | None = None
    card_holder: str | None = None
    balance: Decimal | None = Field(default=None, description="무시됨 (잔액은 거래로 계산)")


class SyncTransactionRequest(BaseModel):
    """Sync 대상 로컬 거래"""

    id: str | None = Field(default=None, description="클라이언트 로컬 거래 ID (중복 방지)")
    account_id: str = Field(..., description="클라이언트 로컬 계좌 ID")
    amount: Decimal = Field(..., description="금액")
    type: str = Field(..., description="거래 유형 (income/expense)")
    category: str = Field(..., description="카테고리")
    date: datetime | None = None
    description: str | None = None


class SyncAccountTypeRequest(BaseModel):
    """Sync 대상 로컬 계좌 유형"""

    label: str
    theme: str


class SyncRequest(BaseModel):
    """로컬 데이터 Sync 요청"""

    accounts: list[SyncAccountRequest] = Field(default_factory=list)
    transactions: list[SyncTransactionRequest] = Field(default_factory=list)
    account_types: list[SyncAccountTypeRequest] = Field(default_factory=list)


class SeedRequest(BaseModel):
    """기본 데이터 생성 요청"""

    holder_name: str = Field(default="", description="카드 소유자 이름 (대문자로 저장)")
