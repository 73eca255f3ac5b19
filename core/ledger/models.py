"""
Ledger 레코드 모델

accounts / transactions / account_types 행을 표현하는 dataclass.
DB에는 금액이 minor unit 정수로 저장되므로 from_row에서 Decimal로 변환한다.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any

from core.types import AccountTheme, TransactionType
from core.utils.money import from_minor


def _parse_ts(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


@dataclass
class Account:
    """계좌 (Vault)

    Attributes:
        account_id: 계좌 ID
        owner_id: 소유자 ID
        name: 표시 이름
        type: 계좌 유형 label
        balance: 잔액 (거래 부호 합과 항상 일치해야 함)
        color: 표시 색상
        card_number: 카드 번호 (마스킹)
        card_holder: 카드 소유자
        client_ref: 클라이언트 로컬 ID (sync 대조용)
        created_at: 생성 시각
        updated_at: 수정 시각
    """

    account_id: str
    owner_id: str
    name: str
    type: str
    balance: Decimal
    color: str | None = None
    card_number: str | None = None
    card_holder: str | None = None
    client_ref: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Account":
        """DB 행에서 생성"""
        return cls(
            account_id=row["account_id"],
            owner_id=row["owner_id"],
            name=row["name"],
            type=row["type"],
            balance=from_minor(row["balance_minor"]),
            color=row.get("color"),
            card_number=row.get("card_number"),
            card_holder=row.get("card_holder"),
            client_ref=row.get("client_ref"),
            created_at=_parse_ts(row.get("created_at")),
            updated_at=_parse_ts(row.get("updated_at")),
        )

    def to_dict(self) -> dict[str, Any]:
        """API 응답용 dict (금액은 문자열)"""
        return {
            "account_id": self.account_id,
            "name": self.name,
            "type": self.type,
            "balance": str(self.balance),
            "color": self.color,
            "card_number": self.card_number,
            "card_holder": self.card_holder,
            "client_ref": self.client_ref,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass
class Transaction:
    """거래 (수입/지출)

    Attributes:
        transaction_id: 거래 ID
        owner_id: 소유자 ID
        account_id: 소속 계좌 ID
        amount: 금액 (양수)
        type: income / expense
        category: 카테고리
        date: 거래 일시
        balance_at: 이 거래 반영 직후 계좌 잔액 스냅샷
        description: 설명
        transfer_group_id: 이체 쌍 식별자 (이체로 생성된 경우)
        client_ref: 클라이언트 로컬 ID (sync로 들어온 경우)
    """

    transaction_id: str
    owner_id: str
    account_id: str
    amount: Decimal
    type: TransactionType
    category: str
    date: datetime
    balance_at: Decimal
    description: str | None = None
    transfer_group_id: str | None = None
    client_ref: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Transaction":
        """DB 행에서 생성"""
        return cls(
            transaction_id=row["transaction_id"],
            owner_id=row["owner_id"],
            account_id=row["account_id"],
            amount=from_minor(row["amount_minor"]),
            type=TransactionType(row["type"]),
            category=row["category"],
            date=datetime.fromisoformat(row["date"]),
            balance_at=from_minor(row["balance_at_minor"]),
            description=row.get("description"),
            transfer_group_id=row.get("transfer_group_id"),
            client_ref=row.get("client_ref"),
            created_at=_parse_ts(row.get("created_at")),
            updated_at=_parse_ts(row.get("updated_at")),
        )

    @property
    def signed_amount(self) -> Decimal:
        """계좌 잔액에 미치는 영향 (income +, expense -)"""
        if self.type == TransactionType.INCOME:
            return self.amount
        return -self.amount

    def to_dict(self) -> dict[str, Any]:
        """API 응답용 dict (금액은 문자열)"""
        return {
            "transaction_id": self.transaction_id,
            "account_id": self.account_id,
            "amount": str(self.amount),
            "type": self.type.value,
            "category": self.category,
            "description": self.description,
            "date": self.date.isoformat(),
            "balance_at": str(self.balance_at),
            "transfer_group_id": self.transfer_group_id,
            "client_ref": self.client_ref,
        }


@dataclass
class AccountTypeRecord:
    """계좌 유형 (분류 데이터, 잔액과 무관)"""

    account_type_id: str
    owner_id: str
    label: str
    theme: AccountTheme
    created_at: datetime | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "AccountTypeRecord":
        """DB 행에서 생성"""
        return cls(
            account_type_id=row["account_type_id"],
            owner_id=row["owner_id"],
            label=row["label"],
            theme=AccountTheme(row["theme"]),
            created_at=_parse_ts(row.get("created_at")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "account_type_id": self.account_type_id,
            "label": self.label,
            "theme": self.theme.value,
        }


@dataclass
class TransferResult:
    """이체 결과 (출금 거래 + 입금 거래)"""

    transfer_group_id: str
    expense: Transaction
    income: Transaction


@dataclass
class CleanupResult:
    """중복 계좌 정리 결과"""

    removed_count: int = 0
    affected_names: set[str] = field(default_factory=set)
    removed_transactions: int = 0


@dataclass
class SyncResult:
    """Sync/import 결과"""

    accounts_mapped: int = 0
    transactions_inserted: int = 0
    transactions_skipped: int = 0
    account_types_created: int = 0
