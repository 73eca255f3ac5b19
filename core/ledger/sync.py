"""
Sync / Import 서비스

클라이언트 로컬 데이터(계좌, 거래, 계좌 유형)를 저장소로 가져오고,
가입 시 기본 계좌 유형과 Vault를 생성한다.

계좌 대조 순서: client_ref 일치 → 이름 일치 → 새로 생성.
가져온 거래는 LedgerStore의 직접 증감 경로로 삽입된다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from core.constants import DEFAULT_ACCOUNT_TYPES, DEFAULT_ACCOUNTS, LedgerLimits
from core.errors import ConflictError, InvalidArgumentError, LedgerError
from core.ledger.account_types import parse_theme
from core.ledger.engine import optional_text, parse_tx_type, require_text
from core.ledger.models import SyncResult
from core.ledger.store import LedgerStore
from core.utils.money import parse_amount, to_minor
from core.utils.timezone import ensure_utc, now_utc

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


@dataclass
class SyncAccount:
    """클라이언트 로컬 계좌"""

    client_id: str
    name: str
    type: str
    color: str | None = None
    card_number: str | None = None
    card_holder: str | None = None


@dataclass
class SyncTransaction:
    """클라이언트 로컬 거래

    account_client_id는 SyncAccount.client_id를 가리킨다.
    """

    account_client_id: str
    amount: Decimal | str
    type: str
    category: str
    date: datetime | None = None
    description: str | None = None
    client_id: str | None = None


@dataclass
class SyncAccountType:
    """클라이언트 로컬 계좌 유형"""

    label: str
    theme: str


class SyncService:
    """Sync / Import 서비스

    Args:
        db: SQLite 어댑터
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db
        self.store = LedgerStore(db)

    async def import_batch(
        self,
        owner_id: str,
        accounts: list[SyncAccount],
        transactions: list[SyncTransaction],
        account_types: list[SyncAccountType] | None = None,
    ) -> SyncResult:
        """로컬 데이터 가져오기

        1. 계좌 유형: 같은 label이 있으면 건너뜀 (실패는 로그만 남김)
        2. 계좌: client_ref → 이름 순으로 기존 계좌 재사용, 없으면 생성
        3. 거래: 계좌 참조가 매핑되지 않으면 버림, 이미 가져온 client_ref면 건너뜀

        클라이언트가 보낸 계좌 잔액은 쓰지 않는다. 잔액은 가져온 거래로만 쌓인다.
        전체가 하나의 트랜잭션이라 잘못된 거래 하나가 있으면 전부 롤백된다.
        """
        result = SyncResult()
        account_map: dict[str, str] = {}  # client_id -> account_id

        async with self.db.transaction():
            # 1. 계좌 유형
            for account_type in account_types or []:
                if await self._import_account_type(owner_id, account_type):
                    result.account_types_created += 1

            # 2. 계좌
            for sync_account in accounts:
                account_map[sync_account.client_id] = await self._resolve_account(
                    owner_id, sync_account
                )
            result.accounts_mapped = len(account_map)

            # 3. 거래
            for sync_tx in transactions:
                account_id = account_map.get(sync_tx.account_client_id)
                if account_id is None:
                    logger.debug(
                        f"매핑되지 않은 계좌 참조, 거래 버림: {sync_tx.account_client_id}"
                    )
                    continue

                if sync_tx.client_id and await self.store.transaction_client_ref_exists(
                    owner_id, sync_tx.client_id
                ):
                    result.transactions_skipped += 1
                    continue

                amount = parse_amount(sync_tx.amount)
                inserted = await self.store.insert_transaction_with_increment(
                    owner_id=owner_id,
                    account_id=account_id,
                    amount_minor=to_minor(amount),
                    type=parse_tx_type(sync_tx.type),
                    category=require_text(sync_tx.category, "카테고리", LedgerLimits.CATEGORY_MAX),
                    date=ensure_utc(sync_tx.date) if sync_tx.date else now_utc(),
                    description=optional_text(
                        sync_tx.description, "설명", LedgerLimits.DESCRIPTION_MAX
                    ),
                    client_ref=sync_tx.client_id,
                )
                if inserted is not None:
                    result.transactions_inserted += 1

        logger.info(
            "Sync 완료",
            extra={
                "owner_id": owner_id,
                "accounts_mapped": result.accounts_mapped,
                "transactions_inserted": result.transactions_inserted,
                "transactions_skipped": result.transactions_skipped,
            },
        )
        return result

    async def seed_defaults(self, owner_id: str, holder_name: str) -> dict[str, int]:
        """가입 시 기본 계좌 유형 4개와 기본 Vault 4개 생성

        이미 있는 label/이름은 건너뛰므로 여러 번 호출해도 중복이 생기지 않는다.
        실패해도 가입 흐름을 막지 않도록 예외는 로그만 남기고 삼킨다.
        """
        created = {"account_types": 0, "accounts": 0}
        card_holder = (holder_name or "").strip().upper() or None

        try:
            async with self.db.transaction():
                for label, theme in DEFAULT_ACCOUNT_TYPES:
                    if await self._import_account_type(
                        owner_id, SyncAccountType(label=label, theme=theme)
                    ):
                        created["account_types"] += 1

                for name, type_label, card_number, color in DEFAULT_ACCOUNTS:
                    if await self.store.find_account_by_name(owner_id, name):
                        continue
                    await self.store.insert_account(
                        owner_id=owner_id,
                        name=name,
                        type=type_label,
                        color=color,
                        card_number=card_number,
                        card_holder=card_holder,
                    )
                    created["accounts"] += 1
        except LedgerError as e:
            logger.warning(f"기본 데이터 생성 실패 (무시): {e}", extra={"owner_id": owner_id})
            return {"account_types": 0, "accounts": 0}

        logger.info("기본 데이터 생성 완료", extra={"owner_id": owner_id, **created})
        return created

    async def _import_account_type(
        self,
        owner_id: str,
        account_type: SyncAccountType,
    ) -> bool:
        """계좌 유형 하나 가져오기 (생성했으면 True)"""
        try:
            label = require_text(
                account_type.label, "계좌 유형 label", LedgerLimits.ACCOUNT_TYPE_LABEL_MAX
            )
            theme = parse_theme(account_type.theme)
            if await self.store.account_type_label_exists(owner_id, label):
                return False
            await self.store.insert_account_type(owner_id, label, theme)
            return True
        except (ConflictError, InvalidArgumentError) as e:
            logger.warning(f"계좌 유형 가져오기 건너뜀: {e}", extra={"owner_id": owner_id})
            return False

    async def _resolve_account(self, owner_id: str, sync_account: SyncAccount) -> str:
        """로컬 계좌를 저장소 계좌 ID로 변환"""
        account = await self.store.find_account_by_client_ref(owner_id, sync_account.client_id)
        if account is not None:
            return account.account_id

        name = require_text(sync_account.name, "계좌 이름", LedgerLimits.ACCOUNT_NAME_MAX)
        account = await self.store.find_account_by_name(owner_id, name)
        if account is not None:
            if account.client_ref is None:
                await self.store.update_account_fields(
                    owner_id, account.account_id, {"client_ref": sync_account.client_id}
                )
            return account.account_id

        account = await self.store.insert_account(
            owner_id=owner_id,
            name=name,
            type=require_text(sync_account.type, "계좌 유형", LedgerLimits.ACCOUNT_TYPE_LABEL_MAX),
            color=sync_account.color,
            card_number=sync_account.card_number,
            card_holder=sync_account.card_holder,
            client_ref=sync_account.client_id,
        )
        return account.account_id
