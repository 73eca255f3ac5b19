"""
계좌 유형 서비스

분류용 데이터라 잔액과 무관하지만 소유자 범위 규칙은 동일하게 적용.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from core.constants import LedgerLimits
from core.errors import InvalidArgumentError, NotFoundError
from core.ledger.engine import require_text
from core.ledger.models import AccountTypeRecord
from core.ledger.store import LedgerStore
from core.types import AccountTheme

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


def parse_theme(value: AccountTheme | str) -> AccountTheme:
    try:
        return AccountTheme(value)
    except ValueError as e:
        valid = [t.value for t in AccountTheme]
        raise InvalidArgumentError(
            f"유효하지 않은 테마입니다: {value!r}. 유효한 값: {valid}"
        ) from e


class AccountTypeService:
    """계좌 유형 CRUD

    Args:
        db: SQLite 어댑터
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db
        self.store = LedgerStore(db)

    async def create(
        self,
        owner_id: str,
        label: str,
        theme: AccountTheme | str,
    ) -> AccountTypeRecord:
        """계좌 유형 생성

        Raises:
            InvalidArgumentError: label이 비었거나 테마가 잘못된 경우
            ConflictError: label이 이미 있는 경우
        """
        label = require_text(label, "계좌 유형 label", LedgerLimits.ACCOUNT_TYPE_LABEL_MAX)
        theme = parse_theme(theme)

        async with self.db.transaction():
            record = await self.store.insert_account_type(owner_id, label, theme)

        logger.info(f"Account type created: {label}", extra={"owner_id": owner_id})
        return record

    async def list(self, owner_id: str) -> list[AccountTypeRecord]:
        return await self.store.list_account_types(owner_id)

    async def delete(self, owner_id: str, account_type_id: str) -> None:
        async with self.db.transaction():
            if not await self.store.delete_account_type(owner_id, account_type_id):
                raise NotFoundError(f"계좌 유형을 찾을 수 없습니다: {account_type_id}")
