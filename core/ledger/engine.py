"""
Balance Engine

거래 변경(생성/수정/삭제/일괄삭제/이체)과 계좌 cascade 삭제 시
계좌 잔액이 항상 거래 부호 합과 일치하도록 delta를 계산하고 적용한다.

규칙:
- 잔액 변경은 항상 LedgerStore.increment_balance (원자적 delta 증감)
- 각 변경은 db.transaction() 하나로 묶여 전부 커밋되거나 전부 롤백됨
- 일괄 삭제는 계좌별로 delta를 합산해 계좌당 1회만 증감
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from core.constants import LedgerCategories, LedgerLimits
from core.errors import InvalidArgumentError, NotFoundError
from core.ledger.models import Account, CleanupResult, Transaction, TransferResult
from core.ledger.store import LedgerStore, new_id
from core.types import TransactionType
from core.utils.money import parse_amount, signed_minor, to_minor
from core.utils.timezone import ensure_utc, now_utc

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


def require_text(value: str | None, field_name: str, max_length: int) -> str:
    """필수 문자열 검증 (앞뒤 공백 제거)"""
    if value is None or not str(value).strip():
        raise InvalidArgumentError(f"{field_name}은(는) 필수입니다")
    value = str(value).strip()
    if len(value) > max_length:
        raise InvalidArgumentError(
            f"{field_name}은(는) {max_length}자를 넘을 수 없습니다"
        )
    return value


def optional_text(value: str | None, field_name: str, max_length: int) -> str | None:
    """선택 문자열 검증 (빈 문자열은 None)"""
    if value is None or not str(value).strip():
        return None
    return require_text(value, field_name, max_length)


def parse_tx_type(value: TransactionType | str) -> TransactionType:
    try:
        return TransactionType(value)
    except ValueError as e:
        raise InvalidArgumentError(
            f"거래 유형은 income 또는 expense여야 합니다: {value!r}"
        ) from e


def aggregate_reversals(transactions: list[Transaction]) -> dict[str, int]:
    """계좌별 순 되돌림 delta 합산 (minor unit)

    각 거래의 원래 효과를 반대로: income은 -amount, expense는 +amount.
    """
    reversals: dict[str, int] = defaultdict(int)
    for tx in transactions:
        reversals[tx.account_id] -= signed_minor(tx.type, to_minor(tx.amount))
    return dict(reversals)


class BalanceEngine:
    """Balance Engine

    계좌/거래 변경의 단일 진입점.

    Args:
        db: SQLite 어댑터 (연결된 상태)
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db
        self.store = LedgerStore(db)

    # =====================================
    # 계좌
    # =====================================

    async def create_account(
        self,
        owner_id: str,
        name: str,
        type: str,
        color: str | None = None,
        card_number: str | None = None,
        card_holder: str | None = None,
        opening_balance: Decimal | str | None = None,
    ) -> Account:
        """계좌 생성

        잔액은 항상 0에서 시작한다. opening_balance가 있으면
        "Opening Balance" 수입 거래로 기록해 잔액 불변식을 유지한다.
        """
        name = require_text(name, "계좌 이름", LedgerLimits.ACCOUNT_NAME_MAX)
        type = require_text(type, "계좌 유형", LedgerLimits.ACCOUNT_TYPE_LABEL_MAX)
        opening = parse_amount(opening_balance) if opening_balance not in (None, "", 0) else None

        async with self.db.transaction():
            account = await self.store.insert_account(
                owner_id=owner_id,
                name=name,
                type=type,
                color=color,
                card_number=card_number,
                card_holder=card_holder,
            )

            if opening is not None:
                balance_at = await self.store.increment_balance(
                    owner_id, account.account_id, to_minor(opening)
                )
                await self.store.insert_transaction(
                    owner_id=owner_id,
                    account_id=account.account_id,
                    amount_minor=to_minor(opening),
                    type=TransactionType.INCOME,
                    category=LedgerCategories.OPENING_BALANCE,
                    date=now_utc(),
                    balance_at=balance_at,  # type: ignore[arg-type]
                )
                account.balance = balance_at  # type: ignore[assignment]

        logger.info(
            f"Account created: {account.account_id}",
            extra={"owner_id": owner_id, "opening_balance": str(opening or 0)},
        )
        return account

    async def update_account(
        self,
        owner_id: str,
        account_id: str,
        **fields: Any,
    ) -> Account:
        """계좌 표시 필드 수정 (name, type, color, card_number, card_holder)

        balance는 수정 대상이 아니다.
        """
        if "balance" in fields:
            raise InvalidArgumentError("잔액은 직접 수정할 수 없습니다")

        if "name" in fields:
            fields["name"] = require_text(fields["name"], "계좌 이름", LedgerLimits.ACCOUNT_NAME_MAX)
        if "type" in fields:
            fields["type"] = require_text(fields["type"], "계좌 유형", LedgerLimits.ACCOUNT_TYPE_LABEL_MAX)

        async with self.db.transaction():
            try:
                account = await self.store.update_account_fields(owner_id, account_id, fields)
            except ValueError as e:
                raise InvalidArgumentError(str(e)) from e

        if account is None:
            raise NotFoundError(f"계좌를 찾을 수 없습니다: {account_id}")
        return account

    async def get_account(self, owner_id: str, account_id: str) -> Account:
        account = await self.store.get_account(owner_id, account_id)
        if account is None:
            raise NotFoundError(f"계좌를 찾을 수 없습니다: {account_id}")
        return account

    async def list_accounts(self, owner_id: str) -> list[Account]:
        return await self.store.list_accounts(owner_id)

    async def delete_account(self, owner_id: str, account_id: str) -> int:
        """계좌 삭제 + 소속 거래 cascade 삭제

        계좌가 사라지므로 잔액 되돌림은 필요 없다. 두 삭제는 하나의
        트랜잭션이라 중간에 실패해도 고아 거래가 남지 않는다.

        Returns:
            함께 삭제된 거래 수
        """
        async with self.db.transaction():
            if not await self.store.delete_account(owner_id, account_id):
                raise NotFoundError(f"계좌를 찾을 수 없습니다: {account_id}")
            removed = await self.store.delete_transactions_for_account(owner_id, account_id)

        logger.info(
            f"Account deleted: {account_id}",
            extra={"owner_id": owner_id, "removed_transactions": removed},
        )
        return removed

    async def cleanup_duplicate_accounts(self, owner_id: str) -> CleanupResult:
        """이름이 같은 중복 계좌 정리

        이름별로 생성 순 정렬 후 가장 오래된 계좌만 남기고 나머지는
        소속 거래와 함께 삭제한다. 삭제되는 계좌의 거래는 병합하지 않는다.
        """
        result = CleanupResult()

        async with self.db.transaction():
            accounts = await self.store.list_accounts(owner_id)

            groups: dict[str, list[Account]] = defaultdict(list)
            for account in accounts:
                groups[account.name].append(account)

            for name, members in groups.items():
                if len(members) <= 1:
                    continue

                for duplicate in members[1:]:
                    await self.store.delete_account(owner_id, duplicate.account_id)
                    result.removed_transactions += await self.store.delete_transactions_for_account(
                        owner_id, duplicate.account_id
                    )
                    result.removed_count += 1
                result.affected_names.add(name)

        if result.removed_count:
            logger.info(
                f"중복 계좌 정리: {result.removed_count}개 삭제",
                extra={"owner_id": owner_id, "names": sorted(result.affected_names)},
            )
        return result

    async def reset(self, owner_id: str) -> dict[str, int]:
        """소유자의 모든 계좌와 거래 삭제"""
        async with self.db.transaction():
            transactions = await self.store.delete_transactions(owner_id)
            accounts = await self.store.delete_accounts_for_owner(owner_id)

        logger.info(
            "Owner data reset",
            extra={"owner_id": owner_id, "accounts": accounts, "transactions": transactions},
        )
        return {"accounts": accounts, "transactions": transactions}

    # =====================================
    # 거래
    # =====================================

    async def list_transactions(
        self,
        owner_id: str,
        account_id: str | None = None,
        tx_type: TransactionType | str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Transaction]:
        return await self.store.list_transactions(
            owner_id,
            account_id=account_id,
            tx_type=parse_tx_type(tx_type) if tx_type else None,
            limit=limit,
            offset=offset,
        )

    async def get_transaction(self, owner_id: str, transaction_id: str) -> Transaction:
        tx = await self.store.get_transaction(owner_id, transaction_id)
        if tx is None:
            raise NotFoundError(f"거래를 찾을 수 없습니다: {transaction_id}")
        return tx

    async def create_transaction(
        self,
        owner_id: str,
        account_id: str,
        amount: Decimal | str,
        type: TransactionType | str,
        category: str,
        date: datetime | None = None,
        description: str | None = None,
    ) -> Transaction:
        """거래 생성

        계좌 잔액에 +amount(income) / -amount(expense)를 원자적으로 반영하고,
        반영 직후 잔액을 balance_at으로 기록한다.

        Raises:
            NotFoundError: 계좌가 없거나 소유자가 다른 경우
            InvalidArgumentError: 금액/유형/카테고리가 잘못된 경우
        """
        amount = parse_amount(amount)
        tx_type = parse_tx_type(type)
        category = require_text(category, "카테고리", LedgerLimits.CATEGORY_MAX)
        description = optional_text(description, "설명", LedgerLimits.DESCRIPTION_MAX)
        date = ensure_utc(date) if date else now_utc()

        async with self.db.transaction():
            balance_at = await self.store.increment_balance(
                owner_id, account_id, signed_minor(tx_type, to_minor(amount))
            )
            if balance_at is None:
                raise NotFoundError(f"계좌를 찾을 수 없습니다: {account_id}")

            tx = await self.store.insert_transaction(
                owner_id=owner_id,
                account_id=account_id,
                amount_minor=to_minor(amount),
                type=tx_type,
                category=category,
                date=date,
                balance_at=balance_at,
                description=description,
            )

        logger.info(
            f"Transaction created: {tx.transaction_id}",
            extra={
                "owner_id": owner_id,
                "account_id": account_id,
                "type": tx_type.value,
                "amount": str(amount),
            },
        )
        return tx

    async def update_transaction(
        self,
        owner_id: str,
        transaction_id: str,
        amount: Decimal | str | None = None,
        type: TransactionType | str | None = None,
        category: str | None = None,
        description: str | None = None,
        date: datetime | None = None,
        account_id: str | None = None,
    ) -> Transaction:
        """거래 수정

        순서:
        1. 기존 거래와 소속 계좌 조회
        2. 되돌림 delta 계산 (기존 효과의 반대)
        3. 필드 변경 적용
        4. 대상 계좌 결정 (계좌가 바뀌면 새 계좌를 소유권 확인 후 조회)
        5. 새 유형/금액으로 정방향 delta 계산
        6. 저장 - 같은 계좌면 되돌림+정방향을 합친 delta 1회 증감,
           다른 계좌면 원 계좌에 되돌림, 대상 계좌에 정방향을 각각 증감

        None인 인자는 변경하지 않는다. description에 빈 문자열을 주면 지운다.
        원 계좌가 이미 삭제된 경우 되돌림은 건너뛴다.
        """
        async with self.db.transaction():
            # 1.
            tx = await self.store.get_transaction(owner_id, transaction_id)
            if tx is None:
                raise NotFoundError(f"거래를 찾을 수 없습니다: {transaction_id}")
            original = await self.store.get_account(owner_id, tx.account_id)

            # 2.
            reversal = -signed_minor(tx.type, to_minor(tx.amount))

            # 3.
            if amount is not None:
                tx.amount = parse_amount(amount)
            if type is not None:
                tx.type = parse_tx_type(type)
            if category is not None:
                tx.category = require_text(category, "카테고리", LedgerLimits.CATEGORY_MAX)
            if description is not None:
                tx.description = optional_text(description, "설명", LedgerLimits.DESCRIPTION_MAX)
            if date is not None:
                tx.date = ensure_utc(date)

            # 4.
            target_id = account_id or tx.account_id
            if target_id != tx.account_id:
                target = await self.store.get_account(owner_id, target_id)
                if target is None:
                    raise NotFoundError(f"계좌를 찾을 수 없습니다: {target_id}")
            else:
                target = original

            # 5.
            forward = signed_minor(tx.type, to_minor(tx.amount))

            # 6.
            if target_id == tx.account_id:
                net = reversal + forward
                if original is None:
                    logger.warning(
                        f"계좌가 없는 거래 수정, 잔액 반영 생략: {transaction_id}",
                        extra={"owner_id": owner_id, "account_id": tx.account_id},
                    )
                elif net != 0:
                    tx.balance_at = await self._increment_existing(owner_id, target_id, net)
            else:
                if original is not None:
                    await self._increment_existing(owner_id, original.account_id, reversal)
                tx.balance_at = await self._increment_existing(owner_id, target_id, forward)
                tx.account_id = target_id

            await self.store.save_transaction(tx)

        logger.info(
            f"Transaction updated: {transaction_id}",
            extra={"owner_id": owner_id, "account_id": tx.account_id},
        )
        return tx

    async def delete_transaction(self, owner_id: str, transaction_id: str) -> int:
        """거래 단건 삭제

        소속 계좌 잔액에서 효과를 되돌린 뒤 거래를 삭제한다.
        계좌가 이미 없으면 잔액 조정 없이 거래만 삭제한다.

        Returns:
            삭제된 거래 수 (1)
        """
        async with self.db.transaction():
            tx = await self.store.get_transaction(owner_id, transaction_id)
            if tx is None:
                raise NotFoundError(f"거래를 찾을 수 없습니다: {transaction_id}")

            reversal = -signed_minor(tx.type, to_minor(tx.amount))
            if await self.store.increment_balance(owner_id, tx.account_id, reversal) is None:
                logger.warning(
                    f"계좌가 없는 거래 삭제, 잔액 조정 생략: {transaction_id}",
                    extra={"owner_id": owner_id, "account_id": tx.account_id},
                )

            await self.store.delete_transaction(owner_id, transaction_id)

        logger.info(f"Transaction deleted: {transaction_id}", extra={"owner_id": owner_id})
        return 1

    async def bulk_delete_transactions(
        self,
        owner_id: str,
        transaction_ids: list[str],
    ) -> int:
        """거래 일괄 삭제

        Raises:
            InvalidArgumentError: ID 목록이 비어 있는 경우
            NotFoundError: 일치하는 거래가 하나도 없는 경우
        """
        if not transaction_ids:
            raise InvalidArgumentError("삭제할 거래 ID 목록이 비어 있습니다")

        # 중복 ID 제거 (순서 유지)
        unique_ids = list(dict.fromkeys(transaction_ids))

        async with self.db.transaction():
            transactions = await self.store.find_transactions(owner_id, unique_ids)
            if not transactions:
                raise NotFoundError("삭제할 거래를 찾을 수 없습니다")

            removed = await self._remove_with_reversal(owner_id, transactions)

        logger.info(
            f"Transactions bulk deleted: {removed}",
            extra={"owner_id": owner_id, "requested": len(unique_ids)},
        )
        return removed

    async def delete_all_transactions(self, owner_id: str) -> int:
        """소유자의 전체 거래 삭제 (없으면 0)"""
        async with self.db.transaction():
            transactions = await self.store.find_transactions(owner_id)
            if not transactions:
                return 0

            removed = await self._remove_with_reversal(owner_id, transactions, all_for_owner=True)

        logger.info(f"All transactions deleted: {removed}", extra={"owner_id": owner_id})
        return removed

    async def transfer(
        self,
        owner_id: str,
        source_account_id: str,
        target_account_id: str,
        amount: Decimal | str,
        date: datetime | None = None,
        description: str | None = None,
    ) -> TransferResult:
        """계좌 간 이체

        출금 계좌에 expense, 입금 계좌에 income 거래를 하나씩 만들고
        두 거래에 같은 transfer_group_id를 기록한다.

        Raises:
            InvalidArgumentError: 출금/입금 계좌가 같거나 금액이 잘못된 경우
            NotFoundError: 둘 중 하나라도 계좌가 없는 경우
        """
        if source_account_id == target_account_id:
            raise InvalidArgumentError("출금 계좌와 입금 계좌가 같습니다")

        amount = parse_amount(amount)
        amount_minor = to_minor(amount)
        description = optional_text(description, "설명", LedgerLimits.DESCRIPTION_MAX)
        date = ensure_utc(date) if date else now_utc()

        async with self.db.transaction():
            source = await self.store.get_account(owner_id, source_account_id)
            if source is None:
                raise NotFoundError(f"출금 계좌를 찾을 수 없습니다: {source_account_id}")
            target = await self.store.get_account(owner_id, target_account_id)
            if target is None:
                raise NotFoundError(f"입금 계좌를 찾을 수 없습니다: {target_account_id}")

            group_id = new_id("tg")

            source_balance = await self._increment_existing(owner_id, source.account_id, -amount_minor)
            target_balance = await self._increment_existing(owner_id, target.account_id, amount_minor)

            expense = await self.store.insert_transaction(
                owner_id=owner_id,
                account_id=source.account_id,
                amount_minor=amount_minor,
                type=TransactionType.EXPENSE,
                category=LedgerCategories.TRANSFER,
                date=date,
                balance_at=source_balance,
                description=description or f"Transfer to {target.name}",
                transfer_group_id=group_id,
            )
            income = await self.store.insert_transaction(
                owner_id=owner_id,
                account_id=target.account_id,
                amount_minor=amount_minor,
                type=TransactionType.INCOME,
                category=LedgerCategories.TRANSFER,
                date=date,
                balance_at=target_balance,
                description=description or f"Transfer from {source.name}",
                transfer_group_id=group_id,
            )

        logger.info(
            f"Transfer completed: {group_id}",
            extra={
                "owner_id": owner_id,
                "source": source_account_id,
                "target": target_account_id,
                "amount": str(amount),
            },
        )
        return TransferResult(transfer_group_id=group_id, expense=expense, income=income)

    # =====================================
    # 내부 헬퍼
    # =====================================

    async def _increment_existing(
        self,
        owner_id: str,
        account_id: str,
        delta_minor: int,
    ) -> Decimal:
        """존재가 확인된 계좌에 delta 반영 (사라졌으면 NotFound로 롤백)"""
        balance = await self.store.increment_balance(owner_id, account_id, delta_minor)
        if balance is None:
            raise NotFoundError(f"계좌를 찾을 수 없습니다: {account_id}")
        return balance

    async def _remove_with_reversal(
        self,
        owner_id: str,
        transactions: list[Transaction],
        all_for_owner: bool = False,
    ) -> int:
        """계좌별 합산 delta를 계좌당 1회 반영한 뒤 거래를 한 번에 삭제"""
        for account_id, delta in aggregate_reversals(transactions).items():
            if delta == 0:
                continue
            if await self.store.increment_balance(owner_id, account_id, delta) is None:
                logger.warning(
                    f"계좌가 없는 거래 일괄 삭제, 잔액 조정 생략: {account_id}",
                    extra={"owner_id": owner_id},
                )

        if all_for_owner:
            return await self.store.delete_transactions(owner_id)
        return await self.store.delete_transactions(
            owner_id, [tx.transaction_id for tx in transactions]
        )
