"""
Ledger 저장소

계좌 / 거래 / 계좌 유형의 소유자 범위 CRUD와 원자적 잔액 증감
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any

import aiosqlite

from core.errors import ConflictError
from core.ledger.models import Account, AccountTypeRecord, Transaction
from core.types import AccountTheme, TransactionType
from core.utils.money import from_minor, signed_minor, to_minor
from core.utils.timezone import now_utc, to_db_ts

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


# 표시용 필드만 직접 수정 가능 (balance는 Balance Engine 전용)
ACCOUNT_EDITABLE_FIELDS = ("name", "type", "color", "card_number", "card_holder")

_ACCOUNT_COLUMNS = """
    account_id, owner_id, name, type, balance_minor,
    color, card_number, card_holder, client_ref, created_at, updated_at
"""

_TRANSACTION_COLUMNS = """
    transaction_id, owner_id, account_id, amount_minor, type, category,
    description, date, balance_at_minor, transfer_group_id, client_ref,
    created_at, updated_at
"""


def new_id(prefix: str) -> str:
    """접두사 붙은 레코드 ID 생성 (예: acc-1a2b3c...)"""
    return f"{prefix}-{uuid.uuid4().hex[:16]}"


class LedgerStore:
    """Ledger 저장소

    모든 조회/쓰기는 owner_id로 필터링된다.
    쓰기 메서드는 커밋하지 않으며, 호출자가 db.transaction()으로 감싼다.

    Args:
        db: SQLite 어댑터
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    # =====================================
    # 계좌 (accounts)
    # =====================================

    async def insert_account(
        self,
        owner_id: str,
        name: str,
        type: str,
        color: str | None = None,
        card_number: str | None = None,
        card_holder: str | None = None,
        client_ref: str | None = None,
        created_at: datetime | None = None,
    ) -> Account:
        """계좌 생성 (잔액 0으로 시작)"""
        account_id = new_id("acc")
        ts = to_db_ts(created_at or now_utc())

        await self.db.execute(
            """
            INSERT INTO accounts (
                account_id, owner_id, name, type, balance_minor,
                color, card_number, card_holder, client_ref,
                created_at, updated_at
            ) VALUES (?, ?, ?, ?, 0, ?, ?, ?, ?, ?, ?)
            """,
            (
                account_id,
                owner_id,
                name,
                type,
                color,
                card_number,
                card_holder,
                client_ref,
                ts,
                ts,
            ),
        )

        logger.debug(f"Account inserted: {account_id}")
        return await self.get_account(owner_id, account_id)  # type: ignore

    async def get_account(self, owner_id: str, account_id: str) -> Account | None:
        """계좌 단건 조회"""
        row = await self.db.fetchone_dict(
            f"SELECT {_ACCOUNT_COLUMNS} FROM accounts WHERE account_id = ? AND owner_id = ?",
            (account_id, owner_id),
        )
        return Account.from_row(row) if row else None

    async def list_accounts(self, owner_id: str) -> list[Account]:
        """소유자의 전체 계좌 (생성 순, 동시각이면 삽입 순)"""
        rows = await self.db.fetchall_dict(
            f"""
            SELECT {_ACCOUNT_COLUMNS} FROM accounts
            WHERE owner_id = ?
            ORDER BY created_at ASC, rowid ASC
            """,
            (owner_id,),
        )
        return [Account.from_row(row) for row in rows]

    async def find_account_by_name(self, owner_id: str, name: str) -> Account | None:
        """이름이 정확히 일치하는 가장 오래된 계좌"""
        row = await self.db.fetchone_dict(
            f"""
            SELECT {_ACCOUNT_COLUMNS} FROM accounts
            WHERE owner_id = ? AND name = ?
            ORDER BY created_at ASC, rowid ASC
            LIMIT 1
            """,
            (owner_id, name),
        )
        return Account.from_row(row) if row else None

    async def find_account_by_client_ref(
        self,
        owner_id: str,
        client_ref: str,
    ) -> Account | None:
        """client_ref로 계좌 조회"""
        row = await self.db.fetchone_dict(
            f"""
            SELECT {_ACCOUNT_COLUMNS} FROM accounts
            WHERE owner_id = ? AND client_ref = ?
            ORDER BY created_at ASC, rowid ASC
            LIMIT 1
            """,
            (owner_id, client_ref),
        )
        return Account.from_row(row) if row else None

    async def update_account_fields(
        self,
        owner_id: str,
        account_id: str,
        fields: dict[str, Any],
    ) -> Account | None:
        """표시용 필드 수정

        Args:
            fields: ACCOUNT_EDITABLE_FIELDS 또는 client_ref만 허용

        Returns:
            수정된 계좌 (없으면 None)
        """
        allowed = set(ACCOUNT_EDITABLE_FIELDS) | {"client_ref"}
        unknown = set(fields) - allowed
        if unknown:
            raise ValueError(f"수정할 수 없는 계좌 필드: {sorted(unknown)}")

        if fields:
            assignments = ", ".join(f"{name} = ?" for name in fields)
            params: list[Any] = list(fields.values())
            params.extend([to_db_ts(now_utc()), account_id, owner_id])
            await self.db.execute(
                f"""
                UPDATE accounts SET {assignments}, updated_at = ?
                WHERE account_id = ? AND owner_id = ?
                """,
                tuple(params),
            )

        return await self.get_account(owner_id, account_id)

    async def increment_balance(
        self,
        owner_id: str,
        account_id: str,
        delta_minor: int,
    ) -> Decimal | None:
        """잔액 원자적 증감

        읽고-계산하고-쓰기 대신 단일 UPDATE로 delta를 더한다.

        Args:
            delta_minor: 부호 있는 증감액 (minor unit)

        Returns:
            증감 후 잔액 (계좌가 없으면 None)
        """
        rows = await self.db.fetchall(
            """
            UPDATE accounts
            SET balance_minor = balance_minor + ?, updated_at = ?
            WHERE account_id = ? AND owner_id = ?
            RETURNING balance_minor
            """,
            (delta_minor, to_db_ts(now_utc()), account_id, owner_id),
        )
        if not rows:
            return None
        return from_minor(rows[0][0])

    async def delete_account(self, owner_id: str, account_id: str) -> bool:
        """계좌 삭제 (거래는 건드리지 않음)"""
        cursor = await self.db.execute(
            "DELETE FROM accounts WHERE account_id = ? AND owner_id = ?",
            (account_id, owner_id),
        )
        return cursor.rowcount > 0

    async def delete_accounts_for_owner(self, owner_id: str) -> int:
        """소유자의 전체 계좌 삭제"""
        cursor = await self.db.execute(
            "DELETE FROM accounts WHERE owner_id = ?",
            (owner_id,),
        )
        return cursor.rowcount

    # =====================================
    # 거래 (transactions)
    # =====================================

    async def insert_transaction(
        self,
        owner_id: str,
        account_id: str,
        amount_minor: int,
        type: TransactionType,
        category: str,
        date: datetime,
        balance_at: Decimal,
        description: str | None = None,
        transfer_group_id: str | None = None,
        client_ref: str | None = None,
    ) -> Transaction:
        """거래 레코드 삽입 (잔액은 건드리지 않음)"""
        transaction_id = new_id("tx")
        now = to_db_ts(now_utc())

        await self.db.execute(
            """
            INSERT INTO transactions (
                transaction_id, owner_id, account_id, amount_minor, type,
                category, description, date, balance_at_minor,
                transfer_group_id, client_ref, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                transaction_id,
                owner_id,
                account_id,
                amount_minor,
                TransactionType(type).value,
                category,
                description,
                to_db_ts(date),
                to_minor(balance_at),
                transfer_group_id,
                client_ref,
                now,
                now,
            ),
        )

        return await self.get_transaction(owner_id, transaction_id)  # type: ignore

    async def insert_transaction_with_increment(
        self,
        owner_id: str,
        account_id: str,
        amount_minor: int,
        type: TransactionType,
        category: str,
        date: datetime,
        description: str | None = None,
        client_ref: str | None = None,
    ) -> Transaction | None:
        """잔액 직접 증감 후 거래 삽입 (sync/import 경로)

        Balance Engine의 생성 프로토콜(소유권 확인 등)을 거치지 않는다.

        Returns:
            삽입된 거래 (계좌가 없으면 None)
        """
        delta = signed_minor(type, amount_minor)
        balance_at = await self.increment_balance(owner_id, account_id, delta)
        if balance_at is None:
            return None

        return await self.insert_transaction(
            owner_id=owner_id,
            account_id=account_id,
            amount_minor=amount_minor,
            type=type,
            category=category,
            date=date,
            balance_at=balance_at,
            description=description,
            client_ref=client_ref,
        )

    async def get_transaction(
        self,
        owner_id: str,
        transaction_id: str,
    ) -> Transaction | None:
        """거래 단건 조회"""
        row = await self.db.fetchone_dict(
            f"""
            SELECT {_TRANSACTION_COLUMNS} FROM transactions
            WHERE transaction_id = ? AND owner_id = ?
            """,
            (transaction_id, owner_id),
        )
        return Transaction.from_row(row) if row else None

    async def list_transactions(
        self,
        owner_id: str,
        account_id: str | None = None,
        tx_type: TransactionType | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Transaction]:
        """거래 목록 (최신 날짜 순)

        Args:
            account_id: 계좌 필터 (선택)
            tx_type: 거래 유형 필터 (선택)
            limit: 조회 개수 제한 (None이면 전체)
            offset: 시작 위치
        """
        sql = f"SELECT {_TRANSACTION_COLUMNS} FROM transactions WHERE owner_id = ?"
        params: list[Any] = [owner_id]

        if account_id:
            sql += " AND account_id = ?"
            params.append(account_id)

        if tx_type:
            sql += " AND type = ?"
            params.append(TransactionType(tx_type).value)

        sql += " ORDER BY date DESC, rowid DESC"

        if limit is not None:
            sql += " LIMIT ? OFFSET ?"
            params.extend([limit, offset])

        rows = await self.db.fetchall_dict(sql, tuple(params))
        return [Transaction.from_row(row) for row in rows]

    async def find_transactions(
        self,
        owner_id: str,
        transaction_ids: list[str] | None = None,
    ) -> list[Transaction]:
        """ID 목록(또는 전체)에 해당하는 거래를 한 번에 조회

        Args:
            transaction_ids: 거래 ID 목록 (None이면 소유자의 전체 거래)
        """
        if transaction_ids is None:
            return await self.list_transactions(owner_id)

        if not transaction_ids:
            return []

        placeholders = ", ".join("?" for _ in transaction_ids)
        rows = await self.db.fetchall_dict(
            f"""
            SELECT {_TRANSACTION_COLUMNS} FROM transactions
            WHERE owner_id = ? AND transaction_id IN ({placeholders})
            """,
            (owner_id, *transaction_ids),
        )
        return [Transaction.from_row(row) for row in rows]

    async def save_transaction(self, tx: Transaction) -> None:
        """거래 레코드의 변경 가능한 필드 저장"""
        await self.db.execute(
            """
            UPDATE transactions SET
                account_id = ?, amount_minor = ?, type = ?, category = ?,
                description = ?, date = ?, balance_at_minor = ?, updated_at = ?
            WHERE transaction_id = ? AND owner_id = ?
            """,
            (
                tx.account_id,
                to_minor(tx.amount),
                tx.type.value,
                tx.category,
                tx.description,
                to_db_ts(tx.date),
                to_minor(tx.balance_at),
                to_db_ts(now_utc()),
                tx.transaction_id,
                tx.owner_id,
            ),
        )

    async def delete_transaction(self, owner_id: str, transaction_id: str) -> bool:
        """거래 단건 삭제"""
        cursor = await self.db.execute(
            "DELETE FROM transactions WHERE transaction_id = ? AND owner_id = ?",
            (transaction_id, owner_id),
        )
        return cursor.rowcount > 0

    async def delete_transactions(
        self,
        owner_id: str,
        transaction_ids: list[str] | None = None,
    ) -> int:
        """거래 일괄 삭제 (ids가 None이면 소유자의 전체 거래)"""
        if transaction_ids is None:
            cursor = await self.db.execute(
                "DELETE FROM transactions WHERE owner_id = ?",
                (owner_id,),
            )
            return cursor.rowcount

        if not transaction_ids:
            return 0

        placeholders = ", ".join("?" for _ in transaction_ids)
        cursor = await self.db.execute(
            f"""
            DELETE FROM transactions
            WHERE owner_id = ? AND transaction_id IN ({placeholders})
            """,
            (owner_id, *transaction_ids),
        )
        return cursor.rowcount

    async def delete_transactions_for_account(
        self,
        owner_id: str,
        account_id: str,
    ) -> int:
        """계좌에 속한 거래 전체 삭제 (cascade)"""
        cursor = await self.db.execute(
            "DELETE FROM transactions WHERE owner_id = ? AND account_id = ?",
            (owner_id, account_id),
        )
        return cursor.rowcount

    async def transaction_client_ref_exists(self, owner_id: str, client_ref: str) -> bool:
        """해당 client_ref로 이미 가져온 거래가 있는지"""
        row = await self.db.fetchone(
            "SELECT 1 FROM transactions WHERE owner_id = ? AND client_ref = ? LIMIT 1",
            (owner_id, client_ref),
        )
        return row is not None

    # =====================================
    # 정합성 점검용 집계
    # =====================================

    async def get_signed_sums(self, owner_id: str) -> dict[str, int]:
        """계좌별 거래 부호 합 (minor unit)"""
        rows = await self.db.fetchall(
            """
            SELECT
                account_id,
                SUM(CASE WHEN type = 'income' THEN amount_minor ELSE -amount_minor END)
            FROM transactions
            WHERE owner_id = ?
            GROUP BY account_id
            """,
            (owner_id,),
        )
        return {row[0]: int(row[1]) for row in rows}

    async def get_transfer_groups(self, owner_id: str) -> list[dict[str, Any]]:
        """이체 그룹별 거래 수 / 수입 수 / 지출 수"""
        return await self.db.fetchall_dict(
            """
            SELECT
                transfer_group_id,
                COUNT(*) AS tx_total,
                SUM(CASE WHEN type = 'income' THEN 1 ELSE 0 END) AS income_total,
                SUM(CASE WHEN type = 'expense' THEN 1 ELSE 0 END) AS expense_total
            FROM transactions
            WHERE owner_id = ? AND transfer_group_id IS NOT NULL
            GROUP BY transfer_group_id
            ORDER BY transfer_group_id
            """,
            (owner_id,),
        )

    async def delete_orphan_transactions(self, owner_id: str) -> int:
        """계좌가 사라진 거래 삭제"""
        cursor = await self.db.execute(
            """
            DELETE FROM transactions
            WHERE owner_id = ?
              AND account_id NOT IN (
                  SELECT account_id FROM accounts WHERE owner_id = ?
              )
            """,
            (owner_id, owner_id),
        )
        return cursor.rowcount

    # =====================================
    # 계좌 유형 (account_types)
    # =====================================

    async def insert_account_type(
        self,
        owner_id: str,
        label: str,
        theme: AccountTheme,
    ) -> AccountTypeRecord:
        """계좌 유형 생성

        Raises:
            ConflictError: 같은 소유자에 동일 label이 이미 있는 경우
        """
        account_type_id = new_id("at")
        try:
            await self.db.execute(
                """
                INSERT INTO account_types (account_type_id, owner_id, label, theme, created_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    account_type_id,
                    owner_id,
                    label,
                    AccountTheme(theme).value,
                    to_db_ts(now_utc()),
                ),
            )
        except aiosqlite.IntegrityError as e:
            raise ConflictError(f"이미 존재하는 계좌 유형입니다: {label}") from e

        return AccountTypeRecord(
            account_type_id=account_type_id,
            owner_id=owner_id,
            label=label,
            theme=AccountTheme(theme),
        )

    async def list_account_types(self, owner_id: str) -> list[AccountTypeRecord]:
        """계좌 유형 목록"""
        rows = await self.db.fetchall_dict(
            """
            SELECT account_type_id, owner_id, label, theme, created_at
            FROM account_types
            WHERE owner_id = ?
            ORDER BY created_at ASC, rowid ASC
            """,
            (owner_id,),
        )
        return [AccountTypeRecord.from_row(row) for row in rows]

    async def account_type_label_exists(self, owner_id: str, label: str) -> bool:
        row = await self.db.fetchone(
            "SELECT 1 FROM account_types WHERE owner_id = ? AND label = ?",
            (owner_id, label),
        )
        return row is not None

    async def delete_account_type(self, owner_id: str, account_type_id: str) -> bool:
        """계좌 유형 삭제"""
        cursor = await self.db.execute(
            "DELETE FROM account_types WHERE account_type_id = ? AND owner_id = ?",
            (account_type_id, owner_id),
        )
        return cursor.rowcount > 0
