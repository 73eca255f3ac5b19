"""
SQLite 어댑터

WAL 모드로 SQLite 연결 관리.
Web 요청과 스크립트가 동시에 접근 가능하도록 설정.

주의: 잔액은 minor unit 정수 컬럼(balance_minor)으로 저장 (원자적 증감용)
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator

import aiosqlite

from core.constants import Paths
from core.errors import StoreFailureError
from core.types import AppMode

logger = logging.getLogger(__name__)


def get_db_path(mode: AppMode | str) -> Path:
    """모드에 따른 DB 경로 반환

    Args:
        mode: 실행 모드 (PRODUCTION/DEVELOPMENT)

    Returns:
        DB 파일 경로 (Path 타입)
    """
    if isinstance(mode, str):
        mode = AppMode(mode.lower())

    if mode == AppMode.PRODUCTION:
        return Paths.PROD_DB
    return Paths.DEV_DB


async def create_connection(db_path: Path | str) -> aiosqlite.Connection:
    """SQLite 연결 생성 (WAL 모드)

    Args:
        db_path: DB 파일 경로 (":memory:" 허용)

    Returns:
        aiosqlite 연결 객체
    """
    db_path_str = str(db_path)

    # 디렉토리가 없으면 생성
    if db_path_str != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = await aiosqlite.connect(db_path_str)

    # WAL 모드 설정
    await conn.execute("PRAGMA journal_mode=WAL")

    # 동시 접근 설정 (저장소 요청 타임아웃)
    await conn.execute("PRAGMA busy_timeout=30000")  # 30초 대기

    logger.info("SQLite 연결 생성", extra={"db_path": db_path_str})

    return conn


class SQLiteAdapter:
    """SQLite 어댑터

    WAL 모드로 SQLite 연결 관리.
    트랜잭션 컨텍스트 매니저 제공.

    하나의 연결을 여러 코루틴이 공유할 수 있으므로 transaction()은
    asyncio.Lock으로 쓰기 작업을 직렬화한다. 중첩 호출은 지원하지 않는다.

    Args:
        db_path: DB 파일 경로

    사용 예시:
    ```python
    adapter = SQLiteAdapter(db_path)
    await adapter.connect()

    async with adapter.transaction():
        await adapter.execute("INSERT INTO ...")

    await adapter.close()
    ```
    """

    def __init__(self, db_path: Path | str):
        self.db_path = db_path if str(db_path) == ":memory:" else Path(db_path)
        self._conn: aiosqlite.Connection | None = None
        self._write_lock = asyncio.Lock()

    @property
    def is_connected(self) -> bool:
        """연결 상태 확인"""
        return self._conn is not None

    async def connect(self) -> None:
        """연결 생성"""
        if self._conn is not None:
            return

        self._conn = await create_connection(self.db_path)

    async def close(self) -> None:
        """연결 종료"""
        if self._conn is not None:
            await self._conn.close()
            self._conn = None
            logger.info("SQLite 연결 종료")

    async def execute(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> aiosqlite.Cursor:
        """SQL 실행"""
        if self._conn is None:
            raise RuntimeError("Not connected to database")

        if parameters:
            return await self._conn.execute(sql, parameters)
        return await self._conn.execute(sql)

    async def fetchone(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> tuple[Any, ...] | None:
        """단일 행 조회"""
        cursor = await self.execute(sql, parameters)
        return await cursor.fetchone()

    async def fetchall(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> list[tuple[Any, ...]]:
        """전체 행 조회 (UPDATE ... RETURNING 포함)"""
        cursor = await self.execute(sql, parameters)
        return list(await cursor.fetchall())

    async def fetchone_dict(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> dict[str, Any] | None:
        """단일 행을 컬럼명 dict로 조회"""
        cursor = await self.execute(sql, parameters)
        row = await cursor.fetchone()
        if not row:
            return None
        columns = [desc[0] for desc in cursor.description]
        return dict(zip(columns, row))

    async def fetchall_dict(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> list[dict[str, Any]]:
        """전체 행을 컬럼명 dict 목록으로 조회"""
        cursor = await self.execute(sql, parameters)
        rows = await cursor.fetchall()
        columns = [desc[0] for desc in cursor.description]
        return [dict(zip(columns, row)) for row in rows]

    async def commit(self) -> None:
        """커밋"""
        if self._conn is not None:
            await self._conn.commit()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """트랜잭션 컨텍스트 매니저

        BEGIN IMMEDIATE로 쓰기 락을 먼저 잡고, 성공 시 자동 커밋,
        예외 시 자동 롤백. DB 예외는 StoreFailureError로 감싸서 전달.

        사용 예시:
        ```python
        async with adapter.transaction():
            await adapter.execute("INSERT INTO ...")
            # 성공 시 자동 커밋
        ```
        """
        if self._conn is None:
            raise RuntimeError("Not connected to database")

        async with self._write_lock:
            try:
                if not self._conn.in_transaction:
                    await self._conn.execute("BEGIN IMMEDIATE")
                yield self._conn
                await self._conn.commit()
            except aiosqlite.Error as e:
                await self._conn.rollback()
                logger.error(f"DB 트랜잭션 실패, 롤백: {e}")
                raise StoreFailureError(f"저장소 오류: {e}") from e
            except BaseException:
                await self._conn.rollback()
                raise

    async def table_exists(self, table_name: str) -> bool:
        """테이블 존재 여부 확인"""
        result = await self.fetchone(
            "SELECT name FROM sqlite_master WHERE type='table' AND name=?",
            (table_name,),
        )
        return result is not None

    async def get_table_info(self, table_name: str) -> list[dict[str, Any]]:
        """테이블 정보 조회"""
        rows = await self.fetchall(f"PRAGMA table_info({table_name})")

        columns = []
        for row in rows:
            columns.append({
                "cid": row[0],
                "name": row[1],
                "type": row[2],
                "notnull": bool(row[3]),
                "default_value": row[4],
                "pk": bool(row[5]),
            })

        return columns

    # -------------------------------------------------------------------------
    # 컨텍스트 매니저
    # -------------------------------------------------------------------------

    async def __aenter__(self) -> "SQLiteAdapter":
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()


async def init_schema(adapter: SQLiteAdapter) -> None:
    """스키마 초기화 (테이블 생성)

    CREATE IF NOT EXISTS 패턴이라 Web 시작 시마다 호출해도 안전.

    Args:
        adapter: 연결된 SQLiteAdapter
    """
    # accounts (Vault)
    await adapter.execute("""
        CREATE TABLE IF NOT EXISTS accounts (
            account_id       TEXT PRIMARY KEY,
            owner_id         TEXT NOT NULL,
            name             TEXT NOT NULL,
            type             TEXT NOT NULL,
            balance_minor    INTEGER NOT NULL DEFAULT 0,

            color            TEXT,
            card_number      TEXT,
            card_holder      TEXT,
            client_ref       TEXT,

            created_at       TEXT NOT NULL,
            updated_at       TEXT NOT NULL
        )
    """)

    # transactions
    await adapter.execute("""
        CREATE TABLE IF NOT EXISTS transactions (
            transaction_id     TEXT PRIMARY KEY,
            owner_id           TEXT NOT NULL,
            account_id         TEXT NOT NULL,
            amount_minor       INTEGER NOT NULL CHECK (amount_minor > 0),
            type               TEXT NOT NULL CHECK (type IN ('income', 'expense')),
            category           TEXT NOT NULL,
            description        TEXT,
            date               TEXT NOT NULL,
            balance_at_minor   INTEGER NOT NULL,

            transfer_group_id  TEXT,
            client_ref         TEXT,

            created_at         TEXT NOT NULL,
            updated_at         TEXT NOT NULL
        )
    """)

    # account_types
    await adapter.execute("""
        CREATE TABLE IF NOT EXISTS account_types (
            account_type_id  TEXT PRIMARY KEY,
            owner_id         TEXT NOT NULL,
            label            TEXT NOT NULL,
            theme            TEXT NOT NULL,
            created_at       TEXT NOT NULL,

            UNIQUE(owner_id, label)
        )
    """)

    # 인덱스 생성
    await adapter.execute("""
        CREATE INDEX IF NOT EXISTS ix_accounts_owner_created
        ON accounts(owner_id, created_at)
    """)

    await adapter.execute("""
        CREATE INDEX IF NOT EXISTS ix_transactions_owner_date
        ON transactions(owner_id, date DESC)
    """)

    await adapter.execute("""
        CREATE INDEX IF NOT EXISTS ix_transactions_account
        ON transactions(account_id, date DESC)
    """)

    await adapter.execute("""
        CREATE INDEX IF NOT EXISTS ix_transactions_transfer_group
        ON transactions(transfer_group_id)
    """)

    await adapter.execute("""
        CREATE INDEX IF NOT EXISTS ix_transactions_client_ref
        ON transactions(owner_id, client_ref)
    """)

    await adapter.commit()

    logger.info("스키마 초기화 완료")
