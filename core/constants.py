"""
하드코딩 상수 - 변경될 일이 거의 없는 고정값

중요: 경로는 반드시 pathlib.Path 사용 (Windows/Linux 크로스 플랫폼)
"""

from decimal import Decimal
from pathlib import Path


# 프로젝트 루트 (이 파일 기준 2단계 상위: core/constants.py → vaultbook/)
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent


class Defaults:
    """기본값 상수"""

    WEB_HOST: str = "127.0.0.1"
    WEB_PORT: int = 8000

    # 거래 목록 조회 기본 페이지 크기
    PAGE_LIMIT: int = 100


class Paths:
    """프로젝트 경로 상수 (pathlib 사용 - OS 독립적)"""

    # 디렉토리
    CONFIG_DIR: Path = PROJECT_ROOT / "config"
    DATA_DIR: Path = PROJECT_ROOT / "data"
    LOGS_DIR: Path = PROJECT_ROOT / "logs"

    # 설정 파일
    SETTINGS_FILE: Path = CONFIG_DIR / "settings.yaml"

    # DB 파일
    PROD_DB: Path = DATA_DIR / "vaultbook_prod.db"
    DEV_DB: Path = DATA_DIR / "vaultbook_dev.db"


class LedgerLimits:
    """입력 길이 제한"""

    ACCOUNT_NAME_MAX: int = 50
    CATEGORY_MAX: int = 50
    DESCRIPTION_MAX: int = 200
    ACCOUNT_TYPE_LABEL_MAX: int = 30


class LedgerCategories:
    """엔진이 자동 생성하는 거래의 카테고리"""

    TRANSFER: str = "Transfer"
    OPENING_BALANCE: str = "Opening Balance"


# 금액 스케일 (소수점 2자리, DB에는 minor unit 정수로 저장)
MONEY_SCALE: int = 2
MONEY_QUANT: Decimal = Decimal("0.01")

# 거래 1건 금액 상한 (minor unit), 잔액 합산이 SQLite INTEGER(64bit) 범위 안에 머물도록
MAX_AMOUNT_MINOR: int = 10 ** 15


# 가입 시 생성되는 기본 계좌 유형 (label, theme)
DEFAULT_ACCOUNT_TYPES: list[tuple[str, str]] = [
    ("Family", "indigo"),
    ("Salary", "emerald"),
    ("Current", "blue"),
    ("Savings", "orange"),
]

# 가입 시 생성되는 기본 Vault (name, type, card_number, color)
DEFAULT_ACCOUNTS: list[tuple[str, str, str, str]] = [
    ("Family Vault", "Family", "**** **** **** 1001", "indigo"),
    ("Salary Account", "Salary", "**** **** **** 2002", "emerald"),
    ("Current Account", "Current", "**** **** **** 3003", "blue"),
    ("Savings Goal", "Savings", "**** **** **** 4004", "orange"),
]
