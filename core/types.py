"""
타입 정의 모듈

앱 전역에서 쓰는 Enum 정의
모든 Enum은 str을 상속하여 문자열 직렬화 가능
"""

from enum import Enum


class AppMode(str, Enum):
    """실행 모드 (운영 / 개발)"""

    PRODUCTION = "production"
    DEVELOPMENT = "development"


class TransactionType(str, Enum):
    """거래 유형"""

    INCOME = "income"  # 수입 (+amount)
    EXPENSE = "expense"  # 지출 (-amount)


class AccountTheme(str, Enum):
    """계좌 유형 색상 테마"""

    BLUE = "blue"
    EMERALD = "emerald"
    ORANGE = "orange"
    PURPLE = "purple"
    ROSE = "rose"
    SLATE = "slate"
    INDIGO = "indigo"
