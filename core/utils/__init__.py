"""
유틸리티 패키지

금액 변환, 타임존 처리 등 공통 유틸리티
"""

from core.utils.money import (
    from_minor,
    parse_amount,
    signed_minor,
    to_minor,
)
from core.utils.timezone import (
    ensure_utc,
    now_utc,
    to_db_ts,
)

__all__ = [
    "from_minor",
    "parse_amount",
    "signed_minor",
    "to_minor",
    "ensure_utc",
    "now_utc",
    "to_db_ts",
]
