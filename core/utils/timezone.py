"""
타임존 유틸리티

내부 저장은 UTC ISO 문자열 원칙. (owner_id, date) 인덱스 정렬이
문자열 비교로 맞으려면 모든 시각이 같은 오프셋이어야 한다.
"""

from datetime import datetime, timezone


def now_utc() -> datetime:
    """현재 UTC 시각"""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """datetime을 UTC로 정규화

    Args:
        dt: datetime 객체 (naive면 UTC로 간주)

    Returns:
        UTC 타임존의 datetime

    Example:
        >>> ensure_utc(datetime(2026, 1, 2, 3, 4, 5)).isoformat()
        '2026-01-02T03:04:05+00:00'
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_db_ts(dt: datetime) -> str:
    """DB 저장용 ISO 문자열 (UTC, 마이크로초 고정 자리수)"""
    return ensure_utc(dt).isoformat(timespec="microseconds")
