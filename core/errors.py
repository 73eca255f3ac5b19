"""
Ledger 예외 정의

Balance Engine / Ledger Store가 호출자에게 전달하는 오류 종류.
Web 계층은 이 예외들을 HTTP 상태 코드로 매핑한다.
"""


class LedgerError(Exception):
    """Ledger 예외 기본 클래스"""

    pass


class NotFoundError(LedgerError):
    """참조한 계좌/거래가 없거나 소유자가 다름"""

    pass


class InvalidArgumentError(LedgerError):
    """잘못된 입력 (금액, 동일 계좌 이체, 빈 ID 목록 등)"""

    pass


class ConflictError(LedgerError):
    """중복 (계좌 유형 label 중복)"""

    pass


class StoreFailureError(LedgerError):
    """저장소 오류 (하위 DB 예외를 감싸서 전달)"""

    pass
