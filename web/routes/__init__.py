"""
API 라우트 패키지

각 기능별 라우터 모듈:
- health: 헬스 체크
- accounts: 계좌 CRUD / 중복 정리
- account_types: 계좌 유형
- transactions: 거래 생성/수정/삭제
- transfer: 계좌 간 이체
- finance: 전체 조회, sync, 기본 데이터, 초기화, 정합성 점검
"""
