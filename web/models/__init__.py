"""
Web 모델 패키지

Pydantic 스키마 정의
"""

from web.models.requests import (
    AccountCreateRequest,
    AccountTypeCreateRequest,
    AccountUpdateRequest,
    BulkDeleteRequest,
    SeedRequest,
    SyncRequest,
    TransactionCreateRequest,
    TransactionUpdateRequest,
    TransferRequest,
)
from web.models.responses import (
    AccountDeleteResponse,
    AccountResponse,
    AccountTypeResponse,
    CleanupResponse,
    DataResponse,
    DeleteResponse,
    HealthResponse,
    ReconcileResponse,
    ResetResponse,
    SeedResponse,
    SyncResponse,
    TransactionResponse,
    TransferResponse,
)

__all__ = [
    # Requests
    "AccountCreateRequest",
    "AccountUpdateRequest",
    "AccountTypeCreateRequest",
    "TransactionCreateRequest",
    "TransactionUpdateRequest",
    "BulkDeleteRequest",
    "TransferRequest",
    "SyncRequest",
    "SeedRequest",
    # Responses
    "HealthResponse",
    "AccountResponse",
    "AccountDeleteResponse",
    "AccountTypeResponse",
    "TransactionResponse",
    "TransferResponse",
    "DataResponse",
    "DeleteResponse",
    "CleanupResponse",
    "SyncResponse",
    "SeedResponse",
    "ResetResponse",
    "ReconcileResponse",
]
