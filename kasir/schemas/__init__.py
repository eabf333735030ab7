# Pydantic 스키마 패키지
from .order import (
    CartItem, OrderSubmit, OrderSubmitResponse, StatusUpdate, ProofUploadResponse,
    OrderItemResponse, OrderResponse, OrderWithItemsResponse,
)
from .common import SuccessResponse, ErrorResponse, LoginRequest, HealthResponse

__all__ = [
    "CartItem", "OrderSubmit", "OrderSubmitResponse", "StatusUpdate", "ProofUploadResponse",
    "OrderItemResponse", "OrderResponse", "OrderWithItemsResponse",
    "SuccessResponse", "ErrorResponse", "LoginRequest", "HealthResponse",
]
