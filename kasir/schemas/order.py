"""
주문 관련 스키마
"""
from typing import List, Optional
from datetime import datetime
from pydantic import AliasChoices, BaseModel, Field, field_serializer, field_validator

from kasir.models.order import utc_isoformat


class CartItem(BaseModel):
    """주문 품목 입력 스키마"""
    name: str = Field(..., description="품목명")
    quantity: int = Field(..., description="수량")
    price: float = Field(..., allow_inf_nan=False, description="단가")
    note: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("note", "notes"),
        description="품목별 메모",
    )


class OrderSubmit(BaseModel):
    """주문 접수 스키마 (고객 화면)

    값 검증은 주문 처리 엔진에서 수행하므로 여기서는 형식만 맞춘다.
    """
    customer_name: str = Field("", validation_alias=AliasChoices("customerName", "customer_name"))
    table_number: Optional[str] = Field(None, validation_alias=AliasChoices("tableNumber", "table_number"))
    total_price: float = Field(0, allow_inf_nan=False, validation_alias=AliasChoices("totalPrice", "total_price"))
    payment_method: str = Field("", validation_alias=AliasChoices("paymentMethod", "payment_method"))
    items: List[CartItem] = Field(default_factory=list, validation_alias=AliasChoices("items", "cart"))

    @field_validator("table_number", mode="before")
    @classmethod
    def _table_number_as_text(cls, value):
        # 고객 화면은 테이블 번호를 숫자로 보내기도 한다
        if isinstance(value, (int, float)):
            return str(value)
        return value


class OrderSubmitResponse(BaseModel):
    """주문 접수 응답 스키마"""
    message: str = "Order created"
    orderId: int = Field(..., description="생성된 주문 ID")
    initialStatus: str = Field(..., description="초기 주문 상태")


class StatusUpdate(BaseModel):
    """주문 상태 변경 스키마"""
    newStatus: str = Field("", description="새로운 주문 상태")


class ProofUploadResponse(BaseModel):
    """결제 증빙 업로드 응답 스키마"""
    message: str = "Payment proof uploaded"
    filePath: str = Field(..., description="저장된 파일 경로")


class OrderItemResponse(BaseModel):
    """주문 품목 응답 스키마"""
    item_name: str
    quantity: int
    unit_price: float
    note: Optional[str] = None

    class Config:
        from_attributes = True


class OrderResponse(BaseModel):
    """주문 응답 스키마"""
    id: int = Field(..., description="주문 ID")
    customer_name: str = Field(..., description="고객 이름")
    table_number: Optional[str] = Field(None, description="테이블 번호")
    total_price: float = Field(..., description="총 금액")
    payment_method: Optional[str] = Field(None, description="결제 수단")
    status: str = Field(..., description="주문 상태")
    created_at: datetime = Field(..., description="생성 일시")
    payment_proof_ref: Optional[str] = Field(None, description="결제 증빙 파일 경로")
    items_summary: Optional[str] = Field(None, description="품목 요약")

    @field_serializer("created_at")
    def _created_at_as_utc(self, value: datetime) -> str:
        # 실시간 이벤트와 같은 형식으로 보낸다
        return utc_isoformat(value)

    class Config:
        from_attributes = True


class OrderWithItemsResponse(OrderResponse):
    """품목 포함 주문 응답 스키마"""
    items: List[OrderItemResponse] = Field(default_factory=list)
