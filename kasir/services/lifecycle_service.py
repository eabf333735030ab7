"""
주문 상태 처리 엔진

주문 접수, 상태 변경, 결제 증빙 업로드를 처리한다. 저장소 쓰기가 성공한
뒤에만 알림 허브로 이벤트를 보낸다.
"""
import math
from typing import Any, Dict, List, Optional, Sequence, Tuple

from fastapi import UploadFile
import structlog

from kasir.core.exceptions import ValidationError
from kasir.models.order import Order, OrderItem, utc_isoformat
from kasir.services.file_service import FileStorage
from kasir.services.notification_service import (
    NEW_ORDER, PROOF_UPLOADED, STATUS_UPDATE, NotificationHub,
)
from kasir.services.order_service import AWAITING_CONFIRMATION, AWAITING_PAYMENT, OrderService

logger = structlog.get_logger()

# 결제 전 대기 상태로 시작하는 결제 수단 (TUNAI 는 예전 화면에서 쓰던 현금 표기)
PAY_FIRST_METHODS = {"CASH", "TUNAI", "QRIS"}

# SQLite INTEGER 최대값
MAX_QUANTITY = 2 ** 63 - 1


def initial_status_for(payment_method: Optional[str]) -> str:
    """결제 수단에 따른 초기 상태"""
    if (payment_method or "").strip().upper() in PAY_FIRST_METHODS:
        return AWAITING_PAYMENT
    return AWAITING_CONFIRMATION


def build_items_summary(items: Sequence[Dict[str, Any]]) -> str:
    """품목 요약 문자열 생성 (예: "Sate x2 (pedas), Es Teh x1")"""
    parts = []
    for item in items:
        part = f"{item['name']} x{item['quantity']}"
        if item.get("note"):
            part += f" ({item['note']})"
        parts.append(part)
    return ", ".join(parts)


def new_order_payload(order: Order) -> Dict[str, Any]:
    """new-order 이벤트 페이로드 (품목과 메모는 포함하지 않음)"""
    return {
        "id": order.id,
        "customer_name": order.customer_name,
        "table_number": order.table_number,
        "total_price": order.total_price,
        "payment_method": order.payment_method,
        "status": order.status,
        "created_at": utc_isoformat(order.created_at),
        "items_summary": order.items_summary,
    }


def _is_positive_amount(value: Any) -> bool:
    # NaN 과 Infinity 는 비교 연산을 통과하므로 따로 거른다
    return isinstance(value, (int, float)) and math.isfinite(value) and value > 0


def _validate_submission(customer_name: str, total_price: float, items: Sequence[Dict[str, Any]]) -> None:
    if not customer_name or not customer_name.strip():
        raise ValidationError("Customer name is required")
    if not items:
        raise ValidationError("Order must contain at least one item")
    if not _is_positive_amount(total_price):
        raise ValidationError("Total price must be greater than zero")
    for position, item in enumerate(items, start=1):
        if not str(item.get("name") or "").strip():
            raise ValidationError(f"Item {position} has no name")
        quantity = item.get("quantity")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or not 0 < quantity <= MAX_QUANTITY:
            raise ValidationError(f"Item {position} quantity must be a positive integer")
        if not _is_positive_amount(item.get("price")):
            raise ValidationError(f"Item {position} price must be greater than zero")


class OrderLifecycle:
    def __init__(
        self,
        store: OrderService,
        files: FileStorage,
        hub: NotificationHub,
        allowed_statuses: Optional[Sequence[str]] = None,
    ):
        self.store = store
        self.files = files
        self.hub = hub
        self.allowed_statuses = set(allowed_statuses or ())

    async def submit_order(
        self,
        customer_name: str,
        table_number: Optional[str],
        total_price: float,
        payment_method: str,
        items: Sequence[Dict[str, Any]],
    ) -> Tuple[int, str]:
        """새 주문 접수 후 (주문 ID, 초기 상태) 반환"""
        _validate_submission(customer_name, total_price, items)

        items_summary = build_items_summary(items)
        initial_status = initial_status_for(payment_method)

        order = self.store.create_order(
            customer_name=customer_name.strip(),
            table_number=table_number,
            total_price=total_price,
            payment_method=payment_method,
            initial_status=initial_status,
            items_summary=items_summary,
            items=items,
        )
        logger.info("Order submitted", order_id=order.id, status=initial_status, payment_method=payment_method)

        await self.hub.broadcast(NEW_ORDER, new_order_payload(order))
        return order.id, initial_status

    async def change_status(self, order_id: int, new_status: str) -> None:
        """캐셔의 주문 상태 변경"""
        new_status = (new_status or "").strip()
        if not new_status:
            raise ValidationError("New status must not be empty")
        if self.allowed_statuses and new_status not in self.allowed_statuses | {AWAITING_PAYMENT, AWAITING_CONFIRMATION}:
            raise ValidationError(f"Unknown status: {new_status}")

        self.store.update_status(order_id, new_status)
        logger.info("Order status changed", order_id=order_id, status=new_status)

        await self.hub.broadcast(STATUS_UPDATE, {"orderId": order_id, "newStatus": new_status})

    async def record_payment_proof(self, order_id: int, upload: Optional[UploadFile]) -> str:
        """결제 증빙 저장, 주문에 연결 후 파일 참조 반환

        주문 연결에 실패하면 방금 저장한 파일을 지우고 예외를 그대로 올린다.
        이전 상태와 관계없이 AWAITING_CONFIRMATION 으로 바뀐다.
        """
        if upload is None or not upload.filename:
            raise ValidationError("No file uploaded")

        file_ref = await self.files.save(upload)
        try:
            self.store.attach_payment_proof(order_id, file_ref)
        except Exception:
            logger.warning("Rolling back uploaded proof", order_id=order_id, file_ref=file_ref)
            self.files.delete(file_ref)
            raise

        logger.info("Payment proof attached", order_id=order_id, file_ref=file_ref)
        await self.hub.broadcast(PROOF_UPLOADED, {"orderId": order_id, "fileRef": file_ref})
        await self.hub.broadcast(STATUS_UPDATE, {"orderId": order_id, "newStatus": AWAITING_CONFIRMATION})
        return file_ref

    def list_orders(self) -> List[Order]:
        return self.store.list_orders()

    def get_order(self, order_id: int) -> Order:
        return self.store.get_order(order_id)

    def get_items(self, order_id: int) -> List[OrderItem]:
        return self.store.get_items(order_id)
