"""
주문 저장소 서비스 로직
"""
import math
from typing import Dict, List, Optional, Sequence
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import set_committed_value
import structlog

from kasir.core.exceptions import NotFound, StorageError, ValidationError
from kasir.models.order import Order, OrderItem

logger = structlog.get_logger()

AWAITING_PAYMENT = "AWAITING_PAYMENT"
AWAITING_CONFIRMATION = "AWAITING_CONFIRMATION"


class OrderService:
    def __init__(self, db: Session):
        self.db = db

    def create_order(
        self,
        customer_name: str,
        table_number: Optional[str],
        total_price: float,
        payment_method: str,
        initial_status: str,
        items_summary: str,
        items: Sequence[Dict],
    ) -> Order:
        """주문과 품목을 한 트랜잭션으로 생성"""
        if not customer_name or not customer_name.strip():
            raise ValidationError("Customer name is required")
        if not items:
            raise ValidationError("Order must contain at least one item")
        if total_price is None or not math.isfinite(total_price) or total_price <= 0:
            raise ValidationError("Total price must be greater than zero")

        db_order = Order(
            customer_name=customer_name,
            table_number=table_number,
            total_price=total_price,
            payment_method=payment_method,
            status=initial_status,
            items_summary=items_summary,
        )
        db_order.items = [
            OrderItem(
                item_name=item.get('name'),
                quantity=item.get('quantity'),
                unit_price=item.get('price'),
                note=item.get('note') or '',
            )
            for item in items
        ]

        try:
            self.db.add(db_order)
            self.db.commit()
        except (SQLAlchemyError, OverflowError) as e:
            self.db.rollback()
            logger.error("Failed to insert order", customer_name=customer_name, error=str(e))
            raise StorageError("Failed to create order", cause=str(e)) from e

        logger.info("Order stored", order_id=db_order.id, item_count=len(items))
        return db_order

    def list_orders(self) -> List[Order]:
        """모든 주문을 최신순으로 조회하고 품목을 붙여서 반환"""
        try:
            orders = self.db.query(Order).order_by(Order.created_at.desc(), Order.id.desc()).all()
        except SQLAlchemyError as e:
            logger.error("Failed to fetch orders", error=str(e))
            raise StorageError("Failed to fetch orders", cause=str(e)) from e

        # 모든 품목 조회가 끝난 뒤에 결과를 조립한다. 한 주문의 조회 실패는 그 주문만 빈 목록으로 처리.
        item_lists = []
        for order_id in [order.id for order in orders]:
            try:
                item_lists.append(self.get_items(order_id))
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error("Failed to fetch order items", order_id=order_id, error=str(e))
                item_lists.append([])

        for order, items in zip(orders, item_lists):
            set_committed_value(order, "items", items)
        return orders

    def get_order(self, order_id: int) -> Order:
        """주문 ID로 주문 조회"""
        try:
            db_order = self.db.get(Order, order_id)
        except SQLAlchemyError as e:
            logger.error("Failed to fetch order", order_id=order_id, error=str(e))
            raise StorageError("Failed to fetch order", cause=str(e)) from e
        if db_order is None:
            raise NotFound("Order not found")
        return db_order

    def get_items(self, order_id: int) -> List[OrderItem]:
        """주문 품목 조회 (없으면 빈 목록)"""
        return self.db.query(OrderItem).filter(
            OrderItem.order_id == order_id
        ).order_by(OrderItem.id).all()

    def update_status(self, order_id: int, status: str) -> int:
        """주문 상태 업데이트"""
        return self._update(order_id, {Order.status: status})

    def attach_payment_proof(self, order_id: int, file_ref: str) -> int:
        """결제 증빙 경로 저장 및 확인 대기 상태로 전환"""
        return self._update(order_id, {
            Order.payment_proof_ref: file_ref,
            Order.status: AWAITING_CONFIRMATION,
        })

    def _update(self, order_id: int, values: Dict) -> int:
        # 단일 UPDATE 문으로 처리해서 같은 주문에 대한 동시 변경도 원자적으로 덮어쓴다
        try:
            affected = self.db.query(Order).filter(Order.id == order_id).update(values)
            if affected == 0:
                self.db.rollback()
                raise NotFound("Order not found")
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Failed to update order", order_id=order_id, error=str(e))
            raise StorageError("Failed to update order", cause=str(e)) from e

        # 세션에 남아 있는 주문 객체가 이전 값을 들고 있지 않도록 만료시킨다
        self.db.expire_all()
        return affected
