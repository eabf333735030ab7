"""
주문 모델
"""
from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Text, Float, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from .base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def utc_isoformat(value: datetime) -> str:
    """UTC 로 저장된 시각을 시간대가 붙은 ISO-8601 문자열로 변환"""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    customer_name = Column(String, nullable=False)
    table_number = Column(String)
    total_price = Column(Float, nullable=False)
    payment_method = Column(String)
    status = Column(String, nullable=False)
    created_at = Column(DateTime, nullable=False, default=_utcnow, index=True)
    payment_proof_ref = Column(String)
    items_summary = Column(Text)

    # 주문 단위 메모 컬럼은 없음. 메모는 품목별로만 저장한다.
    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="OrderItem.id",
    )

    def __repr__(self):
        return f"<Order(id={self.id}, customer_name='{self.customer_name}', status='{self.status}')>"


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    item_name = Column(String, nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Float, nullable=False)
    note = Column(Text, default="")

    order = relationship("Order", back_populates="items")

    def __repr__(self):
        return f"<OrderItem(id={self.id}, order_id={self.order_id}, item_name='{self.item_name}', quantity={self.quantity})>"
