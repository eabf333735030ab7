# SQLAlchemy 모델 패키지
from .base import Base
from .order import Order, OrderItem

__all__ = ["Base", "Order", "OrderItem"]
