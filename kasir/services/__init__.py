# 서비스 패키지
from .order_service import OrderService, AWAITING_PAYMENT, AWAITING_CONFIRMATION
from .file_service import FileStorage
from .notification_service import NotificationHub
from .lifecycle_service import OrderLifecycle

__all__ = [
    "OrderService", "AWAITING_PAYMENT", "AWAITING_CONFIRMATION",
    "FileStorage", "NotificationHub", "OrderLifecycle",
]
