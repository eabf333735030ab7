"""
API 공용 의존성
"""
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from kasir.db.database import get_db
from kasir.services.file_service import FileStorage
from kasir.services.lifecycle_service import OrderLifecycle
from kasir.services.notification_service import NotificationHub
from kasir.services.order_service import OrderService


def get_hub(request: Request) -> NotificationHub:
    return request.app.state.hub


def get_files(request: Request) -> FileStorage:
    return request.app.state.files


def get_lifecycle(
    request: Request,
    db: Session = Depends(get_db),
) -> OrderLifecycle:
    """요청 세션으로 주문 처리 엔진 구성"""
    return OrderLifecycle(
        store=OrderService(db),
        files=get_files(request),
        hub=get_hub(request),
        allowed_statuses=request.app.state.settings.ALLOWED_STATUSES,
    )
