"""
주문 관련 API 엔드포인트
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
import structlog

from kasir.api.deps import get_lifecycle
from kasir.core.exceptions import KasirError
from kasir.core.security import require_login
from kasir.schemas.common import SuccessResponse
from kasir.schemas.order import (
    OrderItemResponse, OrderResponse, OrderSubmit, OrderSubmitResponse,
    OrderWithItemsResponse, ProofUploadResponse, StatusUpdate,
)
from kasir.services.lifecycle_service import OrderLifecycle

logger = structlog.get_logger()

router = APIRouter()


@router.post("/submit-order", response_model=OrderSubmitResponse, status_code=status.HTTP_201_CREATED)
async def submit_order(
    order: OrderSubmit,
    lifecycle: OrderLifecycle = Depends(get_lifecycle),
):
    """새 주문 접수 (고객용, 인증 불필요)"""
    logger.info("Submit order request", customer_name=order.customer_name, item_count=len(order.items))

    try:
        order_id, initial_status = await lifecycle.submit_order(
            customer_name=order.customer_name,
            table_number=order.table_number,
            total_price=order.total_price,
            payment_method=order.payment_method,
            items=[item.model_dump() for item in order.items],
        )
        return OrderSubmitResponse(orderId=order_id, initialStatus=initial_status)

    except KasirError:
        raise
    except Exception as e:
        logger.error("Failed to submit order", error=str(e))
        raise HTTPException(status_code=500, detail="Failed to create order")


@router.get("/orders", response_model=List[OrderWithItemsResponse], dependencies=[Depends(require_login)])
async def get_orders(lifecycle: OrderLifecycle = Depends(get_lifecycle)):
    """주문 목록 조회 (최신순, 품목 포함)"""
    logger.info("Get orders request")

    try:
        return lifecycle.list_orders()
    except KasirError:
        raise
    except Exception as e:
        logger.error("Failed to get orders", error=str(e))
        raise HTTPException(status_code=500, detail="Failed to fetch orders")


@router.get("/order/{order_id}", response_model=OrderResponse, dependencies=[Depends(require_login)])
async def get_order(order_id: int, lifecycle: OrderLifecycle = Depends(get_lifecycle)):
    """특정 주문 상세 조회"""
    logger.info("Get order detail", order_id=order_id)

    try:
        return lifecycle.get_order(order_id)
    except KasirError:
        raise
    except Exception as e:
        logger.error("Failed to get order detail", order_id=order_id, error=str(e))
        raise HTTPException(status_code=500, detail="Failed to fetch order")


@router.get("/order-items/{order_id}", response_model=List[OrderItemResponse], dependencies=[Depends(require_login)])
async def get_order_items(order_id: int, lifecycle: OrderLifecycle = Depends(get_lifecycle)):
    """주문 품목 조회"""
    logger.info("Get order items", order_id=order_id)

    try:
        return lifecycle.get_items(order_id)
    except Exception as e:
        logger.error("Failed to get order items", order_id=order_id, error=str(e))
        raise HTTPException(status_code=500, detail="Failed to fetch order items")


@router.post("/update-status/{order_id}", response_model=SuccessResponse, dependencies=[Depends(require_login)])
async def update_order_status(
    order_id: int,
    body: StatusUpdate,
    lifecycle: OrderLifecycle = Depends(get_lifecycle),
):
    """주문 상태 업데이트 (캐셔 전용)"""
    logger.info("Update order status", order_id=order_id, status=body.newStatus)

    try:
        await lifecycle.change_status(order_id, body.newStatus)
        return SuccessResponse(message="Order status updated")
    except KasirError:
        raise
    except Exception as e:
        logger.error("Failed to update order status", order_id=order_id, error=str(e))
        raise HTTPException(status_code=500, detail="Failed to update order status")


@router.post("/upload-qris-proof/{order_id}", response_model=ProofUploadResponse)
async def upload_payment_proof(
    order_id: int,
    qrisImage: Optional[UploadFile] = File(None),
    lifecycle: OrderLifecycle = Depends(get_lifecycle),
):
    """결제 증빙 업로드 (고객용, 인증 불필요)"""
    logger.info("Upload payment proof", order_id=order_id, filename=qrisImage.filename if qrisImage else None)

    try:
        file_ref = await lifecycle.record_payment_proof(order_id, qrisImage)
        return ProofUploadResponse(filePath=file_ref)
    except KasirError:
        raise
    except Exception as e:
        logger.error("Failed to upload payment proof", order_id=order_id, error=str(e))
        raise HTTPException(status_code=500, detail="Failed to save payment proof")
