"""
API v1 라우터 메인
"""
from fastapi import APIRouter

from kasir.api.v1.endpoints import auth, orders, realtime

api_router = APIRouter()

# 각 엔드포인트 라우터 등록
api_router.include_router(auth.router, tags=["authentication"])
api_router.include_router(orders.router, tags=["orders"])
api_router.include_router(realtime.router, tags=["realtime"])
