"""
인증 관련 API 엔드포인트
"""
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
import structlog

from kasir.core.security import check_credentials
from kasir.schemas.common import LoginRequest, SuccessResponse

logger = structlog.get_logger()

router = APIRouter()


@router.post("/login", response_model=SuccessResponse)
async def login(credentials: LoginRequest, request: Request):
    """캐셔 로그인 API

    세션을 만들지 않는다. 성공하면 클라이언트가 이후 요청에 로그인 헤더를 붙인다.
    """
    username = credentials.username.strip()
    if check_credentials(request.app.state.settings, username, credentials.password):
        logger.info("Cashier login succeeded", username=username)
        return SuccessResponse(message="Login successful")

    logger.warning("Cashier login failed", username=username or None)
    return JSONResponse(
        status_code=401,
        content={"success": False, "message": "Invalid username or password"},
    )
