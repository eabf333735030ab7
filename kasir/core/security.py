"""
캐셔 전용 API 접근 제어

로그인은 고정 자격증명 비교일 뿐이며, 로그인 후 클라이언트가 보내는
헤더(기본값 ``X-Logged-In: true``)로 캐셔 전용 엔드포인트를 구분한다.
"""
import secrets

from fastapi import HTTPException, Request, status
import structlog

from kasir.core.config import Settings

logger = structlog.get_logger()


def check_credentials(settings: Settings, username: str, password: str) -> bool:
    """캐셔 자격증명 검증"""
    user_ok = secrets.compare_digest(username.encode(), settings.CASHIER_USERNAME.encode())
    pass_ok = secrets.compare_digest(password.encode(), settings.CASHIER_PASSWORD.encode())
    return user_ok and pass_ok


def is_authenticated(request: Request) -> bool:
    """요청 헤더에서 로그인 표시 확인"""
    settings: Settings = request.app.state.settings
    return request.headers.get(settings.AUTH_HEADER) == settings.AUTH_HEADER_VALUE


def require_login(request: Request) -> bool:
    """인증이 필요한 엔드포인트에서 사용하는 의존성"""
    if not is_authenticated(request):
        logger.warning("Unauthenticated access", path=request.url.path)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
    return True
