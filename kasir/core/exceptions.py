"""
주문 처리 예외 정의
"""
from typing import Optional


class KasirError(Exception):
    """모든 도메인 예외의 기반 클래스"""

    status_code = 500

    def __init__(self, message: str, cause: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class ValidationError(KasirError):
    """잘못되거나 누락된 입력"""

    status_code = 400


class NotFound(KasirError):
    """존재하지 않는 주문"""

    status_code = 404


class StorageError(KasirError):
    """데이터베이스 저장 실패"""


class UploadError(KasirError):
    """업로드 파일 쓰기 실패"""
