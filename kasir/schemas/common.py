"""
공통 스키마 정의
"""
from typing import Optional
from pydantic import BaseModel


class SuccessResponse(BaseModel):
    """성공 응답 스키마"""
    success: bool = True
    message: str = "Operation completed successfully"


class ErrorResponse(BaseModel):
    """오류 응답 스키마"""
    success: bool = False
    message: str
    detail: Optional[str] = None


class LoginRequest(BaseModel):
    """로그인 요청 스키마"""
    username: str = ""
    password: str = ""


class HealthResponse(BaseModel):
    """헬스 체크 응답 스키마"""
    status: str = "healthy"
    version: str
    subscribers: int
