"""
애플리케이션 설정 관리
"""
from typing import List
from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """애플리케이션 설정"""

    # 애플리케이션 정보
    APP_NAME: str = "Warung Kasir API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # 서버 설정
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    CORS_ORIGINS: List[str] = ["*"]

    # 실시간 알림 설정 (구독자 한 명당 전송 제한 시간, 초)
    HUB_SEND_TIMEOUT: float = 5.0

    # 데이터베이스 설정
    DATABASE_URL: str = Field(
        default="sqlite:///./database.db",
        description="Database URL"
    )

    # 결제 증빙 업로드 설정
    UPLOAD_DIR: str = Field(default="./public/uploads", description="업로드 파일 저장 경로")
    UPLOAD_URL_PREFIX: str = Field(default="/uploads", description="업로드 파일 공개 경로")

    # 캐셔 로그인 설정
    CASHIER_USERNAME: str = "pakkasir"
    CASHIER_PASSWORD: str = "change-me"
    AUTH_HEADER: str = "X-Logged-In"
    AUTH_HEADER_VALUE: str = "true"

    # 비어 있으면 상태 값을 제한하지 않음
    ALLOWED_STATUSES: List[str] = Field(default_factory=list)

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


# 전역 설정 인스턴스
settings = Settings()
