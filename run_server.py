"""
FastAPI 서버 실행 스크립트
"""
import uvicorn
from kasir.core.config import settings

if __name__ == "__main__":
    print(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    print(f"Database: {settings.DATABASE_URL}")
    print(f"Uploads: {settings.UPLOAD_DIR}")
    print(f"Server will be available at: http://{settings.HOST}:{settings.PORT}")
    print("Press Ctrl+C to stop the server")

    uvicorn.run(
        "kasir.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info"
    )
