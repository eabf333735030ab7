"""
데이터베이스 연결 관리
"""
from typing import Generator

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
import structlog

from kasir.models import Base

logger = structlog.get_logger()


class Database:
    """엔진과 세션 팩토리를 보유하는 저장소 핸들

    애플리케이션 시작 시 생성하고 종료 시 ``dispose()`` 로 닫는다.
    """

    def __init__(self, url: str):
        self.url = url
        connect_args = {}
        if url.startswith("sqlite"):
            connect_args["check_same_thread"] = False

        self.engine: Engine = create_engine(url, connect_args=connect_args)
        if url.startswith("sqlite"):
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)

        self.session_factory = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)

    def create_tables(self) -> None:
        """테이블 생성"""
        Base.metadata.create_all(bind=self.engine)
        logger.info("Database tables ready", database_url=self.url)

    def session(self) -> Session:
        return self.session_factory()

    def dispose(self) -> None:
        """연결 풀 정리"""
        self.engine.dispose()
        logger.info("Database connection closed")


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_db(request: Request) -> Generator[Session, None, None]:
    """요청 단위 DB 세션 의존성"""
    database: Database = request.app.state.database
    db = database.session()
    try:
        yield db
    finally:
        db.close()
