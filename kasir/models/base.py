"""
SQLAlchemy Base 모델
"""
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """SQLAlchemy Base 클래스"""
    pass
