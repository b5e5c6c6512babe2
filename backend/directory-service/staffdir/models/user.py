from sqlalchemy import BigInteger, Column, DateTime, Integer, String, func

from staffdir.core.db import Base


class User(Base):
    """대시보드 로그인 계정."""

    __tablename__ = "users"

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    username = Column(String(120), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(60), nullable=False, default="admin", server_default="admin")
    created_at = Column(
        DateTime,
        server_default=func.now(),
        nullable=False,
    )
    updated_at = Column(
        DateTime,
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
