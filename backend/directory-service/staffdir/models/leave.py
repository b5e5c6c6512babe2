from sqlalchemy import (
    BigInteger,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    UniqueConstraint,
    func,
)

from staffdir.core.db import Base


class LeaveEntry(Base):
    """
    휴가 원장: (직원, 날짜) 한 쌍당 한 행.
    employees.status 보다 이 테이블이 우선(정답)이다.
    """

    __tablename__ = "leave_entries"
    __table_args__ = (
        UniqueConstraint("employee_id", "leave_date", name="uq_leave_entries_employee_date"),
    )

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    employee_id = Column(
        BigInteger().with_variant(Integer, "sqlite"),
        ForeignKey("employees.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    leave_date = Column(Date, nullable=False, index=True)
    created_at = Column(
        DateTime,
        server_default=func.now(),
        nullable=False,
    )
