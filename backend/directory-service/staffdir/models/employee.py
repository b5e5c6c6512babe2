import enum

from sqlalchemy import (
    BigInteger,
    Column,
    Date,
    DateTime,
    Integer,
    String,
    UniqueConstraint,
    func,
)

from staffdir.core.db import Base


class EmployeeStatus(str, enum.Enum):
    """
    employees.status 값.
    leave_entries(원장)에서 언제든 다시 계산할 수 있는 캐시 컬럼이다.
    """

    ACTIVE = "Active"
    ON_LEAVE = "On Leave"


class Employee(Base):
    __tablename__ = "employees"
    __table_args__ = (
        # 같은 부서 안에서만 이름 중복 금지
        UniqueConstraint("department", "name", name="uq_employees_department_name"),
    )

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, index=True, autoincrement=True)
    name = Column(String(120), nullable=False)
    department = Column(String(100), nullable=False, index=True)
    status = Column(
        String(20),
        nullable=False,
        default=EmployeeStatus.ACTIVE.value,
        server_default=EmployeeStatus.ACTIVE.value,
        index=True,
    )
    birthday = Column(Date, nullable=True)
    address = Column(String(255), nullable=True)
    age = Column(Integer, nullable=True)
    gender = Column(String(20), nullable=True)
    phone = Column(String(30), nullable=True)
    hire_date = Column(Date, nullable=True)
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
