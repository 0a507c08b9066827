"""Domain 1: Employee (User) Model"""

from sqlalchemy import Column, String, Boolean, Date
from sqlalchemy.orm import relationship

from app.models.base import BaseModel, pg_enum
from app.models.enums import UserRole, EmploymentStatus


class User(BaseModel):
    """
    Employee account. Doubles as the identity used for authentication,
    order/billing managers and module access flags.
    """
    __tablename__ = "users"

    # Authentication
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)

    # Personal Information
    name = Column(String(100), nullable=False)
    phone = Column(String(30), nullable=True)
    department = Column(String(100), nullable=True)
    position = Column(String(100), nullable=True)
    hire_date = Column(Date, nullable=True)

    # Role & Status
    role = Column(pg_enum(UserRole, "user_role"), default=UserRole.USER, nullable=False, index=True)
    employment_status = Column(
        pg_enum(EmploymentStatus, "employment_status"),
        default=EmploymentStatus.ACTIVE,
        nullable=False,
        index=True,
    )
    is_active = Column(Boolean, default=True, nullable=False, index=True)

    # Relationships
    module_access = relationship("UserModuleAccess", back_populates="user", cascade="all, delete-orphan")
    page_access = relationship("UserPageAccess", back_populates="user", cascade="all, delete-orphan")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_manager_or_admin(self) -> bool:
        return self.role in (UserRole.ADMIN, UserRole.MANAGER)

    def __repr__(self) -> str:
        return f"<User {self.email} ({self.role})>"
