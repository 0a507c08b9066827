"""Domain 5: Module / Page Access Models"""

from sqlalchemy import Column, String, Text, Integer, Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from app.models.base import BaseModel


class Module(BaseModel):
    """Top-level functional area shown in the sidebar (admin, inkwang-es, ...)."""
    __tablename__ = "modules"

    code = Column(String(50), nullable=False, unique=True, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    icon = Column(String(50), nullable=True)
    href = Column(String(255), nullable=False)
    sort_order = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    pages = relationship(
        "ModulePage", back_populates="module", cascade="all, delete-orphan", order_by="ModulePage.sort_order"
    )

    def __repr__(self) -> str:
        return f"<Module {self.code}>"


class ModulePage(BaseModel):
    """Screen inside a module; parent_id groups pages into sidebar sections."""
    __tablename__ = "module_pages"

    module_id = Column(UUID(as_uuid=True), ForeignKey("modules.id", ondelete="CASCADE"), nullable=False, index=True)
    code = Column(String(100), nullable=False)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    href = Column(String(255), nullable=False)
    icon = Column(String(50), nullable=True)
    parent_id = Column(UUID(as_uuid=True), ForeignKey("module_pages.id", ondelete="SET NULL"), nullable=True)
    sort_order = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    __table_args__ = (UniqueConstraint("module_id", "code", name="uq_module_pages_module_code"),)

    module = relationship("Module", back_populates="pages")

    def __repr__(self) -> str:
        return f"<ModulePage {self.code}>"


class UserModuleAccess(BaseModel):
    __tablename__ = "user_module_access"

    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    module_id = Column(UUID(as_uuid=True), ForeignKey("modules.id", ondelete="CASCADE"), nullable=False)
    is_enabled = Column(Boolean, default=False, nullable=False)

    __table_args__ = (UniqueConstraint("user_id", "module_id", name="uq_user_module_access"),)

    user = relationship("User", back_populates="module_access")
    module = relationship("Module")


class UserPageAccess(BaseModel):
    __tablename__ = "user_page_access"

    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    page_id = Column(UUID(as_uuid=True), ForeignKey("module_pages.id", ondelete="CASCADE"), nullable=False)
    is_enabled = Column(Boolean, default=False, nullable=False)

    __table_args__ = (UniqueConstraint("user_id", "page_id", name="uq_user_page_access"),)

    user = relationship("User", back_populates="page_access")
    page = relationship("ModulePage")
