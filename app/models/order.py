"""Domain 3: Sales Order (Contract) Models"""

from sqlalchemy import (
    Column, String, Text, Date, Integer, Numeric, ForeignKey, CheckConstraint,
)
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import relationship

from app.models.base import BaseModel, AuditMixin, pg_enum
from app.models.enums import (
    ContractType, ContractStatus, BusinessType, PricingType, PricingUnit, ExportType,
)


class Pollutant(BaseModel):
    """Reference list: soil/water pollutants a remediation contract targets."""
    __tablename__ = "pollutants"

    name = Column(String(100), nullable=False, unique=True)
    category = Column(String(50), nullable=True)
    unit = Column(String(20), nullable=True)
    sort_order = Column(Integer, default=0, nullable=False)


class Method(BaseModel):
    """Reference list: remediation methods."""
    __tablename__ = "methods"

    name = Column(String(100), nullable=False, unique=True)
    description = Column(Text, nullable=True)
    sort_order = Column(Integer, default=0, nullable=False)


class Order(BaseModel, AuditMixin):
    """
    Sales contract. A `change` order amends the `new` order referenced by
    parent_order_id; a `new` order has no parent.
    """
    __tablename__ = "orders"

    order_number = Column(String(20), nullable=False, unique=True, index=True)
    contract_type = Column(pg_enum(ContractType, "contract_type"), default=ContractType.NEW, nullable=False, index=True)
    contract_status = Column(
        pg_enum(ContractStatus, "contract_status"), default=ContractStatus.QUOTATION, nullable=False, index=True
    )
    business_type = Column(pg_enum(BusinessType, "business_type"), default=BusinessType.CIVILIAN, nullable=False)
    pricing_type = Column(pg_enum(PricingType, "pricing_type"), default=PricingType.TOTAL, nullable=False)
    contract_unit = Column(pg_enum(PricingUnit, "pricing_unit"), nullable=True)

    contract_name = Column(String(500), nullable=False)
    contract_date = Column(Date, nullable=False, index=True)
    contract_amount = Column(Numeric(14, 2), default=0, nullable=False)

    customer_id = Column(UUID(as_uuid=True), ForeignKey("customers.id", ondelete="RESTRICT"), nullable=False, index=True)
    verification_company_id = Column(
        UUID(as_uuid=True), ForeignKey("customers.id", ondelete="SET NULL"), nullable=True
    )
    manager_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    parent_order_id = Column(
        UUID(as_uuid=True), ForeignKey("orders.id", ondelete="RESTRICT"), nullable=True, index=True
    )

    export_type = Column(pg_enum(ExportType, "export_type"), default=ExportType.ON_SITE, nullable=False)
    notes = Column(Text, nullable=True)
    # [{name, path, size, uploaded_at}]
    attachments = Column(JSONB, default=list, nullable=False)

    __table_args__ = (
        CheckConstraint("contract_amount >= 0", name="ck_orders_contract_amount_nonneg"),
        CheckConstraint("parent_order_id IS NULL OR parent_order_id <> id", name="ck_orders_not_own_parent"),
    )

    # Relationships
    customer = relationship("Customer", foreign_keys=[customer_id])
    verification_company = relationship("Customer", foreign_keys=[verification_company_id])
    manager = relationship("User", foreign_keys=[manager_id])
    parent_order = relationship("Order", remote_side="Order.id", back_populates="change_orders")
    change_orders = relationship("Order", back_populates="parent_order")
    pollutants = relationship("OrderPollutant", back_populates="order", cascade="all, delete-orphan")
    methods = relationship("OrderMethod", back_populates="order", cascade="all, delete-orphan")
    billings = relationship("Billing", back_populates="order")

    def __repr__(self) -> str:
        return f"<Order {self.order_number} ({self.contract_type})>"


class OrderPollutant(BaseModel):
    __tablename__ = "order_pollutants"

    order_id = Column(UUID(as_uuid=True), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    pollutant_id = Column(UUID(as_uuid=True), ForeignKey("pollutants.id", ondelete="RESTRICT"), nullable=False)
    concentration = Column(Numeric(14, 4), default=0, nullable=False)
    group_name = Column(String(100), nullable=True)

    order = relationship("Order", back_populates="pollutants")
    pollutant = relationship("Pollutant")


class OrderMethod(BaseModel):
    __tablename__ = "order_methods"

    order_id = Column(UUID(as_uuid=True), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    method_id = Column(UUID(as_uuid=True), ForeignKey("methods.id", ondelete="RESTRICT"), nullable=False)

    order = relationship("Order", back_populates="methods")
    method = relationship("Method")
