"""Domain 4: Billing, Collection and Receivable Activity Models"""

from sqlalchemy import Column, String, Text, Date, Numeric, ForeignKey, CheckConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from app.models.base import BaseModel, AuditMixin, pg_enum
from app.models.enums import (
    BillingType, InvoiceStatus, CollectionMethod, ReceivableClassification,
)


class Billing(BaseModel, AuditMixin):
    """
    Claim against a customer for part of a `new` order's value.

    A receivable is derived from a billing and its collections; the only
    receivable state stored here is the manual write-off classification.
    """
    __tablename__ = "billings"

    billing_number = Column(String(20), nullable=False, unique=True, index=True)
    billing_date = Column(Date, nullable=False, index=True)
    order_id = Column(UUID(as_uuid=True), ForeignKey("orders.id", ondelete="RESTRICT"), nullable=False, index=True)
    customer_id = Column(UUID(as_uuid=True), ForeignKey("customers.id", ondelete="RESTRICT"), nullable=False, index=True)
    billing_type = Column(pg_enum(BillingType, "billing_type"), nullable=False)
    billing_amount = Column(Numeric(14, 2), nullable=False)
    expected_payment_date = Column(Date, nullable=False)
    invoice_status = Column(
        pg_enum(InvoiceStatus, "invoice_status"), default=InvoiceStatus.NOT_ISSUED, nullable=False
    )
    notes = Column(Text, nullable=True)

    # Manual receivable state (대손처리)
    receivable_classification = Column(pg_enum(ReceivableClassification, "receivable_classification"), nullable=True)
    receivable_notes = Column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint("billing_amount > 0", name="ck_billings_amount_positive"),
    )

    order = relationship("Order", back_populates="billings")
    customer = relationship("Customer")
    collections = relationship("Collection", back_populates="billing", order_by="Collection.collection_date")
    activities = relationship("ReceivableActivity", back_populates="billing", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<Billing {self.billing_number} {self.billing_amount}>"


class Collection(BaseModel):
    """Payment applied against a billing; several may settle one billing."""
    __tablename__ = "collections"

    billing_id = Column(UUID(as_uuid=True), ForeignKey("billings.id", ondelete="RESTRICT"), nullable=False, index=True)
    collection_date = Column(Date, nullable=False, index=True)
    collection_amount = Column(Numeric(14, 2), nullable=False)
    collection_method = Column(
        pg_enum(CollectionMethod, "collection_method"), default=CollectionMethod.BANK_TRANSFER, nullable=False
    )
    bank_account_id = Column(UUID(as_uuid=True), ForeignKey("bank_accounts.id", ondelete="SET NULL"), nullable=True)
    # Snapshot so history survives bank account edits
    bank_name = Column(String(100), nullable=True)
    account_number = Column(String(50), nullable=True)
    depositor = Column(String(100), nullable=True)
    notes = Column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint("collection_amount > 0", name="ck_collections_amount_positive"),
    )

    billing = relationship("Billing", back_populates="collections")
    bank_account = relationship("BankAccount")

    def __repr__(self) -> str:
        return f"<Collection {self.collection_amount} on {self.collection_date}>"


class ReceivableActivity(BaseModel):
    """Logged collection effort (call, visit, notice) against a receivable."""
    __tablename__ = "receivable_activities"

    billing_id = Column(UUID(as_uuid=True), ForeignKey("billings.id", ondelete="CASCADE"), nullable=False, index=True)
    activity_date = Column(Date, nullable=False)
    activity_content = Column(Text, nullable=False)
    created_by = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    billing = relationship("Billing", back_populates="activities")
    author = relationship("User")
