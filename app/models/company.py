"""Domain 1b: Company and Bank Account Models"""

from sqlalchemy import Column, String, Integer, Numeric, ForeignKey, CheckConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from app.models.base import BaseModel


class Company(BaseModel):
    """Group company that owns bank accounts."""
    __tablename__ = "companies"

    name = Column(String(255), nullable=False, unique=True)
    business_number = Column(String(12), nullable=True)
    sort_order = Column(Integer, default=0, nullable=False)

    bank_accounts = relationship("BankAccount", back_populates="company", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<Company {self.name}>"


class BankAccount(BaseModel):
    """Deposit account that collections can be booked against."""
    __tablename__ = "bank_accounts"

    company_id = Column(UUID(as_uuid=True), ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True)
    bank_name = Column(String(100), nullable=False)
    account_number = Column(String(50), nullable=False)
    initial_balance = Column(Numeric(15, 2), default=0, nullable=False)
    current_balance = Column(Numeric(15, 2), default=0, nullable=False)

    __table_args__ = (
        CheckConstraint("initial_balance >= 0", name="ck_bank_accounts_initial_nonneg"),
        CheckConstraint("current_balance >= 0", name="ck_bank_accounts_current_nonneg"),
    )

    company = relationship("Company", back_populates="bank_accounts")

    def __repr__(self) -> str:
        return f"<BankAccount {self.bank_name} {self.account_number}>"
