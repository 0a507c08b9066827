"""Domain 2: Customer Model"""

from sqlalchemy import Column, String, Integer, Text

from app.models.base import BaseModel, pg_enum
from app.models.enums import CustomerType, CustomerStatus


class Customer(BaseModel):
    """
    Client (발주처) or verification company (검증업체).
    Orders reference both kinds; billings reference the client.
    """
    __tablename__ = "customers"

    name = Column(String(255), nullable=False, index=True)
    customer_type = Column(pg_enum(CustomerType, "customer_type"), nullable=False, index=True)
    status = Column(pg_enum(CustomerStatus, "customer_status"), default=CustomerStatus.ACTIVE, nullable=False)
    business_number = Column(String(12), nullable=True)
    representative_name = Column(String(100), nullable=True)
    manager_name = Column(String(100), nullable=True)
    phone = Column(String(30), nullable=True)
    email = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)
    sort_order = Column(Integer, default=0, nullable=False)

    def __repr__(self) -> str:
        return f"<Customer {self.name} ({self.customer_type})>"
